"""Turn a message's content blocks into Markdown text."""

from .models import ArtifactBlock, ContentBlock, Message, TextBlock

DEFAULT_ARTIFACT_TITLE = "Artifact"


def format_artifact(block: ArtifactBlock) -> str:
    """Render an artifact as a bold title followed by a fenced code block."""
    title = block.title or DEFAULT_ARTIFACT_TITLE
    language = block.language or ""
    return f"\n**{title}**\n\n```{language}\n{block.content}\n```\n"


def extract_text(content: list[ContentBlock] | None) -> str:
    """Render content blocks in order, separated by blank lines.

    Text blocks are kept as-is, artifacts become fenced code blocks and
    every other block is skipped.
    """
    if not content:
        return ""

    parts = []
    for block in content:
        if isinstance(block, TextBlock) and block.text:
            parts.append(block.text)
        elif isinstance(block, ArtifactBlock):
            parts.append(format_artifact(block))

    return "\n\n".join(parts)


def message_text(message: Message) -> str:
    """Text to show for a message, falling back to the legacy ``text`` field."""
    return extract_text(message.content) or message.text or ""

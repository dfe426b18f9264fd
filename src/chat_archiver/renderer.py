"""Render a single conversation as a Markdown archive document."""

from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path

from .attachments import extract_attachments
from .config import CONVERSATION_URL_BASE, MODEL_LABEL
from .extractor import message_text
from .formatting import (
    UNKNOWN,
    format_date_with_day,
    format_local_time,
    format_short_date,
    format_size_kb,
    parse_timestamp,
    sanitize_title,
    utc_now,
)
from .models import AttachmentRef, Conversation, Message, OutputDocument
from .storage import DiskFileSystem, FileSystem

UNKNOWN_DATE = "unknown-date"
HUMAN_ICON = "👤"
ASSISTANT_ICON = "🤖"

FOOTER_DISCLAIMER = (
    "*This conversation was exported from Claude.ai and converted to Markdown for archival purposes. "
    "Time zones reflect the system settings where this archive was created and may differ from "
    "where the original conversation occurred. Refer to UTC times for precision.*"
)


def conversation_title(conversation: Conversation, index: int) -> str:
    return conversation.title or f"Conversation_{index + 1}"


def base_filename(conversation: Conversation, title: str) -> str:
    """``<created>_<SanitizedTitle>_<updated>`` without extension."""
    created = (
        format_short_date(conversation.created_at)
        if parse_timestamp(conversation.created_at)
        else UNKNOWN_DATE
    )
    updated = (
        format_short_date(conversation.updated_at)
        if parse_timestamp(conversation.updated_at)
        else created
    )
    return f"{created}_{sanitize_title(title)}_{updated}"


def resolve_base_filename(
    base: str,
    output_dir: Path,
    fs: FileSystem,
    now: Callable[[], datetime],
) -> str:
    """Add a ``T<HHMM>`` suffix when ``<base>.md`` already exists.

    The suffixed name is not probed again, so two same-named conversations
    converted within the same minute still share a file.
    """
    if fs.exists(Path(output_dir) / f"{base}.md"):
        stamp = now().astimezone(timezone.utc)
        return f"{base}T{stamp:%H%M}"
    return base


def render_message(message: Message, number: int, attachments: list[AttachmentRef]) -> str:
    icon = HUMAN_ICON if message.is_human else ASSISTANT_ICON
    sender = "Human" if message.is_human else "Assistant"

    lines = [f"# {icon} {sender} [^{number}]\n\n"]
    lines.append(f"{message_text(message)}\n\n")

    owned = [ref for ref in attachments if ref.message_index == number]
    if owned:
        lines.append("**Attachments:**\n")
        for ref in owned:
            size = format_size_kb(ref.file_size)
            entry = f"- [{ref.original_name}]({ref.relative_path})"
            lines.append(f"{entry} {size}\n" if size else f"{entry}\n")
        lines.append("\n")

    lines.append(f"[^{number}]: *{format_local_time(message.created_at)}, Message {number}*\n\n")
    return "".join(lines)


def render_header(conversation: Conversation, title: str, generated_at: datetime) -> str:
    conversation_id = conversation.id or UNKNOWN
    return (
        "Title: Archived AI conversation\n"
        f'Conversation name: "{title}"\n'
        f"Conversation began: {format_date_with_day(conversation.created_at)}\n"
        f"Conversation last updated: {format_date_with_day(conversation.updated_at)}\n"
        f"Conversation URL: {CONVERSATION_URL_BASE}{conversation_id}\n"
        f"Conversation ID: {conversation_id}\n"
        f"Total messages in conversation: {len(conversation.messages)}\n"
        f"AI model: {MODEL_LABEL}\n"
        f"Archive file creation date: {format_date_with_day(generated_at)}\n\n"
    )


def render_footer(attachment_count: int) -> str:
    footer = f"---\n\n**End of Conversation**\n\n{FOOTER_DISCLAIMER}\n\n"
    if attachment_count:
        footer += (
            f"*Note: This conversation includes {attachment_count} attachment(s) in the companion folder. "
            "Keep the markdown file and attachment folder together when moving or sharing this archive.*\n"
        )
    return footer


def render_conversation(
    conversation: Conversation,
    index: int,
    output_dir: Path,
    fs: FileSystem | None = None,
    now: Callable[[], datetime] = utc_now,
) -> OutputDocument:
    """Build the Markdown document for one conversation.

    Attachments are written as a side effect, into a folder named after the
    document, so the filename is settled before anything else happens.
    """
    fs = fs or DiskFileSystem()
    title = conversation_title(conversation, index)
    base = resolve_base_filename(base_filename(conversation, title), output_dir, fs, now)

    attachments = extract_attachments(conversation, base, output_dir, fs)

    parts = [render_header(conversation, title, now()), "---\n\n"]
    if conversation.messages:
        for number, message in enumerate(conversation.messages, start=1):
            parts.append(render_message(message, number, attachments))
    else:
        parts.append("*No messages found in this conversation.*\n\n")
    parts.append(render_footer(len(attachments)))

    return OutputDocument(
        content="".join(parts),
        filename=f"{base}.md",
        attachment_count=len(attachments),
    )

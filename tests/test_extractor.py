"""Tests for rendering message content blocks."""

from chat_archiver.extractor import extract_text, message_text
from chat_archiver.models import ArtifactBlock, Message, TextBlock, UnknownBlock
from chat_archiver.parser import parse_message


class TestExtractText:
    def test_artifact_rendering(self):
        block = ArtifactBlock(content="console.log(1)", language="javascript", title="Demo")
        assert extract_text([block]) == "\n**Demo**\n\n```javascript\nconsole.log(1)\n```\n"

    def test_artifact_defaults(self):
        text = extract_text([ArtifactBlock(content="x = 1")])
        assert "**Artifact**" in text
        assert "```\nx = 1\n```" in text

    def test_blocks_joined_in_order(self):
        blocks = [TextBlock("first"), UnknownBlock("tool_result"), TextBlock("second")]
        assert extract_text(blocks) == "first\n\nsecond"

    def test_empty_text_blocks_skipped(self):
        assert extract_text([TextBlock(""), TextBlock("only")]) == "only"

    def test_missing_content(self):
        assert extract_text(None) == ""
        assert extract_text([]) == ""


class TestMessageText:
    def test_falls_back_to_legacy_text(self):
        message = Message(sender="human", content=[], text="legacy body")
        assert message_text(message) == "legacy body"

    def test_absent_content_uses_text(self):
        assert message_text(Message(text="legacy body")) == "legacy body"

    def test_content_wins_over_text(self):
        message = Message(content=[TextBlock("current")], text="legacy body")
        assert message_text(message) == "current"

    def test_nothing_renderable(self):
        assert message_text(Message()) == ""

    def test_from_raw_tool_use(self):
        message = parse_message(
            {
                "sender": "assistant",
                "text": "",
                "content": [
                    {
                        "type": "tool_use",
                        "name": "artifacts",
                        "input": {"content": "console.log(1)", "language": "javascript", "title": "Demo"},
                    },
                    {"type": "tool_use", "name": "web_search", "input": {"query": "x"}},
                ],
            }
        )
        text = message_text(message)
        assert text.startswith("\n**Demo**\n\n```javascript\n")
        assert "console.log(1)\n```" in text
        assert "web_search" not in text

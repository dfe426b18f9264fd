"""Parser for Claude.ai conversation exports (conversations.json)."""

import json
import logging
from pathlib import Path

from .exceptions import InputFileError, InputShapeError, MalformedRecordError
from .models import (
    ArtifactBlock,
    Attachment,
    ContentBlock,
    Conversation,
    Message,
    TextBlock,
    UnknownBlock,
)
from .storage import DiskFileSystem, FileSystem

logger = logging.getLogger(__name__)

ARTIFACT_TOOL_NAME = "artifacts"


def _optional_str(value) -> str | None:
    """Return the value if it is a non-empty string, otherwise None."""
    if isinstance(value, str) and value:
        return value
    return None


def _optional_size(value) -> int | None:
    # bool is an int subclass; a true/false file size is noise
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return int(value)


def parse_content_block(raw) -> ContentBlock:
    """Parse one entry of a message's ``content`` list.

    Malformed or unrecognised blocks come back as UnknownBlock rather than
    raising, so a single odd block never loses the rest of the message.
    """
    if not isinstance(raw, dict):
        return UnknownBlock()

    block_type = raw.get("type")
    if block_type == "text":
        text = raw.get("text")
        if isinstance(text, str):
            return TextBlock(text=text)
        return UnknownBlock(type=block_type)

    if block_type == "tool_use" and raw.get("name") == ARTIFACT_TOOL_NAME:
        tool_input = raw.get("input")
        if isinstance(tool_input, dict) and _optional_str(tool_input.get("content")):
            return ArtifactBlock(
                content=tool_input["content"],
                language=_optional_str(tool_input.get("language")),
                title=_optional_str(tool_input.get("title")),
            )

    return UnknownBlock(type=block_type if isinstance(block_type, str) else None)


def parse_content(raw) -> list[ContentBlock] | None:
    """Parse a ``content`` field. None means the field is absent or not a list."""
    if not isinstance(raw, list):
        return None
    return [parse_content_block(item) for item in raw]


def parse_attachment(raw) -> Attachment:
    if not isinstance(raw, dict):
        return Attachment()

    content = raw.get("extracted_content")
    return Attachment(
        file_name=_optional_str(raw.get("file_name")),
        file_type=_optional_str(raw.get("file_type")),
        extracted_content=content if isinstance(content, str) else "",
        file_size=_optional_size(raw.get("file_size")),
    )


def parse_message(raw) -> Message:
    """Parse one chat message, defaulting every field that is missing or mistyped."""
    if not isinstance(raw, dict):
        return Message()

    attachments = raw.get("attachments")
    text = raw.get("text")
    return Message(
        sender=_optional_str(raw.get("sender")),
        created_at=_optional_str(raw.get("created_at")),
        content=parse_content(raw.get("content")),
        text=text if isinstance(text, str) else None,
        attachments=[parse_attachment(a) for a in attachments]
        if isinstance(attachments, list)
        else [],
    )


def parse_conversation(raw) -> Conversation:
    """Parse one conversation record.

    Raises MalformedRecordError when the record itself is not an object or
    its message list has the wrong type. Everything below the message list
    is parsed leniently.
    """
    if not isinstance(raw, dict):
        raise MalformedRecordError("conversation", "an object", raw)

    chat_messages = raw.get("chat_messages")
    if chat_messages is None:
        chat_messages = []
    elif not isinstance(chat_messages, list):
        raise MalformedRecordError("chat_messages", "a list", chat_messages)

    conversation_id = raw.get("uuid")
    return Conversation(
        id=str(conversation_id) if conversation_id is not None else None,
        title=_optional_str(raw.get("name")),
        created_at=_optional_str(raw.get("created_at")),
        updated_at=_optional_str(raw.get("updated_at")),
        messages=[parse_message(m) for m in chat_messages],
    )


def load_export(path: Path, fs: FileSystem | None = None) -> list:
    """Read and decode an export file, returning the raw list of records.

    Raises InputFileError or InputShapeError, which are fatal for a run.
    """
    fs = fs or DiskFileSystem()
    path = Path(path)

    if not fs.exists(path):
        raise InputFileError(path, "Input file not found")

    try:
        text = fs.read_text(path)
    except (OSError, UnicodeDecodeError) as e:
        raise InputFileError(path, f"Could not read input file ({e})") from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise InputFileError(path, f"Invalid JSON at line {e.lineno} column {e.colno}") from e

    if not isinstance(data, list):
        raise InputShapeError(type(data).__name__)

    logger.info("Loaded %d conversations from %s", len(data), path)
    return data

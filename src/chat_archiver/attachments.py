"""Write message attachments next to the rendered conversation."""

import logging
from pathlib import Path, PurePath

from .config import DEFAULT_EXTENSION, EXTENSION_MAP
from .formatting import content_hash
from .models import Attachment, AttachmentRef, Conversation
from .storage import DiskFileSystem, FileSystem

logger = logging.getLogger(__name__)

ATTACHMENT_DIR_SUFFIX = "_attachments"


def attachment_dir_name(base_filename: str) -> str:
    return f"{base_filename}{ATTACHMENT_DIR_SUFFIX}"


def resolve_attachment_name(attachment: Attachment, message_index: int, attachment_index: int) -> str:
    """Pick a filename for an attachment, adding an extension from its MIME type if needed.

    Indices are zero-based and only used when the export has no file name.
    """
    name = attachment.file_name or f"attachment_{message_index}_{attachment_index}"
    # keep writes inside the attachment directory
    name = PurePath(name.replace("\\", "/")).name or f"attachment_{message_index}_{attachment_index}"

    if not PurePath(name).suffix and attachment.file_type:
        name += EXTENSION_MAP.get(attachment.file_type, DEFAULT_EXTENSION)
    return name


def disambiguate(file_name: str, content: str, used: set[str]) -> str:
    """Insert a content hash before the extension if the name is already taken."""
    if file_name not in used:
        return file_name
    path = PurePath(file_name)
    return f"{path.stem}_{content_hash(content)}{path.suffix}"


def extract_attachments(
    conversation: Conversation,
    base_filename: str,
    output_dir: Path,
    fs: FileSystem | None = None,
) -> list[AttachmentRef]:
    """Save every attachment in a conversation and return references to them.

    Nothing is created for conversations without attachments. A failure to
    write one attachment is logged and the rest are still written.
    """
    if not conversation.has_attachments:
        return []

    fs = fs or DiskFileSystem()
    dir_name = attachment_dir_name(base_filename)
    attachment_dir = Path(output_dir) / dir_name
    fs.mkdir(attachment_dir)

    # Only names chosen in this run are tracked, files left over from an
    # earlier run in the same directory are overwritten.
    used_names: set[str] = set()
    refs = []

    for message_index, message in enumerate(conversation.messages):
        for attachment_index, attachment in enumerate(message.attachments):
            original_name = attachment.file_name or f"attachment_{message_index}_{attachment_index}"
            content = attachment.extracted_content or ""
            try:
                file_name = resolve_attachment_name(attachment, message_index, attachment_index)
                final_name = disambiguate(file_name, content, used_names)
                used_names.add(final_name)

                # unpaired surrogates survive json.loads but not UTF-8 encoding
                size = attachment.file_size or len(content.encode("utf-8"))
                fs.write_text(attachment_dir / final_name, content)
            except (OSError, ValueError) as e:
                logger.warning(
                    "Error extracting attachment from message %d: %s", message_index + 1, e
                )
                continue

            refs.append(
                AttachmentRef(
                    original_name=original_name,
                    file_name=final_name,
                    relative_path=f"./{dir_name}/{final_name}",
                    file_size=size,
                    message_index=message_index + 1,
                )
            )

    return refs

"""Data models for chat archiver."""

from dataclasses import dataclass, field
from typing import Literal


@dataclass
class TextBlock:
    """A plain text content block."""

    text: str


@dataclass
class ArtifactBlock:
    """A ``tool_use`` block named ``artifacts`` carrying a code or document body."""

    content: str
    language: str | None = None
    title: str | None = None


@dataclass
class UnknownBlock:
    """Any block type we do not render (tool results, other tools, future types).

    These are dropped from the Markdown output. The schema tracker is what
    tells the operator that new block shapes have appeared.
    """

    type: str | None = None


ContentBlock = TextBlock | ArtifactBlock | UnknownBlock


@dataclass
class Attachment:
    """A file attached to a message, with its text already extracted by the export."""

    file_name: str | None = None
    file_type: str | None = None
    extracted_content: str = ""
    file_size: int | None = None


@dataclass
class Message:
    """A single message in a conversation.

    ``content`` is None when the field is absent from the export, which is
    different from an empty block list.
    """

    sender: str | None = None
    created_at: str | None = None
    content: list[ContentBlock] | None = None
    text: str | None = None
    attachments: list[Attachment] = field(default_factory=list)

    @property
    def is_human(self) -> bool:
        return self.sender == "human"


@dataclass
class Conversation:
    """One conversation record from the export."""

    id: str | None = None
    title: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    messages: list[Message] = field(default_factory=list)

    @property
    def has_attachments(self) -> bool:
        return any(msg.attachments for msg in self.messages)


@dataclass
class AttachmentRef:
    """Where an attachment was written, for linking from the Markdown document."""

    original_name: str
    file_name: str
    relative_path: str
    file_size: int
    message_index: int


@dataclass
class OutputDocument:
    """A rendered conversation, ready to be written."""

    content: str
    filename: str
    attachment_count: int = 0


@dataclass
class SchemaSnapshot:
    """Key paths observed in an export, persisted between runs."""

    keys: list[str]
    last_updated: str
    total_conversations_analyzed: int
    sample_conversation_keys: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "keys": self.keys,
            "last_updated": self.last_updated,
            "total_conversations_analyzed": self.total_conversations_analyzed,
            "sample_conversation_keys": self.sample_conversation_keys,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SchemaSnapshot":
        keys = data.get("keys")
        if not isinstance(keys, list) or not all(isinstance(k, str) for k in keys):
            raise ValueError("snapshot has no list of key paths")
        sample = data.get("sample_conversation_keys") or []
        return cls(
            keys=sorted(set(keys)),
            last_updated=str(data.get("last_updated", "")),
            total_conversations_analyzed=int(data.get("total_conversations_analyzed") or 0),
            sample_conversation_keys=list(sample),
        )


@dataclass
class SchemaDiff:
    """Result of comparing the current export's key paths to the previous run."""

    status: Literal["first_run", "unchanged", "changed"]
    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    saved: bool = True

    @property
    def changed(self) -> bool:
        return self.status == "changed"


@dataclass
class ConversionSummary:
    """Aggregated outcome of one converter run."""

    success_count: int = 0
    error_count: int = 0
    attachment_count: int = 0
    written: list[str] = field(default_factory=list)
    errors: list[tuple[int, str]] = field(default_factory=list)
    schema_diff: SchemaDiff | None = None

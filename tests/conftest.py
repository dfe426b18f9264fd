from __future__ import annotations

import copy
from datetime import datetime, timezone
from pathlib import Path

import pytest

from chat_archiver.config import ConverterConfig
from chat_archiver.storage import DiskFileSystem

FIXED_NOW = datetime(2025, 9, 23, 14, 7, 30, tzinfo=timezone.utc)


def make_message(
    sender: str | None = "human",
    text: str = "",
    created_at: str | None = "2025-09-06T20:04:00Z",
    content: list | None = None,
    attachments: list | None = None,
) -> dict:
    message = {
        "uuid": f"msg-{sender}-{len(text)}",
        "text": text,
        "created_at": created_at,
        "content": content if content is not None else [{"type": "text", "text": text}],
        "attachments": attachments or [],
        "files": [],
    }
    if sender is not None:
        message["sender"] = sender
    return message


def make_conversation(
    uuid: str = "conv-1",
    name: str | None = "Python API Design",
    created_at: str | None = "2025-09-06T20:04:11.123456Z",
    updated_at: str | None = "2025-09-07T08:00:00Z",
    messages: list | None = None,
) -> dict:
    return {
        "uuid": uuid,
        "name": name,
        "summary": "",
        "created_at": created_at,
        "updated_at": updated_at,
        "account": {"uuid": "acct-1"},
        "chat_messages": messages if messages is not None else [],
    }


SAMPLE_EXPORT: list[dict] = [
    make_conversation(
        messages=[
            make_message(
                "human",
                "Can you review my notes?",
                attachments=[
                    {
                        "file_name": "notes.txt",
                        "file_type": "text/plain",
                        "file_size": 1536,
                        "extracted_content": "first draft",
                    }
                ],
            ),
            make_message(
                "assistant",
                created_at="2025-09-06T20:05:00Z",
                content=[
                    {"type": "text", "text": "Here is a cleaned up version."},
                    {
                        "type": "tool_use",
                        "name": "artifacts",
                        "input": {
                            "id": "api",
                            "type": "application/vnd.ant.code",
                            "title": "API Sketch",
                            "language": "python",
                            "content": "def handler():\n    return 200",
                        },
                    },
                    {"type": "tool_result", "content": [{"type": "text", "text": "ok"}]},
                ],
            ),
        ]
    ),
    make_conversation(
        uuid="conv-2",
        name=None,
        created_at="2025-08-01T09:00:00Z",
        updated_at=None,
        messages=[make_message("human", "Legacy message", content=[])],
    ),
    make_conversation(uuid="conv-3", name="Empty Chat", messages=[]),
]


@pytest.fixture()
def sample_export() -> list[dict]:
    return copy.deepcopy(SAMPLE_EXPORT)


@pytest.fixture()
def fs() -> DiskFileSystem:
    return DiskFileSystem()


@pytest.fixture()
def fixed_now():
    return lambda: FIXED_NOW


@pytest.fixture()
def config(tmp_path: Path) -> ConverterConfig:
    return ConverterConfig(
        input_file=tmp_path / "conversations.json",
        output_dir=tmp_path / "out",
        schema_file=tmp_path / "claude_schema.json",
    )


class FailingFileSystem(DiskFileSystem):
    """Disk filesystem that refuses to write files whose name matches."""

    def __init__(self, fail_names: set[str]):
        self.fail_names = fail_names

    def write_text(self, path: Path, content: str) -> None:
        if Path(path).name in self.fail_names:
            raise OSError(f"disk full writing {Path(path).name}")
        super().write_text(path, content)

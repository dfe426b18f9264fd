"""Track changes to the export's JSON structure between runs."""

import json
import logging
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from .formatting import utc_now
from .keypaths import collect_record_key_paths
from .models import SchemaDiff, SchemaSnapshot
from .storage import DiskFileSystem, FileSystem

logger = logging.getLogger(__name__)


def build_snapshot(records: list, now: Callable[[], datetime] = utc_now) -> SchemaSnapshot:
    first = records[0] if records else None
    return SchemaSnapshot(
        keys=collect_record_key_paths(records),
        last_updated=now().isoformat(),
        total_conversations_analyzed=len(records),
        sample_conversation_keys=sorted(first.keys()) if isinstance(first, dict) else [],
    )


def load_snapshot(path: Path, fs: FileSystem) -> SchemaSnapshot | None:
    """Read the previous snapshot. A missing or unreadable file counts as no snapshot."""
    if not fs.exists(path):
        return None
    try:
        data = json.loads(fs.read_text(path))
        if not isinstance(data, dict):
            raise ValueError("snapshot is not a JSON object")
        return SchemaSnapshot.from_dict(data)
    except (OSError, UnicodeDecodeError, TypeError, ValueError) as e:
        logger.warning("Could not read previous schema file %s: %s", path, e)
        return None


def save_snapshot(snapshot: SchemaSnapshot, path: Path, fs: FileSystem) -> bool:
    try:
        fs.write_text(path, json.dumps(snapshot.to_dict(), indent=2))
    except OSError as e:
        logger.warning("Could not save schema file %s: %s", path, e)
        return False
    logger.debug("Schema saved to %s", path)
    return True


def compare_snapshots(previous: SchemaSnapshot | None, current: SchemaSnapshot) -> SchemaDiff:
    if previous is None:
        return SchemaDiff(status="first_run")

    old_keys = set(previous.keys)
    new_keys = set(current.keys)
    added = sorted(new_keys - old_keys)
    removed = sorted(old_keys - new_keys)

    if not added and not removed:
        return SchemaDiff(status="unchanged")
    return SchemaDiff(status="changed", added=added, removed=removed)


def track_schema_changes(
    records: list,
    schema_file: Path,
    fs: FileSystem | None = None,
    now: Callable[[], datetime] = utc_now,
) -> SchemaDiff:
    """Compare the records' key paths with the last run and save the new set.

    The new snapshot always replaces the old one, so each run is only
    compared against the run immediately before it.
    """
    fs = fs or DiskFileSystem()
    schema_file = Path(schema_file)

    current = build_snapshot(records, now)
    previous = load_snapshot(schema_file, fs)
    diff = compare_snapshots(previous, current)

    if diff.status == "first_run":
        logger.debug("First run, saving current JSON structure for future comparison")
    elif diff.status == "unchanged":
        logger.debug("JSON structure unchanged since last run")
    else:
        logger.debug(
            "JSON structure has changed: %d new key(s), %d removed key(s)",
            len(diff.added),
            len(diff.removed),
        )

    diff.saved = save_snapshot(current, schema_file, fs)
    return diff

"""Convert a whole export, one Markdown document per conversation."""

import logging
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from .config import ConverterConfig
from .exceptions import InputShapeError, OutputDirectoryError
from .formatting import utc_now
from .models import ConversionSummary, OutputDocument
from .parser import load_export, parse_conversation
from .renderer import render_conversation
from .schema import track_schema_changes
from .storage import DiskFileSystem, FileSystem

logger = logging.getLogger(__name__)

# Called once per record with (index, document, error message)
RecordCallback = Callable[[int, OutputDocument | None, str | None], None]


def convert_records(
    records: list,
    config: ConverterConfig,
    fs: FileSystem | None = None,
    now: Callable[[], datetime] = utc_now,
    on_record: RecordCallback | None = None,
) -> ConversionSummary:
    """Convert already-decoded records.

    A record that fails to render or write is counted and skipped; only a
    non-list input or an unusable output directory aborts the run.
    """
    if not isinstance(records, list):
        raise InputShapeError(type(records).__name__)

    fs = fs or DiskFileSystem()
    summary = ConversionSummary()
    summary.schema_diff = track_schema_changes(records, config.schema_file, fs, now)

    output_dir = Path(config.output_dir)
    if not fs.exists(output_dir):
        try:
            fs.mkdir(output_dir)
        except OSError as e:
            raise OutputDirectoryError(output_dir, e.strerror or str(e)) from e
        logger.info("Created output directory: %s", output_dir)

    for index, raw in enumerate(records):
        try:
            conversation = parse_conversation(raw)
            document = render_conversation(conversation, index, output_dir, fs, now)
            fs.write_text(output_dir / document.filename, document.content)
        except Exception as e:
            logger.error("Error processing conversation %d: %s", index + 1, e)
            summary.error_count += 1
            summary.errors.append((index, str(e)))
            if on_record:
                on_record(index, None, str(e))
            continue

        summary.success_count += 1
        summary.attachment_count += document.attachment_count
        summary.written.append(document.filename)
        logger.info("Wrote %s (%d attachments)", document.filename, document.attachment_count)
        if on_record:
            on_record(index, document, None)

    return summary


def run_conversion(
    config: ConverterConfig,
    fs: FileSystem | None = None,
    now: Callable[[], datetime] = utc_now,
    on_record: RecordCallback | None = None,
) -> ConversionSummary:
    """Load the configured export and convert it.

    Raises InputFileError, InputShapeError or OutputDirectoryError when the run cannot proceed at all.
    """
    fs = fs or DiskFileSystem()
    records = load_export(config.input_file, fs)
    return convert_records(records, config, fs, now, on_record)

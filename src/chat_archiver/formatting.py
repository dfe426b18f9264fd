"""Timestamp, filename and size formatting helpers."""

import hashlib
import math
import re
from datetime import datetime, timezone

UNKNOWN = "Unknown"
UNTITLED = "UntitledConversation"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: str | datetime | None) -> datetime | None:
    """Parse an ISO-8601 timestamp into an aware datetime.

    Naive timestamps are taken to be UTC. Returns None for missing or
    unparseable values.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        try:
            dt = datetime.fromisoformat(value)
        except (TypeError, ValueError):
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _long_date(dt: datetime) -> str:
    return f"{dt:%b} {dt.day}, {dt.year}"


def format_local_time(value: str | datetime | None) -> str:
    """Format as local time with the UTC time alongside.

    e.g. ``Sep 6, 2025, 3:04 PM CDT (20:04 UTC)``
    """
    dt = parse_timestamp(value)
    if dt is None:
        return UNKNOWN

    local = dt.astimezone()
    hour = local.hour % 12 or 12
    local_time = f"{_long_date(local)}, {hour}:{local:%M} {local:%p} {local.tzname()}"
    utc_time = f"{dt.astimezone(timezone.utc):%H:%M} UTC"
    return f"{local_time} ({utc_time})"


def format_short_date(value: str | datetime | None) -> str:
    """Format as the UTC calendar date, ``YYYY-MM-DD``."""
    dt = parse_timestamp(value)
    if dt is None:
        return UNKNOWN
    return dt.astimezone(timezone.utc).date().isoformat()


def format_date_with_day(value: str | datetime | None) -> str:
    """Format as ``2025-09-06 (Sat, Sep 6, 2025)``."""
    dt = parse_timestamp(value)
    if dt is None:
        return UNKNOWN
    local = dt.astimezone()
    return f"{format_short_date(dt)} ({local:%a}, {_long_date(local)})"


def sanitize_title(title: str | None) -> str:
    """Turn a conversation title into a CamelCase token safe for filenames."""
    if not title or not isinstance(title, str):
        return UNTITLED

    cleaned = re.sub(r"[^a-zA-Z0-9\s]", "", title).strip()
    words = re.split(r"\s+", cleaned) if cleaned else []
    if not words:
        return UNTITLED

    return "".join(word[:1].upper() + word[1:].lower() for word in words)


def content_hash(content: str) -> str:
    """Short fingerprint used to tell apart attachments with the same name."""
    if not content:
        return "empty"
    return hashlib.sha256(content.encode("utf-8")).hexdigest()[:6]


def format_size_kb(size: int | None) -> str | None:
    """Format a byte count as ``(1.5 KB)``. Returns None for unknown or zero sizes."""
    if not size:
        return None
    kb = math.floor(size / 1024 * 10 + 0.5) / 10
    shown = int(kb) if kb.is_integer() else kb
    return f"({shown} KB)"


def format_file_size(size: int) -> str:
    """Human-readable file size, e.g. ``1.2 MB``."""
    if size <= 0:
        return "0 B"
    units = ["B", "KB", "MB", "GB"]
    value = float(size)
    i = 0
    while value >= 1024 and i < len(units) - 1:
        value /= 1024
        i += 1
    value = round(value, 2)
    shown = int(value) if value.is_integer() else value
    return f"{shown} {units[i]}"

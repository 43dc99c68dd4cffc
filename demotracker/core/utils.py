"""
Utility helpers shared across repositories/services.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(value: datetime | str | None) -> str:
    """Render a timestamp as ISO-8601 (naive datetimes are assumed UTC)."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if not isinstance(value, datetime):
        raise TypeError(f"Expected datetime or ISO-8601 string, got {type(value).__name__}")
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat(timespec="microseconds")


def parse_iso(value: str | None) -> datetime:
    """
    Parse an ISO-8601 string into an aware datetime.

    Accepts the trailing "Z" produced by JavaScript's toISOString(). Empty or
    unparsable values map to the epoch so they sort as the oldest entries.
    """
    if not value:
        return datetime.fromtimestamp(0, tz=timezone.utc)
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return datetime.fromtimestamp(0, tz=timezone.utc)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed

"""Time parsing and formatting utilities."""

from __future__ import annotations

from datetime import UTC, datetime, tzinfo

from zoneinfo import ZoneInfo


def tzinfo_from_name(tz_name: str) -> tzinfo:
    """Create tzinfo from an IANA timezone name.

    Args:
        tz_name: Timezone name like "Europe/Berlin".

    Returns:
        tzinfo instance.

    Raises:
        ValueError: If timezone name is invalid on this system.
    """

    try:
        return ZoneInfo(tz_name)
    except Exception as exc:  # ZoneInfo raises KeyError / ZoneInfoNotFoundError (platform dependent)
        raise ValueError(f"Invalid time zone: {tz_name!r}. Example: Europe/Berlin") from exc


def now_utc() -> datetime:
    """Current time, timezone-aware, truncated to whole seconds."""

    return datetime.now(UTC).replace(microsecond=0)


def format_timestamp(dt: datetime) -> str:
    """Format a datetime for the interchange document.

    The output is UTC with a trailing "Z", second precision, e.g.
    "2024-11-07T18:30:00Z". Strings in this form sort chronologically.

    Args:
        dt: Datetime. If naive, it is treated as UTC.
    """

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    dt = dt.astimezone(UTC)
    # strftime("%Y") does not zero-pad years below 1000 on every platform.
    return f"{dt.year:04d}-{dt:%m-%dT%H:%M:%S}Z"


def parse_timestamp(text: object) -> datetime | None:
    """Parse an interchange timestamp.

    Accepts ISO-8601 extended text with "Z" or a numeric offset. Naive text is
    read as UTC. Anything that cannot be parsed yields None.

    Returns:
        Timezone-aware datetime in UTC, or None.
    """

    if not isinstance(text, str):
        return None
    s = text.strip()
    if not s:
        return None
    if s.endswith(("Z", "z")):
        s = s[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(s)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=UTC)
        return dt.astimezone(UTC)
    except (ValueError, OverflowError):
        # Offsets that push the instant past year 1 or year 9999.
        return None


def local_display(dt: datetime | None, tz_name: str) -> str:
    """Readable local time for listings ("" when unknown)."""

    if dt is None:
        return ""
    return dt.astimezone(tzinfo_from_name(tz_name)).isoformat(sep=" ")

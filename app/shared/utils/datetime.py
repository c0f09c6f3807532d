"""
UTC datetime utilities for consistent timezone handling.

Every timestamp on a task, assignee window or notification is timezone-aware
UTC. Documents written by the web client store ISO strings with a trailing
"Z"; these helpers convert at the store boundary.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone
    - If aware, converts to UTC

    Args:
        dt: A datetime that may be naive or aware

    Returns:
        UTC-aware datetime or None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)


def to_iso_z(dt: datetime | None) -> str | None:
    """Format as ISO-8601 UTC with millisecond precision and a Z suffix.

    Matches JavaScript's Date.toISOString() so windows computed here compare
    equal to those computed by the browser client.
    """
    if dt is None:
        return None
    utc = ensure_utc(dt)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def parse_iso_utc(value: str | datetime | None) -> datetime | None:
    """Parse an ISO-8601 string (Z or offset) into a UTC-aware datetime.

    Datetimes pass through ensure_utc; empty values return None.

    Raises:
        ValueError: If value is a non-empty string that is not ISO-8601.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    return ensure_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))

"""UTC time helpers. Invoice dates and session timestamps never use local time."""

from datetime import date, datetime, timezone


def now_utc() -> datetime:
    """Timezone-aware current time in UTC. Use instead of datetime.now()."""
    return datetime.now(timezone.utc)


def today_utc() -> date:
    """Current calendar date in UTC; new invoices are dated with this."""
    return now_utc().date()


def to_utc(dt: datetime) -> datetime:
    """
    Convert an aware datetime to UTC.

    Raises:
        ValueError: If dt is naive
    """
    if dt.tzinfo is None:
        raise ValueError("Cannot convert naive datetime to UTC; attach a timezone first.")
    return dt.astimezone(timezone.utc)


def parse_iso(value: str) -> datetime:
    """
    Parse an ISO 8601 timestamp that carries an offset, returning UTC.

    Raises:
        ValueError: If the string is malformed or has no timezone
    """
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        raise ValueError(f"Timestamp '{value}' has no timezone offset")
    return to_utc(parsed)

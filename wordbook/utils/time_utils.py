"""Timestamp helpers for fetch bookkeeping."""

from datetime import date, datetime, timezone


def utc_now_iso() -> str:
    """Current instant as an ISO-8601 string with UTC offset."""
    return datetime.now(timezone.utc).isoformat()


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp.

    Accepts the trailing ``Z`` written by JavaScript's ``toISOString``.

    Returns:
        Aware or naive datetime, or None if the value is empty or unparseable
    """
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def local_date(moment: datetime) -> date:
    """Calendar date of a moment in the machine's local time zone.

    Naive datetimes are taken to already be local.
    """
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone().date()

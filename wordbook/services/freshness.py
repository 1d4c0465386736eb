"""Once-per-day gate deciding whether a remote fetch should be attempted."""

from datetime import datetime

from wordbook.utils import local_date, parse_timestamp


def should_fetch_remote(
    last_fetch_timestamp: str | None,
    is_privileged: bool,
    now: datetime | None = None,
) -> bool:
    """Decide whether the remote tier should be tried.

    Administrators always fetch so they see their edits immediately. Other
    sessions fetch at most once per local calendar day.

    Args:
        last_fetch_timestamp: ISO-8601 time of the last successful remote
            fetch, or None if the server was never reached
        is_privileged: Whether the session is an administrator session
        now: Current time (defaults to the local clock)

    Returns:
        True if a remote fetch should be attempted
    """
    if is_privileged:
        return True

    last_fetch = parse_timestamp(last_fetch_timestamp)
    if last_fetch is None:
        return True

    current = now if now is not None else datetime.now().astimezone()
    return local_date(last_fetch) != local_date(current)

"""Date parsing utilities for Jira API timestamps."""

from datetime import datetime, timezone

# Jira REST timestamps, e.g. 2013-05-02T14:37:12.000-0700
JIRA_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S.%f%z"

# Stand-in for "no timestamp": unparseable dates and unresolved link dates
ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


def parse_jira_datetime(value: str | None) -> datetime:
    """Parse a Jira API timestamp.

    Parse errors are not reported; an empty, missing or malformed value
    yields ``ZERO_TIME``.

    Args:
        value: Timestamp string as returned by the Jira REST API

    Returns:
        Timezone-aware datetime, or ZERO_TIME
    """
    if not value:
        return ZERO_TIME
    try:
        return datetime.strptime(value, JIRA_DATE_FORMAT)
    except ValueError:
        return ZERO_TIME


def is_zero_time(value: datetime) -> bool:
    """Check whether a timestamp is the zero value."""
    return value == ZERO_TIME


def format_elapsed(seconds: float) -> str:
    """Format a duration in seconds for display (e.g. ``1m 4.2s``)."""
    minutes, secs = divmod(seconds, 60)
    if minutes:
        return f"{int(minutes)}m {secs:.1f}s"
    return f"{secs:.1f}s"

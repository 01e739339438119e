"""Trailing time windows over session start times.

Session items carry startTime as an ISO-8601 UTC string with millisecond
precision and a "Z" suffix (e.g. 2025-04-04T13:05:09.123Z). Window bounds
use the same format so stores can compare them lexically.
"""

from datetime import datetime, timedelta, timezone

from fastmath_analytics.models.domain import TimeWindow

DEFAULT_WINDOW_DAYS = 180


def to_iso_timestamp(moment: datetime) -> str:
    """Format a datetime as a UTC ISO-8601 string with milliseconds.

    Naive datetimes are taken to be UTC.

    Args:
        moment: Datetime to format.

    Returns:
        String like "2025-04-04T13:05:09.123Z".
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def trailing_window(days: int = DEFAULT_WINDOW_DAYS, now: datetime | None = None) -> TimeWindow:
    """Build the inclusive window [now - days, now].

    Args:
        days: Window length in days. Must be positive.
        now: End of the window. Defaults to the current UTC time.

    Returns:
        TimeWindow with ISO-8601 bounds.

    Raises:
        ValueError: If days is not positive.
    """
    if days <= 0:
        raise ValueError(f"Window length must be positive, got {days} days")

    if now is None:
        now = datetime.now(timezone.utc)

    return TimeWindow(
        start=to_iso_timestamp(now - timedelta(days=days)),
        end=to_iso_timestamp(now),
    )

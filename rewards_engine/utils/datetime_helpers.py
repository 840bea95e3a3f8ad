"""
Date/Time Handling Utilities

Rules:
- All DB timestamps are stored in UTC
- Never mix naive and aware datetimes
- Services take the current time from an injected Clock, never from
  datetime.now() directly
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def now_utc() -> datetime:
    """
    Get current datetime in UTC (timezone-aware)

    Returns:
        Current datetime in UTC with timezone info
    """
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """
    Convert a datetime to UTC

    Naive datetimes are assumed to already be UTC (psycopg returns naive
    values for `timestamp without time zone` columns).
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def hours_between(earlier: datetime, later: datetime) -> float:
    """Elapsed hours from earlier to later"""
    return (to_utc(later) - to_utc(earlier)).total_seconds() / 3600


def is_within_window(
    last_activity_at: Optional[datetime],
    now: datetime,
    window: timedelta
) -> bool:
    """
    True when last_activity_at is no older than `window` at `now`

    Returns False when there is no previous activity.
    """
    if last_activity_at is None:
        return False
    return to_utc(now) - to_utc(last_activity_at) <= window

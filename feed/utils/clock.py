"""
Clock helpers for item age and the default clocks used by the stages.
"""

import time
from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def epoch_seconds() -> float:
    """Current wall-clock time in seconds since the epoch."""
    return time.time()


def days_since(moment: datetime, now: Optional[datetime] = None) -> int:
    """Whole days between moment and now; naive datetimes are treated as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    if now is None:
        now = utc_now()
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return (now - moment).days

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Any, Iterable, List, Optional

from .models import FeedRecord
from .parser import parse_datetime


def cutoff_for(days: int, now: Optional[datetime] = None) -> datetime:
    now = now or datetime.now(tz=timezone.utc)
    return now - timedelta(days=days)


def is_recent(record: FeedRecord, cutoff: datetime) -> bool:
    """True when published on/after `cutoff`. Unparsable dates are kept (fail-open)."""
    published_at = record.published_at
    if published_at is None:
        return True
    return published_at >= cutoff


def filter_recent(records: Iterable[FeedRecord], cutoff: datetime) -> List[FeedRecord]:
    return [r for r in records if is_recent(r, cutoff)]


def within_days(value: Any, today: date, days: int) -> bool:
    """
    Calendar-day window check: [today - days, today] in UTC.
    `days=0` only accepts `today`. Unparsable values are kept.
    """
    published_at = parse_datetime(value)
    if published_at is None:
        return True
    day = published_at.date()
    return today - timedelta(days=max(days, 0)) <= day <= today

from __future__ import annotations

from typing import Callable, Dict, Iterable, List

from .models import FeedRecord


def by_link(record: FeedRecord) -> str:
    return record.link


def by_guid(record: FeedRecord) -> str:
    return record.guid or record.link


def deduplicate(
    records: Iterable[FeedRecord],
    key: Callable[[FeedRecord], str] = by_link,
) -> List[FeedRecord]:
    """
    Keep one record per key: the first one seen. Preserves original order.
    Records whose key is empty collapse into a single record.
    """
    kept: Dict[str, FeedRecord] = {}
    for record in records:
        k = (key(record) or "").strip()
        if k in kept:
            continue
        kept[k] = record
    return list(kept.values())

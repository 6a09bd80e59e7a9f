from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from loguru import logger

from .models import FeedRecord
from .parser import parse_entry


def feed_kind(feed: Dict[str, Any]) -> Optional[str]:
    """Return "rss" or "atom" for a parsed feed tree, None when unrecognized."""
    version = (feed.get("version") or "").lower()
    if version.startswith("atom"):
        return "atom"
    if version.startswith("rss") or version == "cdf":
        return "rss"
    return None


def to_record(entry: Dict[str, Any], *, source: str, source_url: Optional[str] = None) -> FeedRecord:
    """
    Convert a parsed entry dict into a FeedRecord.
    Raises ValueError when the entry has no resolvable link.
    """
    return FeedRecord(
        title=entry.get("title") or "",
        link=entry.get("link") or "",
        published=entry.get("published") or "",
        summary=entry.get("summary") or "",
        source=source,
        source_url=source_url,
        guid=entry.get("guid"),
    )


def normalize_feed(
    feed: Dict[str, Any],
    source: str,
    *,
    source_url: Optional[str] = None,
    limit: Optional[int] = None,
    now: Optional[datetime] = None,
) -> List[FeedRecord]:
    """
    Turn an RSS 2.0 or Atom feed tree into FeedRecords labelled with `source`.

    Entries without a resolvable link are dropped. An unrecognized document
    yields an empty list.
    """
    kind = feed_kind(feed)
    if kind is None:
        logger.warning(f"[{source}] unrecognized feed format, skipping")
        return []

    now = now or datetime.now(tz=timezone.utc)
    entries = list(feed.get("entries") or [])
    if limit and limit > 0:
        entries = entries[:limit]

    records: List[FeedRecord] = []
    dropped = 0
    for raw in entries:
        entry = parse_entry(raw, atom=(kind == "atom"), now=now)
        try:
            records.append(to_record(entry, source=source, source_url=source_url))
        except ValueError:
            dropped += 1
    if dropped:
        logger.debug(f"[{source}] dropped {dropped} entries without a link")
    return records

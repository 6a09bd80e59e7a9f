from __future__ import annotations

import html
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from dateutil import parser as dtparser

_TAG_RE = re.compile(r"<[^>]*>")

SUMMARY_CHARS = 200
UNTITLED = "Untitled"


def parse_datetime(value: Any) -> Optional[datetime]:
    """
    Parse a feed timestamp into a timezone-aware UTC datetime.
    Naive values are assumed to be UTC. Returns None when unparsable or
    when the UTC conversion falls outside the datetime range.
    """
    try:
        if isinstance(value, datetime):
            dt = value
        elif isinstance(value, str) and value.strip():
            dt = dtparser.parse(value.strip())
        else:
            return None
        if not dt.tzinfo:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)
    except (ValueError, OverflowError, TypeError):
        return None


def _text(value: Any) -> str:
    # Plain string, or a structured node carrying its text under "value"/"_".
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, dict):
        for key in ("value", "_"):
            inner = value.get(key)
            if isinstance(inner, str):
                return inner.strip()
    return ""


def strip_html(text: str, limit: int = SUMMARY_CHARS) -> str:
    """Drop tags with a blunt regex, unescape entities and truncate."""
    cleaned = html.unescape(_TAG_RE.sub("", text or "")).strip()
    if limit > 0:
        cleaned = cleaned[:limit]
    return cleaned


def _href(link: Any) -> str:
    if isinstance(link, str):
        return link.strip()
    if isinstance(link, dict):
        return _text(link.get("href")) or _text(link)
    return ""


def resolve_rss_link(entry: Dict[str, Any]) -> str:
    link = _href(entry.get("link"))
    if link:
        return link
    links = entry.get("links")
    if isinstance(links, list) and links:
        return _href(links[0])
    return ""


def resolve_atom_link(entry: Dict[str, Any]) -> str:
    """
    Prefer the alternate (or unmarked) link, then the first link, then the
    entry id.
    """
    links = entry.get("links")
    if isinstance(links, list) and links:
        for link in links:
            if isinstance(link, dict) and link.get("rel") in (None, "", "alternate"):
                href = _href(link)
                if href:
                    return href
        href = _href(links[0])
        if href:
            return href
    return _text(entry.get("id"))


def resolve_title(entry: Dict[str, Any]) -> str:
    title = _text(entry.get("title")) or _text(entry.get("title_detail"))
    return title or UNTITLED


def resolve_summary(entry: Dict[str, Any], limit: int = SUMMARY_CHARS) -> str:
    raw = _text(entry.get("description")) or _text(entry.get("summary"))
    if not raw:
        content = entry.get("content")
        if isinstance(content, list) and content:
            raw = _text(content[0])
    return strip_html(raw, limit)


def resolve_published(entry: Dict[str, Any], now: datetime) -> str:
    for key in ("pubDate", "published", "updated"):
        value = _text(entry.get(key))
        if value:
            return value
    # Undated items are treated as arriving now.
    return now.astimezone(timezone.utc).isoformat()


def resolve_guid(entry: Dict[str, Any]) -> Optional[str]:
    for key in ("id", "guid"):
        value = _text(entry.get(key))
        if value:
            return value
    return None


def parse_entry(entry: Dict[str, Any], *, atom: bool, now: datetime) -> Dict[str, Any]:
    """
    Map a raw feed entry to a dict with the common record fields.
    Fields: title, link, published, summary, guid
    """
    return {
        "title": resolve_title(entry),
        "link": resolve_atom_link(entry) if atom else resolve_rss_link(entry),
        "published": resolve_published(entry, now),
        "summary": resolve_summary(entry),
        "guid": resolve_guid(entry),
    }

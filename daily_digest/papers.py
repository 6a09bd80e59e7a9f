from __future__ import annotations

import re
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional

from loguru import logger

from .config import ARXIV_API, ARXIV_CATEGORIES, PAPER_WINDOW_DAYS, PAPERS_PER_CATEGORY
from .dedup import by_guid, deduplicate
from .exceptions import FeedFetchError
from .fetcher import fetch_url, parse_feed
from .models import FeedRecord
from .recency import within_days

_WS_RE = re.compile(r"\s+")

PAPER_SUMMARY_CHARS = 500
MAX_AUTHORS = 3


def _squash(text: Any) -> str:
    return _WS_RE.sub(" ", text or "").strip() if isinstance(text, str) else ""


def pdf_url(abs_url: str) -> str:
    return abs_url.replace("/abs/", "/pdf/") + ".pdf"


def to_paper(entry: Dict[str, Any], category: str) -> FeedRecord:
    """Map one arXiv Atom entry to a FeedRecord. Raises ValueError without an id."""
    paper_id = _squash(entry.get("id"))
    authors = [
        _squash(a.get("name"))
        for a in entry.get("authors") or []
        if isinstance(a, dict) and a.get("name")
    ]
    return FeedRecord(
        title=_squash(entry.get("title")),
        link=paper_id,
        published=_squash(entry.get("published")),
        summary=_squash(entry.get("summary"))[:PAPER_SUMMARY_CHARS],
        source="arXiv",
        guid=paper_id,
        authors=tuple(authors[:MAX_AUTHORS]),
        category=category,
        pdf=pdf_url(paper_id) if paper_id else None,
    )


def query_category(
    category: str,
    *,
    max_results: int = PAPERS_PER_CATEGORY,
    fetch: Callable[..., bytes] = fetch_url,
    timeout: float = 15.0,
) -> List[FeedRecord]:
    """Fetch the newest submissions for one arXiv category."""
    params = {
        "search_query": f"cat:{category}",
        "sortBy": "submittedDate",
        "sortOrder": "descending",
        "max_results": max_results,
    }
    feed = parse_feed(fetch(ARXIV_API, params=params, timeout=timeout))
    papers: List[FeedRecord] = []
    for entry in feed.get("entries") or []:
        try:
            papers.append(to_paper(entry, category))
        except ValueError:
            continue
    return papers


def fetch_papers(
    categories: Iterable[str] = ARXIV_CATEGORIES,
    *,
    window_days: int = PAPER_WINDOW_DAYS,
    max_results: int = PAPERS_PER_CATEGORY,
    today: Optional[date] = None,
    fetch: Callable[..., bytes] = fetch_url,
    timeout: float = 15.0,
) -> List[FeedRecord]:
    """
    Query each category in turn and keep papers submitted within the last
    `window_days` calendar days. Results are deduplicated by arXiv id across
    categories; a failing category is logged and skipped.
    """
    today = today or datetime.now(tz=timezone.utc).date()
    found: List[FeedRecord] = []
    for category in categories:
        try:
            papers = query_category(category, max_results=max_results, fetch=fetch, timeout=timeout)
        except FeedFetchError as e:
            logger.error(f"[arXiv {category}] fetch failed: {e}")
            continue
        recent = [p for p in papers if within_days(p.published, today, window_days)]
        logger.info(f"[arXiv {category}] {len(recent)} papers in window")
        found.extend(recent)
    return deduplicate(found, key=by_guid)

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence

from loguru import logger

from .config import (
    ARXIV_CATEGORIES,
    BLOG_SOURCES,
    BLOG_WINDOW_DAYS,
    NEWS_ITEMS_PER_FEED,
    NEWS_SOURCES,
    NEWS_WINDOW_DAYS,
    PAPER_WINDOW_DAYS,
    PAPERS_PER_CATEGORY,
    FeedSource,
    Settings,
)
from .dedup import deduplicate
from .exceptions import DigestError, FeedParseError
from .fetcher import fetch_url, parse_feed
from .models import Digest, DigestSection, FeedRecord, sort_newest_first
from .normalizer import feed_kind, normalize_feed
from .papers import fetch_papers
from .recency import cutoff_for, filter_recent


@dataclass
class BuildOptions:
    news_sources: Sequence[FeedSource] = NEWS_SOURCES
    blog_sources: Sequence[FeedSource] = BLOG_SOURCES
    paper_categories: Sequence[str] = ARXIV_CATEGORIES
    news_window_days: int = NEWS_WINDOW_DAYS
    blog_window_days: int = BLOG_WINDOW_DAYS
    paper_window_days: int = PAPER_WINDOW_DAYS
    papers_per_category: int = PAPERS_PER_CATEGORY
    news_items_per_feed: int = NEWS_ITEMS_PER_FEED
    timeout: float = 15.0


class DigestBuilder:
    """
    High-level API: fetch every configured source and assemble one Digest.

    Pipeline per feed: fetch → parse → normalize → recency filter; per
    section: deduplicate → sort (newest first). Sources are processed one at
    a time and a failing source only loses its own contribution.
    """

    def __init__(
        self,
        options: Optional[BuildOptions] = None,
        *,
        fetch: Callable[..., bytes] = fetch_url,
    ) -> None:
        self.options = options or BuildOptions()
        self._fetch = fetch

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "DigestBuilder":
        options = BuildOptions(
            news_window_days=settings.news_window_days,
            blog_window_days=settings.blog_window_days,
            paper_window_days=settings.paper_window_days,
            timeout=settings.http_timeout,
        )
        return cls(options, **kwargs)

    def fetch_source(
        self,
        source: FeedSource,
        *,
        window_days: int,
        limit: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> List[FeedRecord]:
        now = now or datetime.now(tz=timezone.utc)
        raw = self._fetch(source.rss, timeout=self.options.timeout)
        feed = parse_feed(raw)
        if feed_kind(feed) is None:
            raise FeedParseError(f"unrecognized feed format: {source.rss}")
        records = normalize_feed(feed, source.name, source_url=source.url, limit=limit, now=now)
        return filter_recent(records, cutoff_for(window_days, now))

    def _collect(
        self,
        sources: Sequence[FeedSource],
        *,
        window_days: int,
        limit: Optional[int],
        now: datetime,
    ) -> List[FeedRecord]:
        collected: List[FeedRecord] = []
        for source in sources:
            logger.info(f"[{source.name}] fetching {source.rss}")
            try:
                recent = self.fetch_source(source, window_days=window_days, limit=limit, now=now)
            except DigestError as e:
                logger.error(f"[{source.name}] fetch failed: {e}")
                continue
            except Exception as e:  # noqa: BLE001
                logger.exception(f"[{source.name}] unexpected error: {e}")
                continue
            logger.info(f"[{source.name}] {len(recent)} recent items")
            collected.extend(recent)
        return collected

    def fetch_news(self, now: Optional[datetime] = None) -> List[FeedRecord]:
        now = now or datetime.now(tz=timezone.utc)
        records = self._collect(
            self.options.news_sources,
            window_days=self.options.news_window_days,
            limit=self.options.news_items_per_feed,
            now=now,
        )
        return assemble_section(records)

    def fetch_blogs(self, now: Optional[datetime] = None) -> List[FeedRecord]:
        now = now or datetime.now(tz=timezone.utc)
        records = self._collect(
            self.options.blog_sources,
            window_days=self.options.blog_window_days,
            limit=None,
            now=now,
        )
        return assemble_section(records)

    def fetch_papers(self, today: Optional[date] = None) -> List[FeedRecord]:
        papers = fetch_papers(
            self.options.paper_categories,
            window_days=self.options.paper_window_days,
            max_results=self.options.papers_per_category,
            today=today,
            fetch=self._fetch,
            timeout=self.options.timeout,
        )
        return sort_newest_first(papers)

    def build(self, now: Optional[datetime] = None) -> Digest:
        now = now or datetime.now(tz=timezone.utc)
        steps: Dict[str, Callable[[], List[FeedRecord]]] = {
            "news": lambda: self.fetch_news(now),
            "papers": lambda: self.fetch_papers(now.date()),
            "blogs": lambda: self.fetch_blogs(now),
        }
        sections: Dict[str, DigestSection] = {}
        for index, (name, step) in enumerate(steps.items(), start=1):
            logger.info(f"[{index}/{len(steps)}] collecting {name}")
            try:
                records = step()
            except DigestError as e:
                logger.error(f"[{name}] section failed: {e}")
                records = []
            except Exception as e:  # noqa: BLE001
                logger.exception(f"[{name}] unexpected error: {e}")
                records = []
            logger.info(f"[{name}] {len(records)} items")
            sections[name] = DigestSection(tuple(records))
        return Digest(date=now.date(), sections=sections)


def assemble_section(records: List[FeedRecord]) -> List[FeedRecord]:
    """Deduplicate by link (first seen wins), then sort newest first."""
    return sort_newest_first(deduplicate(records))

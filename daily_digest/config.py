from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv


@dataclass(frozen=True)
class FeedSource:
    name: str
    url: str
    rss: str


NEWS_SOURCES: Tuple[FeedSource, ...] = (
    FeedSource(
        "TechCrunch AI",
        "https://techcrunch.com/category/artificial-intelligence/",
        "https://techcrunch.com/feed/",
    ),
    FeedSource(
        "MIT Tech Review",
        "https://www.technologyreview.com/topic/artificial-intelligence/",
        "https://www.technologyreview.com/feed/",
    ),
    FeedSource(
        "AI News",
        "https://artificialintelligence-news.com",
        "https://artificialintelligence-news.com/feed/",
    ),
    FeedSource("OpenAI Blog", "https://openai.com/blog", "https://openai.com/blog/rss.xml"),
    FeedSource("DeepMind Blog", "https://deepmind.google", "https://deepmind.com/blog/rss.xml"),
    FeedSource(
        "Anthropic News",
        "https://www.anthropic.com/news",
        "https://www.anthropic.com/news/rss",
    ),
)

BLOG_SOURCES: Tuple[FeedSource, ...] = (
    FeedSource("宝玉的博客", "https://baoyu.io/blog", "https://baoyu.io/feed.xml"),
    FeedSource("苏剑林的博客", "https://kexue.fm/", "https://kexue.fm/feed"),
    FeedSource(
        "阮一峰的网络日志",
        "http://www.ruanyifeng.com/blog/",
        "http://www.ruanyifeng.com/blog/atom.xml",
    ),
)

ARXIV_API = "https://export.arxiv.org/api/query"
ARXIV_CATEGORIES: Tuple[str, ...] = ("eess.AS", "cs.SD")

NEWS_WINDOW_DAYS = 1
BLOG_WINDOW_DAYS = 7
# Rolling calendar-day window for papers; 0 keeps only today's submissions.
PAPER_WINDOW_DAYS = 1
PAPERS_PER_CATEGORY = 30
NEWS_ITEMS_PER_FEED = 20

DEFAULT_SITE_URL = "https://nagichan.github.io/ai-daily/"
DEFAULT_RELAY_COMMAND = "openclaw message send --channel feishu"


@dataclass
class Settings:
    """Runtime configuration loaded from environment variables (and .env)."""
    data_dir: Path = Path("data")
    site_dir: Path = Path("site")
    site_url: str = DEFAULT_SITE_URL
    translator: str = "mymemory"
    relay_command: str = DEFAULT_RELAY_COMMAND
    feishu_webhook: str = ""
    http_timeout: float = 15.0
    log_level: str = "INFO"
    log_dir: Optional[Path] = None
    news_window_days: int = NEWS_WINDOW_DAYS
    blog_window_days: int = BLOG_WINDOW_DAYS
    paper_window_days: int = PAPER_WINDOW_DAYS

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        if dotenv:
            load_dotenv()
        log_dir = os.getenv("DIGEST_LOG_DIR")
        return cls(
            data_dir=Path(os.getenv("DIGEST_DATA_DIR", "data")),
            site_dir=Path(os.getenv("DIGEST_SITE_DIR", "site")),
            site_url=os.getenv("DIGEST_SITE_URL", DEFAULT_SITE_URL),
            translator=os.getenv("DIGEST_TRANSLATOR", "mymemory"),
            relay_command=os.getenv("DIGEST_RELAY_COMMAND", DEFAULT_RELAY_COMMAND),
            feishu_webhook=os.getenv("FEISHU_WEBHOOK", ""),
            http_timeout=float(os.getenv("DIGEST_HTTP_TIMEOUT", "15")),
            log_level=os.getenv("DIGEST_LOG_LEVEL", "INFO"),
            log_dir=Path(log_dir) if log_dir else None,
            paper_window_days=int(os.getenv("DIGEST_PAPER_WINDOW_DAYS", str(PAPER_WINDOW_DAYS))),
        )

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

import feedparser
import requests
from loguru import logger

from .exceptions import FeedFetchError

USER_AGENT = "Mozilla/5.0 (compatible; AI-Daily-Bot/1.0)"
FEED_ACCEPT = "application/rss+xml, application/xml, text/xml, application/atom+xml"
DEFAULT_TIMEOUT = 15.0


def fetch_url(
    url: str,
    *,
    params: Optional[Mapping[str, Any]] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> bytes:
    """
    Issue one GET and return the raw response body.

    Raises FeedFetchError on timeouts, connection errors and non-2xx statuses.
    """
    headers = {"User-Agent": USER_AGENT, "Accept": FEED_ACCEPT}
    try:
        resp = requests.get(url, params=params, headers=headers, timeout=timeout)
    except requests.Timeout as e:
        raise FeedFetchError(f"Timeout fetching {url}") from e
    except requests.RequestException as e:
        raise FeedFetchError(f"Failed to fetch {url} ({e})") from e

    if not 200 <= resp.status_code < 300:
        raise FeedFetchError(f"HTTP {resp.status_code} for {url}")
    return resp.content


def parse_feed(raw: bytes) -> Dict[str, Any]:
    """Parse raw bytes into a feed tree. Malformed input never raises."""
    feed = feedparser.parse(raw)
    if getattr(feed, "bozo", 0):
        exc = getattr(feed, "bozo_exception", None)
        logger.debug(f"Feed parsed with warnings: {exc}")
    return feed

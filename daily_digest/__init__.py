"""
daily_digest

Builds a dated daily digest out of AI news feeds, arXiv speech/audio papers
and followed blogs, renders it to static HTML/Markdown and relays a summary
card to Feishu.

Core ideas:
- Input: compiled-in RSS/Atom feeds and arXiv categories
- Process: fetch → normalize → recency filter → deduplicate → sort (newest first)
- Output: Digest (sections "news", "papers", "blogs"), snapshot JSON, site pages, chat card

Example
-------
from daily_digest import DigestBuilder, build_card

digest = DigestBuilder().build()

for name, section in digest.sections.items():
    for record in section:
        print(name, record.published, record.source, record.title)

card = build_card(digest)
"""
from .models import Digest, DigestSection, FeedRecord
from .core import BuildOptions, DigestBuilder
from .card import build_card

__all__ = [
    "Digest",
    "DigestSection",
    "FeedRecord",
    "BuildOptions",
    "DigestBuilder",
    "build_card",
]

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from loguru import logger

from .parser import parse_datetime

SECTION_NAMES = ("news", "papers", "blogs")

# JSON keys used by the dated snapshot files.
SNAPSHOT_KEYS = {
    "news": "aiNews",
    "papers": "papers",
    "blogs": "blogs",
}

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class FeedRecord:
    """
    Normalized item shared by every section of the digest.

    `published` keeps the timestamp text as the feed wrote it so that a bad
    date survives the round trip through the snapshot; `published_at` is the
    parsed view of it.
    """
    title: str
    link: str
    published: str
    summary: str
    source: str
    source_url: Optional[str] = None
    guid: Optional[str] = None
    authors: Tuple[str, ...] = ()
    category: Optional[str] = None
    pdf: Optional[str] = None
    translated_title: Optional[str] = None
    translated_summary: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.link:
            raise ValueError("FeedRecord requires a non-empty link")

    @property
    def published_at(self) -> Optional[datetime]:
        return parse_datetime(self.published)

    @property
    def display_title(self) -> str:
        return self.translated_title if self.translated_title is not None else self.title

    @property
    def display_summary(self) -> str:
        return self.translated_summary if self.translated_summary is not None else self.summary

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "title": self.title,
            "link": self.link,
            "published": self.published,
            "summary": self.summary,
            "source": self.source,
        }
        if self.source_url:
            out["sourceUrl"] = self.source_url
        if self.guid:
            out["id"] = self.guid
        if self.authors:
            out["authors"] = list(self.authors)
        if self.category:
            out["category"] = self.category
        if self.pdf:
            out["pdf"] = self.pdf
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FeedRecord":
        return cls(
            title=data.get("title") or "",
            link=data.get("link") or "",
            published=data.get("published") or "",
            summary=data.get("summary") or "",
            source=data.get("source") or "",
            source_url=data.get("sourceUrl"),
            guid=data.get("id"),
            authors=tuple(data.get("authors") or ()),
            category=data.get("category"),
            pdf=data.get("pdf"),
        )


def sort_newest_first(records: Iterable[FeedRecord]) -> List[FeedRecord]:
    """Sort by `published_at` descending; undated-by-parse records go last."""
    def key(r: FeedRecord) -> Tuple[bool, datetime]:
        dt = r.published_at
        return (dt is not None, dt or _OLDEST)

    return sorted(records, key=key, reverse=True)


@dataclass(frozen=True)
class DigestSection:
    records: Tuple[FeedRecord, ...] = ()

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[FeedRecord]:
        return iter(self.records)

    def __bool__(self) -> bool:
        return bool(self.records)


@dataclass(frozen=True)
class ArchiveEntry:
    """Per-day counts re-derived from a persisted snapshot."""
    date: str
    counts: Mapping[str, int] = field(default_factory=dict)

    @property
    def filename(self) -> str:
        return f"{self.date}.html"


@dataclass(frozen=True)
class Digest:
    """One run's dated collection of sections. Never mutated after creation."""
    date: date
    sections: Mapping[str, DigestSection] = field(default_factory=dict)

    def section(self, name: str) -> DigestSection:
        return self.sections.get(name) or DigestSection()

    def counts(self) -> Dict[str, int]:
        return {name: len(self.section(name)) for name in SECTION_NAMES}

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"date": self.date.isoformat()}
        for name in SECTION_NAMES:
            out[SNAPSHOT_KEYS[name]] = [r.to_dict() for r in self.section(name)]
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Digest":
        sections = {}
        for name in SECTION_NAMES:
            records = []
            for row in data.get(SNAPSHOT_KEYS[name]) or []:
                if not isinstance(row, Mapping) or not str(row.get("link") or "").strip():
                    logger.warning(f"[{name}] skipping snapshot row without link: {row!r:.80}")
                    continue
                records.append(FeedRecord.from_dict(row))
            sections[name] = DigestSection(tuple(records))
        return cls(date=date.fromisoformat(data["date"]), sections=sections)

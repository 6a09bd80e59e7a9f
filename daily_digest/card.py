from __future__ import annotations

from typing import Any, Dict, List

from .config import DEFAULT_SITE_URL
from .models import SECTION_NAMES, Digest, FeedRecord
from .render import SECTIONS, SITE_TITLE, format_date, truncate

CARD_ITEMS = 5
CARD_TITLE_CHARS = 40


def _md(content: str) -> Dict[str, Any]:
    return {"tag": "div", "text": {"tag": "lark_md", "content": content}}


def _line(name: str, index: int, record: FeedRecord) -> str:
    line = f"{index}. [{truncate(record.title, CARD_TITLE_CHARS)}]({record.link})"
    if name == "blogs":
        line += f" - {record.source}"
    return line


def build_card(digest: Digest, site_url: str = DEFAULT_SITE_URL) -> Dict[str, Any]:
    """
    Build the Feishu interactive card for `digest`: a header, one heading
    and one listing block per section separated by rules, and a button
    linking to the full site.
    """
    elements: List[Dict[str, Any]] = []
    for name in SECTION_NAMES:
        meta = SECTIONS[name]
        records = list(digest.section(name))
        elements.append(_md(f"**{meta.heading}** ({len(records)} {meta.unit})"))
        if records:
            listing = "\n".join(_line(name, i, r) for i, r in enumerate(records[:CARD_ITEMS], start=1))
            if len(records) > CARD_ITEMS:
                listing += f"\n_...还有 {len(records) - CARD_ITEMS} {meta.unit}_"
            elements.append(_md(listing))
        else:
            elements.append(_md(meta.card_placeholder))
        elements.append({"tag": "hr"})

    elements.append({
        "tag": "action",
        "actions": [{
            "tag": "button",
            "text": {"tag": "plain_text", "content": "📖 查看完整日报"},
            "type": "primary",
            "url": site_url,
        }],
    })

    return {
        "config": {"wide_screen_mode": True},
        "header": {
            "title": {"tag": "plain_text", "content": f"{SITE_TITLE} - {format_date(digest.date)}"},
            "template": "blue",
        },
        "elements": elements,
    }

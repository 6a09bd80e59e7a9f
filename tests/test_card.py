from datetime import date

from conftest import make_record

from daily_digest.card import build_card
from daily_digest.models import Digest, DigestSection


def test_card_layout(sample_digest):
    card = build_card(sample_digest, "https://site.example/")

    assert card["header"]["title"]["content"] == "🎤 AI 语音日报 - 2026年10月19日星期一"
    assert card["header"]["template"] == "blue"

    elements = card["elements"]
    # heading + listing + hr per section, then the action button
    assert len(elements) == 10
    assert elements[0]["text"]["content"] == "**📰 AI 前沿资讯** (2 条)"
    assert elements[1]["text"]["content"] == "1. [News <one>](https://n/1)\n2. [News two](https://n/2)"
    assert elements[2] == {"tag": "hr"}
    assert elements[7]["text"]["content"] == "_近期暂无更新_"

    button = elements[-1]["actions"][0]
    assert button["url"] == "https://site.example/"
    assert button["type"] == "primary"


def test_card_truncates_and_reports_overflow():
    blogs = tuple(
        make_record(f"https://b/{i}", title="x" * 60, source="Blog") for i in range(7)
    )
    digest = Digest(date=date(2026, 10, 19), sections={"blogs": DigestSection(blogs)})
    listing = build_card(digest)["elements"][7]["text"]["content"]

    lines = listing.split("\n")
    assert len(lines) == 6
    assert lines[0] == f"1. [{'x' * 40}...](https://b/0) - Blog"
    assert lines[-1] == "_...还有 2 篇_"

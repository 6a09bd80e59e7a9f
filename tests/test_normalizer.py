from datetime import timedelta

from conftest import ATOM_XML, RSS_XML

from daily_digest.fetcher import parse_feed
from daily_digest.normalizer import feed_kind, normalize_feed
from daily_digest.parser import parse_entry, strip_html


def test_rss_records_are_plain_strings(now):
    records = normalize_feed(parse_feed(RSS_XML), "Example News", now=now)

    assert [r.link for r in records] == [
        "https://news.example.com/a",
        "https://news.example.com/old",
        "https://news.example.com/undated",
    ]
    for r in records:
        assert isinstance(r.title, str)
        assert isinstance(r.link, str)
        assert r.source == "Example News"


def test_rss_summary_is_stripped_of_tags(now):
    first = normalize_feed(parse_feed(RSS_XML), "Example News", now=now)[0]
    assert "<" not in first.summary
    assert first.summary.startswith("New models shipped")


def test_rss_undated_item_is_treated_as_now(now):
    records = normalize_feed(parse_feed(RSS_XML), "Example News", now=now)
    undated = [r for r in records if r.title == "Undated note"][0]
    assert undated.published_at == now


def test_rss_item_without_link_is_dropped(now):
    titles = [r.title for r in normalize_feed(parse_feed(RSS_XML), "Example News", now=now)]
    assert "No link here" not in titles


def test_limit_caps_entries(now):
    records = normalize_feed(parse_feed(RSS_XML), "Example News", limit=1, now=now)
    assert len(records) == 1


def test_atom_link_resolution(now):
    feed = parse_feed(ATOM_XML)
    assert feed_kind(feed) == "atom"
    records = normalize_feed(feed, "Example Blog", now=now)

    assert [r.link for r in records] == [
        "https://blog.example.com/posts/1",
        "https://blog.example.com/files/2.mp3",
        "https://blog.example.com/posts/3",
    ]


def test_atom_published_falls_back_to_updated(now):
    records = normalize_feed(parse_feed(ATOM_XML), "Example Blog", now=now)
    assert records[0].published_at == now.replace(day=18, hour=10)
    assert records[1].published_at == now.replace(day=17, hour=9)


def test_atom_summary_uses_content_when_missing(now):
    records = normalize_feed(parse_feed(ATOM_XML), "Example Blog", now=now)
    assert records[0].summary == "Short summary."
    assert records[1].summary == "Body text"


def test_unrecognized_document_yields_nothing(now):
    feed = parse_feed(b"<html><body><p>not a feed</p></body></html>")
    assert feed_kind(feed) is None
    assert normalize_feed(feed, "Broken", now=now) == []


def test_structured_title_and_href_link(now):
    entry = {
        "title": {"type": "text", "value": " Typed title "},
        "link": {"href": "https://x/a"},
        "pubDate": "Mon, 19 Oct 2026 08:00:00 GMT",
    }
    parsed = parse_entry(entry, atom=False, now=now)
    assert parsed["title"] == "Typed title"
    assert parsed["link"] == "https://x/a"
    assert parsed["published"] == "Mon, 19 Oct 2026 08:00:00 GMT"


def test_atom_unmarked_link_counts_as_alternate(now):
    entry = {
        "links": [{"rel": "self", "href": "https://x/self"}, {"href": "https://x/page"}],
        "id": "urn:x",
    }
    assert parse_entry(entry, atom=True, now=now)["link"] == "https://x/page"


def test_missing_title_defaults_to_untitled(now):
    assert parse_entry({"link": "https://x/a"}, atom=False, now=now)["title"] == "Untitled"


def test_strip_html_truncates():
    text = "<p>" + "a" * 300 + "</p>"
    assert strip_html(text) == "a" * 200
    assert strip_html("<b>x</b> &amp; y", limit=0) == "x & y"


def test_undated_timestamp_is_iso(now):
    parsed = parse_entry({"link": "https://x/a"}, atom=True, now=now + timedelta(hours=1))
    assert parsed["published"] == "2026-10-19T13:00:00+00:00"

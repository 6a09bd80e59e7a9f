from datetime import date, datetime, timezone

import pytest

from daily_digest.models import Digest, DigestSection, FeedRecord

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)

RSS_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Example News</title>
    <link>https://news.example.com/</link>
    <description>Example</description>
    <item>
      <title>Model release roundup</title>
      <link>https://news.example.com/a</link>
      <pubDate>Mon, 19 Oct 2026 08:00:00 GMT</pubDate>
      <description>&lt;p&gt;New &lt;b&gt;models&lt;/b&gt; shipped &amp;amp; more.&lt;/p&gt;</description>
    </item>
    <item>
      <title>Old story</title>
      <link>https://news.example.com/old</link>
      <pubDate>Thu, 01 Oct 2026 08:00:00 GMT</pubDate>
      <description>Stale.</description>
    </item>
    <item>
      <title>Undated note</title>
      <link>https://news.example.com/undated</link>
      <description>No date at all.</description>
    </item>
    <item>
      <title>No link here</title>
      <description>Dropped.</description>
    </item>
  </channel>
</rss>
"""

ATOM_XML = b"""<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Example Blog</title>
  <id>urn:example:blog</id>
  <updated>2026-10-18T10:00:00Z</updated>
  <entry>
    <title type="text">Alternate wins</title>
    <id>urn:example:1</id>
    <link rel="self" href="https://blog.example.com/self/1"/>
    <link rel="alternate" href="https://blog.example.com/posts/1"/>
    <published>2026-10-18T10:00:00Z</published>
    <updated>2026-10-18T11:00:00Z</updated>
    <summary>Short summary.</summary>
  </entry>
  <entry>
    <title>First link fallback</title>
    <id>urn:example:2</id>
    <link rel="enclosure" href="https://blog.example.com/files/2.mp3"/>
    <updated>2026-10-17T09:00:00Z</updated>
    <content type="html">&lt;p&gt;Body &lt;i&gt;text&lt;/i&gt;&lt;/p&gt;</content>
  </entry>
  <entry>
    <title>Id fallback</title>
    <id>https://blog.example.com/posts/3</id>
    <updated>2026-10-16T09:00:00Z</updated>
  </entry>
</feed>
"""


def arxiv_xml(*entries: str) -> bytes:
    body = "".join(entries)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<feed xmlns="http://www.w3.org/2005/Atom"><title>arXiv Query</title>'
        '<id>http://arxiv.org/api/query</id><updated>2026-10-19T00:00:00Z</updated>'
        f"{body}</feed>"
    ).encode("utf-8")


def arxiv_entry(paper_id: str, published: str, title: str = "A  speech\n  paper") -> str:
    return (
        "<entry>"
        f"<id>http://arxiv.org/abs/{paper_id}</id>"
        f"<published>{published}</published>"
        f"<updated>{published}</updated>"
        f"<title>{title}</title>"
        "<summary>  We   study\n speech. </summary>"
        "<author><name>Ada</name></author><author><name>Bo</name></author>"
        "<author><name>Cy</name></author><author><name>Di</name></author>"
        "</entry>"
    )


def make_record(link="https://x/a", title="Title", published="2026-10-19T08:00:00Z", **kwargs):
    kwargs.setdefault("summary", "")
    kwargs.setdefault("source", "Example")
    return FeedRecord(title=title, link=link, published=published, **kwargs)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def sample_digest():
    return Digest(
        date=date(2026, 10, 19),
        sections={
            "news": DigestSection((
                make_record("https://n/1", "News <one>", summary="First & foremost"),
                make_record("https://n/2", "News two"),
            )),
            "papers": DigestSection((
                make_record(
                    "http://arxiv.org/abs/2610.00001v1",
                    "Paper one",
                    source="arXiv",
                    authors=("Ada", "Bo"),
                    category="eess.AS",
                    pdf="http://arxiv.org/pdf/2610.00001v1.pdf",
                ),
            )),
            "blogs": DigestSection(()),
        },
    )

from datetime import date

from conftest import arxiv_entry, arxiv_xml

from daily_digest.config import ARXIV_API
from daily_digest.exceptions import FeedFetchError
from daily_digest.papers import fetch_papers, pdf_url, query_category

TODAY = date(2026, 10, 19)


class FakeArxiv:
    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def __call__(self, url, params=None, timeout=None):
        self.calls.append((url, dict(params or {})))
        category = params["search_query"].split(":", 1)[1]
        result = self.responses[category]
        if isinstance(result, Exception):
            raise result
        return result


def test_query_category_maps_entries():
    fake = FakeArxiv({"eess.AS": arxiv_xml(arxiv_entry("2610.00001v1", "2026-10-19T01:00:00Z"))})
    papers = query_category("eess.AS", max_results=5, fetch=fake)

    url, params = fake.calls[0]
    assert url == ARXIV_API
    assert params["sortBy"] == "submittedDate"
    assert params["sortOrder"] == "descending"
    assert params["max_results"] == 5

    paper = papers[0]
    assert paper.link == "http://arxiv.org/abs/2610.00001v1"
    assert paper.guid == paper.link
    assert paper.title == "A speech paper"
    assert paper.summary == "We study speech."
    assert paper.authors == ("Ada", "Bo", "Cy")
    assert paper.category == "eess.AS"
    assert paper.pdf == "http://arxiv.org/pdf/2610.00001v1.pdf"


def test_rolling_window_and_exact_day():
    xml = arxiv_xml(
        arxiv_entry("2610.00001v1", "2026-10-19T01:00:00Z"),
        arxiv_entry("2610.00002v1", "2026-10-18T01:00:00Z"),
        arxiv_entry("2610.00003v1", "2026-10-12T01:00:00Z"),
    )
    fake = FakeArxiv({"eess.AS": xml})

    rolling = fetch_papers(["eess.AS"], window_days=1, today=TODAY, fetch=fake)
    exact = fetch_papers(["eess.AS"], window_days=0, today=TODAY, fetch=fake)

    assert [p.guid for p in rolling] == [
        "http://arxiv.org/abs/2610.00001v1",
        "http://arxiv.org/abs/2610.00002v1",
    ]
    assert [p.guid for p in exact] == ["http://arxiv.org/abs/2610.00001v1"]


def test_dedup_across_categories_and_failed_category_skipped():
    shared = arxiv_entry("2610.00001v1", "2026-10-19T01:00:00Z")
    fake = FakeArxiv({
        "eess.AS": arxiv_xml(shared),
        "cs.SD": arxiv_xml(shared, arxiv_entry("2610.00009v1", "2026-10-19T02:00:00Z")),
        "cs.CL": FeedFetchError("HTTP 503"),
    })
    papers = fetch_papers(["eess.AS", "cs.CL", "cs.SD"], window_days=1, today=TODAY, fetch=fake)

    assert len(papers) == 2
    assert papers[0].category == "eess.AS"


def test_pdf_url():
    assert pdf_url("http://arxiv.org/abs/1234.5678v2") == "http://arxiv.org/pdf/1234.5678v2.pdf"

from conftest import make_record

from daily_digest import translators
from daily_digest.models import Digest, DigestSection
from daily_digest.translators import (
    MyMemoryTranslator,
    NullTranslator,
    build_translator,
    needs_translation,
    short_summary,
    translate_digest,
)


class UpperTranslator:
    def translate(self, text):
        return text.upper()


class BrokenTranslator:
    def translate(self, text):
        raise RuntimeError("quota exceeded")


def test_needs_translation():
    assert needs_translation("Hello world")
    assert not needs_translation("a")
    assert not needs_translation("")
    assert not needs_translation("这是中文 text")


def test_short_summary_prefers_sentence_end():
    text = "First sentence is here. " * 5 + "tail without end " * 10
    out = short_summary(text, 120)
    assert out.endswith(".")
    assert len(out) <= 120


def test_short_summary_word_boundary_and_short_input():
    assert short_summary("  a   b  ") == "a b"
    out = short_summary("word " * 100, 50)
    assert out.endswith("...")
    assert not out[:-3].endswith(" ")


class FakeResponse:
    def __init__(self, payload):
        self._payload = payload

    def json(self):
        return self._payload


def test_mymemory_success(monkeypatch):
    calls = []

    def fake_get(url, params=None, timeout=None):
        calls.append(params)
        return FakeResponse({"responseStatus": 200, "responseData": {"translatedText": "你好世界"}})

    monkeypatch.setattr(translators.requests, "get", fake_get)
    assert MyMemoryTranslator().translate("Hello world") == "你好世界"
    assert calls[0]["langpair"] == "en|zh"


def test_mymemory_falls_back_on_error(monkeypatch):
    def fake_get(url, params=None, timeout=None):
        raise translators.requests.ConnectionError("down")

    monkeypatch.setattr(translators.requests, "get", fake_get)
    assert MyMemoryTranslator().translate("Hello world") == "Hello world"

    monkeypatch.setattr(
        translators.requests, "get",
        lambda *a, **k: FakeResponse({"responseStatus": 429, "responseData": {"translatedText": "x"}}),
    )
    assert MyMemoryTranslator().translate("Hello world") == "Hello world"


def test_build_translator_defaults():
    assert isinstance(build_translator("none"), NullTranslator)
    assert isinstance(build_translator(None), NullTranslator)
    assert isinstance(build_translator("mymemory"), MyMemoryTranslator)


def test_translate_digest(sample_digest):
    out = translate_digest(sample_digest, UpperTranslator())

    news = out.section("news").records
    assert news[0].translated_title == "NEWS <ONE>"
    assert news[0].translated_summary == "FIRST & FOREMOST"
    paper = out.section("papers").records[0]
    assert paper.translated_title is None
    assert paper.display_title == "Paper one"
    # the source digest is untouched
    assert sample_digest.section("news").records[0].translated_title is None


def test_translate_digest_caps_and_survives_failures():
    records = tuple(make_record(f"https://n/{i}", f"Title {i}") for i in range(20))
    digest = Digest(date=records[0].published_at.date(), sections={"news": DigestSection(records)})

    out = translate_digest(digest, BrokenTranslator())
    assert len(out.section("news")) == 15
    assert out.section("news").records[0].display_title == "Title 0"

from __future__ import annotations

import dataclasses
import os
import re
from typing import Dict, List, Optional, Protocol

import requests
from loguru import logger

from .exceptions import TranslationError
from .models import Digest, DigestSection, FeedRecord

MYMEMORY_API = "https://api.mymemory.translated.net/get"
MAX_INPUT_CHARS = 500
TRANSLATE_LIMIT = 15

_CJK_RE = re.compile(r"[\u4e00-\u9fa5]")
_WS_RE = re.compile(r"\s+")
_SENTENCE_ENDS = (".", "。", "!", "！", "?", "？")


class Translator(Protocol):
    def translate(self, text: str) -> str:  # pragma: no cover - interface
        ...


def needs_translation(text: str) -> bool:
    """Skip very short text and text that is already mostly Chinese."""
    if not text or len(text) < 2:
        return False
    return len(_CJK_RE.findall(text)) <= len(text) * 0.3


def short_summary(text: str, max_len: int = 200) -> str:
    """
    Collapse whitespace and shorten to `max_len`, preferring to end on a
    full sentence, then on a word boundary.
    """
    if not text:
        return ""
    summary = _WS_RE.sub(" ", text).strip()
    if len(summary) <= max_len:
        return summary

    truncated = summary[:max_len]
    last_period = max(truncated.rfind(p) for p in _SENTENCE_ENDS)
    if last_period > max_len * 0.5:
        return truncated[: last_period + 1]

    last_space = truncated.rfind(" ")
    if last_space > max_len * 0.5:
        return truncated[:last_space] + "..."
    return truncated + "..."


class NullTranslator:
    def translate(self, text: str) -> str:
        return text


class MyMemoryTranslator:
    """Free MyMemory API, English → Chinese."""

    def __init__(self, *, timeout_sec: float = 15.0, langpair: str = "en|zh") -> None:
        self._timeout = timeout_sec
        self._langpair = langpair

    def translate(self, text: str) -> str:
        if not needs_translation(text):
            return text
        try:
            resp = requests.get(
                MYMEMORY_API,
                params={"q": text[:MAX_INPUT_CHARS], "langpair": self._langpair},
                timeout=self._timeout,
            )
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Translation request failed: {e}")
            return text
        translated = (data.get("responseData") or {}).get("translatedText")
        if data.get("responseStatus") == 200 and translated:
            return translated
        return text


class OpenAITranslator:
    def __init__(self, *, api_key: Optional[str], model: Optional[str], timeout_sec: float) -> None:
        try:
            from openai import OpenAI  # type: ignore
        except ImportError as e:  # pragma: no cover - optional dep
            raise TranslationError("openai package is required for OpenAI translation.") from e
        key = api_key or os.getenv("OPENAI_API_KEY")
        if not key:
            raise TranslationError("OPENAI_API_KEY not set.")
        self._client = OpenAI(api_key=key)
        self._model = model or os.getenv("OPENAI_MODEL", "gpt-4o-mini")
        self._timeout = timeout_sec

    def translate(self, text: str) -> str:
        if not needs_translation(text):
            return text
        try:
            resp = self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {
                        "role": "system",
                        "content": "Translate the user's text into Simplified Chinese. Return only the translation.",
                    },
                    {"role": "user", "content": text[:MAX_INPUT_CHARS]},
                ],
                timeout=self._timeout,
            )
            content = resp.choices[0].message.content if resp and resp.choices else None
        except Exception as e:  # noqa: BLE001
            logger.warning(f"OpenAI translation failed: {e}")
            return text
        return content.strip() if content else text


class GeminiTranslator:
    def __init__(self, *, api_key: Optional[str], model: Optional[str], timeout_sec: float) -> None:
        try:
            import google.generativeai as genai  # type: ignore
        except ImportError as e:  # pragma: no cover - optional dep
            raise TranslationError("google-generativeai package is required for Gemini translation.") from e
        key = api_key or os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY")
        if not key:
            raise TranslationError("GOOGLE_API_KEY (or GEMINI_API_KEY) not set.")
        genai.configure(api_key=key)
        self._model_name = model or os.getenv("GEMINI_MODEL", "gemini-1.5-flash")
        self._timeout = timeout_sec
        self._genai = genai

    def translate(self, text: str) -> str:
        if not needs_translation(text):
            return text
        prompt = f"请把下面的文字翻译成简体中文，只输出译文：\n{text[:MAX_INPUT_CHARS]}"
        try:
            model = self._genai.GenerativeModel(self._model_name)
            resp = model.generate_content(prompt, request_options={"timeout": self._timeout})
            out = getattr(resp, "text", None)
        except Exception as e:  # noqa: BLE001
            logger.warning(f"Gemini translation failed: {e}")
            return text
        return str(out).strip() if out else text


def build_translator(provider: Optional[str], *, timeout_sec: float = 15.0) -> Translator:
    provider = (provider or "").lower()
    if provider == "mymemory":
        return MyMemoryTranslator(timeout_sec=timeout_sec)
    if provider == "openai":
        return OpenAITranslator(api_key=os.getenv("OPENAI_API_KEY"), model=None, timeout_sec=timeout_sec)
    if provider in {"gemini", "google", "googleai"}:
        return GeminiTranslator(
            api_key=os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY"),
            model=None,
            timeout_sec=timeout_sec,
        )
    # "none" or unknown provider → no-op
    return NullTranslator()


def _safe(translator: Translator, text: str) -> str:
    try:
        return translator.translate(text) or text
    except Exception as e:  # noqa: BLE001
        logger.warning(f"Translation failed, keeping source text: {e}")
        return text


def translate_section(
    records: DigestSection,
    translator: Translator,
    *,
    titles: bool,
    limit: int = TRANSLATE_LIMIT,
) -> DigestSection:
    """Translate the first `limit` records; the rest are dropped from the view."""
    out: List[FeedRecord] = []
    for record in list(records)[:limit]:
        changes: Dict[str, str] = {
            "translated_summary": _safe(translator, short_summary(record.summary)),
        }
        if titles:
            changes["translated_title"] = _safe(translator, record.title)
        out.append(dataclasses.replace(record, **changes))
    return DigestSection(tuple(out))


def translate_digest(digest: Digest, translator: Translator) -> Digest:
    """
    Return a display copy of `digest`: news get translated titles and
    summaries, papers keep English titles with translated summaries, blogs
    are passed through.
    """
    logger.info("Translating news and paper summaries")
    sections = dict(digest.sections)
    sections["news"] = translate_section(digest.section("news"), translator, titles=True)
    sections["papers"] = translate_section(digest.section("papers"), translator, titles=False)
    sections["blogs"] = digest.section("blogs")
    return Digest(date=digest.date, sections=sections)

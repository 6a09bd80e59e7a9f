from __future__ import annotations

import argparse
import json
from datetime import datetime, timezone
from typing import List, Optional

from loguru import logger

from .card import build_card
from .config import Settings
from .core import DigestBuilder
from .exceptions import PublishError, TranslationError
from .logging import setup_logging
from .models import Digest
from .publisher import latest_snapshot, publish_site, scan_history, send_card, write_snapshot
from .render import render_message
from .translators import NullTranslator, build_translator, translate_digest

CARD_BEGIN = "--- CARD_JSON ---"
CARD_END = "--- END_CARD ---"


def generate(settings: Settings, *, translate: bool = True, now: Optional[datetime] = None,
             builder: Optional[DigestBuilder] = None) -> Digest:
    """Build today's digest, persist the snapshot and write the static site."""
    now = now or datetime.now(tz=timezone.utc)
    logger.info("=" * 50)
    logger.info("Generating daily digest")
    logger.info("=" * 50)

    builder = builder or DigestBuilder.from_settings(settings)
    digest = builder.build(now)
    write_snapshot(digest, settings.data_dir)

    translator = NullTranslator()
    if translate:
        try:
            translator = build_translator(settings.translator, timeout_sec=settings.http_timeout)
        except TranslationError as e:
            logger.warning(f"Translator unavailable, keeping source text: {e}")
    display = translate_digest(digest, translator)

    history = scan_history(settings.data_dir)
    publish_site(display, site_dir=settings.site_dir, history=history)
    counts = digest.counts()
    logger.info(f"Digest {digest.date}: news={counts['news']} papers={counts['papers']} blogs={counts['blogs']}")
    return digest


def _latest(settings: Settings) -> Optional[Digest]:
    try:
        digest = latest_snapshot(settings.data_dir)
    except (OSError, ValueError, KeyError, TypeError) as e:
        logger.error(f"Cannot load latest snapshot from {settings.data_dir}: {e}")
        return None
    if digest is None:
        logger.error(f"No snapshot found in {settings.data_dir}")
    return digest


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="daily-digest",
        description="Aggregate AI news, arXiv speech papers and blog posts into a daily digest.",
    )
    sub = parser.add_subparsers(dest="command")

    gen = sub.add_parser("generate", help="fetch sources and write snapshot + site (default)")
    gen.add_argument("--no-translate", action="store_true", help="skip the translation step")
    gen.add_argument("--send", action="store_true", help="relay the chat card after generating")

    sub.add_parser("card", help="print the chat card JSON of the latest snapshot")
    sub.add_parser("message", help="print the short Markdown chat message of the latest snapshot")
    sub.add_parser("send", help="relay the chat card of the latest snapshot")
    return parser


def main(argv: Optional[List[str]] = None, settings: Optional[Settings] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level, settings.log_dir)

    command = args.command or "generate"
    if command == "generate":
        digest = generate(settings, translate=not getattr(args, "no_translate", False))
        if not getattr(args, "send", False):
            return 0
    else:
        digest = _latest(settings)
        if digest is None:
            return 1

    if command == "message":
        print(render_message(digest))
        return 0

    card = build_card(digest, settings.site_url)
    if command == "card":
        print(CARD_BEGIN)
        print(json.dumps(card, ensure_ascii=False))
        print(CARD_END)
        return 0

    try:
        send_card(card, settings)
    except PublishError as e:
        logger.error(f"Publishing the chat card failed: {e}")
        return 1
    return 0

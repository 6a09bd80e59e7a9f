from __future__ import annotations

import json
import shlex
import subprocess
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests
from loguru import logger

from .config import Settings
from .exceptions import PublishError
from .models import ArchiveEntry, Digest
from .render import render_html, render_index, render_markdown


def dated_path(root: Path, day: date, ext: str) -> Path:
    return Path(root) / f"{day.isoformat()}.{ext}"


def write_snapshot(digest: Digest, data_dir: Path) -> Path:
    data_dir = Path(data_dir)
    data_dir.mkdir(parents=True, exist_ok=True)
    path = dated_path(data_dir, digest.date, "json")
    path.write_text(json.dumps(digest.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
    logger.info(f"Snapshot saved: {path}")
    return path


def load_snapshot(path: Path) -> Digest:
    with open(path, "r", encoding="utf-8") as f:
        return Digest.from_dict(json.load(f))


def _snapshot_files(data_dir: Path) -> List[Path]:
    files = []
    for path in Path(data_dir).glob("*.json"):
        try:
            date.fromisoformat(path.stem)
        except ValueError:
            continue
        files.append(path)
    return sorted(files, key=lambda p: p.stem, reverse=True)


def latest_snapshot(data_dir: Path) -> Optional[Digest]:
    files = _snapshot_files(data_dir)
    if not files:
        return None
    return load_snapshot(files[0])


def scan_history(data_dir: Path) -> List[ArchiveEntry]:
    """
    Re-derive per-day counts from every persisted snapshot, newest first.
    Unreadable snapshots are skipped.
    """
    history: List[ArchiveEntry] = []
    for path in _snapshot_files(data_dir):
        try:
            digest = load_snapshot(path)
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Skipping unreadable snapshot {path}: {e}")
            continue
        history.append(ArchiveEntry(date=path.stem, counts=digest.counts()))
    return history


def publish_site(
    digest: Digest,
    *,
    site_dir: Path,
    history: List[ArchiveEntry],
    generated_at: Optional[datetime] = None,
) -> Dict[str, Path]:
    """Write `{site}/{date}.html`, `{site}/{date}.md` and regenerate `{site}/index.html`."""
    site_dir = Path(site_dir)
    site_dir.mkdir(parents=True, exist_ok=True)

    html_path = dated_path(site_dir, digest.date, "html")
    html_path.write_text(render_html(digest, history, generated_at=generated_at), encoding="utf-8")
    logger.info(f"HTML written: {html_path}")

    md_path = dated_path(site_dir, digest.date, "md")
    md_path.write_text(render_markdown(digest), encoding="utf-8")
    logger.info(f"Markdown written: {md_path}")

    index_path = site_dir / "index.html"
    index_path.write_text(render_index(history), encoding="utf-8")
    logger.info(f"Archive index updated: {index_path}")
    return {"html": html_path, "markdown": md_path, "index": index_path}


def send_via_webhook(card: Dict[str, Any], webhook: str, *, timeout: float = 15.0) -> None:
    payload = {"msg_type": "interactive", "card": card}
    try:
        resp = requests.post(webhook, json=payload, timeout=timeout)
    except requests.RequestException as e:
        raise PublishError(f"Webhook request failed: {e}") from e
    if not 200 <= resp.status_code < 300:
        raise PublishError(f"Webhook returned HTTP {resp.status_code}")
    try:
        data = resp.json()
    except ValueError:
        data = {}
    code = data.get("code", data.get("StatusCode", 0))
    if code != 0:
        raise PublishError(f"Webhook rejected card: {data}")
    logger.info("Card delivered via webhook")


def send_via_relay(card: Dict[str, Any], command: str) -> str:
    """
    Hand the card to the external relay CLI as `--card <json>`.
    A non-zero exit raises PublishError with the relay's stderr.
    """
    args = shlex.split(command) + ["--card", json.dumps(card, ensure_ascii=False)]
    try:
        proc = subprocess.run(args, capture_output=True, text=True, check=False)
    except OSError as e:
        raise PublishError(f"Cannot start relay {args[0]!r}: {e}") from e
    if proc.returncode != 0:
        raise PublishError(proc.stderr.strip() or f"Exit code {proc.returncode}")
    logger.info("Card delivered via relay")
    return proc.stdout


def send_card(card: Dict[str, Any], settings: Settings) -> None:
    if settings.feishu_webhook:
        send_via_webhook(card, settings.feishu_webhook, timeout=settings.http_timeout)
    else:
        send_via_relay(card, settings.relay_command)

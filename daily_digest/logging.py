"""Logging setup (loguru)."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}"


def setup_logging(level: str = "INFO", log_dir: Optional[Path] = None) -> None:
    """
    Replace loguru's default sink with a stderr sink at `level`, plus a
    daily-rotated file under `log_dir` when one is given.
    """
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT)

    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_dir / "digest_{time:YYYY-MM-DD}.log",
            rotation="00:00",
            retention="30 days",
            encoding="utf-8",
            level="INFO",
            format=LOG_FORMAT,
        )

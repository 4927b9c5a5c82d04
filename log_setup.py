"""Logging setup shared by the web app and the CLI.

Call configure() once at startup; modules use logging.getLogger(__name__).

Output:
  console       — configured level, one line per record
  logs/app.log  — DEBUG, includes file:line, rotating (5 × 5 MB)
"""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

LOGS_DIR = Path(__file__).parent / "logs"

_CONSOLE_FMT = "%(asctime)s  %(levelname)-7s  %(name)s — %(message)s"
_FILE_FMT    = "%(asctime)s  %(levelname)-7s  %(name)-16s  %(filename)s:%(lineno)d — %(message)s"
_DATE_FMT    = "%Y-%m-%d %H:%M:%S"

_QUIET = ("urllib3", "httpx", "httpcore", "werkzeug", "openai", "anthropic")


def configure(level: str = "INFO", logs_dir: Optional[Path] = None) -> None:
    """Attach console + rotating file handlers to the root logger (idempotent)."""
    root = logging.getLogger()
    if root.handlers:
        return

    logs_dir = logs_dir or LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)
    root.setLevel(logging.DEBUG)

    console = logging.StreamHandler()
    console.setLevel(getattr(logging, level.upper(), logging.INFO))
    console.setFormatter(logging.Formatter(_CONSOLE_FMT, datefmt=_DATE_FMT))
    root.addHandler(console)

    file_handler = logging.handlers.RotatingFileHandler(
        logs_dir / "app.log",
        maxBytes=5 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(_FILE_FMT, datefmt=_DATE_FMT))
    root.addHandler(file_handler)

    for name in _QUIET:
        logging.getLogger(name).setLevel(logging.WARNING)

"""Logging setup for skyflap."""

from __future__ import annotations

import json
import logging
import sys
from collections import deque
from datetime import datetime, timezone
from typing import List


class NdjsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict = {
            "ts": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        data = getattr(record, "data", None)
        if data:
            entry["data"] = data
        return json.dumps(entry, default=str)


class HumanFormatter(logging.Formatter):
    """Compact one-line format for a redirected stderr."""

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.now().strftime("%H:%M:%S")
        name = record.name.replace("skyflap.", "")
        msg = record.getMessage()
        data = getattr(record, "data", None)
        suffix = f"  {json.dumps(data, default=str)}" if data else ""
        return f"{ts} [{record.levelname[0]}] {name}: {msg}{suffix}"


class NoticeHandler(logging.Handler):
    """
    Keeps the last few warnings in memory so the fullscreen frontend can
    show them in its HUD instead of writing over the playfield.
    """

    def __init__(self, capacity: int = 5) -> None:
        super().__init__(logging.WARNING)
        self._notices: deque = deque(maxlen=capacity)

    def emit(self, record: logging.LogRecord) -> None:
        self._notices.append(record.getMessage())

    def recent(self) -> List[str]:
        return list(self._notices)

    def latest(self) -> str:
        return self._notices[-1] if self._notices else ""


notices = NoticeHandler()


def setup_logging(level: str = "warning", log_file: str | None = None,
                  stream=None) -> None:
    """
    Configure the skyflap root logger.

    Warnings always reach the in-game notice line. With a log file,
    records also go there as NDJSON. Otherwise they go to stderr in the
    human format, but only when stderr is redirected: a terminal stderr
    is the game screen.
    """
    root = logging.getLogger("skyflap")
    root.setLevel(getattr(logging, level.upper(), logging.WARNING))
    root.handlers.clear()
    root.addHandler(notices)

    if log_file:
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setFormatter(NdjsonFormatter())
        root.addHandler(fh)
        return

    stream = stream if stream is not None else sys.stderr
    if not stream.isatty():
        console = logging.StreamHandler(stream)
        console.setFormatter(HumanFormatter())
        root.addHandler(console)


def get_logger(name: str) -> logging.Logger:
    """Return a child logger under the skyflap namespace."""
    return logging.getLogger(f"skyflap.{name}")

"""Process-wide logging setup."""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from typing import Optional

_handler: Optional[logging.Handler] = None


class KeyValueFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="seconds")
        line = f"{ts} level={record.levelname} logger={record.name} msg={record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(level: str = "INFO") -> None:
    global _handler

    lvl = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(lvl)

    # repeated app factories (tests, reloader) replace the handler instead of stacking
    if _handler is not None:
        root.removeHandler(_handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(lvl)
    handler.setFormatter(KeyValueFormatter())
    root.addHandler(handler)
    _handler = handler

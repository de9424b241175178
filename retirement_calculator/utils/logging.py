from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone

# Context variables for structured logging
request_id_var: ContextVar[str] = ContextVar("request_id", default="-")
lifestyle_var: ContextVar[str] = ContextVar("lifestyle", default="-")


class ContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        record.lifestyle = lifestyle_var.get()
        return True


class SimpleStructuredFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")
        line = (
            f"{ts} level={record.levelname} logger={record.name} "
            f"request_id={getattr(record, 'request_id', '-')} lifestyle={getattr(record, 'lifestyle', '-')} "
            f"msg={record.getMessage()}"
        )
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def setup_logging(level: str = "INFO") -> None:
    lvl = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(lvl)

    # Replace our own handler only (avoid duplicate logs when the app factory runs twice)
    root.handlers = [h for h in root.handlers if not getattr(h, "_structured", False)]

    handler = logging.StreamHandler(sys.stdout)
    handler._structured = True
    handler.setLevel(lvl)
    handler.addFilter(ContextFilter())
    handler.setFormatter(SimpleStructuredFormatter())

    root.addHandler(handler)


def set_log_context(*, request_id: str, lifestyle: str = "-") -> None:
    request_id_var.set(request_id)
    lifestyle_var.set(lifestyle)


def set_lifestyle(lifestyle_type: str) -> None:
    lifestyle_var.set(lifestyle_type)

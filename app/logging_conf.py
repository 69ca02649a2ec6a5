"""JSON-lines logging for the greeting service and the smoke runner."""
from __future__ import annotations

import json
import logging
import os
import sys
from datetime import UTC, datetime
from logging import LogRecord
from typing import Any

_DEFAULT_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Attributes every LogRecord carries; anything else arrived through `extra=`.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

_SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


class JsonFormatter(logging.Formatter):
    """One JSON object per line, stamped with the emitting component.

    Fields from `extra=` (or a dict message) are merged in but never replace
    ts/level/logger/component.
    """

    def __init__(self, component: str = "service") -> None:
        super().__init__()
        self.component = component

    def format(self, record: LogRecord) -> str:  # type: ignore[override]
        payload: dict[str, Any] = {
            "ts": datetime.now(UTC).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "component": self.component,
        }
        if isinstance(record.msg, dict):
            fields = dict(record.msg)
        else:
            fields = {"message": record.getMessage()}
        fields.update(
            (k, v) for k, v in record.__dict__.items() if k not in _RECORD_ATTRS
        )
        for key, value in fields.items():
            payload.setdefault(key, value)

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(
    level: str | int = _DEFAULT_LEVEL,
    *,
    component: str = "service",
    align_server_loggers: bool = True,
) -> None:
    """Attach a single stdout JSON handler to the root logger.

    No-op when the root logger already has handlers. With
    `align_server_loggers`, uvicorn's loggers drop their own handlers and
    propagate to root so access lines come out as JSON too.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(JsonFormatter(component))
    root.setLevel(level)
    root.addHandler(handler)

    if not align_server_loggers:
        return
    for name in _SERVER_LOGGERS:
        lg = logging.getLogger(name)
        lg.setLevel(level)
        lg.propagate = True
        for h in list(lg.handlers):
            lg.removeHandler(h)


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(name if name else __name__)

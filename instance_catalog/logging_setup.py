"""
App-layer logging bootstrap.
Initializes a JSONL file sink and, optionally, a Rich console handler.
"""

import json
import logging
import os
from datetime import UTC
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

DEFAULT_PATH = os.environ.get("INSTANCE_CATALOG_LOG_PATH", "./instance-catalog.log.jsonl")
DEFAULT_LEVEL = os.environ.get("INSTANCE_CATALOG_LOG_LEVEL", "INFO").upper()

# Attributes every LogRecord carries; anything else was passed via ``extra``.
_RESERVED_ATTRS = frozenset(
    (
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "name",
        "message",
    )
)


class JsonlHandler(logging.Handler):
    """Appends one JSON object per record to a file."""

    def __init__(self, path: str, level: int = logging.NOTSET):
        super().__init__(level)
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            base = {
                "time": datetime.now(UTC).isoformat(timespec="milliseconds"),
                "level": record.levelname,
                "logger": record.name,
                "where": f"{record.module}:{record.lineno}",
                "message": record.getMessage(),
            }
            if record.exc_info:
                base["exc"] = logging.Formatter().formatException(record.exc_info)
            for k, v in record.__dict__.items():
                if k in _RESERVED_ATTRS:
                    continue
                base.setdefault(k, v)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(base, ensure_ascii=False, default=str) + "\n")
        except Exception:
            self.handleError(record)


def init_json_logging(path: str | None = None, level: str | None = None) -> None:
    path = path or DEFAULT_PATH
    level = (level or DEFAULT_LEVEL).upper()
    root = logging.getLogger()
    # Remove existing handlers of the same kind to avoid duplicates
    for h in list(root.handlers):
        if isinstance(h, JsonlHandler):
            root.removeHandler(h)
    handler = JsonlHandler(path, getattr(logging, level, logging.INFO))
    root.addHandler(handler)
    _open_root_level(root, handler.level)


def init_console_logging(level: str = "DEBUG") -> None:
    """Mirror log records to stderr through Rich."""
    root = logging.getLogger()
    for h in list(root.handlers):
        if isinstance(h, RichHandler):
            root.removeHandler(h)
    handler = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)
    handler.setLevel(getattr(logging, level.upper(), logging.DEBUG))
    root.addHandler(handler)
    _open_root_level(root, handler.level)


def _open_root_level(root: logging.Logger, level: int) -> None:
    # Handlers filter by their own level; the root only has to let records through.
    if root.level == logging.NOTSET or root.level > level:
        root.setLevel(level)

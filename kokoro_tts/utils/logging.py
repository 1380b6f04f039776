"""
Dual-sink logging for kokoro-tts.

Records go to a Rich console on stderr and, unless disabled, to a JSONL file
with a fixed key set. Library modules attach ``subsys``/``event``/``detail``
through ``extra=`` so the file sink stays machine-readable.
"""
import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.logging import RichHandler

DEFAULT_JSONL_PATH = "logs/kokoro_tts.jsonl"

# Loggers of third-party libraries that are chatty at INFO
NOISY_LOGGERS = ("urllib3", "requests", "phonemizer")

LEVEL_ICONS = (
    (logging.ERROR, "✖"),
    (logging.WARNING, "⚠"),
    (logging.INFO, "✔"),
)
DEBUG_ICON = "ℹ"


class LevelIconFilter(logging.Filter):
    """Sets ``record.level_icon`` for the console format string."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.level_icon = next(
            (icon for level, icon in LEVEL_ICONS if record.levelno >= level), DEBUG_ICON
        )
        return True


class JsonlFormatter(logging.Formatter):
    """One JSON object per line; keys always appear in ``KEYS`` order."""

    KEYS = ("ts", "level", "name", "subsys", "event", "detail")

    @staticmethod
    def _timestamp(record: logging.LogRecord) -> str:
        # Local time, millisecond precision
        return datetime.fromtimestamp(record.created).isoformat(sep=" ", timespec="milliseconds")

    def format(self, record: logging.LogRecord) -> str:
        detail: Any = getattr(record, "detail", None)
        values: Dict[str, Any] = {
            "ts": self._timestamp(record),
            "level": record.levelname,
            "name": record.name,
            "subsys": getattr(record, "subsys", None),
            "event": getattr(record, "event", None),
            "detail": record.getMessage() if detail is None else detail,
        }
        return json.dumps(
            {key: values[key] for key in self.KEYS if values[key] is not None},
            ensure_ascii=False,
            default=str,
        )


def _console_handler() -> logging.Handler:
    # stderr only: stdout carries WAV bytes in pipe mode
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        enable_link_path=False,
        log_time_format="%H:%M:%S.%f",
    )
    handler.set_name("pretty_handler")
    handler.addFilter(LevelIconFilter())
    handler.setFormatter(logging.Formatter("%(level_icon)s %(message)s"))
    return handler


def _jsonl_handler(path: Path) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.set_name("jsonl_handler")
    handler.setFormatter(JsonlFormatter())
    return handler


def init_logging(level: Optional[str] = None, jsonl_path: Optional[str] = None) -> None:
    """Install the console sink and, when a path is configured, the JSONL sink.

    ``level`` defaults to ``LOG_LEVEL`` (INFO). ``jsonl_path`` defaults to
    ``LOG_JSONL_PATH``; an empty value disables the file sink. A path that
    cannot be opened leaves only the console sink and logs a warning.
    """
    level = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    if jsonl_path is None:
        jsonl_path = os.getenv("LOG_JSONL_PATH", DEFAULT_JSONL_PATH)

    handlers: List[logging.Handler] = [_console_handler()]
    sink_error: Optional[OSError] = None
    if jsonl_path:
        try:
            handlers.append(_jsonl_handler(Path(jsonl_path)))
        except OSError as e:
            # Unwritable log location; keep the console sink and report it below
            sink_error = e
            jsonl_path = ""
    logging.basicConfig(level=level, handlers=handlers, force=True)

    if sink_error is not None:
        logging.getLogger(__name__).warning(
            f"JSONL log sink disabled: {sink_error}",
            extra={"subsys": "logging", "event": "jsonl.disabled"},
        )

    quiet_level = (os.getenv("THIRD_PARTY_LOG_LEVEL") or "WARNING").upper()
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)

    logging.getLogger(__name__).debug(
        "Logging initialized",
        extra={"subsys": "logging", "event": "init", "detail": {"level": level, "jsonl": jsonl_path or None}},
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)

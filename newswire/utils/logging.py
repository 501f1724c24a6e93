"""Logging setup for the newswire CLI and library.

Library modules only call :func:`get_logger`; handlers are installed once by
the entrypoint through :func:`configure_logging`. Every record carries the
thread name because one category refresh logs from several fetch threads.

Environment (read when ``configure_logging`` runs, so a ``.env`` loaded
first is honoured):

- ``LOG_LEVEL``: DEBUG, INFO, ... (default INFO)
- ``LOG_OUTPUT``: stdout, file or both (default stdout)
- ``LOG_FILE_PATH``: rotating log file (default logs/newswire.log)
- ``LOG_FORMAT``: text or json (default text)
"""

from __future__ import annotations

import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Literal

LogOutput = Literal["stdout", "file", "both"]
LogFormat = Literal["text", "json"]

DEFAULT_LEVEL = "INFO"
DEFAULT_OUTPUT: LogOutput = "stdout"
DEFAULT_FILE_PATH = "logs/newswire.log"
DEFAULT_FORMAT: LogFormat = "text"

_TEXT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(threadName)s | %(message)s"

# HTTP stack loggers that are chatty at INFO while fanning out feed requests
_NOISY_LOGGERS = ("urllib3", "charset_normalizer")


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record; the message is escaped properly."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _setting(name: str, default: str) -> str:
    return (os.environ.get(name) or default).strip()


def _build_handlers(output: str, file_path: str) -> List[logging.Handler]:
    if output not in ("stdout", "file", "both"):
        raise ValueError(f"Unknown log output '{output}' (expected stdout, file or both)")
    handlers: List[logging.Handler] = []
    if output in ("stdout", "both"):
        handlers.append(logging.StreamHandler(sys.stdout))
    if output in ("file", "both"):
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(RotatingFileHandler(path, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"))
    return handlers


def configure_logging(
    level: str | int | None = None,
    *,
    output: LogOutput | None = None,
    file_path: str | None = None,
    log_format: LogFormat | None = None,
) -> None:
    """Install handlers on the root logger, replacing any previous ones.

    Explicit arguments win over the environment. Unknown outputs or formats
    raise ``ValueError``.
    """
    level = level if level is not None else _setting("LOG_LEVEL", DEFAULT_LEVEL).upper()
    output = (output or _setting("LOG_OUTPUT", DEFAULT_OUTPUT)).lower()
    file_path = file_path or _setting("LOG_FILE_PATH", DEFAULT_FILE_PATH)
    log_format = (log_format or _setting("LOG_FORMAT", DEFAULT_FORMAT)).lower()

    if log_format == "text":
        formatter: logging.Formatter = logging.Formatter(_TEXT_FORMAT)
    elif log_format == "json":
        formatter = JsonLineFormatter()
    else:
        raise ValueError(f"Unknown log format '{log_format}' (expected text or json)")

    handlers = _build_handlers(output, file_path)

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(level)
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    quiet = logging.WARNING if root_logger.level > logging.DEBUG else logging.DEBUG
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(quiet)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)

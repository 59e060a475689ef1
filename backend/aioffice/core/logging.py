"""Structured logging configuration for the workflow engine.

Every record leaves the process as one JSON object, except on a DEBUG
console where a coloured single-line format is easier to read. Run-scoped
data (run id, node id, action) is attached with
``extra={"context": {...}}`` and emitted under the ``context`` key.

Outbound nodes log target URLs and failure reasons, so handlers carry a
filter that redacts credentials before anything is written.
"""

from __future__ import annotations

import json
import logging
import re
import sys
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, ClassVar

from aioffice.core.config import settings

DEFAULT_LOG_FILE = Path("logs") / "app.log"
PLAIN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# =============================================================================
# Redaction
# =============================================================================


class SensitiveDataFilter(logging.Filter):
    """Redact credentials from log messages and string arguments.

    ``api_key=sk-123`` becomes ``api_key: [REDACTED]`` and a bare
    ``Bearer <token>`` becomes ``Bearer [REDACTED]``.
    """

    SENSITIVE_KEYS: ClassVar[tuple[str, ...]] = (
        "password",
        "secret",
        "token",
        "api_key",
        "apikey",
        "authorization",
        "credential",
    )

    _KEY_VALUE: ClassVar[re.Pattern[str]] = re.compile(
        r"(?P<key>" + "|".join(SENSITIVE_KEYS) + r")"
        r"\s*[:=]\s*[\"']?(?:bearer\s+)?[^\s\"',}]+",
        re.IGNORECASE,
    )
    _BEARER: ClassVar[re.Pattern[str]] = re.compile(
        r"\b(?P<scheme>bearer)\s+(?!\[REDACTED\])[^\s\"',}]+",
        re.IGNORECASE,
    )

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = self.redact(str(record.msg))
        if isinstance(record.args, tuple):
            record.args = tuple(
                self.redact(arg) if isinstance(arg, str) else arg for arg in record.args
            )
        return True

    @classmethod
    def redact(cls, text: str) -> str:
        """Return ``text`` with credential values replaced by ``[REDACTED]``."""
        text = cls._KEY_VALUE.sub(lambda m: f"{m.group('key')}: [REDACTED]", text)
        return cls._BEARER.sub(lambda m: f"{m.group('scheme')} [REDACTED]", text)


# =============================================================================
# Formatters
# =============================================================================


class JSONFormatter(logging.Formatter):
    """One JSON object per record.

    Keys: ``timestamp`` (UTC, ``Z`` suffix), ``level``, ``logger``,
    ``message``, ``service``, ``version``, plus ``context`` when the
    record carries one, ``exception`` when it has exc_info and ``source``
    for ERROR and above.
    """

    def __init__(
        self,
        service_name: str = "AIOfficeWorkflowEngine",
        service_version: str = "0.1.0",
    ) -> None:
        super().__init__()
        self.service_name = service_name
        self.service_version = service_version

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=UTC)
        entry: dict[str, Any] = {
            "timestamp": timestamp.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
            "version": self.service_version,
        }

        context = getattr(record, "context", None)
        if context is not None:
            entry["context"] = context

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, _ = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": self.formatException(record.exc_info),
            }

        if record.levelno >= logging.ERROR:
            entry["source"] = {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            }

        return json.dumps(entry, default=str, ensure_ascii=False)


class ColoredConsoleFormatter(logging.Formatter):
    """Coloured plain-text output for local development."""

    COLORS: ClassVar[dict[int, str]] = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[41m",
    }
    RESET: ClassVar[str] = "\033[0m"

    def __init__(self) -> None:
        super().__init__(fmt=PLAIN_FORMAT, datefmt=DATE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = getattr(record, "context", None)
        if context:
            line = f"{line} | {json.dumps(context, default=str)}"
        color = self.COLORS.get(record.levelno, "")
        return f"{color}{line}{self.RESET}" if color else line


# =============================================================================
# Setup
# =============================================================================


def setup_logging(
    log_level: str | None = None,
    log_file: str | None = None,
    service_name: str = "AIOfficeWorkflowEngine",
    enable_json: bool = True,
    enable_console: bool = True,
    enable_sensitive_filter: bool = True,
) -> logging.Logger:
    """Configure the root logger.

    Replaces any existing root handlers with a rotating file handler
    (10MB, 5 backups) and, optionally, a stdout handler.

    Args:
        log_level: Level name; defaults to ``settings.LOG_LEVEL``.
        log_file: File path; defaults to ``logs/app.log``.
        service_name: Reported in every JSON record.
        enable_json: JSON records in the file instead of plain text.
        enable_console: Also log to stdout.
        enable_sensitive_filter: Redact credentials on every handler.

    Returns:
        The root logger.
    """
    level_name = (log_level or settings.LOG_LEVEL).upper()
    level = logging.getLevelNamesMapping().get(level_name, logging.INFO)

    path = Path(log_file) if log_file else DEFAULT_LOG_FILE
    path.parent.mkdir(parents=True, exist_ok=True)

    file_handler = RotatingFileHandler(
        path,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        JSONFormatter(service_name=service_name)
        if enable_json
        else logging.Formatter(PLAIN_FORMAT, datefmt=DATE_FORMAT)
    )
    handlers: list[logging.Handler] = [file_handler]

    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(
            ColoredConsoleFormatter() if settings.DEBUG else JSONFormatter(service_name=service_name)
        )
        handlers.append(console_handler)

    if enable_sensitive_filter:
        redactor = SensitiveDataFilter()
        for handler in handlers:
            handler.addFilter(redactor)

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(level)
    for handler in handlers:
        root.addHandler(handler)

    root.info(
        f"Logging initialized at {level_name}",
        extra={"context": {"log_level": level_name, "log_file": str(path), "service": service_name}},
    )
    return root


def get_logger(name: str) -> logging.Logger:
    """Module logger; configuration is inherited from the root."""
    return logging.getLogger(name)


__all__ = [
    "ColoredConsoleFormatter",
    "JSONFormatter",
    "SensitiveDataFilter",
    "get_logger",
    "setup_logging",
]

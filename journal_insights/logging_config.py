"""Logging setup shared by the CLI and the analytics engine.

Handlers are attached to the root logger; library modules only ever call
``logging.getLogger(__name__)``. Console output goes to stderr so that
``--json`` reports on stdout stay machine readable.
"""

import json
import logging
import logging.handlers
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict


class LogLevel(Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    @property
    def number(self) -> int:
        """Numeric level understood by ``logging``."""
        return logging.getLevelName(self.value)


class LogFormat(Enum):
    """Log format types."""

    SIMPLE = "simple"
    DETAILED = "detailed"
    JSON = "json"
    COMPACT = "compact"


LINE_FORMATS = {
    LogFormat.SIMPLE: "%(levelname)s: %(message)s",
    LogFormat.DETAILED: "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
}
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

RESET = "\033[0m"
LEVEL_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[1m\033[31m",
}


@dataclass
class LoggingConfig:
    """Where and how log records are written."""

    level: LogLevel = LogLevel.WARNING
    format_type: LogFormat = LogFormat.DETAILED
    log_to_console: bool = True
    log_to_file: bool = False
    log_dir: Path = field(default_factory=lambda: Path("logs"))
    file_name: str = "journal_insights.log"
    max_bytes: int = 5 * 1024 * 1024  # 5 MB
    backup_count: int = 3
    colorize_console: bool = True

    @classmethod
    def from_settings(cls, settings: Any) -> "LoggingConfig":
        """Build from ``config.settings.AppSettings``."""
        return cls(
            level=LogLevel(settings.log_level.upper()),
            format_type=LogFormat(settings.log_format.value),
            log_to_file=settings.log_to_file,
            log_dir=Path(settings.log_dir),
        )


class JsonFormatter(logging.Formatter):
    """One JSON object per record; ``extra`` attributes are nested under "extra"."""

    _record_keys = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        extra = {
            key: value for key, value in vars(record).items()
            if key not in self._record_keys and not key.startswith("_")
        }
        if extra:
            payload["extra"] = extra

        return json.dumps(payload, default=str)


class ColoredFormatter(logging.Formatter):
    """Line formatter that wraps the level name in an ANSI color."""

    def __init__(self, fmt: str = None, datefmt: str = None, colorize: bool = True):
        super().__init__(fmt, datefmt)
        self.colorize = colorize

    def formatMessage(self, record: logging.LogRecord) -> str:
        if not self.colorize or record.levelname not in LEVEL_COLORS:
            return super().formatMessage(record)
        # The record is shared with other handlers; format a copy.
        colored = logging.makeLogRecord(vars(record))
        colored.levelname = f"{LEVEL_COLORS[record.levelname]}{record.levelname}{RESET}"
        return super().formatMessage(colored)


class CompactFormatter(logging.Formatter):
    """``HH:MM:SS L [logger] message`` in UTC."""

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc).strftime("%H:%M:%S")
        return f"{ts} {record.levelname[0]} [{record.name}] {record.getMessage()}"


def build_formatter(config: LoggingConfig, for_console: bool) -> logging.Formatter:
    """Formatter for one handler."""
    if config.format_type == LogFormat.JSON:
        return JsonFormatter()
    if config.format_type == LogFormat.COMPACT:
        return CompactFormatter()

    fmt = LINE_FORMATS[config.format_type]
    if for_console and config.colorize_console and sys.stderr.isatty():
        return ColoredFormatter(fmt, datefmt=DATE_FORMAT)
    return logging.Formatter(fmt, datefmt=DATE_FORMAT)


def configure_logging(config: LoggingConfig = None) -> None:
    """Replace the root logger's handlers according to ``config``."""
    config = config or LoggingConfig()
    level = config.level.number

    handlers = []
    if config.log_to_console:
        handlers.append((logging.StreamHandler(sys.stderr), True))
    if config.log_to_file:
        config.log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            config.log_dir / config.file_name,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
        handlers.append((file_handler, False))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    for handler, for_console in handlers:
        handler.setLevel(level)
        handler.setFormatter(build_formatter(config, for_console))
        root.addHandler(handler)


class ContextLogger(logging.LoggerAdapter):
    """Logger adapter that appends ``key=value`` context to every message."""

    def __init__(self, logger: logging.Logger, context: Dict[str, Any] = None):
        super().__init__(logger, dict(context or {}))

    @property
    def context(self) -> Dict[str, Any]:
        return self.extra

    def with_context(self, **kwargs) -> "ContextLogger":
        """Child logger with additional context."""
        return ContextLogger(self.logger, {**self.extra, **kwargs})

    def process(self, msg, kwargs):
        if not self.extra:
            return msg, kwargs
        suffix = " ".join(f"{k}={v}" for k, v in self.extra.items())
        return f"{msg} | {suffix}", kwargs


def get_context_logger(name: str, **context) -> ContextLogger:
    """Context logger for ``name`` with initial context."""
    return ContextLogger(logging.getLogger(name), context)

"""Build a structured logger writing console or JSON lines to a log directory."""

from __future__ import annotations

import json
import logging
import logging.handlers
import sys
import traceback
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from pathlib import Path


class Level(IntEnum):
    """Log levels, valued to sit among the standard logging levels."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARN = logging.WARNING
    ERROR = logging.ERROR
    DPANIC = 45
    PANIC = 48
    FATAL = logging.CRITICAL


_LEVEL_NAMES = {level.name.lower(): level for level in Level}

_COLORS = {
    Level.DEBUG: 35,
    Level.INFO: 34,
    Level.WARN: 33,
    Level.ERROR: 31,
    Level.DPANIC: 31,
    Level.PANIC: 31,
    Level.FATAL: 31,
}


@dataclass
class LogConfig:
    """Settings for :func:`build_logger`."""

    level: str = "info"
    format: str = "console"
    prefix: str = ""
    director: str = "log"
    show_line: bool = False
    encode_level: str = "LowercaseLevelEncoder"
    stacktrace_key: str = "stacktrace"
    log_in_console: bool = False
    filename: str = "server.log"


def parse_level(name: str) -> Level:
    """Map a configured level name to a :class:`Level`, defaulting to INFO."""
    return _LEVEL_NAMES.get(name, Level.INFO)


def _lowercase(level: Level) -> str:
    return level.name.lower()


def _capital(level: Level) -> str:
    return level.name


def _colored(plain: Callable[[Level], str]) -> Callable[[Level], str]:
    def encode(level: Level) -> str:
        return f"\x1b[{_COLORS[level]}m{plain(level)}\x1b[0m"

    return encode


_ENCODERS: dict[str, Callable[[Level], str]] = {
    "LowercaseLevelEncoder": _lowercase,
    "LowercaseColorLevelEncoder": _colored(_lowercase),
    "CapitalLevelEncoder": _capital,
    "CapitalColorLevelEncoder": _colored(_capital),
}


def level_encoder(name: str) -> Callable[[Level], str]:
    """Return the level formatter named ``name``, defaulting to lowercase."""
    return _ENCODERS.get(name, _lowercase)


def format_time(moment: datetime, prefix: str = "") -> str:
    """Format ``moment`` as ``<prefix>YYYY/MM/DD - HH:MM:SS.mmm``."""
    millis = moment.microsecond // 1000
    return f"{prefix}{moment:%Y/%m/%d - %H:%M:%S}.{millis:03d}"


def _to_level(levelno: int) -> Level:
    matching = [level for level in Level if level <= levelno]
    return max(matching) if matching else Level.DEBUG


class _ZapFormatter(logging.Formatter):
    def __init__(self, config: LogConfig) -> None:
        super().__init__()
        self._json = config.format == "json"
        self._encode_level = level_encoder(config.encode_level)
        self._prefix = config.prefix
        self._show_line = config.show_line
        self._stack_key = config.stacktrace_key

    def format(self, record: logging.LogRecord) -> str:
        moment = datetime.fromtimestamp(record.created)
        level = self._encode_level(_to_level(record.levelno))
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        caller = f"{record.pathname}:{record.lineno}" if self._show_line else None
        stack = record.stack_info if self._stack_key else None

        if self._json:
            entry: dict[str, str] = {"level": level, "time": format_time(moment, self._prefix)}
            if caller is not None:
                entry["caller"] = caller
            entry["message"] = message
            if stack:
                entry[self._stack_key] = stack
            return json.dumps(entry, ensure_ascii=False)

        parts = [format_time(moment, self._prefix), level]
        if caller is not None:
            parts.append(caller)
        parts.append(message)
        line = "\t".join(parts)
        return f"{line}\n{stack}" if stack else line


class _StacktraceFilter(logging.Filter):
    def __init__(self, threshold: int) -> None:
        super().__init__()
        self._threshold = threshold

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno >= self._threshold and not record.stack_info:
            record.stack_info = "".join(traceback.format_stack()).rstrip("\n")
        return True


def build_logger(config: LogConfig | None = None) -> logging.Logger:
    """Create a logger configured by ``config``, creating its directory if needed."""
    config = config if config is not None else LogConfig()
    director = Path(config.director)
    if not director.exists():
        print(f"create {director} directory")
        director.mkdir(exist_ok=True)

    level = parse_level(config.level)
    logger = logging.Logger("devreload", level=level)
    logger.propagate = False

    handlers: list[logging.Handler] = [
        logging.handlers.TimedRotatingFileHandler(
            director / config.filename, when="midnight", encoding="utf-8", delay=True
        )
    ]
    if config.log_in_console:
        handlers.append(logging.StreamHandler(sys.stdout))

    formatter = _ZapFormatter(config)
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(level)
        logger.addHandler(handler)

    if level in (Level.DEBUG, Level.ERROR):
        logger.addFilter(_StacktraceFilter(level))
    return logger
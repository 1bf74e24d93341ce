"""Logging setup for the claude_forge logger tree.

Three output modes, selected from CLI flags:
- Human mode: [LEVEL] message (colored if TTY)
- Verbose mode: [LEVEL][HH:MM:SS] message
- CI/JSON mode: {"level":"...","ts":"...","msg":"..."}

Log lines go to stderr so command output on stdout (e.g. `tools check --json`)
stays machine-readable.
"""

import json
import logging
import sys
from datetime import UTC, datetime
from enum import Enum
from typing import Any, TextIO

ROOT_LOGGER = "claude_forge"


class LogMode(Enum):
    """Logging output mode."""

    HUMAN = "human"
    VERBOSE = "verbose"
    JSON = "json"


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    RED = "\033[31m"
    GRAY = "\033[90m"


LEVEL_COLORS = {
    logging.DEBUG: Colors.GRAY,
    logging.INFO: Colors.GREEN,
    logging.WARNING: Colors.YELLOW,
    logging.ERROR: Colors.RED,
    logging.CRITICAL: Colors.RED,
}


def _is_tty(stream: TextIO) -> bool:
    return hasattr(stream, "isatty") and stream.isatty()


class ConsoleFormatter(logging.Formatter):
    """Human-readable formatter.

    Renders `[LEVEL] message`, or `[LEVEL][HH:MM:SS] message` with
    show_time=True. The level tag is colored when use_colors is set.
    """

    def __init__(self, show_time: bool = False, use_colors: bool = False) -> None:
        super().__init__()
        self.show_time = show_time
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        tag = f"[{record.levelname}]"
        if self.use_colors:
            tag = f"{LEVEL_COLORS.get(record.levelno, Colors.RESET)}{tag}{Colors.RESET}"
        if self.show_time:
            tag += datetime.fromtimestamp(record.created).strftime("[%H:%M:%S]")

        message = f"{tag} {record.getMessage()}"
        if record.exc_info and self.show_time:
            message += "\n" + self.formatException(record.exc_info)
        return message


class JSONFormatter(logging.Formatter):
    """JSON lines formatter for CI.

    Format: {"level":"INFO","ts":"2026-01-31T19:45:23+00:00","msg":"..."}
    plus any structured fields attached with ForgeLogger.structured().
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "level": record.levelname,
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "msg": record.getMessage(),
            "logger": record.name,
        }
        extra = getattr(record, "extra_data", None)
        if extra:
            entry.update(extra)
        return json.dumps(entry, default=str)


class ForgeLogger(logging.Logger):
    """Logger with structured-field support for JSON mode."""

    def structured(self, level: int, msg: str, **fields: Any) -> None:
        """Log msg with extra fields (only rendered in JSON mode).

        Args:
            level: Log level
            msg: Log message
            **fields: Additional data to include in JSON output
        """
        if self.isEnabledFor(level):
            self._log(level, msg, (), extra={"extra_data": fields} if fields else None)


logging.setLoggerClass(ForgeLogger)


def get_logger(name: str = ROOT_LOGGER) -> ForgeLogger:
    """Get a claude-forge logger instance."""
    return logging.getLogger(name)  # type: ignore[return-value]


def setup_logging(
    mode: LogMode = LogMode.HUMAN,
    level: int = logging.INFO,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Configure the claude_forge logger tree.

    Args:
        mode: Output mode (human, verbose, json)
        level: Minimum log level
        stream: Output stream (default: stderr)

    Returns:
        The configured root logger of the tree
    """
    stream = stream or sys.stderr
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.propagate = False

    if mode is LogMode.JSON:
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = ConsoleFormatter(
            show_time=mode is LogMode.VERBOSE,
            use_colors=_is_tty(stream),
        )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return logger


def configure_from_cli(
    verbose: bool = False,
    quiet: bool = False,
    ci: bool = False,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Configure logging based on CLI flags.

    --ci wins over --verbose for the format; --quiet wins over --verbose for
    the level.
    """
    if ci:
        mode = LogMode.JSON
    elif verbose:
        mode = LogMode.VERBOSE
    else:
        mode = LogMode.HUMAN

    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    return setup_logging(mode=mode, level=level, stream=stream)

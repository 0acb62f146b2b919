"""
Logging Configuration for SharpUML.

This module provides a centralized logging setup that:
- Writes human-readable console output to stderr (Rich or plain)
- Optionally mirrors log records into a dated log file
- Appends structured ``extra`` fields as key=value pairs

Diagram text is the program's real output, so logging never touches stdout.

Usage:
    from sharpuml.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Project loaded", extra={"project": "Shop.Core", "files": 42})

Configuration:
    Set LOG_LEVEL environment variable (or pass --log-level) to control
    verbosity: DEBUG, INFO, WARNING (default), ERROR, CRITICAL.
"""

import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler


# ============================================================================
# Constants
# ============================================================================

DEFAULT_LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LOG_DIR = Path.home() / ".sharpuml" / "logs"
ROOT_LOGGER_NAME = "sharpuml"

_RESERVED_RECORD_KEYS = frozenset({
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'pathname', 'process', 'processName', 'relativeCreated',
    'stack_info', 'exc_info', 'exc_text', 'thread', 'threadName',
    'message', 'asctime', 'taskName',
})


# ============================================================================
# Custom Formatter for Structured Logging
# ============================================================================

class StructuredFormatter(logging.Formatter):
    """
    A formatter that produces structured, easily-parseable log output.

    Example output:
        2026-01-24 10:30:45 | WARNING  | sharpuml.services.analyzer |
        Failed to load project | project_path=/src/Web/Web.csproj
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record with structured metadata."""
        base_message = super().format(record)

        extra_fields = [
            f"{key}={value}"
            for key, value in record.__dict__.items()
            if key not in _RESERVED_RECORD_KEYS
        ]

        if extra_fields:
            return f"{base_message} | {' | '.join(extra_fields)}"
        return base_message


# ============================================================================
# Logger Factory
# ============================================================================

_loggers_initialized = False
_file_handler: Optional[logging.FileHandler] = None


def setup_logging(
    log_level: Optional[str] = None,
    log_to_file: bool = False,
    log_dir: Optional[Path] = None,
    use_rich_console: bool = True,
    force: bool = False,
) -> None:
    """
    Configure the logging system for SharpUML.

    This is called once on first use. Subsequent calls are ignored unless
    ``force`` is set, which the CLI uses to apply ``--log-level``.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
                   Defaults to LOG_LEVEL environment variable or WARNING.
        log_to_file: Whether to also write logs to a file.
        log_dir: Directory for log files. Defaults to ~/.sharpuml/logs/
        use_rich_console: Use Rich library for colorful console output.
        force: Reconfigure even if logging was already set up.

    Example:
        from sharpuml.logging import setup_logging

        setup_logging(log_level="DEBUG", force=True)
    """
    global _loggers_initialized, _file_handler

    if _loggers_initialized and not force:
        return

    level_str = log_level or os.environ.get("LOG_LEVEL", DEFAULT_LOG_LEVEL)
    level = getattr(logging, level_str.upper(), logging.WARNING)

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    _file_handler = None

    if use_rich_console:
        console_handler = RichHandler(
            console=Console(stderr=True),
            show_time=True,
            show_path=False,
            rich_tracebacks=True,
        )
        console_handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(StructuredFormatter(LOG_FORMAT, LOG_DATE_FORMAT))

    console_handler.setLevel(level)
    root_logger.addHandler(console_handler)

    if log_to_file:
        log_directory = log_dir or DEFAULT_LOG_DIR
        log_directory.mkdir(parents=True, exist_ok=True)

        log_file = log_directory / f"sharpuml-{datetime.now():%Y-%m-%d}.log"
        _file_handler = logging.FileHandler(log_file, encoding="utf-8")
        _file_handler.setFormatter(StructuredFormatter(LOG_FORMAT, LOG_DATE_FORMAT))
        _file_handler.setLevel(level)
        root_logger.addHandler(_file_handler)

    _loggers_initialized = True

    root_logger.debug(
        "SharpUML logging initialized",
        extra={"log_level": level_str, "log_to_file": log_to_file}
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for the specified module.

    Args:
        name: Logger name, typically __name__ of the calling module.

    Returns:
        A configured Logger instance.

    Example:
        logger = get_logger(__name__)
        logger.warning("File skipped", extra={
            "file_path": "Broken.cs",
            "reason": "parse_error"
        })
    """
    if not _loggers_initialized:
        setup_logging()

    return logging.getLogger(name)


# ============================================================================
# Convenience Functions
# ============================================================================

def log_operation_start(
    logger: logging.Logger,
    operation: str,
    **context: Any
) -> datetime:
    """
    Log the start of an operation and return the start time.

    Use with log_operation_end for timing operations.

    Example:
        start_time = log_operation_start(logger, "analysis", solution="Shop.sln")
        # ... do work ...
        log_operation_end(logger, "analysis", start_time, projects=3)
    """
    logger.info(f"{operation} started", extra=context)
    return datetime.now()


def log_operation_end(
    logger: logging.Logger,
    operation: str,
    start_time: datetime,
    success: bool = True,
    **context: Any
) -> float:
    """
    Log the end of an operation with duration.

    Args:
        logger: Logger instance to use.
        operation: Name of the operation that completed.
        start_time: Timestamp from log_operation_start.
        success: Whether the operation succeeded.
        **context: Additional context to log.

    Returns:
        Duration in seconds.
    """
    duration = (datetime.now() - start_time).total_seconds()
    status = "completed" if success else "failed"

    log_method = logger.info if success else logger.error
    log_method(
        f"{operation} {status}",
        extra={"duration_seconds": round(duration, 3), **context}
    )

    return duration

"""Logging configuration and utilities.

Console logs go to stderr so ``--json`` output on stdout stays parseable.
An optional log file keeps the step log of every update, even when the
console only shows warnings.
"""

import html
import logging
import re
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

# Console for log records; command output uses its own stdout console
console = Console(stderr=True)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
RICH_FORMAT = "%(message)s"

# Third-party loggers that are too chatty at INFO
NOISY_LOGGERS = ("aiohttp", "asyncio", "urllib3")

_TAG = re.compile(r"<[^>]+>")


def plain_text(line: str) -> str:
    """Turn an escaped HTML update log line into plain text."""
    return html.unescape(_TAG.sub("", line))


def _level(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)


def _console_handler(use_rich: bool) -> logging.Handler:
    if use_rich:
        handler: logging.Handler = RichHandler(
            console=console,
            show_time=True,
            show_path=False,
            rich_tracebacks=True,
            markup=False,
        )
        handler.setFormatter(logging.Formatter(RICH_FORMAT))
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str | Path] = None,
    use_rich: bool = True,
    file_level: str = "INFO",
) -> None:
    """Set up logging for the CLI.

    Args:
        level: Console logging level name (DEBUG, INFO, WARNING, ...)
        log_file: Optional log file, relative to the working directory
        use_rich: Use a RichHandler for console output
        file_level: Logging level name for the log file
    """
    console_level = _level(level)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        if isinstance(handler, logging.FileHandler):
            handler.close()
    root_logger.handlers.clear()
    root_logger.setLevel(console_level)

    console_handler = _console_handler(use_rich)
    console_handler.setLevel(console_level)
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        file_handler.setLevel(_level(file_level))
        root_logger.addHandler(file_handler)
        root_logger.setLevel(min(console_level, file_handler.level))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def log_update_result(log: logging.Logger, label: str, result) -> None:
    """Write the step log of an update result, one INFO record per line."""
    for line in result.log:
        log.info(f"{label}: {plain_text(line)}")


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name (typically ``__name__``)."""
    return logging.getLogger(name)

"""
Logging setup for the SICORE converter.

All loggers live under the "sicore_converter" namespace. Messages about
a single data row go through a row adapter that prefixes the sheet row
and certificate number, so log lines and warnings point at the same row.
"""

import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

LOGGER_NAME = "sicore_converter"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

CONSOLE_FORMAT = "%(levelname)s: %(message)s"
DETAILED_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"


def resolve_level(level: Union[str, int]) -> int:
    """Map a level name (any case) or number to a logging level."""
    if isinstance(level, int):
        return level
    name = str(level).upper()
    if name in LOG_LEVELS:
        return getattr(logging, name)
    return logging.INFO


def setup_logging(
    level: Union[str, int] = "INFO",
    log_file: Optional[Path] = None,
    verbose: bool = False,
) -> logging.Logger:
    """
    Route converter logs to stdout and, optionally, a log file.

    Calling it again replaces the handlers from the previous call.

    Args:
        level: Level name or number for the console
        log_file: File that receives every message at DEBUG level
        verbose: Use the timestamped format on the console as well

    Returns:
        The package logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_level = resolve_level(level)
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(DETAILED_FORMAT if verbose else CONSOLE_FORMAT))
    logger.addHandler(console)

    logger_level = console_level
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(DETAILED_FORMAT))
        logger.addHandler(file_handler)
        logger_level = logging.DEBUG

    logger.setLevel(logger_level)
    logger.propagate = False
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the package logger, or one of its children."""
    if name:
        return logging.getLogger(f"{LOGGER_NAME}.{name}")
    return logging.getLogger(LOGGER_NAME)


class RowLoggerAdapter(logging.LoggerAdapter):
    """Prefix messages with the sheet row and certificate number."""

    def process(self, msg, kwargs):
        return (
            f"row {self.extra['sheet_row']} "
            f"(certificate {self.extra['sequence_number']}): {msg}",
            kwargs,
        )


def row_logger(
    logger: logging.Logger,
    sheet_row: int,
    sequence_number: int,
) -> RowLoggerAdapter:
    return RowLoggerAdapter(
        logger, {"sheet_row": sheet_row, "sequence_number": sequence_number}
    )


@contextmanager
def quiet_logging(level: int = logging.ERROR) -> Iterator[logging.Logger]:
    """Raise the package logger threshold for the duration of a block."""
    logger = get_logger()
    previous = logger.level
    logger.setLevel(level)
    try:
        yield logger
    finally:
        logger.setLevel(previous)

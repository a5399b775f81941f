"""
Logging configuration for ratingbench.

Replays write summary lines to stdout and draw tqdm progress bars on stderr,
so console log records go through ``tqdm.write`` to avoid tearing a bar in
the middle of a line. Module loggers are children of the ``ratingbench``
logger, which owns every handler.
"""

from __future__ import annotations

import logging
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Callable

from tqdm import tqdm

PACKAGE_LOGGER = "ratingbench"

FORMATS = {
    "simple": "%(levelname)s: %(message)s",
    "detailed": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
}


class TqdmHandler(logging.Handler):
    """Console handler that prints above any active progress bar."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            tqdm.write(self.format(record), file=sys.stderr)
        except Exception:
            self.handleError(record)


def setup_logging(
    level: str | int = logging.INFO,
    log_file: str | Path | None = None,
    format_style: str = "detailed",
    progress: bool = True,
) -> logging.Logger:
    """Configure the package logger.

    Args:
        level: Logging level name or number. Defaults to logging.INFO.
        log_file: Optional file that receives the same records. Defaults to None.
        format_style: "simple" or "detailed". Defaults to "detailed".
        progress: Route console records through tqdm so they do not break
            progress bars. Defaults to True.

    Returns:
        The configured ``ratingbench`` logger.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper())
    if format_style not in FORMATS:
        raise ValueError(
            f"Unknown format style {format_style!r}; "
            f"choose from {', '.join(FORMATS)}"
        )

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()

    formatter = logging.Formatter(FORMATS[format_style])

    if progress:
        console_handler: logging.Handler = TqdmHandler()
    else:
        console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        # Files always get timestamps
        file_handler.setFormatter(logging.Formatter(FORMATS["detailed"]))
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger under the package namespace for ``name`` (usually __name__)."""
    if name == PACKAGE_LOGGER or name.startswith(f"{PACKAGE_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")


@contextmanager
def log_timing(
    logger: logging.Logger,
    operation: str,
    games: Callable[[], int] | None = None,
    level: int = logging.INFO,
):
    """Log the duration of an operation and, optionally, its game rate.

    Args:
        logger: Logger to use for timing messages.
        operation: Description of the operation being timed.
        games: Returns a running game count; the difference between exit
            and entry is reported with the throughput.
        level: Logging level for timing messages. Defaults to logging.INFO.

    Examples:
        >>> with log_timing(logger, "replaying 2013-01", lambda: engine.games):
        ...     engine.replay_segment("2013-01", records)
    """
    start_time = time.perf_counter()
    start_games = games() if games is not None else 0
    logger.log(level, f"Starting {operation}")

    try:
        yield
    except Exception as exception:
        elapsed_time = time.perf_counter() - start_time
        logger.error(
            f"Failed {operation} after {elapsed_time:.2f}s: {exception}"
        )
        raise

    elapsed_time = time.perf_counter() - start_time
    message = f"Completed {operation} in {elapsed_time:.2f}s"
    if games is not None:
        count = games() - start_games
        rate = count / elapsed_time if elapsed_time > 0 else 0.0
        message += f" ({count:,} games, {rate:,.0f} games/s)"
    logger.log(level, message)

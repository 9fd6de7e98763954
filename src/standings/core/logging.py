"""
Logging helpers for the standings package.

Library modules only ask for loggers under the ``standings`` namespace.
Handlers are attached once, by the command line, through
:func:`setup_logging`.
"""

from __future__ import annotations

import logging
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import polars as pl

PACKAGE_LOGGER = "standings"

_FORMATS = {
    "simple": "%(levelname)s: %(message)s",
    "detailed": "%(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s",
}


def setup_logging(
    level: str | int = logging.INFO,
    log_file: str | Path | None = None,
    format_style: str = "detailed",
    include_timestamp: bool = True,
) -> logging.Logger:
    """Attach console (and optional file) handlers to the package logger.

    Args:
        level: Level name or number. Defaults to INFO.
        log_file: Also write records to this file.
        format_style: ``"simple"`` or ``"detailed"``.
        include_timestamp: Prefix records with ``asctime``.

    Returns:
        The configured ``standings`` logger. It no longer propagates to the
        root logger, so records are not printed twice.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    format_string = _FORMATS.get(format_style, _FORMATS["detailed"])
    if include_timestamp:
        format_string = "%(asctime)s - " + format_string
    formatter = logging.Formatter(format_string)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger for ``name``, placed under the ``standings`` namespace."""
    if name == PACKAGE_LOGGER or name.startswith(PACKAGE_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")


@contextmanager
def log_timing(
    logger: logging.Logger, operation: str, level: int = logging.INFO
) -> Iterator[None]:
    """Log how long the wrapped block took, or how long until it failed.

    Examples:
        >>> logger = get_logger(__name__)
        >>> with log_timing(logger, "replaying match history"):
        ...     result = recompute_all(matches, players)
    """
    start = time.perf_counter()
    logger.log(level, "Starting %s", operation)
    try:
        yield
    except Exception as e:
        logger.error(
            "Failed %s after %.2fs: %s", operation, time.perf_counter() - start, e
        )
        raise
    logger.log(
        level, "Completed %s in %.2fs", operation, time.perf_counter() - start
    )


def log_dataframe_stats(
    logger: logging.Logger,
    dataframe: Optional[pl.DataFrame],
    name: str,
    level: int = logging.DEBUG,
) -> None:
    """Log the shape of ``dataframe`` and, at DEBUG, its column types."""
    if dataframe is None:
        logger.log(level, "%s: None", name)
        return
    logger.log(
        level, "%s: %d rows x %d cols", name, dataframe.height, dataframe.width
    )
    if logger.isEnabledFor(logging.DEBUG):
        columns = ", ".join(
            f"{column}({dtype})" for column, dtype in dataframe.schema.items()
        )
        logger.debug("%s columns: %s", name, columns)

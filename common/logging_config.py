"""
Logging Configuration Module

One application logger (``docs_rag``) with module loggers below it, so
the ingestion commands, the HTTP services and the tests all configure
output in one place.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

APP_LOGGER_NAME = "docs_rag"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Path] = None,
    format_string: Optional[str] = None
) -> logging.Logger:
    """
    Configure the application logger.

    Calling it again replaces the previous handlers.

    Args:
        level: Level number or name such as ``"DEBUG"``
        log_file: Optional path to an additional log file
        format_string: Optional custom format string

    Returns:
        The ``docs_rag`` logger
    """
    level = _resolve_level(level)
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    logger = logging.getLogger(APP_LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Module logger below the application logger (pass ``__name__``)."""
    return logging.getLogger(f"{APP_LOGGER_NAME}.{name}")

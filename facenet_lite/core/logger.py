"""Logging configuration for facenet-lite."""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOGGER_NAME = "facenet_lite"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def resolve_level(log_level: str | int) -> int:
    """Turn a level name such as "debug" into its logging constant.

    Args:
        log_level: Level name (case-insensitive) or numeric level.

    Returns:
        Numeric logging level.

    Raises:
        ValueError: If the name is not a standard logging level.
    """
    if isinstance(log_level, int):
        return log_level

    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level!r}")
    return level


def setup_logging(
    log_level: str | int = logging.INFO,
    log_file: Path | str | None = None,
    log_to_console: bool = True,
) -> logging.Logger:
    """Set up the facenet_lite logger.

    Calling this again replaces the handlers installed by an earlier call.
    Console output goes to stderr so that command output on stdout stays
    machine-readable.

    Args:
        log_level: Logging level (string or int).
        log_file: Optional path to a rotating log file (10MB x 5).
        log_to_console: Whether to log to stderr.

    Returns:
        Configured logger instance.
    """
    level = resolve_level(log_level)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    handlers: list[logging.Handler] = []
    if log_to_console:
        handlers.append(logging.StreamHandler())

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                log_path,
                maxBytes=10 * 1024 * 1024,
                backupCount=5,
                encoding="utf-8",
            )
        )

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Child logger name, e.g. "tflite" -> "facenet_lite.tflite".

    Returns:
        Logger instance.
    """
    if name:
        return logging.getLogger(f"{LOGGER_NAME}.{name}")
    return logging.getLogger(LOGGER_NAME)


# Defaults from LOG_LEVEL / LOG_FILE; an unknown LOG_LEVEL falls back to INFO
_env_level = os.getenv("LOG_LEVEL", "INFO")
try:
    _default_level = resolve_level(_env_level)
except ValueError:
    _default_level = logging.INFO
_default_logger = setup_logging(
    log_level=_default_level,
    log_file=os.getenv("LOG_FILE", None),
    log_to_console=True,
)

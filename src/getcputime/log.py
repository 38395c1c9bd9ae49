"""Logging configuration for getcputime."""

import logging
import sys
from pathlib import Path

from getcputime.errors import ConfigurationError


def setup_logger(
    name: str = "getcputime",
    level: int = logging.WARNING,
    log_file: Path | None = None,
) -> logging.Logger:
    """
    Configure and return a logger writing to stderr.

    Args:
        name: Logger name. Default is the package logger.
        level: Level for the stderr handler. Default WARNING.
        log_file: Optional file receiving DEBUG output with timestamps.

    Raises:
        ConfigurationError: If the log file cannot be created or opened.

    Returns:
        The configured logger.
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG if log_file else level)

    # Repeated calls must not stack handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(fmt="%(levelname)s: %(message)s"))
    logger.addHandler(console_handler)

    if log_file:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(f"Cannot open log file {log_file}: {exc}") from exc
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(file_handler)

    return logger

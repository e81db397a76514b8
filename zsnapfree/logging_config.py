"""Logging configuration for zsnapfree."""

import logging
import sys
from logging.handlers import RotatingFileHandler

from zsnapfree.config import Settings


def setup_logging(settings: Settings, console: bool = True) -> None:
    """
    Configure logging for the application.

    Args:
        settings: Source of level and log file options
        console: Attach a stderr handler; disable this while the
            full-screen UI owns the terminal
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.log_level))

    # Clear existing handlers
    root_logger.handlers.clear()

    formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(getattr(logging, settings.log_level))
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if settings.log_file:
        try:
            file_handler = RotatingFileHandler(
                settings.log_file,
                maxBytes=settings.log_max_bytes,
                backupCount=settings.log_backup_count,
            )
            file_handler.setLevel(getattr(logging, settings.log_level))
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
        except OSError as e:
            import warnings

            warnings.warn(
                f"Could not set up file logging to {settings.log_file}: {e}. "
                "Continuing without file logging.",
                UserWarning,
            )

    if not root_logger.handlers:
        root_logger.addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the given name."""
    return logging.getLogger(name)

"""Configuration validation service."""

import os
import shutil
from typing import Optional

from zsnapfree.config.settings import Settings
from zsnapfree.logging_config import get_logger

logger = get_logger(__name__)


class ConfigurationError(Exception):
    """Raised when configuration validation fails."""

    def __init__(self, message: str, suggestion: Optional[str] = None):
        """
        Initialize configuration error.

        Args:
            message: Error message
            suggestion: Optional suggestion for fixing the issue
        """
        self.message = message
        self.suggestion = suggestion
        full_message = message
        if suggestion:
            full_message = f"{message}\n\nSuggestion: {suggestion}"
        super().__init__(full_message)


def validate_configuration(settings: Settings) -> None:
    """
    Validate configuration before the interactive session starts.

    Checks that the zfs binary can be found and that the log file
    directory (if file logging is enabled) can be created.

    Raises:
        ConfigurationError: If any validation fails
    """
    logger.debug("Validating configuration...")

    errors = []

    try:
        validate_zfs_binary(settings)
    except ConfigurationError as e:
        errors.append(str(e))

    try:
        validate_log_file(settings)
    except ConfigurationError as e:
        errors.append(str(e))

    if errors:
        error_message = "Configuration validation failed:\n\n" + "\n\n".join(
            f"  - {error}" for error in errors
        )
        raise ConfigurationError(error_message)

    logger.debug("Configuration validated")


def validate_zfs_binary(settings: Settings) -> None:
    """Check the configured zfs binary resolves to an executable."""
    if shutil.which(settings.zfs) is None:
        raise ConfigurationError(
            f"zfs binary not found or not executable: {settings.zfs}",
            suggestion="Install the ZFS utilities or set ZSNAPFREE_ZFS to the zfs binary path",
        )


def validate_log_file(settings: Settings) -> None:
    """Check the log file's directory exists or can be created."""
    if settings.log_file is None:
        return

    log_dir = settings.log_file.parent
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigurationError(
            f"Cannot create log directory {log_dir}: {e}",
            suggestion="Choose a writable location with ZSNAPFREE_LOG_FILE",
        ) from e

    if not os.access(log_dir, os.W_OK):
        raise ConfigurationError(
            f"Log directory is not writable: {log_dir}",
            suggestion="Choose a writable location with ZSNAPFREE_LOG_FILE",
        )

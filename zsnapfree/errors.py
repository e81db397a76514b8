"""Exceptions raised by zsnapfree."""

from typing import Optional, Sequence


class ZsnapfreeError(Exception):
    """Base class for errors surfaced to the operator."""

    def __init__(self, message: str, detail: Optional[str] = None):
        """
        Initialize the error.

        Args:
            message: Short description of what failed
            detail: Optional captured diagnostic text (stderr or raw output)
        """
        self.message = message
        self.detail = detail
        full_message = message
        if detail:
            full_message = f"{message}\n\n{detail}"
        super().__init__(full_message)


class ZfsCommandError(ZsnapfreeError):
    """Raised when the external zfs tool fails to start or exits non-zero."""

    def __init__(self, message: str, command: Sequence[str], stderr: str = ""):
        self.command = list(command)
        self.stderr = stderr
        super().__init__(message, stderr.strip() or None)


class ZfsOutputError(ZsnapfreeError):
    """Raised when the zfs tool's output does not follow the expected format."""

    def __init__(self, message: str, output: str = ""):
        self.output = output
        detail = f"Output is:\n{output.strip()}" if output.strip() else None
        super().__init__(message, detail)


class IncompleteOutputError(ZfsOutputError):
    """Raised when a dry-run destroy never reports a 'reclaim' line."""


class MalformedOutputError(ZfsOutputError):
    """Raised when a dry-run destroy reports an unparseable byte count."""

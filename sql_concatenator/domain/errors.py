"""
Error taxonomy for script concatenation.
"""

from pathlib import Path
from typing import Union


class ConcatenationError(Exception):
    """Base class for errors raised while building or saving a script."""
    pass


class EmptyInputWarning(ConcatenationError):
    """Raised when a concatenation is requested with no files selected."""

    def __init__(self, message: str = "No files selected."):
        super().__init__(message)


class FileReadError(ConcatenationError):
    """Raised when a source file cannot be opened, read or decoded."""

    def __init__(self, path: Union[str, Path], cause: Exception):
        self.path = str(path)
        self.cause = cause
        reason = getattr(cause, "strerror", None) or str(cause)
        super().__init__(f"Cannot read '{self.path}': {reason}")


class WriteError(ConcatenationError):
    """Raised when the destination script cannot be created or written."""

    def __init__(self, destination: Union[str, Path], cause: Exception):
        self.destination = Path(destination)
        self.cause = cause
        reason = getattr(cause, "strerror", None) or str(cause)
        super().__init__(f"Cannot write '{self.destination}': {reason}")

"""Package-specific exception types."""

from __future__ import annotations

from pathlib import Path


class ExtractionError(ValueError):
    """Base class for extraction-related errors.

    The scanners themselves never raise on input content; these errors come
    from the layers around them (reading files, bad limits).
    """


class ExtractFileError(ExtractionError):
    """Raised when a source file cannot be read or decoded.

    Args:
        filepath: Path of the file that failed.
        reason: Human-readable description of the failure.
    """

    def __init__(self, filepath: Path, reason: str):
        self.filepath = filepath
        self.reason = reason
        super().__init__(f"{filepath}: {reason}")

    def __reduce__(self):
        # Rebuilt from its fields when raised inside a worker process.
        return type(self), (self.filepath, self.reason)

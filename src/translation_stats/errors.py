"""Error types raised by the translation update steps.

Every step catches these at its boundary and hands them back inside a
:class:`~translation_stats.results.StepResult`; only the
updater decides whether to stop.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Machine-readable error kinds."""

    LOCALE_RESOLUTION = "locale-resolution-error"
    DOWNLOAD = "download-error"
    WRITE = "write-error"
    PARSE = "parse-error"


class TranslationError(Exception):
    """Base class for translation update failures."""

    kind: ErrorKind

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message} ({self.cause})"
        return self.message

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "cause": str(self.cause) if self.cause is not None else None,
        }


class LocaleResolutionError(TranslationError):
    kind = ErrorKind.LOCALE_RESOLUTION


class DownloadError(TranslationError):
    kind = ErrorKind.DOWNLOAD


class ParseError(TranslationError):
    kind = ErrorKind.PARSE


class WriteError(TranslationError):
    """A ``.po``, ``.mo`` or ``.json`` file could not be written."""

    kind = ErrorKind.WRITE

    def __init__(
        self,
        message: str,
        target: str,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message, cause)
        self.target = target

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["target"] = self.target
        return data

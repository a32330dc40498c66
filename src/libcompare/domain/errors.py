"""Exception hierarchy for libcompare."""

from __future__ import annotations


class HarnessError(Exception):
    """Base class for every error the harness raises on purpose."""


class NestingError(HarnessError):
    """Raised when a runner event arrives in an inconsistent nesting state."""


class NothingToReportError(HarnessError):
    """Raised when a report is requested for zero libraries."""

    def __init__(self, message: str = "Nothing to report on") -> None:
        super().__init__(message)


class ConfigError(HarnessError):
    """Raised when libcompare.yaml holds invalid values."""


class RecordingError(HarnessError):
    """Raised when an event recording cannot be replayed."""

from __future__ import annotations

from typing import Optional, Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""

    error_type = "DomainError"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    error_type = "ValidationError"


class InvalidTimeFormat(ValidationError):
    """A time-of-day string is not HH:MM[:SS] or has out-of-range parts."""

    error_type = "InvalidTimeFormat"


class InvalidTimeRange(ValidationError):
    """A same-day shift does not end after it starts."""

    error_type = "InvalidTimeRange"


class ReferentialError(DomainError):
    """Raised when a referenced worker or client does not exist."""

    error_type = "ReferentialError"

    def __init__(self, message: str, *, missing_ids: Sequence[object] = ()):
        super().__init__(message)
        self.missing_ids = list(missing_ids)


class ConflictError(DomainError):
    """Raised when shifts or pay periods overlap.

    Carries every conflict found, not only the first one.
    """

    error_type = "ConflictError"

    def __init__(self, message: str, *, conflicts: Optional[Sequence[str]] = None, overlapping: Sequence = ()):
        super().__init__(message)
        self.conflicts = list(conflicts or [])
        self.overlapping = list(overlapping)

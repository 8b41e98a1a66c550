from __future__ import annotations

from .enums import FailureReason


class DomainError(Exception):
    """Base exception for business rule violations."""

    default_reason = FailureReason.VALIDATION

    def __init__(self, message: str, *, reason: FailureReason | None = None):
        super().__init__(message)
        self.reason = reason or self.default_reason


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced employee, request or pay period does not exist."""

    default_reason = FailureReason.NOT_FOUND


class AlreadyProcessedError(DomainError):
    """Raised when a request is no longer Pending."""

    default_reason = FailureReason.ALREADY_PROCESSED


class AlreadyMarkedError(DomainError):
    """Raised when time-in/time-out is already recorded for the day."""

    default_reason = FailureReason.ALREADY_MARKED


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    default_reason = FailureReason.UNAUTHORIZED


class ConfigurationError(DomainError):
    """Raised when settings (e.g. the tax bracket table) are inconsistent."""

    default_reason = FailureReason.CONFIGURATION


class StorageError(DomainError):
    """Raised when the storage collaborator fails.

    Not an expected business failure: public operations let it propagate.
    """

    default_reason = FailureReason.STORAGE

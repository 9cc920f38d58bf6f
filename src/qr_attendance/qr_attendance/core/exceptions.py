from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations.

    Every error carries a stable ``code`` and the HTTP ``status`` the API answers with.
    """

    code = "DOMAIN_ERROR"
    status = 400

    def __init__(self, message: str = "", *, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "VALIDATION_ERROR"
    status = 400


class NotFoundError(DomainError):
    """Raised when a session is unknown or not visible to the caller."""

    code = "SESSION_NOT_FOUND"
    status = 404


class InactiveSessionError(DomainError):
    """Raised when a session exists but is outside its open window."""

    code = "SESSION_INACTIVE"
    status = 404


class DuplicateError(DomainError):
    """Raised when the student already has a record for the session."""

    code = "DUPLICATE_ATTENDANCE"
    status = 409


class StorageError(DomainError):
    """Raised when the underlying store fails."""

    code = "STORAGE_ERROR"
    status = 500


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid or missing."""

    code = "UNAUTHORIZED"
    status = 401

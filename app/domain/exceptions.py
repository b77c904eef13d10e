# app/domain/exceptions.py

"""
Domain exceptions.

Every exception carries the HTTP status and the stable error code the
ErrorHandlerMiddleware sends back to the caller. Messages are safe to expose;
anything sensitive belongs in the logs, not in ``message`` or ``details``.
"""

from typing import Any, Optional


class DomainException(Exception):
    """Base class for all exceptions mapped to an HTTP response."""

    status_code: int = 400
    internal_code: str = "DOMAIN_ERROR"

    def __init__(
            self,
            message: str = "Domain error.",
            details: Optional[Any] = None,
            status_code: Optional[int] = None,
            internal_code: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code
        if internal_code is not None:
            self.internal_code = internal_code

    def __str__(self) -> str:
        return self.message


# ─────────────────────────────────────────────────────────────
# Validation (400)

class ValidationException(DomainException):
    status_code = 400
    internal_code = "VALIDATION_ERROR"

    def __init__(self, message: str = "Invalid request data.", details: Optional[Any] = None, **kwargs):
        super().__init__(message=message, details=details, **kwargs)


# ─────────────────────────────────────────────────────────────
# Authentication (401) / Authorization (403)

class InvalidCredentialsException(DomainException):
    """Login failure. Unknown user and wrong password share this exception."""

    status_code = 401
    internal_code = "AUTH_INVALID_CREDENTIALS"

    def __init__(self, message: str = "Invalid credentials.", **kwargs):
        super().__init__(message=message, **kwargs)


class MissingTokenException(DomainException):
    status_code = 401
    internal_code = "AUTH_TOKEN_MISSING"

    def __init__(self, message: str = "No token provided.", **kwargs):
        super().__init__(message=message, **kwargs)


class InvalidTokenException(DomainException):
    """
    Any token failure: bad signature, malformed, expired, revoked, wrong class.

    ``reason`` is for logs and internal control flow only (e.g. deciding whether
    a transparent refresh is allowed). It is never part of the response.
    """

    status_code = 401
    internal_code = "AUTH_TOKEN_INVALID"

    EXPIRED = "expired"
    MALFORMED = "malformed"
    SIGNATURE = "signature"
    WRONG_TYPE = "wrong_type"
    REVOKED = "revoked"
    STALE_VERSION = "stale_version"
    UNKNOWN_USER = "unknown_user"

    def __init__(self, message: str = "Invalid token.", reason: Optional[str] = None, **kwargs):
        super().__init__(message=message, **kwargs)
        self.reason = reason

    @property
    def is_expired(self) -> bool:
        return self.reason == self.EXPIRED


class InsufficientPermissionsException(DomainException):
    status_code = 403
    internal_code = "AUTH_INSUFFICIENT_PERMISSIONS"

    def __init__(self, message: str = "Insufficient permissions.", **kwargs):
        super().__init__(message=message, **kwargs)


# ─────────────────────────────────────────────────────────────
# Resources

class ResourceNotFoundException(DomainException):
    status_code = 404
    internal_code = "RESOURCE_NOT_FOUND"

    def __init__(self, message: str = "Resource not found.", resource_id: Optional[Any] = None, **kwargs):
        super().__init__(message=message, **kwargs)
        self.resource_id = resource_id


# ─────────────────────────────────────────────────────────────
# Infrastructure (500)

class DatabaseOperationException(DomainException):
    """Storage failure. The original error is kept for logging only."""

    status_code = 500
    internal_code = "DATABASE_ERROR"
    PUBLIC_MESSAGE = "Database operation failed."

    def __init__(self, message: str = PUBLIC_MESSAGE, original_error: Optional[Exception] = None,
                 **kwargs):
        super().__init__(message=message, **kwargs)
        self.original_error = original_error


class EncryptionException(DomainException):
    status_code = 500
    internal_code = "ENCRYPTION_ERROR"

    def __init__(self, message: str = "Encryption failed.", **kwargs):
        super().__init__(message=message, **kwargs)


class DecryptionException(DomainException):
    """Malformed envelope or failed authentication tag. Always raised, never swallowed."""

    status_code = 500
    internal_code = "DECRYPTION_ERROR"

    def __init__(self, message: str = "Decryption failed.", **kwargs):
        super().__init__(message=message, **kwargs)

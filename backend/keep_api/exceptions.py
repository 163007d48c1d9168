"""
Keep API — Custom Exception Hierarchy
=======================================

What:  Application-specific exceptions for the error taxonomy of the API.
Why:   Services raise typed errors; global handlers in main.py turn them into
       JSON responses with the right status code. Internal details live in
       `context`, which is logged but never returned to the client.

Exception Hierarchy:
    KeepError (base)
    ├── ValidationError            → 400 Bad Request
    │   └── DuplicateUsernameError → 400 Bad Request
    ├── NotFoundError              → 404 Not Found
    ├── MissingTokenError          → 403 Forbidden
    ├── InvalidTokenError          → 401 Unauthorized
    ├── InvalidCredentialsError    → 401 Unauthorized
    └── DatabaseError              → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class KeepError(Exception):
    """
    Base exception for all Keep API application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(KeepError):
    """
    Raised when client input fails validation.

    When:    Reorder payload is not a list, PATCH names a column outside
             the allow-list, required fields are missing.
    HTTP:    400 Bad Request
    """

    status_code = 400
    error_code = "validation_error"

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class DuplicateUsernameError(ValidationError):
    """Registration attempted with a username that already exists."""

    error_code = "duplicate_username"

    def __init__(self, username: str):
        super().__init__(
            message="Username already exists",
            field="username",
            context={"username": username},
        )
        self.username = username


class NotFoundError(KeepError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing rows; services convert that into
    this exception so the 404 stays distinct from a database failure.
    """

    status_code = 404
    error_code = "not_found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource.capitalize()} with id: {resource_id} not found."
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class MissingTokenError(KeepError):
    """No bearer token on a protected route (HTTP 403)."""

    status_code = 403
    error_code = "no_token"

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="No token provided", context=context)


class InvalidTokenError(KeepError):
    """
    Token failed verification (HTTP 401).

    Bad signature, malformed payload and expiry all raise this one error with
    the same message, so callers learn nothing about why it failed.
    """

    status_code = 401
    error_code = "unauthorized"

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Unauthorized", context=context)


class InvalidCredentialsError(KeepError):
    """Login with an unknown username or a wrong password (HTTP 401)."""

    status_code = 401
    error_code = "invalid_credentials"

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Invalid credentials", context=context)


class DatabaseError(KeepError):
    """
    Raised when database operations fail unexpectedly.

    Security Note:
        The message returned to the client is always generic. The driver
        error, constraint name or SQL is logged server-side only.
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)

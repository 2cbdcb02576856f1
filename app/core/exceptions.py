"""App-wide exception hierarchy.

This module provides a unified exception system with automatic HTTP status code
mapping and consistent error response formatting. Field-level failures carry an
``errors`` map (e.g. ``{"email": "notFound"}``) so clients can render
per-field messages.
"""


class AppException(Exception):
    """Base exception for all application errors.

    All custom exceptions inherit from this class and define their own
    status_code and error_type for consistent API responses.
    """

    status_code: int = 500
    error_type: str = "internal_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        errors: dict[str, str] | None = None,
    ):
        self.message = message
        self.errors = errors or {}
        super().__init__(message)


# Authentication errors (401)
class UnauthorizedError(AppException):
    """Base class for authentication failures."""

    status_code = 401
    error_type = "unauthorized"

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message)


# Authorization errors (403)
class ForbiddenError(AppException):
    """Base class for authorization failures."""

    status_code = 403
    error_type = "forbidden"

    def __init__(self, message: str = "Access denied"):
        super().__init__(message)


# Not found errors (404)
class NotFoundError(AppException):
    """Referenced entity is absent or in the wrong state."""

    status_code = 404
    error_type = "not_found"

    def __init__(
        self,
        message: str = "Resource not found",
        errors: dict[str, str] | None = None,
    ):
        super().__init__(message, errors)


# Validation errors (422)
class ValidationError(AppException):
    """Malformed or ineligible input, tagged by field."""

    status_code = 422
    error_type = "validation_error"

    def __init__(
        self,
        message: str = "Validation failed",
        errors: dict[str, str] | None = None,
    ):
        super().__init__(message, errors)


# External service errors (502)
class ExternalServiceError(AppException):
    """Base class for upstream (store or notification) failures."""

    status_code = 502
    error_type = "external_service_error"

    def __init__(self, message: str = "External service error"):
        super().__init__(message)

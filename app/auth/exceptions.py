"""Auth domain exceptions.

Authentication and authorization related exceptions.
"""

from app.core.exceptions import ForbiddenError, UnauthorizedError


# Authentication errors (401)
class InvalidTokenError(UnauthorizedError):
    """Raised when a token is missing, malformed, badly signed or expired."""

    error_type = "invalid_token"

    def __init__(self, message: str = "Invalid authentication token"):
        super().__init__(message)


class MissingTokenClaimError(UnauthorizedError):
    """Raised when a verified access token lacks a required claim."""

    error_type = "missing_token_claim"

    def __init__(self, message: str = "Token is missing required claims"):
        super().__init__(message)


class SessionInvalidError(UnauthorizedError):
    """Raised when a refresh session is missing or its hash does not match."""

    error_type = "session_invalid"

    def __init__(self, message: str = "Session not found or hash mismatch"):
        super().__init__(message)


# Authorization errors (403)
class InsufficientRoleError(ForbiddenError):
    """Raised when the caller's role is not allowed for the route."""

    error_type = "insufficient_role"

    def __init__(self, message: str = "Insufficient role for this operation"):
        super().__init__(message)

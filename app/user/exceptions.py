"""User domain exceptions."""

from app.core.exceptions import NotFoundError, ValidationError


class UserNotFoundError(NotFoundError):
    """Raised when user cannot be found."""

    error_type = "user_not_found"

    def __init__(self, message: str = "User not found"):
        super().__init__(message, {"user": "notFound"})


class EmailExistsError(ValidationError):
    """Raised when an email is already owned by another user."""

    error_type = "email_exists"

    def __init__(self, message: str = "Email already registered"):
        super().__init__(message, {"email": "emailAlreadyExists"})

"""User domain schemas.

Request and response schemas for user operations.

Security notes:
- password (bcrypt hash) is never part of a response schema
- emails are lower-cased on input
"""

import uuid
from datetime import UTC, datetime
from typing import Annotated

from pydantic import (
    AfterValidator,
    EmailStr,
    Field,
    StringConstraints,
    field_serializer,
    field_validator,
)
from sqlmodel import SQLModel

from app.user.models import AuthProvider, Role, UserStatus


def _lower(value: str | None) -> str | None:
    return value.lower() if isinstance(value, str) else value


def _fits_bcrypt(value: str) -> str:
    if len(value.encode("utf-8")) > 72:
        raise ValueError("Password must be at most 72 bytes")
    return value


def reject_null(value: object) -> object:
    """Before-validator for optional fields that may be omitted but not nulled."""
    if value is None:
        raise ValueError("Field may be omitted but not set to null")
    return value


# bcrypt only accepts up to 72 bytes of input.
Password = Annotated[
    str, StringConstraints(min_length=6, max_length=72), AfterValidator(_fits_bcrypt)
]


class UserRead(SQLModel):
    """Response schema for user data. Excludes the password hash."""

    id: uuid.UUID
    email: str | None
    provider: AuthProvider
    social_id: str | None
    first_name: str | None
    last_name: str | None
    role: Role
    status: UserStatus
    created_at: datetime
    updated_at: datetime

    @field_serializer("created_at", "updated_at")
    def serialize_datetime(self, value: datetime) -> str:
        """Format datetime as ISO 8601 string in UTC with a Z suffix."""
        # Naive values come back from SQLite and are already UTC.
        if value.tzinfo is not None:
            value = value.astimezone(UTC)
        else:
            value = value.replace(tzinfo=UTC)
        return value.replace(microsecond=0).isoformat().replace("+00:00", "Z")


class UserCreate(SQLModel):
    """Fields accepted when creating a user.

    ``password`` is plain text here; UsersService hashes it before storage.
    """

    email: EmailStr | None = None
    password: Password | None = None
    first_name: str | None = Field(default=None, max_length=50)
    last_name: str | None = Field(default=None, max_length=50)
    provider: AuthProvider = AuthProvider.email
    social_id: str | None = None
    role: Role = Role.user
    status: UserStatus = UserStatus.inactive

    @field_validator("email", mode="after")
    @classmethod
    def normalize_email(cls, value: str | None) -> str | None:
        return _lower(value)


class UserUpdate(SQLModel):
    """Partial update. Only explicitly set fields are applied."""

    email: EmailStr | None = None
    password: Password | None = None
    first_name: str | None = Field(default=None, max_length=50)
    last_name: str | None = Field(default=None, max_length=50)
    provider: AuthProvider | None = None
    social_id: str | None = None
    role: Role | None = None
    status: UserStatus | None = None

    @field_validator("email", mode="after")
    @classmethod
    def normalize_email(cls, value: str | None) -> str | None:
        return _lower(value)

    @field_validator("provider", "role", "status", mode="before")
    @classmethod
    def not_null(cls, value: object) -> object:
        # Backed by NOT NULL columns.
        return reject_null(value)

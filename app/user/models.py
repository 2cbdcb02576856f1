"""User domain models.

SQLModel table definition for User plus the role, status and provider enums
it references.
"""

import uuid
from enum import Enum

from sqlmodel import Field, SQLModel

from app.core.mixins import TimestampMixin


class Role(str, Enum):
    """Capability tier carried in access tokens."""

    admin = "admin"
    user = "user"
    moderator = "moderator"
    patient = "patient"
    doctor = "doctor"


class UserStatus(str, Enum):
    """User account status.

    - inactive: Registered, email not confirmed yet (or deactivated by admin)
    - active: Email confirmed
    """

    active = "active"
    inactive = "inactive"


class AuthProvider(str, Enum):
    """Origin of a user's identity. Only ``email`` accounts have a password."""

    email = "email"
    google = "google"
    facebook = "facebook"
    apple = "apple"
    twitter = "twitter"


class User(TimestampMixin, SQLModel, table=True):
    """User database model.

    Note: password holds the bcrypt hash and must never be exposed in
    API responses.
    """

    __tablename__: str = "users"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    email: str | None = Field(default=None, index=True, unique=True, max_length=255)
    password: str | None = Field(default=None, max_length=255)
    provider: AuthProvider = Field(default=AuthProvider.email, max_length=20)
    social_id: str | None = Field(default=None, index=True, max_length=255)
    first_name: str | None = Field(default=None, max_length=50)
    last_name: str | None = Field(default=None, max_length=50)
    role: Role = Field(default=Role.user, max_length=20)
    status: UserStatus = Field(default=UserStatus.inactive, max_length=20)

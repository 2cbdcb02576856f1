"""Auth domain schemas.

Request and response schemas for authentication operations, plus the claim
sets carried by the three token kinds. Claims use camelCase on the wire.
"""

import uuid

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.user.models import Role
from app.user.schemas import Password, UserRead, reject_null


def _lower(value: str) -> str:
    return value.lower()


class AuthEmailLogin(BaseModel):
    """Request schema for email/password login."""

    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email", mode="after")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return _lower(value)


class AuthRegister(BaseModel):
    """Request schema for user registration."""

    email: EmailStr
    password: Password
    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)

    @field_validator("email", mode="after")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return _lower(value)


class AuthConfirmEmail(BaseModel):
    """Request schema for confirming an email with the mailed hash."""

    hash: str = Field(min_length=1)


class AuthUpdate(BaseModel):
    """Self-service profile update.

    Setting ``password`` requires ``old_password`` for re-authentication.
    """

    first_name: str | None = Field(default=None, min_length=1, max_length=50)
    last_name: str | None = Field(default=None, min_length=1, max_length=50)
    email: EmailStr | None = None
    password: Password | None = None
    old_password: str | None = Field(default=None, min_length=1)

    @field_validator("first_name", "last_name", "email", mode="before")
    @classmethod
    def not_null(cls, value: object) -> object:
        return reject_null(value)

    @field_validator("email", mode="after")
    @classmethod
    def normalize_email(cls, value: str | None) -> str | None:
        return _lower(value) if value is not None else None


class TokenResponse(BaseModel):
    """Response schema for token refresh.

    ``token_expires`` is the absolute access-token expiry in epoch
    milliseconds.
    """

    token: str
    refresh_token: str
    token_expires: int


class LoginResponse(TokenResponse):
    """Response schema for login."""

    user: UserRead


# Token claims


class AccessTokenClaims(BaseModel):
    """Claims of an access token: ``{id, role, sessionId}``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: uuid.UUID
    role: Role | None = None
    session_id: uuid.UUID = Field(alias="sessionId")

    def to_claims(self) -> dict[str, str | None]:
        return {
            "id": str(self.id),
            "role": self.role.value if self.role else None,
            "sessionId": str(self.session_id),
        }


class RefreshTokenClaims(BaseModel):
    """Claims of a refresh token: ``{sessionId, hash}``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    session_id: uuid.UUID = Field(alias="sessionId")
    hash: str

    def to_claims(self) -> dict[str, str]:
        return {"sessionId": str(self.session_id), "hash": self.hash}


class ConfirmEmailClaims(BaseModel):
    """Claims of an email-confirmation token: ``{confirmEmailUserId}``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    confirm_email_user_id: uuid.UUID = Field(alias="confirmEmailUserId")

    def to_claims(self) -> dict[str, str]:
        return {"confirmEmailUserId": str(self.confirm_email_user_id)}

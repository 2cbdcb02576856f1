"""Users service (the Credential Store seen by the auth service).

Wraps the repository with password hashing, email uniqueness checks and
provider defaults.
"""

import logging
import uuid
from collections.abc import Sequence
from typing import Protocol

from app.core.exceptions import ValidationError
from app.core.security import PasswordHasher
from app.user.exceptions import EmailExistsError
from app.user.models import AuthProvider, User
from app.user.repository import UserRepository
from app.user.schemas import UserCreate, UserUpdate

logger = logging.getLogger(__name__)


class UserStore(Protocol):
    """What the auth service needs from the users module."""

    async def create(self, data: UserCreate) -> User: ...

    async def find_by_id(self, user_id: uuid.UUID) -> User | None: ...

    async def find_by_email(self, email: str) -> User | None: ...

    async def update(self, user_id: uuid.UUID, data: UserUpdate) -> User | None: ...

    async def remove(self, user_id: uuid.UUID) -> None: ...


class UsersService:
    def __init__(self, repository: UserRepository, hasher: PasswordHasher) -> None:
        self.repository = repository
        self.hasher = hasher

    async def create(self, data: UserCreate) -> User:
        """Create a user, hashing the password if one is given.

        Raises:
            EmailExistsError: If the email is already registered
        """
        if data.email and await self.repository.find_by_email(data.email):
            raise EmailExistsError()

        password = await self.hasher.hash(data.password) if data.password else None

        user = User(
            email=data.email,
            password=password,
            provider=data.provider,
            social_id=data.social_id,
            first_name=data.first_name,
            last_name=data.last_name,
            role=data.role,
            status=data.status,
        )
        user = await self.repository.create(user)
        logger.info("User created", extra={"user_id": user.id})
        return user

    async def find_by_id(self, user_id: uuid.UUID) -> User | None:
        return await self.repository.find_by_id(user_id)

    async def find_by_email(self, email: str) -> User | None:
        return await self.repository.find_by_email(email.lower())

    async def find_many(self, *, offset: int = 0, limit: int = 50) -> Sequence[User]:
        return await self.repository.find_many(offset=offset, limit=limit)

    async def update(self, user_id: uuid.UUID, data: UserUpdate) -> User | None:
        """Apply the fields explicitly set on ``data``.

        A new password is hashed; an email already owned by another user is
        rejected. Returns None if the user does not exist.

        Raises:
            EmailExistsError: If the new email belongs to another user
            ValidationError: If the email of an ``email`` account is cleared
        """
        payload = data.model_dump(exclude_unset=True)

        if "email" in payload and payload["email"] is None:
            user = await self.repository.find_by_id(user_id)
            provider = payload.get("provider", user.provider if user else None)
            if provider == AuthProvider.email:
                raise ValidationError("Email is required", {"email": "emailRequired"})

        if payload.get("password"):
            payload["password"] = await self.hasher.hash(payload["password"])
        else:
            payload.pop("password", None)

        email = payload.get("email")
        if email:
            owner = await self.repository.find_by_email(email)
            if owner is not None and owner.id != user_id:
                raise EmailExistsError()

        return await self.repository.update(user_id, payload)

    async def remove(self, user_id: uuid.UUID) -> None:
        await self.repository.remove(user_id)
        logger.info("User removed", extra={"user_id": user_id})

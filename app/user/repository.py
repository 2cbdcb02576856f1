"""User persistence.

``SQLUserRepository`` is the only code that touches the ``users`` table.
Email uniqueness is ultimately a database constraint; a violation of that
constraint is surfaced as ``EmailExistsError``. Other integrity errors
propagate unchanged.
"""

import uuid
from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.user.exceptions import EmailExistsError
from app.user.models import User


def _is_email_conflict(error: IntegrityError) -> bool:
    # sqlite: "UNIQUE constraint failed: users.email"
    # postgres: duplicate key value violates unique constraint "ix_users_email"
    message = str(error.orig).lower()
    return "email" in message and ("unique" in message or "duplicate" in message)


class UserRepository(Protocol):
    async def create(self, user: User) -> User: ...

    async def find_by_id(self, user_id: uuid.UUID) -> User | None: ...

    async def find_by_email(self, email: str) -> User | None: ...

    async def find_many(self, *, offset: int, limit: int) -> Sequence[User]: ...

    async def update(
        self, user_id: uuid.UUID, payload: Mapping[str, Any]
    ) -> User | None: ...

    async def remove(self, user_id: uuid.UUID) -> None: ...


class SQLUserRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _commit(self, user: User) -> User:
        self.session.add(user)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            if _is_email_conflict(e):
                raise EmailExistsError() from e
            raise
        await self.session.refresh(user)
        return user

    async def create(self, user: User) -> User:
        return await self._commit(user)

    async def find_by_id(self, user_id: uuid.UUID) -> User | None:
        return await self.session.get(User, user_id)

    async def find_by_email(self, email: str) -> User | None:
        result = await self.session.exec(select(User).where(User.email == email))
        return result.first()

    async def find_many(self, *, offset: int, limit: int) -> Sequence[User]:
        result = await self.session.exec(
            select(User).order_by(User.created_at).offset(offset).limit(limit)
        )
        return result.all()

    async def update(
        self, user_id: uuid.UUID, payload: Mapping[str, Any]
    ) -> User | None:
        user = await self.session.get(User, user_id)
        if user is None:
            return None
        for key, value in payload.items():
            setattr(user, key, value)
        return await self._commit(user)

    async def remove(self, user_id: uuid.UUID) -> None:
        user = await self.session.get(User, user_id)
        if user is None:
            return
        await self.session.delete(user)
        await self.session.commit()

"""Session persistence (the Session Store)."""

import uuid
from typing import Protocol

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.session.models import UserSession


class SessionStore(Protocol):
    async def create(self, *, user_id: uuid.UUID, hash: str) -> UserSession: ...

    async def find_by_id(self, session_id: uuid.UUID) -> UserSession | None: ...

    async def delete_by_id(self, session_id: uuid.UUID) -> None: ...

    async def delete_by_user_id_except(
        self, *, user_id: uuid.UUID, exclude_session_id: uuid.UUID
    ) -> None: ...


class SQLSessionRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, *, user_id: uuid.UUID, hash: str) -> UserSession:
        user_session = UserSession(user_id=user_id, hash=hash)
        self.session.add(user_session)
        await self.session.commit()
        await self.session.refresh(user_session)
        return user_session

    async def find_by_id(self, session_id: uuid.UUID) -> UserSession | None:
        return await self.session.get(UserSession, session_id)

    async def delete_by_id(self, session_id: uuid.UUID) -> None:
        user_session = await self.session.get(UserSession, session_id)
        if user_session is None:
            return
        await self.session.delete(user_session)
        await self.session.commit()

    async def delete_by_user_id_except(
        self, *, user_id: uuid.UUID, exclude_session_id: uuid.UUID
    ) -> None:
        result = await self.session.exec(
            select(UserSession).where(
                UserSession.user_id == user_id,
                UserSession.id != exclude_session_id,
            )
        )
        for user_session in result.all():
            await self.session.delete(user_session)
        await self.session.commit()

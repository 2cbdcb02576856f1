from collections.abc import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import app.models  # noqa: F401  (registers tables in SQLModel.metadata)
from app.core.settings import get_settings


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """Enforce FK constraints (and ON DELETE CASCADE) on SQLite connections."""
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine.sync_engine, "connect")
    def _set_pragma(dbapi_connection, _connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


_settings = get_settings()

engine = create_async_engine(_settings.database_url, echo=False)
enable_sqlite_foreign_keys(engine)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


async def create_db_and_tables() -> None:
    """Create missing tables (DATABASE_SYNCHRONIZE=true)."""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

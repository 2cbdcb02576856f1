"""Shared dependency type aliases for FastAPI routes.

Domain-specific dependencies (auth claims, services) live beside their
domain, e.g. ``app.auth.dependencies``.
"""

from typing import Annotated

from fastapi import Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.settings import Settings, get_settings
from app.db.engine import get_session

# Database session (one per request)
SessionDep = Annotated[AsyncSession, Depends(get_session)]

# Application settings
SettingsDep = Annotated[Settings, Depends(get_settings)]

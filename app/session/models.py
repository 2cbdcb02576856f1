"""Session domain models.

A session is one refresh-able login. A user may own many (one per device).
"""

import uuid

from sqlmodel import Field, SQLModel

from app.core.mixins import TimestampMixin


class UserSession(TimestampMixin, SQLModel, table=True):
    """Server-side session record.

    ``hash`` is the hex sha256 of a random value generated at creation; it is
    embedded in refresh tokens and compared for equality, never re-derived.
    """

    __tablename__: str = "sessions"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", ondelete="CASCADE", index=True)
    hash: str = Field(max_length=64)

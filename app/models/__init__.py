"""
Model package.

IMPORTANT (SQLModel metadata):
- ``SQLModel.metadata.create_all`` (startup synchronisation, tests) only sees
  tables whose models have been imported.
- This module must import all SQLModel ``table=True`` models to register them.
"""

from app.session.models import UserSession  # noqa: F401
from app.user.models import User  # noqa: F401

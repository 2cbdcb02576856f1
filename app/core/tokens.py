"""Signed, time-limited tokens (JWT, HS256).

The signer is stateless: every call names its own secret and expiry, so the
access, refresh and email-confirmation tokens never share a key.
"""

from collections.abc import Mapping
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from app.auth.exceptions import InvalidTokenError

ALGORITHM = "HS256"


class TokenSigner:
    """Sign and verify JWTs carrying arbitrary claims."""

    def __init__(self, algorithm: str = ALGORITHM) -> None:
        self.algorithm = algorithm

    async def sign(
        self,
        claims: Mapping[str, Any],
        *,
        secret: str,
        expires_in: timedelta,
    ) -> str:
        """Sign ``claims`` with ``secret``; the token expires after ``expires_in``."""
        now = datetime.now(UTC)
        payload = {**claims, "iat": now, "exp": now + expires_in}
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    async def verify(self, token: str, *, secret: str) -> dict[str, Any]:
        """Decode ``token`` and return its claims.

        Raises:
            InvalidTokenError: Bad signature, malformed token or expired
        """
        try:
            return jwt.decode(token, secret, algorithms=[self.algorithm])
        except jwt.PyJWTError as e:
            raise InvalidTokenError() from e

"""Password hashing and session secret generation.

bcrypt is CPU-bound, so hashing and verification run in a worker thread
to keep the event loop responsive.
"""

import hashlib
import secrets

import bcrypt
from anyio import to_thread


class PasswordHasher:
    """Bcrypt password hashing utility."""

    def __init__(self, rounds: int = 10) -> None:
        self.rounds = rounds

    def _hash_sync(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def _verify_sync(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(
                password.encode("utf-8"), password_hash.encode("utf-8")
            )
        except ValueError:
            # Malformed stored hash or a password bcrypt refuses (> 72 bytes).
            return False

    async def hash(self, password: str) -> str:
        """Hash a password with a fresh salt."""
        return await to_thread.run_sync(self._hash_sync, password)

    async def verify(self, password: str, password_hash: str) -> bool:
        """Constant-time check of a password against a stored bcrypt hash."""
        return await to_thread.run_sync(self._verify_sync, password, password_hash)


def generate_session_hash() -> str:
    """Return the hex sha256 of a fresh cryptographically random value.

    Only the digest is ever stored or embedded in tokens.
    """
    return hashlib.sha256(secrets.token_bytes(32)).hexdigest()

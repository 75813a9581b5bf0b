"""Password hashing with bcrypt."""
import asyncio
from typing import Optional

import bcrypt

from ..config import settings
from .exceptions import HashingError

# bcrypt only looks at the first 72 bytes of its input.
BCRYPT_MAX_BYTES = 72


def _encode(secret: str) -> bytes:
    return secret.encode("utf-8")[:BCRYPT_MAX_BYTES]


class PasswordHasher:
    """One-way password hasher.

    Every call to ``hash`` draws a fresh salt, so two users with the same
    password still get different hashes. ``rounds`` is the bcrypt cost
    factor.

    Input is cut to 72 bytes before hashing, so two secrets that share
    their first 72 bytes verify against each other. Registration rejects
    longer passwords.
    """

    def __init__(self, rounds: Optional[int] = None):
        self.rounds = rounds if rounds is not None else settings.auth.bcrypt_rounds
        self._dummy_hash: Optional[str] = None

    def hash(self, secret: str) -> str:
        """Hash a plaintext password."""
        try:
            salt = bcrypt.gensalt(rounds=self.rounds)
            return bcrypt.hashpw(_encode(secret), salt).decode("utf-8")
        except (OSError, ValueError) as e:
            raise HashingError(details={"reason": type(e).__name__}) from e

    def verify(self, candidate: str, stored: str) -> bool:
        """Check a plaintext password against a stored hash."""
        try:
            return bcrypt.checkpw(_encode(candidate), stored.encode("utf-8"))
        except ValueError as e:
            raise HashingError("Stored password hash is malformed") from e

    async def hash_async(self, secret: str) -> str:
        return await asyncio.to_thread(self.hash, secret)

    async def verify_async(self, candidate: str, stored: str) -> bool:
        return await asyncio.to_thread(self.verify, candidate, stored)

    async def dummy_verify_async(self, candidate: str) -> bool:
        """Spend the cost of a real verification; always False."""
        if self._dummy_hash is None:
            self._dummy_hash = await self.hash_async("dummy-password-for-timing")
        await self.verify_async(candidate, self._dummy_hash)
        return False

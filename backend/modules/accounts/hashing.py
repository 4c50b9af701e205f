"""
bcrypt password hasher.

bcrypt is CPU-bound by design, so every call runs in a worker thread and
the coroutine suspends until it completes.
"""

import asyncio
import logging

import bcrypt

from .exceptions import MalformedDigestError, PasswordTooLongError

logger = logging.getLogger(__name__)

# bcrypt only reads the first 72 bytes of its input.
MAX_PASSWORD_BYTES = 72
DEFAULT_ROUNDS = 10


class BcryptPasswordHasher:
    """Implements IPasswordHasher with the ``bcrypt`` package."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        self.rounds = rounds

    async def generate_salt(self) -> bytes:
        return await asyncio.to_thread(bcrypt.gensalt, self.rounds)

    async def hash(self, plaintext: str, salt: bytes) -> str:
        password = plaintext.encode("utf-8")
        if len(password) > MAX_PASSWORD_BYTES:
            raise PasswordTooLongError(MAX_PASSWORD_BYTES, len(password))

        digest = await asyncio.to_thread(bcrypt.hashpw, password, salt)
        logger.debug(f"Hashed password with cost {self.rounds}")
        return digest.decode("utf-8")

    async def hash_password(self, plaintext: str) -> str:
        """Generate a salt and hash in one call."""
        salt = await self.generate_salt()
        return await self.hash(plaintext, salt)

    async def verify(self, plaintext: str, digest: str) -> bool:
        password = plaintext.encode("utf-8")
        if len(password) > MAX_PASSWORD_BYTES:
            # Never hashed on write, so it cannot match a stored digest.
            return False

        try:
            return await asyncio.to_thread(bcrypt.checkpw, password, digest.encode("utf-8"))
        except ValueError as e:
            logger.warning("Password verification against a malformed digest")
            raise MalformedDigestError() from e

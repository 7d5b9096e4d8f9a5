"""Password hashing helpers using passlib.

``PasswordHasher`` wraps a passlib ``CryptContext`` configured for bcrypt. The
bcrypt cost comes from ``Settings.bcrypt_rounds`` (env ``BCRYPT_ROUNDS``);
when unset, passlib's default is used. The bcrypt backend is pinned to 4.0.x,
the last release line passlib 1.7.4 loads cleanly; if it is missing or fails its
self-test anyway, the context falls back to pbkdf2_sha256 with a warning.
"""
from __future__ import annotations

import logging
from typing import Optional

from passlib.context import CryptContext

logger = logging.getLogger(__name__)


def build_context(rounds: Optional[int] = None) -> CryptContext:
    try:
        if rounds:
            ctx = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)
        else:
            ctx = CryptContext(schemes=["bcrypt"], deprecated="auto")
        # forces backend loading, which is lazy in passlib
        ctx.hash("test")
        return ctx
    except Exception as exc:
        logger.warning(
            "bcrypt backend not available or failed to initialize; falling back to pbkdf2_sha256 (%s)",
            exc,
        )
    if rounds:
        return CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto", pbkdf2_sha256__rounds=rounds)
    return CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class PasswordHasher:
    def __init__(self, rounds: Optional[int] = None):
        self._ctx = build_context(rounds)

    @property
    def scheme(self) -> str:
        return self._ctx.default_scheme()

    def hash(self, plain: str) -> str:
        """Hash a plaintext password and return the encoded hash string."""
        if plain is None:
            raise ValueError("Password must not be None")
        return self._ctx.hash(plain)

    def verify(self, plain: str, hashed: str) -> bool:
        """Return True if ``plain`` matches the stored hash, False otherwise."""
        if plain is None or hashed is None:
            return False
        try:
            return self._ctx.verify(plain, hashed)
        except (ValueError, TypeError):
            # malformed hash or a password the backend refuses
            return False

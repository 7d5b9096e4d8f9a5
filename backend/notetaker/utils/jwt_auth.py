from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from notetaker.config import Settings


class TokenService:
    """Issues and checks the HS256 access tokens handed out by ``/login``."""

    def __init__(self, settings: Settings):
        self._secret = settings.jwt_secret
        self._algorithm = settings.jwt_algorithm
        self._exp_minutes = settings.jwt_exp_minutes

    def _require_secret(self) -> str:
        if not self._secret:
            # set it in env for dev/tests; mandatory in prod
            raise RuntimeError("JWT_SECRET is not set")
        return self._secret

    @property
    def max_age_seconds(self) -> int:
        return self._exp_minutes * 60

    def create_access_token(self, subject: str) -> str:
        now = datetime.now(timezone.utc)
        exp = now + timedelta(minutes=self._exp_minutes)
        payload = {"sub": subject, "iat": int(now.timestamp()), "exp": int(exp.timestamp())}
        return jwt.encode(payload, self._require_secret(), algorithm=self._algorithm)

    def subject_of(self, token: str) -> Optional[str]:
        """Return the ``sub`` claim of a valid token, or None."""
        if not self._secret:
            return None
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JWTError:
            return None
        sub = payload.get("sub")
        return str(sub) if sub else None

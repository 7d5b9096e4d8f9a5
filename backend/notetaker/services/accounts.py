from __future__ import annotations

import logging
from typing import Any

from notetaker.errors import Conflict, Unauthorized
from notetaker.models.validation import validate_login, validate_registration
from notetaker.services.notes import storage_boundary
from notetaker.storage.event_log import USER_REGISTERED, Event, EventLog
from notetaker.storage.users_store import UserRecord, UsersStore
from notetaker.utils.auth_hash import PasswordHasher
from notetaker.utils.jwt_auth import TokenService

logger = logging.getLogger(__name__)


class AccountService:
    def __init__(self, users: UsersStore, hasher: PasswordHasher, tokens: TokenService, events: EventLog):
        self.users = users
        self.hasher = hasher
        self.tokens = tokens
        self.events = events

    def register(self, payload: Any) -> UserRecord:
        data = validate_registration(payload)
        email = str(data.email)

        with storage_boundary("register"):
            if self.users.get_by_email(email) is not None:
                raise Conflict()
            hpw = self.hasher.hash(data.password)  # never store plaintext
            try:
                rec = self.users.create(email, hpw, name=data.name)
            except FileExistsError:
                # lost a race with a concurrent registration
                raise Conflict()

        logger.info("user %s registered", rec.user_id)
        self.events.emit(Event(event_type=USER_REGISTERED, user_id=rec.user_id))
        return rec

    def authenticate(self, payload: Any) -> str:
        data = validate_login(payload)
        with storage_boundary("login"):
            rec = self.users.get_by_email(data.email)

        # same answer for unknown email and wrong password
        if rec is None or not self.hasher.verify(data.password, rec.hashed_password):
            logger.info("failed login attempt")
            raise Unauthorized("Invalid credentials")

        return self.tokens.create_access_token(subject=rec.user_id)

"""Identity resolution: request in, user id (or None) out.

Strategies are interchangeable; the app installs a ``ChainResolver`` built from
settings and the note handlers only ever see the resulting user id.
"""
from __future__ import annotations

import logging
import re
from typing import Optional, Protocol, Sequence

from fastapi import Request

from notetaker.errors import Unauthorized
from notetaker.utils.jwt_auth import TokenService

logger = logging.getLogger(__name__)

SESSION_COOKIE = "session-token"

# header ids become directory names, keep them boring
_HEADER_ID = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


class IdentityResolver(Protocol):
    def resolve(self, request: Request) -> Optional[str]: ...


class BearerTokenResolver:
    def __init__(self, tokens: TokenService):
        self.tokens = tokens

    def resolve(self, request: Request) -> Optional[str]:
        auth = request.headers.get("Authorization", "")
        scheme, _, credentials = auth.partition(" ")
        if scheme.lower() != "bearer" or not credentials.strip():
            return None
        return self.tokens.subject_of(credentials.strip())


class CookieTokenResolver:
    def __init__(self, tokens: TokenService, cookie_name: str = SESSION_COOKIE):
        self.tokens = tokens
        self.cookie_name = cookie_name

    def resolve(self, request: Request) -> Optional[str]:
        token = request.cookies.get(self.cookie_name)
        if not token:
            return None
        return self.tokens.subject_of(token)


class HeaderResolver:
    """Trusts ``X-User-Id`` as-is. Only for local development and tests."""

    header = "X-User-Id"

    def resolve(self, request: Request) -> Optional[str]:
        value = request.headers.get(self.header)
        if value is None:
            return None
        if not _HEADER_ID.match(value):
            logger.info("rejected malformed %s header", self.header)
            return None
        return value


class ChainResolver:
    def __init__(self, resolvers: Sequence[IdentityResolver]):
        self.resolvers = list(resolvers)

    def resolve(self, request: Request) -> Optional[str]:
        for r in self.resolvers:
            user_id = r.resolve(request)
            if user_id:
                return user_id
        return None


def build_resolver(tokens: TokenService, allow_header_identity: bool = False) -> ChainResolver:
    resolvers: list[IdentityResolver] = [BearerTokenResolver(tokens), CookieTokenResolver(tokens)]
    if allow_header_identity:
        resolvers.append(HeaderResolver())
    return ChainResolver(resolvers)


def get_user_id(request: Request) -> str:
    """FastAPI dependency: the authenticated user's id, or 401."""
    user_id = request.app.state.identity.resolve(request)
    if not user_id:
        raise Unauthorized()
    return user_id

"""
Stock Dashboard — Auth Dependency
───────────────────────────────────
Resolves `Authorization: Bearer <token>` to a user id before a route runs.
How tokens are issued is someone else's job; the verifier is pluggable.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional

from fastapi import Request

from stock_engine.errors import AuthError

log = logging.getLogger("sd.auth")


@dataclass(frozen=True)
class CurrentUser:
    id: str


class TokenVerifier(ABC):

    @abstractmethod
    async def verify(self, token: str) -> Optional[CurrentUser]: ...


class StaticTokenVerifier(TokenVerifier):
    """Tokens configured up front as {token: user_id}."""

    def __init__(self, tokens: Dict[str, str]):
        self._tokens = dict(tokens)

    async def verify(self, token: str) -> Optional[CurrentUser]:
        user_id = self._tokens.get(token)
        return CurrentUser(user_id) if user_id else None


def bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def require_user(request: Request) -> CurrentUser:
    token = bearer_token(request)
    if not token:
        raise AuthError()
    verifier: TokenVerifier = request.app.state.verifier
    user = await verifier.verify(token)
    if user is None:
        log.info(f"Rejected token on {request.url.path}")
        raise AuthError("Invalid or expired token")
    return user

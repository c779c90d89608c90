"""Database Session Resolver — session token → Session via auth_sessions/users.

Invariants:
    - Token read from the session cookie first, then "Authorization: Bearer <token>"
    - No token, unknown token, or expired row → None (anonymous)
    - A session row whose user is gone yields Session(user=None)
    - Database failures propagate as DatabaseError; ContextFactory decides to fail open
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import select

from rpcgate.core.context import Session, SessionUser
from rpcgate.infrastructure.database import DatabaseSessionManager
from rpcgate.models.auth_session import AuthSession
from rpcgate.models.user import User

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "


def extract_session_token(request: object, cookie_name: str) -> str | None:
    cookies = getattr(request, "cookies", None) or {}
    token = cookies.get(cookie_name)
    if token:
        return token
    headers = getattr(request, "headers", None) or {}
    auth = headers.get("authorization") or ""
    if auth.lower().startswith(BEARER_PREFIX):
        return auth[len(BEARER_PREFIX):].strip() or None
    return None


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on round-trip
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class DatabaseSessionResolver:
    """SessionResolver backed by the auth_sessions table."""

    def __init__(self, db: DatabaseSessionManager, cookie_name: str):
        self._db = db
        self._cookie_name = cookie_name

    async def resolve(self, request: object, response: object) -> Session | None:
        token = extract_session_token(request, self._cookie_name)
        if not token:
            return None
        async with self._db.session() as db:
            result = await db.execute(
                select(AuthSession, User)
                .join(User, AuthSession.user_id == User.id, isouter=True)
                .where(AuthSession.session_token == token),
            )
            row = result.first()
        if row is None:
            return None
        auth_session, user = row
        expires = _as_utc(auth_session.expires)
        if expires <= datetime.now(timezone.utc):
            logger.debug("Session token expired")
            return None
        return Session(
            user=_to_session_user(user) if user is not None else None,
            expires=expires,
        )


def _to_session_user(user: User) -> SessionUser:
    return SessionUser(
        id=str(user.id), name=user.name, email=user.email, image=user.image,
    )

"""Call Context — per-call bundle of session, persistence handle and request id.

Invariants:
    - Contexts are frozen: middleware narrows or augments by building a new value
    - AnonymousContext.session may be None, or present with user None
    - AuthenticatedContext.session is never None and session.user is never None
    - Only enforce_user_is_authed (core/enforce_auth.py) constructs AuthenticatedSession
      from a Session; handlers of protected procedures take AuthenticatedContext

Design Decisions:
    - Two context types instead of one with Optional fields: the narrowing after the
      auth check is visible to the type checker, not re-checked in every handler
    - create_inner_context mirrors the factory without transport handles, for
      server-side callers and tests
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Union
from uuid import uuid4

if TYPE_CHECKING:
    from rpcgate.core.repository_protocols import PersistenceClient


@dataclass(frozen=True)
class SessionUser:
    id: str
    name: str | None = None
    email: str | None = None
    image: str | None = None


@dataclass(frozen=True)
class Session:
    """Session as returned by the resolver. The user may be missing."""
    user: SessionUser | None
    expires: datetime


@dataclass(frozen=True)
class AuthenticatedSession:
    """Session with a guaranteed user."""
    user: SessionUser
    expires: datetime


@dataclass(frozen=True)
class AnonymousContext:
    session: Session | None
    db: PersistenceClient | None
    request_id: str


@dataclass(frozen=True)
class AuthenticatedContext:
    session: AuthenticatedSession
    db: PersistenceClient | None
    request_id: str


Context = Union[AnonymousContext, AuthenticatedContext]


def create_inner_context(
    session: Session | None,
    db: PersistenceClient | None = None,
    request_id: str | None = None,
) -> AnonymousContext:
    """Build a context without request/response handles."""
    return AnonymousContext(
        session=session, db=db, request_id=request_id or uuid4().hex,
    )

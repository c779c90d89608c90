"""Root conftest — shared test configuration and dispatch fixtures.

Invariants:
    - Tests never touch a real database server (DATABASE_URL points at SQLite)
    - make_rpc builds a fresh registry per test; nothing is shared between tests
"""

import os
from datetime import datetime, timedelta, timezone

import pytest

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_FORMAT", "text")

from rpcgate.core.context import Session, SessionUser  # noqa: E402
from rpcgate.core.registry import ProcedureRegistry, create_router  # noqa: E402
from rpcgate.services.context_factory import ContextFactory  # noqa: E402
from rpcgate.services.rpc_router import RpcRouter  # noqa: E402


class StaticSessionResolver:
    """Returns the same session for every call and counts calls."""

    def __init__(self, session: Session | None = None):
        self.session = session
        self.calls = 0

    async def resolve(self, request, response):
        self.calls += 1
        return self.session


@pytest.fixture
def user() -> SessionUser:
    return SessionUser(id="user-1", name="Ada", email="ada@example.com")


@pytest.fixture
def signed_in_session(user) -> Session:
    return Session(user=user, expires=datetime.now(timezone.utc) + timedelta(days=1))


@pytest.fixture
def userless_session() -> Session:
    return Session(user=None, expires=datetime.now(timezone.utc) + timedelta(days=1))


@pytest.fixture
def make_rpc():
    """Factory: make_rpc(routes, session=None, resolver=None) -> RpcRouter."""

    def _make(routes: dict, session: Session | None = None, resolver=None) -> RpcRouter:
        registry = ProcedureRegistry()
        registry.include(create_router(routes))
        return RpcRouter(
            registry, ContextFactory(resolver or StaticSessionResolver(session)),
        )

    return _make


@pytest.fixture
def make_app_rpc():
    """Factory: RpcRouter over the application's own procedure routers."""
    from rpcgate.routers.root import build_registry

    def _make(session: Session | None = None, resolver=None) -> RpcRouter:
        return RpcRouter(
            build_registry(),
            ContextFactory(resolver or StaticSessionResolver(session)),
        )

    return _make

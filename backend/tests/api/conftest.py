"""API test fixtures — FastAPI app with a test RpcRouter on app.state.

Invariants:
    - Lifespan is not run: the fixture installs the router and restores the previous one
    - Cookie "session-token=valid-token" signs in as the shared test user
"""

import pytest
from httpx import ASGITransport, AsyncClient

from rpcgate.core.procedure import public_procedure
from rpcgate.core.registry import ProcedureRegistry, create_router
from rpcgate.core.validation import InputSchema
from rpcgate.main import app
from rpcgate.routers.root import app_router
from rpcgate.services.context_factory import ContextFactory
from rpcgate.services.rpc_router import RpcRouter


class NoteInput(InputSchema):
    body: str


async def save_note(ctx, input: NoteInput) -> dict:
    return {"saved": input.body}


class CookieResolver:
    def __init__(self, session):
        self._session = session

    async def resolve(self, request, response):
        if request.cookies.get("session-token") == "valid-token":
            return self._session
        return None


@pytest.fixture
async def client(signed_in_session):
    registry = ProcedureRegistry()
    registry.include(app_router)
    registry.include(create_router({
        "save_note": public_procedure.input(NoteInput).mutation(save_note),
    }), prefix="notes")
    original = getattr(app.state, "rpc_router", None)
    app.state.rpc_router = RpcRouter(
        registry, ContextFactory(CookieResolver(signed_in_session)),
    )
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
    app.state.rpc_router = original

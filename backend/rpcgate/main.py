"""rpcgate API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map every failure to an error envelope
    - CORS configured from settings (not hardcoded)
    - Database, procedure registry and RpcRouter built once on startup via lifespan;
      the RpcRouter lives on app.state and is passed by reference to routes
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rpcgate.api.error_handlers import register_error_handlers
from rpcgate.api.routes import health, rpc
from rpcgate.config import get_settings
from rpcgate.infrastructure.database import close_db, init_db
from rpcgate.infrastructure.observability import setup_logging
from rpcgate.routers.root import build_registry
from rpcgate.services.context_factory import ContextFactory
from rpcgate.services.rpc_router import RpcRouter
from rpcgate.services.session_resolver import DatabaseSessionResolver

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    db = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    resolver = DatabaseSessionResolver(db, settings.session_cookie_name)
    app.state.rpc_router = RpcRouter(
        build_registry(), ContextFactory(resolver, db),
    )
    logger.info(
        f"rpcgate API started with procedures: {app.state.rpc_router.registry.names()}",
    )
    yield
    logger.info("rpcgate API shutting down")
    await close_db()


app = FastAPI(title="rpcgate API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(rpc.router)

register_error_handlers(app)

"""Context Factory — builds the per-call context from transport handles.

Invariants:
    - create() never raises for resolver failures: the session becomes None
      and the failure is logged (fail-open to anonymous)
    - Cancellation is not a resolver failure: CancelledError propagates
    - request_id comes from the X-Request-ID header when present, otherwise a new uuid4 hex
"""

import logging
from uuid import uuid4

from rpcgate.core.context import AnonymousContext, create_inner_context
from rpcgate.core.repository_protocols import PersistenceClient, SessionResolver

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "x-request-id"


def _request_id(request: object) -> str:
    headers = getattr(request, "headers", None)
    if headers is not None:
        value = headers.get(REQUEST_ID_HEADER)
        if value:
            return str(value)
    return uuid4().hex


class ContextFactory:
    """Resolves the session and wraps it with the persistence handle."""

    def __init__(
        self, resolver: SessionResolver, db: PersistenceClient | None = None,
    ):
        self._resolver = resolver
        self._db = db

    async def create(self, request: object, response: object) -> AnonymousContext:
        request_id = _request_id(request)
        try:
            session = await self._resolver.resolve(request, response)
        except Exception as e:
            # Authorization is enforced by middleware, not here
            logger.warning(
                f"Session resolution failed, continuing anonymous: {e}",
                extra={"request_id": request_id},
            )
            session = None
        return create_inner_context(session, self._db, request_id)

"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Request/response typed as object: the core is transport-agnostic
"""

from contextlib import AbstractAsyncContextManager
from typing import Any, Protocol

from rpcgate.core.context import Session


class SessionResolver(Protocol):
    """Turns transport handles into a Session, or None when signed out."""
    async def resolve(
        self, request: object, response: object,
    ) -> Session | None: ...


class PersistenceClient(Protocol):
    """Opaque database handle placed in the context.

    The core never calls it; handlers open sessions through it.
    """
    def session(self) -> AbstractAsyncContextManager[Any]: ...

    async def health_check(self) -> bool: ...

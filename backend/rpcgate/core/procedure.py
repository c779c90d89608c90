"""Procedure Definitions — immutable builders for queries and mutations.

Invariants:
    - Builders are frozen: input()/use() return a new builder, never mutate
    - links keep declared order; protected_procedure's auth guard is always first
    - A Procedure built from protected_procedure has protected=True and its
      handler receives AuthenticatedContext
    - Handlers are async callables (ctx, validated_input) -> result

Design Decisions:
    - Module-level public_procedure/protected_procedure are plain immutable values,
      shared freely by every router module
"""

from dataclasses import dataclass, field, replace
from typing import Any, Awaitable, Callable, Generic, TypeVar

from pydantic import BaseModel

from rpcgate.core.chain_types import Link
from rpcgate.core.context import AnonymousContext, AuthenticatedContext, Context
from rpcgate.core.domain_types import ProcedureKind
from rpcgate.core.enforce_auth import enforce_user_is_authed

CtxT = TypeVar("CtxT", bound=Context)

Handler = Callable[[CtxT, Any], Awaitable[Any]]


@dataclass(frozen=True)
class Procedure:
    kind: ProcedureKind
    handler: Callable[[Any, Any], Awaitable[Any]]
    input_schema: type[BaseModel] | None = None
    links: tuple[Link, ...] = ()
    protected: bool = False


@dataclass(frozen=True)
class ProcedureBuilder(Generic[CtxT]):
    input_schema: type[BaseModel] | None = None
    links: tuple[Link, ...] = field(default_factory=tuple)
    protected: bool = False

    def input(self, schema: type[BaseModel]) -> "ProcedureBuilder[CtxT]":
        return replace(self, input_schema=schema)

    def use(self, link: Link) -> "ProcedureBuilder[CtxT]":
        return replace(self, links=self.links + (link,))

    def query(self, handler: Handler[CtxT]) -> Procedure:
        return self._build(ProcedureKind.QUERY, handler)

    def mutation(self, handler: Handler[CtxT]) -> Procedure:
        return self._build(ProcedureKind.MUTATION, handler)

    def _build(self, kind: ProcedureKind, handler: Handler[CtxT]) -> Procedure:
        return Procedure(
            kind=kind,
            handler=handler,
            input_schema=self.input_schema,
            links=self.links,
            protected=self.protected,
        )


public_procedure: ProcedureBuilder[AnonymousContext] = ProcedureBuilder()

protected_procedure: ProcedureBuilder[AuthenticatedContext] = ProcedureBuilder(
    links=(enforce_user_is_authed,), protected=True,
)

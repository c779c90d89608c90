"""Chain Types — shapes of middleware links and their outcomes.

Invariants:
    - A Middleware is async (ctx, call_next) -> result; it may call call_next
      at most once, with the current or a replacement context
    - A Guard is a pure (ctx) -> Continue | ShortCircuit; it never calls onward itself
    - ShortCircuit always carries an RpcError

Design Decisions:
    - Guards for checks that need no IO: testable without an event loop
    - Middlewares for anything that must await or wrap the rest of the chain
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Union

from rpcgate.core.errors import RpcError


@dataclass(frozen=True)
class Continue:
    """Proceed with this (possibly replaced) context."""
    context: Any


@dataclass(frozen=True)
class ShortCircuit:
    """Stop the chain with this error."""
    error: RpcError


ChainOutcome = Union[Continue, ShortCircuit]
CallNext = Callable[..., Awaitable[Any]]
Middleware = Callable[[Any, CallNext], Awaitable[Any]]


@dataclass(frozen=True)
class Guard:
    """Pure chain link. Wrap a check with @guard."""
    check: Callable[[Any], ChainOutcome]

    def __call__(self, ctx: Any) -> ChainOutcome:
        return self.check(ctx)

    @property
    def name(self) -> str:
        return getattr(self.check, "__name__", repr(self.check))


def guard(check: Callable[[Any], ChainOutcome]) -> Guard:
    return Guard(check)


Link = Union[Guard, Middleware]

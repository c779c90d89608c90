"""Middleware Chain — runs links in declared order, then the terminal handler.

Invariants:
    - Links run in declared order; the first short-circuit halts the chain
    - A Guard's ShortCircuit, a raised RpcError, or a returned ShortCircuit all
      stop the call with exactly that error
    - call_next() runs at most once per middleware; a second call raises RuntimeError
    - A middleware that returns without calling call_next() or short-circuiting
      raises RuntimeError; the handler never runs
    - call_next() without an argument continues with the middleware's own context
    - Contexts are replaced, never mutated

Design Decisions:
    - Continuation-passing over a loop: a middleware can wrap the rest of the
      chain (timing, logging) as well as gate it
"""

import logging
from typing import Any, Awaitable, Callable, Sequence

from rpcgate.core.chain_types import Continue, Guard, Link, ShortCircuit

logger = logging.getLogger(__name__)

Terminal = Callable[[Any], Awaitable[Any]]


async def run_chain(links: Sequence[Link], ctx: Any, terminal: Terminal) -> Any:
    """Run links[0..n] then terminal(final_ctx). Returns the terminal's result."""

    async def call_at(index: int, current: Any) -> Any:
        if index == len(links):
            return await terminal(current)
        link = links[index]
        if isinstance(link, Guard):
            outcome = link(current)
            if isinstance(outcome, ShortCircuit):
                logger.debug(
                    f"Guard '{link.name}' short-circuited with {outcome.error.code.value}",
                )
                raise outcome.error
            if not isinstance(outcome, Continue):
                raise TypeError(
                    f"Guard '{link.name}' returned {type(outcome).__name__}, "
                    f"expected Continue or ShortCircuit",
                )
            return await call_at(index + 1, outcome.context)
        return await _run_middleware(link, index, current)

    async def _run_middleware(link: Link, index: int, current: Any) -> Any:
        called = False

        async def call_next(next_ctx: Any = None) -> Any:
            nonlocal called
            if called:
                raise RuntimeError("call_next() called more than once")
            called = True
            return await call_at(index + 1, current if next_ctx is None else next_ctx)

        result = await link(current, call_next)
        if isinstance(result, ShortCircuit):
            raise result.error
        if not called:
            raise RuntimeError("middleware returned without calling call_next")
        return result

    return await call_at(0, ctx)

"""Middleware Chain — tests for ordering, context replacement and short-circuits.

Tests cover:
    - Links run in declared order, terminal last
    - call_next(new_ctx) replaces the context downstream only
    - Raised, returned and guard short-circuits stop the chain
    - call_next twice is rejected
    - Returning without call_next or a short-circuit is rejected
"""

import dataclasses

import pytest

from rpcgate.core.chain_types import Continue, ShortCircuit, guard
from rpcgate.core.context import create_inner_context
from rpcgate.core.errors import UnauthorizedError
from rpcgate.services.middleware_chain import run_chain


def _recorder(log: list, label: str):
    async def middleware(ctx, call_next):
        log.append(label)
        return await call_next()
    return middleware


def _terminal(log: list):
    async def terminal(ctx):
        log.append("handler")
        return ctx
    return terminal


async def test_links_run_in_declared_order():
    log = []
    links = [_recorder(log, "first"), _recorder(log, "second"), _recorder(log, "third")]
    await run_chain(links, create_inner_context(None), _terminal(log))
    assert log == ["first", "second", "third", "handler"]


async def test_empty_chain_calls_terminal():
    log = []
    ctx = create_inner_context(None)
    assert await run_chain([], ctx, _terminal(log)) is ctx
    assert log == ["handler"]


async def test_replacement_context_flows_downstream():
    seen = []

    async def tag(ctx, call_next):
        return await call_next(dataclasses.replace(ctx, request_id="tagged"))

    async def observe(ctx, call_next):
        seen.append(ctx.request_id)
        return await call_next()

    original = create_inner_context(None, request_id="original")
    final = await run_chain([observe, tag, observe], original, _terminal([]))
    assert seen == ["original", "tagged"]
    assert final.request_id == "tagged"
    assert original.request_id == "original"


async def test_raised_error_short_circuits():
    log = []

    async def deny(ctx, call_next):
        log.append("deny")
        raise UnauthorizedError()

    with pytest.raises(UnauthorizedError):
        await run_chain(
            [deny, _recorder(log, "after")], create_inner_context(None), _terminal(log),
        )
    assert log == ["deny"]


async def test_returned_short_circuit_stops_chain():
    log = []

    async def deny(ctx, call_next):
        return ShortCircuit(UnauthorizedError("nope"))

    with pytest.raises(UnauthorizedError, match="nope"):
        await run_chain([deny, _recorder(log, "after")], create_inner_context(None), _terminal(log))
    assert log == []


async def test_guard_short_circuit_stops_chain():
    log = []

    @guard
    def always_deny(ctx):
        return ShortCircuit(UnauthorizedError())

    with pytest.raises(UnauthorizedError):
        await run_chain([always_deny, _recorder(log, "after")], create_inner_context(None), _terminal(log))
    assert log == []


async def test_guard_continue_replaces_context():
    @guard
    def retag(ctx):
        return Continue(dataclasses.replace(ctx, request_id="from-guard"))

    final = await run_chain([retag], create_inner_context(None), _terminal([]))
    assert final.request_id == "from-guard"


async def test_guard_with_wrong_outcome_type_raises():
    @guard
    def broken(ctx):
        return ctx

    with pytest.raises(TypeError):
        await run_chain([broken], create_inner_context(None), _terminal([]))


async def test_middleware_can_wrap_result():
    async def upper(ctx, call_next):
        result = await call_next()
        return result.upper()

    async def terminal(ctx):
        return "done"

    assert await run_chain([upper], create_inner_context(None), terminal) == "DONE"


async def test_call_next_twice_rejected():
    calls = []

    async def twice(ctx, call_next):
        await call_next()
        return await call_next()

    async def terminal(ctx):
        calls.append(ctx)
        return "ok"

    with pytest.raises(RuntimeError, match="more than once"):
        await run_chain([twice], create_inner_context(None), terminal)
    assert len(calls) == 1


async def test_return_without_call_next_rejected():
    log = []

    async def skipper(ctx, call_next):
        return "bypassed"

    with pytest.raises(RuntimeError, match="without calling call_next"):
        await run_chain([skipper], create_inner_context(None), _terminal(log))
    assert log == []

"""RPC Router — single entry point from transport to procedure.

Invariants:
    - Order per call: build context → resolve → kind check → validate →
      middleware chain → handler → envelope
    - Exactly one outcome per call: a result envelope or one error envelope
    - RpcError passes through unchanged; any other Exception becomes INTERNAL
      with the generic message, and the original is logged with traceback
    - Protected procedures never reach their handler with a non-authenticated context
    - CancelledError propagates; nothing is serialized for a cancelled call
    - No retries, no timeouts: single attempt, the transport owns both policies
    - The registry is frozen before the first dispatch

Design Decisions:
    - One RpcRouter object passed by reference (app.state), no module global
    - dispatch_batch gathers independent calls; each builds its own context
"""

import asyncio
import logging
import time
from typing import Any, Sequence

from rpcgate.core.context import AuthenticatedContext, Context
from rpcgate.core.domain_types import ProcedureKind
from rpcgate.core.envelope import RpcResult, error_result, success_result
from rpcgate.core.errors import (
    InternalError, MethodNotSupportedError, RpcError, UnauthorizedError,
)
from rpcgate.core.registry import ProcedureRegistry
from rpcgate.core.validation import validate
from rpcgate.services.context_factory import ContextFactory
from rpcgate.services.middleware_chain import run_chain

logger = logging.getLogger(__name__)


class RpcRouter:
    """Resolves, validates, runs middleware and handler, shapes the envelope."""

    def __init__(self, registry: ProcedureRegistry, contexts: ContextFactory):
        registry.freeze()
        self._registry = registry
        self._contexts = contexts

    @property
    def registry(self) -> ProcedureRegistry:
        return self._registry

    async def dispatch(
        self,
        name: str,
        raw_input: Any,
        request: object = None,
        response: object = None,
        kind: ProcedureKind | None = None,
    ) -> RpcResult:
        """Run one call. Always returns an RpcResult unless cancelled."""
        started = time.perf_counter()
        ctx = await self._contexts.create(request, response)
        try:
            data = await self._call(name, raw_input, ctx, kind)
            result = success_result(data)
        except RpcError as e:
            self._log_client_error(name, ctx, e, started)
            return error_result(e)
        except Exception as e:
            logger.error(
                f"Unhandled error in procedure '{name}': {e}",
                exc_info=True,
                extra=self._log_extra(name, ctx, started, "INTERNAL"),
            )
            return error_result(InternalError())
        logger.info(
            f"Procedure '{name}' succeeded",
            extra=self._log_extra(name, ctx, started),
        )
        return result

    async def dispatch_batch(
        self,
        calls: Sequence[tuple[str, Any]],
        request: object = None,
        response: object = None,
        kind: ProcedureKind | None = None,
    ) -> list[RpcResult]:
        """Run independent calls concurrently. Results keep call order."""
        return list(await asyncio.gather(*(
            self.dispatch(name, raw_input, request, response, kind)
            for name, raw_input in calls
        )))

    async def _call(
        self,
        name: str,
        raw_input: Any,
        ctx: Context,
        kind: ProcedureKind | None,
    ) -> Any:
        procedure = self._registry.resolve(name)
        if kind is not None and kind != procedure.kind:
            raise MethodNotSupportedError(name, procedure.kind.value)
        parsed = validate(procedure.input_schema, raw_input)

        async def terminal(final_ctx: Context) -> Any:
            if procedure.protected and not isinstance(final_ctx, AuthenticatedContext):
                raise UnauthorizedError()
            return await procedure.handler(final_ctx, parsed)

        return await run_chain(procedure.links, ctx, terminal)

    def _log_client_error(
        self, name: str, ctx: Context, error: RpcError, started: float,
    ) -> None:
        log = logger.error if error.http_status >= 500 else logger.warning
        log(
            f"Procedure '{name}' failed: {error.code.value}",
            extra=self._log_extra(name, ctx, started, error.code.value),
        )

    @staticmethod
    def _log_extra(
        name: str, ctx: Context, started: float, error_code: str | None = None,
    ) -> dict:
        return {
            "procedure": name,
            "request_id": ctx.request_id,
            "error_code": error_code,
            "duration_ms": round((time.perf_counter() - started) * 1000, 2),
        }

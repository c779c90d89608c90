"""RPC Transport — HTTP adapter in front of RpcRouter.

Invariants:
    - GET  /api/trpc/{path}?input=<json>  → query
    - POST /api/trpc/{path} (JSON body)   → mutation
    - ?batch=1: path is comma-separated, input is {"0": ..., "1": ...};
      response is a list of envelopes in path order
    - Undecodable input → BAD_INPUT envelope before any context is built
    - HTTP status comes from the envelope (batch: shared status or 207)
"""

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Query, Request, Response

from rpcgate.core.domain_types import ProcedureKind
from rpcgate.core.envelope import batch_status
from rpcgate.core.errors import BadInputError
from rpcgate.services.rpc_router import RpcRouter

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/trpc", tags=["rpc"])


def get_rpc_router(request: Request) -> RpcRouter:
    """FastAPI dependency: the RpcRouter built at startup."""
    rpc = getattr(request.app.state, "rpc_router", None)
    if rpc is None:
        raise RuntimeError("RPC router not initialized")
    return rpc


def decode_input(raw: str | bytes | None) -> Any:
    if raw is None or len(raw) == 0:
        return None
    try:
        return json.loads(raw)
    except ValueError as e:
        raise BadInputError.form_error("Input is not valid JSON") from e


def batch_calls(path: str, decoded: Any) -> list[tuple[str, Any]]:
    if decoded is None:
        decoded = {}
    if not isinstance(decoded, dict):
        raise BadInputError.form_error(
            "Batch input must be an object keyed by call index",
        )
    return [
        (name, decoded.get(str(index)))
        for index, name in enumerate(path.split(","))
    ]


async def _respond(
    rpc: RpcRouter,
    path: str,
    raw_input: Any,
    batch: bool,
    request: Request,
    response: Response,
    kind: ProcedureKind,
):
    if batch:
        results = await rpc.dispatch_batch(
            batch_calls(path, raw_input), request, response, kind,
        )
        response.status_code = batch_status(results)
        return [r.body for r in results]
    result = await rpc.dispatch(path, raw_input, request, response, kind)
    response.status_code = result.status
    return result.body


@router.get("/{path:path}")
async def handle_query(
    path: str,
    request: Request,
    response: Response,
    input_json: str | None = Query(None, alias="input"),
    batch: bool = Query(False),
    rpc: RpcRouter = Depends(get_rpc_router),
):
    """Run a query (or a batch of queries)."""
    return await _respond(
        rpc, path, decode_input(input_json), batch,
        request, response, ProcedureKind.QUERY,
    )


@router.post("/{path:path}")
async def handle_mutation(
    path: str,
    request: Request,
    response: Response,
    batch: bool = Query(False),
    rpc: RpcRouter = Depends(get_rpc_router),
):
    """Run a mutation (or a batch of mutations)."""
    body = await request.body()
    return await _respond(
        rpc, path, decode_input(body), batch,
        request, response, ProcedureKind.MUTATION,
    )

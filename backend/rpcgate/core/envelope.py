"""Wire Envelopes — result/error bodies sent to the client.

Invariants:
    - Success: {"result": {"data": <json value>}}
    - Error:   {"error": {"code", "message", "data": {"zodError": ...}}} (see errors.py)
    - success_envelope raises on unserializable data; the dispatcher turns that into INTERNAL
    - A batch status is the shared status of its items, or 207 when they differ
"""

from dataclasses import dataclass
from typing import Any

from pydantic_core import to_jsonable_python

from rpcgate.core.errors import RpcError

MULTI_STATUS = 207


@dataclass(frozen=True)
class RpcResult:
    status: int
    body: dict


def success_envelope(data: Any) -> dict:
    return {"result": {"data": to_jsonable_python(data)}}


def success_result(data: Any) -> RpcResult:
    return RpcResult(status=200, body=success_envelope(data))


def error_result(error: RpcError) -> RpcResult:
    return RpcResult(status=error.http_status, body=error.to_response())


def batch_status(results: list[RpcResult]) -> int:
    if not results:
        return 200
    statuses = {r.status for r in results}
    if len(statuses) == 1:
        return statuses.pop()
    return MULTI_STATUS

"""Domain Types — enums and aliases shared by the core and the shell.

Invariants:
    - All valid codes and kinds encoded as Enums — no raw string matching
    - ErrorCode values are the exact strings placed on the wire

Design Decisions:
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import TypedDict


class ErrorCode(str, Enum):
    """Machine-readable error codes carried in the error envelope."""
    BAD_INPUT = "BAD_INPUT"
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    METHOD_NOT_SUPPORTED = "METHOD_NOT_SUPPORTED"
    INTERNAL = "INTERNAL"


# HTTP status per error code, used by the transport adapter
HTTP_STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.BAD_INPUT: 400,
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.METHOD_NOT_SUPPORTED: 405,
    ErrorCode.INTERNAL: 500,
}


class ProcedureKind(str, Enum):
    """Queries read (GET), mutations write (POST)."""
    QUERY = "query"
    MUTATION = "mutation"


class FlattenedErrors(TypedDict):
    """Validation diagnostics: form-level messages plus messages per field path."""
    formErrors: list[str]
    fieldErrors: dict[str, list[str]]

"""Error Hierarchy — typed exceptions for every failure a call can surface.

Invariants:
    - Every RpcError has a code (ErrorCode), message (str) and http_status (int)
    - to_response() produces the wire error envelope, byte-for-byte stable:
      {"error": {"code", "message", "data": {"zodError": <diagnostics|null>}}}
    - Only BadInputError carries field diagnostics; every other code sends null
    - InternalError never carries the original message; callers log it instead
    - ConfigurationError is a startup failure, never serialized to a client

Design Decisions:
    - Single RpcError base: dispatcher and FastAPI handler catch one type
      (ADR: uniform error shape)
    - DatabaseError is NOT an RpcError: infrastructure detail must be wrapped
      as INTERNAL before it reaches the wire
"""

from rpcgate.core.domain_types import ErrorCode, FlattenedErrors, HTTP_STATUS_BY_CODE


class RpcError(Exception):
    """Base exception for errors that reach the client as an error envelope."""

    def __init__(
        self,
        code: ErrorCode,
        message: str | None = None,
        field_errors: FlattenedErrors | None = None,
    ):
        message = message or code.value
        super().__init__(message)
        self.code = code
        self.message = message
        self.field_errors = field_errors

    @property
    def http_status(self) -> int:
        return HTTP_STATUS_BY_CODE[self.code]

    def to_response(self) -> dict:
        """Convert to the wire error envelope."""
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "data": {"zodError": self.field_errors},
            }
        }


# ─── Client Errors ──────────────────────────────────────────────

class BadInputError(RpcError):
    """Input failed schema validation or could not be decoded."""
    def __init__(
        self, field_errors: FlattenedErrors, message: str = "Invalid input",
    ):
        super().__init__(ErrorCode.BAD_INPUT, message, field_errors)

    @classmethod
    def form_error(cls, message: str) -> "BadInputError":
        """Input rejected as a whole (not attributable to one field)."""
        return cls({"formErrors": [message], "fieldErrors": {}}, message)


class UnauthorizedError(RpcError):
    """Protected procedure called without a session or without a user."""
    def __init__(self, message: str | None = None):
        super().__init__(ErrorCode.UNAUTHORIZED, message)


class ProcedureNotFoundError(RpcError):
    """No procedure registered under the requested name."""
    def __init__(self, name: str):
        super().__init__(
            ErrorCode.NOT_FOUND, f'No procedure found on path "{name}"',
        )
        self.name = name


class MethodNotSupportedError(RpcError):
    """Query called as mutation or vice versa."""
    def __init__(self, name: str, expected_kind: str):
        super().__init__(
            ErrorCode.METHOD_NOT_SUPPORTED,
            f'Procedure "{name}" is a {expected_kind}',
        )
        self.name = name


class InternalError(RpcError):
    """Unexpected failure. The message is always the generic one."""
    GENERIC_MESSAGE = "Internal server error"

    def __init__(self):
        super().__init__(ErrorCode.INTERNAL, self.GENERIC_MESSAGE)


# ─── Startup Errors ─────────────────────────────────────────────

class ConfigurationError(Exception):
    """Procedure wiring is invalid. Raised at startup only."""


class DuplicateProcedureError(ConfigurationError):
    def __init__(self, name: str):
        super().__init__(f"Procedure '{name}' is already registered")
        self.name = name


class RegistryFrozenError(ConfigurationError):
    def __init__(self, name: str):
        super().__init__(
            f"Cannot register '{name}': registry is frozen after startup",
        )
        self.name = name


# ─── Infrastructure Errors ──────────────────────────────────────

class DatabaseError(Exception):
    """Database operation failed. Surfaced to clients as INTERNAL."""
    def __init__(self, message: str, operation: str):
        super().__init__(f"Database {operation} failed: {message}")
        self.message = message
        self.operation = operation

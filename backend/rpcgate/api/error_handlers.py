"""Error Handlers — global exception handlers for errors raised outside dispatch.

Invariants:
    - RpcError → its own error envelope and status
    - RequestValidationError → BAD_INPUT envelope with flattened field diagnostics
    - Exception (catch-all) → INTERNAL envelope, never leaks internal details

Design Decisions:
    - Dispatch already returns envelopes; these handlers cover the adapter itself
      (undecodable input, missing router, FastAPI parameter errors)
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from rpcgate.core.errors import BadInputError, InternalError, RpcError
from rpcgate.core.validation import flatten_errors

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_rpc_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_rpc_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RpcError)
    async def rpc_error_handler(request: Request, exc: RpcError):
        logger.warning(
            f"RpcError: {exc.message}",
            extra={"error_code": exc.code.value, "path": request.url.path},
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        error = _build_bad_input_error(exc)
        return JSONResponse(
            status_code=error.http_status, content=error.to_response(),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"path": request.url.path},
        )
        error = InternalError()
        return JSONResponse(
            status_code=error.http_status, content=error.to_response(),
        )


def _build_bad_input_error(exc: RequestValidationError) -> BadInputError:
    return BadInputError(flatten_errors(exc.errors()))

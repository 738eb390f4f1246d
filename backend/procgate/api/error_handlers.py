"""Error Handlers — global exception handlers mapping failures to the gateway envelope.

Invariants:
    - GatewayError → status chosen by ErrorKind (one switch, no message matching)
    - UpstreamError forwards the upstream's own 4xx status, otherwise 502
    - RequestValidationError → 400 with field-level details
    - Exception (catch-all) → 500, never leaks internal details

Design Decisions:
    - Three-layer handler: domain (GatewayError), validation (Pydantic), catch-all (Exception)
    - Infrastructure kinds logged at ERROR with full context, client kinds at WARNING
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from procgate.core.errors import (
    ErrorKind, ExecutionError, GatewayError, UpstreamError,
)

logger = logging.getLogger(__name__)

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_FLAG: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_IDENTIFIER: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_PAYLOAD: status.HTTP_400_BAD_REQUEST,
    ErrorKind.AUTH: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.DUPLICATE: status.HTTP_409_CONFLICT,
    ErrorKind.AMBIGUOUS: status.HTTP_409_CONFLICT,
    ErrorKind.UPSTREAM: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.EXECUTION: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.DATABASE: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

_SERVER_SIDE_KINDS = {
    ErrorKind.UPSTREAM, ErrorKind.EXECUTION, ErrorKind.DATABASE, ErrorKind.INTERNAL,
}


def status_for(exc: GatewayError) -> int:
    """HTTP status for a gateway error."""
    if isinstance(exc, UpstreamError) and exc.upstream_status:
        if 400 <= exc.upstream_status < 500:
            return exc.upstream_status
    return STATUS_BY_KIND.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_gateway_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_gateway_error_handler(app: FastAPI) -> None:
    """Register gateway domain/infrastructure error handler."""

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError):
        """Handle all gateway domain/infrastructure errors."""
        http_status = status_for(exc)
        extra = {
            "error_code": exc.code,
            "path": request.url.path,
            "method": request.method,
            "status": http_status,
        }
        if isinstance(exc, ExecutionError):
            extra["procedure"] = exc.procedure_name
            extra["parameters"] = exc.parameters
        if exc.kind in _SERVER_SIDE_KINDS:
            logger.error(f"GatewayError: {exc.message}", extra=extra)
        else:
            logger.warning(f"GatewayError: {exc.message}", extra=extra)
        return JSONResponse(status_code=http_status, content=exc.to_response())


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "code": "INTERNAL_ERROR",
                "message": "Unexpected error occurred.",
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    return {
        "success": False,
        "code": "VALIDATION_ERROR",
        "message": "Invalid request data",
        "details": [
            {
                "field": ".".join(str(loc) for loc in e["loc"]),
                "message": e["msg"],
                "type": e["type"],
            }
            for e in exc.errors()
        ],
    }

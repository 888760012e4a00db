"""Global exception handling."""

import structlog
from fastapi import Request
from fastapi.responses import JSONResponse

from src.domains.decision.errors import DecisionError, ErrorKind

logger = structlog.get_logger()

_KIND_STATUS = {
    ErrorKind.NO_PROVIDERS_AVAILABLE: 503,
    ErrorKind.REQUEST_TIMEOUT: 504,
    ErrorKind.INVALID_CONFIGURATION: 500,
    ErrorKind.PROVIDER_ERROR: 502,
}


async def decision_exception_handler(request: Request, exc: DecisionError) -> JSONResponse:
    request_id = getattr(request.state, "request_id", "unknown")
    status_code = _KIND_STATUS.get(exc.kind, 500)

    if exc.kind == ErrorKind.INVALID_CONFIGURATION:
        logger.error("decision_misconfigured", request_id=request_id, error=exc.message)
    else:
        logger.warning(
            "decision_failed",
            request_id=request_id,
            kind=exc.kind.value,
            error=exc.message,
        )

    return JSONResponse(
        status_code=status_code,
        content={"error": exc.kind.value, "message": exc.message, "request_id": request_id},
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    request_id = getattr(request.state, "request_id", "unknown")

    if isinstance(exc, ValueError):
        logger.warning("bad_request", request_id=request_id, error=str(exc))
        return JSONResponse(
            status_code=400,
            content={"error": "bad_request", "message": str(exc), "request_id": request_id},
        )

    logger.exception("unhandled_exception", request_id=request_id, error=str(exc))
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_server_error",
            "message": "An unexpected error occurred",
            "request_id": request_id,
        },
    )

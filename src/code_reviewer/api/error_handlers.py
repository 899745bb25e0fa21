"""
FastAPI exception handlers for structured error responses.

ServiceError already knows its HTTP status; the handlers only log and
serialize. Provider payloads and tracebacks stay in the logs.
"""

import structlog
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from code_reviewer.api.models import ErrorResponse
from code_reviewer.monitoring.metrics import review_requests_total
from code_reviewer.retry.exceptions import RemoteServiceError, ServiceError

logger = structlog.get_logger(__name__)


def _error_response(status_code: int, error: str, message: str) -> JSONResponse:
    body = ErrorResponse(error=error, message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """
    Handle ServiceError and subclasses.

    Maps to exc.status_code (400 input, 503 exhausted, provider status for
    fatal failures, 500 when unknown).
    """
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        "Review failed",
        error_type=type(exc).__name__,
        status_code=exc.status_code,
        error_message=exc.message,
        attempts=exc.attempts if isinstance(exc, RemoteServiceError) else 0,
        cause=repr(exc.cause) if exc.cause is not None else None,
    )
    review_requests_total.labels(status=str(exc.status_code)).inc()
    return _error_response(exc.status_code, exc.error_code, exc.message)


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handle malformed request bodies.

    Maps to 400 Bad Request (client error).
    """
    logger.warning("Invalid request format", errors=exc.errors())
    review_requests_total.labels(status=str(status.HTTP_400_BAD_REQUEST)).inc()
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        "invalid_request",
        "Request body must be a JSON object with a 'code' string",
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected errors.

    Maps to 500 Internal Server Error.
    """
    logger.exception("Unexpected error", error_type=type(exc).__name__)
    review_requests_total.labels(status=str(status.HTTP_500_INTERNAL_SERVER_ERROR)).inc()
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "internal_error",
        "An unexpected error occurred",
    )


# Exception handler mapping for FastAPI app.add_exception_handler()
EXCEPTION_HANDLERS = {
    ServiceError: service_error_handler,
    RequestValidationError: request_validation_error_handler,
    Exception: generic_error_handler,
}

"""
Global exception handlers for FastAPI.

Maps the application's exception hierarchy onto the API's error bodies:

- validation failures   -> 400 ``{"errors": [...]}``
- rejected updates      -> 400 ``{"error": "..."}``
- missing incidents     -> 404 ``{"error": "Incident not found"}``
- anything else         -> 500 ``{"error": "Internal server error"}``

Internal error details are logged with the request id and never returned.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from ...config import get_logger
from ...core.exceptions import (
    IncidentNotFoundError,
    IncidentTrackerError,
    IncidentValidationError,
    InvalidUpdateError,
)
from ..middleware.logging import REQUEST_ID_HEADER

logger = get_logger("app.exception_handlers")

INTERNAL_ERROR_MESSAGE = "Internal server error"


def get_request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None) or request.headers.get(REQUEST_ID_HEADER)


def format_validation_errors(errors: list[dict]) -> list[str]:
    """Turn pydantic error dicts into ``field: message`` strings."""
    messages = []
    for error in errors:
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "Invalid value")
        messages.append(f"{location}: {message}" if location else message)
    return messages


async def incident_validation_handler(request: Request, exc: IncidentValidationError) -> JSONResponse:
    logger.info("Incident payload rejected", request_id=get_request_id(request), errors=exc.errors)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"errors": exc.errors})


async def request_validation_handler(request: Request, exc: RequestValidationError | PydanticValidationError) -> JSONResponse:
    """Malformed request bodies are client errors, reported like other validation failures."""
    errors = format_validation_errors(list(exc.errors()))
    logger.info("Request validation failed", request_id=get_request_id(request), path=request.url.path, errors=errors)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"errors": errors})


async def invalid_update_handler(request: Request, exc: InvalidUpdateError) -> JSONResponse:
    logger.info("Incident update rejected", request_id=get_request_id(request), reason=exc.message, field=exc.field)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": exc.message})


async def not_found_handler(request: Request, exc: IncidentNotFoundError) -> JSONResponse:
    logger.info("Incident not found", request_id=get_request_id(request), incident_id=exc.incident_id)
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"error": exc.message})


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=exc.headers)


async def application_error_handler(request: Request, exc: IncidentTrackerError) -> JSONResponse:
    """Repository and other infrastructure failures."""
    logger.error(
        "Application error",
        request_id=get_request_id(request),
        path=request.url.path,
        method=request.method,
        error_code=exc.error_code,
        error=str(exc),
        exc_info=exc,
    )
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": INTERNAL_ERROR_MESSAGE})


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Last-resort 500.

    Starlette serves this response from outside the request middleware, so the
    request id header is set here.
    """
    request_id = get_request_id(request)
    logger.error(
        f"Unhandled exception occurred: {type(exc).__name__}",
        request_id=request_id,
        path=request.url.path,
        method=request.method,
        exc_info=exc,
    )
    headers = {REQUEST_ID_HEADER: request_id} if request_id else None
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": INTERNAL_ERROR_MESSAGE}, headers=headers
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register every handler; more specific exception classes win over their bases."""
    app.add_exception_handler(IncidentValidationError, incident_validation_handler)
    app.add_exception_handler(InvalidUpdateError, invalid_update_handler)
    app.add_exception_handler(IncidentNotFoundError, not_found_handler)
    app.add_exception_handler(IncidentTrackerError, application_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(PydanticValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

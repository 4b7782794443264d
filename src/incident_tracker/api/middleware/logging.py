"""
Request correlation and access logging.

Every request gets an id, taken from an incoming ``X-Request-ID`` header or
generated. It is bound into the structlog context so every event logged while
handling the request carries it, and it is echoed back on the response.
Probe and docs paths get the header but are not logged.
"""

import time
import uuid

import structlog
from fastapi import Request, Response

from ...config import get_logger

REQUEST_ID_HEADER = "X-Request-ID"
PROCESSING_TIME_HEADER = "X-Processing-Time"
QUIET_PATHS = ("/health", "/docs", "/redoc", "/openapi.json")


class RequestLoggingMiddleware:
    """HTTP middleware callable for ``app.middleware("http")``."""

    def __init__(self, logger_name: str = "api.requests", quiet_paths: tuple[str, ...] = QUIET_PATHS):
        self.logger = get_logger(logger_name)
        self.quiet_paths = quiet_paths

    async def __call__(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        if request.url.path.startswith(self.quiet_paths):
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response

        started = time.perf_counter()
        self.logger.debug("Request received", method=request.method, path=request.url.path, query=request.url.query or None)

        try:
            response = await call_next(request)
        except Exception:
            self.logger.error(
                "Request crashed",
                method=request.method,
                path=request.url.path,
                duration_ms=_elapsed_ms(started),
                exc_info=True,
            )
            raise

        elapsed = time.perf_counter() - started
        level = "warning" if response.status_code >= 400 else "info"
        getattr(self.logger, level)(
            f"{request.method} {request.url.path} {response.status_code}",
            status_code=response.status_code,
            duration_ms=round(elapsed * 1000, 2),
            client=request.client.host if request.client else None,
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers[PROCESSING_TIME_HEADER] = f"{elapsed:.4f}"
        return response


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


request_logging_middleware = RequestLoggingMiddleware()

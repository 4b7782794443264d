from .cors import configure_cors
from .logging import RequestLoggingMiddleware, request_logging_middleware
from .validation import collect_creation_errors, validate_incident_payload

__all__ = [
    "configure_cors",
    "RequestLoggingMiddleware",
    "request_logging_middleware",
    "collect_creation_errors",
    "validate_incident_payload",
]

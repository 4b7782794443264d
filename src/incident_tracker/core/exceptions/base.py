"""Root exception types for the incident tracker."""

from typing import Any


class IncidentTrackerError(Exception):
    """
    Root of the application's exceptions.

    Carries a machine-readable ``error_code`` and structured ``details`` for
    logging. Neither is sent to API clients.
    """

    default_code = "INCIDENT_TRACKER_ERROR"

    def __init__(self, message: str, error_code: str | None = None, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code
        self.details = dict(details or {})

    def __str__(self) -> str:
        if not self.details:
            return self.message
        detail_text = ", ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{self.message} ({detail_text})"


class DomainError(IncidentTrackerError):
    """A request broke an incident rule; maps to a 4xx response."""

    default_code = "DOMAIN_ERROR"


class InfrastructureError(IncidentTrackerError):
    """The database or another backing service failed; maps to a 500 response."""

    default_code = "INFRASTRUCTURE_ERROR"

"""Domain-specific exception classes."""

from typing import Any

from .base import DomainError


class IncidentValidationError(DomainError):
    """Raised when a creation payload breaks one or more incident rules."""

    def __init__(self, errors: list[str], details: dict[str, Any] | None = None):
        super().__init__("Incident validation failed", "INCIDENT_VALIDATION_ERROR", details)
        self.errors = list(errors)


class InvalidUpdateError(DomainError):
    """Raised when an update payload cannot be applied."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message, "INVALID_UPDATE", {"field": field} if field else None)
        self.field = field

    def __str__(self) -> str:
        return self.message


class IncidentNotFoundError(DomainError):
    """Raised when no incident exists for the requested id."""

    def __init__(self, incident_id: str):
        super().__init__("Incident not found", "INCIDENT_NOT_FOUND", {"incident_id": incident_id})
        self.incident_id = incident_id

from .base import DomainError, IncidentTrackerError, InfrastructureError
from .domain import IncidentNotFoundError, IncidentValidationError, InvalidUpdateError
from .infrastructure import DatabaseNotInitializedError, RepositoryError

__all__ = [
    "IncidentTrackerError",
    "DomainError",
    "InfrastructureError",
    "IncidentValidationError",
    "InvalidUpdateError",
    "IncidentNotFoundError",
    "DatabaseNotInitializedError",
    "RepositoryError",
]

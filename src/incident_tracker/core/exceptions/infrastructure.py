"""Infrastructure exception classes."""

from .base import InfrastructureError


class DatabaseNotInitializedError(InfrastructureError):
    """The engine was requested before the database manager was initialized."""

    default_code = "DATABASE_NOT_INITIALIZED"


class RepositoryError(InfrastructureError):
    """A database statement failed. ``details["error"]`` holds the driver message."""

    default_code = "REPOSITORY_ERROR"

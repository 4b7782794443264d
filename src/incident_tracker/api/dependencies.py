"""
FastAPI dependencies module.

Provides the database manager, repository and service to route handlers.
Tests swap these out through ``app.dependency_overrides``.
"""

from fastapi import Depends, Query

from ..application.dtos import IncidentListQuery
from ..application.services import IncidentService
from ..config import Settings, get_settings
from ..infrastructure.database import DatabaseManager, database_manager
from ..infrastructure.repositories import IncidentRepository


def get_database_manager() -> DatabaseManager:
    """
    Dependency to inject the process-wide database manager.

    Returns:
        DatabaseManager: The shared manager owning the connection pool
    """
    return database_manager


def get_incident_repository(db: DatabaseManager = Depends(get_database_manager)) -> IncidentRepository:
    return IncidentRepository(db.engine)


def get_incident_service(repository: IncidentRepository = Depends(get_incident_repository)) -> IncidentService:
    """
    Dependency to inject the incident service.

    Returns:
        IncidentService: Service bound to a repository over the shared engine
    """
    return IncidentService(repository)


def get_list_query(
    page: str | None = Query(default=None, description="1-based page number"),
    limit: str | None = Query(default=None, description="Page size"),
    search: str | None = Query(default=None, description="Case-insensitive match against title or summary"),
    services: str | None = Query(default=None, description="Comma-separated services"),
    severities: str | None = Query(default=None, description="Comma-separated severities"),
    statuses: str | None = Query(default=None, description="Comma-separated statuses"),
    sort_by: str | None = Query(default=None, alias="sortBy", description="Sort column"),
    sort_order: str | None = Query(default=None, alias="sortOrder", description="ASC or DESC"),
    settings: Settings = Depends(get_settings),
) -> IncidentListQuery:
    """
    Parse list query-string parameters leniently.

    Paging values are accepted as raw strings so bad input falls back to the
    defaults instead of failing the request.
    """
    return IncidentListQuery.from_params(
        page=page,
        limit=limit,
        search=search,
        services=services,
        severities=severities,
        statuses=statuses,
        sort_by=sort_by,
        sort_order=sort_order,
        default_limit=settings.default_page_size,
        max_limit=settings.max_page_size,
    )

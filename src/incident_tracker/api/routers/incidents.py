"""
Incidents Router

CRUD endpoints for incidents: create, list, get one and partial update.
Incidents cannot be deleted over HTTP.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, status

from ...application.dtos import IncidentCreate, IncidentListQuery, IncidentListResponse, IncidentRecord
from ...application.services import IncidentService
from ..dependencies import get_incident_service, get_list_query
from ..middleware.validation import validate_incident_payload

router = APIRouter(prefix="/incidents", tags=["incidents"])


@router.post("", response_model=IncidentRecord, status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=IncidentRecord, status_code=status.HTTP_201_CREATED, include_in_schema=False)
def create_incident(
    payload: dict[str, Any] = Depends(validate_incident_payload),
    service: IncidentService = Depends(get_incident_service),
) -> IncidentRecord:
    """Create an incident. Returns 400 with every violated rule when the payload is invalid."""
    return service.create_incident(IncidentCreate.model_validate(payload))


@router.get("", response_model=IncidentListResponse)
@router.get("/", response_model=IncidentListResponse, include_in_schema=False)
def list_incidents(
    query: IncidentListQuery = Depends(get_list_query),
    service: IncidentService = Depends(get_incident_service),
) -> IncidentListResponse:
    """
    List incidents with search, filters, sorting and pagination.

    Unsupported sort columns fall back to newest first.
    """
    return service.list_incidents(query)


@router.get("/{incident_id}", response_model=IncidentRecord)
def get_incident(incident_id: str, service: IncidentService = Depends(get_incident_service)) -> IncidentRecord:
    return service.get_incident(incident_id)


@router.patch("/{incident_id}", response_model=IncidentRecord)
def update_incident(
    incident_id: str,
    payload: Any = Body(default=None),
    service: IncidentService = Depends(get_incident_service),
) -> IncidentRecord:
    """
    Apply any subset of title, service, severity, status, owner and summary.

    The body is validated by the service after the incident is found, so an
    unknown id is a 404 whatever the payload holds.
    """
    return service.update_incident(incident_id, payload)

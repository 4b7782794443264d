from .incident_dtos import (
    IncidentCreate,
    IncidentListQuery,
    IncidentListResponse,
    IncidentRecord,
    IncidentUpdate,
    PaginationInfo,
    split_csv,
)

__all__ = [
    "IncidentCreate",
    "IncidentUpdate",
    "IncidentRecord",
    "IncidentListQuery",
    "IncidentListResponse",
    "PaginationInfo",
    "split_csv",
]

from .enums import (
    DEFAULT_SORT_COLUMN,
    KNOWN_SERVICES,
    SORTABLE_COLUMNS,
    UPDATABLE_FIELDS,
    IncidentSeverity,
    IncidentStatus,
    SortOrder,
)

__all__ = [
    "IncidentSeverity",
    "IncidentStatus",
    "SortOrder",
    "KNOWN_SERVICES",
    "SORTABLE_COLUMNS",
    "DEFAULT_SORT_COLUMN",
    "UPDATABLE_FIELDS",
]

from .incident_repository import IncidentRepository, build_filters, build_ordering, escape_like

__all__ = ["IncidentRepository", "build_filters", "build_ordering", "escape_like"]

from .incident_service import IncidentService, utcnow

__all__ = ["IncidentService", "utcnow"]

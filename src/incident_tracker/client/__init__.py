from .api_client import IncidentAPIClient, IncidentAPIError

__all__ = ["IncidentAPIClient", "IncidentAPIError"]

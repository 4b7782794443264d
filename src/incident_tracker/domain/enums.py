"""Domain enums for incident classification."""

from enum import Enum


class IncidentSeverity(str, Enum):
    """Enumeration of incident severity levels, SEV1 being the most urgent."""

    SEV1 = "SEV1"
    SEV2 = "SEV2"
    SEV3 = "SEV3"
    SEV4 = "SEV4"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


class IncidentStatus(str, Enum):
    """Enumeration of incident lifecycle stages."""

    OPEN = "OPEN"
    MITIGATED = "MITIGATED"
    RESOLVED = "RESOLVED"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"

    @classmethod
    def parse(cls, value: str | None) -> "SortOrder":
        """Anything other than a case-insensitive ``ASC`` sorts descending."""
        if value is not None and value.strip().upper() == cls.ASC.value:
            return cls.ASC
        return cls.DESC


# Suggested service names; the service column itself is open-ended.
KNOWN_SERVICES = ["Auth", "Payments", "Backend", "Frontend", "Database", "API Gateway", "Cache", "Search"]

SORTABLE_COLUMNS = ("title", "service", "severity", "status", "created_at", "owner")
DEFAULT_SORT_COLUMN = "created_at"

# Fields a PATCH request may change.
UPDATABLE_FIELDS = ("title", "service", "severity", "status", "owner", "summary")

"""Incident use cases: create, list, fetch and partially update incidents."""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

from ...config import get_logger
from ...core.exceptions import IncidentNotFoundError, InvalidUpdateError
from ...domain.enums import IncidentSeverity, IncidentStatus
from ...infrastructure.repositories import IncidentRepository
from ..dtos import IncidentCreate, IncidentListQuery, IncidentListResponse, IncidentRecord, IncidentUpdate, PaginationInfo

logger = get_logger("service.incidents")

# Columns that reject null even though an update may name them.
NON_NULLABLE_UPDATE_FIELDS = ("title", "service")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class IncidentService:
    """
    Business rules around the incident repository.

    Signals missing records with IncidentNotFoundError and rejected updates
    with InvalidUpdateError; the API layer maps both onto HTTP responses.
    """

    def __init__(self, repository: IncidentRepository, clock: Callable[[], datetime] = utcnow):
        self.repository = repository
        self.clock = clock

    def create_incident(self, payload: IncidentCreate) -> IncidentRecord:
        """Insert a new incident with a generated id and fresh timestamps."""
        now = self.clock()
        values = {
            "id": str(uuid.uuid4()),
            "title": payload.title,
            "service": payload.service,
            "severity": payload.severity.value,
            "status": payload.status.value,
            "owner": payload.owner,
            "summary": payload.summary,
            "created_at": now,
            "updated_at": now,
        }

        record = self.repository.add(values)
        logger.info("Incident created", incident_id=record.id, service=record.service, severity=record.severity)
        return record

    def list_incidents(self, query: IncidentListQuery) -> IncidentListResponse:
        records, total_count = self.repository.list_page(query)
        return IncidentListResponse(
            incidents=records,
            pagination=PaginationInfo.build(page=query.page, limit=query.limit, total_count=total_count),
        )

    def get_incident(self, incident_id: str) -> IncidentRecord:
        record = self.repository.get(incident_id)
        if record is None:
            raise IncidentNotFoundError(incident_id)
        return record

    def update_incident(self, incident_id: str, payload: IncidentUpdate | dict[str, Any] | None) -> IncidentRecord:
        """
        Apply a partial update.

        The existence check runs first, so a missing incident is reported as
        not found even when the payload is also invalid or mistyped. A raw
        body is parsed only after that check; anything other than a JSON
        object counts as an empty update. Enumerated fields are
        only checked when present. ``updated_at`` always moves forward, even
        when two writes land within the same clock tick.

        Raises:
            IncidentNotFoundError: No incident with this id
            InvalidUpdateError: Bad enumeration value, null required field or nothing to update
            ValidationError: A field of the wrong type
        """
        current = self.get_incident(incident_id)
        if not isinstance(payload, IncidentUpdate):
            payload = IncidentUpdate.model_validate(payload if isinstance(payload, dict) else {})
        changes = payload.changes()
        self._validate_changes(changes)

        updated_at = max(self.clock(), current.updated_at + timedelta(microseconds=1))
        record = self.repository.update(incident_id, changes, updated_at)
        if record is None:
            # Row vanished between the existence check and the update.
            raise IncidentNotFoundError(incident_id)

        logger.info("Incident updated", incident_id=incident_id, fields=sorted(changes))
        return record

    @staticmethod
    def _validate_changes(changes: dict[str, Any]) -> None:
        if "severity" in changes and changes["severity"] not in IncidentSeverity.values():
            raise InvalidUpdateError("Invalid severity value", field="severity")
        if "status" in changes and changes["status"] not in IncidentStatus.values():
            raise InvalidUpdateError("Invalid status value", field="status")
        for field in NON_NULLABLE_UPDATE_FIELDS:
            if field in changes and changes[field] is None:
                raise InvalidUpdateError(f"{field.capitalize()} cannot be null", field=field)
        if not changes:
            raise InvalidUpdateError("No fields to update")

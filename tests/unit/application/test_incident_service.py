"""Tests for the incident service."""

from datetime import datetime, timedelta, timezone

import pytest
from fixtures.test_data import BASE_TIME, make_row
from freezegun import freeze_time
from pydantic import ValidationError

from incident_tracker.application.dtos import IncidentCreate, IncidentListQuery, IncidentUpdate
from incident_tracker.application.services import IncidentService
from incident_tracker.core.exceptions import IncidentNotFoundError, InvalidUpdateError

MISSING_ID = "00000000-0000-0000-0000-00000000dead"


def _create(service: IncidentService, **overrides):
    fields = {"title": "API Timeout", "service": "Backend", "severity": "SEV2", "status": "OPEN"}
    fields.update(overrides)
    return service.create_incident(IncidentCreate(**fields))


class TestCreateIncident:
    @freeze_time("2025-08-26 10:00:00")
    def test_assigns_id_and_timestamps(self, service):
        record = _create(service, owner="amy@team.com")

        assert len(record.id) == 36
        assert record.created_at == datetime(2025, 8, 26, 10, 0, 0, tzinfo=timezone.utc)
        assert record.updated_at == record.created_at
        assert record.owner == "amy@team.com"
        assert record.summary is None

    def test_ids_are_unique(self, service):
        first = _create(service)
        second = _create(service)

        assert first.id != second.id

    def test_created_record_can_be_fetched(self, service):
        created = _create(service, summary="Upstream latency")

        assert service.get_incident(created.id) == created


class TestGetIncident:
    def test_missing_incident(self, service):
        with pytest.raises(IncidentNotFoundError) as exc_info:
            service.get_incident(MISSING_ID)

        assert exc_info.value.incident_id == MISSING_ID
        assert exc_info.value.message == "Incident not found"


class TestListIncidents:
    def test_builds_pagination(self, service, repository):
        repository.add_many([make_row(i) for i in range(25)])

        result = service.list_incidents(IncidentListQuery.from_params(page="3", limit="10"))

        assert len(result.incidents) == 5
        assert result.pagination.total_count == 25
        assert result.pagination.total_pages == 3
        assert result.pagination.page == 3


class TestUpdateIncident:
    def test_updates_only_given_fields(self, service, repository):
        repository.add_many([make_row(0, owner="amy@team.com", summary="before")])
        original = service.get_incident(make_row(0)["id"])

        updated = service.update_incident(original.id, IncidentUpdate.model_validate({"status": "RESOLVED"}))

        assert updated.status == "RESOLVED"
        assert updated.title == original.title
        assert updated.service == original.service
        assert updated.severity == original.severity
        assert updated.owner == original.owner
        assert updated.summary == original.summary
        assert updated.created_at == original.created_at
        assert updated.updated_at > original.updated_at

    def test_updated_at_moves_forward_within_one_clock_tick(self, repository):
        frozen = BASE_TIME + timedelta(days=1)
        service = IncidentService(repository, clock=lambda: frozen)

        created = _create(service)
        first = service.update_incident(created.id, IncidentUpdate(status="MITIGATED"))
        second = service.update_incident(created.id, IncidentUpdate(status="RESOLVED"))

        assert created.updated_at < first.updated_at < second.updated_at

    def test_owner_can_be_cleared(self, service):
        created = _create(service, owner="amy@team.com")

        updated = service.update_incident(created.id, IncidentUpdate.model_validate({"owner": None}))

        assert updated.owner is None

    @pytest.mark.parametrize(
        "payload, message",
        [
            ({"severity": "BAD"}, "Invalid severity value"),
            ({"status": "CLOSED"}, "Invalid status value"),
            ({"severity": None}, "Invalid severity value"),
            ({"title": None}, "Title cannot be null"),
            ({}, "No fields to update"),
        ],
    )
    def test_rejected_update_leaves_record_unchanged(self, service, payload, message):
        created = _create(service)

        with pytest.raises(InvalidUpdateError) as exc_info:
            service.update_incident(created.id, IncidentUpdate.model_validate(payload))

        assert exc_info.value.message == message
        assert service.get_incident(created.id) == created

    def test_not_found_is_checked_before_payload(self, service):
        with pytest.raises(IncidentNotFoundError):
            service.update_incident(MISSING_ID, IncidentUpdate.model_validate({"severity": "BAD"}))

    def test_raw_body_is_parsed_after_existence_check(self, service):
        with pytest.raises(IncidentNotFoundError):
            service.update_incident(MISSING_ID, {"title": 42})

    def test_mistyped_raw_body_is_rejected(self, service):
        created = _create(service)

        with pytest.raises(ValidationError):
            service.update_incident(created.id, {"title": 42})

    @pytest.mark.parametrize("body", [None, [], "status"])
    def test_non_object_body_is_an_empty_update(self, service, body):
        created = _create(service)

        with pytest.raises(InvalidUpdateError) as exc_info:
            service.update_incident(created.id, body)

        assert exc_info.value.message == "No fields to update"

    def test_raw_body_is_applied(self, service):
        created = _create(service)

        updated = service.update_incident(created.id, {"status": "RESOLVED", "id": "ignored"})

        assert updated.status == "RESOLVED"
        assert updated.id == created.id

    def test_row_deleted_between_check_and_update(self, service, repository, monkeypatch):
        created = _create(service)
        monkeypatch.setattr(repository, "update", lambda *args, **kwargs: None)

        with pytest.raises(IncidentNotFoundError):
            service.update_incident(created.id, IncidentUpdate(status="RESOLVED"))

    def test_empty_title_is_accepted(self, service):
        created = _create(service)

        updated = service.update_incident(created.id, IncidentUpdate(title=""))

        assert updated.title == ""

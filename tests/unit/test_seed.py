"""Tests for synthetic incident seeding."""

import random
from datetime import datetime, timedelta, timezone

from incident_tracker.application.dtos import IncidentListQuery
from incident_tracker.config import Settings
from incident_tracker.domain.enums import KNOWN_SERVICES, IncidentSeverity, IncidentStatus
from incident_tracker.infrastructure.database import DatabaseManager
from incident_tracker.infrastructure.repositories import IncidentRepository
from incident_tracker.seed import DEFAULT_COUNT, MAX_AGE_DAYS, OWNERS, TITLES, generate_incidents, seed_database

NOW = datetime(2025, 8, 26, 10, 0, 0, tzinfo=timezone.utc)


class TestGenerateIncidents:
    def test_rows_are_valid(self):
        rows = list(generate_incidents(200, random.Random(1), NOW))

        assert len(rows) == 200
        for row in rows:
            assert row["title"] in TITLES
            assert row["service"] in KNOWN_SERVICES
            assert row["severity"] in IncidentSeverity.values()
            assert row["status"] in IncidentStatus.values()
            assert row["owner"] is None or row["owner"] in OWNERS
            assert NOW - timedelta(days=MAX_AGE_DAYS) < row["created_at"] <= NOW
            assert row["updated_at"] == row["created_at"]

    def test_ids_are_unique(self):
        rows = list(generate_incidents(500, random.Random(2), NOW))

        assert len({row["id"] for row in rows}) == 500

    def test_some_owners_are_missing(self):
        rows = list(generate_incidents(500, random.Random(3), NOW))
        unowned = sum(1 for row in rows if row["owner"] is None)

        assert 50 < unowned < 150

    def test_same_seed_same_data(self):
        first = list(generate_incidents(10, random.Random(7), NOW))
        second = list(generate_incidents(10, random.Random(7), NOW))

        assert first == second


class TestSeedDatabase:
    def test_replaces_existing_rows(self, tmp_path):
        settings = Settings(database_url=f"sqlite:///{tmp_path / 'seed.db'}")

        assert seed_database(settings, count=30, seed=1) == 30
        assert seed_database(settings, count=12, seed=2) == 12

        manager = DatabaseManager()
        repository = IncidentRepository(manager.initialize(settings))
        try:
            _, total = repository.list_page(IncidentListQuery.from_params())
        finally:
            manager.close()

        assert total == 12

    def test_default_count(self):
        assert DEFAULT_COUNT == 200

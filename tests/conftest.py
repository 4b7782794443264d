"""
Pytest configuration and shared fixtures for incident tracker tests.

The API runs against an in-memory SQLite database shared by every thread of
the test client. Unit tests get their own throwaway engine.
"""

import os
from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

# Set test environment before imports
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["API_PREFIX"] = "/api"

from fixtures.test_data import make_rows, mixed_rows  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402

from incident_tracker.api.app import create_app  # noqa: E402
from incident_tracker.application.services import IncidentService  # noqa: E402
from incident_tracker.infrastructure.database import build_engine, database_manager, init_schema  # noqa: E402
from incident_tracker.infrastructure.repositories import IncidentRepository  # noqa: E402


@pytest.fixture(scope="session")
def app():
    """Create FastAPI application instance for testing."""
    return create_app()


@pytest.fixture(scope="session")
def session_client(app) -> Generator[TestClient, None, None]:
    """Test client with the application lifespan running."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def client(session_client: TestClient) -> Generator[TestClient, None, None]:
    """Test client starting from an empty incidents table."""
    IncidentRepository(database_manager.engine).clear()
    yield session_client
    session_client.app.dependency_overrides.clear()


@pytest.fixture
def api_repository(client: TestClient) -> IncidentRepository:
    """Repository over the same database the API uses, for arranging rows directly."""
    return IncidentRepository(database_manager.engine)


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """A fresh in-memory database with the schema applied."""
    test_engine = build_engine("sqlite://")
    init_schema(test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def repository(engine: Engine) -> IncidentRepository:
    return IncidentRepository(engine)


@pytest.fixture
def service(repository: IncidentRepository) -> IncidentService:
    return IncidentService(repository)


@pytest.fixture
def seeded_repository(repository: IncidentRepository) -> IncidentRepository:
    repository.add_many(mixed_rows())
    return repository


@pytest.fixture
def twenty_five_rows() -> list[dict]:
    return make_rows(25)


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "integration: integration test")
    config.addinivalue_line("markers", "slow: slow running test")

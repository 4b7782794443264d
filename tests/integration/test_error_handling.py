"""Integration tests for error responses, health endpoints and request middleware."""

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from fixtures.test_data import valid_payload

from incident_tracker.api.dependencies import get_database_manager, get_incident_repository
from incident_tracker.core.exceptions import RepositoryError
from incident_tracker.infrastructure.database import DatabaseManager

pytestmark = pytest.mark.integration


class FailingRepository:
    """Repository stand-in whose every call fails like a lost database."""

    def _fail(self, *args, **kwargs):
        raise RepositoryError("connection lost", details={"host": "db.internal"})

    add = get = list_page = update = _fail


class ExplodingRepository:
    def get(self, incident_id):
        raise RuntimeError("unexpected")


class TestServerErrors:
    @pytest.mark.parametrize(
        "method, path, body",
        [
            ("get", "/api/incidents", None),
            ("get", "/api/incidents/abc", None),
            ("post", "/api/incidents", valid_payload()),
            ("patch", "/api/incidents/abc", {"status": "RESOLVED"}),
        ],
    )
    def test_repository_failures_return_generic_500(self, client, method, path, body):
        client.app.dependency_overrides[get_incident_repository] = FailingRepository

        kwargs = {"json": body} if body is not None else {}
        response = getattr(client, method)(path, **kwargs)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {"error": "Internal server error"}
        assert "db.internal" not in response.text

    def test_unexpected_exception_returns_generic_500(self, app, client):
        app.dependency_overrides[get_incident_repository] = ExplodingRepository
        quiet_client = TestClient(app, raise_server_exceptions=False)

        response = quiet_client.get("/api/incidents/abc")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {"error": "Internal server error"}

    def test_unexpected_exception_keeps_request_id(self, app, client):
        app.dependency_overrides[get_incident_repository] = ExplodingRepository
        quiet_client = TestClient(app, raise_server_exceptions=False)

        response = quiet_client.get("/api/incidents/abc", headers={"X-Request-ID": "trace-500"})

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.headers["X-Request-ID"] == "trace-500"


class TestClientErrors:
    def test_unknown_route(self, client):
        response = client.get("/api/unknown")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert "error" in response.json()

    def test_malformed_json_on_create_lists_every_error(self, client):
        response = client.post(
            "/api/incidents", content=b"{not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert len(response.json()["errors"]) == 4

    def test_json_array_on_create_is_rejected(self, client):
        response = client.post("/api/incidents", json=[valid_payload()])

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert len(response.json()["errors"]) == 4

    def test_malformed_json_on_update(self, client):
        created = client.post("/api/incidents", json=valid_payload()).json()

        response = client.patch(
            f"/api/incidents/{created['id']}", content=b"{oops", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "errors" in response.json()

    def test_wrong_type_on_update(self, client):
        created = client.post("/api/incidents", json=valid_payload()).json()

        response = client.patch(f"/api/incidents/{created['id']}", json={"title": 42})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"]


class TestHealth:
    def test_basic_health(self, client):
        response = client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"status": "OK"}

    def test_health_is_not_under_api_prefix(self, client):
        assert client.get("/api/health").status_code == status.HTTP_404_NOT_FOUND

    def test_detailed_health_reports_database(self, client):
        response = client.get("/health/detailed")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "OK"
        assert data["components"] == {"database": "healthy"}
        assert data["environment"] == "test"
        assert data["uptime_seconds"] >= 0

    def test_detailed_health_degraded_without_database(self, client):
        client.app.dependency_overrides[get_database_manager] = DatabaseManager

        response = client.get("/health/detailed")

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json()["status"] == "DEGRADED"
        assert response.json()["components"] == {"database": "unhealthy"}


class TestRequestMiddleware:
    def test_request_id_is_generated(self, client):
        response = client.get("/api/incidents")

        assert response.headers["X-Request-ID"]
        assert float(response.headers["X-Processing-Time"]) >= 0

    def test_incoming_request_id_is_echoed(self, client):
        response = client.get("/api/incidents", headers={"X-Request-ID": "trace-123"})

        assert response.headers["X-Request-ID"] == "trace-123"

    def test_excluded_paths_still_get_request_id(self, client):
        response = client.get("/health")

        assert response.headers["X-Request-ID"]
        assert "X-Processing-Time" not in response.headers

    def test_error_responses_carry_request_id(self, client):
        response = client.get("/api/incidents/missing", headers={"X-Request-ID": "trace-404"})

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.headers["X-Request-ID"] == "trace-404"

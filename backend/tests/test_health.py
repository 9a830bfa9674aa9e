"""
Tests for health check endpoints.
"""

from sqlalchemy.exc import OperationalError


class TestHealth:
    def test_basic(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["service"] == "admin-api"

    def test_detailed_healthy(self, client):
        response = client.get("/api/health/detailed")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["dependencies"]["database"]["details"] == {"dialect": "sqlite"}
        assert data["dependencies"]["bit_indexes"]["status"] == "healthy"

    def test_database_down(self, client, db_session, monkeypatch):
        def unreachable(*args, **kwargs):
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))

        monkeypatch.setattr(db_session, "execute", unreachable)

        response = client.get("/api/health/detailed")

        assert response.status_code == 503
        data = response.json()
        assert data["status"] == "unhealthy"
        assert data["dependencies"]["database"]["status"] == "unhealthy"


class TestRequestId:
    """X-Request-ID propagation."""

    def test_caller_id_echoed(self, client):
        response = client.get("/api/health", headers={"X-Request-ID": "dashboard-42"})
        assert response.headers["X-Request-ID"] == "dashboard-42"

    def test_malformed_id_replaced(self, client):
        response = client.get("/api/health", headers={"X-Request-ID": "not a valid id!"})
        request_id = response.headers["X-Request-ID"]
        assert request_id != "not a valid id!"
        assert len(request_id) == 36

    def test_generated_when_missing(self, client):
        assert client.get("/api/health").headers["X-Request-ID"]

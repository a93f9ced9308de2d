"""
Integration Tests - Analytics API
"""
import pytest
from fastapi.testclient import TestClient

from grocery_analytics.analytics.engine import AnalyticsEngine
from grocery_analytics.repository.memory import InMemoryAnalyticsRepository
from grocery_analytics.serving.api.main import create_api_app
from grocery_analytics.serving.service import DashboardAnalyticsService


class BrokenRepository(InMemoryAnalyticsRepository):
    async def fetch_users(self):
        raise ConnectionRefusedError("database is down")


class FlakyRepository(InMemoryAnalyticsRepository):
    failing = False

    async def fetch_users(self):
        if self.failing:
            raise ConnectionRefusedError("database is down")
        return self.users


@pytest.fixture
def client(engine, reference_time):
    service = DashboardAnalyticsService(engine, clock=lambda: reference_time)
    with TestClient(create_api_app(service=service)) as test_client:
        yield test_client


class TestSnapshotEndpoint:
    """Tests for GET /api/v1/analytics/snapshot"""

    def test_week_snapshot(self, client):
        response = client.get("/api/v1/analytics/snapshot", params={"range": "week"})

        assert response.status_code == 200
        data = response.json()
        assert data["range"] == "week"
        assert data["summary"]["revenue"]["today"] == 250.0
        assert len(data["daily_sales"]) == 8
        assert data["daily_sales"][-1] == {"date": "2026-10-14", "orders": 2, "revenue": 250.0}
        assert data["hourly_distribution"][9]["label"] == "09:00"

    def test_default_range_is_month(self, client):
        response = client.get("/api/v1/analytics/snapshot")

        assert response.status_code == 200
        assert response.json()["range"] == "month"
        assert len(response.json()["daily_sales"]) == 31

    def test_refresh(self, client):
        response = client.get("/api/v1/analytics/snapshot", params={"range": "year", "refresh": True})

        assert response.status_code == 200
        assert response.json()["top_products"][0]["product_name"] == "Apples"

    def test_invalid_range(self, client):
        response = client.get("/api/v1/analytics/snapshot", params={"range": "quarter"})

        assert response.status_code == 422
        assert "quarter" in response.json()["detail"]

    def test_retrieval_failure(self, reference_time):
        service = DashboardAnalyticsService(
            AnalyticsEngine(BrokenRepository()),
            clock=lambda: reference_time,
        )
        with TestClient(create_api_app(service=service)) as client:
            response = client.get("/api/v1/analytics/snapshot", params={"range": "week"})

        assert response.status_code == 503
        assert "users" in response.json()["detail"]

    def test_failure_serves_previous_snapshot(self, sample_users, reference_time):
        repository = FlakyRepository(users=sample_users)
        service = DashboardAnalyticsService(AnalyticsEngine(repository), clock=lambda: reference_time)
        with TestClient(create_api_app(service=service)) as client:
            fresh = client.get("/api/v1/analytics/snapshot", params={"range": "week"})
            repository.failing = True
            stale = client.get("/api/v1/analytics/snapshot", params={"range": "week", "refresh": True})
            export = client.get("/api/v1/analytics/sales/export", params={"range": "week"})
            missing = client.get("/api/v1/analytics/snapshot", params={"range": "month"})

        assert "X-Snapshot-Stale" not in fresh.headers
        assert stale.status_code == 200
        assert stale.headers["X-Snapshot-Stale"] == "true"
        assert stale.json() == fresh.json()
        assert export.status_code == 200
        assert export.headers["X-Snapshot-Stale"] == "true"
        assert missing.status_code == 503

    def test_service_not_initialized(self):
        with TestClient(create_api_app()) as client:
            response = client.get("/api/v1/analytics/snapshot")

        assert response.status_code == 503


class TestExportEndpoint:
    """Tests for GET /api/v1/analytics/sales/export"""

    def test_csv_download(self, client):
        response = client.get("/api/v1/analytics/sales/export", params={"range": "week"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "analytics-week-2026-10-14.csv" in response.headers["content-disposition"]
        lines = response.content.decode("utf-8").splitlines()
        assert lines[0] == "Date,Order Count,Revenue"
        assert lines[-1] == "2026-10-14,2,250.00"


class TestHealthEndpoint:
    """Tests for health endpoints"""

    def test_liveness(self, client):
        response = client.get("/api/v1/health/live")

        assert response.status_code == 200
        assert response.json() == {"status": "alive"}

    def test_health_reports_missing_database(self, client):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "unhealthy"
        assert data["checks"]["database"]["status"] == "unhealthy"
        assert data["checks"]["cache"]["status"] == "unavailable"

    def test_health_reports_computed_ranges(self, client):
        client.get("/api/v1/analytics/snapshot", params={"range": "week"})

        analytics = client.get("/api/v1/health").json()["checks"]["analytics"]

        assert analytics["status"] == "healthy"
        assert analytics["last_computed"] == {
            "week": "2026-10-14T15:30:00",
            "month": None,
            "year": None,
        }

    def test_request_id_echoed(self, client):
        response = client.get("/api/v1/health/live", headers={"X-Request-ID": "abc123"})

        assert response.headers["X-Request-ID"] == "abc123"
        assert response.headers["X-Response-Time"].endswith("ms")

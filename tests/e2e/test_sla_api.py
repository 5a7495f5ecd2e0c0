"""End-to-end tests for the SLA API.

Runs the full application (middleware, routes, lifespan) in-process and
checks that served requests flow into the SLA tracker.
"""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from sla_engine.domain.entities.sla import SlaTier
from sla_engine.domain.repositories.metrics_sink import MetricsSinkInterface
from sla_engine.infrastructure.api.main import create_app
from sla_engine.infrastructure.config.settings import (
    ObservabilitySettings,
    Settings,
    SlaSettings,
)


@pytest.fixture
def mock_sink():
    return MagicMock(spec=MetricsSinkInterface)


@pytest.fixture
def app(mock_sink):
    """Application with a short recompute interval and a mocked sink."""
    settings = Settings(
        observability=ObservabilitySettings(service_name="e2e-service"),
        sla=SlaSettings(recompute_interval_seconds=0.05),
    )
    application = create_app(settings, metrics_sink=mock_sink)

    @application.get("/boom")
    async def boom():
        raise RuntimeError("handler exploded")

    return application


@pytest.fixture
def client(app):
    """Test client with the lifespan (and tracker) running."""
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


def _totals(app) -> tuple[int, int]:
    metrics = app.state.sla_tracker.get_all_metrics().values()
    return (
        sum(m.total_requests for m in metrics),
        sum(m.failed_requests for m in metrics),
    )


class TestHealthEndpoints:
    """Tests for liveness, readiness and detailed health."""

    def test_liveness(self, client):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert "X-Correlation-ID" in response.headers

    def test_ready_while_tracker_running(self, client, app):
        response = client.get("/api/v1/health/ready")

        assert app.state.sla_tracker.running is True
        assert response.status_code == 200
        assert response.json()["checks"] == {"sla_tracker": "running"}

    def test_not_ready_without_lifespan(self, app):
        response = TestClient(app).get("/api/v1/health/ready")

        assert response.status_code == 503
        assert response.json()["status"] == "not_ready"

    def test_tracker_stopped_on_shutdown(self, app):
        with TestClient(app):
            assert app.state.sla_tracker.running is True

        assert app.state.sla_tracker.running is False

    def test_liveness_reports_configured_service(self, client):
        assert client.get("/api/v1/health").json()["service"] == "e2e-service"

    def test_health_details_healthy(self, client):
        response = client.get("/api/v1/health/details")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["service"] == "e2e-service"
        assert body["environment"] == "development"
        assert body["features"] == {"tracing_enabled": False}
        assert set(body["sla"]["metrics"]) == {"gold", "silver", "bronze"}
        assert body["sla"]["summary"]["service"] == "e2e-service"
        assert body["sla"]["critical_budgets"] == {
            "gold": False,
            "silver": False,
            "bronze": False,
        }

    def test_health_details_degraded_when_budget_critical(self, client, app):
        tracker = app.state.sla_tracker
        for i in range(100):
            tracker.record_request(0.01, i >= 50, "/api/v1/orders")
        tracker.recompute()

        response = client.get("/api/v1/health/details")

        assert response.status_code == 503
        body = response.json()
        assert body["status"] == "degraded"
        assert body["sla"]["critical_budgets"]["gold"] is True
        assert body["sla"]["critical_budgets"]["bronze"] is False
        assert body["sla"]["metrics"]["gold"]["error_budget_remaining"] == 0.0


class TestSlaEndpoints:
    """Tests for the SLA status endpoints."""

    def test_get_all_tiers(self, client):
        response = client.get("/api/v1/sla")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "success"
        assert set(body["sla_tiers"]) == {"gold", "silver", "bronze"}
        assert body["summary"]["service"] == "e2e-service"
        assert body["critical"] == {"gold": False, "silver": False, "bronze": False}

    def test_get_summary(self, client):
        response = client.get("/api/v1/sla/summary")

        assert response.status_code == 200
        body = response.json()
        assert body["service"] == "e2e-service"
        assert body["tiers"]["gold"]["availability"]["target"] == 0.995
        assert body["tiers"]["silver"]["response_time"]["target"] == 1.0

    def test_get_critical(self, client):
        response = client.get("/api/v1/sla/critical")

        assert response.status_code == 200
        assert response.json() == {"gold": False, "silver": False, "bronze": False}

    @pytest.mark.parametrize("tier", ["gold", "SILVER", "bronze"])
    def test_get_single_tier(self, client, tier):
        response = client.get(f"/api/v1/sla/{tier}")

        assert response.status_code == 200
        body = response.json()
        assert body["tier"] == tier.lower()
        assert body["metrics"]["tier"] == tier.lower()
        assert body["error_budget_critical"] is False

    def test_unknown_tier_returns_problem_details(self, client):
        response = client.get("/api/v1/sla/platinum")

        assert response.status_code == 400
        assert response.headers["content-type"].startswith("application/problem+json")
        body = response.json()
        assert body["title"] == "Bad Request"
        assert body["detail"] == "Invalid SLA tier. Must be one of: gold, silver, bronze"
        assert body["instance"] == "/api/v1/sla/platinum"
        assert body["correlation_id"] == response.headers["X-Correlation-ID"]


class TestSlaTracking:
    """Tests that served requests are recorded by the middleware."""

    def test_successful_requests_recorded(self, client, app):
        before_total, before_failed = _totals(app)

        for _ in range(5):
            assert client.get("/api/v1/health").status_code == 200

        total, failed = _totals(app)
        assert total - before_total == 5
        assert failed == before_failed

    def test_client_errors_recorded_as_failures(self, client, app):
        before_total, before_failed = _totals(app)

        client.get("/api/v1/sla/platinum")
        client.get("/api/v1/does-not-exist")

        total, failed = _totals(app)
        assert total - before_total == 2
        assert failed - before_failed == 2

    def test_handler_exception_recorded_and_converted(self, client, app):
        before_total, before_failed = _totals(app)

        response = client.get("/boom")

        assert response.status_code == 500
        assert response.json()["detail"] == "An unexpected error occurred"
        total, failed = _totals(app)
        assert total - before_total == 1
        assert failed - before_failed == 1

    def test_recompute_reflects_recorded_traffic(self, client, app, mock_sink):
        for _ in range(3):
            client.get("/api/v1/does-not-exist")

        app.state.sla_tracker.recompute()
        metrics = app.state.sla_tracker.get_all_metrics()

        assert any(m.current_availability < 1.0 for m in metrics.values())
        mock_sink.update_sla_metrics.assert_any_call(
            service="e2e-service",
            tier=SlaTier.GOLD.value,
            availability=pytest.approx(metrics[SlaTier.GOLD].current_availability),
            error_budget_remaining=pytest.approx(metrics[SlaTier.GOLD].error_budget_remaining),
            burn_rate=pytest.approx(metrics[SlaTier.GOLD].error_budget_burn_rate),
        )


class TestErrorResponses:
    """Tests for RFC 7807 error formatting."""

    def test_unknown_route_returns_problem_details(self, client):
        response = client.get("/api/v1/does-not-exist")

        assert response.status_code == 404
        assert response.json()["title"] == "Not Found"
        assert response.json()["instance"] == "/api/v1/does-not-exist"

    def test_incoming_correlation_id_echoed(self, client):
        response = client.get("/api/v1/health", headers={"X-Correlation-ID": "abc-123"})

        assert response.headers["X-Correlation-ID"] == "abc-123"

"""Integration tests for Prometheus metrics.

Tests that metrics are correctly recorded and exposed via /metrics endpoint.
Samples are read back through the registry so assertions don't depend on
the exposition format's label ordering.
"""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from prometheus_client import REGISTRY

from sla_engine.application.use_cases.record_request import RecordRequestUseCase
from sla_engine.domain.services.tier_classifier import TierClassifier
from sla_engine.infrastructure.api.main import create_app
from sla_engine.infrastructure.config.settings import Settings
from sla_engine.infrastructure.observability import metrics
from sla_engine.infrastructure.stores.sla_metrics_store import InMemorySlaMetricsStore


def sample(name: str, labels: dict[str, str]) -> float:
    """Current sample value, 0.0 when the label set hasn't been observed."""
    return REGISTRY.get_sample_value(name, labels) or 0.0


@pytest.fixture
def client():
    """Create test client (lifespan not started)."""
    return TestClient(create_app(Settings()))


class TestMetricsEndpoint:
    """Tests for /metrics endpoint."""

    def test_metrics_endpoint_returns_prometheus_format(self, client):
        response = client.get("/api/v1/metrics")

        assert response.status_code == 200
        assert "text/plain" in response.headers["content-type"]
        assert "sla_engine_http_requests_total" in response.text
        assert "sla_engine_http_request_duration_seconds" in response.text

    def test_route_templates_used_as_endpoint_label(self, client):
        labels = {"method": "GET", "endpoint": "/api/v1/sla/{tier}", "status_code": "200"}
        before = sample("sla_engine_http_requests_total", labels)

        assert client.get("/api/v1/sla/gold").status_code == 200

        assert sample("sla_engine_http_requests_total", labels) == before + 1
        assert (
            REGISTRY.get_sample_value(
                "sla_engine_http_requests_total",
                {"method": "GET", "endpoint": "/api/v1/sla/gold", "status_code": "200"},
            )
            is None
        )


class TestMetricsRecording:
    """Tests for metric recording functions."""

    def test_record_http_request(self):
        labels = {"method": "POST", "endpoint": "/api/v1/test", "status_code": "201"}
        before = sample("sla_engine_http_requests_total", labels)

        metrics.record_http_request(
            method="POST",
            endpoint="/api/v1/test",
            status_code=201,
            duration=0.123,
        )

        assert sample("sla_engine_http_requests_total", labels) == before + 1
        assert sample("sla_engine_http_request_duration_seconds_count", labels) >= 1

    def test_record_sla_recompute_run(self):
        before = sample("sla_engine_sla_recompute_runs_total", {"status": "success"})

        metrics.record_sla_recompute_run(status="success", duration=0.001)

        after = sample("sla_engine_sla_recompute_runs_total", {"status": "success"})
        assert after == before + 1

    def test_record_invalid_latency_sample(self):
        before = sample("sla_engine_invalid_latency_samples_total", {"reason": "negative"})

        metrics.record_invalid_latency_sample("negative")

        after = sample("sla_engine_invalid_latency_samples_total", {"reason": "negative"})
        assert after == before + 1


class TestSlaResponseTimeHistogram:
    """Tests for the per-tier response time histogram."""

    def test_record_sla_response_time(self):
        labels = {"service": "hist-direct", "endpoint": "/api/v1/orders", "sla_tier": "silver"}

        metrics.record_sla_response_time("hist-direct", "/api/v1/orders", "silver", 0.7)

        assert sample("sla_response_time_seconds_count", labels) == 1
        assert sample("sla_response_time_seconds_sum", labels) == pytest.approx(0.7)
        assert sample("sla_response_time_seconds_bucket", {**labels, "le": "0.5"}) == 0
        assert sample("sla_response_time_seconds_bucket", {**labels, "le": "1.0"}) == 1

    def test_recorded_requests_observed_under_their_tier(self):
        use_case = RecordRequestUseCase(
            tier_classifier=TierClassifier(gold_target_seconds=0.2, silver_target_seconds=1.0),
            metrics_store=InMemorySlaMetricsStore(),
            service_name="hist-usecase",
        )
        gold = {"service": "hist-usecase", "endpoint": "/api/v1/orders", "sla_tier": "gold"}
        bronze = {**gold, "sla_tier": "bronze"}

        use_case.execute(0.05, True, "/api/v1/orders")
        use_case.execute(0.1, True, "/api/v1/orders")
        use_case.execute(3.0, False, "/api/v1/orders")

        assert sample("sla_response_time_seconds_count", gold) == 2
        assert sample("sla_response_time_seconds_count", bronze) == 1
        assert sample("sla_response_time_seconds_bucket", {**bronze, "le": "+Inf"}) == 1

    def test_unusable_latency_not_observed(self):
        use_case = RecordRequestUseCase(
            tier_classifier=TierClassifier(gold_target_seconds=0.2, silver_target_seconds=1.0),
            metrics_store=InMemorySlaMetricsStore(),
            service_name="hist-invalid",
        )

        use_case.execute(float("nan"), True, "/api/v1/orders")

        assert (
            REGISTRY.get_sample_value(
                "sla_response_time_seconds_count",
                {"service": "hist-invalid", "endpoint": "/api/v1/orders", "sla_tier": "bronze"},
            )
            is None
        )


class TestPrometheusMetricsSink:
    """Tests for the Prometheus-backed SLA sink."""

    def test_update_sets_gauges(self):
        sink = metrics.PrometheusMetricsSink(period_labels={"gold": "7d"})

        sink.update_sla_metrics(
            service="sink-test",
            tier="gold",
            availability=0.999,
            error_budget_remaining=0.8,
            burn_rate=0.2,
        )

        assert REGISTRY.get_sample_value(
            "sla_availability_ratio", {"service": "sink-test", "sla_tier": "gold"}
        ) == pytest.approx(0.999)
        assert REGISTRY.get_sample_value(
            "sla_error_budget_ratio",
            {"service": "sink-test", "sla_tier": "gold", "period": "7d"},
        ) == pytest.approx(0.8)
        assert REGISTRY.get_sample_value(
            "sla_error_budget_burn_rate",
            {"service": "sink-test", "sla_tier": "gold", "window": "lifetime"},
        ) == pytest.approx(0.2)

    def test_default_period_label(self):
        sink = metrics.PrometheusMetricsSink()

        sink.update_sla_metrics("sink-default", "bronze", 1.0, 1.0, 0.0)

        assert (
            REGISTRY.get_sample_value(
                "sla_error_budget_ratio",
                {"service": "sink-default", "sla_tier": "bronze", "period": "30d"},
            )
            == 1.0
        )

    @pytest.mark.parametrize(
        "period,label",
        [
            (timedelta(days=30), "30d"),
            (timedelta(hours=12), "12h"),
            (timedelta(minutes=90), "90m"),
            (timedelta(seconds=45), "45s"),
        ],
    )
    def test_format_period(self, period, label):
        assert metrics.format_period(period) == label

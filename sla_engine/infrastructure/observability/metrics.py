"""Prometheus metrics instrumentation.

Defines and exports Prometheus metrics for the SLA engine, and the
Prometheus-backed MetricsSink that publishes per-tier SLA indicators.
Endpoint labels use route templates to avoid high cardinality.
"""

from collections.abc import Mapping
from datetime import timedelta

from prometheus_client import Counter, Gauge, Histogram
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from sla_engine.domain.repositories.metrics_sink import MetricsSinkInterface

# SLA Metrics (exported per service and tier)
sla_availability_ratio = Gauge(
    name="sla_availability_ratio",
    documentation="SLA availability ratio (0-1)",
    labelnames=["service", "sla_tier"],
)

sla_error_budget_ratio = Gauge(
    name="sla_error_budget_ratio",
    documentation="SLA error budget remaining (0-1)",
    labelnames=["service", "sla_tier", "period"],
)

sla_error_budget_burn_rate = Gauge(
    name="sla_error_budget_burn_rate",
    documentation="SLA error budget burn rate",
    labelnames=["service", "sla_tier", "window"],
)

sla_response_time_seconds = Histogram(
    name="sla_response_time_seconds",
    documentation="Request response time by SLA tier",
    labelnames=["service", "endpoint", "sla_tier"],
    buckets=(0.1, 0.2, 0.5, 1.0, 2.0, 5.0),
)

# HTTP Request Metrics
http_requests_total = Counter(
    name="sla_engine_http_requests_total",
    documentation="Total number of HTTP requests",
    labelnames=["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    name="sla_engine_http_request_duration_seconds",
    documentation="HTTP request duration in seconds",
    labelnames=["method", "endpoint", "status_code"],
    buckets=(
        0.005,  # 5ms
        0.01,  # 10ms
        0.025,  # 25ms
        0.05,  # 50ms
        0.1,  # 100ms
        0.2,  # 200ms (gold target)
        0.5,  # 500ms
        1.0,  # 1s (silver target)
        2.0,  # 2s (bronze target)
        5.0,  # 5s
        10.0,  # 10s
    ),
)

# SLA Recompute Metrics
sla_recompute_runs_total = Counter(
    name="sla_engine_sla_recompute_runs_total",
    documentation="Total number of SLA metric recompute passes",
    labelnames=["status"],  # success, failure
)

sla_recompute_duration_seconds = Histogram(
    name="sla_engine_sla_recompute_duration_seconds",
    documentation="SLA metric recompute pass duration in seconds",
    buckets=(
        0.0001,  # 0.1ms
        0.0005,  # 0.5ms
        0.001,  # 1ms
        0.005,  # 5ms
        0.01,  # 10ms
        0.05,  # 50ms
        0.1,  # 100ms
        0.5,  # 500ms
    ),
)

# Recorder Input Metrics
invalid_latency_samples_total = Counter(
    name="sla_engine_invalid_latency_samples_total",
    documentation="Latency samples adjusted or discarded by the recorder input policy",
    labelnames=["reason"],  # negative, non_finite, not_a_number
)

BURN_RATE_WINDOW = "lifetime"  # Counters accumulate from process start


def format_period(period: timedelta) -> str:
    """Render an error budget period as a compact label.

    Examples:
        timedelta(days=30) -> "30d", timedelta(hours=12) -> "12h"

    Args:
        period: Error budget period

    Returns:
        Label using the largest whole unit (d, h, m, s)
    """
    seconds = int(period.total_seconds())
    for unit, size in (("d", 86400), ("h", 3600), ("m", 60)):
        if seconds >= size and seconds % size == 0:
            return f"{seconds // size}{unit}"
    return f"{seconds}s"


class PrometheusMetricsSink(MetricsSinkInterface):
    """Publishes SLA indicators as Prometheus gauges.

    Gauges:
    - sla_availability_ratio{service, sla_tier}
    - sla_error_budget_ratio{service, sla_tier, period}
    - sla_error_budget_burn_rate{service, sla_tier, window}
    """

    def __init__(
        self,
        period_labels: Mapping[str, str] | None = None,
        default_period: str = "30d",
    ) -> None:
        """Initialize the sink.

        Args:
            period_labels: Tier name -> error budget period label
            default_period: Period label for tiers missing from period_labels
        """
        self._period_labels = dict(period_labels or {})
        self._default_period = default_period

    def update_sla_metrics(
        self,
        service: str,
        tier: str,
        availability: float,
        error_budget_remaining: float,
        burn_rate: float,
    ) -> None:
        """Set the SLA gauges for a tier."""
        period = self._period_labels.get(tier, self._default_period)

        sla_availability_ratio.labels(service=service, sla_tier=tier).set(availability)
        sla_error_budget_ratio.labels(
            service=service,
            sla_tier=tier,
            period=period,
        ).set(error_budget_remaining)
        sla_error_budget_burn_rate.labels(
            service=service,
            sla_tier=tier,
            window=BURN_RATE_WINDOW,
        ).set(burn_rate)


def get_metrics_content() -> tuple[bytes, str]:
    """Generate Prometheus metrics in exposition format.

    Returns:
        Tuple of (metrics_bytes, content_type)
    """
    return generate_latest(), CONTENT_TYPE_LATEST


def record_http_request(
    method: str,
    endpoint: str,
    status_code: int,
    duration: float,
) -> None:
    """Record HTTP request metrics.

    Args:
        method: HTTP method (GET, POST, etc.)
        endpoint: API endpoint path
        status_code: HTTP status code
        duration: Request duration in seconds
    """
    http_requests_total.labels(
        method=method,
        endpoint=endpoint,
        status_code=str(status_code),
    ).inc()

    http_request_duration_seconds.labels(
        method=method,
        endpoint=endpoint,
        status_code=str(status_code),
    ).observe(duration)


def record_sla_recompute_run(
    status: str,
    duration: float,
) -> None:
    """Record an SLA recompute pass.

    Args:
        status: Run status (success or failure)
        duration: Pass duration in seconds
    """
    sla_recompute_runs_total.labels(status=status).inc()
    sla_recompute_duration_seconds.observe(duration)


def record_invalid_latency_sample(reason: str) -> None:
    """Record a latency sample adjusted by the recorder input policy.

    Args:
        reason: Why the sample was adjusted (negative, non_finite, not_a_number)
    """
    invalid_latency_samples_total.labels(reason=reason).inc()


def record_sla_response_time(
    service: str,
    endpoint: str,
    tier: str,
    response_time: float,
) -> None:
    """Observe a request's response time under the tier it was classified into.

    Args:
        service: Service name
        endpoint: Endpoint route template
        tier: SLA tier name (gold, silver, bronze)
        response_time: Response time in seconds
    """
    sla_response_time_seconds.labels(
        service=service,
        endpoint=endpoint,
        sla_tier=tier,
    ).observe(response_time)

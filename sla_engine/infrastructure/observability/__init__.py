"""Observability infrastructure module.

Provides OpenTelemetry tracing, structured logging, and Prometheus metrics.
"""

from sla_engine.infrastructure.observability.logging import configure_logging, get_logger
from sla_engine.infrastructure.observability.metrics import (
    PrometheusMetricsSink,
    format_period,
    get_metrics_content,
    record_http_request,
    record_invalid_latency_sample,
    record_sla_response_time,
    record_sla_recompute_run,
)
from sla_engine.infrastructure.observability.tracing import (
    instrument_fastapi_app,
    setup_tracing,
)

__all__ = [
    # Logging
    "configure_logging",
    "get_logger",
    # Tracing
    "setup_tracing",
    "instrument_fastapi_app",
    # Metrics
    "PrometheusMetricsSink",
    "format_period",
    "get_metrics_content",
    "record_http_request",
    "record_invalid_latency_sample",
    "record_sla_response_time",
    "record_sla_recompute_run",
]

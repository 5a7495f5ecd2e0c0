"""OpenTelemetry distributed tracing setup.

Configures OpenTelemetry SDK with OTLP exporter for distributed tracing.
Tracing is opt-in (OTEL_TRACING_ENABLED); log events pick up trace and span
IDs whenever a span is active.
"""

import logging

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased

from sla_engine.infrastructure.config import Settings, get_settings

logger = logging.getLogger(__name__)


def setup_tracing(settings: Settings | None = None) -> TracerProvider | None:
    """Setup OpenTelemetry tracing with OTLP exporter.

    Configures:
    - TracerProvider with service name and environment
    - OTLP exporter for sending traces to collector
    - Trace sampling based on configured sample rate

    Args:
        settings: Settings to use (defaults to the global settings)

    Returns:
        TracerProvider instance, or None when tracing is disabled

    Note:
        FastAPI must be instrumented separately after app creation
        using instrument_fastapi_app()
    """
    settings = settings or get_settings()
    otel_config = settings.observability

    if not otel_config.tracing_enabled:
        logger.info("OpenTelemetry tracing disabled")
        return None

    resource = Resource.create(
        {
            "service.name": otel_config.service_name,
            "deployment.environment": settings.environment,
        }
    )

    sampler = TraceIdRatioBased(otel_config.trace_sample_rate)
    provider = TracerProvider(resource=resource, sampler=sampler)

    try:
        otlp_exporter = OTLPSpanExporter(
            endpoint=otel_config.exporter_otlp_endpoint,
            insecure=True,  # Use False in production with TLS
        )
        provider.add_span_processor(BatchSpanProcessor(otlp_exporter))

        logger.info(
            "OpenTelemetry tracing configured",
            extra={
                "service_name": otel_config.service_name,
                "otlp_endpoint": otel_config.exporter_otlp_endpoint,
                "sample_rate": otel_config.trace_sample_rate,
            },
        )
    except Exception as e:
        logger.warning(
            "Failed to configure OTLP exporter, tracing will be disabled",
            extra={"error": str(e)},
        )

    trace.set_tracer_provider(provider)
    return provider


def instrument_fastapi_app(app, settings: Settings | None = None) -> None:
    """Instrument FastAPI application with OpenTelemetry.

    No-op when tracing is disabled.

    Args:
        app: FastAPI application instance
        settings: Settings to use (defaults to the global settings)
    """
    settings = settings or get_settings()
    if not settings.observability.tracing_enabled:
        return

    try:
        FastAPIInstrumentor.instrument_app(app)
        logger.info("FastAPI auto-instrumentation enabled")
    except Exception as e:
        logger.warning(
            "Failed to instrument FastAPI app",
            extra={"error": str(e)},
        )


"""structlog setup for the SLA engine.

Events are rendered as JSON (or console output in development) and carry
the service name plus the active trace and span IDs. Endpoints reach the
tracker from callers we don't control, so query strings are cut from
endpoint-like fields before an event is rendered.
"""

import logging
import sys
from typing import Any

import structlog
from opentelemetry import trace

from sla_engine.infrastructure.config import Settings, get_settings

ENDPOINT_KEYS = frozenset({"endpoint", "path", "url"})


def configure_logging(settings: Settings | None = None) -> None:
    """Route structlog through stdlib logging at the configured level.

    Args:
        settings: Settings to use (defaults to the global settings)
    """
    settings = settings or get_settings()
    otel_config = settings.observability

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, otel_config.log_level.upper()),
    )

    processors: list = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _service_name_adder(otel_config.service_name),
        _add_trace_context,
        _strip_query_strings,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
    ]

    if otel_config.log_json_format:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def _service_name_adder(service_name: str):
    def add_service_name(logger, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict

    return add_service_name


def _add_trace_context(logger, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Attach trace_id/span_id when a valid span is active."""
    span_context = trace.get_current_span().get_span_context()
    if span_context.is_valid:
        event_dict["trace_id"] = format(span_context.trace_id, "032x")
        event_dict["span_id"] = format(span_context.span_id, "016x")
    return event_dict


def _strip_query_strings(logger, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Drop everything after '?' in endpoint, path and url values.

    Nested dicts are handled too, e.g. an event that logs a request mapping.
    """

    def strip(d: dict[str, Any]) -> dict[str, Any]:
        cleaned = {}
        for key, value in d.items():
            if isinstance(value, dict):
                value = strip(value)
            elif key in ENDPOINT_KEYS and isinstance(value, str):
                value = value.split("?", 1)[0]
            cleaned[key] = value
        return cleaned

    return strip(event_dict)


def get_logger(name: str) -> structlog.BoundLogger:
    """Return a structlog logger, e.g. ``get_logger(__name__)``."""
    return structlog.get_logger(name)

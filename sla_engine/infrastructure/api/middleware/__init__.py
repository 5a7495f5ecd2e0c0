"""API middleware components.

This module contains middleware for error handling, request logging,
HTTP metrics and SLA tracking.
"""

from .error_handler import ErrorHandlerMiddleware, problem_response
from .logging_middleware import LoggingMiddleware
from .metrics_middleware import MetricsMiddleware, resolve_endpoint
from .sla_middleware import SlaTrackingMiddleware

__all__ = [
    "ErrorHandlerMiddleware",
    "LoggingMiddleware",
    "MetricsMiddleware",
    "SlaTrackingMiddleware",
    "problem_response",
    "resolve_endpoint",
]

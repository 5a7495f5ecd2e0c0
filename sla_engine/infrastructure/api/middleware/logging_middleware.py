"""Logging middleware for structured request/response logging.

Logs every HTTP request with its correlation ID, matched route, duration
and status code. Query strings are not logged.
"""

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from sla_engine.infrastructure.api.middleware.metrics_middleware import resolve_endpoint
from sla_engine.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log HTTP requests and responses."""

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        """Process request and log details.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware/handler in chain

        Returns:
            HTTP response
        """
        start_time = time.perf_counter()
        client_ip = self._get_client_ip(request)

        logger.debug(
            "HTTP request received",
            method=request.method,
            path=request.url.path,
            client_ip=client_ip,
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "HTTP request failed",
                method=request.method,
                endpoint=resolve_endpoint(request),
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
                client_ip=client_ip,
                correlation_id=getattr(request.state, "correlation_id", None),
                error=str(e),
                exc_info=True,
            )
            raise

        logger.info(
            "HTTP request completed",
            method=request.method,
            endpoint=resolve_endpoint(request),
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            client_ip=client_ip,
            correlation_id=getattr(request.state, "correlation_id", None),
        )
        return response

    def _get_client_ip(self, request: Request) -> str:
        """Extract client IP, preferring the first X-Forwarded-For hop."""
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        if request.client:
            return request.client.host

        return "unknown"

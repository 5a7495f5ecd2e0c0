"""Metrics middleware for recording HTTP request metrics.

Records Prometheus metrics for all HTTP requests including duration,
status codes, and endpoints.
"""

import re
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from sla_engine.infrastructure.observability.metrics import record_http_request

_UUID_PATTERN = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}",
    re.IGNORECASE,
)


def resolve_endpoint(request: Request) -> str:
    """Normalize endpoint path for metrics and SLA tracking.

    Swaps the matched route template in for the trailing path segments
    so path parameters don't create high-cardinality labels, while any
    router prefix the template may lack is kept from the URL.

    Args:
        request: HTTP request (after routing)

    Returns:
        Normalized endpoint path

    Examples:
        /api/v1/sla/gold -> /api/v1/sla/{tier}
    """
    url_path = request.url.path
    route = request.scope.get("route")
    template = getattr(route, "path", None)
    if not template:
        # Unmatched paths: replace UUID-like segments with {id}
        return _UUID_PATTERN.sub("{id}", url_path)

    url_segments = url_path.strip("/").split("/")
    template_segments = template.strip("/").split("/")
    if len(template_segments) > len(url_segments):
        return template

    prefix = url_segments[: len(url_segments) - len(template_segments)]
    return "/" + "/".join(prefix + template_segments)


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware to record HTTP request metrics.

    Records:
    - Total request count per endpoint
    - Request duration histogram
    - Status code distribution

    Labels: method, endpoint, status_code
    """

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        """Process request and record metrics.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware/handler in chain

        Returns:
            HTTP response
        """
        start_time = time.perf_counter()

        response = await call_next(request)

        record_http_request(
            method=request.method,
            endpoint=resolve_endpoint(request),
            status_code=response.status_code,
            duration=time.perf_counter() - start_time,
        )

        return response

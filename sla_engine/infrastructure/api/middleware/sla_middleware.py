"""SLA tracking middleware.

Feeds every completed HTTP request into the SLA tracker as a
(latency, success, endpoint) outcome.
"""

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from sla_engine.infrastructure.api.middleware.metrics_middleware import resolve_endpoint
from sla_engine.infrastructure.tasks.sla_tracker import SlaTracker


class SlaTrackingMiddleware(BaseHTTPMiddleware):
    """Middleware to record request outcomes for SLA tracking.

    A request succeeds when its status code is below 400. Requests whose
    handler raises are recorded as failures before the error propagates.
    """

    def __init__(self, app: ASGIApp, tracker: SlaTracker) -> None:
        super().__init__(app)
        self.tracker = tracker

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        """Process request and record its SLA outcome.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware/handler in chain

        Returns:
            HTTP response
        """
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            self.tracker.record_request(
                time.perf_counter() - start_time,
                False,
                resolve_endpoint(request),
            )
            raise

        self.tracker.record_request(
            time.perf_counter() - start_time,
            response.status_code < 400,
            resolve_endpoint(request),
        )
        return response

"""Global error handling middleware.

Converts unhandled exceptions to RFC 7807 Problem Details and stamps every
response with an X-Correlation-ID header.
"""

import uuid

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from sla_engine.infrastructure.api.schemas.error_schema import (
    ProblemDetails,
    get_status_text,
)
from sla_engine.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


def problem_response(problem: ProblemDetails) -> JSONResponse:
    """Create a JSONResponse from ProblemDetails."""
    return JSONResponse(
        status_code=problem.status,
        content=problem.model_dump(exclude_none=True),
        headers={
            "Content-Type": "application/problem+json",
            "X-Correlation-ID": problem.correlation_id or "",
        },
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Middleware to handle all exceptions and return RFC 7807 Problem Details."""

    async def dispatch(self, request: Request, call_next):
        """Catch all exceptions and convert to Problem Details format.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware/handler in chain

        Returns:
            Response with Problem Details format on error
        """
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        request.state.correlation_id = correlation_id

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "Request failed",
                correlation_id=correlation_id,
                path=request.url.path,
                method=request.method,
                exc_info=exc,
            )
            return problem_response(
                self._exception_to_problem(exc, request, correlation_id)
            )

        response.headers["X-Correlation-ID"] = correlation_id
        return response

    def _exception_to_problem(
        self, exc: Exception, request: Request, correlation_id: str
    ) -> ProblemDetails:
        if isinstance(exc, HTTPException):
            return ProblemDetails(
                type="about:blank",
                title=get_status_text(exc.status_code),
                status=exc.status_code,
                detail=exc.detail if isinstance(exc.detail, str) else str(exc.detail),
                instance=request.url.path,
                correlation_id=correlation_id,
            )

        if isinstance(exc, ValueError):
            return ProblemDetails(
                type="https://httpstatuses.com/400",
                title="Bad Request",
                status=status.HTTP_400_BAD_REQUEST,
                detail=str(exc),
                instance=request.url.path,
                correlation_id=correlation_id,
            )

        return ProblemDetails(
            type="https://httpstatuses.com/500",
            title="Internal Server Error",
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred",
            instance=request.url.path,
            correlation_id=correlation_id,
        )

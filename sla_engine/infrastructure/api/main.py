"""
FastAPI application entry point.

Composition root for the SLA engine: builds the SlaTracker, wires it into the
SLA tracking middleware and the routes, and ties its lifecycle to the app.
"""

import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException

from sla_engine.domain.repositories.metrics_sink import MetricsSinkInterface
from sla_engine.infrastructure.api.middleware import (
    ErrorHandlerMiddleware,
    LoggingMiddleware,
    MetricsMiddleware,
    SlaTrackingMiddleware,
    problem_response,
)
from sla_engine.infrastructure.api.routes import health, sla
from sla_engine.infrastructure.api.schemas.error_schema import (
    ProblemDetails,
    get_status_text,
)
from sla_engine.infrastructure.config.settings import Settings, get_settings
from sla_engine.infrastructure.observability import (
    configure_logging,
    instrument_fastapi_app,
    setup_tracing,
)
from sla_engine.infrastructure.tasks.sla_tracker import build_sla_tracker


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    Startup:
    - Configure observability (logging, tracing)
    - Instrument FastAPI with OpenTelemetry
    - Start the SLA tracker's recompute loop

    Shutdown:
    - Stop the SLA tracker
    """
    settings: Settings = app.state.settings

    configure_logging(settings)
    setup_tracing(settings)
    instrument_fastapi_app(app, settings)

    tracker = app.state.sla_tracker
    await tracker.start()

    yield

    await tracker.stop()


def _correlation_id(request: Request) -> str:
    return getattr(request.state, "correlation_id", None) or str(uuid.uuid4())


def create_app(
    settings: Settings | None = None,
    metrics_sink: MetricsSinkInterface | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Application settings (defaults to get_settings())
        metrics_sink: Sink for per-tier SLA snapshots (defaults to Prometheus)

    Returns:
        FastAPI: Configured FastAPI application instance

    Raises:
        ValueError: If the SLA configuration is invalid
    """
    settings = settings or get_settings()
    tracker = build_sla_tracker(settings, metrics_sink=metrics_sink)

    app = FastAPI(
        title="SLA Engine API",
        description=(
            "Tracks request availability and latency against gold, silver and "
            "bronze SLA tiers and reports error budget consumption."
        ),
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    app.state.settings = settings
    app.state.sla_tracker = tracker

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Order matters: last added = first executed
    app.add_middleware(SlaTrackingMiddleware, tracker=tracker)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)  # Outermost: catches all errors

    app.include_router(health.router, prefix="/api/v1")
    app.include_router(sla.router, prefix="/api/v1", tags=["SLA"])

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Convert HTTPException to RFC 7807 Problem Details."""
        return problem_response(
            ProblemDetails(
                type="about:blank",
                title=get_status_text(exc.status_code),
                status=exc.status_code,
                detail=exc.detail if isinstance(exc.detail, str) else str(exc.detail),
                instance=request.url.path,
                correlation_id=_correlation_id(request),
            )
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Convert Pydantic validation errors to RFC 7807 Problem Details."""
        return problem_response(
            ProblemDetails(
                type="about:blank",
                title="Unprocessable Entity",
                status=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"Validation failed: {exc.errors()}",
                instance=request.url.path,
                correlation_id=_correlation_id(request),
            )
        )

    @app.get("/", status_code=status.HTTP_200_OK)
    async def root():
        """Root endpoint - API information."""
        return {
            "name": "SLA Engine API",
            "version": "0.1.0",
            "status": "operational",
            "docs": "/docs",
        }

    return app


app = create_app()

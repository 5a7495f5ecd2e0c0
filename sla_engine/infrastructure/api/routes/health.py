"""
Health check endpoints.

Provides liveness and readiness checks for Kubernetes, a detailed
health report driven by SLA error budgets, and the Prometheus metrics endpoint.
"""

from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from sla_engine.infrastructure.api.dependencies import get_sla_tracker
from sla_engine.infrastructure.api.schemas.sla_schema import (
    HealthDetailsApiResponse,
    SlaHealthApiModel,
    SlaSummaryApiResponse,
    TierMetricsApiModel,
)
from sla_engine.infrastructure.config.settings import Settings
from sla_engine.infrastructure.observability.metrics import get_metrics_content
from sla_engine.infrastructure.tasks.sla_tracker import SlaTracker

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    summary="Liveness check",
    description="Check if the service is alive",
    tags=["Health"],
)
async def liveness(request: Request) -> dict:
    """
    Liveness check - check if the process is running.

    This endpoint always returns 200 if the process is alive.
    """
    return {
        "status": "healthy",
        "service": request.app.state.settings.observability.service_name,
    }


@router.get(
    "/health/ready",
    status_code=status.HTTP_200_OK,
    summary="Readiness check",
    description="Check if the service is ready to accept traffic",
    tags=["Health"],
    responses={
        200: {"description": "Service is ready"},
        503: {"description": "SLA tracker is not running"},
    },
)
async def readiness(
    tracker: SlaTracker = Depends(get_sla_tracker),
) -> JSONResponse:
    """
    Readiness check - ready once the SLA tracker's recompute loop is running.
    """
    checks = {"sla_tracker": "running" if tracker.running else "stopped"}

    if tracker.running:
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content={"status": "ready", "checks": checks},
        )
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not_ready", "checks": checks},
    )


@router.get(
    "/health/details",
    response_model=HealthDetailsApiResponse,
    summary="Detailed health",
    description="SLA metrics and error budget state; 503 while any budget is critical",
    tags=["Health"],
    responses={
        200: {"description": "All error budgets above their critical thresholds"},
        503: {"description": "At least one tier's error budget is critical"},
    },
)
async def health_details(
    request: Request,
    tracker: SlaTracker = Depends(get_sla_tracker),
) -> JSONResponse:
    """
    Detailed health - degraded while any tier's error budget is critical.
    """
    settings: Settings = request.app.state.settings
    critical = {tier.value: flag for tier, flag in tracker.is_error_budget_critical().items()}
    critical_tiers = [tier for tier, flag in critical.items() if flag]

    if critical_tiers:
        logger.warning("SLA error budget critical", tiers=critical_tiers)

    report = HealthDetailsApiResponse(
        status="degraded" if critical_tiers else "healthy",
        timestamp=datetime.now(timezone.utc),
        environment=settings.environment,
        service=settings.observability.service_name,
        sla=SlaHealthApiModel(
            metrics={
                tier.value: TierMetricsApiModel.from_metrics(tier_metrics)
                for tier, tier_metrics in tracker.get_all_metrics().items()
            },
            summary=SlaSummaryApiResponse.from_dto(tracker.get_summary()),
            critical_budgets=critical,
        ),
        features={"tracing_enabled": settings.observability.tracing_enabled},
    )

    return JSONResponse(
        status_code=(
            status.HTTP_503_SERVICE_UNAVAILABLE if critical_tiers else status.HTTP_200_OK
        ),
        content=report.model_dump(mode="json"),
    )


@router.get(
    "/metrics",
    status_code=status.HTTP_200_OK,
    summary="Prometheus metrics",
    description="Export Prometheus metrics in exposition format",
    tags=["Observability"],
    response_class=Response,
)
async def metrics() -> Response:
    """
    Prometheus metrics endpoint.

    Metrics include:
    - Per-tier availability, error budget and burn rate gauges
    - HTTP request counts and durations
    - SLA recompute runs and durations
    """
    metrics_bytes, content_type = get_metrics_content()

    return Response(
        content=metrics_bytes,
        media_type=content_type,
    )

"""SLA status API routes.

Read-only views over the tracker: raw per-tier metrics, the tier summary,
and error budget critical flags.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Path, status

from sla_engine.application.use_cases.get_sla_status import parse_tier
from sla_engine.domain.entities.sla import SlaTier
from sla_engine.infrastructure.api.dependencies import get_sla_tracker
from sla_engine.infrastructure.api.schemas.error_schema import ProblemDetails
from sla_engine.infrastructure.api.schemas.sla_schema import (
    SlaStatusApiResponse,
    SlaSummaryApiResponse,
    TierMetricsApiModel,
    TierStatusApiResponse,
)
from sla_engine.infrastructure.tasks.sla_tracker import SlaTracker

router = APIRouter()

INVALID_TIER_DETAIL = "Invalid SLA tier. Must be one of: " + ", ".join(
    tier.value for tier in SlaTier
)


@router.get(
    "/sla",
    response_model=SlaStatusApiResponse,
    status_code=status.HTTP_200_OK,
    summary="Get SLA status for all tiers",
)
async def get_sla_status(
    tracker: SlaTracker = Depends(get_sla_tracker),
) -> SlaStatusApiResponse:
    """Raw metrics, summary and critical flags for every tier."""
    metrics = tracker.get_all_metrics()
    critical = tracker.is_error_budget_critical()

    return SlaStatusApiResponse(
        timestamp=datetime.now(timezone.utc),
        sla_tiers={
            tier.value: TierMetricsApiModel.from_metrics(tier_metrics)
            for tier, tier_metrics in metrics.items()
        },
        summary=SlaSummaryApiResponse.from_dto(tracker.get_summary()),
        critical={tier.value: flag for tier, flag in critical.items()},
    )


@router.get(
    "/sla/summary",
    response_model=SlaSummaryApiResponse,
    status_code=status.HTTP_200_OK,
    summary="Get SLA summary",
)
async def get_sla_summary(
    tracker: SlaTracker = Depends(get_sla_tracker),
) -> SlaSummaryApiResponse:
    return SlaSummaryApiResponse.from_dto(tracker.get_summary())


@router.get(
    "/sla/critical",
    response_model=dict[str, bool],
    status_code=status.HTTP_200_OK,
    summary="Get error budget critical flags",
)
async def get_critical_tiers(
    tracker: SlaTracker = Depends(get_sla_tracker),
) -> dict[str, bool]:
    """Tier -> whether its error budget is below the critical threshold."""
    return {
        tier.value: flag for tier, flag in tracker.is_error_budget_critical().items()
    }


@router.get(
    "/sla/{tier}",
    response_model=TierStatusApiResponse,
    status_code=status.HTTP_200_OK,
    summary="Get SLA status for one tier",
    responses={
        400: {"model": ProblemDetails, "description": "Unknown SLA tier"},
    },
)
async def get_tier_status(
    tier: str = Path(..., description="SLA tier: gold, silver, bronze"),
    tracker: SlaTracker = Depends(get_sla_tracker),
) -> TierStatusApiResponse:
    sla_tier = parse_tier(tier)
    if sla_tier is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=INVALID_TIER_DETAIL,
        )

    return TierStatusApiResponse(
        timestamp=datetime.now(timezone.utc),
        tier=sla_tier.value,
        metrics=TierMetricsApiModel.from_metrics(tracker.get_metrics(sla_tier)),
        error_budget_critical=tracker.is_tier_error_budget_critical(sla_tier),
    )

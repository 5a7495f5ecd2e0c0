"""
Pydantic schemas for SLA status API endpoints.

These schemas define the API response contracts. They are separate from the
application layer DTOs (which use dataclasses). Ratios are 0.0-1.0 and times
are in seconds.
"""

from dataclasses import asdict
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from sla_engine.application.dtos.sla_status_dto import SlaSummaryDTO, TierSummaryDTO
from sla_engine.domain.entities.sla import SlaMetrics


class TierMetricsApiModel(BaseModel):
    """Raw SLA metrics for a tier."""

    tier: str = Field(..., description="SLA tier: gold, silver, bronze")
    current_availability: float = Field(..., ge=0.0, le=1.0)
    current_response_time: float = Field(..., ge=0.0, description="Mean response time (s)")
    error_budget_remaining: float = Field(..., ge=0.0, le=1.0)
    error_budget_burn_rate: float = Field(..., ge=0.0)
    last_update: datetime
    total_requests: int = Field(..., ge=0)
    successful_requests: int = Field(..., ge=0)
    failed_requests: int = Field(..., ge=0)
    sample_count: int = Field(..., ge=0, description="Buffered response-time samples")

    @classmethod
    def from_metrics(cls, metrics: SlaMetrics) -> "TierMetricsApiModel":
        return cls(
            tier=metrics.tier.value,
            current_availability=metrics.current_availability,
            current_response_time=metrics.current_response_time,
            error_budget_remaining=metrics.error_budget_remaining,
            error_budget_burn_rate=metrics.error_budget_burn_rate,
            last_update=metrics.last_update,
            total_requests=metrics.total_requests,
            successful_requests=metrics.successful_requests,
            failed_requests=metrics.failed_requests,
            sample_count=len(metrics.response_times),
        )


class IndicatorStatusApiModel(BaseModel):
    """An indicator compared against its target."""

    current: float
    target: float
    status: str = Field(..., description="healthy, warning, or critical")


class ErrorBudgetStatusApiModel(BaseModel):
    """Error budget state for a tier."""

    remaining: float = Field(..., ge=0.0, le=1.0)
    burn_rate: float = Field(..., ge=0.0)
    status: str = Field(..., description="healthy, warning, or critical")


class RequestCountsApiModel(BaseModel):
    """Request counters for a tier."""

    total: int = Field(..., ge=0)
    successful: int = Field(..., ge=0)
    failed: int = Field(..., ge=0)


class TierSummaryApiModel(BaseModel):
    """Summary of one tier's SLA performance."""

    availability: IndicatorStatusApiModel
    response_time: IndicatorStatusApiModel
    error_budget: ErrorBudgetStatusApiModel
    requests: RequestCountsApiModel

    @classmethod
    def from_dto(cls, dto: TierSummaryDTO) -> "TierSummaryApiModel":
        return cls(
            availability=IndicatorStatusApiModel(**asdict(dto.availability)),
            response_time=IndicatorStatusApiModel(**asdict(dto.response_time)),
            error_budget=ErrorBudgetStatusApiModel(**asdict(dto.error_budget)),
            requests=RequestCountsApiModel(**asdict(dto.requests)),
        )


class SlaSummaryApiResponse(BaseModel):
    """Summary of SLA performance across all tiers."""

    service: str
    last_updated: str = Field(..., description="ISO 8601 time of the latest recorded request")
    tiers: dict[str, TierSummaryApiModel]

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "service": "sla-engine",
                "last_updated": "2026-01-01T12:00:00+00:00",
                "tiers": {
                    "gold": {
                        "availability": {"current": 0.997, "target": 0.995, "status": "healthy"},
                        "response_time": {"current": 0.12, "target": 0.2, "status": "healthy"},
                        "error_budget": {"remaining": 1.0, "burn_rate": 0.6, "status": "healthy"},
                        "requests": {"total": 1000, "successful": 997, "failed": 3},
                    }
                },
            }
        }
    )

    @classmethod
    def from_dto(cls, dto: SlaSummaryDTO) -> "SlaSummaryApiResponse":
        return cls(
            service=dto.service,
            last_updated=dto.last_updated,
            tiers={name: TierSummaryApiModel.from_dto(tier) for name, tier in dto.tiers.items()},
        )


class SlaStatusApiResponse(BaseModel):
    """SLA status for all tiers."""

    status: str = "success"
    timestamp: datetime
    sla_tiers: dict[str, TierMetricsApiModel]
    summary: SlaSummaryApiResponse
    critical: dict[str, bool] = Field(
        ..., description="Tier -> error budget below critical threshold"
    )


class TierStatusApiResponse(BaseModel):
    """SLA status for a single tier."""

    status: str = "success"
    timestamp: datetime
    tier: str
    metrics: TierMetricsApiModel
    error_budget_critical: bool


class SlaHealthApiModel(BaseModel):
    """SLA section of the detailed health report."""

    metrics: dict[str, TierMetricsApiModel]
    summary: SlaSummaryApiResponse
    critical_budgets: dict[str, bool]


class HealthDetailsApiResponse(BaseModel):
    """Detailed health report; degraded while any error budget is critical."""

    status: str = Field(..., description="healthy or degraded")
    timestamp: datetime
    environment: str
    service: str
    sla: SlaHealthApiModel
    features: dict[str, bool]

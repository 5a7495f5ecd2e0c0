"""Application layer DTOs.

This package contains data transfer objects (DTOs) for the application layer.
Uses dataclasses (not Pydantic) per Clean Architecture principles.
"""

from sla_engine.application.dtos.sla_status_dto import (
    ErrorBudgetStatusDTO,
    IndicatorStatusDTO,
    RequestCountsDTO,
    SlaSummaryDTO,
    TierSummaryDTO,
)

__all__ = [
    "IndicatorStatusDTO",
    "ErrorBudgetStatusDTO",
    "RequestCountsDTO",
    "TierSummaryDTO",
    "SlaSummaryDTO",
]

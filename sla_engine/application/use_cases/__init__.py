"""Use cases - Application-specific business rules.

This package contains use cases that orchestrate domain logic
and implement application-specific workflows.
"""

from sla_engine.application.use_cases.get_sla_status import (
    GetSlaStatusUseCase,
    parse_tier,
)
from sla_engine.application.use_cases.recompute_sla_metrics import (
    RecomputeSlaMetricsUseCase,
)
from sla_engine.application.use_cases.record_request import RecordRequestUseCase

__all__ = [
    "RecordRequestUseCase",
    "RecomputeSlaMetricsUseCase",
    "GetSlaStatusUseCase",
    "parse_tier",
]

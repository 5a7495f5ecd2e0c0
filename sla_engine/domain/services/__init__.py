"""Domain services - Business logic that doesn't fit in entities."""

from sla_engine.domain.services.sla_metrics_calculator import (
    DerivedSlaMetrics,
    SlaCountersSnapshot,
    SlaMetricsCalculator,
)
from sla_engine.domain.services.sla_status_classifier import SlaStatusClassifier
from sla_engine.domain.services.tier_classifier import TierClassifier, TierThresholds

__all__ = [
    "TierClassifier",
    "TierThresholds",
    "SlaMetricsCalculator",
    "SlaCountersSnapshot",
    "DerivedSlaMetrics",
    "SlaStatusClassifier",
]

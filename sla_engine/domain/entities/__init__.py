"""Domain entities - Core business objects."""

from sla_engine.domain.entities.sla import (
    DEFAULT_SAMPLE_WINDOW,
    HealthStatus,
    SlaConfiguration,
    SlaMetrics,
    SlaTier,
    default_configurations,
)

__all__ = [
    "DEFAULT_SAMPLE_WINDOW",
    "HealthStatus",
    "SlaConfiguration",
    "SlaMetrics",
    "SlaTier",
    "default_configurations",
]

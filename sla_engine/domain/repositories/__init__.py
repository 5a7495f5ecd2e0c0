"""Repository and collaborator interfaces."""

from sla_engine.domain.repositories.metrics_sink import MetricsSinkInterface

__all__ = [
    "MetricsSinkInterface",
]

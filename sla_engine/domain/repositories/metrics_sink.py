"""Interface for exporting SLA metrics.

This interface abstracts the metrics backend (Prometheus, StatsD, etc.)
allowing the domain layer to remain independent of specific exporters.
"""

from abc import ABC, abstractmethod


class MetricsSinkInterface(ABC):
    """Receives one SLA snapshot per tier on every recompute pass."""

    @abstractmethod
    def update_sla_metrics(
        self,
        service: str,
        tier: str,
        availability: float,
        error_budget_remaining: float,
        burn_rate: float,
    ) -> None:
        """Publish the current SLA indicators for a tier.

        Args:
            service: Name of the service being tracked
            tier: SLA tier name (gold, silver, bronze)
            availability: Current availability ratio (0.0-1.0)
            error_budget_remaining: Remaining error budget fraction (0.0-1.0)
            burn_rate: Error budget burn rate (>= 0.0)
        """
        pass

"""Use case for querying current SLA state.

All results are built from deep copies of the tier metrics, so callers can
neither observe nor corrupt the tracker's internal state.
"""

from collections.abc import Mapping

from sla_engine.application.dtos.sla_status_dto import (
    ErrorBudgetStatusDTO,
    IndicatorStatusDTO,
    RequestCountsDTO,
    SlaSummaryDTO,
    TierSummaryDTO,
)
from sla_engine.domain.entities.sla import SlaConfiguration, SlaMetrics, SlaTier
from sla_engine.domain.services.sla_status_classifier import SlaStatusClassifier
from sla_engine.infrastructure.stores.sla_metrics_store import InMemorySlaMetricsStore


def parse_tier(tier: SlaTier | str) -> SlaTier | None:
    """Resolve a tier name (case-insensitive) or enum member.

    Returns:
        SlaTier, or None if the name is not a known tier
    """
    if isinstance(tier, SlaTier):
        return tier
    try:
        return SlaTier(str(tier).strip().lower())
    except ValueError:
        return None


class GetSlaStatusUseCase:
    """Read-only accessors for SLA metrics, summaries and critical flags."""

    def __init__(
        self,
        metrics_store: InMemorySlaMetricsStore,
        configurations: Mapping[SlaTier, SlaConfiguration],
        status_classifier: SlaStatusClassifier,
        service_name: str,
    ) -> None:
        """Initialize use case with injected dependencies.

        Args:
            metrics_store: Per-tier metrics state
            configurations: Tier targets
            status_classifier: Indicator health classification
            service_name: Name of the tracked service
        """
        self._store = metrics_store
        self._configurations = configurations
        self._status = status_classifier
        self._service_name = service_name

    def get_metrics(self, tier: SlaTier | str) -> SlaMetrics | None:
        """Get a copy of one tier's metrics.

        Args:
            tier: Tier enum member or name

        Returns:
            SlaMetrics copy, or None if the tier is unknown
        """
        resolved = parse_tier(tier)
        if resolved is None:
            return None
        return self._store.snapshot(resolved)

    def get_all_metrics(self) -> dict[SlaTier, SlaMetrics]:
        """Get copies of every tier's metrics."""
        return self._store.snapshot_all()

    def get_summary(self) -> SlaSummaryDTO:
        """Summarize SLA performance for every tier.

        The summary depends only on tracker state, so two calls with no
        recording or recompute in between compare equal.

        Returns:
            SlaSummaryDTO keyed by tier name
        """
        snapshots = self._store.snapshot_all()
        tiers = {
            tier.value: self._summarize_tier(metrics, self._configurations[tier])
            for tier, metrics in snapshots.items()
        }
        last_updated = max(metrics.last_update for metrics in snapshots.values())

        return SlaSummaryDTO(
            service=self._service_name,
            last_updated=last_updated.isoformat(),
            tiers=tiers,
        )

    def is_error_budget_critical(self) -> dict[SlaTier, bool]:
        """Check every tier's remaining budget against its critical threshold."""
        return {
            tier: self._status.is_error_budget_critical(
                metrics.error_budget_remaining, self._configurations[tier]
            )
            for tier, metrics in self._store.snapshot_all().items()
        }

    def is_tier_error_budget_critical(self, tier: SlaTier | str) -> bool:
        """Check one tier's remaining budget against its critical threshold.

        Raises:
            ValueError: If the tier name is unknown
        """
        resolved = parse_tier(tier)
        if resolved is None:
            raise ValueError(f"Unknown SLA tier: {tier!r}")
        metrics = self._store.snapshot(resolved)
        return self._status.is_error_budget_critical(
            metrics.error_budget_remaining, self._configurations[resolved]
        )

    def _summarize_tier(
        self, metrics: SlaMetrics, configuration: SlaConfiguration
    ) -> TierSummaryDTO:
        return TierSummaryDTO(
            availability=IndicatorStatusDTO(
                current=metrics.current_availability,
                target=configuration.availability_target,
                status=self._status.availability_status(
                    metrics.current_availability, configuration.availability_target
                ).value,
            ),
            response_time=IndicatorStatusDTO(
                current=metrics.current_response_time,
                target=configuration.response_time_target,
                status=self._status.response_time_status(
                    metrics.current_response_time, configuration.response_time_target
                ).value,
            ),
            error_budget=ErrorBudgetStatusDTO(
                remaining=metrics.error_budget_remaining,
                burn_rate=metrics.error_budget_burn_rate,
                status=self._status.error_budget_status(
                    metrics.error_budget_remaining, configuration
                ).value,
            ),
            requests=RequestCountsDTO(
                total=metrics.total_requests,
                successful=metrics.successful_requests,
                failed=metrics.failed_requests,
            ),
        )

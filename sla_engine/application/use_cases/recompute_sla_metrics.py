"""Use case for periodically recomputing derived SLA metrics."""

import time
from collections.abc import Mapping

import structlog

from sla_engine.domain.entities.sla import SlaConfiguration, SlaMetrics, SlaTier
from sla_engine.domain.repositories.metrics_sink import MetricsSinkInterface
from sla_engine.domain.services.sla_metrics_calculator import SlaMetricsCalculator
from sla_engine.infrastructure.observability.metrics import record_sla_recompute_run
from sla_engine.infrastructure.stores.sla_metrics_store import InMemorySlaMetricsStore

logger = structlog.get_logger(__name__)


class RecomputeSlaMetricsUseCase:
    """Recompute availability, error budget and burn rate for every tier.

    For each tier:
    1. Copy counters and samples under the tier lock
    2. Compute derived indicators outside the lock
    3. Write the indicators back under the lock
    4. Export one snapshot to the metrics sink

    Export failures are logged per tier and do not abort the pass.
    """

    def __init__(
        self,
        metrics_store: InMemorySlaMetricsStore,
        configurations: Mapping[SlaTier, SlaConfiguration],
        metrics_calculator: SlaMetricsCalculator,
        metrics_sink: MetricsSinkInterface,
        service_name: str,
    ) -> None:
        """Initialize use case with injected dependencies.

        Args:
            metrics_store: Per-tier metrics state
            configurations: Tier targets
            metrics_calculator: Derived indicator computation
            metrics_sink: Destination for per-tier snapshots
            service_name: Service label attached to exported metrics
        """
        self._store = metrics_store
        self._configurations = configurations
        self._calculator = metrics_calculator
        self._sink = metrics_sink
        self._service_name = service_name

    def execute(self) -> dict[SlaTier, SlaMetrics]:
        """Run one recompute pass over all tiers.

        Returns:
            Copies of each tier's metrics after the update
        """
        start_time = time.perf_counter()
        status = "failure"
        results: dict[SlaTier, SlaMetrics] = {}

        try:
            for tier in SlaTier:
                results[tier] = self._recompute_tier(tier)
            status = "success"
        finally:
            record_sla_recompute_run(status, time.perf_counter() - start_time)

        return results

    def _recompute_tier(self, tier: SlaTier) -> SlaMetrics:
        configuration = self._configurations[tier]

        counters = self._store.read_counters(tier)
        derived = self._calculator.compute(counters, configuration)
        updated = self._store.apply_derived(tier, derived)

        try:
            self._sink.update_sla_metrics(
                service=self._service_name,
                tier=tier.value,
                availability=derived.availability,
                error_budget_remaining=derived.error_budget_remaining,
                burn_rate=derived.burn_rate,
            )
        except Exception:
            logger.exception("Failed to export SLA metrics", tier=tier.value)

        logger.debug(
            "Updated SLA metrics",
            tier=tier.value,
            availability=derived.availability,
            response_time=derived.response_time,
            error_budget=derived.error_budget_remaining,
            burn_rate=derived.burn_rate,
        )
        return updated

"""In-memory per-tier SLA metrics store.

State lives only in process memory and resets on restart. Each tier has its
own lock; tiers never need cross-tier coordination, so recording into one
tier never waits on another.
"""

import threading
from datetime import datetime, timezone

from sla_engine.domain.entities.sla import DEFAULT_SAMPLE_WINDOW, SlaMetrics, SlaTier
from sla_engine.domain.services.sla_metrics_calculator import (
    DerivedSlaMetrics,
    SlaCountersSnapshot,
)


class _TierSlot:
    """Metrics for one tier guarded by that tier's lock."""

    __slots__ = ("lock", "metrics")

    def __init__(self, tier: SlaTier, sample_window: int) -> None:
        self.lock = threading.Lock()
        self.metrics = SlaMetrics.initial(tier, sample_window)


class InMemorySlaMetricsStore:
    """Thread-safe store of SlaMetrics for every tier.

    The tier -> slot mapping is built once here and never mutated, so
    looking up a slot needs no lock. All reads and writes of a tier's
    metrics happen under that tier's lock and cost O(1), except snapshots,
    which copy the sample buffer.
    """

    def __init__(self, sample_window: int = DEFAULT_SAMPLE_WINDOW) -> None:
        self._sample_window = sample_window
        self._slots: dict[SlaTier, _TierSlot] = {
            tier: _TierSlot(tier, sample_window) for tier in SlaTier
        }

    @property
    def sample_window(self) -> int:
        """Maximum samples retained per tier."""
        return self._sample_window

    def append(
        self,
        tier: SlaTier,
        success: bool,
        response_time: float | None,
        recorded_at: datetime | None = None,
    ) -> None:
        """Record one request outcome for a tier.

        Args:
            tier: Tier the request was classified into
            success: Whether the request succeeded
            response_time: Latency sample in seconds, or None to count the
                request without adding a sample
            recorded_at: Timestamp for last_update (defaults to now, UTC)
        """
        recorded_at = recorded_at or datetime.now(timezone.utc)
        slot = self._slots[tier]
        with slot.lock:
            metrics = slot.metrics
            metrics.total_requests += 1
            if success:
                metrics.successful_requests += 1
            else:
                metrics.failed_requests += 1
            if response_time is not None:
                # deque(maxlen) evicts the oldest sample on overflow
                metrics.response_times.append(response_time)
            metrics.last_update = recorded_at

    def read_counters(self, tier: SlaTier) -> SlaCountersSnapshot:
        """Copy a tier's counters and samples under its lock.

        Args:
            tier: Tier to read

        Returns:
            Immutable snapshot suitable for computing outside the lock
        """
        slot = self._slots[tier]
        with slot.lock:
            metrics = slot.metrics
            return SlaCountersSnapshot(
                total_requests=metrics.total_requests,
                successful_requests=metrics.successful_requests,
                failed_requests=metrics.failed_requests,
                response_times=tuple(metrics.response_times),
                previous_availability=metrics.current_availability,
            )

    def apply_derived(self, tier: SlaTier, derived: DerivedSlaMetrics) -> SlaMetrics:
        """Store freshly computed indicators for a tier.

        Args:
            tier: Tier to update
            derived: Indicators from the latest recompute pass

        Returns:
            Copy of the tier's metrics after the update
        """
        slot = self._slots[tier]
        with slot.lock:
            metrics = slot.metrics
            metrics.current_availability = derived.availability
            metrics.current_response_time = derived.response_time
            metrics.error_budget_remaining = derived.error_budget_remaining
            metrics.error_budget_burn_rate = derived.burn_rate
            return metrics.copy()

    def snapshot(self, tier: SlaTier) -> SlaMetrics:
        """Return a deep copy of a tier's metrics."""
        slot = self._slots[tier]
        with slot.lock:
            return slot.metrics.copy()

    def snapshot_all(self) -> dict[SlaTier, SlaMetrics]:
        """Return deep copies of every tier's metrics, in tier order."""
        return {tier: self.snapshot(tier) for tier in SlaTier}

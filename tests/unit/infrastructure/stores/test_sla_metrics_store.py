"""Unit tests for InMemorySlaMetricsStore."""

from datetime import datetime, timezone

import pytest

from sla_engine.domain.entities.sla import SlaTier
from sla_engine.domain.services.sla_metrics_calculator import DerivedSlaMetrics
from sla_engine.infrastructure.stores.sla_metrics_store import InMemorySlaMetricsStore


class TestInMemorySlaMetricsStore:
    """Tests for per-tier metrics state."""

    @pytest.fixture
    def store(self):
        return InMemorySlaMetricsStore(sample_window=3)

    def test_append_updates_counters(self, store):
        recorded_at = datetime(2026, 1, 1, tzinfo=timezone.utc)

        store.append(SlaTier.GOLD, success=True, response_time=0.1, recorded_at=recorded_at)
        store.append(SlaTier.GOLD, success=False, response_time=0.15)

        metrics = store.snapshot(SlaTier.GOLD)
        assert metrics.total_requests == 2
        assert metrics.successful_requests == 1
        assert metrics.failed_requests == 1
        assert list(metrics.response_times) == [0.1, 0.15]
        assert metrics.last_update > recorded_at

    def test_append_without_sample(self, store):
        store.append(SlaTier.BRONZE, success=True, response_time=None)

        metrics = store.snapshot(SlaTier.BRONZE)
        assert metrics.total_requests == 1
        assert len(metrics.response_times) == 0

    def test_sample_window_evicts_oldest(self, store):
        for value in (0.1, 0.2, 0.3, 0.4):
            store.append(SlaTier.SILVER, success=True, response_time=value)

        snapshot = store.read_counters(SlaTier.SILVER)
        assert snapshot.response_times == (0.2, 0.3, 0.4)
        assert snapshot.total_requests == 4

    def test_tiers_are_isolated(self, store):
        store.append(SlaTier.GOLD, success=True, response_time=0.1)

        assert store.snapshot(SlaTier.SILVER).total_requests == 0
        assert store.snapshot(SlaTier.BRONZE).total_requests == 0

    def test_apply_derived(self, store):
        updated = store.apply_derived(
            SlaTier.GOLD,
            DerivedSlaMetrics(
                availability=0.9, response_time=0.1, error_budget_remaining=0.0, burn_rate=20.0
            ),
        )

        assert updated.current_availability == 0.9
        assert store.read_counters(SlaTier.GOLD).previous_availability == 0.9

    def test_snapshot_is_independent_copy(self, store):
        store.append(SlaTier.GOLD, success=True, response_time=0.1)

        snapshot = store.snapshot(SlaTier.GOLD)
        snapshot.total_requests = 100
        snapshot.response_times.append(9.9)

        fresh = store.snapshot(SlaTier.GOLD)
        assert fresh.total_requests == 1
        assert list(fresh.response_times) == [0.1]

    def test_snapshot_all_covers_every_tier(self, store):
        assert list(store.snapshot_all()) == list(SlaTier)

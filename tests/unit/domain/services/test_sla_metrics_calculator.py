"""Unit tests for SlaMetricsCalculator service."""

import math
import random

import pytest

from sla_engine.domain.entities.sla import SlaConfiguration, SlaTier
from sla_engine.domain.services.sla_metrics_calculator import (
    SlaCountersSnapshot,
    SlaMetricsCalculator,
)


class TestSlaMetricsCalculator:
    """Tests for derived SLA indicator computation."""

    @pytest.fixture
    def calculator(self):
        return SlaMetricsCalculator()

    @pytest.fixture
    def silver_config(self):
        return SlaConfiguration(
            tier=SlaTier.SILVER, availability_target=0.99, response_time_target=1.0
        )

    def test_burn_rate_example(self, calculator):
        """2 failures in 100 requests against a 1% allowance burns at 2x."""
        burn_rate = calculator.compute_burn_rate(
            failed_requests=2, total_requests=100, availability_target=0.99
        )

        assert burn_rate == pytest.approx(2.0)

    def test_burn_rate_without_requests(self, calculator):
        assert calculator.compute_burn_rate(0, 0, 0.99) == 0.0

    def test_burn_rate_with_full_availability_target(self, calculator):
        assert calculator.compute_burn_rate(5, 10, 1.0) == 0.0

    def test_error_budget_untouched_at_target(self, calculator):
        assert calculator.compute_error_budget_remaining(0.995, 0.995) == pytest.approx(1.0)

    def test_error_budget_exhausted_when_gap_equals_allowance(self, calculator):
        remaining = calculator.compute_error_budget_remaining(0.99, 0.995)

        assert remaining == pytest.approx(0.0, abs=1e-9)

    def test_error_budget_clamped_above_target(self, calculator):
        assert calculator.compute_error_budget_remaining(1.0, 0.99) == 1.0

    def test_error_budget_clamped_below_zero(self, calculator):
        assert calculator.compute_error_budget_remaining(0.5, 0.99) == 0.0

    def test_error_budget_full_target(self, calculator):
        assert calculator.compute_error_budget_remaining(0.5, 1.0) == 1.0

    def test_availability_keeps_previous_without_requests(self, calculator):
        assert calculator.compute_availability(0, 0, previous_availability=0.97) == 0.97

    def test_availability_ratio(self, calculator):
        assert calculator.compute_availability(97, 100) == pytest.approx(0.97)

    def test_mean_response_time(self, calculator):
        assert calculator.compute_mean_response_time([0.1, 0.2, 0.3]) == pytest.approx(0.2)
        assert calculator.compute_mean_response_time([]) == 0.0

    def test_compute_all_indicators(self, calculator, silver_config):
        counters = SlaCountersSnapshot(
            total_requests=100,
            successful_requests=98,
            failed_requests=2,
            response_times=(0.5, 0.7),
        )

        derived = calculator.compute(counters, silver_config)

        assert derived.availability == pytest.approx(0.98)
        assert derived.response_time == pytest.approx(0.6)
        assert derived.error_budget_remaining == pytest.approx(0.0, abs=1e-9)
        assert derived.burn_rate == pytest.approx(2.0)

    def test_results_bounded_for_random_inputs(self, calculator, silver_config):
        """Availability and remaining budget stay in [0, 1] for any counters."""
        rng = random.Random(42)
        for _ in range(500):
            total = rng.randint(0, 1000)
            successful = rng.randint(0, total)
            counters = SlaCountersSnapshot(
                total_requests=total,
                successful_requests=successful,
                failed_requests=total - successful,
                response_times=tuple(rng.uniform(0, 5) for _ in range(rng.randint(0, 5))),
            )

            derived = calculator.compute(counters, silver_config)

            assert 0.0 <= derived.availability <= 1.0
            assert 0.0 <= derived.error_budget_remaining <= 1.0
            assert derived.burn_rate >= 0.0
            assert math.isfinite(derived.response_time)

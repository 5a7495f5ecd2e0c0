"""Unit tests for SLA domain entities."""

from datetime import timedelta

import pytest

from sla_engine.domain.entities.sla import (
    DEFAULT_SAMPLE_WINDOW,
    SlaConfiguration,
    SlaMetrics,
    SlaTier,
    default_configurations,
)


class TestSlaTier:
    """Tests for SlaTier enum."""

    def test_tier_values(self):
        assert SlaTier.GOLD.value == "gold"
        assert SlaTier.SILVER.value == "silver"
        assert SlaTier.BRONZE.value == "bronze"

    def test_iteration_order_is_fastest_first(self):
        assert list(SlaTier) == [SlaTier.GOLD, SlaTier.SILVER, SlaTier.BRONZE]


class TestSlaConfiguration:
    """Tests for SlaConfiguration entity."""

    def test_create_valid_configuration(self):
        config = SlaConfiguration(
            tier=SlaTier.GOLD,
            availability_target=0.995,
            response_time_target=0.2,
        )

        assert config.error_budget_period == timedelta(days=30)
        assert config.alert_threshold == 0.2
        assert config.critical_threshold == 0.1
        assert config.allowable_error_rate == pytest.approx(0.005)

    def test_configuration_is_immutable(self):
        config = SlaConfiguration(
            tier=SlaTier.GOLD, availability_target=0.995, response_time_target=0.2
        )

        with pytest.raises(AttributeError):
            config.availability_target = 0.9  # type: ignore[misc]

    @pytest.mark.parametrize("target", [0.0, -0.1, 1.01])
    def test_availability_target_out_of_range(self, target):
        with pytest.raises(ValueError, match="availability_target"):
            SlaConfiguration(
                tier=SlaTier.GOLD, availability_target=target, response_time_target=0.2
            )

    def test_full_availability_target_allowed(self):
        config = SlaConfiguration(
            tier=SlaTier.GOLD, availability_target=1.0, response_time_target=0.2
        )
        assert config.allowable_error_rate == 0.0

    @pytest.mark.parametrize("target", [0.0, -1.0, float("inf"), float("nan")])
    def test_invalid_response_time_target(self, target):
        with pytest.raises(ValueError, match="response_time_target"):
            SlaConfiguration(
                tier=SlaTier.GOLD, availability_target=0.99, response_time_target=target
            )

    def test_non_positive_period(self):
        with pytest.raises(ValueError, match="error_budget_period"):
            SlaConfiguration(
                tier=SlaTier.GOLD,
                availability_target=0.99,
                response_time_target=0.2,
                error_budget_period=timedelta(0),
            )

    def test_critical_threshold_must_be_below_alert(self):
        with pytest.raises(ValueError, match="critical_threshold"):
            SlaConfiguration(
                tier=SlaTier.GOLD,
                availability_target=0.99,
                response_time_target=0.2,
                alert_threshold=0.1,
                critical_threshold=0.1,
            )

    def test_default_configurations(self):
        configs = default_configurations()

        assert set(configs) == set(SlaTier)
        assert configs[SlaTier.GOLD].availability_target == 0.995
        assert configs[SlaTier.GOLD].response_time_target == 0.2
        assert configs[SlaTier.SILVER].availability_target == 0.99
        assert configs[SlaTier.SILVER].response_time_target == 1.0
        assert configs[SlaTier.BRONZE].availability_target == 0.98
        assert configs[SlaTier.BRONZE].response_time_target == 2.0
        for tier, config in configs.items():
            assert config.tier == tier


class TestSlaMetrics:
    """Tests for SlaMetrics entity."""

    def test_initial_metrics(self):
        metrics = SlaMetrics.initial(SlaTier.SILVER)

        assert metrics.current_availability == 1.0
        assert metrics.error_budget_remaining == 1.0
        assert metrics.error_budget_burn_rate == 0.0
        assert metrics.total_requests == 0
        assert metrics.response_times.maxlen == DEFAULT_SAMPLE_WINDOW

    def test_initial_rejects_non_positive_window(self):
        with pytest.raises(ValueError, match="sample_window"):
            SlaMetrics.initial(SlaTier.GOLD, sample_window=0)

    def test_copy_is_deep(self):
        metrics = SlaMetrics.initial(SlaTier.GOLD, sample_window=3)
        metrics.response_times.extend([0.1, 0.2])
        metrics.total_requests = 2

        copied = metrics.copy()
        copied.response_times.append(0.3)
        copied.total_requests = 99

        assert list(metrics.response_times) == [0.1, 0.2]
        assert metrics.total_requests == 2
        assert copied.response_times.maxlen == 3

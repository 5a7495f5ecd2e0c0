"""Health status classification for SLA indicators."""

from sla_engine.domain.entities.sla import HealthStatus, SlaConfiguration


class SlaStatusClassifier:
    """Classifies SLA indicators against their targets.

    Stateless; statuses are derived on every query and never cached.

    Thresholds:
    - Availability: >= target healthy, >= 95% of target warning
    - Response time: <= target healthy, <= 150% of target warning
    - Error budget: >= alert threshold healthy, >= critical threshold warning
    """

    AVAILABILITY_WARNING_FACTOR: float = 0.95
    RESPONSE_TIME_WARNING_FACTOR: float = 1.5

    def availability_status(self, current: float, target: float) -> HealthStatus:
        """Classify availability against its target.

        Args:
            current: Observed availability ratio
            target: Target availability ratio

        Returns:
            HealthStatus for the availability indicator
        """
        if current >= target:
            return HealthStatus.HEALTHY
        elif current >= target * self.AVAILABILITY_WARNING_FACTOR:
            return HealthStatus.WARNING
        return HealthStatus.CRITICAL

    def response_time_status(self, current: float, target: float) -> HealthStatus:
        """Classify mean response time against its target (seconds)."""
        if current <= target:
            return HealthStatus.HEALTHY
        elif current <= target * self.RESPONSE_TIME_WARNING_FACTOR:
            return HealthStatus.WARNING
        return HealthStatus.CRITICAL

    def error_budget_status(
        self, remaining: float, configuration: SlaConfiguration
    ) -> HealthStatus:
        """Classify remaining error budget against the tier's thresholds."""
        if remaining >= configuration.alert_threshold:
            return HealthStatus.HEALTHY
        elif remaining >= configuration.critical_threshold:
            return HealthStatus.WARNING
        return HealthStatus.CRITICAL

    def is_error_budget_critical(
        self, remaining: float, configuration: SlaConfiguration
    ) -> bool:
        """Check whether remaining budget is below the critical threshold."""
        return remaining < configuration.critical_threshold

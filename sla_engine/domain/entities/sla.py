"""Domain entities for SLA tier tracking.

This module defines the core entities used by the SLA tracker:
- SlaTier: Closed set of service-quality tiers (gold, silver, bronze)
- HealthStatus: Health label produced by status classification
- SlaConfiguration: Immutable per-tier targets and alerting thresholds
- SlaMetrics: Mutable per-tier counters, samples and derived indicators
"""

import math
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum

DEFAULT_SAMPLE_WINDOW = 1000  # Most recent response-time samples kept per tier
DEFAULT_ERROR_BUDGET_PERIOD = timedelta(days=30)


class SlaTier(str, Enum):
    """Service level agreement tier, ordered fastest first."""

    GOLD = "gold"
    SILVER = "silver"
    BRONZE = "bronze"


class HealthStatus(str, Enum):
    """Health label for an indicator compared against its target."""

    HEALTHY = "healthy"
    WARNING = "warning"
    CRITICAL = "critical"


@dataclass(frozen=True)
class SlaConfiguration:
    """SLA targets for a single tier.

    Attributes:
        tier: Tier these targets apply to
        availability_target: Target availability ratio in (0.0, 1.0], e.g. 0.995
        response_time_target: Target response time in seconds
        error_budget_period: Period over which the error budget is allotted
        alert_threshold: Remaining budget fraction below which status is "warning"
        critical_threshold: Remaining budget fraction below which status is "critical"
    """

    tier: SlaTier
    availability_target: float
    response_time_target: float
    error_budget_period: timedelta = DEFAULT_ERROR_BUDGET_PERIOD
    alert_threshold: float = 0.2
    critical_threshold: float = 0.1

    def __post_init__(self):
        """Validate SLA configuration constraints."""
        if not (0.0 < self.availability_target <= 1.0):
            raise ValueError(
                f"availability_target must be in (0.0, 1.0], got {self.availability_target}"
            )
        if not math.isfinite(self.response_time_target) or self.response_time_target <= 0.0:
            raise ValueError(
                f"response_time_target must be a positive number of seconds, "
                f"got {self.response_time_target}"
            )
        if self.error_budget_period <= timedelta(0):
            raise ValueError(
                f"error_budget_period must be positive, got {self.error_budget_period}"
            )
        if not (0.0 <= self.alert_threshold <= 1.0):
            raise ValueError(
                f"alert_threshold must be between 0.0 and 1.0, got {self.alert_threshold}"
            )
        if not (0.0 <= self.critical_threshold <= 1.0):
            raise ValueError(
                f"critical_threshold must be between 0.0 and 1.0, got {self.critical_threshold}"
            )
        if self.critical_threshold >= self.alert_threshold:
            raise ValueError(
                f"critical_threshold ({self.critical_threshold}) must be below "
                f"alert_threshold ({self.alert_threshold})"
            )

    @property
    def allowable_error_rate(self) -> float:
        """Fraction of requests allowed to fail (1 - availability_target)."""
        return 1.0 - self.availability_target


@dataclass
class SlaMetrics:
    """Current SLA performance for a tier.

    Counters are only ever incremented; the derived indicators are
    overwritten on every recompute pass.

    Attributes:
        tier: Tier these metrics belong to
        current_availability: successful / total, 1.0 until the first request
        current_response_time: Mean of the buffered samples in seconds
        error_budget_remaining: Fraction of error budget not yet consumed (0.0-1.0)
        error_budget_burn_rate: Observed error rate / allowable error rate
        last_update: When a request was last recorded for this tier
        total_requests: Requests recorded for this tier
        successful_requests: Successful requests recorded for this tier
        failed_requests: Failed requests recorded for this tier
        response_times: Ring buffer of the most recent samples, oldest first
    """

    tier: SlaTier
    current_availability: float = 1.0
    current_response_time: float = 0.0
    error_budget_remaining: float = 1.0
    error_budget_burn_rate: float = 0.0
    last_update: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    response_times: deque = field(
        default_factory=lambda: deque(maxlen=DEFAULT_SAMPLE_WINDOW)
    )

    @classmethod
    def initial(cls, tier: SlaTier, sample_window: int = DEFAULT_SAMPLE_WINDOW) -> "SlaMetrics":
        """Create default metrics for a tier with a bounded sample buffer.

        Args:
            tier: Tier to create metrics for
            sample_window: Maximum number of response-time samples retained

        Returns:
            SlaMetrics with full availability and a full error budget
        """
        if sample_window <= 0:
            raise ValueError(f"sample_window must be positive, got {sample_window}")
        return cls(tier=tier, response_times=deque(maxlen=sample_window))

    def copy(self) -> "SlaMetrics":
        """Return a deep copy, including a fresh sample buffer."""
        return SlaMetrics(
            tier=self.tier,
            current_availability=self.current_availability,
            current_response_time=self.current_response_time,
            error_budget_remaining=self.error_budget_remaining,
            error_budget_burn_rate=self.error_budget_burn_rate,
            last_update=self.last_update,
            total_requests=self.total_requests,
            successful_requests=self.successful_requests,
            failed_requests=self.failed_requests,
            response_times=deque(self.response_times, maxlen=self.response_times.maxlen),
        )


def default_configurations() -> dict[SlaTier, SlaConfiguration]:
    """Default targets for every tier.

    Returns:
        Mapping of tier to configuration (gold 99.5%/200ms, silver 99%/1s,
        bronze 98%/2s, 30-day budget period)
    """
    return {
        SlaTier.GOLD: SlaConfiguration(
            tier=SlaTier.GOLD,
            availability_target=0.995,
            response_time_target=0.2,
        ),
        SlaTier.SILVER: SlaConfiguration(
            tier=SlaTier.SILVER,
            availability_target=0.99,
            response_time_target=1.0,
        ),
        SlaTier.BRONZE: SlaConfiguration(
            tier=SlaTier.BRONZE,
            availability_target=0.98,
            response_time_target=2.0,
        ),
    }

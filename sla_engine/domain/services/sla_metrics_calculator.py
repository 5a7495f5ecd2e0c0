"""SLA metrics calculator.

Derives availability, mean response time, error budget remaining and burn
rate from a snapshot of per-tier counters. Pure arithmetic: callers copy the
counters under the tier lock and compute outside it.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass

from sla_engine.domain.entities.sla import SlaConfiguration


@dataclass(frozen=True)
class SlaCountersSnapshot:
    """Lock-consistent copy of a tier's counters and samples.

    Attributes:
        total_requests: Requests recorded for the tier
        successful_requests: Successful requests recorded for the tier
        failed_requests: Failed requests recorded for the tier
        response_times: Buffered response-time samples in seconds
        previous_availability: Availability from the last pass (fallback for zero totals)
    """

    total_requests: int
    successful_requests: int
    failed_requests: int
    response_times: tuple[float, ...]
    previous_availability: float = 1.0


@dataclass(frozen=True)
class DerivedSlaMetrics:
    """Indicators produced by one recompute pass for a tier."""

    availability: float
    response_time: float
    error_budget_remaining: float
    burn_rate: float


class SlaMetricsCalculator:
    """Computes derived SLA indicators for a tier.

    Every ratio has an explicit zero-denominator branch, so results are
    always finite. Availability and error budget remaining stay in [0.0, 1.0].

    Note:
        Burn rate is the instantaneous ratio error_rate / allowable_error_rate
        over all recorded requests. It is not normalized by elapsed time
        within the error budget period.
    """

    def compute(
        self,
        counters: SlaCountersSnapshot,
        configuration: SlaConfiguration,
    ) -> DerivedSlaMetrics:
        """Compute all derived indicators for a tier.

        Args:
            counters: Snapshot of the tier's counters and samples
            configuration: Tier targets

        Returns:
            DerivedSlaMetrics for the tier
        """
        availability = self.compute_availability(
            counters.successful_requests,
            counters.total_requests,
            counters.previous_availability,
        )
        return DerivedSlaMetrics(
            availability=availability,
            response_time=self.compute_mean_response_time(counters.response_times),
            error_budget_remaining=self.compute_error_budget_remaining(
                availability, configuration.availability_target
            ),
            burn_rate=self.compute_burn_rate(
                counters.failed_requests,
                counters.total_requests,
                configuration.availability_target,
            ),
        )

    @staticmethod
    def compute_availability(
        successful_requests: int,
        total_requests: int,
        previous_availability: float = 1.0,
    ) -> float:
        """Compute successful / total.

        Args:
            successful_requests: Number of successful requests
            total_requests: Number of requests
            previous_availability: Value kept when there are no requests

        Returns:
            Availability ratio (0.0-1.0)
        """
        if total_requests <= 0:
            return previous_availability
        return min(1.0, max(0.0, successful_requests / total_requests))

    @staticmethod
    def compute_mean_response_time(response_times: Sequence[float]) -> float:
        """Arithmetic mean of the samples, 0.0 when there are none."""
        if not response_times:
            return 0.0
        return math.fsum(response_times) / len(response_times)

    @staticmethod
    def compute_error_budget_remaining(
        current_availability: float,
        availability_target: float,
    ) -> float:
        """Compute the fraction of error budget not yet consumed.

        Formula: 1 - (target - current) / (1 - target), bounded to [0.0, 1.0]

        Examples:
        - target 99.5%, current 99.5% → 1.0 (nothing consumed)
        - target 99.5%, current 99.0% → 0.0 (gap equals the whole allowance)

        Args:
            current_availability: Observed availability ratio
            availability_target: Target availability ratio

        Returns:
            Remaining error budget (0.0-1.0); 1.0 for a 100% target
        """
        availability_gap = availability_target - current_availability
        max_allowable_gap = 1.0 - availability_target

        if max_allowable_gap <= 0.0:
            return 1.0

        remaining = 1.0 - (availability_gap / max_allowable_gap)
        return min(1.0, max(0.0, remaining))

    @staticmethod
    def compute_burn_rate(
        failed_requests: int,
        total_requests: int,
        availability_target: float,
    ) -> float:
        """Compute error budget burn rate.

        Formula: (failed / total) / (1 - target)

        Example:
        - target 99% (1% allowable), 2 failures in 100 requests → 2.0

        A burn rate of 1.0 consumes the budget exactly over the period;
        above 1.0 the budget runs out before the period ends.

        Args:
            failed_requests: Number of failed requests
            total_requests: Number of requests
            availability_target: Target availability ratio

        Returns:
            Burn rate (>= 0.0); 0.0 with no requests or a 100% target
        """
        if total_requests <= 0:
            return 0.0

        error_rate = failed_requests / total_requests
        allowable_error_rate = 1.0 - availability_target

        if allowable_error_rate <= 0.0:
            return 0.0

        return max(0.0, error_rate / allowable_error_rate)

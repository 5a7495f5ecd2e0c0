"""Latency-based SLA tier classification.

Assigns each completed request to exactly one tier using the gold and
silver response-time targets. Boundaries are inclusive to the faster tier.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass

from sla_engine.domain.entities.sla import SlaConfiguration, SlaTier


@dataclass(frozen=True)
class TierThresholds:
    """Response-time upper bounds (seconds) for the gold and silver tiers."""

    gold_seconds: float
    silver_seconds: float

    def __post_init__(self):
        """Validate threshold ordering."""
        for name, value in (
            ("gold_seconds", self.gold_seconds),
            ("silver_seconds", self.silver_seconds),
        ):
            if not math.isfinite(value) or value <= 0.0:
                raise ValueError(f"{name} must be a positive number, got {value}")
        if self.gold_seconds > self.silver_seconds:
            raise ValueError(
                f"gold_seconds ({self.gold_seconds}) cannot exceed "
                f"silver_seconds ({self.silver_seconds})"
            )


class TierClassifier:
    """Maps an observed response time to an SLA tier.

    Rules:
    - response_time <= gold target: GOLD
    - response_time <= silver target: SILVER
    - otherwise (including NaN): BRONZE

    Thresholds live in a single immutable TierThresholds object. Updates
    replace the reference in one assignment, so a classification always
    sees a consistent gold/silver pair.
    """

    def __init__(self, gold_target_seconds: float, silver_target_seconds: float) -> None:
        self._thresholds = TierThresholds(
            gold_seconds=gold_target_seconds,
            silver_seconds=silver_target_seconds,
        )

    @classmethod
    def from_configurations(
        cls, configurations: Mapping[SlaTier, SlaConfiguration]
    ) -> "TierClassifier":
        """Build a classifier from the gold and silver tier configurations.

        Args:
            configurations: Mapping of tier to configuration

        Returns:
            TierClassifier using the gold and silver response-time targets

        Raises:
            ValueError: If gold or silver configuration is missing or misordered
        """
        missing = [t.value for t in (SlaTier.GOLD, SlaTier.SILVER) if t not in configurations]
        if missing:
            raise ValueError(f"Missing SLA configuration for tiers: {missing}")
        return cls(
            gold_target_seconds=configurations[SlaTier.GOLD].response_time_target,
            silver_target_seconds=configurations[SlaTier.SILVER].response_time_target,
        )

    @property
    def thresholds(self) -> TierThresholds:
        """Current thresholds snapshot."""
        return self._thresholds

    def update_thresholds(
        self, gold_target_seconds: float, silver_target_seconds: float
    ) -> None:
        """Atomically replace both thresholds.

        Raises:
            ValueError: If the new thresholds are invalid (old ones are kept)
        """
        self._thresholds = TierThresholds(
            gold_seconds=gold_target_seconds,
            silver_seconds=silver_target_seconds,
        )

    def determine_tier(self, response_time_seconds: float) -> SlaTier:
        """Classify a response time into an SLA tier.

        Args:
            response_time_seconds: Observed request latency in seconds

        Returns:
            SlaTier the request belongs to
        """
        thresholds = self._thresholds
        if response_time_seconds <= thresholds.gold_seconds:
            return SlaTier.GOLD
        elif response_time_seconds <= thresholds.silver_seconds:
            return SlaTier.SILVER
        return SlaTier.BRONZE

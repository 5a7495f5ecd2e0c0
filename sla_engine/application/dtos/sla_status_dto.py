"""Application DTOs for SLA status queries.

These DTOs are used for communication between the application layer (use cases)
and the infrastructure layer (API routes). Ratios are fractions (0.0-1.0) and
times are seconds.
"""

from dataclasses import asdict, dataclass, field


@dataclass(frozen=True)
class IndicatorStatusDTO:
    """An indicator compared against its target.

    Attributes:
        current: Observed value
        target: Target value
        status: Health label ("healthy", "warning", "critical")
    """

    current: float
    target: float
    status: str


@dataclass(frozen=True)
class ErrorBudgetStatusDTO:
    """Error budget state for a tier.

    Attributes:
        remaining: Fraction of budget not yet consumed (0.0-1.0)
        burn_rate: Error rate relative to the allowable error rate
        status: Health label ("healthy", "warning", "critical")
    """

    remaining: float
    burn_rate: float
    status: str


@dataclass(frozen=True)
class RequestCountsDTO:
    """Request counters for a tier."""

    total: int
    successful: int
    failed: int


@dataclass(frozen=True)
class TierSummaryDTO:
    """Summary of one tier's SLA performance."""

    availability: IndicatorStatusDTO
    response_time: IndicatorStatusDTO
    error_budget: ErrorBudgetStatusDTO
    requests: RequestCountsDTO


@dataclass(frozen=True)
class SlaSummaryDTO:
    """Summary of SLA performance across all tiers.

    Attributes:
        service: Name of the tracked service
        last_updated: ISO 8601 timestamp of the most recently recorded request
        tiers: Tier name -> tier summary
    """

    service: str
    last_updated: str
    tiers: dict[str, TierSummaryDTO] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to a plain nested dictionary."""
        return asdict(self)

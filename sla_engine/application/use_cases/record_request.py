"""Use case for recording a completed request against the SLA tiers."""

import math

import structlog

from sla_engine.domain.entities.sla import SlaTier
from sla_engine.domain.services.tier_classifier import TierClassifier
from sla_engine.infrastructure.observability.metrics import (
    record_invalid_latency_sample,
    record_sla_response_time,
)
from sla_engine.infrastructure.stores.sla_metrics_store import InMemorySlaMetricsStore

logger = structlog.get_logger(__name__)


class RecordRequestUseCase:
    """Record one request outcome in the tier chosen by its latency.

    This is the hot path called by request instrumentation; it never raises.

    Input policy:
    - Negative latency is clamped to 0.0 (and therefore lands in GOLD)
    - Non-finite or non-numeric latency is attributed to BRONZE with zero
      weight: the request is counted, but no sample enters the buffer
    - Any unexpected failure is logged and swallowed
    """

    def __init__(
        self,
        tier_classifier: TierClassifier,
        metrics_store: InMemorySlaMetricsStore,
        service_name: str,
    ) -> None:
        """Initialize use case with injected dependencies.

        Args:
            tier_classifier: Latency -> tier classification
            metrics_store: Per-tier metrics state
            service_name: Service label for the response-time histogram
        """
        self._classifier = tier_classifier
        self._store = metrics_store
        self._service_name = service_name

    def execute(self, response_time_seconds: float, success: bool, endpoint: str) -> None:
        """Record a completed request.

        Args:
            response_time_seconds: Observed latency in seconds
            success: Whether the request succeeded
            endpoint: Endpoint route template that served the request
        """
        try:
            self._record(response_time_seconds, success, endpoint)
        except Exception:
            logger.exception("Failed to record SLA request", endpoint=endpoint)

    def _record(self, response_time_seconds: float, success: bool, endpoint: str) -> None:
        response_time = self._sanitize(response_time_seconds, endpoint)

        if response_time is None:
            tier = SlaTier.BRONZE
        else:
            tier = self._classifier.determine_tier(response_time)

        self._store.append(tier, success=bool(success), response_time=response_time)
        if response_time is not None:
            record_sla_response_time(self._service_name, endpoint, tier.value, response_time)

        logger.debug(
            "Recorded SLA request",
            tier=tier.value,
            response_time=response_time,
            success=success,
            endpoint=endpoint,
        )

    def _sanitize(self, value: float, endpoint: str) -> float | None:
        """Apply the input policy to a raw latency value.

        Returns:
            Latency to record, or None when the request carries no usable sample
        """
        try:
            response_time = float(value)
        except (TypeError, ValueError):
            return self._reject(value, "not_a_number", endpoint)
        except OverflowError:
            # Integers beyond float range; repr() of such values may itself fail
            shown = f"<{type(value).__name__} out of float range>"
            return self._reject(shown, "non_finite", endpoint)

        if not math.isfinite(response_time):
            return self._reject(value, "non_finite", endpoint)

        if response_time < 0.0:
            record_invalid_latency_sample("negative")
            logger.warning(
                "Negative response time clamped to zero",
                response_time=response_time,
                endpoint=endpoint,
            )
            return 0.0

        return response_time

    @staticmethod
    def _reject(value: object, reason: str, endpoint: str) -> None:
        record_invalid_latency_sample(reason)
        logger.warning(
            "Unusable response time, counting request in bronze without a sample",
            response_time=value if isinstance(value, str) else repr(value),
            reason=reason,
            endpoint=endpoint,
        )
        return None

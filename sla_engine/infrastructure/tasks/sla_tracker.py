"""SLA tracker: request recording, periodic recompute and query surface.

The tracker is an explicit instance owned by the composition root (see
api.main.create_app) and handed to the code that records and reads SLA data.
Recompute runs as an APScheduler AsyncIOScheduler interval job, fully
decoupled from the threads or tasks calling record_request().

Lifecycle:
    Stopped --start()--> Running --stop() / cancel_event set--> Stopped

Both transitions are idempotent: starting a running tracker or stopping a
stopped one logs a warning and does nothing.
"""

import asyncio
import contextlib
from collections.abc import Mapping
from types import MappingProxyType

import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from sla_engine.application.dtos.sla_status_dto import SlaSummaryDTO
from sla_engine.application.use_cases.get_sla_status import GetSlaStatusUseCase
from sla_engine.application.use_cases.recompute_sla_metrics import (
    RecomputeSlaMetricsUseCase,
)
from sla_engine.application.use_cases.record_request import RecordRequestUseCase
from sla_engine.domain.entities.sla import (
    DEFAULT_SAMPLE_WINDOW,
    SlaConfiguration,
    SlaMetrics,
    SlaTier,
    default_configurations,
)
from sla_engine.domain.repositories.metrics_sink import MetricsSinkInterface
from sla_engine.domain.services.sla_metrics_calculator import SlaMetricsCalculator
from sla_engine.domain.services.sla_status_classifier import SlaStatusClassifier
from sla_engine.domain.services.tier_classifier import TierClassifier
from sla_engine.infrastructure.config.settings import Settings
from sla_engine.infrastructure.observability.metrics import (
    PrometheusMetricsSink,
    format_period,
)
from sla_engine.infrastructure.stores.sla_metrics_store import InMemorySlaMetricsStore

logger = structlog.get_logger(__name__)

DEFAULT_RECOMPUTE_INTERVAL_SECONDS = 30.0


class SlaTracker:
    """Tracks SLA compliance and error budgets for the gold/silver/bronze tiers."""

    JOB_ID = "recompute_sla_metrics"

    def __init__(
        self,
        metrics_sink: MetricsSinkInterface,
        configurations: Mapping[SlaTier, SlaConfiguration] | None = None,
        *,
        service_name: str = "sla-engine",
        recompute_interval_seconds: float = DEFAULT_RECOMPUTE_INTERVAL_SECONDS,
        sample_window: int = DEFAULT_SAMPLE_WINDOW,
    ) -> None:
        """Create a stopped tracker.

        Args:
            metrics_sink: Receives one snapshot per tier on every recompute pass
            configurations: Targets for every tier (defaults to default_configurations())
            service_name: Service label attached to exported metrics
            recompute_interval_seconds: Seconds between recompute passes
            sample_window: Response-time samples retained per tier

        Raises:
            ValueError: If a tier is missing or misconfigured, or the interval
                or sample window is not positive
        """
        configurations = dict(configurations or default_configurations())

        missing = [tier.value for tier in SlaTier if tier not in configurations]
        if missing:
            raise ValueError(f"Missing SLA configuration for tiers: {missing}")
        for tier, configuration in configurations.items():
            if configuration.tier != tier:
                raise ValueError(
                    f"Configuration for {tier.value} is declared for {configuration.tier.value}"
                )
        if not recompute_interval_seconds > 0:
            raise ValueError(
                f"recompute_interval_seconds must be positive, got {recompute_interval_seconds}"
            )

        self._configurations = MappingProxyType(configurations)
        self._service_name = service_name
        self._interval_seconds = float(recompute_interval_seconds)

        self._store = InMemorySlaMetricsStore(sample_window=sample_window)
        self._classifier = TierClassifier.from_configurations(self._configurations)

        self._record_use_case = RecordRequestUseCase(
            tier_classifier=self._classifier,
            metrics_store=self._store,
            service_name=service_name,
        )
        self._recompute_use_case = RecomputeSlaMetricsUseCase(
            metrics_store=self._store,
            configurations=self._configurations,
            metrics_calculator=SlaMetricsCalculator(),
            metrics_sink=metrics_sink,
            service_name=service_name,
        )
        self._status_use_case = GetSlaStatusUseCase(
            metrics_store=self._store,
            configurations=self._configurations,
            status_classifier=SlaStatusClassifier(),
            service_name=service_name,
        )

        self._scheduler: AsyncIOScheduler | None = None
        self._cancel_watcher: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        """Whether the periodic recompute loop is active."""
        return self._scheduler is not None

    @property
    def configurations(self) -> Mapping[SlaTier, SlaConfiguration]:
        """Read-only tier configurations."""
        return self._configurations

    @property
    def tier_classifier(self) -> TierClassifier:
        """Classifier used to assign requests to tiers."""
        return self._classifier

    @property
    def recompute_interval_seconds(self) -> float:
        """Seconds between recompute passes."""
        return self._interval_seconds

    # Recording

    def record_request(self, response_time_seconds: float, success: bool, endpoint: str) -> None:
        """Record a completed request. Never raises.

        Args:
            response_time_seconds: Observed latency in seconds
            success: Whether the request succeeded
            endpoint: Endpoint that served the request
        """
        self._record_use_case.execute(response_time_seconds, success, endpoint)

    def recompute(self) -> dict[SlaTier, SlaMetrics]:
        """Run one recompute pass now, regardless of lifecycle state.

        Returns:
            Copies of each tier's metrics after the update
        """
        return self._recompute_use_case.execute()

    # Queries

    def get_metrics(self, tier: SlaTier | str) -> SlaMetrics | None:
        """Get a copy of one tier's metrics, or None for an unknown tier."""
        return self._status_use_case.get_metrics(tier)

    def get_all_metrics(self) -> dict[SlaTier, SlaMetrics]:
        """Get copies of every tier's metrics."""
        return self._status_use_case.get_all_metrics()

    def get_summary(self) -> SlaSummaryDTO:
        """Summarize SLA performance for every tier."""
        return self._status_use_case.get_summary()

    def is_error_budget_critical(self) -> dict[SlaTier, bool]:
        """Check every tier's remaining budget against its critical threshold."""
        return self._status_use_case.is_error_budget_critical()

    def is_tier_error_budget_critical(self, tier: SlaTier | str) -> bool:
        """Check one tier's remaining budget against its critical threshold.

        Raises:
            ValueError: If the tier name is unknown
        """
        return self._status_use_case.is_tier_error_budget_critical(tier)

    # Lifecycle

    async def start(self, cancel_event: asyncio.Event | None = None) -> None:
        """Start the periodic recompute loop.

        Must be called from a running event loop.

        Args:
            cancel_event: Optional event; setting it stops the tracker
        """
        if self._scheduler is not None:
            logger.warning("SLA tracker already running, skipping start")
            return

        scheduler = AsyncIOScheduler(
            timezone="UTC",
            job_defaults={
                "coalesce": True,  # Combine missed runs into one
                "max_instances": 1,  # Never overlap recompute passes
                "misfire_grace_time": max(1, int(self._interval_seconds)),
            },
        )
        scheduler.add_job(
            self._run_scheduled_recompute,
            trigger=IntervalTrigger(seconds=self._interval_seconds),
            args=[scheduler],
            id=self.JOB_ID,
            name="Recompute SLA metrics for all tiers",
            replace_existing=True,
        )
        scheduler.start()
        self._scheduler = scheduler

        if cancel_event is not None:
            self._cancel_watcher = asyncio.create_task(
                self._watch_cancellation(cancel_event)
            )

        logger.info(
            "SLA tracker started",
            update_interval_seconds=self._interval_seconds,
            service=self._service_name,
        )

    async def stop(self) -> None:
        """Stop the periodic recompute loop.

        After this returns no further recompute pass runs, including passes
        that were already queued on the event loop.
        """
        scheduler = self._scheduler
        if scheduler is None:
            logger.warning("SLA tracker not running, skipping stop")
            return

        logger.info("Stopping SLA tracker")
        self._scheduler = None
        scheduler.shutdown(wait=False)

        watcher, self._cancel_watcher = self._cancel_watcher, None
        if watcher is not None and watcher is not asyncio.current_task():
            watcher.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await watcher

        # AsyncIOScheduler applies shutdown on the next loop iteration
        await asyncio.sleep(0)
        logger.info("SLA tracker stopped")

    async def _run_scheduled_recompute(self, scheduler: AsyncIOScheduler) -> None:
        """Scheduled job body. Errors are logged so the schedule keeps running."""
        if self._scheduler is not scheduler:
            # Stopped (or restarted) after this run was queued
            return

        try:
            self._recompute_use_case.execute()
        except Exception:
            logger.exception("SLA metrics recompute failed")

    async def _watch_cancellation(self, cancel_event: asyncio.Event) -> None:
        await cancel_event.wait()
        logger.info("SLA tracker cancellation requested")
        await self.stop()


def build_sla_tracker(
    settings: Settings,
    metrics_sink: MetricsSinkInterface | None = None,
) -> SlaTracker:
    """Build a stopped SlaTracker from application settings.

    Args:
        settings: Application settings
        metrics_sink: Sink to export to (defaults to PrometheusMetricsSink)

    Returns:
        Configured SlaTracker

    Raises:
        ValueError: If the SLA configuration is invalid
    """
    sla_settings = settings.sla
    configurations = sla_settings.build_configurations()

    if metrics_sink is None:
        metrics_sink = PrometheusMetricsSink(
            period_labels={
                tier.value: format_period(configuration.error_budget_period)
                for tier, configuration in configurations.items()
            }
        )

    return SlaTracker(
        metrics_sink,
        configurations,
        service_name=settings.observability.service_name,
        recompute_interval_seconds=sla_settings.recompute_interval_seconds,
        sample_window=sla_settings.sample_window_size,
    )

"""Background tasks for the SLA engine.

This module contains the SLA tracker and its periodic recompute job.
"""

from sla_engine.infrastructure.tasks.sla_tracker import SlaTracker, build_sla_tracker

__all__ = [
    "SlaTracker",
    "build_sla_tracker",
]

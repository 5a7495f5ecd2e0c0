"""
Dependency injection for FastAPI routes.

The SLA tracker is created by create_app() and stored on app.state; routes
receive it through Depends(get_sla_tracker).
"""

from fastapi import Request

from sla_engine.infrastructure.tasks.sla_tracker import SlaTracker


def get_sla_tracker(request: Request) -> SlaTracker:
    """Get the application's SlaTracker instance."""
    return request.app.state.sla_tracker

"""Infrastructure configuration module.

Centralized configuration management using Pydantic Settings.
"""

from sla_engine.infrastructure.config.settings import (
    Settings,
    SlaSettings,
    SlaTierSettings,
    get_settings,
    reset_settings,
)

__all__ = [
    "Settings",
    "SlaSettings",
    "SlaTierSettings",
    "get_settings",
    "reset_settings",
]

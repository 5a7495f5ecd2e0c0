"""Application configuration using Pydantic Settings.

Centralized configuration management following Clean Architecture principles.
All environment variables should be accessed through this module.
"""

from datetime import timedelta

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from sla_engine.domain.entities.sla import (
    DEFAULT_SAMPLE_WINDOW,
    SlaConfiguration,
    SlaTier,
)


class APISettings(BaseSettings):
    """API server configuration settings."""

    model_config = SettingsConfigDict(env_prefix="API_", case_sensitive=False)

    host: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server",
    )
    port: int = Field(
        default=8000,
        description="Port to bind the API server",
    )


class ObservabilitySettings(BaseSettings):
    """Observability configuration settings (OpenTelemetry, logging, metrics)."""

    model_config = SettingsConfigDict(env_prefix="OTEL_", case_sensitive=False)

    # OpenTelemetry Tracing
    tracing_enabled: bool = Field(
        default=False,
        description="Export traces via OTLP and instrument the FastAPI app",
    )
    exporter_otlp_endpoint: str = Field(
        default="http://localhost:4317",
        description="OTLP exporter endpoint (gRPC)",
    )
    service_name: str = Field(
        default="sla-engine",
        description="Service name for traces, log events and SLA metric labels",
    )
    trace_sample_rate: float = Field(
        default=0.1,
        ge=0.0,
        le=1.0,
        description="Trace sampling rate (0.0 to 1.0)",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_json_format: bool = Field(
        default=True,
        description="Enable JSON structured logging",
    )


class SlaTierSettings(BaseModel):
    """Targets for one SLA tier."""

    availability_target: float = Field(
        ...,
        gt=0.0,
        le=1.0,
        description="Target availability ratio, e.g. 0.995 for 99.5%",
    )
    response_time_target_seconds: float = Field(
        ...,
        gt=0.0,
        description="Response time target in seconds",
    )
    error_budget_period_days: int = Field(
        default=30,
        gt=0,
        description="Error budget period in days",
    )
    alert_threshold: float = Field(
        default=0.2,
        ge=0.0,
        le=1.0,
        description="Remaining error budget fraction that triggers a warning",
    )
    critical_threshold: float = Field(
        default=0.1,
        ge=0.0,
        le=1.0,
        description="Remaining error budget fraction that is critical",
    )

    def to_configuration(self, tier: SlaTier) -> SlaConfiguration:
        """Convert to a validated domain configuration.

        Raises:
            ValueError: If thresholds are inconsistent (critical >= alert)
        """
        return SlaConfiguration(
            tier=tier,
            availability_target=self.availability_target,
            response_time_target=self.response_time_target_seconds,
            error_budget_period=timedelta(days=self.error_budget_period_days),
            alert_threshold=self.alert_threshold,
            critical_threshold=self.critical_threshold,
        )


# Per-tier defaults, so a single field can be overridden from the environment
class GoldTierSettings(SlaTierSettings):
    availability_target: float = Field(default=0.995, gt=0.0, le=1.0)
    response_time_target_seconds: float = Field(default=0.2, gt=0.0)


class SilverTierSettings(SlaTierSettings):
    availability_target: float = Field(default=0.99, gt=0.0, le=1.0)
    response_time_target_seconds: float = Field(default=1.0, gt=0.0)


class BronzeTierSettings(SlaTierSettings):
    availability_target: float = Field(default=0.98, gt=0.0, le=1.0)
    response_time_target_seconds: float = Field(default=2.0, gt=0.0)


class SlaSettings(BaseSettings):
    """SLA tracking configuration settings.

    Tier blocks can be overridden per field, e.g.
    SLA_GOLD__AVAILABILITY_TARGET=0.999
    """

    model_config = SettingsConfigDict(
        env_prefix="SLA_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    recompute_interval_seconds: float = Field(
        default=30.0,
        gt=0.0,
        description="Interval between SLA metric recompute passes (seconds)",
    )
    sample_window_size: int = Field(
        default=DEFAULT_SAMPLE_WINDOW,
        gt=0,
        description="Response-time samples retained per tier",
    )
    gold: GoldTierSettings = Field(default_factory=GoldTierSettings)
    silver: SilverTierSettings = Field(default_factory=SilverTierSettings)
    bronze: BronzeTierSettings = Field(default_factory=BronzeTierSettings)

    def build_configurations(self) -> dict[SlaTier, SlaConfiguration]:
        """Build domain configurations for every tier.

        Returns:
            Mapping of tier to validated SlaConfiguration
        """
        return {
            SlaTier.GOLD: self.gold.to_configuration(SlaTier.GOLD),
            SlaTier.SILVER: self.silver.to_configuration(SlaTier.SILVER),
            SlaTier.BRONZE: self.bronze.to_configuration(SlaTier.BRONZE),
        }


class Settings(BaseSettings):
    """Main application settings.

    Aggregates all configuration modules and provides a single settings object.
    Load from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    # Environment
    environment: str = Field(
        default="development",
        description="Application environment (development, staging, production)",
    )

    # Sub-settings
    api: APISettings = Field(default_factory=APISettings)
    observability: ObservabilitySettings = Field(
        default_factory=ObservabilitySettings
    )
    sla: SlaSettings = Field(default_factory=SlaSettings)


# Global settings instance (singleton)
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get global settings instance (singleton pattern).

    Returns:
        Settings instance loaded from environment
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None

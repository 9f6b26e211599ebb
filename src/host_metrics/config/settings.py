"""Host metrics configuration settings.

This module provides the HostMetricsConfig class and settings singleton.
"""

from pathlib import Path

import structlog
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from host_metrics.config.env_loader import Environment, get_environment, load_env_files
from host_metrics.config.validators import (
    default_clock_ticks,
    resolve_path,
    validate_log_format,
    validate_log_level,
)

log = structlog.get_logger(__name__)


class HostMetricsConfig(BaseSettings):
    """Configuration for host metric collection.

    Loads configuration from environment variables (``HOSTMETRICS_`` prefix),
    .env files and defaults. Validates all values using Pydantic.
    """

    model_config = SettingsConfigDict(
        # .env files are loaded by env_loader so that environment-specific
        # files keep their priority order.
        env_prefix="HOSTMETRICS_",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Environment
    environment: Environment = Field(
        default_factory=get_environment, description="Current environment"
    )

    # Telemetry
    log_dir: Path = Field(default=Path("telemetry/logs"), description="Log directory path")
    log_level: str = Field(
        default="INFO",
        validation_alias=AliasChoices("HOSTMETRICS_LOG_LEVEL", "APP_LOG_LEVEL"),
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_format: str = Field(
        default="console", description="Console log format (json or console)"
    )

    # Collection
    proc_root: Path = Field(
        default=Path("/proc"),
        description="Pseudo-filesystem root holding loadavg, meminfo and stat",
    )
    cycle_seconds: int = Field(
        default=15, ge=1, description="Sampling interval between two collection passes"
    )
    clock_ticks: int = Field(
        default_factory=default_clock_ticks, ge=1, description="Kernel clock ticks per second"
    )
    df_path: Path | None = Field(
        default=None,
        description="File holding df output to parse instead of running df",
    )
    command_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Timeout for fallback commands (sysctl, df); unset means no timeout",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        return validate_log_level(v)

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        return validate_log_format(v)

    @field_validator("log_dir", mode="before")
    @classmethod
    def resolve_paths(cls, v: Path | str) -> Path:
        """Resolve relative paths to absolute."""
        return resolve_path(v)

    @property
    def cycle_ticks(self) -> int:
        """Clock ticks expected to elapse in one sampling interval."""
        return self.cycle_seconds * self.clock_ticks


_settings: HostMetricsConfig | None = None


def load_config() -> HostMetricsConfig:
    """Load and validate host metrics configuration.

    This function:
    1. Loads .env files in priority order (via env_loader)
    2. Creates HostMetricsConfig (reads from environment variables)
    3. Validates all values using Pydantic

    Returns:
        Validated HostMetricsConfig instance.

    Raises:
        ValidationError: If configuration validation fails.
    """
    log.info("loading_host_metrics_config", environment=get_environment().value)

    load_env_files()

    try:
        config = HostMetricsConfig()
    except Exception as e:
        log.error("host_metrics_config_load_failed", error=str(e), error_type=type(e).__name__)
        raise

    log.info(
        "host_metrics_config_loaded",
        environment=config.environment.value,
        proc_root=str(config.proc_root),
        cycle_seconds=config.cycle_seconds,
        clock_ticks=config.clock_ticks,
        log_level=config.log_level,
    )
    return config


def get_settings() -> HostMetricsConfig:
    """Get the host metrics settings singleton.

    Returns:
        HostMetricsConfig instance (singleton pattern).
    """
    global _settings
    if _settings is None:
        _settings = load_config()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() reloads them."""
    global _settings
    _settings = None

"""Configuration management for host metric collection.

Integrates environment variables, .env files, and defaults into a single
validated settings object.
"""

from host_metrics.config.env_loader import Environment, get_environment, load_env_files
from host_metrics.config.settings import (
    HostMetricsConfig,
    get_settings,
    load_config,
    reset_settings,
)

__all__ = [
    "HostMetricsConfig",
    "get_settings",
    "load_config",
    "reset_settings",
    "Environment",
    "get_environment",
    "load_env_files",
]

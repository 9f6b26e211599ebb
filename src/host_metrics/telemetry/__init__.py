"""Telemetry module for structured logging.

This module provides:
- Structured logging via structlog
- Semantic event constants
"""

from host_metrics.telemetry.events import (
    CPU_SOURCE_ABSENT,
    DF_LINE_UNPARSEABLE,
    DYNAMIC_FAMILY_DECLARED,
    DYNAMIC_METRIC_DISCOVERED,
    HOST_COLLECTION_COMPLETED,
    HOST_COLLECTION_FAILED,
    HOST_COLLECTION_STARTED,
    MEMINFO_LINE_UNRECOGNIZED,
    METRIC_DECLARED,
    SOURCE_SELECTED,
    SWAP_SUFFIX_UNRECOGNIZED,
)
from host_metrics.telemetry.logger import configure_logging, get_logger

__all__ = [
    "get_logger",
    "configure_logging",
    # Event constants
    "HOST_COLLECTION_STARTED",
    "HOST_COLLECTION_COMPLETED",
    "HOST_COLLECTION_FAILED",
    "SOURCE_SELECTED",
    "CPU_SOURCE_ABSENT",
    "MEMINFO_LINE_UNRECOGNIZED",
    "DF_LINE_UNPARSEABLE",
    "SWAP_SUFFIX_UNRECOGNIZED",
    "METRIC_DECLARED",
    "DYNAMIC_FAMILY_DECLARED",
    "DYNAMIC_METRIC_DISCOVERED",
]

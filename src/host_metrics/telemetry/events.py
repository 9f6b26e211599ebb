"""Semantic event constants for structured logging.

All log events should use these constants rather than magic strings to ensure
consistency and enable reliable querying and analysis.
"""

# Collection pass events
HOST_COLLECTION_STARTED = "host_collection_started"
HOST_COLLECTION_COMPLETED = "host_collection_completed"
HOST_COLLECTION_FAILED = "host_collection_failed"

# Source selection and parsing
SOURCE_SELECTED = "source_selected"
CPU_SOURCE_ABSENT = "cpu_source_absent"
MEMINFO_LINE_UNRECOGNIZED = "meminfo_line_unrecognized"
DF_LINE_UNPARSEABLE = "df_line_unparseable"
SWAP_SUFFIX_UNRECOGNIZED = "swap_suffix_unrecognized"

# Metric store events
METRIC_DECLARED = "metric_declared"
DYNAMIC_FAMILY_DECLARED = "dynamic_family_declared"
DYNAMIC_METRIC_DISCOVERED = "dynamic_metric_discovered"

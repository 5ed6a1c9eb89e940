"""
Infrastructure layer: configuration, logging and filesystem boundaries.

Contains:
- Configuration models and YAML loading
- Observability (logging with context metadata)
- Plain-text tally files (labeltally.infrastructure.io)

This is the only layer that performs I/O operations.
"""

# Most commonly used - exposed at top level for convenience
from labeltally.infrastructure.config import (
    FormatConfig,
    ReportConfig,
    StatsConfig,
    load_report_config,
)
from labeltally.infrastructure.observability import configure_logging

__all__ = [
    "load_report_config",
    "ReportConfig",
    "FormatConfig",
    "StatsConfig",
    "configure_logging",
]

"""
Configuration management: models and loading.

Handles:
- FormatConfig: number formatting carried by each tally
- StatsConfig: F-measure beta and confidence levels
- ReportConfig: evaluation report settings loaded from YAML

The loader module performs file I/O; models are pure Pydantic classes.
"""

from labeltally.infrastructure.config.loader import load_report_config
from labeltally.infrastructure.config.models import FormatConfig, ReportConfig, StatsConfig

__all__ = [
    "ReportConfig",
    "load_report_config",
    "FormatConfig",
    "StatsConfig",
]

"""
labeltally: classification-evaluation statistics from a gold vs. predicted label tally.

Layers:
- domain: LabelTally, confidence intervals, rendering and parsing (pure)
- infrastructure: configuration, logging, plain-text tally files
- application: metrics dictionaries and logged evaluation summaries
"""

from labeltally.application import compute_tally_metrics, evaluate_tally
from labeltally.domain import (
    ConfidenceInterval,
    LabelTally,
    TallyFormatError,
    parse_tally,
    render,
    render_latex,
    render_probabilistic,
)
from labeltally.infrastructure.config import FormatConfig, ReportConfig, StatsConfig, load_report_config
from labeltally.infrastructure.io import read_tally, write_tally

__version__ = "0.1.0"

__all__ = [
    "LabelTally",
    "ConfidenceInterval",
    "TallyFormatError",
    "parse_tally",
    "render",
    "render_probabilistic",
    "render_latex",
    "FormatConfig",
    "StatsConfig",
    "ReportConfig",
    "load_report_config",
    "read_tally",
    "write_tally",
    "evaluate_tally",
    "compute_tally_metrics",
]

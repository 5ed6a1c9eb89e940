"""
Application layer: evaluation use cases.

Coordinates the domain tally with configuration and logging to produce
metrics dictionaries and readable summaries for an embedding harness.
"""

from labeltally.application.evaluation import compute_tally_metrics, evaluate_tally, log_evaluation_summary

__all__ = [
    "evaluate_tally",
    "compute_tally_metrics",
    "log_evaluation_summary",
]

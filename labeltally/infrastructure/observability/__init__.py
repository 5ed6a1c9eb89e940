"""
Observability: logging setup and the tally-name log context.
"""

from labeltally.infrastructure.observability.logging import (
    configure_logging,
    get_log_context,
    tally_log_context,
)

__all__ = [
    "configure_logging",
    "get_log_context",
    "tally_log_context",
]

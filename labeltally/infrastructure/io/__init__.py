"""I/O utilities: plain-text tally tables on disk."""

from labeltally.infrastructure.io.fs import ensure_exists, read_tally, write_tally

__all__ = [
    "ensure_exists",
    "read_tally",
    "write_tally",
]

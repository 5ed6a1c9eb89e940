"""Filesystem utility functions for plain-text tally tables."""

import logging
from pathlib import Path

from labeltally.domain.parsing import parse_tally
from labeltally.domain.rendering import render
from labeltally.domain.tally import LabelTally

logger = logging.getLogger(__name__)


def ensure_exists(path: Path, what: str) -> None:
    """
    Check that a path exists, raise FileNotFoundError if not.

    Args:
        path: Path to check
        what: Description of what this path represents (for error message)

    Raises:
        FileNotFoundError: If path does not exist
    """
    if not path.exists():
        raise FileNotFoundError(f"Missing {what} at: {path}")


def read_tally(path: Path) -> LabelTally:
    """
    Read a tally table (the `render` format) from a UTF-8 text file.

    Raises:
        FileNotFoundError: If path does not exist
        TallyFormatError: If the file content is not a valid table
    """
    ensure_exists(path, "tally table")
    tally = parse_tally(path.read_text(encoding="utf-8"))
    logger.info("Loaded tally from %s (total=%d)", path, tally.total)
    return tally


def write_tally(path: Path, tally: LabelTally) -> Path:
    """Write `render(tally)` to path (UTF-8), creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render(tally), encoding="utf-8")
    logger.info("Saved tally table: %s", path)
    return path

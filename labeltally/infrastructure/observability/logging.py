"""
Logging setup with contextvars-based metadata injection.

- Adds the name of the tally being evaluated into every log line (via contextvars).
- Supports console-only logging OR console + rotating file logs.
- Quiets the numexpr logger, which pandas pulls in and which logs at INFO on import.

The library itself never calls configure_logging; the embedding harness does.
"""

import contextvars
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path

# Name of the tally under evaluation, shown as t=<name> on every line
cv_tally = contextvars.ContextVar("tally", default="-")


class ContextInjectFilter(logging.Filter):
    """Inject context variables into log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.tally = cv_tally.get() or "-"
        return True


@contextmanager
def tally_log_context(tally_name: str) -> Iterator[None]:
    """Tag log lines emitted inside the block with `tally_name`; the previous tag is restored on exit."""
    token = cv_tally.set(str(tally_name))
    try:
        yield
    finally:
        cv_tally.reset(token)


def get_log_context() -> dict[str, str]:
    """Return the current context in dict form (for metrics metadata or debugging)."""
    return {"tally": str(cv_tally.get() or "-")}


def configure_logging(
    *,
    log_file: Path | None = None,
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    max_bytes: int = 10_000_000,  # 10MB
    backup_count: int = 5,
) -> None:
    """
    Configure application logging with contextvars support.

    Args:
        log_file: Path to log file (console only when None)
        console_level: Minimum level for console output (default: INFO)
        file_level: Minimum level for file output (default: DEBUG)
        max_bytes: Max log file size before rotation
        backup_count: Number of backup files to keep
    """
    # Clear existing handlers to avoid duplicate logs if called multiple times
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.DEBUG)  # handlers enforce levels

    console_formatter = logging.Formatter("%(asctime)s [%(levelname)s] t=%(tally)s | %(message)s", datefmt="%H:%M:%S")
    file_formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s | t=%(tally)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    ctx_filter = ContextInjectFilter()

    ch = logging.StreamHandler()
    ch.setLevel(console_level)
    ch.setFormatter(console_formatter)
    ch.addFilter(ctx_filter)
    root.addHandler(ch)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(file_formatter)
        fh.addFilter(ctx_filter)
        root.addHandler(fh)

    logging.getLogger("numexpr").setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        "Logging configured (console_level=%s, file=%s)",
        logging.getLevelName(console_level),
        str(log_file) if log_file is not None else "None",
    )

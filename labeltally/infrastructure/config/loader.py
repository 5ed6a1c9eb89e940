"""Configuration loading from YAML files."""

from pathlib import Path
from typing import Any

import yaml

from labeltally.infrastructure.config.models import FormatConfig, ReportConfig, StatsConfig


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML file and return as dict."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    # An empty file means "all defaults"
    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ValueError(f"Expected YAML dict in {path}, got {type(data)}")

    return data


def load_report_config(path: Path) -> ReportConfig:
    """
    Load a report YAML (format and stats sections) into a ReportConfig.

    Missing or empty sections fall back to the model defaults.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the YAML is not a mapping or a section has the wrong type
        pydantic.ValidationError: If a value is out of range
    """
    data = _load_yaml(path)

    format_raw = data.get("format") or {}
    stats_raw = data.get("stats") or {}
    if not isinstance(format_raw, dict):
        raise ValueError(f"'format' must be a mapping in {path}")
    if not isinstance(stats_raw, dict):
        raise ValueError(f"'stats' must be a mapping in {path}")

    return ReportConfig(
        format=FormatConfig(**format_raw),
        stats=StatsConfig(**stats_raw),
    )

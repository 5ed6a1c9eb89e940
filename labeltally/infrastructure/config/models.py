"""Configuration models (Pydantic classes)."""

import math
from decimal import ROUND_HALF_UP, Context, Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from labeltally.infrastructure.constants import SUPPORTED_CONFIDENCE_LEVELS


class FormatConfig(BaseModel):
    """
    Number formatting for rendered tables and summaries.

    Held per tally instance; there is no process-wide formatter state.
    """

    model_config = ConfigDict(validate_assignment=True)

    decimal_places: int = Field(default=3, ge=1, le=100, description="Digits after the decimal separator.")
    decimal_separator: str = Field(default=".", description="Single character placed between integer and fraction.")

    @field_validator("decimal_separator")
    @classmethod
    def _single_char(cls, v: str) -> str:
        if len(v) != 1:
            raise ValueError("decimal_separator must be a single character")
        return v

    def format_number(self, value: float, decimal_separator: str | None = None) -> str:
        """
        Format `value` with `decimal_places` digits, rounding halves away from zero.

        Args:
            value: Number to format
            decimal_separator: Overrides the configured separator when given

        Returns:
            Formatted text, e.g. "0.782" for 0.78125 with 3 places
        """
        places = self.decimal_places
        value = float(value)
        if math.isfinite(value):
            # precision must cover the integer digits of any float plus the requested places
            ctx = Context(prec=places + 400)
            quantum = Decimal(1).scaleb(-places)
            text = f"{Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP, context=ctx):f}"
        else:
            text = f"{value:.{places}f}"

        separator = self.decimal_separator if decimal_separator is None else decimal_separator
        if separator != ".":
            text = text.replace(".", separator)
        return text


class StatsConfig(BaseModel):
    """
    Configuration for evaluation statistics.

    Defaults match the reporting used so far (F1, 95% and 90% intervals).
    """

    beta: float = Field(default=1.0, gt=0, description="F-measure beta; >1 favours recall, <1 favours precision.")
    confidence_levels: list[int] = Field(default_factory=lambda: list(SUPPORTED_CONFIDENCE_LEVELS))

    @field_validator("confidence_levels")
    @classmethod
    def _known_levels(cls, v: list[int]) -> list[int]:
        unknown = [lvl for lvl in v if lvl not in SUPPORTED_CONFIDENCE_LEVELS]
        if unknown:
            supported = list(SUPPORTED_CONFIDENCE_LEVELS)
            raise ValueError(f"Unsupported confidence levels {unknown}; supported: {supported}")
        return v


class ReportConfig(BaseModel):
    """
    Evaluation report configuration.
    - Loaded from a YAML file (optional)
    - Consumed by the evaluation use case
    """

    format: FormatConfig = Field(default_factory=FormatConfig)
    stats: StatsConfig = Field(default_factory=StatsConfig)

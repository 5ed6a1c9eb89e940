"""Normal-approximation confidence intervals."""

import math

from pydantic import BaseModel, ConfigDict

# z-values for the supported confidence levels
Z_95 = 1.96
Z_90_ACCURACY = 1.645
# Macro-F at 90% has always been reported with 1.66; kept for comparability with older results.
Z_90_MACRO_F = 1.66

ACCURACY_Z_BY_LEVEL: dict[int, float] = {95: Z_95, 90: Z_90_ACCURACY}
MACRO_F_Z_BY_LEVEL: dict[int, float] = {**ACCURACY_Z_BY_LEVEL, 90: Z_90_MACRO_F}


class ConfidenceInterval(BaseModel):
    """Point estimate with a symmetric interval around it."""

    model_config = ConfigDict(frozen=True)

    level: int
    value: float
    half_width: float

    @property
    def low(self) -> float:
        return self.value - self.half_width

    @property
    def high(self) -> float:
        return self.value + self.half_width

    def as_list(self) -> list[float]:
        return [self.low, self.high]


def normal_half_width(stat: float, total: int, z: float) -> float:
    """
    Half-width of the normal-approximation interval for a proportion.

    Args:
        stat: Observed proportion (accuracy, macro F-measure, ...)
        total: Number of instances the proportion was computed from
        z: Standard normal quantile for the desired level

    Returns:
        z * sqrt(stat * (1 - stat) / total), NaN when total is 0
    """
    if total == 0:
        return float("nan")
    return z * math.sqrt(stat * (1.0 - stat) / total)


def z_for_level(level: int, table: dict[int, float]) -> float:
    """Look up the z-value for a confidence level, raising ValueError for unknown levels."""
    try:
        return table[level]
    except KeyError as e:
        raise ValueError(f"Unsupported confidence level: {level}. Supported: {sorted(table)}") from e


def normal_interval(stat: float, total: int, level: int, table: dict[int, float]) -> ConfidenceInterval:
    z = z_for_level(level, table)
    return ConfidenceInterval(level=level, value=stat, half_width=normal_half_width(stat, total, z))

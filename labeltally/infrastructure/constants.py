from labeltally.domain.intervals import ACCURACY_Z_BY_LEVEL

# Confidence levels (percent) with a known z-value
SUPPORTED_CONFIDENCE_LEVELS: tuple[int, ...] = tuple(ACCURACY_Z_BY_LEVEL)

"""Domain error types."""


class TallyFormatError(ValueError):
    """Raised when a text table cannot be parsed into a LabelTally."""

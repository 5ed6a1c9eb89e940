"""
Domain layer: the label tally and the statistics derived from it.

Contains:
- tally: LabelTally data structure, aggregate queries and matrix transforms
- intervals: normal-approximation confidence intervals
- rendering: aligned text, probabilistic and LaTeX tables; summaries
- parsing: text table -> LabelTally

All functions in this layer are pure (no file I/O).
"""

from labeltally.domain.errors import TallyFormatError
from labeltally.domain.intervals import ConfidenceInterval
from labeltally.domain.parsing import parse_tally
from labeltally.domain.rendering import render, render_latex, render_probabilistic
from labeltally.domain.tally import LabelTally

__all__ = [
    "LabelTally",
    "ConfidenceInterval",
    "TallyFormatError",
    "parse_tally",
    "render",
    "render_probabilistic",
    "render_latex",
]

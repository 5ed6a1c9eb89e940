"""Parse whitespace-delimited tally tables (the `render` format) back into a LabelTally."""

import logging

from labeltally.domain.errors import TallyFormatError
from labeltally.domain.rendering import CORNER_LABEL
from labeltally.domain.tally import LabelTally

logger = logging.getLogger(__name__)


def _read_header(line: str) -> list[str]:
    labels = line.split()
    if labels and labels[0] == CORNER_LABEL:
        # a bare corner cell is how an empty tally renders
        return labels[1:]
    if not labels:
        raise ValueError("header line has no predicted labels")
    return labels


def parse_tally(text: str) -> LabelTally:
    """
    Parse a tally table.

    The first line lists the predicted labels (an optional leading corner cell is
    skipped). Every following non-blank line starts with a gold label and
    continues with signed integer counts, recorded against the predicted label
    at the same position in the header. Negative counts are accepted so that
    tables of transformed tallies (e.g. `negative_unit_matrix`) read back.

    A header holding only the corner cell yields an empty tally, which makes
    `parse_tally(render(LabelTally()))` round-trip as well.

    Args:
        text: Table text, e.g. the output of `render`

    Returns:
        A new LabelTally holding every parsed cell (zeros included)

    Raises:
        TallyFormatError: On any malformed line or token; nothing is returned partially
    """
    try:
        lines = text.split("\n")
        header = _read_header(lines[0])

        result = LabelTally()
        for line_no, line in enumerate(lines[1:], start=2):
            tokens = line.split()
            if not tokens:
                continue

            gold, values = tokens[0], tokens[1:]
            if len(values) > len(header):
                raise ValueError(f"line {line_no} has {len(values)} counts but the header has {len(header)} labels")

            for predicted, raw in zip(header, values, strict=False):
                result._add(gold, predicted, int(raw))
    except (ValueError, IndexError, AttributeError) as e:
        raise TallyFormatError(f"Wrong input format: {e}") from e

    logger.debug("Parsed tally: %d gold labels, total=%d", len(result.gold_labels), result.total)
    return result

"""Label tally (confusion matrix) with derived classification statistics."""

import logging
import numbers
from collections.abc import Iterator, Sequence

import numpy as np
import pandas as pd
from sklearn.metrics import confusion_matrix

from labeltally.domain.intervals import (
    ACCURACY_Z_BY_LEVEL,
    MACRO_F_Z_BY_LEVEL,
    ConfidenceInterval,
    normal_interval,
)
from labeltally.domain.rendering import (
    class_distribution,
    display_columns,
    label_report,
    render,
    render_latex,
    render_probabilistic,
    summary,
)
from labeltally.infrastructure.config.models import FormatConfig

logger = logging.getLogger(__name__)


class LabelTally:
    """
    Sparse count table of (gold label, predicted label) pairs.

    Labels are opaque strings; every query iterates them in sorted order so that
    rendering and reporting are deterministic. Counts only grow through `record`;
    combination and transforms always build a new tally.

    Examples:
        >>> t = LabelTally()
        >>> t.record("pos", "pos", 3)
        >>> t.record("pos", "neg")
        >>> t.row_sum("pos"), t.col_sum("neg"), t.accuracy
        (4, 1, 0.75)
    """

    def __init__(self, format_cfg: FormatConfig | None = None) -> None:
        self._cells: dict[str, dict[str, int]] = {}
        self._gold_labels: set[str] = set()
        self._predicted_labels: set[str] = set()
        self._label_series: list[str] = []
        self._total = 0
        self._correct = 0
        self._format = format_cfg.model_copy() if format_cfg is not None else FormatConfig()

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def record(self, gold: str, predicted: str, count: int = 1) -> None:
        """
        Add `count` observations of `gold` labelled as `predicted`.

        Both labels are registered even when count is 0.

        Raises:
            TypeError: If count is not an integer (int or numpy integer; bool is rejected)
            ValueError: If count is negative
        """
        if isinstance(count, bool) or not isinstance(count, numbers.Integral):
            raise TypeError(f"count must be an integer, got {count!r}")
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        self._add(gold, predicted, int(count))

    def _add(self, gold: str, predicted: str, count: int) -> None:
        # Unchecked: transforms need negative and zero-valued cells.
        self._gold_labels.add(gold)
        self._predicted_labels.add(predicted)
        self._label_series.extend([predicted] * count)

        row = self._cells.setdefault(gold, {})
        row[predicted] = row.get(predicted, 0) + count

        self._total += count
        if gold == predicted:
            self._correct += count

    @classmethod
    def from_predictions(
        cls,
        y_true: Sequence,
        y_pred: Sequence,
        format_cfg: FormatConfig | None = None,
    ) -> "LabelTally":
        """
        Build a tally from parallel sequences of gold and predicted labels.

        Labels are converted to strings. Only labels that occur in `y_true` become
        gold rows and only labels that occur in `y_pred` become predicted columns.

        Args:
            y_true: Gold labels, one per instance
            y_pred: Predicted labels, one per instance
            format_cfg: Optional formatting options for the new tally

        Returns:
            LabelTally with one count per instance

        Raises:
            ValueError: If the sequences differ in length
        """
        y_true = np.asarray(y_true).astype(str)
        y_pred = np.asarray(y_pred).astype(str)
        if len(y_true) != len(y_pred):
            raise ValueError(f"y_true and y_pred differ in length: {len(y_true)} != {len(y_pred)}")

        result = cls(format_cfg)
        if len(y_true) == 0:
            return result

        gold_set = set(y_true.tolist())
        pred_set = set(y_pred.tolist())
        labels = sorted(gold_set | pred_set)
        cm = confusion_matrix(y_true, y_pred, labels=labels)

        for i, gold in enumerate(labels):
            if gold not in gold_set:
                continue
            for j, predicted in enumerate(labels):
                if predicted in pred_set:
                    result._add(gold, predicted, int(cm[i, j]))

        # keep the instance order rather than the grid order
        result._label_series = y_pred.tolist()
        logger.debug("Built tally from %d predictions (%d labels)", len(y_true), len(labels))
        return result

    @classmethod
    def parse(cls, text: str) -> "LabelTally":
        """Parse a table produced by `render` (see `labeltally.domain.parsing.parse_tally`)."""
        from labeltally.domain.parsing import parse_tally

        return parse_tally(text)

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    @property
    def gold_labels(self) -> tuple[str, ...]:
        return tuple(sorted(self._gold_labels))

    @property
    def predicted_labels(self) -> tuple[str, ...]:
        return tuple(sorted(self._predicted_labels))

    @property
    def label_series(self) -> tuple[str, ...]:
        """Predicted label of every recorded instance, in recording order."""
        return tuple(self._label_series)

    @property
    def total(self) -> int:
        return self._total

    @property
    def correct(self) -> int:
        return self._correct

    def cell(self, gold: str, predicted: str) -> int:
        return self._cells.get(gold, {}).get(predicted, 0)

    def cells(self) -> Iterator[tuple[str, str, int]]:
        """Yield stored (gold, predicted, count) triples in sorted order."""
        for gold in sorted(self._cells):
            row = self._cells[gold]
            for predicted in sorted(row):
                yield gold, predicted, row[predicted]

    def row_sum(self, label: str) -> int:
        """Sum of the row for gold `label`; 0 if it was never recorded as gold."""
        return sum(self._cells.get(label, {}).values())

    def col_sum(self, label: str) -> int:
        """Sum of the column for predicted `label` over all gold rows."""
        return sum(row.get(label, 0) for row in self._cells.values())

    # ------------------------------------------------------------------
    # Formatting options
    # ------------------------------------------------------------------

    @property
    def format(self) -> FormatConfig:
        return self._format

    @property
    def decimal_places(self) -> int:
        return self._format.decimal_places

    @decimal_places.setter
    def decimal_places(self, value: int) -> None:
        # validate_assignment: out-of-range values raise ValidationError and leave the old value
        self._format.decimal_places = value

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    @property
    def accuracy(self) -> float:
        """Fraction of correct instances; NaN for an empty tally."""
        if self._total == 0:
            return float("nan")
        return self._correct / self._total

    def precision(self, label: str) -> float:
        col = self.col_sum(label)
        if col <= 0:
            return 0.0
        return self.cell(label, label) / col

    def recall(self, label: str) -> float:
        row = self.row_sum(label)
        if row <= 0:
            return 0.0
        return self.cell(label, label) / row

    def f_measure(self, label: str, beta: float = 1.0) -> float:
        """
        F-measure for a single label.

        Args:
            label: Label to score
            beta: Higher than 1 favours recall, lower than 1 favours precision

        Returns:
            (1 + beta^2) * p * r / (beta^2 * p + r), or 0.0 when p + r == 0
        """
        p = self.precision(label)
        r = self.recall(label)
        if p + r <= 0:
            return 0.0
        b2 = beta * beta
        return (1.0 + b2) * (p * r) / (b2 * p + r)

    def precisions(self) -> dict[str, float]:
        return {label: self.precision(label) for label in self.gold_labels}

    def recalls(self) -> dict[str, float]:
        return {label: self.recall(label) for label in self.gold_labels}

    def f_measures(self, beta: float = 1.0) -> dict[str, float]:
        return {label: self.f_measure(label, beta) for label in self.gold_labels}

    def support(self) -> dict[str, int]:
        """Number of gold instances per gold label."""
        return {label: self.row_sum(label) for label in self.gold_labels}

    def macro_f_measure(self, beta: float = 1.0) -> float:
        """
        Macro-averaged F-measure: every gold label weighs the same regardless of
        its frequency, so rare labels influence it more than accuracy.
        """
        values = list(self.f_measures(beta).values())
        if not values:
            return float("nan")
        return float(np.mean(values))

    def micro_f_measure(self) -> float:
        """
        Micro-averaged F-measure over the gold rows.

        Pools true positives, row sums and column sums across all gold labels, so
        it is dominated by frequent labels; it equals accuracy whenever every
        predicted label is also a gold label.
        """
        if self._total == 0:
            return float("nan")

        tp = sum(self.cell(label, label) for label in self._cells)
        tp_fp = sum(self.col_sum(label) for label in self._cells)
        tp_fn = sum(self.row_sum(label) for label in self._cells)

        p = tp / tp_fp if tp_fp > 0 else 0.0
        r = tp / tp_fn if tp_fn > 0 else 0.0
        if p + r <= 0:
            return 0.0
        return 2.0 * p * r / (p + r)

    def average_precision(self) -> float:
        values = list(self.precisions().values())
        return float(np.mean(values)) if values else float("nan")

    def average_recall(self) -> float:
        values = list(self.recalls().values())
        return float(np.mean(values)) if values else float("nan")

    def cohens_kappa(self) -> float:
        """
        Cohen's kappa: accuracy corrected for the agreement expected by chance
        from the gold and predicted label marginals.

        Returns:
            (p - pe) / (1 - pe); NaN for an empty tally, 0.0 when pe == 1
        """
        if self._total == 0:
            return float("nan")

        p = self.accuracy
        pe = sum(self.row_sum(label) * self.col_sum(label) for label in self.gold_labels) / (self._total**2)
        if pe == 1.0:
            return 0.0
        return (p - pe) / (1.0 - pe)

    def accuracy_confidence(self, level: int = 95) -> ConfidenceInterval:
        """Normal-approximation interval on accuracy (levels 95 and 90)."""
        return normal_interval(self.accuracy, self._total, level, ACCURACY_Z_BY_LEVEL)

    def macro_f_confidence(self, level: int = 95) -> ConfidenceInterval:
        """Normal-approximation interval on macro F1 (levels 95 and 90)."""
        return normal_interval(self.macro_f_measure(), self._total, level, MACRO_F_Z_BY_LEVEL)

    # ------------------------------------------------------------------
    # Transforms
    # ------------------------------------------------------------------

    @classmethod
    def cumulative(cls, *tallies: "LabelTally") -> "LabelTally":
        """
        Sum any number of tallies cell by cell into a new tally.

        The result takes the formatting options of the first tally.
        """
        result = cls(tallies[0].format if tallies else None)
        for tally in tallies:
            for gold, predicted, count in tally.cells():
                result._add(gold, predicted, count)
        logger.debug("Combined %d tallies (total=%d)", len(tallies), result.total)
        return result

    def transpose(self) -> "LabelTally":
        """New tally with gold and predicted labels swapped in every cell."""
        result = LabelTally(self._format)
        for gold, predicted, count in self.cells():
            result._add(predicted, gold, count)
        return result

    def negative_unit_matrix(self) -> "LabelTally":
        """New tally with negated diagonal cells and zero-valued off-diagonal cells."""
        result = LabelTally(self._format)
        for gold, predicted, count in self.cells():
            result._add(gold, predicted, -count if gold == predicted else 0)
        return result

    def symmetric(self) -> "LabelTally":
        """
        Symmetric confusion matrix C + C^T - I o C.

        See Cinkova, Holub and Kriz (2012), "Managing uncertainty in semantic
        tagging", EACL '12, pp. 840-850.
        """
        return LabelTally.cumulative(self, self.transpose(), self.negative_unit_matrix())

    # ------------------------------------------------------------------
    # Export and rendering
    # ------------------------------------------------------------------

    def to_array(self) -> tuple[list[str], np.ndarray]:
        """Square count matrix over the sorted union of gold and predicted labels."""
        labels = sorted(self._gold_labels | self._predicted_labels)
        index = {label: i for i, label in enumerate(labels)}
        arr = np.zeros((len(labels), len(labels)), dtype=np.int64)
        for gold, predicted, count in self.cells():
            arr[index[gold], index[predicted]] = count
        return labels, arr

    def to_frame(self) -> pd.DataFrame:
        """Zero-filled DataFrame: rows are gold labels, columns follow the rendered column order."""
        columns = display_columns(self)
        rows = [[self.cell(gold, predicted) for predicted in columns] for gold in self.gold_labels]
        df = pd.DataFrame(rows, index=list(self.gold_labels), columns=columns, dtype="int64")
        df.index.name = "gold"
        df.columns.name = "predicted"
        return df

    def render(self) -> str:
        return render(self)

    def render_probabilistic(self) -> str:
        return render_probabilistic(self)

    def render_latex(self) -> str:
        return render_latex(self)

    def summary(self) -> str:
        return summary(self)

    def label_report(self) -> str:
        return label_report(self)

    def class_distribution(self) -> str:
        return class_distribution(self)

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LabelTally):
            return NotImplemented
        if self._gold_labels != other._gold_labels or self._predicted_labels != other._predicted_labels:
            return False
        return all(
            self.cell(gold, predicted) == other.cell(gold, predicted)
            for gold in self._gold_labels
            for predicted in self._predicted_labels
        )

    __hash__ = None  # mutable

    def __str__(self) -> str:
        return render(self)

    def __repr__(self) -> str:
        return (
            f"LabelTally(total={self._total}, correct={self._correct}, "
            f"gold_labels={list(self.gold_labels)}, predicted_labels={list(self.predicted_labels)})"
        )

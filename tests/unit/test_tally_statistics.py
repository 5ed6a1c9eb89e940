import math

import numpy as np
import pytest
from sklearn.metrics import cohen_kappa_score

from labeltally.domain.tally import LabelTally


def _sentiment_tally() -> LabelTally:
    # Rows are gold labels, columns predicted (neg, neu, pos)
    t = LabelTally()
    t.record("neg", "neg", 25)
    t.record("neg", "neu", 5)
    t.record("neg", "pos", 2)
    t.record("neu", "neg", 3)
    t.record("neu", "neu", 32)
    t.record("neu", "pos", 4)
    t.record("pos", "neg", 1)
    t.record("pos", "pos", 15)
    return t


def _abcd_tally() -> LabelTally:
    t = LabelTally()
    rows = {
        "A": {"A": 35, "B": 14, "C": 11, "D": 1},
        "B": {"A": 4, "B": 11, "C": 3},
        "C": {"A": 12, "B": 9, "C": 38, "D": 4},
        "D": {"A": 2, "B": 5, "C": 12, "D": 2},
    }
    for gold, row in rows.items():
        for predicted, count in row.items():
            t.record(gold, predicted, count)
    return t


def _expand(tally: LabelTally) -> tuple[list[str], list[str]]:
    y_true: list[str] = []
    y_pred: list[str] = []
    for gold, predicted, count in tally.cells():
        y_true.extend([gold] * count)
        y_pred.extend([predicted] * count)
    return y_true, y_pred


def test_row_and_col_sums() -> None:
    t = _sentiment_tally()
    assert t.row_sum("neg") == 32
    assert t.col_sum("neg") == 29
    assert t.total == 87
    assert t.correct == 72


def test_missing_label_sums_are_zero() -> None:
    t = _sentiment_tally()
    assert t.row_sum("unknown") == 0
    assert t.col_sum("unknown") == 0
    assert t.cell("neg", "unknown") == 0


def test_precision_and_recall() -> None:
    t = _sentiment_tally()
    assert t.precisions()["neg"] == pytest.approx(0.86, abs=0.01)
    assert t.recalls()["neg"] == pytest.approx(0.78, abs=0.01)
    assert t.precision("neg") == pytest.approx(25 / 29)
    assert t.recall("neg") == pytest.approx(25 / 32)


def test_precision_of_never_predicted_label_is_zero() -> None:
    t = LabelTally()
    t.record("a", "b", 3)
    assert t.precision("a") == 0.0
    assert t.recall("a") == 0.0
    assert t.f_measure("a") == 0.0


def test_micro_f_equals_accuracy_when_label_sets_match() -> None:
    t = _sentiment_tally()
    assert t.micro_f_measure() == pytest.approx(t.accuracy, abs=0.01)


def test_micro_f_with_prediction_only_label() -> None:
    t = LabelTally()
    t.record("1", "1")
    t.record("1", "2")
    t.record("2", "2")
    t.record("2", "3")

    # P = 2/3 (columns 1 and 2), R = 2/4
    assert t.micro_f_measure() == pytest.approx(4 / 7)
    assert t.accuracy == pytest.approx(0.5)


def test_f_measure_beta() -> None:
    t = _sentiment_tally()
    p, r = t.precision("neg"), t.recall("neg")

    assert t.f_measure("neg") == pytest.approx(2 * p * r / (p + r))
    assert t.f_measure("neg", beta=2.0) == pytest.approx(5 * p * r / (4 * p + r))
    assert list(t.f_measures(0.5)) == ["neg", "neu", "pos"]


def test_macro_f_is_mean_of_label_f() -> None:
    t = _sentiment_tally()
    expected = sum(t.f_measures().values()) / 3
    assert t.macro_f_measure() == pytest.approx(expected)
    assert t.macro_f_measure(2.0) == pytest.approx(sum(t.f_measures(2.0).values()) / 3)


def test_average_precision_and_recall() -> None:
    t = _sentiment_tally()
    assert t.average_precision() == pytest.approx(sum(t.precisions().values()) / 3)
    assert t.average_recall() == pytest.approx(sum(t.recalls().values()) / 3)


def test_accuracy_confidence_interval() -> None:
    t = _abcd_tally()

    assert t.accuracy == pytest.approx(0.5276, abs=0.0001)
    ci = t.accuracy_confidence(95)
    assert ci.low == pytest.approx(0.4479, abs=0.005)
    assert ci.high == pytest.approx(0.6073, abs=0.005)
    assert ci.value == t.accuracy


def test_ninety_percent_intervals_use_their_own_z() -> None:
    t = _abcd_tally()

    acc95, acc90 = t.accuracy_confidence(95), t.accuracy_confidence(90)
    assert acc90.half_width / acc95.half_width == pytest.approx(1.645 / 1.96)

    f95, f90 = t.macro_f_confidence(95), t.macro_f_confidence(90)
    assert f90.half_width / f95.half_width == pytest.approx(1.66 / 1.96)
    assert f95.half_width == pytest.approx(1.96 * math.sqrt(t.macro_f_measure() * (1 - t.macro_f_measure()) / t.total))


def test_unsupported_confidence_level_raises() -> None:
    with pytest.raises(ValueError, match="Unsupported confidence level"):
        _abcd_tally().accuracy_confidence(80)


def test_cohens_kappa_matches_sklearn() -> None:
    t = LabelTally()
    t.record("poor", "poor", 2)
    t.record("poor", "fair", 12)
    t.record("poor", "good", 8)
    t.record("fair", "poor", 9)
    t.record("fair", "fair", 35)
    t.record("fair", "good", 43)
    t.record("fair", "excellent", 7)
    t.record("good", "poor", 4)
    t.record("good", "fair", 36)
    t.record("good", "good", 103)
    t.record("good", "excellent", 40)
    t.record("excellent", "poor", 1)
    t.record("excellent", "fair", 8)
    t.record("excellent", "good", 36)
    t.record("excellent", "excellent", 22)

    y_true, y_pred = _expand(t)
    assert t.cohens_kappa() == pytest.approx(cohen_kappa_score(y_true, y_pred))


def test_sentiment_kappa_value() -> None:
    t = _sentiment_tally()
    pe = (32 * 29 + 39 * 37 + 16 * 21) / 87**2
    assert t.cohens_kappa() == pytest.approx((72 / 87 - pe) / (1 - pe))


def test_diagonal_cell_bounded_by_marginals() -> None:
    for t in (_sentiment_tally(), _abcd_tally()):
        for label in t.gold_labels:
            assert t.cell(label, label) <= min(t.row_sum(label), t.col_sum(label))


def test_empty_tally_statistics() -> None:
    t = LabelTally()
    assert math.isnan(t.accuracy)
    assert math.isnan(t.micro_f_measure())
    assert math.isnan(t.macro_f_measure())
    assert math.isnan(t.cohens_kappa())
    assert t.precision("x") == 0.0
    assert t.recall("x") == 0.0


def test_record_registers_labels_and_counts() -> None:
    t = LabelTally()
    t.record("a", "b", 0)
    t.record("c", "c")

    assert t.gold_labels == ("a", "c")
    assert t.predicted_labels == ("b", "c")
    assert t.total == 1
    assert t.correct == 1
    assert t.label_series == ("c",)


def test_record_rejects_negative_count() -> None:
    t = LabelTally()
    with pytest.raises(ValueError, match="non-negative"):
        t.record("a", "a", -1)
    assert t.total == 0
    assert t.gold_labels == ()


@pytest.mark.parametrize("count", [2.7, 2.0, "3", True])
def test_record_rejects_non_integer_count(count: object) -> None:
    t = LabelTally()
    with pytest.raises(TypeError, match="must be an integer"):
        t.record("a", "a", count)
    assert t.total == 0
    assert t.gold_labels == ()


def test_record_accepts_numpy_integer() -> None:
    t = LabelTally()
    t.record("a", "a", np.int64(4))
    assert t.total == 4
    assert type(t.total) is int


def test_kappa_is_zero_when_chance_agreement_is_total() -> None:
    # a single label: observed and expected agreement are both 1
    t = LabelTally()
    t.record("a", "a", 5)

    assert t.accuracy == 1.0
    assert t.cohens_kappa() == 0.0


def test_from_predictions() -> None:
    y_true = ["a", "a", "b", "c"]
    y_pred = ["a", "b", "b", "d"]

    t = LabelTally.from_predictions(y_true, y_pred)

    assert t.gold_labels == ("a", "b", "c")
    assert t.predicted_labels == ("a", "b", "d")
    assert t.cell("a", "b") == 1
    assert t.cell("c", "d") == 1
    assert t.total == 4
    assert t.correct == 2
    assert t.label_series == ("a", "b", "b", "d")
    assert t.cohens_kappa() == pytest.approx(cohen_kappa_score(y_true, y_pred))


def test_from_predictions_length_mismatch() -> None:
    with pytest.raises(ValueError, match="differ in length"):
        LabelTally.from_predictions(["a"], ["a", "b"])


def test_to_array_and_frame() -> None:
    t = LabelTally()
    t.record("1", "1")
    t.record("1", "2", 2)
    t.record("2", "3")

    labels, arr = t.to_array()
    assert labels == ["1", "2", "3"]
    assert arr.tolist() == [[1, 2, 0], [0, 0, 1], [0, 0, 0]]

    df = t.to_frame()
    assert list(df.index) == ["1", "2"]
    assert list(df.columns) == ["1", "2", "3"]
    assert int(df.loc["1", "2"]) == 2
    assert int(df.loc["2", "1"]) == 0

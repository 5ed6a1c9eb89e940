"""Text renderings of a label tally: aligned tables, LaTeX rows and summaries."""

from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from labeltally.domain.tally import LabelTally

# Header cell above the gold-label column
CORNER_LABEL = "↓gold\\pred→"


def display_columns(tally: "LabelTally") -> list[str]:
    """Gold labels in sorted order, then labels seen only as predictions (sorted)."""
    gold = list(tally.gold_labels)
    extra = sorted(set(tally.predicted_labels) - set(gold))
    return gold + extra


def grid(tally: "LabelTally") -> list[list[str]]:
    """Header row plus one zero-filled row of counts per gold label."""
    columns = display_columns(tally)
    table = [[CORNER_LABEL, *columns]]
    for gold in tally.gold_labels:
        table.append([gold, *(str(tally.cell(gold, predicted)) for predicted in columns)])
    return table


def probabilistic_grid(tally: "LabelTally") -> list[list[str]]:
    """Like `grid`, but every count is divided by its row sum and formatted with the tally's options."""
    fmt = tally.format
    columns = display_columns(tally)
    table = [[CORNER_LABEL, *columns]]
    for gold in tally.gold_labels:
        row_sum = tally.row_sum(gold)
        row = [gold]
        for predicted in columns:
            value = tally.cell(gold, predicted) / row_sum if row_sum else 0.0
            row.append(fmt.format_number(value))
        table.append(row)
    return table


def table_to_string(table: list[list[str]]) -> str:
    """Right-justify every cell to the longest entry in the table plus one."""
    width = max((len(value) for row in table for value in row), default=0) + 1
    return "".join("".join(value.rjust(width) for value in row) + "\n" for row in table)


def render(tally: "LabelTally") -> str:
    return table_to_string(grid(tally))


def render_probabilistic(tally: "LabelTally") -> str:
    return table_to_string(probabilistic_grid(tally))


def render_latex(tally: "LabelTally") -> str:
    """
    Render the count grid as LaTeX table rows.

    Cells are separated by "&", rows end with a LaTeX line break, and the
    header row and row labels are set in bold. No tabular environment is emitted.
    """
    lines: list[str] = []
    for i, row in enumerate(grid(tally)):
        parts: list[str] = []
        for j, value in enumerate(row):
            if (i == 0 or j == 0) and value:
                cell = f"\\textbf{{{value}}} "
            else:
                cell = f"{value} "
            if j < len(row) - 1:
                cell += "& "
            parts.append(cell)
        lines.append("".join(parts) + "\\\\\n")
    return "".join(lines)


def _plain_number(tally: "LabelTally") -> Callable[[float], str]:
    fmt = tally.format
    return lambda value: fmt.format_number(value, decimal_separator=".")


def summary(tally: "LabelTally") -> str:
    """
    One-line summary: macro F-measure, its 95% half-width, micro F-measure.

    Uses the tally's decimal places but always a "." separator, like `label_report`;
    only the probabilistic table follows `decimal_separator`.
    """
    num = _plain_number(tally)
    ci = tally.macro_f_confidence(95)
    return (
        f"Macro F-measure: {num(tally.macro_f_measure())}, "
        f"(CI at .95: {num(ci.half_width)}), "
        f"micro F-measure (acc): {num(tally.micro_f_measure())}"
    )


def label_report(tally: "LabelTally") -> str:
    """Per-label precision/recall/F1, e.g. ``P/R/Fm: neg=0.862/0.782/0.820 ...``."""
    num = _plain_number(tally)
    precisions = tally.precisions()
    recalls = tally.recalls()
    f_measures = tally.f_measures()

    entries = [f"{label}={num(p)}/{num(recalls[label])}/{num(f_measures[label])}" for label, p in precisions.items()]
    return " ".join(["P/R/Fm:", *entries])


def _percent(part: int, total: int) -> float:
    return part / total * 100.0 if total else float("nan")


def class_distribution(tally: "LabelTally") -> str:
    """
    Tab-separated gold vs. predicted class distribution.

    One line per gold label: label, gold count, gold %, predicted count,
    predicted %; followed by a ``Sum`` line with the total.
    """
    total = tally.total
    lines = ["Gold data distribution\t\tPredicted data distribution"]
    for label in tally.gold_labels:
        row_sum = tally.row_sum(label)
        col_sum = tally.col_sum(label)
        lines.append(
            f"{label}\t{row_sum}\t{_percent(row_sum, total):.1f}%\t{col_sum}\t{_percent(col_sum, total):.1f}%"
        )
    lines.append(f"Sum\t{total}")
    return "\n".join(lines)

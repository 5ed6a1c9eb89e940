"""Evaluation workflow and summary logging."""

import logging
from contextlib import nullcontext

from labeltally.domain.tally import LabelTally
from labeltally.infrastructure.config.models import ReportConfig, StatsConfig
from labeltally.infrastructure.observability import tally_log_context

logger = logging.getLogger(__name__)


def _round4(values: dict[str, float]) -> dict[str, float]:
    return {label: round(float(v), 4) for label, v in values.items()}


def compute_tally_metrics(tally: LabelTally, stats_cfg: StatsConfig) -> dict:
    """
    Compute the suite of metrics for a tally, including normal-approximation CIs.

    Per-label values are rounded to 4 places; aggregate values are left as is.

    Args:
        tally: Tally of gold vs. predicted labels
        stats_cfg: Statistics configuration (beta, confidence levels)

    Returns:
        Metrics dict (JSON-serializable apart from NaN for an empty tally)
    """
    labels, cm = tally.to_array()

    metrics: dict = {
        "labels": labels,
        "confusion_matrix": cm.tolist(),
        "total": tally.total,
        "correct": tally.correct,
        "accuracy": tally.accuracy,
        "macro_f": tally.macro_f_measure(stats_cfg.beta),
        "micro_f": tally.micro_f_measure(),
        "cohen_kappa": tally.cohens_kappa(),
        "average_precision": tally.average_precision(),
        "average_recall": tally.average_recall(),
        "precision_per_class": _round4(tally.precisions()),
        "recall_per_class": _round4(tally.recalls()),
        "f_per_class": _round4(tally.f_measures(stats_cfg.beta)),
        "support_per_class": tally.support(),
    }

    for level in stats_cfg.confidence_levels:
        metrics[f"accuracy_ci_{level}"] = tally.accuracy_confidence(level).as_list()
        metrics[f"macro_f_ci_{level}"] = tally.macro_f_confidence(level).as_list()

    return metrics


def log_evaluation_summary(tally: LabelTally, metrics: dict) -> None:
    """
    Log a concise, human-readable evaluation summary.

    Args:
        tally: The evaluated tally (its grid is logged at DEBUG)
        metrics: Output of compute_tally_metrics
    """
    logger.info("=== Evaluation Summary ===")
    logger.debug("Confusion matrix (rows=gold, cols=pred):\n%s", tally.render())

    if tally.total == 0:
        logger.info("Empty tally; no statistics to report.")
        return

    logger.info("Instances: %d (correct=%d)", metrics["total"], metrics["correct"])
    if "accuracy_ci_95" in metrics:
        logger.info(
            "Accuracy: %.4f (95%% CI [%.4f, %.4f])",
            metrics["accuracy"],
            metrics["accuracy_ci_95"][0],
            metrics["accuracy_ci_95"][1],
        )
    else:
        logger.info("Accuracy: %.4f", metrics["accuracy"])

    if "macro_f_ci_95" in metrics:
        logger.info(
            "Macro F: %.4f (95%% CI [%.4f, %.4f])",
            metrics["macro_f"],
            metrics["macro_f_ci_95"][0],
            metrics["macro_f_ci_95"][1],
        )
    else:
        logger.info("Macro F: %.4f", metrics["macro_f"])

    logger.info("Micro F: %.4f", metrics["micro_f"])
    logger.info("Cohen's kappa: %.4f", metrics["cohen_kappa"])

    # per-label metrics
    logger.info("Per-class precision: %s", metrics["precision_per_class"])
    logger.info("Per-class recall: %s", metrics["recall_per_class"])
    logger.info("Per-class F: %s", metrics["f_per_class"])
    logger.info("Per-class support: %s", metrics["support_per_class"])

    logger.info("%s", tally.summary())


def evaluate_tally(tally: LabelTally, cfg: ReportConfig, name: str | None = None) -> dict:
    """
    Compute metrics for a tally and log the summary.

    The report's format options are applied to a copy of the tally used for
    rendering; the caller's tally is not modified.

    Args:
        tally: Tally to evaluate
        cfg: Report configuration
        name: Optional tally name added to every log line

    Returns:
        Metrics dict (see compute_tally_metrics)
    """
    with tally_log_context(name) if name is not None else nullcontext():
        report_tally = LabelTally.cumulative(tally)
        report_tally.format.decimal_places = cfg.format.decimal_places
        report_tally.format.decimal_separator = cfg.format.decimal_separator

        metrics = compute_tally_metrics(report_tally, cfg.stats)
        log_evaluation_summary(report_tally, metrics)
    return metrics

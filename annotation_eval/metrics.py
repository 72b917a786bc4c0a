"""
Per-label evaluation metrics for UI element annotations.

Counts true positives, false positives and false negatives per label from a
MatchResult and derives precision, recall and F1 from them:
- TP: Ground-truth box matched to a same-label prediction
- FP: Prediction never claimed by a ground-truth box
- FN: Ground-truth box left without a match
"""

from dataclasses import asdict, dataclass
from typing import Dict, Iterable, Sequence, Tuple

from .boxes import Box, Label

EvaluationResult = Dict[Label, "Metrics"]


@dataclass(frozen=True)
class Metrics:
    total_ground_truth: int = 0
    true_positives: int = 0
    false_positives: int = 0
    false_negatives: int = 0
    precision: float = 0.0
    recall: float = 0.0
    f1_score: float = 0.0

    @classmethod
    def from_counts(cls, total_ground_truth: int, tp: int, fp: int, fn: int) -> "Metrics":
        precision, recall, f1 = derive_rates(tp, fp, fn)
        return cls(
            total_ground_truth=total_ground_truth,
            true_positives=tp,
            false_positives=fp,
            false_negatives=fn,
            precision=precision,
            recall=recall,
            f1_score=f1,
        )

    def to_dict(self) -> Dict:
        return asdict(self)


def derive_rates(tp: int, fp: int, fn: int) -> Tuple[float, float, float]:
    """
    Compute precision, recall and F1 from raw counts.

    Each rate falls back to 0.0 when its denominator is zero. F1 is computed
    from the derived precision and recall, not from the counts.

    Example:
        >>> derive_rates(3, 1, 0)
        (0.75, 1.0, 0.8571428571428571)
    """
    precision = tp / (tp + fp) if (tp + fp) > 0 else 0.0
    recall = tp / (tp + fn) if (tp + fn) > 0 else 0.0
    f1 = 2 * (precision * recall) / (precision + recall) if (precision + recall) > 0 else 0.0
    return precision, recall, f1


def empty_result() -> EvaluationResult:
    return {label: Metrics() for label in Label}


def tally_metrics(
    ground_truth: Sequence[Box],
    predictions: Sequence[Box],
    match_result,
) -> EvaluationResult:
    """
    Count TP/FP/FN per label and derive rates.

    Args:
        ground_truth: Ground-truth boxes the match was computed on
        predictions: Predicted boxes the match was computed on
        match_result: MatchResult with indices into both sequences

    Returns:
        Dict mapping every Label (in enum order) to its Metrics
    """
    total_gt = {label: 0 for label in Label}
    tp = {label: 0 for label in Label}
    fp = {label: 0 for label in Label}
    fn = {label: 0 for label in Label}

    for box in ground_truth:
        total_gt[box.label] += 1

    for gt_idx, _ in match_result.matches:
        tp[ground_truth[gt_idx].label] += 1

    for gt_idx in match_result.unmatched_gts:
        fn[ground_truth[gt_idx].label] += 1

    for pred_idx in match_result.unmatched_preds:
        fp[predictions[pred_idx].label] += 1

    return {
        label: Metrics.from_counts(total_gt[label], tp[label], fp[label], fn[label])
        for label in Label
    }


def combine_results(results: Iterable[EvaluationResult]) -> EvaluationResult:
    """
    Sum per-label counts over several evaluations and re-derive the rates.

    This is a micro average: every box counts once regardless of which image
    it came from.
    """
    totals = {label: [0, 0, 0, 0] for label in Label}

    for result in results:
        for label, m in result.items():
            counts = totals[label]
            counts[0] += m.total_ground_truth
            counts[1] += m.true_positives
            counts[2] += m.false_positives
            counts[3] += m.false_negatives

    return {label: Metrics.from_counts(*totals[label]) for label in Label}


def summarize(result: EvaluationResult) -> Dict[str, float]:
    """
    Average precision, recall and F1 over all labels (macro average).

    Labels with no boxes contribute zeros, same as the dashboard's overall
    performance card.
    """
    if not result:
        return {'precision': 0.0, 'recall': 0.0, 'f1': 0.0}

    n = len(result)
    return {
        'precision': sum(m.precision for m in result.values()) / n,
        'recall': sum(m.recall for m in result.values()) / n,
        'f1': sum(m.f1_score for m in result.values()) / n,
    }


def result_to_dict(result: EvaluationResult) -> Dict[str, Dict]:
    """JSON-ready view of an evaluation result, keyed by label name."""
    return {label.value: metrics.to_dict() for label, metrics in result.items()}

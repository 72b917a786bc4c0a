"""
IoU computation and box matching for annotation evaluation.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Sequence, Tuple

import numpy as np
from scipy.optimize import linear_sum_assignment

from .boxes import Box, Label
from .metrics import EvaluationResult, tally_metrics


class MatchStrategy(str, Enum):
    GREEDY = "greedy"
    OPTIMAL = "optimal"


@dataclass
class MatchResult:
    """
    One-to-one assignment between ground-truth and predicted boxes.

    matches holds (gt_idx, pred_idx) pairs; every index refers to the
    sequences passed to the matcher. A prediction index appears in at most
    one pair.
    """

    matches: List[Tuple[int, int]] = field(default_factory=list)
    unmatched_gts: List[int] = field(default_factory=list)
    unmatched_preds: List[int] = field(default_factory=list)

    def matched_prediction(self, gt_idx: int):
        """Prediction index paired with gt_idx, or None."""
        for g, p in self.matches:
            if g == gt_idx:
                return p
        return None


def compute_overlap(box1: Box, box2: Box) -> float:
    """
    Compute Intersection over Union (IoU) between two boxes.

    Labels are ignored. Degenerate boxes (zero union) give 0.0.

    Args:
        box1: First box (x, y, width, height)
        box2: Second box (x, y, width, height)

    Returns:
        IoU score (0.0 to 1.0)
    """
    # Compute intersection area
    inter_width = max(0, min(box1.x2, box2.x2) - max(box1.x, box2.x))
    inter_height = max(0, min(box1.y2, box2.y2) - max(box1.y, box2.y))
    inter_area = inter_width * inter_height

    # Compute union area
    union_area = box1.area + box2.area - inter_area

    # Avoid division by zero
    if union_area == 0:
        return 0.0

    # Negative-size boxes can push the ratio outside [0, 1]
    return min(1.0, max(0.0, inter_area / union_area))


def greedy_match_boxes(
    gt_boxes: Sequence[Box],
    pred_boxes: Sequence[Box],
    iou_threshold: float = 0.5
) -> MatchResult:
    """
    Greedy matching of ground truth boxes to predicted boxes.

    Matching strategy:
    - Visit ground truth boxes in input order
    - For each, scan unclaimed predictions with the same label
    - Keep the highest IoU (first index wins ties)
    - Claim it if IoU >= iou_threshold, otherwise the GT box is a FN

    Earlier ground truth boxes get first pick, so the result depends on input
    order and is not guaranteed to maximise the number of matches.

    Args:
        gt_boxes: Ground truth boxes
        pred_boxes: Predicted boxes
        iou_threshold: Minimum IoU for a valid match

    Returns:
        MatchResult with matched pairs and unmatched indices
    """
    claimed = set()
    result = MatchResult()

    for gt_idx, gt in enumerate(gt_boxes):
        best_iou = 0.0
        best_pred_idx = None

        for pred_idx, pred in enumerate(pred_boxes):
            if pred_idx in claimed or pred.label != gt.label:
                continue
            iou = compute_overlap(gt, pred)
            if iou > best_iou:
                best_iou = iou
                best_pred_idx = pred_idx

        if best_pred_idx is not None and best_iou >= iou_threshold:
            result.matches.append((gt_idx, best_pred_idx))
            claimed.add(best_pred_idx)
        else:
            result.unmatched_gts.append(gt_idx)

    result.unmatched_preds = [i for i in range(len(pred_boxes)) if i not in claimed]
    return result


def _indices_by_label(boxes: Sequence[Box]) -> Dict[Label, List[int]]:
    by_label = {}
    for idx, box in enumerate(boxes):
        by_label.setdefault(box.label, []).append(idx)
    return by_label


def optimal_match_boxes(
    gt_boxes: Sequence[Box],
    pred_boxes: Sequence[Box],
    iou_threshold: float = 0.5
) -> MatchResult:
    """
    Maximum-IoU one-to-one matching per label (Hungarian algorithm).

    Pairs assigned by the solver are kept only if their IoU is positive and
    >= iou_threshold. Unlike greedy_match_boxes, the result does not depend
    on the order of the inputs except for exact ties.

    Args:
        gt_boxes: Ground truth boxes
        pred_boxes: Predicted boxes
        iou_threshold: Minimum IoU for a valid match

    Returns:
        MatchResult with matched pairs (sorted by gt index) and unmatched indices
    """
    gt_by_label = _indices_by_label(gt_boxes)
    pred_by_label = _indices_by_label(pred_boxes)

    matched_gts = set()
    matched_preds = set()
    matches = []

    for label, gt_indices in gt_by_label.items():
        pred_indices = pred_by_label.get(label, [])
        if not pred_indices:
            continue

        # Compute IoU matrix (rows=GT, cols=pred)
        iou_matrix = np.zeros((len(gt_indices), len(pred_indices)))
        for i, gt_idx in enumerate(gt_indices):
            for j, pred_idx in enumerate(pred_indices):
                iou_matrix[i, j] = compute_overlap(gt_boxes[gt_idx], pred_boxes[pred_idx])

        rows, cols = linear_sum_assignment(iou_matrix, maximize=True)

        for i, j in zip(rows, cols):
            iou = iou_matrix[i, j]
            if iou > 0 and iou >= iou_threshold:
                gt_idx, pred_idx = gt_indices[i], pred_indices[j]
                matches.append((gt_idx, pred_idx))
                matched_gts.add(gt_idx)
                matched_preds.add(pred_idx)

    matches.sort()
    return MatchResult(
        matches=matches,
        unmatched_gts=[i for i in range(len(gt_boxes)) if i not in matched_gts],
        unmatched_preds=[i for i in range(len(pred_boxes)) if i not in matched_preds],
    )


MATCHERS = {
    MatchStrategy.GREEDY: greedy_match_boxes,
    MatchStrategy.OPTIMAL: optimal_match_boxes,
}


def assign_matches(
    ground_truth: Sequence[Box],
    predictions: Sequence[Box],
    iou_threshold: float = 0.5,
    strategy: MatchStrategy = MatchStrategy.GREEDY,
) -> MatchResult:
    """Run the matcher selected by strategy ("greedy" or "optimal")."""
    matcher = MATCHERS[MatchStrategy(strategy)]
    return matcher(ground_truth, predictions, iou_threshold)


def match_annotations(
    ground_truth: Sequence[Box],
    predictions: Sequence[Box],
    iou_threshold: float = 0.5,
    strategy: MatchStrategy = MatchStrategy.GREEDY,
) -> EvaluationResult:
    """
    Match predictions to ground truth for one image and score every label.

    Matching is one-to-one and only between boxes with the same label. No
    input validation happens here; see evaluator.evaluate().

    Args:
        ground_truth: Ground truth boxes
        predictions: Predicted boxes
        iou_threshold: Minimum IoU for a valid match (default: 0.5)
        strategy: Assignment policy (default: greedy)

    Returns:
        Dict mapping each Label to its Metrics

    Example:
        >>> gt = [Box(0, 0, 100, 50, Label.BUTTON)]
        >>> result = match_annotations(gt, gt)
        >>> result[Label.BUTTON].f1_score
        1.0
    """
    match_result = assign_matches(ground_truth, predictions, iou_threshold, strategy)
    return tally_metrics(ground_truth, predictions, match_result)

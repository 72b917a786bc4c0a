"""
Evaluation entry points: one image (evaluate) or a batch of saved projects
(evaluate_projects).
"""

import math
from typing import Callable, Dict, List, Optional, Sequence

from .boxes import Box, boxes_from_annotations, normalize_labels, validate_boxes
from .matching import MatchStrategy, match_annotations
from .metrics import EvaluationResult, combine_results, summarize


def check_iou_threshold(iou_threshold: float) -> float:
    if (isinstance(iou_threshold, bool)
            or not isinstance(iou_threshold, (int, float))
            or not math.isfinite(iou_threshold)):
        raise ValueError(f"iou_threshold must be a finite number, got {iou_threshold!r}")
    if not 0.0 <= iou_threshold <= 1.0:
        raise ValueError(f"iou_threshold must be in [0, 1], got {iou_threshold}")
    return float(iou_threshold)


def evaluate(
    ground_truth: Sequence[Box],
    predictions: Sequence[Box],
    iou_threshold: float = 0.5,
    strategy: MatchStrategy = MatchStrategy.GREEDY,
    validate: bool = True,
) -> EvaluationResult:
    """
    Score predicted boxes against ground truth for a single image.

    Args:
        ground_truth: Reference boxes drawn by an annotator
        predictions: Candidate boxes to score
        iou_threshold: Minimum IoU for a valid match (default: 0.5)
        strategy: "greedy" (default) or "optimal"
        validate: Reject negative sizes and non-finite coordinates before
                  matching (default: True). With False, degenerate boxes
                  flow through the arithmetic unchecked. Labels are
                  checked either way.

    Returns:
        Dict mapping every Label to its Metrics

    Raises:
        InvalidBoxError: If validate and a box has bad geometry
        InvalidLabelError: If a box has an unknown label
        ValueError: If iou_threshold is outside [0, 1]

    Example:
        >>> gt = [Box(0, 0, 100, 50, Label.BUTTON)]
        >>> results = evaluate(gt, gt)
        >>> print(f"Button F1: {results[Label.BUTTON].f1_score:.3f}")
        Button F1: 1.000
    """
    iou_threshold = check_iou_threshold(iou_threshold)

    # Labels are always checked; validate only covers geometry
    if validate:
        ground_truth = validate_boxes(ground_truth)
        predictions = validate_boxes(predictions)
    else:
        ground_truth = normalize_labels(ground_truth)
        predictions = normalize_labels(predictions)

    return match_annotations(ground_truth, predictions, iou_threshold, strategy)


def evaluate_projects(
    projects: List[Dict],
    predictions_by_id: Dict[str, List[Dict]],
    iou_threshold: float = 0.5,
    strategy: MatchStrategy = MatchStrategy.GREEDY,
    validate: bool = True,
    progress: Optional[Callable] = None,
) -> Dict:
    """
    Evaluate every saved project against its predictions.

    Projects without a predictions entry are scored against an empty
    prediction set, so all their boxes count as false negatives.

    Args:
        projects: Saved projects from io.load_projects()
        predictions_by_id: Mapping project id -> annotation records,
                           from io.load_predictions()
        iou_threshold: Minimum IoU for a valid match (default: 0.5)
        strategy: Assignment policy (default: greedy)
        validate: Passed through to evaluate()
        progress: Optional wrapper for the project iterable (e.g. tqdm)

    Returns:
        {
            "projects": [
                {"id": "p1", "name": "Login page", "num_ground_truth": 4,
                 "num_predictions": 5, "has_predictions": True,
                 "results": {Label.BUTTON: Metrics(...), ...},
                 "summary": {"precision": .., "recall": .., "f1": ..}},
                ...
            ],
            "combined": {Label.BUTTON: Metrics(...), ...},
            "summary": {"precision": .., "recall": .., "f1": ..}
        }
    """
    iterable = progress(projects) if progress is not None else projects

    reports = []
    for project in iterable:
        project_id = str(project['id'])
        ground_truth = boxes_from_annotations(project.get('annotations', []))
        has_predictions = project_id in predictions_by_id
        predictions = boxes_from_annotations(predictions_by_id.get(project_id, []))

        results = evaluate(
            ground_truth, predictions,
            iou_threshold=iou_threshold,
            strategy=strategy,
            validate=validate,
        )

        reports.append({
            'id': project_id,
            'name': project.get('name', project_id),
            'num_ground_truth': len(ground_truth),
            'num_predictions': len(predictions),
            'has_predictions': has_predictions,
            'results': results,
            'summary': summarize(results),
        })

    combined = combine_results(r['results'] for r in reports)

    return {
        'projects': reports,
        'combined': combined,
        'summary': summarize(combined),
    }

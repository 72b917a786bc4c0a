"""
Annotation Evaluation for UI Element Labelling

This package scores predicted UI-element annotations (Button, Input, Radio,
Drop boxes on a screenshot) against human-drawn ground truth.

Main Components:
- boxes: Box/Label types and boundary validation
- matching: IoU computation and one-to-one box matching per label
- metrics: Per-label TP/FP/FN counts and P/R/F1
- evaluator: evaluate() for one image, evaluate_projects() for a batch
- io: Load saved projects and predictions, save metrics
- config: YAML evaluation settings
- plots: Visualization functions

Usage:
    from annotation_eval import Box, Label, evaluate

    gt = [Box(0, 0, 100, 50, Label.BUTTON)]
    preds = [Box(2, 1, 98, 50, Label.BUTTON)]

    results = evaluate(gt, preds, iou_threshold=0.5)
    print(results[Label.BUTTON].f1_score)
"""

from .boxes import (
    AnnotationError,
    Box,
    InvalidBoxError,
    InvalidLabelError,
    Label,
    box_from_dict,
)
from .evaluator import evaluate, evaluate_projects
from .matching import MatchResult, MatchStrategy, compute_overlap, match_annotations
from .metrics import Metrics, derive_rates

__version__ = "1.0.0"

__all__ = [
    "AnnotationError",
    "Box",
    "InvalidBoxError",
    "InvalidLabelError",
    "Label",
    "MatchResult",
    "MatchStrategy",
    "Metrics",
    "box_from_dict",
    "compute_overlap",
    "derive_rates",
    "evaluate",
    "evaluate_projects",
    "match_annotations",
]

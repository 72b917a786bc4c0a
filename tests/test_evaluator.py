from __future__ import annotations

import math

import pytest

from annotation_eval import (
    Box,
    InvalidBoxError,
    InvalidLabelError,
    Label,
    MatchStrategy,
    evaluate,
    evaluate_projects,
)


def test_evaluate_returns_every_label_in_order(button: Box) -> None:
    result = evaluate([button], [button])
    assert list(result) == [Label.BUTTON, Label.INPUT, Label.RADIO, Label.DROP]
    assert result[Label.BUTTON].f1_score == 1.0


def test_evaluate_with_no_predictions_zeroes_rates() -> None:
    gt = [
        Box(0, 0, 10, 10, Label.BUTTON),
        Box(20, 0, 10, 10, Label.BUTTON),
        Box(0, 20, 10, 10, Label.RADIO),
    ]

    result = evaluate(gt, [])

    for label in (Label.BUTTON, Label.RADIO):
        m = result[label]
        assert (m.precision, m.recall, m.f1_score) == (0.0, 0.0, 0.0)
        assert m.false_negatives == m.total_ground_truth
    assert result[Label.BUTTON].total_ground_truth == 2


def test_evaluate_with_nothing() -> None:
    result = evaluate([], [])
    assert all(m.total_ground_truth == 0 and m.f1_score == 0.0 for m in result.values())


def test_evaluate_accepts_iterables(button: Box) -> None:
    result = evaluate(iter([button]), (b for b in [button]))
    assert result[Label.BUTTON].true_positives == 1


def test_evaluate_rejects_negative_size() -> None:
    bad = Box(0, 0, -10, 10, Label.BUTTON)
    with pytest.raises(InvalidBoxError):
        evaluate([bad], [])
    with pytest.raises(InvalidBoxError):
        evaluate([], [bad])


def test_evaluate_rejects_non_finite() -> None:
    with pytest.raises(InvalidBoxError):
        evaluate([Box(0, 0, math.inf, 10, Label.BUTTON)], [])


def test_evaluate_rejects_unknown_label() -> None:
    with pytest.raises(InvalidLabelError):
        evaluate([Box(0, 0, 10, 10, "Slider")], [])


def test_evaluate_rejects_unknown_label_without_validation() -> None:
    with pytest.raises(InvalidLabelError, match="Slider"):
        evaluate([Box(0, 0, 10, 10, "Slider")], [], validate=False)
    with pytest.raises(InvalidLabelError):
        evaluate([], [Box(0, 0, 10, 10, "Slider")], validate=False)


@pytest.mark.parametrize("validate", [True, False])
def test_evaluate_accepts_plain_string_labels(validate: bool) -> None:
    gt = [Box(0, 0, 10, 10, "Button")]
    preds = [Box(0, 0, 10, 10, Label.BUTTON)]

    result = evaluate(gt, preds, validate=validate)

    assert result[Label.BUTTON].true_positives == 1
    assert list(result) == list(Label)


def test_evaluate_without_validation_tolerates_degenerate_boxes() -> None:
    gt = [Box(0, 0, -10, 10, Label.BUTTON)]
    preds = [Box(0, 0, 10, 10, Label.BUTTON)]

    result = evaluate(gt, preds, validate=False)

    m = result[Label.BUTTON]
    assert (m.true_positives, m.false_positives, m.false_negatives) == (0, 1, 1)


@pytest.mark.parametrize("threshold", [-0.1, 1.5, math.nan, "0.5", True])
def test_evaluate_rejects_bad_threshold(button: Box, threshold) -> None:
    with pytest.raises(ValueError):
        evaluate([button], [button], iou_threshold=threshold)


def test_evaluate_threshold_changes_outcome() -> None:
    gt = [Box(0, 0, 10, 10, Label.DROP)]
    preds = [Box(5, 0, 10, 10, Label.DROP)]  # IoU = 1/3

    assert evaluate(gt, preds, iou_threshold=0.5)[Label.DROP].true_positives == 0
    assert evaluate(gt, preds, iou_threshold=0.3)[Label.DROP].true_positives == 1


def test_evaluate_strategy_by_name(button: Box) -> None:
    result = evaluate([button], [button], strategy="optimal")
    assert result[Label.BUTTON].true_positives == 1


def test_evaluate_projects(projects: list[dict], predictions_doc: dict) -> None:
    predictions = {"p1": predictions_doc["predictions"][0]["annotations"]}

    evaluation = evaluate_projects(projects, predictions)

    p1, p2 = evaluation["projects"]
    assert p1["id"] == "p1"
    assert p1["name"] == "Login page"
    assert p1["has_predictions"] is True
    assert p1["num_ground_truth"] == 2
    assert p1["num_predictions"] == 2
    assert p1["results"][Label.BUTTON].true_positives == 1
    assert p1["results"][Label.INPUT].false_negatives == 1
    assert p1["results"][Label.DROP].false_positives == 1

    assert p2["has_predictions"] is False
    assert p2["results"][Label.RADIO].false_negatives == 1

    combined = evaluation["combined"]
    assert combined[Label.BUTTON].precision == 1.0
    assert combined[Label.RADIO].total_ground_truth == 1
    assert sum(m.total_ground_truth for m in combined.values()) == 3
    assert evaluation["summary"]["recall"] == pytest.approx(0.25)


def test_evaluate_projects_uses_progress_wrapper(projects: list[dict]) -> None:
    seen = []

    def progress(items):
        for item in items:
            seen.append(item["id"])
            yield item

    evaluate_projects(projects, {}, strategy=MatchStrategy.OPTIMAL, progress=progress)

    assert seen == ["p1", "p2"]


def test_evaluate_projects_rejects_bad_annotation(projects: list[dict]) -> None:
    projects[1]["annotations"].append({"x": 0, "y": 0, "width": 5, "height": 5, "label": "Slider"})
    with pytest.raises(InvalidLabelError):
        evaluate_projects(projects, {})

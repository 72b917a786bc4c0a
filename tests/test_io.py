from __future__ import annotations

import csv
import json
from pathlib import Path

import pytest

from annotation_eval import Label, Metrics
from annotation_eval.io import load_predictions, load_projects, save_metrics, save_summary_csv
from annotation_eval.metrics import empty_result


def test_load_projects_from_list(projects: list[dict], write_json) -> None:
    path = write_json("projects.json", projects)
    loaded = load_projects(str(path))
    assert [p["id"] for p in loaded] == ["p1", "p2"]


def test_load_projects_from_wrapped_document(projects: list[dict], write_json) -> None:
    path = write_json("projects.json", {"projects": projects})
    assert len(load_projects(str(path))) == 2


def test_load_projects_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_projects(str(tmp_path / "nope.json"))


def test_load_projects_empty(write_json) -> None:
    with pytest.raises(ValueError, match="No projects"):
        load_projects(str(write_json("projects.json", [])))


def test_load_projects_requires_id(write_json) -> None:
    with pytest.raises(ValueError, match="has no 'id'"):
        load_projects(str(write_json("projects.json", [{"name": "x", "annotations": []}])))


def test_load_projects_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "projects.json"
    path.write_text("{not json")
    with pytest.raises(ValueError, match="not valid JSON"):
        load_projects(str(path))


def test_load_predictions_keys_by_id(predictions_doc: dict, write_json) -> None:
    predictions_doc["predictions"].append(
        {"image_id": 7, "annotations": [{"label": "Radio", "x": 0, "y": 0, "width": 1, "height": 1}]}
    )
    predictions_doc["predictions"].append(
        {"project_id": "p1", "annotations": [{"label": "Radio", "x": 0, "y": 0, "width": 1, "height": 1}]}
    )
    path = write_json("predictions.json", predictions_doc)

    predictions = load_predictions(str(path))

    assert set(predictions) == {"p1", "7"}
    assert len(predictions["p1"]) == 3
    assert len(predictions["7"]) == 1


def test_load_predictions_requires_entries(write_json) -> None:
    with pytest.raises(ValueError, match="No predictions"):
        load_predictions(str(write_json("predictions.json", {"predictions": []})))


def test_load_predictions_requires_id(write_json) -> None:
    with pytest.raises(ValueError, match="project_id"):
        load_predictions(str(write_json("predictions.json", {"predictions": [{"annotations": []}]})))


def test_save_metrics(tmp_path: Path) -> None:
    path = tmp_path / "out" / "metrics.json"
    save_metrics({"run_name": "demo", "summary": {"f1": 0.5}}, str(path))
    assert json.loads(path.read_text()) == {"run_name": "demo", "summary": {"f1": 0.5}}


def test_save_summary_csv(tmp_path: Path) -> None:
    result = empty_result()
    result[Label.BUTTON] = Metrics.from_counts(2, 1, 1, 1)
    path = tmp_path / "summary.csv"

    save_summary_csv(result, str(path))

    with open(path, newline="") as f:
        rows = list(csv.reader(f))
    assert rows[0] == ["label", "total_ground_truth", "tp", "fp", "fn", "precision", "recall", "f1"]
    assert rows[1] == ["Button", "2", "1", "1", "1", "0.5000", "0.5000", "0.5000"]
    assert [r[0] for r in rows[1:]] == ["Button", "Input", "Radio", "Drop"]

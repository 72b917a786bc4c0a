"""
I/O utilities for loading annotation projects and predictions, and saving results.
"""

import csv
import json
from pathlib import Path
from typing import Dict, List

from .metrics import EvaluationResult, result_to_dict


def _read_json(path: Path, what: str):
    if not path.exists():
        raise FileNotFoundError(f"{what} file not found: {path}")

    with open(path, 'r') as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"{what} file {path} is not valid JSON: {e}") from e


def load_projects(projects_path: str) -> List[Dict]:
    """
    Load saved annotation projects (the ground truth).

    Args:
        projects_path: Path to the projects JSON file

    Returns:
        List of projects in format:
        [
            {
                "id": str,
                "name": str,
                "image": str,               # data URL or image URL
                "annotations": [
                    {"id": str, "x": float, "y": float,
                     "width": float, "height": float, "label": "Button"},
                    ...
                ],
                "createdAt": str,
                "updatedAt": str
            },
            ...
        ]

        Both a bare list and {"projects": [...]} are accepted.

    Raises:
        FileNotFoundError: If projects file doesn't exist
        ValueError: If the file holds no projects or a project has no id
    """
    projects_path = Path(projects_path)
    data = _read_json(projects_path, "Projects")

    projects = data.get('projects', []) if isinstance(data, dict) else data

    if not projects:
        raise ValueError(f"No projects found in {projects_path}")

    for i, project in enumerate(projects):
        if 'id' not in project:
            raise ValueError(f"Project #{i} in {projects_path} has no 'id'")

    return projects


def load_predictions(predictions_path: str) -> Dict[str, List[Dict]]:
    """
    Load predicted annotations, keyed by project id.

    Args:
        predictions_path: Path to predictions JSON file

    Expected format:
        {
            "model": str,                       # optional
            "predictions": [
                {
                    "project_id": str,          # or "image_id"
                    "annotations": [
                        {"label": "Input", "bbox": {"x": .., "y": .., "width": .., "height": ..}},
                        ...
                    ]
                },
                ...
            ]
        }

    Returns:
        Dict mapping project id to its list of annotation records

    Raises:
        FileNotFoundError: If predictions file doesn't exist
        ValueError: If no predictions are found or an entry has no id
    """
    predictions_path = Path(predictions_path)
    data = _read_json(predictions_path, "Predictions")

    entries = data.get('predictions', []) if isinstance(data, dict) else data

    if not entries:
        raise ValueError(f"No predictions found in {predictions_path}")

    predictions = {}
    for i, entry in enumerate(entries):
        project_id = entry.get('project_id', entry.get('image_id'))
        if project_id is None:
            raise ValueError(f"Prediction entry #{i} in {predictions_path} has no project_id/image_id")
        predictions.setdefault(str(project_id), []).extend(entry.get('annotations', []))

    return predictions


def save_metrics(results: Dict, output_path: str):
    """
    Save evaluation results to JSON file.

    Args:
        results: Dictionary containing evaluation metrics (JSON-serialisable)
        output_path: Path to save JSON file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w') as f:
        json.dump(results, f, indent=2)

    print(f"✓ Saved metrics to: {output_path}")


def save_summary_csv(result: EvaluationResult, output_path: str):
    """
    Save a per-label summary CSV for easy copy-paste into reports.

    Args:
        result: Per-label metrics from evaluate() or combine_results()
        output_path: Path to save CSV file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    rows = result_to_dict(result)

    with open(output_path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(['label', 'total_ground_truth', 'tp', 'fp', 'fn', 'precision', 'recall', 'f1'])

        for label, metrics in rows.items():
            writer.writerow([
                label,
                metrics['total_ground_truth'],
                metrics['true_positives'],
                metrics['false_positives'],
                metrics['false_negatives'],
                f"{metrics['precision']:.4f}",
                f"{metrics['recall']:.4f}",
                f"{metrics['f1_score']:.4f}"
            ])

    print(f"✓ Saved summary CSV to: {output_path}")

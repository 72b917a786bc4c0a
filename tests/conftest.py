from __future__ import annotations

import json
from pathlib import Path

import pytest

from annotation_eval import Box, Label


@pytest.fixture
def button() -> Box:
    return Box(0, 0, 100, 50, Label.BUTTON)


@pytest.fixture
def projects() -> list[dict]:
    return [
        {
            "id": "p1",
            "name": "Login page",
            "image": "data:image/png;base64,",
            "annotations": [
                {"id": "a1", "x": 0, "y": 0, "width": 100, "height": 50, "label": "Button"},
                {"id": "a2", "x": 0, "y": 100, "width": 200, "height": 30, "label": "Input"},
            ],
            "createdAt": "2024-05-01T10:00:00.000Z",
            "updatedAt": "2024-05-01T10:05:00.000Z",
        },
        {
            "id": "p2",
            "name": "Settings",
            "image": "data:image/png;base64,",
            "annotations": [
                {"id": "b1", "x": 10, "y": 10, "width": 20, "height": 20, "label": "Radio"},
            ],
            "createdAt": "2024-05-02T10:00:00.000Z",
            "updatedAt": "2024-05-02T10:00:00.000Z",
        },
    ]


@pytest.fixture
def predictions_doc() -> dict:
    return {
        "model": "stub",
        "predictions": [
            {
                "project_id": "p1",
                "annotations": [
                    {"label": "Button", "bbox": {"x": 0, "y": 0, "width": 100, "height": 50}},
                    {"label": "Drop", "bbox": {"x": 300, "y": 300, "width": 40, "height": 40}},
                ],
            },
        ],
    }


@pytest.fixture
def write_json(tmp_path: Path):
    def _write(name: str, data) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data))
        return path

    return _write

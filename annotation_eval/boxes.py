"""
Annotation boxes and the closed label set for UI-element annotation.
"""

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Iterable, List


class AnnotationError(ValueError):
    """Base error for annotations rejected at the evaluation boundary."""


class InvalidBoxError(AnnotationError):
    """Box has negative width/height or non-finite coordinates."""


class InvalidLabelError(AnnotationError):
    """Box label is not one of the supported UI element classes."""


class Label(str, Enum):
    BUTTON = "Button"
    INPUT = "Input"
    RADIO = "Radio"
    DROP = "Drop"

    @classmethod
    def parse(cls, value) -> "Label":
        """
        Convert a label value ("Button", Label.BUTTON, ...) to a Label.

        Raises:
            InvalidLabelError: If value is not one of the four labels
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(label.value for label in cls)
            raise InvalidLabelError(
                f"Unknown label {value!r} (expected one of: {valid})"
            ) from None


@dataclass(frozen=True)
class Box:
    """
    Axis-aligned rectangle in image-pixel space (origin top-left).

    Values are not validated on construction; see validate_box().
    """

    x: float
    y: float
    width: float
    height: float
    label: Label

    @property
    def x2(self) -> float:
        return self.x + self.width

    @property
    def y2(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    def to_dict(self) -> Dict:
        return {
            'x': self.x,
            'y': self.y,
            'width': self.width,
            'height': self.height,
            'label': self.label.value,
        }


def normalize_label(box: Box) -> Box:
    """
    Return box with its label converted to a Label ("Button" -> Label.BUTTON).

    Raises:
        InvalidLabelError: If the label is not one of the four labels
    """
    if isinstance(box.label, Label):
        return box
    return replace(box, label=Label.parse(box.label))


def normalize_labels(boxes: Iterable[Box]) -> List[Box]:
    return [normalize_label(box) for box in boxes]


def validate_box(box: Box) -> Box:
    """
    Check a box before it enters the matcher.

    Returns:
        The box, with its label normalized to a Label

    Raises:
        InvalidLabelError: If the label is not one of the four labels
        InvalidBoxError: If a coordinate is non-finite or width/height < 0
    """
    box = normalize_label(box)

    coords = (box.x, box.y, box.width, box.height)
    if not all(math.isfinite(v) for v in coords):
        raise InvalidBoxError(f"Non-finite coordinates in {box}")

    if box.width < 0 or box.height < 0:
        raise InvalidBoxError(
            f"Negative size {box.width}x{box.height} for {box.label.value} box at ({box.x}, {box.y})"
        )

    return box


def validate_boxes(boxes: Iterable[Box]) -> List[Box]:
    return [validate_box(box) for box in boxes]


def box_from_dict(item: Dict) -> Box:
    """
    Build a Box from an annotation record.

    Accepts both shapes the annotation tool writes:
        {"x": .., "y": .., "width": .., "height": .., "label": "Button"}
        {"label": "Button", "bbox": {"x": .., "y": .., "width": .., "height": ..}}

    Extra keys (e.g. "id") are ignored.

    Raises:
        InvalidLabelError: If the label is missing or unknown
        InvalidBoxError: If a coordinate is missing or not a number
    """
    geometry = item.get('bbox', item)
    label = Label.parse(item.get('label'))

    try:
        x, y, width, height = (
            float(geometry[key]) for key in ('x', 'y', 'width', 'height')
        )
    except KeyError as e:
        raise InvalidBoxError(f"Annotation is missing {e.args[0]!r}: {item}") from None
    except (TypeError, ValueError):
        raise InvalidBoxError(f"Annotation has non-numeric geometry: {item}") from None

    return Box(x=x, y=y, width=width, height=height, label=label)


def boxes_from_annotations(items: Iterable[Dict]) -> List[Box]:
    return [box_from_dict(item) for item in items]

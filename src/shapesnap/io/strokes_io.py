"""
Loading strokes and boards from JSON files.
"""

import json
import os
from typing import List

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from shapesnap.models import Board, Point, to_points
from shapesnap.tracer import get_tracer, trace


class StrokeRecord(BaseModel):
    """One stroke read from disk: its points plus the pen it was drawn with."""
    points: List[Point]
    color: str = "#ffffff"
    stroke_width: float = Field(default=4.0, ge=0.0)


def _read_json(path):
    if not os.path.exists(path):
        raise FileNotFoundError(f"File not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e


@trace(label="load_strokes")
def load_strokes(path):
    """
    Load strokes from a JSON file.

    Accepts a list of strokes or {"strokes": [...]}. Each stroke is either a
    list of points ([x, y] or {"x": .., "y": ..}) or an object with "points"
    and optional "color" and "stroke_width".

    Raises FileNotFoundError if path does not exist.
    Raises ValueError if the content is not a stroke list.
    """
    data = _read_json(path)

    if isinstance(data, dict):
        data = data.get("strokes")
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of strokes in {path}")

    records = []
    for idx, item in enumerate(data):
        try:
            if isinstance(item, dict):
                record = StrokeRecord(
                    points=to_points(item["points"]),
                    color=item.get("color", "#ffffff"),
                    stroke_width=item.get("stroke_width", 4.0),
                )
            else:
                record = StrokeRecord(points=to_points(item))
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            raise ValueError(f"Stroke {idx} in {path} is malformed: {e}") from e
        records.append(record)

    get_tracer().event(f"Loaded {len(records)} strokes from {path}")
    return records


def load_board(path):
    """
    Load board elements from a JSON file.

    Accepts a list of elements or {"elements": [...]}.
    """
    data = _read_json(path)

    if isinstance(data, list):
        data = {"elements": data}

    try:
        board = TypeAdapter(Board).validate_python(data)
    except ValidationError as e:
        raise ValueError(f"Invalid board in {path}: {e}") from e

    return board.elements

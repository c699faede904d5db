"""
Artifact saving utilities for ShapeSnap.

Handles writing JSON results and debug overlays that show how each stroke
was classified.
"""

import json
import os

import cv2
import numpy as np

from shapesnap.geometry.metrics import bounding_box
from shapesnap.models import Point
from shapesnap.tracer import get_tracer


def ensure_dir(path):
    """Create directory if it does not exist."""
    if path:
        os.makedirs(path, exist_ok=True)


def save_json(data, path, indent=2):
    """
    Save a dictionary, list or Pydantic model to JSON.
    """
    ensure_dir(os.path.dirname(path))

    if hasattr(data, "model_dump"):
        data = data.model_dump(mode="json")
    elif isinstance(data, list):
        data = [d.model_dump(mode="json") if hasattr(d, "model_dump") else d for d in data]

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent, default=str)

    get_tracer().event(f"Saved JSON: {path}")


def save_image(img, path):
    """Save an RGB image to disk (converted to BGR for OpenCV)."""
    ensure_dir(os.path.dirname(path))

    if len(img.shape) == 3 and img.shape[2] == 3:
        img = cv2.cvtColor(img, cv2.COLOR_RGB2BGR)
    cv2.imwrite(path, img)
    get_tracer().event(f"Saved image: {path}")


def draw_overlay(size, origin, polylines=None, points=None, texts=None, polyline_colors=None,
                 point_color=(255, 0, 0), text_color=(0, 0, 0), scale=1.0):
    """
    Draw a debug overlay on a white RGB canvas.

    size: (width, height) of the canvas
    origin: Point mapped to canvas pixel (0, 0)
    scale: canvas pixels per drawing unit
    polylines: list of Point sequences
    points: list of (Point, radius) tuples
    texts: list of ((x, y), text) tuples in canvas pixels
    """
    width, height = size
    canvas = np.full((height, width, 3), 255, dtype=np.uint8)

    def to_px(p):
        return int(round((p.x - origin.x) * scale)), int(round((p.y - origin.y) * scale))

    for i, polyline in enumerate(polylines or []):
        if len(polyline) < 2:
            continue
        color = polyline_colors[i] if polyline_colors else (0, 160, 0)
        pts = np.array([to_px(p) for p in polyline], dtype=np.int32)
        cv2.polylines(canvas, [pts], isClosed=False, color=color, thickness=1)

    for pt, radius in points or []:
        cv2.circle(canvas, to_px(pt), radius, point_color, -1)

    for (x, y), text in texts or []:
        cv2.putText(canvas, str(text), (int(x), int(y)), cv2.FONT_HERSHEY_SIMPLEX, 0.4, text_color, 1)

    return canvas


def create_analysis_overlay(points, analysis, margin=20, max_size=1024):
    """
    Overlay of one stroke: raw path in gray, resampled path in green,
    corners as red dots, and the verdict as a caption.

    Drawn at one pixel per unit, except that strokes too large for a
    max_size canvas are scaled down uniformly to fit.
    """
    box = bounding_box(points)
    scale = min(1.0, (max_size - 2 * margin - 1) / max(box.width, box.height, 1.0))
    origin = Point(x=box.x - margin / scale, y=box.y - margin / scale)
    size = (int(box.width * scale) + 2 * margin + 1, int(box.height * scale) + 2 * margin + 1)

    caption = f"{analysis.verdict.kind.value} ({analysis.rule}) corners={len(analysis.corners)}"
    return draw_overlay(
        size,
        origin,
        polylines=[list(points), analysis.resampled],
        polyline_colors=[(160, 160, 160), (0, 160, 0)],
        points=[(p, 3) for p in analysis.corner_points],
        texts=[((4, 12), caption)],
        scale=scale,
    )


class DebugArtifactWriter:
    """
    Helper class to manage debug artifact writing for one run.

    Files land in <out_dir>/debug/.
    """

    def __init__(self, out_dir, enabled=True, max_strokes=50, margin=20, max_size=1024):
        self.out_dir = out_dir
        self.enabled = enabled
        self.max_strokes = max_strokes
        self.margin = margin
        self.max_size = max_size
        self._written = 0

    @property
    def debug_dir(self):
        return os.path.join(self.out_dir, "debug")

    def save_analysis(self, index, points, analysis):
        """Save the overlay and measurements for one stroke."""
        if not self.enabled or self._written >= self.max_strokes:
            return
        self._written += 1

        stem = f"stroke_{index:03d}"
        overlay = create_analysis_overlay(
            points, analysis, margin=self.margin, max_size=self.max_size,
        )
        save_image(overlay, os.path.join(self.debug_dir, f"{stem}.png"))
        save_json(analysis.model_dump(mode="json", exclude={"resampled"}),
                  os.path.join(self.debug_dir, f"{stem}.json"))

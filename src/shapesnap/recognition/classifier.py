"""
Stroke classifier: decides which primitive, if any, a finished stroke is.

The decision is a cascade of cheap gates followed by corner counting on a
resampled copy of the stroke, with ratio-based fallbacks for strokes whose
corners are unreliable (smooth circles, soft triangle tips):

    1. too few points            -> none
    2. nearly straight end to end -> line
    3. too open to be closed     -> none
    4. 3 corners -> triangle, 4 corners -> square
    5. radius / area ratio fallbacks, defaulting to square
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from shapesnap.config import RecognitionConfig
from shapesnap.geometry.metrics import (
    area_ratio, bounding_box, distance, path_length, radius_ratio,
)
from shapesnap.geometry.resample import resample
from shapesnap.models import BoundingBox, Point, ShapeKind, ShapeVerdict
from shapesnap.recognition.corners import clean_corners, find_corners
from shapesnap.recognition.vertices import triangle_vertices
from shapesnap.tracer import get_tracer, trace


class StrokeAnalysis(BaseModel):
    """Intermediate measurements behind a verdict, for debugging and reports."""
    verdict: ShapeVerdict
    rule: str
    point_count: int
    length: float = 0.0
    gap: float = 0.0
    bbox: BoundingBox = Field(default_factory=BoundingBox)
    spacing: float = 0.0
    resampled: List[Point] = Field(default_factory=list)
    corners: List[int] = Field(default_factory=list)
    radius_ratio: Optional[float] = None
    area_ratio: Optional[float] = None

    model_config = ConfigDict(frozen=True)

    @property
    def corner_points(self):
        return [self.resampled[i] for i in self.corners]


def classify(points, config=None):
    """
    Classify a stroke as a line, triangle, square, circle or nothing.

    Deterministic and side-effect free; never raises for a finite point
    sequence.

    Args:
        points: sequence of Points in capture order
        config: RecognitionConfig (defaults when omitted)

    Returns:
        ShapeVerdict
    """
    return analyze(points, config).verdict


@trace(label="analyze_stroke")
def analyze(points, config=None):
    """
    Run the full decision procedure and keep every intermediate value.

    Returns:
        StrokeAnalysis whose verdict is what classify() returns
    """
    if config is None:
        config = RecognitionConfig()
    tracer = get_tracer()

    n = len(points)
    if n < config.min_points:
        return _finish(StrokeAnalysis(verdict=ShapeVerdict.none(), rule="too_few_points", point_count=n))

    length = path_length(points)
    gap = distance(points[0], points[-1])
    bbox = bounding_box(points)
    measured = dict(point_count=n, length=length, gap=gap, bbox=bbox)

    if gap > config.line_ratio * length:
        return _finish(StrokeAnalysis(verdict=ShapeVerdict(kind=ShapeKind.LINE), rule="straight", **measured))

    if gap > config.closure_ratio * length:
        return _finish(StrokeAnalysis(verdict=ShapeVerdict.none(), rule="open_path", **measured))

    spacing = max(config.min_spacing, bbox.diagonal / config.spacing_divisor)
    closed = list(points) + [points[0]]
    resampled = resample(closed, spacing)

    raw_corners = find_corners(
        resampled,
        window=config.straw_window,
        straw_ratio=config.straw_ratio,
        min_points=config.min_corner_points,
    )
    corners = clean_corners(
        raw_corners,
        len(resampled),
        merge_gap=config.corner_merge_gap,
        wraparound_gap=config.wraparound_gap,
    )
    tracer.event("Corners", raw=len(raw_corners), cleaned=len(corners), spacing=spacing)

    measured.update(spacing=spacing, resampled=resampled, corners=corners)
    corner_count = len(corners)

    if corner_count == 3:
        verdict = ShapeVerdict(kind=ShapeKind.TRIANGLE, vertices=[resampled[i] for i in corners])
        return _finish(StrokeAnalysis(verdict=verdict, rule="three_corners", **measured))

    if corner_count == 4:
        return _finish(StrokeAnalysis(verdict=ShapeVerdict(kind=ShapeKind.SQUARE), rule="four_corners", **measured))

    r_ratio = radius_ratio(points, bbox.center)
    a_ratio = area_ratio(points, bbox)
    measured.update(radius_ratio=r_ratio, area_ratio=a_ratio)

    kind, rule = _fallback(corner_count, r_ratio, a_ratio, config)
    if kind == ShapeKind.TRIANGLE:
        # a zero-length stroke resamples to a single point
        source = resampled if len(resampled) >= 3 else points
        verdict = ShapeVerdict(kind=kind, vertices=triangle_vertices(source))
    else:
        verdict = ShapeVerdict(kind=kind)

    return _finish(StrokeAnalysis(verdict=verdict, rule=rule, **measured))


def _fallback(corner_count, r_ratio, a_ratio, config):
    """Ratio-based decision for corner counts other than 3 or 4."""
    if corner_count == 0 and r_ratio < config.circle_radius_ratio_no_corners:
        return ShapeKind.CIRCLE, "round_no_corners"

    if r_ratio < config.circle_radius_ratio:
        return ShapeKind.CIRCLE, "round"

    if a_ratio > config.square_area_ratio:
        return ShapeKind.SQUARE, "fills_box"

    if a_ratio < config.triangle_area_ratio:
        return ShapeKind.TRIANGLE, "tapers"

    if corner_count == 5:
        return ShapeKind.SQUARE, "five_corners"

    # Every closed stroke that reaches this point is labelled a square.
    return ShapeKind.SQUARE, "default"


def _finish(analysis):
    get_tracer().event(
        f"Verdict: {analysis.verdict.kind.value} ({analysis.rule})",
        points=analysis.point_count,
    )
    return analysis

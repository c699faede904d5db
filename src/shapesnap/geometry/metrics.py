"""
Path metrics over point sequences.

All functions are total: empty or degenerate input yields a zero value
rather than an error.
"""

import math

import numpy as np

from shapesnap.models import BoundingBox, Point


def distance(p, q):
    """Euclidean distance between two points."""
    return math.hypot(p.x - q.x, p.y - q.y)


def path_length(points):
    """Sum of consecutive distances; 0 for one point or none."""
    total = 0.0
    for i in range(1, len(points)):
        total += distance(points[i - 1], points[i])
    return total


def bounding_box(points):
    """
    Compute the axis-aligned bounding box of a point sequence.

    Returns a zero box for an empty sequence.
    """
    if not points:
        return BoundingBox()

    xs = [p.x for p in points]
    ys = [p.y for p in points]
    min_x, min_y = min(xs), min(ys)
    return BoundingBox(x=min_x, y=min_y, width=max(xs) - min_x, height=max(ys) - min_y)


def distance_to_segment(p, v, w):
    """
    Distance from p to the segment v-w.

    The projection of p is clamped to the segment; a zero-length segment
    degenerates to distance(p, v).
    """
    l2 = (w.x - v.x) ** 2 + (w.y - v.y) ** 2
    if l2 == 0:
        return distance(p, v)

    t = ((p.x - v.x) * (w.x - v.x) + (p.y - v.y) * (w.y - v.y)) / l2
    t = max(0.0, min(1.0, t))
    nearest = Point(x=v.x + t * (w.x - v.x), y=v.y + t * (w.y - v.y))
    return distance(p, nearest)


def polygon_area(points):
    """Shoelace area magnitude, treating the sequence as a closed polygon."""
    if len(points) < 3:
        return 0.0

    xs = np.array([p.x for p in points], dtype=float)
    ys = np.array([p.y for p in points], dtype=float)
    twice_area = np.dot(xs, np.roll(ys, -1)) - np.dot(np.roll(xs, -1), ys)
    return abs(float(twice_area)) / 2.0


def centroid(points):
    """Mean position of a point sequence; the origin when empty."""
    if not points:
        return Point(x=0.0, y=0.0)

    return Point(
        x=sum(p.x for p in points) / len(points),
        y=sum(p.y for p in points) / len(points),
    )


def radius_ratio(points, center):
    """
    Coefficient of variation of the distances from center.

    Low values mean a near-constant radius. Returns 1.0 when the mean
    radius is zero.
    """
    if not points:
        return 1.0

    radii = np.array([distance(p, center) for p in points])
    mean_radius = float(radii.mean())
    if mean_radius <= 0:
        return 1.0
    return float(radii.std()) / mean_radius


def area_ratio(points, bbox):
    """Polygon area over bounding box area; 0.0 for a flat box."""
    box_area = bbox.area
    if box_area <= 0:
        return 0.0
    return polygon_area(points) / box_area

"""Pytest fixtures for ShapeSnap tests."""

import math
import tempfile

import numpy as np
import pytest

from shapesnap.models import Point


def trace_polygon(vertices, step=2.0, start_fraction=0.5):
    """
    Sample a closed polygon outline every ~step units, the way a pen would.

    The stroke starts start_fraction of the way along the first edge and
    stops one step short of where it began.
    """
    points = []
    first_count = None
    closed = list(vertices) + [vertices[0]]
    for (ax, ay), (bx, by) in zip(closed, closed[1:]):
        count = max(1, int(round(math.hypot(bx - ax, by - ay) / step)))
        if first_count is None:
            first_count = count
        for j in range(count):
            t = j / count
            points.append(Point(x=ax + t * (bx - ax), y=ay + t * (by - ay)))

    shift = int(round(first_count * start_fraction))
    return points[shift:] + points[:shift]


def circle_points(cx, cy, radius, count=100):
    """Points on a circle, not repeating the first."""
    angles = np.linspace(0, 2 * np.pi, count, endpoint=False)
    return [Point(x=cx + radius * np.cos(a), y=cy + radius * np.sin(a)) for a in angles]


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def square_stroke():
    """100x100 square traced clockwise from the middle of the top edge."""
    return trace_polygon([(0, 0), (100, 0), (100, 100), (0, 100)])


@pytest.fixture
def rectangle_stroke():
    """200x100 rectangle traced clockwise from the middle of the top edge."""
    return trace_polygon([(20, 30), (220, 30), (220, 130), (20, 130)])


@pytest.fixture
def triangle_stroke():
    """Equilateral triangle with side 120, apex up."""
    h = 60 * math.sqrt(3)
    return trace_polygon([(60, 0), (120, h), (0, h)])


@pytest.fixture
def right_triangle_stroke():
    """Right triangle with legs of 200 along the axes."""
    return trace_polygon([(0, 0), (200, 0), (0, 200)])


@pytest.fixture
def circle_stroke():
    """Circle of radius 50 around (100, 100)."""
    return circle_points(100, 100, 50)


@pytest.fixture
def line_stroke():
    """Twenty evenly spaced collinear points."""
    return [Point(x=10 * i, y=5 * i) for i in range(20)]


@pytest.fixture
def default_config():
    """Create default engine configuration."""
    from shapesnap.config import EngineConfig
    return EngineConfig()

"""
Path resampling.

Resampling re-parameterizes a stroke to near-uniform spacing along its arc
length, which the corner detector depends on.
"""

from shapesnap.geometry.metrics import distance
from shapesnap.models import Point


def resample(points, spacing):
    """
    Resample a point sequence to approximately uniform spacing.

    Walks the path accumulating distance since the last emitted point. When
    the next segment would carry the walk past `spacing`, the point at exactly
    `spacing` is interpolated, emitted, and becomes the new anchor of the walk,
    so the remainder of that segment is measured from it. The input is never
    modified.

    Args:
        points: sequence of Points
        spacing: target distance between consecutive output points

    Returns:
        new list of Points, starting at points[0]; sequences of two points
        or fewer come back unchanged
    """
    if len(points) <= 2:
        return list(points)

    if spacing <= 0:
        raise ValueError(f"spacing must be positive, got {spacing}")

    result = [points[0]]
    anchor = points[0]
    travelled = 0.0
    i = 1

    while i < len(points):
        target = points[i]
        d = distance(anchor, target)

        if travelled + d >= spacing:
            t = (spacing - travelled) / d
            q = Point(x=anchor.x + t * (target.x - anchor.x),
                      y=anchor.y + t * (target.y - anchor.y))
            result.append(q)
            anchor = q
            travelled = 0.0
        else:
            travelled += d
            anchor = target
            i += 1

    return result

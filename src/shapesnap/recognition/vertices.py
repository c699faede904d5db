"""
Triangle vertex extraction by greedy farthest-point search.
"""

import numpy as np

from shapesnap.geometry.metrics import centroid, distance, distance_to_segment


def triangle_vertices(points):
    """
    Pick three well-separated points that approximate a triangle's corners.

    P1 is the point farthest from the centroid, P2 the point farthest from
    P1, and P3 the point farthest from the segment P1-P2. Ties go to the
    earliest point. No winding order is imposed.

    Args:
        points: sequence of Points, typically a resampled stroke

    Returns:
        list of 3 Points, or a copy of the input when it has fewer than 3
    """
    if len(points) < 3:
        return list(points)

    center = centroid(points)
    p1 = points[int(np.argmax([distance(p, center) for p in points]))]
    p2 = points[int(np.argmax([distance(p, p1) for p in points]))]
    p3 = points[int(np.argmax([distance_to_segment(p, p1, p2) for p in points]))]

    return [p1, p2, p3]

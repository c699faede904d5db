"""
Corner detection on resampled strokes using the "straw" method.

The straw at index i is the chord between the points `window` steps before
and after i. Along a straight run the chord spans about 2 * window *
spacing; where the path folds it shortens sharply, so corners show up as
local minima of the straw.
"""

import numpy as np

from shapesnap.tracer import get_tracer


def compute_straws(points, window):
    """
    Straw length at every index that has a full window on both sides.

    Returns a float array of len(points); indices without a full window
    hold NaN.
    """
    n = len(points)
    arr = np.array([[p.x, p.y] for p in points], dtype=float).reshape(-1, 2)
    straws = np.full(n, np.nan)
    if n > 2 * window:
        chords = arr[2 * window:] - arr[:n - 2 * window]
        straws[window:n - window] = np.hypot(chords[:, 0], chords[:, 1])
    return straws


def average_spacing(points):
    """Mean distance between consecutive points; 0.0 for fewer than two."""
    if len(points) < 2:
        return 0.0
    arr = np.array([[p.x, p.y] for p in points], dtype=float)
    steps = np.diff(arr, axis=0)
    return float(np.hypot(steps[:, 0], steps[:, 1]).mean())


def find_corners(points, window=3, straw_ratio=0.95, min_points=10):
    """
    Find the indices of likely corners in a resampled, closed stroke.

    A corner is a strict local minimum of the straw that is also shorter
    than straw_ratio times the straight-line span of the window.

    Args:
        points: resampled Points, first point repeated at the end
        window: half-window W in resampled steps
        straw_ratio: fraction of the straight span a corner straw must undercut
        min_points: below this many points no corners are reported

    Returns:
        ascending list of corner indices
    """
    n = len(points)
    if n < min_points:
        return []

    straws = compute_straws(points, window)
    threshold = straw_ratio * 2 * window * average_spacing(points)

    corners = []
    for i in range(window + 1, n - window - 1):
        if straws[i] < straws[i - 1] and straws[i] < straws[i + 1] and straws[i] < threshold:
            corners.append(i)

    get_tracer().event(
        f"Straw corners: {len(corners)} of {n} points",
        level="DEBUG", threshold=threshold,
    )
    return corners


def clean_corners(corners, resampled_length, merge_gap=3, wraparound_gap=4):
    """
    Merge near-duplicate corners and drop a double-counted seam corner.

    A corner survives only if it lies more than merge_gap indices after the
    corner before it in the raw list. Then, if the last and first survivors
    straddle the start/end seam of the closed loop within fewer than
    wraparound_gap steps, the last one is dropped.
    """
    if not corners:
        return []

    cleaned = [corners[0]]
    for previous, current in zip(corners, corners[1:]):
        if current - previous > merge_gap:
            cleaned.append(current)

    if len(cleaned) > 1:
        first, last = cleaned[0], cleaned[-1]
        if (resampled_length - last) + first < wraparound_gap:
            cleaned.pop()

    return cleaned

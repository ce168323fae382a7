"""
Polyline simplification using Ramer-Douglas-Peucker algorithm.

Reduces the number of points while preserving shape within tolerance.
"""

import numpy as np

from sketchify.tracer import get_tracer, trace


@trace(label="simplify_polylines")
def simplify_polylines(polylines, epsilon):
    """
    Simplify all polylines using RDP algorithm.

    Args:
        polylines: list of polylines, each [(x, y), ...]
        epsilon: maximum perpendicular distance threshold

    Returns:
        list of simplified polylines
    """
    tracer = get_tracer()

    simplified = []
    total_points_before = 0
    total_points_after = 0

    for polyline in polylines:
        total_points_before += len(polyline)
        simple = simplify(polyline, epsilon)
        simplified.append(simple)
        total_points_after += len(simple)

    reduction = 1 - (total_points_after / total_points_before) if total_points_before > 0 else 0
    tracer.event(f"Simplified: {total_points_before} -> {total_points_after} points ({reduction:.1%} reduction)")

    return simplified


def simplify(points, epsilon):
    """
    Ramer-Douglas-Peucker simplification of a polyline.

    Endpoints are always kept. A non-positive epsilon only drops points
    lying exactly on the chord.
    """
    if len(points) <= 2:
        return list(points)

    points_arr = np.asarray(points, dtype=float)
    keep = []
    _rdp(points_arr, 0, len(points) - 1, epsilon, keep)

    result = [points[0]]
    result.extend(points[i] for i in keep)
    return result


def _rdp(points, start, end, epsilon, keep):
    """
    Recursively collect indices to keep between start and end (exclusive
    of start, inclusive of end).
    """
    if end - start < 2:
        keep.append(end)
        return

    # Find point with maximum distance from line between first and last
    distances = _perpendicular_distances(points[start + 1:end], points[start], points[end])
    max_offset = int(np.argmax(distances))
    max_dist = distances[max_offset]

    if max_dist > epsilon:
        split = start + 1 + max_offset
        _rdp(points, start, split, epsilon, keep)
        _rdp(points, split, end, epsilon, keep)
    else:
        # All points within tolerance, keep only the end
        keep.append(end)


def _perpendicular_distances(points, start, end):
    """
    Compute distances from each point to the segment from start to end.
    """
    line_vec = end - start
    line_len = np.linalg.norm(line_vec)

    if line_len == 0:
        # Start and end are the same point
        return np.linalg.norm(points - start, axis=1)

    line_unit = line_vec / line_len

    # Project onto line, clamped to the segment
    projections = np.dot(points - start, line_unit)
    projections = np.clip(projections, 0, line_len)

    nearest = start + np.outer(projections, line_unit)

    return np.linalg.norm(points - nearest, axis=1)

"""
Adaptive cubic bezier flattening.

Subdivides cubic beziers at their midpoint until each piece is flat
enough, producing a polyline.
"""

import math

from sketchify.curves.simplify import simplify


def lerp(a, b, t):
    """Linear interpolation between two points."""
    return (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t)


def flatness(points, offset=0):
    """
    Flatness of the cubic whose control points start at points[offset].

    Squared maximal deviation of the two inner control points from the
    chord; zero for a straight line with evenly spaced handles.
    """
    p1 = points[offset + 0]
    p2 = points[offset + 1]
    p3 = points[offset + 2]
    p4 = points[offset + 3]

    ux = (3 * p2[0] - 2 * p1[0] - p4[0]) ** 2
    uy = (3 * p2[1] - 2 * p1[1] - p4[1]) ** 2
    vx = (3 * p3[0] - 2 * p4[0] - p1[0]) ** 2
    vy = (3 * p3[1] - 2 * p4[1] - p1[1]) ** 2

    return max(ux, vx) + max(uy, vy)


def _points_on_segment_with_splitting(points, offset, tolerance, out_points):
    if flatness(points, offset) < tolerance:
        p0 = points[offset + 0]
        if out_points:
            # Merge into the previous point when nearly coincident
            if math.dist(out_points[-1], p0) > 1:
                out_points.append(p0)
        else:
            out_points.append(p0)
        out_points.append(points[offset + 3])
    else:
        # de Casteljau split at t = 0.5
        t = 0.5
        p1 = points[offset + 0]
        p2 = points[offset + 1]
        p3 = points[offset + 2]
        p4 = points[offset + 3]

        q1 = lerp(p1, p2, t)
        q2 = lerp(p2, p3, t)
        q3 = lerp(p3, p4, t)

        r1 = lerp(q1, q2, t)
        r2 = lerp(q2, q3, t)

        red = lerp(r1, r2, t)

        _points_on_segment_with_splitting([p1, q1, r1, red], 0, tolerance, out_points)
        _points_on_segment_with_splitting([red, r2, q3, p4], 0, tolerance, out_points)

    return out_points


def points_on_bezier_curves(points, tolerance=0.15, distance=0):
    """
    Flatten a chain of cubic beziers into a polyline.

    Args:
        points: control points of length 1 + 3n, consecutive cubics share
            their end/start point
        tolerance: flatness threshold for subdivision
        distance: RDP simplification distance, skipped when not positive

    Returns:
        list of (x, y) points
    """
    new_points = []
    num_segments = (len(points) - 1) // 3
    for i in range(num_segments):
        _points_on_segment_with_splitting(points, i * 3, tolerance, new_points)

    if distance and distance > 0:
        return simplify(new_points, distance)

    return new_points

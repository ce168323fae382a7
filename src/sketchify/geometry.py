"""
Planar geometry primitives for Sketchify.

Orientation, segment intersection, point-in-polygon and rotation helpers
used by the hachure generator and filler.
"""

import math
import sys
from typing import List, Optional

import numpy as np

from sketchify.models import Line, Point


COLLINEAR = 0
CLOCKWISE = 1
COUNTERCLOCKWISE = 2


def orientation(p, q, r):
    """
    Orientation of the ordered triplet (p, q, r).

    Returns COLLINEAR, CLOCKWISE or COUNTERCLOCKWISE.
    """
    val = (q[1] - p[1]) * (r[0] - q[0]) - (q[0] - p[0]) * (r[1] - q[1])
    if val == 0:
        return COLLINEAR
    return CLOCKWISE if val > 0 else COUNTERCLOCKWISE


def on_segment(p, q, r):
    """Check if q lies within the bounding box of segment pr (assumes collinear)."""
    return (
        min(p[0], r[0]) <= q[0] <= max(p[0], r[0])
        and min(p[1], r[1]) <= q[1] <= max(p[1], r[1])
    )


def do_intersect(p1, q1, p2, q2):
    """Check if segment p1q1 intersects segment p2q2."""
    o1 = orientation(p1, q1, p2)
    o2 = orientation(p1, q1, q2)
    o3 = orientation(p2, q2, p1)
    o4 = orientation(p2, q2, q1)

    if o1 != o2 and o3 != o4:
        return True

    # Collinear cases where an endpoint lies on the other segment
    if o1 == COLLINEAR and on_segment(p1, p2, q1):
        return True
    if o2 == COLLINEAR and on_segment(p1, q2, q1):
        return True
    if o3 == COLLINEAR and on_segment(p2, p1, q2):
        return True
    if o4 == COLLINEAR and on_segment(p2, q1, q2):
        return True

    return False


def line_intersection(a: Point, b: Point, c: Point, d: Point) -> Optional[Point]:
    """
    Intersection of the infinite lines ab and cd.

    Returns None when the lines are parallel.
    """
    a1 = b[1] - a[1]
    b1 = a[0] - b[0]
    c1 = a1 * a[0] + b1 * a[1]
    a2 = d[1] - c[1]
    b2 = c[0] - d[0]
    c2 = a2 * c[0] + b2 * c[1]

    determinant = a1 * b2 - a2 * b1
    if determinant == 0:
        return None

    return ((b2 * c1 - b1 * c2) / determinant, (a1 * c2 - a2 * c1) / determinant)


def is_point_in_polygon(points: List[Point], x: float, y: float) -> bool:
    """
    Ray-casting point-in-polygon test with the even-odd rule.

    Points on an edge count as inside. Polygons with fewer than three
    vertices contain nothing.
    """
    vertices = len(points)
    if vertices < 3:
        return False

    extreme = (sys.float_info.max, y)
    p = (x, y)
    count = 0
    for i in range(vertices):
        current = points[i]
        following = points[(i + 1) % vertices]
        if do_intersect(current, following, p, extreme):
            if orientation(current, p, following) == COLLINEAR:
                return on_segment(current, p, following)
            count += 1

    return count % 2 == 1


def line_length(line: Line) -> float:
    """Euclidean length of a line segment."""
    (x1, y1), (x2, y2) = line
    return math.hypot(x1 - x2, y1 - y2)


def rotate_points(points: List[Point], center: Point, degrees: float) -> List[Point]:
    """
    Rotate points about center by an angle in degrees.

    Returns a new list of (x, y) tuples.
    """
    if len(points) == 0:
        return []

    angle = math.radians(degrees)
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    rotation = np.array([[cos_a, -sin_a], [sin_a, cos_a]])

    pts = np.asarray(points, dtype=float)
    origin = np.asarray(center, dtype=float)
    rotated = (pts - origin) @ rotation.T + origin

    return [(float(px), float(py)) for px, py in rotated]


def rotate_lines(lines: List[Line], center: Point, degrees: float) -> List[Line]:
    """Rotate both endpoints of every line about center."""
    if not lines:
        return []

    flat = [p for line in lines for p in line]
    rotated = rotate_points(flat, center, degrees)
    return [(rotated[i], rotated[i + 1]) for i in range(0, len(rotated), 2)]

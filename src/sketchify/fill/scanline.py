"""
Scanline hachure generation.

Produces parallel fill lines clipped to a polygon with an even-odd
active-edge sweep. Non-horizontal angles are handled by rotating the
polygon, sweeping horizontally and rotating the lines back.
"""

import math
from dataclasses import dataclass

from sketchify.geometry import rotate_lines, rotate_points
from sketchify.tracer import get_tracer, trace


@dataclass
class EdgeEntry:
    """Polygon edge state for the scanline sweep."""
    ymin: float
    ymax: float
    x: float
    islope: float


@trace(label="polygon_hachure_lines")
def polygon_hachure_lines(points, config):
    """
    Compute hachure lines for a polygon.

    Args:
        points: polygon vertices [(x, y), ...]
        config: RoughConfig supplying hachure_angle, hachure_gap and
            stroke_width

    Returns:
        list of ((x1, y1), (x2, y2)) lines in the polygon's coordinates
    """
    tracer = get_tracer()

    if len(points) < 2:
        return []

    rotation_center = (0.0, 0.0)
    angle = _round_half_away(config.hachure_angle + 90)
    if angle:
        points = rotate_points(points, rotation_center, angle)

    lines = _straight_hachure_lines(points, config)

    if angle:
        lines = rotate_lines(lines, rotation_center, -angle)

    tracer.event(f"Generated {len(lines)} hachure lines at {angle} degrees")
    return lines


def _round_half_away(value):
    """Round to the nearest integer with halves away from zero."""
    rounded = math.floor(abs(value) + 0.5)
    return rounded if value >= 0 else -rounded


def _hachure_gap(config):
    gap = config.hachure_gap
    if gap < 0:
        gap = config.stroke_width * 4
    return max(gap, 0.1)


def _straight_hachure_lines(points, config):
    """Horizontal scanline sweep over a polygon."""
    vertices = [tuple(p) for p in points]
    if vertices[0] != vertices[-1]:
        vertices.append(vertices[0])

    lines = []
    if len(vertices) <= 2:
        return lines

    gap = _hachure_gap(config)

    edges = []
    for i in range(len(vertices) - 1):
        p1 = vertices[i]
        p2 = vertices[i + 1]
        if p1[1] != p2[1]:
            ymin = min(p1[1], p2[1])
            edges.append(EdgeEntry(
                ymin=ymin,
                ymax=max(p1[1], p2[1]),
                x=p1[0] if ymin == p1[1] else p2[0],
                islope=(p2[0] - p1[0]) / (p2[1] - p1[1]),
            ))

    edges.sort(key=lambda e: (e.ymin, e.x, e.ymax))
    if not edges:
        return lines

    active = []
    y = edges[0].ymin
    while active or edges:
        # Move edges that start at or above the scanline into the active set
        taken = 0
        for edge in edges:
            if edge.ymin > y:
                break
            taken += 1
        if taken:
            active.extend(edges[:taken])
            del edges[:taken]

        active = [edge for edge in active if edge.ymax > y]
        active.sort(key=lambda e: e.x)

        if len(active) > 1:
            for i in range(0, len(active) - 1, 2):
                ce = active[i]
                ne = active[i + 1]
                lines.append(((_round_half_away(ce.x), y), (_round_half_away(ne.x), y)))

        y += gap
        for edge in active:
            edge.x = edge.x + gap * edge.islope

    return lines

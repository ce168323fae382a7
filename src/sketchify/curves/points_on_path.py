"""
Path data to polylines.

Drives parse -> absolutize -> normalize -> flatten and returns one
polyline per subpath.
"""

from sketchify.curves.flatten import points_on_bezier_curves
from sketchify.curves.simplify import simplify_polylines
from sketchify.path.absolutize import absolutize
from sketchify.path.normalize import normalize
from sketchify.path.parser import parse_path
from sketchify.tracer import get_tracer, trace


@trace(label="points_on_path")
def points_on_path(path, tolerance=1.0, distance=0):
    """
    Convert SVG path data into a list of polylines.

    Consecutive cubic segments are flattened together so the flatness test
    sees a continuous chain.

    Args:
        path: SVG path data string
        tolerance: flatness tolerance for curve subdivision
        distance: RDP simplification distance, skipped when falsy

    Returns:
        list of polylines, each a list of (x, y) points

    Raises:
        PathSyntaxError: if the path data is malformed
    """
    tracer = get_tracer()

    segments = normalize(absolutize(parse_path(path)))

    sets = []
    current_points = []
    start = (0.0, 0.0)
    pending_curve = []

    def append_pending_curve():
        if len(pending_curve) >= 4:
            current_points.extend(points_on_bezier_curves(pending_curve, tolerance))
        pending_curve.clear()

    def append_pending_points():
        append_pending_curve()
        if current_points:
            sets.append(list(current_points))
            current_points.clear()

    for segment in segments:
        data = segment.data
        if segment.key == "M":
            append_pending_points()
            start = (data[0], data[1])
            current_points.append(start)
        elif segment.key == "L":
            append_pending_curve()
            current_points.append((data[0], data[1]))
        elif segment.key == "C":
            if not pending_curve:
                last_point = current_points[-1] if current_points else start
                pending_curve.append(last_point)
            pending_curve.append((data[0], data[1]))
            pending_curve.append((data[2], data[3]))
            pending_curve.append((data[4], data[5]))
        elif segment.key == "Z":
            append_pending_curve()
            current_points.append(start)

    append_pending_points()

    tracer.event(f"Path flattened into {len(sets)} subpaths")

    if not distance:
        return sets

    return simplify_polylines(sets, distance)

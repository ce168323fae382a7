"""
Path normalization for Sketchify.

Reduces absolute path segments to move, line, cubic and close commands.
Smooth and quadratic curves become cubics and elliptical arcs are
approximated by one cubic per <= 120 degree piece.
"""

import math

from sketchify.models import Segment


# Arc pieces wider than this are split before the tangent formula is applied
MAX_ARC_PIECE = math.radians(120)

# Angle ratios are rounded before asin to absorb float noise near +-1
ANGLE_RATIO_DIGITS = 9


def normalize(segments):
    """
    Normalize absolute segments to M, L, C and Z only.

    Expects the output of absolutize().
    """
    out = []
    last_type = None
    cx, cy = 0.0, 0.0
    subx, suby = 0.0, 0.0
    # Last control point, used for reflection by S and T
    lcx, lcy = 0.0, 0.0

    for segment in segments:
        key = segment.key
        data = segment.data

        if key == "M":
            out.append(Segment(key="M", data=list(data)))
            cx, cy = data
            subx, suby = cx, cy
        elif key == "C":
            out.append(Segment(key="C", data=list(data)))
            cx, cy = data[4], data[5]
            lcx, lcy = data[2], data[3]
        elif key == "L":
            out.append(Segment(key="L", data=list(data)))
            cx, cy = data
        elif key == "H":
            cx = data[0]
            out.append(Segment(key="L", data=[cx, cy]))
        elif key == "V":
            cy = data[0]
            out.append(Segment(key="L", data=[cx, cy]))
        elif key == "S":
            if last_type in ("C", "S"):
                cx1, cy1 = cx + (cx - lcx), cy + (cy - lcy)
            else:
                cx1, cy1 = cx, cy
            out.append(Segment(key="C", data=[cx1, cy1, data[0], data[1], data[2], data[3]]))
            lcx, lcy = data[0], data[1]
            cx, cy = data[2], data[3]
        elif key == "T":
            x, y = data
            if last_type in ("Q", "T"):
                x1, y1 = cx + (cx - lcx), cy + (cy - lcy)
            else:
                x1, y1 = cx, cy
            out.append(Segment(key="C", data=_quad_to_cubic(cx, cy, x1, y1, x, y)))
            lcx, lcy = x1, y1
            cx, cy = x, y
        elif key == "Q":
            x1, y1, x, y = data
            out.append(Segment(key="C", data=_quad_to_cubic(cx, cy, x1, y1, x, y)))
            lcx, lcy = x1, y1
            cx, cy = x, y
        elif key == "A":
            r1 = abs(data[0])
            r2 = abs(data[1])
            angle = data[2]
            large_arc_flag = data[3] > 0.5
            sweep_flag = data[4] > 0.5
            x, y = data[5], data[6]
            if r1 == 0 or r2 == 0:
                out.append(Segment(key="C", data=[cx, cy, x, y, x, y]))
                cx, cy = x, y
            elif cx != x or cy != y:
                curves = arc_to_cubic_curves(cx, cy, x, y, r1, r2, angle, large_arc_flag, sweep_flag)
                for curve in curves:
                    out.append(Segment(key="C", data=curve))
                cx, cy = x, y
        elif key == "Z":
            out.append(Segment(key="Z", data=[]))
            cx, cy = subx, suby

        last_type = key

    return out


def _quad_to_cubic(x0, y0, qx, qy, x, y):
    """Degree-elevate a quadratic bezier to cubic control data."""
    return [
        x0 + 2 * (qx - x0) / 3,
        y0 + 2 * (qy - y0) / 3,
        x + 2 * (qx - x) / 3,
        y + 2 * (qy - y) / 3,
        x,
        y,
    ]


def rotate(x, y, angle_rad):
    """Rotate a point about the origin."""
    cos_a = math.cos(angle_rad)
    sin_a = math.sin(angle_rad)
    return x * cos_a - y * sin_a, x * sin_a + y * cos_a


def _safe_asin(ratio):
    ratio = round(ratio, ANGLE_RATIO_DIGITS)
    return math.asin(max(-1.0, min(1.0, ratio)))


def arc_to_cubic_curves(x1, y1, x2, y2, r1, r2, angle, large_arc_flag, sweep_flag, recursive=None):
    """
    Approximate an SVG elliptical arc with cubic beziers.

    Args:
        x1, y1: current point
        x2, y2: arc end point
        r1, r2: ellipse radii (positive)
        angle: x-axis rotation in degrees
        large_arc_flag, sweep_flag: SVG arc flags
        recursive: (f1, f2, cx, cy) when continuing a split arc, in which
            case points are already in the unrotated ellipse frame

    Returns:
        list of [c1x, c1y, c2x, c2y, x, y] cubic control data when called
        at the top level, or a flat list of control points when recursive.
    """
    angle_rad = math.radians(angle)

    if recursive:
        f1, f2, cx, cy = recursive
    else:
        x1, y1 = rotate(x1, y1, -angle_rad)
        x2, y2 = rotate(x2, y2, -angle_rad)

        x = (x1 - x2) / 2
        y = (y1 - y2) / 2
        h = (x * x) / (r1 * r1) + (y * y) / (r2 * r2)
        if h > 1:
            # Radii too small to span the chord
            h = math.sqrt(h)
            r1 = h * r1
            r2 = h * r2

        sign = -1 if large_arc_flag == sweep_flag else 1

        r1_pow = r1 * r1
        r2_pow = r2 * r2
        left = r1_pow * r2_pow - r1_pow * y * y - r2_pow * x * x
        right = r1_pow * y * y + r2_pow * x * x

        k = sign * math.sqrt(abs(left / right))

        cx = k * r1 * y / r2 + (x1 + x2) / 2
        cy = k * -r2 * x / r1 + (y1 + y2) / 2

        f1 = _safe_asin((y1 - cy) / r2)
        f2 = _safe_asin((y2 - cy) / r2)

        if x1 < cx:
            f1 = math.pi - f1
        if x2 < cx:
            f2 = math.pi - f2

        if f1 < 0:
            f1 = math.pi * 2 + f1
        if f2 < 0:
            f2 = math.pi * 2 + f2

        if sweep_flag and f1 > f2:
            f1 = f1 - math.pi * 2
        if not sweep_flag and f2 > f1:
            f2 = f2 - math.pi * 2

    params = []
    df = f2 - f1

    if abs(df) > MAX_ARC_PIECE:
        f2_old, x2_old, y2_old = f2, x2, y2

        if sweep_flag and f2 > f1:
            f2 = f1 + MAX_ARC_PIECE
        else:
            f2 = f1 - MAX_ARC_PIECE

        x2 = cx + r1 * math.cos(f2)
        y2 = cy + r2 * math.sin(f2)
        params = arc_to_cubic_curves(
            x2, y2, x2_old, y2_old, r1, r2, angle, False, sweep_flag,
            recursive=(f2, f2_old, cx, cy),
        )

    df = f2 - f1

    c1 = math.cos(f1)
    s1 = math.sin(f1)
    c2 = math.cos(f2)
    s2 = math.sin(f2)
    t = math.tan(df / 4)
    hx = 4.0 / 3 * r1 * t
    hy = 4.0 / 3 * r2 * t

    m1 = (x1, y1)
    m2 = (x1 + hx * s1, y1 - hy * c1)
    m3 = (x2 + hx * s2, y2 - hy * c2)
    m4 = (x2, y2)

    # Reflect the first handle through the start point
    m2 = (2 * m1[0] - m2[0], 2 * m1[1] - m2[1])

    points = [m2, m3, m4] + params
    if recursive:
        return points

    curves = []
    for i in range(0, len(points), 3):
        rx1, ry1 = rotate(points[i][0], points[i][1], angle_rad)
        rx2, ry2 = rotate(points[i + 1][0], points[i + 1][1], angle_rad)
        rx3, ry3 = rotate(points[i + 2][0], points[i + 2][1], angle_rad)
        curves.append([rx1, ry1, rx2, ry2, rx3, ry3])
    return curves

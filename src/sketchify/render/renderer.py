"""
Hand-drawn stroke synthesis for Sketchify.

The Renderer turns clean primitives (lines, polygons, curves, ellipses,
arcs and SVG paths) into randomized multi-stroke bezier sequences and
emits them to a drawing sink.

All randomness is drawn from one injected generator, in a fixed order per
primitive, so a seeded generator gives reproducible output.
"""

import math

import numpy as np

from sketchify.config import clone_with_advanced_seed
from sketchify.curves.points_on_path import points_on_path
from sketchify.fill.hachure import HachureFiller
from sketchify.models import EllipseParams, Rectangle
from sketchify.path.absolutize import absolutize
from sketchify.path.normalize import normalize
from sketchify.path.parser import parse_path
from sketchify.render.sinks import DrawingSink
from sketchify.tracer import trace


TWO_PI = math.pi * 2


class Renderer:
    """
    Randomized stroke synthesizer.

    Args:
        sink: DrawingSink receiving move_to / line_to / bezier_curve_to
        rng: object with a random() method returning floats in [0, 1),
            typically a numpy.random.Generator. A fresh unseeded generator
            is created when omitted.
    """

    def __init__(self, sink: DrawingSink, rng=None):
        self.sink = sink
        self.rng = rng if rng is not None else np.random.default_rng()

    # ------------------------------------------------------------------
    # Public primitives
    # ------------------------------------------------------------------

    def line(self, x1, y1, x2, y2, config):
        self._double_line(x1, y1, x2, y2, config)

    def linear_path(self, points, close, config):
        """Draw a polyline, optionally closing it back to the first point."""
        count = len(points)
        if count > 2:
            for i in range(count - 1):
                self._double_line(points[i][0], points[i][1], points[i + 1][0], points[i + 1][1], config)
            if close:
                self._double_line(points[-1][0], points[-1][1], points[0][0], points[0][1], config)
        elif count == 2:
            self.line(points[0][0], points[0][1], points[1][0], points[1][1], config)

    def polygon(self, points, config):
        self.linear_path(points, True, config)

    def rectangle(self, x, y, width, height, config):
        self.polygon(Rectangle(x=x, y=y, width=width, height=height).points(), config)

    def curve(self, points, config):
        """Draw a smooth curve through points, twice unless multi-stroke is off."""
        self._curve_with_offset(points, 1 * (1 + config.roughness * 0.2), config)
        if not config.disable_multi_stroke:
            self._curve_with_offset(
                points, 1.5 * (1 + config.roughness * 0.22), clone_with_advanced_seed(config)
            )

    def ellipse(self, x, y, width, height, config):
        """Draw an ellipse centered on (x, y). Returns its core ring points."""
        params = self.generate_ellipse_params(width, height, config)
        return self.ellipse_with_params(x, y, config, params)

    def generate_ellipse_params(self, width, height, config):
        """
        Compute the step increment and jittered radii of an ellipse.

        The step count grows with the square root of the approximate
        circumference and never drops below curve_step_count.
        """
        psq = math.sqrt(TWO_PI * math.sqrt(((width / 2) ** 2 + (height / 2) ** 2) / 2))
        step_count = max(config.curve_step_count, (config.curve_step_count / math.sqrt(200)) * psq)
        increment = TWO_PI / step_count

        rx = abs(width / 2)
        ry = abs(height / 2)
        curve_fit_randomness = 1 - config.curve_fitting
        rx += self._offset_opt(rx * curve_fit_randomness, config)
        ry += self._offset_opt(ry * curve_fit_randomness, config)

        return EllipseParams(increment=increment, rx=rx, ry=ry)

    def ellipse_with_params(self, x, y, config, ellipse_params):
        """
        Draw an ellipse from precomputed parameters.

        Returns the core ring of the first pass so a fill can reuse the
        same base geometry. A zero-size ellipse draws nothing.
        """
        if ellipse_params.rx == 0 and ellipse_params.ry == 0:
            return []

        increment = ellipse_params.increment
        overlap = increment * self._offset(0.1, self._offset(0.4, 1.0, config), config)
        all_points, core_points = self._compute_ellipse_points(
            increment, x, y, ellipse_params.rx, ellipse_params.ry, 1.0, overlap, config
        )
        self._curve(all_points, config)

        if not config.disable_multi_stroke:
            all_points_2, _ = self._compute_ellipse_points(
                increment, x, y, ellipse_params.rx, ellipse_params.ry, 1.5, 0, config
            )
            self._curve(all_points_2, config)

        return core_points

    def arc(self, x, y, width, height, start, stop, config, closed=False, rough_closure=False):
        """
        Draw an elliptical arc from angle start to stop (radians).

        Closed arcs are joined to the center, with rough strokes when
        rough_closure is set.
        """
        cx, cy = x, y
        rx = abs(width / 2)
        ry = abs(height / 2)
        rx += self._offset_opt(rx * 0.01, config)
        ry += self._offset_opt(ry * 0.01, config)

        strt, stp = _normalize_arc_range(start, stop)
        if stp <= strt:
            return

        ellipse_inc = TWO_PI / config.curve_step_count
        arc_inc = min(ellipse_inc / 2, (stp - strt) / 2)
        self._arc(arc_inc, cx, cy, rx, ry, strt, stp, 1, config)
        if not config.disable_multi_stroke:
            self._arc(arc_inc, cx, cy, rx, ry, strt, stp, 1.5, config)

        if closed:
            if rough_closure:
                self._double_line(cx, cy, cx + rx * math.cos(strt), cy + ry * math.sin(strt), config)
                self._double_line(cx, cy, cx + rx * math.cos(stp), cy + ry * math.sin(stp), config)
            else:
                self.sink.line_to(cx, cy)
                self.sink.line_to(cx + rx * math.cos(strt), cy + ry * math.sin(strt))

    @trace(label="svg_path")
    def svg_path(self, path, config):
        """Stroke arbitrary SVG path data."""
        segments = normalize(absolutize(parse_path(path)))
        first = (0.0, 0.0)
        current = (0.0, 0.0)

        for segment in segments:
            data = segment.data
            if segment.key == "M":
                ro = 1 * config.max_randomness_offset
                self.sink.move_to(data[0] + self._offset_opt(ro, config), data[1] + self._offset_opt(ro, config))
                current = (data[0], data[1])
                first = current
            elif segment.key == "L":
                self._double_line(current[0], current[1], data[0], data[1], config)
                current = (data[0], data[1])
            elif segment.key == "C":
                x1, y1, x2, y2, x, y = data
                self._bezier_to(x1, y1, x2, y2, x, y, current, config)
                current = (x, y)
            elif segment.key == "Z":
                self._double_line(current[0], current[1], first[0], first[1], config)
                current = first

    def solid_fill_polygon(self, points, config):
        """Outline a polygon with jittered vertices for a solid fill."""
        if len(points) > 2:
            offset = config.max_randomness_offset
            self.sink.move_to(
                points[0][0] + self._offset_opt(offset, config),
                points[0][1] + self._offset_opt(offset, config),
            )
            for px, py in points[1:]:
                self.sink.line_to(px + self._offset_opt(offset, config), py + self._offset_opt(offset, config))

    def pattern_fill_polygon(self, points, config, connect_ends=False):
        """Hachure-fill a polygon."""
        HachureFiller(self).fill_polygon(points, config, connect_ends=connect_ends)

    def pattern_fill_arc(self, x, y, width, height, start, stop, config, connect_ends=False):
        """Hachure-fill the pie slice of an elliptical arc."""
        cx, cy = x, y
        rx = abs(width / 2)
        ry = abs(height / 2)
        rx += self._offset_opt(rx * 0.01, config)
        ry += self._offset_opt(ry * 0.01, config)

        strt, stp = _normalize_arc_range(start, stop)
        if stp <= strt:
            return

        increment = (stp - strt) / config.curve_step_count
        points = []
        for k in range(config.curve_step_count + 1):
            angle = strt + k * increment
            points.append((cx + rx * math.cos(angle), cy + ry * math.sin(angle)))
        points.append((cx + rx * math.cos(stp), cy + ry * math.sin(stp)))
        points.append((cx, cy))

        self.pattern_fill_polygon(points, config, connect_ends=connect_ends)

    def double_line_fill_ops(self, x1, y1, x2, y2, config):
        """Draw one hachure stroke."""
        self._double_line(x1, y1, x2, y2, config, filling=True)

    @trace(label="fill_path")
    def fill_path(self, path, config, connect_ends=False, tolerance=1.0):
        """Hachure-fill the area enclosed by SVG path data."""
        sets = points_on_path(path, tolerance, (1 + config.roughness) / 2)
        combined = [point for point_set in sets for point in point_set]
        self.pattern_fill_polygon(combined, config, connect_ends=connect_ends)

    # ------------------------------------------------------------------
    # Randomness
    # ------------------------------------------------------------------

    def _random(self):
        return float(self.rng.random())

    def _offset(self, min_value, max_value, config, roughness_gain=1.0):
        return config.roughness * roughness_gain * ((self._random() * (max_value - min_value)) + min_value)

    def _offset_opt(self, x, config, roughness_gain=1.0):
        return self._offset(-x, x, config, roughness_gain)

    # ------------------------------------------------------------------
    # Stroke internals
    # ------------------------------------------------------------------

    def _double_line(self, x1, y1, x2, y2, config, filling=False):
        single_stroke = config.disable_multi_stroke_fill if filling else config.disable_multi_stroke
        self._line(x1, y1, x2, y2, config, True, False)
        if not single_stroke:
            self._line(x1, y1, x2, y2, config, True, True)

    def _line(self, x1, y1, x2, y2, config, move, overlay):
        """
        Draw one bowed, jittered stroke from (x1, y1) to (x2, y2).

        The overlay pass uses half the jitter of the first pass.
        """
        length_sq = (x1 - x2) ** 2 + (y1 - y2) ** 2
        length = math.sqrt(length_sq)

        if length < 200:
            roughness_gain = 1.0
        elif length > 500:
            roughness_gain = 0.4
        else:
            roughness_gain = (-0.0016668) * length + 1.233334

        offset = config.max_randomness_offset
        if (offset * offset * 100) > length_sq:
            offset = length / 10
        jitter = offset / 2 if overlay else offset

        diverge_point = 0.2 + self._random() * 0.2
        mid_disp_x = config.bowing * config.max_randomness_offset * (y2 - y1) / 200
        mid_disp_y = config.bowing * config.max_randomness_offset * (x1 - x2) / 200
        mid_disp_x = self._offset_opt(mid_disp_x, config, roughness_gain)
        mid_disp_y = self._offset_opt(mid_disp_y, config, roughness_gain)

        def jittered():
            return self._offset_opt(jitter, config, roughness_gain)

        if move:
            self.sink.move_to(x1 + jittered(), y1 + jittered())

        cp1x = mid_disp_x + x1 + (x2 - x1) * diverge_point + jittered()
        cp1y = mid_disp_y + y1 + (y2 - y1) * diverge_point + jittered()
        cp2x = mid_disp_x + x1 + 2 * (x2 - x1) * diverge_point + jittered()
        cp2y = mid_disp_y + y1 + 2 * (y2 - y1) * diverge_point + jittered()
        end_x = x2 + jittered()
        end_y = y2 + jittered()
        self.sink.bezier_curve_to(cp1x, cp1y, cp2x, cp2y, end_x, end_y)

    def _curve_with_offset(self, points, offset, config):
        if not points:
            return

        def jittered(point):
            return (
                point[0] + self._offset_opt(offset, config),
                point[1] + self._offset_opt(offset, config),
            )

        # First and last points are doubled so the spline reaches them
        ps = [jittered(points[0]), jittered(points[0])]
        for i in range(1, len(points)):
            ps.append(jittered(points[i]))
            if i == len(points) - 1:
                ps.append(jittered(points[i]))

        self._curve(ps, config)

    def _curve(self, points, config, close_point=None):
        """Catmull-Rom style spline through points[1:-1]."""
        count = len(points)
        if count > 3:
            s = 1 - config.curve_tightness
            self.sink.move_to(points[1][0], points[1][1])
            for i in range(1, count - 2):
                current = points[i]
                b1 = (
                    current[0] + (s * points[i + 1][0] - s * points[i - 1][0]) / 6,
                    current[1] + (s * points[i + 1][1] - s * points[i - 1][1]) / 6,
                )
                b2 = (
                    points[i + 1][0] + (s * points[i][0] - s * points[i + 2][0]) / 6,
                    points[i + 1][1] + (s * points[i][1] - s * points[i + 2][1]) / 6,
                )
                b3 = (points[i + 1][0], points[i + 1][1])
                self.sink.bezier_curve_to(b1[0], b1[1], b2[0], b2[1], b3[0], b3[1])
            if close_point is not None:
                ro = config.max_randomness_offset
                self.sink.line_to(
                    close_point[0] + self._offset_opt(ro, config),
                    close_point[1] + self._offset_opt(ro, config),
                )
        elif count == 3:
            self.sink.move_to(points[1][0], points[1][1])
            self.sink.bezier_curve_to(
                points[1][0], points[1][1],
                points[2][0], points[2][1],
                points[2][0], points[2][1],
            )
        elif count == 2:
            self._double_line(points[0][0], points[0][1], points[1][0], points[1][1], config)

    def _compute_ellipse_points(self, increment, cx, cy, rx, ry, offset, overlap, config):
        """
        Sample an ellipse ring.

        Returns (all_points, core_points): core_points is the plain ring,
        all_points adds lead-in and overlap points that hide the seam.
        """
        core_points = []
        all_points = []
        rad_offset = self._offset_opt(0.5, config) - (math.pi / 2)

        def ring_point(scale, angle):
            return (
                self._offset_opt(offset, config) + cx + scale * rx * math.cos(angle),
                self._offset_opt(offset, config) + cy + scale * ry * math.sin(angle),
            )

        all_points.append(ring_point(0.9, rad_offset - increment))

        angle = rad_offset
        while angle < (TWO_PI + rad_offset - 0.01):
            point = ring_point(1.0, angle)
            core_points.append(point)
            all_points.append(point)
            angle += increment

        all_points.append(ring_point(1.0, rad_offset + TWO_PI + overlap * 0.5))
        all_points.append(ring_point(0.98, rad_offset + overlap))
        all_points.append(ring_point(0.9, rad_offset + overlap * 0.5))

        return all_points, core_points

    def _arc(self, increment, cx, cy, rx, ry, strt, stp, offset, config):
        rad_offset = strt + self._offset_opt(0.1, config)
        points = [(
            self._offset_opt(offset, config) + cx + 0.9 * rx * math.cos(rad_offset - increment),
            self._offset_opt(offset, config) + cy + 0.9 * ry * math.sin(rad_offset - increment),
        )]

        # Jitter may start the sweep below strt; never by more than one step
        first = max(rad_offset, strt - increment)
        steps = int((stp - first) / increment) + 1 if first <= stp else 0
        for k in range(steps):
            angle = first + k * increment
            points.append((
                self._offset_opt(offset, config) + cx + rx * math.cos(angle),
                self._offset_opt(offset, config) + cy + ry * math.sin(angle),
            ))

        end = (cx + rx * math.cos(stp), cy + ry * math.sin(stp))
        points.append(end)
        points.append(end)

        self._curve(points, config)

    def _bezier_to(self, x1, y1, x2, y2, x, y, current, config):
        ros = (config.max_randomness_offset, config.max_randomness_offset + 0.3)
        iterations = 1 if config.disable_multi_stroke else 2

        for i in range(iterations):
            if i == 0:
                self.sink.move_to(current[0], current[1])
            else:
                self.sink.move_to(
                    current[0] + self._offset_opt(ros[0], config),
                    current[1] + self._offset_opt(ros[0], config),
                )
            fx = x + self._offset_opt(ros[i], config, 1)
            fy = y + self._offset_opt(ros[i], config, 1)

            self.sink.bezier_curve_to(
                x1 + self._offset_opt(ros[i], config),
                y1 + self._offset_opt(ros[i], config),
                x2 + self._offset_opt(ros[i], config),
                y2 + self._offset_opt(ros[i], config),
                fx,
                fy,
            )


def _normalize_arc_range(start, stop):
    """Shift start/stop into a non-negative range no wider than a full turn."""
    strt, stp = start, stop
    while strt < 0:
        strt += TWO_PI
        stp += TWO_PI
    if (stp - strt) > TWO_PI:
        strt = 0
        stp = TWO_PI
    return strt, stp

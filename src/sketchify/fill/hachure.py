"""
Hachure filler.

Renders the scanline hachure lines of a polygon as rough strokes, and can
optionally join consecutive lines into a zig-zag, clipping the joins
against the polygon.
"""

from sketchify.fill.scanline import polygon_hachure_lines
from sketchify.geometry import do_intersect, is_point_in_polygon, line_intersection, line_length
from sketchify.tracer import get_tracer, trace


class HachureFiller:
    """
    Fills polygons with rough hachure strokes.

    Args:
        renderer: Renderer whose double_line_fill_ops draws each stroke
    """

    def __init__(self, renderer):
        self.renderer = renderer

    @trace(label="hachure_fill")
    def fill_polygon(self, points, config, connect_ends=False):
        """
        Hachure-fill a polygon.

        Args:
            points: polygon vertices
            config: RoughConfig
            connect_ends: also draw the clipped joins between lines
        """
        lines = polygon_hachure_lines(points, config)
        if connect_ends:
            connectors = self.connecting_lines(points, lines)
            lines = lines + connectors
        self.render_lines(lines, config)

    def render_lines(self, lines, config):
        for (x1, y1), (x2, y2) in lines:
            self.renderer.double_line_fill_ops(x1, y1, x2, y2, config)

    def connecting_lines(self, polygon, lines):
        """
        Join the end of each hachure line to the start of the previous one.

        Joins shorter than three units are skipped; longer ones are split
        where they leave the polygon.
        """
        tracer = get_tracer()

        result = []
        if len(lines) > 1:
            for i in range(1, len(lines)):
                prev = lines[i - 1]
                if line_length(prev) < 3:
                    continue
                current = lines[i]
                segment = (current[0], prev[1])
                if line_length(segment) > 3:
                    result.extend(self.split_on_intersections(polygon, segment))

        tracer.event(f"Connected hachure ends with {len(result)} segments", level="DEBUG")
        return result

    def mid_point_in_polygon(self, polygon, segment):
        (x1, y1), (x2, y2) = segment
        return is_point_in_polygon(polygon, (x1 + x2) / 2, (y1 + y2) / 2)

    def split_on_intersections(self, polygon, segment):
        """
        Clip a connecting segment against a polygon.

        Returns the list of sub-segments whose midpoints lie inside.
        """
        error = max(5, line_length(segment) * 0.1)
        intersections = []

        count = len(polygon)
        for i in range(count):
            p1 = polygon[i]
            p2 = polygon[(i + 1) % count]
            if do_intersect(p1, p2, segment[0], segment[1]):
                ip = line_intersection(p1, p2, segment[0], segment[1])
                if ip is not None:
                    d0 = line_length((ip, segment[0]))
                    d1 = line_length((ip, segment[1]))
                    if d0 > error and d1 > error:
                        intersections.append((ip, d0))

        if len(intersections) > 1:
            intersections.sort(key=lambda item: item[1])
            ips = [ip for ip, _ in intersections]

            if not is_point_in_polygon(polygon, segment[0][0], segment[0][1]):
                ips.pop(0)
            if ips and not is_point_in_polygon(polygon, segment[1][0], segment[1][1]):
                ips.pop()

            if len(ips) <= 1:
                if self.mid_point_in_polygon(polygon, segment):
                    return [segment]
                return []

            spoints = [segment[0], *ips, segment[1]]
            slines = []
            for i in range(0, len(spoints) - 1, 2):
                sub_segment = (spoints[i], spoints[i + 1])
                if self.mid_point_in_polygon(polygon, sub_segment):
                    slines.append(sub_segment)
            return slines

        if self.mid_point_in_polygon(polygon, segment):
            return [segment]
        return []

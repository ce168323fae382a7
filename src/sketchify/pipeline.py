"""
Shape sketching pipeline for Sketchify.

Turns clean shapes (path data, polygons, rectangles, ellipses) into
hand-drawn fill and stroke path data.
"""

import numpy as np

from sketchify.config import SketchConfig
from sketchify.curves.points_on_path import points_on_path
from sketchify.models import SketchedShape, compute_bbox
from sketchify.render.renderer import Renderer
from sketchify.render.sinks import PathRecorder
from sketchify.tracer import configure_from_config, get_tracer, trace


def create_rng(config=None):
    """
    Create the random generator for a sketch run.

    A seed of 0 gives an unseeded generator.
    """
    if config is None:
        config = SketchConfig()
    seed = config.rough.seed
    return np.random.default_rng(seed or None)


def _prepare(config, rng):
    """Resolve defaults. An explicit config also applies its tracing section."""
    if config is None:
        config = SketchConfig()
    else:
        configure_from_config(config.tracing)
    if rng is None:
        rng = create_rng(config)
    recorder = PathRecorder(precision=config.output.precision)
    return config, Renderer(recorder, rng), recorder


@trace(label="sketch_path")
def sketch_path(d, config=None, fill=True, stroke=True, rng=None, shape_type="path"):
    """
    Sketch arbitrary SVG path data.

    The fill pass flattens the path, joins its subpaths into one polygon
    and hachures it. The stroke pass replays the path as rough strokes.

    Args:
        d: SVG path data
        config: SketchConfig (defaults when omitted)
        fill: produce hachure fill path data
        stroke: produce outline path data
        rng: random generator, created from config.rough.seed when omitted
        shape_type: label stored on the result

    Returns:
        SketchedShape

    Raises:
        PathSyntaxError: if the path data is malformed
    """
    tracer = get_tracer()
    config, renderer, recorder = _prepare(config, rng)

    sets = points_on_path(d, config.fill.flatten_tolerance)
    outline = [point for point_set in sets for point in point_set]

    fill_path = ""
    stroke_path = ""

    if fill:
        with tracer.span("fill_pass", module="pipeline"):
            renderer.fill_path(
                d, config.rough,
                connect_ends=config.fill.connect_ends,
                tolerance=config.fill.flatten_tolerance,
            )
            fill_path = recorder.get_and_clear()

    if stroke:
        with tracer.span("stroke_pass", module="pipeline"):
            renderer.svg_path(d, config.rough)
            stroke_path = recorder.get_and_clear()

    tracer.event(f"Sketched {shape_type}: {len(sets)} subpaths")

    return SketchedShape(
        shape_type=shape_type,
        fill_path=fill_path,
        stroke_path=stroke_path,
        bbox=compute_bbox(outline),
    )


def sketch_polygon(points, config=None, fill=True, stroke=True, rng=None):
    """
    Sketch a polygon.

    Args:
        points: SVG points text ("x1,y1 x2,y2 ...") or a list of (x, y)
    """
    if isinstance(points, str):
        points_text = points
    else:
        points_text = " ".join(f"{x},{y}" for x, y in points)
    return sketch_path(
        "M " + points_text, config, fill=fill, stroke=stroke, rng=rng, shape_type="polygon"
    )


def sketch_rectangle(x, y, width, height, config=None, fill=True, stroke=True, rng=None):
    """Sketch an axis-aligned rectangle as a closed path."""
    d = (
        f"M {x},{y}"
        f"L {x + width},{y}"
        f"L {x + width},{y + height}"
        f"L {x},{y + height}"
        f"L {x},{y}"
    )
    return sketch_path(d, config, fill=fill, stroke=stroke, rng=rng, shape_type="rect")


@trace(label="sketch_ellipse")
def sketch_ellipse(cx, cy, rx, ry, config=None, fill=True, stroke=True, rng=None):
    """
    Sketch an ellipse.

    The outline is always drawn since the fill reuses its core ring; the
    stroke flag only controls whether it is kept.
    """
    tracer = get_tracer()
    config, renderer, recorder = _prepare(config, rng)

    params = renderer.generate_ellipse_params(2 * rx, 2 * ry, config.rough)
    core_points = renderer.ellipse_with_params(cx, cy, config.rough, params)
    stroke_path = recorder.get_and_clear()
    if not stroke:
        stroke_path = ""

    fill_path = ""
    if fill and core_points:
        with tracer.span("fill_pass", module="pipeline"):
            renderer.pattern_fill_polygon(core_points, config.rough, connect_ends=config.fill.connect_ends)
            fill_path = recorder.get_and_clear()

    return SketchedShape(
        shape_type="ellipse",
        fill_path=fill_path,
        stroke_path=stroke_path,
        bbox=[cx - abs(rx), cy - abs(ry), cx + abs(rx), cy + abs(ry)],
    )

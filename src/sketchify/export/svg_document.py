"""
SVG emission for Sketchify.

Wraps sketched shapes into an SVG document, one group per shape.
"""

import svgwrite

from sketchify.config import SketchConfig
from sketchify.models import compute_bbox_from_bboxes
from sketchify.tracer import get_tracer, trace


@trace(label="emit_sketch_svg")
def emit_sketch_svg(shapes, width=None, height=None, config=None):
    """
    Create an SVG document containing sketched shapes.

    Args:
        shapes: list of SketchedShape objects
        width: document width, derived from the shapes when omitted
        height: document height, derived from the shapes when omitted
        config: SketchConfig for colors and stroke width

    Returns:
        svgwrite.Drawing object
    """
    tracer = get_tracer()

    if config is None:
        config = SketchConfig()

    # Rough strokes wander up to the randomness offset past the clean shape
    pad = 2 * config.rough.max_randomness_offset
    min_x, min_y, max_x, max_y = compute_bbox_from_bboxes([s.bbox for s in shapes])

    if width is None or height is None:
        view_x = min_x - pad
        view_y = min_y - pad
        width = (max_x - min_x) + 2 * pad
        height = (max_y - min_y) + 2 * pad
    else:
        view_x = 0
        view_y = 0

    dwg = svgwrite.Drawing(size=(f"{width}px", f"{height}px"))
    dwg.viewbox(view_x, view_y, width, height)

    stroke_width = config.rough.stroke_width

    for idx, shape in enumerate(shapes):
        group = dwg.g(id=f"{shape.shape_type}_{idx}")

        if shape.fill_path:
            group.add(dwg.path(
                d=shape.fill_path,
                fill="none",
                stroke=config.output.fill_color,
                stroke_width=stroke_width,
                stroke_linecap="round",
            ))

        if shape.stroke_path:
            group.add(dwg.path(
                d=shape.stroke_path,
                fill="none",
                stroke=config.output.stroke_color,
                stroke_width=stroke_width,
                stroke_linecap="round",
            ))

        dwg.add(group)

    tracer.event(f"SVG emitted with {len(shapes)} shapes")

    return dwg

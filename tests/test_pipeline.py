"""Integration tests for the shape sketching pipeline and SVG export."""

import dataclasses

import numpy as np
import pytest

from sketchify.config import SketchConfig
from sketchify.export.svg_document import emit_sketch_svg
from sketchify.path.parser import PathSyntaxError
from sketchify.pipeline import (
    create_rng, sketch_ellipse, sketch_path, sketch_polygon, sketch_rectangle,
)


def _seeded_config(seed=7):
    config = SketchConfig()
    config.rough = dataclasses.replace(config.rough, seed=seed)
    return config


class TestCreateRng:
    """Tests for generator construction."""

    def test_seeded_generators_agree(self):
        config = _seeded_config(11)
        assert create_rng(config).random() == create_rng(config).random()

    def test_unseeded_generator(self):
        rng = create_rng(SketchConfig())
        assert isinstance(rng, np.random.Generator)


class TestSketchPath:
    """Tests for sketching path data."""

    def test_fill_and_stroke(self):
        """Test that both passes produce path data and a bbox."""
        shape = sketch_path("M0 0L100 0L100 50L0 50Z", _seeded_config())

        assert shape.shape_type == "path"
        assert shape.fill_path.startswith("M ")
        assert shape.stroke_path.startswith("M ")
        assert shape.bbox == [0, 0, 100, 50]

    def test_reproducible_with_seed(self):
        """Test that a fixed seed reproduces the same output."""
        first = sketch_path("M 10 10 C 20 40 60 40 70 10 Z", _seeded_config(3))
        second = sketch_path("M 10 10 C 20 40 60 40 70 10 Z", _seeded_config(3))

        assert first == second

    def test_different_seeds_differ(self):
        first = sketch_path("M 10 10 L 70 10 L 40 50 Z", _seeded_config(3))
        second = sketch_path("M 10 10 L 70 10 L 40 50 Z", _seeded_config(4))

        assert first.stroke_path != second.stroke_path

    def test_stroke_only(self):
        shape = sketch_path("M0 0L10 0L10 10Z", _seeded_config(), fill=False)

        assert shape.fill_path == ""
        assert shape.stroke_path

    def test_fill_only(self):
        shape = sketch_path("M0 0L10 0L10 10Z", _seeded_config(), stroke=False)

        assert shape.fill_path
        assert shape.stroke_path == ""

    def test_explicit_rng(self):
        a = sketch_path("M0 0L10 0L10 10Z", rng=np.random.default_rng(5))
        b = sketch_path("M0 0L10 0L10 10Z", rng=np.random.default_rng(5))
        assert a == b

    def test_malformed_path_raises(self):
        with pytest.raises(PathSyntaxError):
            sketch_path("M 0 0 L 10", _seeded_config())

    def test_open_path_stroke(self):
        """Test that an open single-segment path still strokes."""
        shape = sketch_path("M 0 0 L 50 0", _seeded_config())

        assert shape.stroke_path.startswith("M ")
        assert shape.bbox == [0, 0, 50, 0]


class TestShapes:
    """Tests for polygon, rectangle and ellipse helpers."""

    def test_polygon_text_and_points_agree(self):
        from_text = sketch_polygon("0,0 40,0 40,30 0,30", _seeded_config())
        from_points = sketch_polygon([(0, 0), (40, 0), (40, 30), (0, 30)], _seeded_config())

        assert from_text == from_points
        assert from_text.shape_type == "polygon"

    def test_rectangle(self):
        shape = sketch_rectangle(5, 5, 20, 10, _seeded_config())

        assert shape.shape_type == "rect"
        assert shape.bbox == [5, 5, 25, 15]
        assert shape.fill_path and shape.stroke_path

    def test_ellipse(self):
        shape = sketch_ellipse(50, 40, 30, 20, _seeded_config())

        assert shape.shape_type == "ellipse"
        assert shape.bbox == [20, 20, 80, 60]
        assert shape.stroke_path.startswith("M ")
        assert shape.fill_path

    def test_ellipse_fill_only(self):
        shape = sketch_ellipse(50, 40, 30, 20, _seeded_config(), stroke=False)

        assert shape.stroke_path == ""
        assert shape.fill_path

    def test_zero_ellipse(self):
        shape = sketch_ellipse(5, 5, 0, 0, _seeded_config())

        assert shape.stroke_path == ""
        assert shape.fill_path == ""


class TestSvgExport:
    """Tests for SVG document emission."""

    def test_groups_and_paths(self):
        """Test one group per shape with fill and stroke paths."""
        shapes = [
            sketch_rectangle(0, 0, 40, 20, _seeded_config()),
            sketch_ellipse(80, 20, 10, 10, _seeded_config(), fill=False),
        ]
        dwg = emit_sketch_svg(shapes)
        svg = dwg.tostring()

        assert 'id="rect_0"' in svg
        assert 'id="ellipse_1"' in svg
        assert svg.count("<path") == 3
        assert 'stroke-linecap="round"' in svg
        assert 'fill="none"' in svg

    def test_explicit_size(self):
        dwg = emit_sketch_svg([sketch_rectangle(0, 0, 10, 10, _seeded_config())], width=200, height=100)

        assert dwg["width"] == "200px"
        assert dwg["height"] == "100px"

    def test_colors_from_config(self):
        config = _seeded_config()
        config.output.stroke_color = "red"
        config.output.fill_color = "blue"
        shape = sketch_rectangle(0, 0, 10, 10, config)

        svg = emit_sketch_svg([shape], config=config).tostring()

        assert 'stroke="red"' in svg
        assert 'stroke="blue"' in svg

    def test_empty_document(self):
        svg = emit_sketch_svg([]).tostring()
        assert "<svg" in svg


class TestTracingConfig:
    """Tests for applying the tracing section of a config."""

    def test_enabled_tracing_logs_passes(self, capsys):
        from sketchify.tracer import configure_tracer

        config = _seeded_config()
        config.tracing.enabled = True
        try:
            sketch_path("M0 0L10 0L10 10Z", config)
        finally:
            configure_tracer(enabled=False)

        err = capsys.readouterr().err
        assert "fill_pass" in err
        assert "Sketched path" in err

    def test_disabled_tracing_silent(self, capsys):
        sketch_path("M0 0L10 0L10 10Z", _seeded_config())
        assert capsys.readouterr().err == ""

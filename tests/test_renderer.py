"""Tests for the rough stroke renderer."""

import dataclasses
import math

import numpy as np
import pytest

from sketchify.config import RoughConfig
from sketchify.render.renderer import Renderer
from sketchify.render.sinks import OpsRecorder, PathRecorder


SINGLE = RoughConfig(disable_multi_stroke=True)


def _render(draw, seed=3):
    recorder = PathRecorder()
    renderer = Renderer(recorder, np.random.default_rng(seed))
    draw(renderer)
    return recorder.get_and_clear()


class TestRandomDraws:
    """Tests for the fixed randomness budget of each primitive."""

    def test_line_draw_count(self, counting_rng, recorder):
        """Test that one stroke pass consumes eleven draws."""
        Renderer(recorder, counting_rng).line(0, 0, 100, 0, SINGLE)
        assert counting_rng.calls == 11

    def test_double_line_draw_count(self, counting_rng, recorder, default_config):
        Renderer(recorder, counting_rng).line(0, 0, 100, 0, default_config)
        assert counting_rng.calls == 22

    def test_polygon_draw_count(self, counting_rng, recorder, default_config, square):
        Renderer(recorder, counting_rng).polygon(square, default_config)
        assert counting_rng.calls == 4 * 22

    def test_line_draw_order(self, scripted_rng, recorder):
        """Test which coordinate receives each draw of a stroke pass.

        Draws go: diverge point, mid displacement x then y, move x/y,
        first control x/y, second control x/y, end x/y. With draw k
        returning k / 100, an offset_opt(2) draw k adds 4k/100 - 2.
        """
        Renderer(recorder, scripted_rng).line(0, 0, 100, 100, SINGLE)

        (move_name, move), (curve_name, curve) = recorder.ops
        assert move_name == "move_to"
        assert curve_name == "bezier_curve_to"

        diverge = 0.2 + 0.01 * 0.2
        mid_x = 0.02 * 3 - 1.5
        mid_y = 1.5 - 0.03 * 3
        assert move == pytest.approx((0.16 - 2, 0.20 - 2))
        assert curve == pytest.approx((
            mid_x + 100 * diverge + 0.24 - 2,
            mid_y + 100 * diverge + 0.28 - 2,
            mid_x + 200 * diverge + 0.32 - 2,
            mid_y + 200 * diverge + 0.36 - 2,
            100 + 0.40 - 2,
            100 + 0.44 - 2,
        ))
        assert scripted_rng.calls == 11

    def test_bezier_draw_order(self, scripted_rng, recorder):
        """Test that a cubic jitters its end point before its controls."""
        Renderer(recorder, scripted_rng).svg_path("M 0 0 C 10 0 20 0 30 0", SINGLE)

        assert recorder.ops == [
            ("move_to", pytest.approx((0.04 - 2, 0.08 - 2))),
            ("move_to", (0, 0)),
            ("bezier_curve_to", pytest.approx((
                10 + 0.20 - 2, 0.24 - 2,
                20 + 0.28 - 2, 0.32 - 2,
                30 + 0.12 - 2, 0.16 - 2,
            ))),
        ]
        assert scripted_rng.calls == 6


class TestDeterminism:
    """Tests for reproducibility under a fixed seed."""

    def test_same_seed_same_ops(self, default_config):
        """Test byte-identical sink output for identical inputs."""
        def draw(renderer):
            renderer.svg_path("M 0 0 L 50 10 C 60 20 70 20 80 10 Q 90 0 100 10 A 20 20 0 0 1 120 30 Z", default_config)
            renderer.ellipse(50, 50, 40, 30, default_config)
            renderer.curve([(0, 0), (10, 20), (30, 10), (40, 40)], default_config)

        assert _render(draw) == _render(draw)

    def test_same_seed_same_raw_ops(self, default_config, square):
        first = OpsRecorder()
        second = OpsRecorder()
        Renderer(first, np.random.default_rng(9)).pattern_fill_polygon(square, default_config)
        Renderer(second, np.random.default_rng(9)).pattern_fill_polygon(square, default_config)

        assert first.ops == second.ops

    def test_different_seed_differs(self, default_config):
        def draw(renderer):
            renderer.line(0, 0, 100, 100, default_config)

        assert _render(draw, seed=1) != _render(draw, seed=2)


class TestLines:
    """Tests for line, polyline and polygon strokes."""

    def test_line_ops(self, recorder, rng, default_config):
        """Test that a line is two move/curve pairs."""
        Renderer(recorder, rng).line(0, 0, 100, 0, default_config)

        assert [name for name, _ in recorder.ops] == [
            "move_to", "bezier_curve_to", "move_to", "bezier_curve_to",
        ]

    def test_line_endpoint_jitter_bounded(self, recorder, rng):
        """Test that endpoints wander no further than the randomness offset."""
        Renderer(recorder, rng).line(0, 0, 100, 0, SINGLE)

        (_, (mx, my)), (_, curve) = recorder.ops
        assert abs(mx) <= 2 and abs(my) <= 2
        assert abs(curve[4] - 100) <= 2 and abs(curve[5]) <= 2

    def test_short_line_jitter_scaled(self, recorder, rng):
        """Test that short lines jitter by at most a tenth of their length."""
        Renderer(recorder, rng).line(0, 0, 5, 0, SINGLE)

        _, curve = recorder.ops[1]
        assert abs(curve[4] - 5) <= 0.5

    def test_zero_roughness_is_exact(self, recorder, rng):
        """Test that zero roughness reproduces the clean line."""
        config = RoughConfig(roughness=0, disable_multi_stroke=True)
        Renderer(recorder, rng).line(0, 0, 100, 0, config)

        (_, move), (_, curve) = recorder.ops
        assert move == (0, 0)
        assert curve[4:] == (100, 0)
        assert curve[1] == 0 and curve[3] == 0

    def test_linear_path_open_and_closed(self, rng, default_config, square):
        open_path = OpsRecorder()
        closed_path = OpsRecorder()
        Renderer(open_path, rng).linear_path(square, False, default_config)
        Renderer(closed_path, rng).linear_path(square, True, default_config)

        assert open_path.count("bezier_curve_to") == 3 * 2
        assert closed_path.count("bezier_curve_to") == 4 * 2

    def test_linear_path_two_points_is_line(self, recorder, rng, default_config):
        Renderer(recorder, rng).linear_path([(0, 0), (5, 5)], False, default_config)
        assert recorder.count("bezier_curve_to") == 2

    def test_linear_path_degenerate(self, recorder, rng, default_config):
        """Test that fewer than two points draw nothing."""
        renderer = Renderer(recorder, rng)
        renderer.linear_path([], True, default_config)
        renderer.linear_path([(1, 1)], True, default_config)

        assert recorder.ops == []

    def test_rectangle(self, recorder, rng, default_config):
        Renderer(recorder, rng).rectangle(0, 0, 30, 20, default_config)
        assert recorder.count("move_to") == 8


class TestCurves:
    """Tests for spline curves, ellipses and arcs."""

    def test_curve_segment_count(self, recorder, rng, default_config):
        """Test one bezier per interior span on each of the two passes."""
        Renderer(recorder, rng).curve([(0, 0), (10, 20), (30, 10), (40, 40)], default_config)

        assert recorder.count("move_to") == 2
        assert recorder.count("bezier_curve_to") == 6

    def test_curve_single_pass(self, recorder, rng):
        Renderer(recorder, rng).curve([(0, 0), (10, 20), (30, 10)], SINGLE)

        assert recorder.count("move_to") == 1
        assert recorder.count("bezier_curve_to") == 2

    def test_curve_empty(self, recorder, rng, default_config):
        Renderer(recorder, rng).curve([], default_config)
        assert recorder.ops == []

    def test_ellipse_params(self, rng, recorder, default_config):
        """Test step increment and radius jitter bounds."""
        params = Renderer(recorder, rng).generate_ellipse_params(100, 60, default_config)

        assert 0 < params.increment <= 2 * math.pi / default_config.curve_step_count
        assert abs(params.rx - 50) <= 50 * 0.05 + 1e-9
        assert abs(params.ry - 30) <= 30 * 0.05 + 1e-9

    def test_ellipse_core_points_on_ring(self, rng, recorder, default_config):
        """Test that the returned ring follows the ellipse."""
        core = Renderer(recorder, rng).ellipse(100, 100, 100, 100, default_config)

        assert len(core) >= default_config.curve_step_count
        for x, y in core:
            assert 45 < math.hypot(x - 100, y - 100) < 55

    def test_ellipse_two_passes(self, rng, recorder, default_config):
        Renderer(recorder, rng).ellipse(0, 0, 50, 50, default_config)
        assert recorder.count("move_to") == 2

    def test_zero_ellipse_draws_nothing(self, rng, recorder, default_config):
        core = Renderer(recorder, rng).ellipse(5, 5, 0, 0, default_config)

        assert core == []
        assert recorder.ops == []

    def test_arc_open(self, rng, recorder, default_config):
        Renderer(recorder, rng).arc(0, 0, 100, 100, 0, math.pi / 2, default_config)

        assert recorder.count("move_to") == 2
        assert recorder.count("line_to") == 0

    def test_arc_closed_straight(self, rng, recorder, default_config):
        """Test that a closed arc returns to the center with plain lines."""
        Renderer(recorder, rng).arc(10, 20, 100, 100, 0, math.pi / 2, default_config, closed=True)

        assert recorder.ops[-2] == ("line_to", (10, 20))
        assert recorder.ops[-1][0] == "line_to"

    def test_arc_closed_rough(self, rng, recorder, default_config):
        Renderer(recorder, rng).arc(
            0, 0, 100, 100, 0, math.pi / 2, default_config, closed=True, rough_closure=True,
        )

        assert recorder.count("line_to") == 0
        assert recorder.count("move_to") == 2 + 4

    def test_arc_negative_start_normalized(self, rng, recorder, default_config):
        Renderer(recorder, rng).arc(0, 0, 100, 100, -math.pi / 2, 0, default_config)
        assert recorder.count("bezier_curve_to") > 0

    def test_empty_arc_draws_nothing(self, rng, recorder, default_config):
        Renderer(recorder, rng).arc(0, 0, 100, 100, 1.0, 1.0, default_config)
        assert recorder.ops == []

    @pytest.mark.parametrize("span", [1e-5, 1e-8, math.ulp(1.0)])
    @pytest.mark.parametrize("seed", range(6))
    def test_tiny_arc_bounded(self, span, seed):
        """Test that start jitter below a tiny arc adds at most one step."""
        recorder = OpsRecorder()
        Renderer(recorder, np.random.default_rng(seed)).arc(0, 0, 100, 100, 1.0, 1.0 + span, SINGLE)

        assert recorder.count("move_to") == 1
        assert 1 <= recorder.count("bezier_curve_to") <= 4

    def test_full_arc_point_count(self, rng, recorder):
        """Test that a wide arc keeps its step count under start jitter."""
        Renderer(recorder, rng).arc(0, 0, 100, 100, 0, math.pi, SINGLE)
        assert 8 <= recorder.count("bezier_curve_to") <= 12

    def test_tiny_pattern_fill_arc_bounded(self, rng, recorder, default_config):
        Renderer(recorder, rng).pattern_fill_arc(0, 0, 100, 100, 1.0, 1.0 + math.ulp(1.0), default_config)
        assert recorder.count("move_to") < 50


class TestSvgPath:
    """Tests for stroking path data."""

    def test_move_and_line(self, recorder, rng, default_config):
        Renderer(recorder, rng).svg_path("M 0 0 L 10 0", default_config)

        assert recorder.count("move_to") == 3
        assert recorder.count("bezier_curve_to") == 2

    def test_cubic_first_pass_starts_at_current_point(self, recorder, rng, default_config):
        """Test that the first bezier pass starts exactly on the pen."""
        Renderer(recorder, rng).svg_path("M 5 5 C 10 10 20 10 30 5", default_config)

        assert recorder.ops[1] == ("move_to", (5, 5))
        assert recorder.count("bezier_curve_to") == 2

    def test_cubic_single_pass(self, recorder, rng):
        Renderer(recorder, rng).svg_path("M 5 5 C 10 10 20 10 30 5", SINGLE)
        assert recorder.count("bezier_curve_to") == 1

    def test_close_draws_back_to_start(self, recorder, rng):
        config = RoughConfig(roughness=0, disable_multi_stroke=True)
        Renderer(recorder, rng).svg_path("M 0 0 L 10 0 L 10 10 Z", config)

        _, last_curve = recorder.ops[-1]
        assert last_curve[4:] == (0, 0)

    def test_malformed_path_raises(self, recorder, rng, default_config):
        from sketchify.path.parser import PathSyntaxError

        with pytest.raises(PathSyntaxError):
            Renderer(recorder, rng).svg_path("M 0 0 L 1", default_config)


class TestFills:
    """Tests for solid and pattern fills."""

    def test_solid_fill_polygon(self, recorder, rng, default_config, square):
        Renderer(recorder, rng).solid_fill_polygon(square, default_config)

        assert recorder.count("move_to") == 1
        assert recorder.count("line_to") == 3

    def test_solid_fill_needs_three_points(self, recorder, rng, default_config):
        Renderer(recorder, rng).solid_fill_polygon([(0, 0), (1, 1)], default_config)
        assert recorder.ops == []

    def test_pattern_fill_polygon(self, recorder, rng, default_config, square):
        Renderer(recorder, rng).pattern_fill_polygon(square, default_config)
        assert recorder.count("bezier_curve_to") > 0

    def test_pattern_fill_arc(self, recorder, rng, default_config):
        Renderer(recorder, rng).pattern_fill_arc(0, 0, 100, 100, 0, math.pi / 2, default_config)
        assert recorder.count("bezier_curve_to") > 0

    def test_fill_path(self, recorder, rng):
        config = RoughConfig(hachure_angle=-90, hachure_gap=1, roughness=0)
        Renderer(recorder, rng).fill_path("M0 0L10 0L10 10L0 10Z", config)

        assert recorder.count("move_to") == 20

    def test_double_line_fill_ops_respects_fill_flag(self, recorder, rng):
        config = dataclasses.replace(SINGLE, disable_multi_stroke_fill=False)
        Renderer(recorder, rng).double_line_fill_ops(0, 0, 10, 0, config)
        assert recorder.count("move_to") == 2


class TestPathRecorder:
    """Tests for the path-data sink."""

    def test_formats_commands(self):
        recorder = PathRecorder(precision=1)
        recorder.move_to(0, 0)
        recorder.line_to(1.25, 2)
        recorder.bezier_curve_to(1, 2, 3, 4, 5, 6)

        assert recorder.path == "M 0.0 0.0 L 1.2 2.0 C 1.0 2.0 3.0 4.0 5.0 6.0"

    def test_get_and_clear(self):
        recorder = PathRecorder()
        recorder.move_to(1, 1)

        assert recorder.get_and_clear() == "M 1.000 1.000"
        assert recorder.path == ""

"""Tests for viewport fitting: ground line, sideways/upward growth, minimum floors."""

from __future__ import annotations

from figure_composer.engine.canvas import CanvasSettings
from figure_composer.engine.placement import FigureRole, LayoutMode, PlacementModel
from figure_composer.engine.viewport import Viewport, fit_viewport, full_canvas_viewport
from tests.conftest import make_figure


def _figures(base_size=(480, 480), accent_size=(64, 64)):
    return {
        FigureRole.BASE: make_figure(FigureRole.BASE, 1, *base_size),
        FigureRole.ACCENT: make_figure(FigureRole.ACCENT, 2, *accent_size),
    }


def test_accent_inside_base_gives_base_bounds():
    vp = fit_viewport(PlacementModel(), _figures(), CanvasSettings())
    assert vp == Viewport(0, 0, 480, 480)


def test_accent_grows_viewport_left_and_up():
    model = PlacementModel()
    model.move_floating(-100, -50)
    vp = fit_viewport(model, _figures(), CanvasSettings())
    assert vp == Viewport(-100, -50, 580, 530)


def test_accent_grows_viewport_right():
    model = PlacementModel()
    model.move_floating(470, 100)
    vp = fit_viewport(model, _figures(), CanvasSettings())
    # 470 + 64 * 0.6
    assert vp.right == 508.4
    assert vp.bottom == 480


def test_accent_below_ground_line_does_not_extend_bottom():
    model = PlacementModel()
    model.move_floating(100, 470)
    vp = fit_viewport(model, _figures(), CanvasSettings())
    assert vp.bottom == 480
    assert vp == Viewport(0, 0, 480, 480)


def test_ground_line_follows_base_size():
    model = PlacementModel()
    vp = fit_viewport(model, _figures(base_size=(480, 300)), CanvasSettings())
    assert vp.bottom == 300


def test_minimum_floors_grow_width_symmetrically_and_height_upward():
    model = PlacementModel()
    model.move_floating(20, 10)
    vp = fit_viewport(model, _figures(base_size=(100, 50)), CanvasSettings())
    assert vp == Viewport(-50, -150, 200, 200)
    assert vp.bottom == 50


def test_rounding_is_half_up_to_one_decimal():
    model = PlacementModel()
    model.move_floating(-10.25, 0)
    vp = fit_viewport(model, _figures(), CanvasSettings())
    assert vp.min_x == -10.2
    assert vp.width == 490.3


def test_auto_crop_off_uses_full_canvas():
    vp = fit_viewport(PlacementModel(), _figures(), CanvasSettings(auto_crop=False))
    assert vp == Viewport(0, 0, 480, 680)


def test_base_floats_uses_full_canvas():
    model = PlacementModel(mode=LayoutMode.BASE_FLOATS)
    vp = fit_viewport(model, _figures(), CanvasSettings())
    assert vp == full_canvas_viewport(CanvasSettings())


def test_missing_base_uses_full_canvas():
    figures = _figures()
    figures[FigureRole.BASE] = None
    vp = fit_viewport(PlacementModel(), figures, CanvasSettings())
    assert vp == Viewport(0, 0, 480, 680)


def test_missing_accent_frames_base_alone():
    figures = _figures()
    figures[FigureRole.ACCENT] = None
    vp = fit_viewport(PlacementModel(), figures, CanvasSettings())
    assert vp == Viewport(0, 0, 480, 480)


def test_viewbox_round_trip():
    vp = Viewport(-10.2, -150, 490.3, 630)
    assert vp.to_viewbox() == "-10.2 -150 490.3 630"
    assert Viewport.from_viewbox(vp.to_viewbox()) == vp

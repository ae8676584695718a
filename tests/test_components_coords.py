from __future__ import annotations

import math

import pytest

from genstudio.components import (
    canvas_pixels_to_percent,
    canvas_to_screen_point,
    clamp_anchor,
    clamp_box_width,
    font_pixels_from_percent,
    percent_to_canvas_pixels,
    screen_delta_to_percent,
    screen_to_canvas_point,
)


def test_clamp_anchor_inside_range():
    assert clamp_anchor(50, 60) == (50, 60)


def test_clamp_anchor_allows_partial_off_canvas():
    assert clamp_anchor(-10, 110) == (-10, 110)


def test_clamp_anchor_limits():
    assert clamp_anchor(-500, 500) == (-20, 120)


@pytest.mark.parametrize("raw, expected", [(0, 5), (4.9, 5), (50, 50), (100, 100), (180, 100)])
def test_clamp_box_width(raw, expected):
    assert clamp_box_width(raw) == expected


def test_percent_pixel_round_trip():
    assert percent_to_canvas_pixels(50, 1080) == 540
    assert math.isclose(canvas_pixels_to_percent(540, 1080), 50.0)


def test_screen_delta_half_zoom_moves_twice_as_far():
    at_full = screen_delta_to_percent(54, 1080, 1.0)
    at_half = screen_delta_to_percent(54, 1080, 0.5)
    assert math.isclose(at_full, 5.0)
    assert math.isclose(at_half, 2 * at_full)


@pytest.mark.parametrize("s1, s2", [(0.25, 1.0), (0.5, 3.0), (1.7, 0.1)])
def test_drag_then_undrag_across_scales_is_identity(s1, s2):
    start = 37.5
    delta_pct = screen_delta_to_percent(123, 1350, s1)
    # 以另一缩放系数换算回等量的屏幕位移
    undo_screen = -delta_pct / 100 * 1350 * s2
    back = start + delta_pct + screen_delta_to_percent(undo_screen, 1350, s2)
    assert math.isclose(back, start, abs_tol=1e-9)


def test_screen_delta_rejects_non_positive_scale():
    with pytest.raises(ValueError):
        screen_delta_to_percent(10, 1080, 0)


def test_screen_canvas_points_inverse():
    origin = (40.0, 15.0)
    sx, sy = canvas_to_screen_point(200, 300, origin, 0.5)
    assert (sx, sy) == (140.0, 165.0)
    assert screen_to_canvas_point(sx, sy, origin, 0.5) == (200.0, 300.0)


class TestFontPixelsFromPercent:
    def test_uses_shortest_dimension(self):
        # 1080x1350 -> 短边 1080，8% -> 86.4 -> 向下取整 86
        assert font_pixels_from_percent(1080, 1350, 8) == 86

    def test_minimum_twelve_pixels(self):
        assert font_pixels_from_percent(100, 100, 1) == 12

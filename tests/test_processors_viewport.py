from __future__ import annotations

import pytest

from genstudio.processors.interaction import HandleSide
from genstudio.processors.viewport import PreviewSurface, ViewportMetrics, ZoomState


class TestZoomState:
    def test_fit_shrinks_to_available_area(self):
        metrics = ViewportMetrics.from_container(620, 755)
        assert (metrics.available_width, metrics.available_height) == (540, 675)
        assert ZoomState().effective_scale(1080, 1350, metrics) == pytest.approx(0.5)

    def test_fit_never_magnifies(self):
        metrics = ViewportMetrics.from_container(5000, 5000)
        assert ZoomState().effective_scale(1080, 1350, metrics) == 1.0

    def test_fit_uses_tighter_axis(self):
        metrics = ViewportMetrics(960, 1080)
        assert ZoomState().effective_scale(1920, 1080, metrics) == pytest.approx(0.5)

    def test_fit_without_viewport_falls_back_to_zoom_level(self):
        zoom = ZoomState(zoom_level=0.7)
        assert zoom.effective_scale(1080, 1350, ViewportMetrics.from_container(50, 50)) == 0.7

    def test_zoom_steps_leave_fit_mode(self):
        zoom = ZoomState()
        assert zoom.zoom_in() == pytest.approx(1.1)
        assert zoom.fit is False
        assert zoom.zoom_out() == pytest.approx(1.0)
        zoom.fit_to_screen()
        assert zoom.fit is True

    def test_zoom_limits(self):
        zoom = ZoomState()
        for _ in range(40):
            zoom.zoom_in()
        assert zoom.zoom_level == pytest.approx(3.0)
        for _ in range(40):
            zoom.zoom_out()
        assert zoom.zoom_level == pytest.approx(0.1)


@pytest.fixture
def surface(make_project):
    # 1080x1350 画布在 620x755 容器中适配 -> 0.5 倍，四周各留 40px
    project = make_project("POSTER")
    return PreviewSurface(project, container_size=(620, 755))


class TestPreviewSurface:
    def test_canvas_is_centered(self, surface):
        assert surface.scale == pytest.approx(0.5)
        assert surface.display_size == (540, 675)
        assert surface.origin == pytest.approx((40.0, 40.0))

    def test_screen_canvas_transform_round_trip(self, surface):
        cx, cy = surface.screen_to_canvas(310, 377.5)
        assert (cx, cy) == pytest.approx((540.0, 675.0))
        assert surface.canvas_to_screen(cx, cy) == pytest.approx((310.0, 377.5))

    def test_layer_rect_matches_shared_layout(self, surface):
        layer = surface.project.add_layer()
        left, top, right, bottom = surface.layer_rect(layer)
        # 框宽 80% -> 864px，居中于 540；单行，行高 24 * 1.3
        assert left == pytest.approx(40 + 108 * 0.5)
        assert right == pytest.approx(40 + 972 * 0.5)
        assert (top + bottom) / 2 == pytest.approx(40 + 675 * 0.5)
        assert bottom - top == pytest.approx(24 * 1.3 * 0.5)

    def test_hit_test_empty_area(self, surface):
        surface.project.add_layer()
        assert surface.hit_test(10, 10) is None

    def test_hit_test_prefers_topmost_layer(self, surface):
        bottom_layer = surface.project.add_layer()
        top_layer = surface.project.add_layer()
        assert surface.hit_test(310, 377.5) == ("layer", top_layer.id, None)
        assert bottom_layer.id != top_layer.id

    def test_handles_only_for_selected_layer(self, surface):
        layer = surface.project.add_layer(align="left")
        assert surface.handle_rects() == {}
        surface.pointer_down(310, 377.5)
        surface.pointer_up()
        assert list(surface.handle_rects()) == [HandleSide.RIGHT]
        assert surface.project.selected_layer_id == layer.id

    def test_drag_layer_through_surface(self, surface):
        layer = surface.project.add_layer()
        surface.pointer_down(310, 377.5)
        # 屏幕 27px @0.5 -> 画布 54px -> 5%
        assert surface.pointer_move(337, 377.5)
        surface.pointer_up()
        assert layer.x == pytest.approx(55.0)

    def test_resize_center_layer_with_right_handle(self, surface):
        layer = surface.project.add_layer()
        surface.pointer_down(310, 377.5)
        surface.pointer_up()
        _, _, right, _ = surface.layer_rect(layer)
        hit = surface.pointer_down(right, 377.5)
        assert hit == ("handle", layer.id, HandleSide.RIGHT)
        surface.pointer_move(right + 27, 377.5)
        surface.pointer_up()
        assert layer.box_width == pytest.approx(90.0)

    def test_click_empty_area_clears_selection(self, surface):
        surface.project.add_layer()
        surface.pointer_down(310, 377.5)
        surface.pointer_up()
        surface.pointer_down(5, 5)
        assert surface.project.selected_layer_id is None

    def test_render_image_matches_display_size(self, surface, solid_png_bytes):
        surface.project.set_background(solid_png_bytes((300, 300)))
        image = surface.render_image()
        assert image.size == surface.display_size

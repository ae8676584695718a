from __future__ import annotations

import pytest

from genstudio.components import AssetLoadError, ExportError, MeasurementUnavailableError
from genstudio.processors.engines.raster import compose


@pytest.fixture
def project(make_project, solid_png_bytes):
    project = make_project("ICON")
    project.set_dimensions(200, 100)
    project.set_background(solid_png_bytes((400, 400), (0, 0, 0)))
    return project


def _red_pixels(image, box):
    region = image.crop(box).convert("RGB")
    return sum(1 for r, g, b in region.getdata() if r > 128 and g < 100 and b < 100)


class TestCompose:
    def test_background_covers_canvas(self, project):
        image = compose(project)
        assert image.size == (200, 100)
        assert image.getpixel((0, 0))[:3] == (0, 0, 0)
        assert image.getpixel((199, 99))[:3] == (0, 0, 0)

    def test_cover_fit_crops_center(self, make_project):
        from io import BytesIO

        from PIL import Image

        # 左白右黑的宽图，裁成方形后中心列左侧为白、右侧为黑
        src = Image.new("RGB", (400, 100), (255, 255, 255))
        src.paste((0, 0, 0), (200, 0, 400, 100))
        buf = BytesIO()
        src.save(buf, format="PNG")

        project = make_project("ICON")
        project.set_dimensions(100, 100)
        project.set_background(buf.getvalue())
        image = compose(project)
        assert image.getpixel((10, 50))[:3] == (255, 255, 255)
        assert image.getpixel((90, 50))[:3] == (0, 0, 0)

    def test_blank_canvas_without_background(self, make_project):
        project = make_project("ICON")
        project.set_dimensions(50, 40)
        assert compose(project).getpixel((25, 20))[:3] == (255, 255, 255)

    def test_text_lands_inside_layout_block(self, project):
        layer = project.add_layer(text="HI", color="#ff0000", font_size=40, x=25, y=50, align="center", box_width=40)
        image = compose(project)
        left, top, right, bottom = project.layout_layer(layer).bounds
        assert _red_pixels(image, (int(left), int(top), int(right) + 1, int(bottom) + 1)) > 0
        assert _red_pixels(image, (120, 0, 200, 100)) == 0

    def test_preview_scale_resizes_export(self, project):
        project.add_layer(text="HI", color="#ff0000", font_size=30)
        assert compose(project, scale=0.5).size == (100, 50)
        assert compose(project, scale=2.0).size == (400, 200)

    def test_invalid_color_fails_before_drawing(self, project):
        project.add_layer(text="HI", color="not-a-color")
        with pytest.raises(ExportError):
            compose(project)

    def test_non_positive_scale(self, project):
        with pytest.raises(ExportError):
            compose(project, scale=0)

    def test_undecodable_background(self, project):
        project.background = b"broken"
        with pytest.raises(AssetLoadError):
            compose(project)


def test_broken_font_file_surfaces_through_compose(solid_png_bytes, tmp_path):
    from genstudio.project import Project

    broken = tmp_path / "Broken.ttf"
    broken.write_bytes(b"not a font")
    project = Project("ICON", font_map={"Broken": {"normal": str(broken)}})
    project.set_dimensions(200, 100)
    project.set_background(solid_png_bytes())
    project.add_layer(text="HELLO", font_family="Broken")
    with pytest.raises(MeasurementUnavailableError):
        compose(project)


class TestFittedBackgroundCache:
    @pytest.fixture
    def decode_calls(self, monkeypatch):
        from genstudio.processors.engines import raster

        calls = []
        real = raster.decode_background

        def _counting(source):
            calls.append(source)
            return real(source)

        monkeypatch.setattr(raster, "decode_background", _counting)
        monkeypatch.setattr(raster, "_FITTED_BACKGROUND", {})
        return calls

    def test_repeated_compose_reuses_fit(self, project, decode_calls):
        project.add_layer(text="HI", color="#ff0000", font_size=30)
        compose(project, scale=0.5)
        compose(project, scale=0.5)
        compose(project)
        assert len(decode_calls) == 1

    def test_drawing_does_not_leak_into_cache(self, project, decode_calls):
        layer = project.add_layer(text="HI", color="#ff0000", font_size=40, x=25, y=50, box_width=40)
        compose(project)
        project.update_layer(layer.id, x=75)
        image = compose(project)
        assert _red_pixels(image, (0, 0, 80, 100)) == 0
        assert _red_pixels(image, (120, 0, 200, 100)) > 0

    def test_new_background_refits(self, project, decode_calls, solid_png_bytes):
        compose(project)
        project.background = solid_png_bytes((300, 300), (255, 255, 255))
        assert compose(project).getpixel((100, 50))[:3] == (255, 255, 255)
        assert len(decode_calls) == 2

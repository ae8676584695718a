from __future__ import annotations

import math

import pytest
from PIL import features

from genstudio.components import (
    FontFace,
    MeasurementUnavailableError,
    build_font_face,
    fixed_advance_measurer,
    is_bold_weight,
    probe_available_fonts,
    resolve_font_file,
)


requires_freetype = pytest.mark.skipif(not features.check("freetype2"), reason="Pillow built without FreeType")


@pytest.fixture
def no_font_files(tmp_path, monkeypatch):
    """屏蔽系统候选字体与 config/fonts，强制走内置字体。"""
    monkeypatch.setattr("genstudio.components.fonts.CONST_CANDIDATE_FONT_PATHS", ())
    monkeypatch.setattr("genstudio.components.fonts.PATH_FONTS_DIR", tmp_path / "fonts")


def _ink_width(face: FontFace, text: str) -> int:
    from PIL import Image, ImageDraw

    measured = face.measure(text)
    image = Image.new("L", (int(measured) + 200, int(face.size * 3)), 0)
    ImageDraw.Draw(image).text(
        (100, face.size),
        text,
        font=face.pillow_font(),
        fill=255,
        anchor="la",
        stroke_width=face.stroke_width,
        stroke_fill=255,
    )
    left, _, right, _ = image.getbbox()
    return right - left


def test_fixed_advance_counts_spaces():
    measure = fixed_advance_measurer(10)
    assert measure("HELLO ") == 60.0
    assert measure("") == 0.0


@pytest.mark.parametrize(
    "weight, expected",
    [("bold", True), ("Bolder", True), ("700", True), ("600", True), ("500", False), ("normal", False), (None, False)],
)
def test_is_bold_weight(weight, expected):
    assert is_bold_weight(weight) is expected


class TestResolveFontFile:
    def test_font_map_relative_to_given_absolute(self, tmp_path):
        regular = tmp_path / "Brand-Regular.ttf"
        bold = tmp_path / "Brand-Bold.ttf"
        regular.write_bytes(b"")
        bold.write_bytes(b"")
        font_map = {"Brand": {"normal": str(regular), "bold": str(bold)}}
        assert resolve_font_file("Brand", "bold", font_map) == bold
        assert resolve_font_file("Brand", "400", font_map) == regular

    def test_missing_mapped_file_is_ignored(self, tmp_path, monkeypatch):
        monkeypatch.setattr("genstudio.components.fonts.CONST_CANDIDATE_FONT_PATHS", ())
        monkeypatch.setattr("genstudio.components.fonts.PATH_FONTS_DIR", tmp_path / "none")
        font_map = {"Brand": {"normal": str(tmp_path / "missing.ttf")}}
        assert resolve_font_file("Brand", "normal", font_map) is None


class TestFontFaceMeasure:
    def test_builtin_metrics_are_proportional(self):
        face = FontFace(family="Inter", weight="normal", size=20)
        assert face.measure("") == 0.0
        assert face.measure("WW") > face.measure("ii")
        assert face.stroke_width == 0

    def test_bold_builtin_metrics_are_wider(self):
        plain = FontFace(family="Inter", weight="normal", size=20)
        bold = FontFace(family="Inter", weight="bold", size=20)
        assert bold.stroke_width >= 1
        assert bold.measure("HELLO") == pytest.approx(plain.measure("HELLO") + 2 * bold.stroke_width)
        assert bold.measure("") == 0.0

    @requires_freetype
    @pytest.mark.parametrize("weight", ["normal", "bold"])
    def test_builtin_face_draws_at_measured_width(self, no_font_files, weight):
        face = build_font_face("Inter", weight, 64, {})
        assert face.font_file is None
        text = "HELLO WORLD WIDE TEXT"
        measured = face.measure(text)
        ink = _ink_width(face, text)
        # 墨迹宽度只比前进宽度少两端字形边距
        assert ink <= measured + 1
        assert ink >= measured - face.size * 0.25

    @requires_freetype
    def test_builtin_bold_ink_is_wider_than_normal(self, no_font_files):
        text = "HELLO WORLD"
        plain = build_font_face("Inter", "normal", 64, {})
        bold = build_font_face("Inter", "bold", 64, {})
        assert _ink_width(bold, text) > _ink_width(plain, text)

    def test_ttf_face_measures_close_to_drawn_width(self):
        fonts = probe_available_fonts()
        if not fonts:
            pytest.skip("no TrueType font available on this system")
        face = FontFace(family="Any", weight="normal", size=48, font_file=fonts[0])
        text = "HELLO WORLD"
        try:
            measured = face.measure(text)
        except MeasurementUnavailableError:
            pytest.skip("system font cannot be registered with ReportLab")
        assert math.isclose(face.pillow_font().getlength(text), measured, rel_tol=0.02)

    def test_broken_font_file_raises(self, tmp_path):
        broken = tmp_path / "Broken.ttf"
        broken.write_bytes(b"not a font")
        face = FontFace(family="Broken", weight="normal", size=20, font_file=broken)
        with pytest.raises(MeasurementUnavailableError):
            face.measure("HELLO")
        with pytest.raises(MeasurementUnavailableError):
            face.pillow_font()


def test_build_font_face_without_any_font_uses_builtin(no_font_files):
    face = build_font_face("Nope", "bold", 30, {})
    assert face.font_file is None
    assert face.is_bold
    assert face.stroke_width == 1

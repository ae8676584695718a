from __future__ import annotations

import pytest

from genstudio.components import ExportError
from genstudio.processors.engines.vector import export_markup, rasterize_markup

RED_SQUARE = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="10" height="10" viewBox="0 0 10 10">'
    '<rect x="0" y="0" width="10" height="10" fill="#ff0000"/></svg>'
)


def test_export_returns_markup_unchanged(make_project):
    project = make_project("ICON")
    project.set_vector_content(RED_SQUARE)
    assert export_markup(project) == RED_SQUARE


def test_export_without_vector_content(make_project):
    with pytest.raises(ExportError):
        export_markup(make_project("ICON"))


def test_rasterize_to_requested_size():
    image = rasterize_markup(RED_SQUARE, 40, 30)
    assert image.size == (40, 30)
    assert image.mode == "RGBA"
    r, g, b, _a = image.getpixel((20, 15))
    assert r > 200 and g < 60 and b < 60


def test_rasterize_rejects_garbage():
    with pytest.raises(ExportError):
        rasterize_markup("this is not svg", 10, 10)


def test_rasterize_rejects_empty_size():
    with pytest.raises(ExportError):
        rasterize_markup(RED_SQUARE, 0, 10)

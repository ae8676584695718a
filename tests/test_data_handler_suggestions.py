from __future__ import annotations

import base64
import json

import pytest

from genstudio.components import AssetLoadError
from genstudio.data_handler import (
    decode_background,
    extract_svg_markup,
    fallback_layer_spec,
    font_map_from_config,
    load_studio_config,
    parse_layout_suggestion,
    validate_layout_suggestion,
)


def _item(**overrides):
    base = {"text": "Hi", "x": 50, "y": 50, "color": "#000", "fontSize": 6, "align": "center"}
    base.update(overrides)
    return base


class TestValidateLayoutSuggestion:
    def test_minimal_item_gets_defaults(self):
        specs = validate_layout_suggestion({"textLayers": [_item()]})
        assert specs == [
            {
                "text": "Hi",
                "x": 50.0,
                "y": 50.0,
                "color": "#000",
                "font_size_pct": 6.0,
                "font_weight": "bold",
                "font_family": "Inter",
                "align": "center",
                "vertical_align": "center",
                "box_width": 80.0,
            }
        ]

    def test_accepts_json_text_and_bytes_with_bom(self):
        raw = json.dumps({"textLayers": [_item(x="12.5")]})
        assert validate_layout_suggestion(raw)[0]["x"] == 12.5
        assert validate_layout_suggestion(("\ufeff" + raw).encode("utf-8"))[0]["x"] == 12.5

    def test_unknown_vertical_align_becomes_center(self):
        assert validate_layout_suggestion({"textLayers": [_item(verticalAlign="middle")]})[0]["vertical_align"] == "center"

    @pytest.mark.parametrize(
        "payload",
        [
            "{not json",
            [],
            {"layers": []},
            {"textLayers": "nope"},
            {"textLayers": []},
            {"textLayers": [_item(align="justify")]},
            {"textLayers": [_item(fontSize="big")]},
            {"textLayers": [_item(x=True)]},
            {"textLayers": [_item(), {"text": "missing fields"}]},
            {"textLayers": [_item(fontSize=0)]},
        ],
    )
    def test_malformed_payloads(self, payload):
        assert validate_layout_suggestion(payload) is None


class TestParseLayoutSuggestion:
    def test_fallback_is_single_centered_layer(self):
        specs = parse_layout_suggestion({"textLayers": []}, "new collection")
        assert specs == [fallback_layer_spec("new collection")]
        spec = specs[0]
        assert spec["text"] == "NEW COLLECTION"
        assert (spec["x"], spec["y"], spec["font_size_pct"], spec["box_width"]) == (50.0, 50.0, 8.0, 80.0)

    def test_valid_payload_passes_through(self):
        specs = parse_layout_suggestion({"textLayers": [_item(), _item(text="Two")]}, "brief")
        assert [s["text"] for s in specs] == ["Hi", "Two"]


class TestExtractSvgMarkup:
    def test_strips_code_fences_and_chatter(self):
        raw = "Here you go:\n```svg\n<svg viewBox='0 0 10 10'><rect/></svg>\n```\nEnjoy"
        assert extract_svg_markup(raw) == "<svg viewBox='0 0 10 10'><rect/></svg>"

    def test_plain_markup_unchanged(self):
        assert extract_svg_markup("  <svg></svg>  ") == "<svg></svg>"

    def test_no_tags_returns_trimmed_text(self):
        assert extract_svg_markup("```xml\nnothing here\n```") == "nothing here"


class TestDecodeBackground:
    def test_bytes(self, solid_png_bytes):
        img = decode_background(solid_png_bytes((20, 10)))
        assert img.size == (20, 10)
        assert img.mode == "RGBA"

    def test_data_url(self, solid_png_bytes):
        url = "data:image/png;base64," + base64.b64encode(solid_png_bytes((4, 4))).decode("ascii")
        assert decode_background(url).size == (4, 4)

    def test_path(self, solid_png_bytes, tmp_path):
        p = tmp_path / "bg.png"
        p.write_bytes(solid_png_bytes((8, 6)))
        assert decode_background(p).size == (8, 6)
        assert decode_background(str(p)).size == (8, 6)

    @pytest.mark.parametrize("source", [b"garbage", "data:image/png;base64,!!!!", 12345])
    def test_failures_raise_asset_load_error(self, source):
        with pytest.raises(AssetLoadError):
            decode_background(source)

    def test_missing_file_raises_asset_load_error(self, tmp_path):
        with pytest.raises(AssetLoadError):
            decode_background(tmp_path / "missing.png")


class TestStudioConfig:
    def test_missing_file_returns_empty(self, tmp_path):
        assert load_studio_config(tmp_path / "studio.json") == {}

    def test_bom_is_tolerated(self, tmp_path):
        p = tmp_path / "studio.json"
        p.write_text("\ufeff" + json.dumps({"fonts": {"Inter": {"normal": "a.ttf"}}}), encoding="utf-8")
        assert load_studio_config(p) == {"fonts": {"Inter": {"normal": "a.ttf"}}}

    def test_invalid_json_returns_empty(self, tmp_path):
        p = tmp_path / "studio.json"
        p.write_text("{broken", encoding="utf-8")
        assert load_studio_config(p) == {}

    def test_font_map_normalization(self):
        cfg = {"fonts": {"Inter": "fonts/Inter.ttf", "Roboto": {"normal": "r.ttf", "bold": "rb.ttf", "x": 1}, "Bad": 3}}
        assert font_map_from_config(cfg) == {
            "Inter": {"normal": "fonts/Inter.ttf"},
            "Roboto": {"normal": "r.ttf", "bold": "rb.ttf"},
        }

from __future__ import annotations

import math
from types import SimpleNamespace

import pytest

from genstudio.components import fixed_advance_measurer
from genstudio.processors.layout import (
    box_left_edge,
    layout_layer,
    layout_text_block,
    line_height_for,
    resolve_first_line_top,
    wrap_text_lines,
)

MEASURE = fixed_advance_measurer(10)


def _layer(**overrides):
    base = dict(
        text="HELLO WORLD FOO",
        x=10.0,
        y=10.0,
        box_width=50.0,
        font_size=50,
        align="left",
        vertical_align="top",
    )
    base.update(overrides)
    return SimpleNamespace(**base)


class TestWrapTextLines:
    def test_fits_on_single_line(self):
        assert wrap_text_lines("HELLO WORLD FOO", 540, MEASURE) == ["HELLO WORLD FOO"]

    def test_candidate_includes_trailing_space(self):
        # "WORLD FOO " 为 100px，108px 内放得下
        assert wrap_text_lines("HELLO WORLD FOO", 108, MEASURE) == ["HELLO", "WORLD FOO"]

    def test_narrow_box_breaks_every_word(self):
        assert wrap_text_lines("HELLO WORLD FOO", 86.4, MEASURE) == ["HELLO", "WORLD", "FOO"]

    def test_overlong_word_keeps_own_line(self):
        assert wrap_text_lines("A SUPERCALIFRAGILISTIC B", 50, MEASURE) == ["A", "SUPERCALIFRAGILISTIC", "B"]

    def test_first_word_never_breaks_before_itself(self):
        assert wrap_text_lines("ENORMOUS", 10, MEASURE) == ["ENORMOUS"]

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_empty_text_yields_single_empty_line(self, text):
        assert wrap_text_lines(text, 100, MEASURE) == [""]

    def test_manual_breaks_are_whitespace_by_default(self):
        assert wrap_text_lines("ONE\nTWO", 500, MEASURE) == ["ONE TWO"]

    def test_hard_breaks_force_line_boundaries(self):
        assert wrap_text_lines("ONE\nTWO THREE", 500, MEASURE, hard_breaks=True) == ["ONE", "TWO THREE"]

    def test_emitted_lines_have_no_trailing_space(self):
        lines = wrap_text_lines("alpha  beta   gamma delta", 120, MEASURE)
        assert all(line == line.rstrip() for line in lines)

    @pytest.mark.parametrize("width", [40, 86.4, 108, 150, 230, 540])
    def test_rewrapping_is_idempotent(self, width):
        text = "the quick brown fox jumps over the lazy dog again and again"
        first = wrap_text_lines(text, width, MEASURE)
        again = wrap_text_lines(" ".join(first), width, MEASURE)
        assert again == first


class TestVerticalAnchor:
    def test_top(self):
        assert resolve_first_line_top(100, 60, "top") == 100

    def test_center(self):
        assert resolve_first_line_top(100, 60, "center") == 70

    def test_bottom(self):
        assert resolve_first_line_top(100, 60, "bottom") == 40

    def test_unknown_value_behaves_as_center(self):
        assert resolve_first_line_top(100, 60, "middle") == 70


@pytest.mark.parametrize("align, expected", [("left", 300), ("center", 250), ("right", 200)])
def test_box_left_edge(align, expected):
    assert box_left_edge(300, 100, align) == expected


def test_line_height_multiplier():
    assert math.isclose(line_height_for(50), 65.0)


class TestLayoutScenario:
    """画布 1080x1350，每字符 10px。"""

    def test_wide_box_single_line_at_anchor(self):
        block = layout_layer(_layer(), 1080, 1350, MEASURE)
        assert block.line_texts() == ["HELLO WORLD FOO"]
        assert block.max_width == 540
        line = block.lines[0]
        assert (line.x, line.top) == (108.0, 135.0)

    def test_narrow_box_wraps_on_word_boundaries(self):
        block = layout_layer(_layer(box_width=10), 1080, 1350, MEASURE)
        assert block.max_width == 108
        assert block.line_texts() == ["HELLO", "WORLD FOO"]
        assert all(len(t) <= 10 for t in block.line_texts())
        assert [ln.top for ln in block.lines] == [135.0, 200.0]

    def test_all_lines_share_anchor_x(self):
        block = layout_layer(_layer(box_width=8, align="right"), 1080, 1350, MEASURE)
        assert len(block.lines) == 3
        assert {ln.x for ln in block.lines} == {108.0}

    def test_center_block_midpoint_equals_anchor(self):
        block = layout_text_block(
            "one two three four five six",
            x_pct=50,
            y_pct=40,
            box_width_pct=10,
            font_size=30,
            align="center",
            vertical_align="center",
            canvas_width=1080,
            canvas_height=1350,
            measure=MEASURE,
        )
        mid = (block.top + block.bottom) / 2
        assert math.isclose(mid, 1350 * 0.4)

    def test_bottom_block_ends_at_anchor(self):
        block = layout_layer(_layer(box_width=10, vertical_align="bottom"), 1080, 1350, MEASURE)
        assert math.isclose(block.bottom, 135.0)

    def test_bounds_follow_align(self):
        block = layout_layer(_layer(align="center", x=50), 1080, 1350, MEASURE)
        assert block.bounds == (270.0, 135.0, 810.0, 200.0)

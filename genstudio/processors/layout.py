"""
文件路径：genstudio/processors/layout.py

说明：文本图层排版（贪心按词换行 + 垂直锚点解析 + 多行定位）。

预览表面与导出光栅化调用同一组函数、传入同一度量函数，两者必须逐像素一致：
行高倍数、行尾空格裁剪、度量口径任何一处分叉都视为缺陷。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from ..components import Measurer, percent_to_canvas_pixels
from ..variables import STYLE_LINE_HEIGHT_RATIO


@dataclass
class TextLine:
    """单行排版结果（画布像素）。

    属性：
        text: 行文本（已去除行尾空格）。
        x: 水平锚点；按 align 解释为左缘/中心/右缘，所有行共用。
        top: 行顶 y。
    """

    text: str
    x: float
    top: float


@dataclass
class TextBlock:
    """一个文本图层的完整排版结果（画布像素）。"""

    anchor_x: float
    anchor_y: float
    max_width: float
    line_height: float
    align: str
    vertical_align: str
    lines: List[TextLine] = field(default_factory=list)

    @property
    def total_height(self) -> float:
        return len(self.lines) * self.line_height

    @property
    def top(self) -> float:
        return self.lines[0].top if self.lines else self.anchor_y

    @property
    def bottom(self) -> float:
        return self.top + self.total_height

    @property
    def left(self) -> float:
        return box_left_edge(self.anchor_x, self.max_width, self.align)

    @property
    def right(self) -> float:
        return self.left + self.max_width

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """文本框 (left, top, right, bottom)，宽度为最大行宽，高度为行数 * 行高。"""
        return self.left, self.top, self.right, self.bottom

    def line_texts(self) -> List[str]:
        return [ln.text for ln in self.lines]


def _wrap_paragraph(words: List[str], max_width: float, measure: Measurer) -> List[str]:
    lines: List[str] = []
    current = ""
    for word in words:
        # 候选行按“已有内容 + 新词 + 空格”度量
        candidate = current + word + " "
        if measure(candidate) > max_width and current:
            lines.append(current.rstrip())
            current = word + " "
        else:
            current = candidate
    lines.append(current.rstrip())
    return lines


def wrap_text_lines(
    text: str,
    max_width: float,
    measure: Measurer,
    hard_breaks: bool = False,
) -> List[str]:
    """按最大行宽贪心换行。

    - 按空白切词；默认手动换行符视为普通空白（单段落）；
    - 加入下一个词前先度量候选行，超宽且当前行已有词时收尾当前行，新词另起一行；
    - 单个超宽词独占一行，不做截断；
    - 空文本返回单个空行 [""]。

    参数：
        text: 原始文本。
        max_width: 最大行宽（画布像素）。
        measure: 度量函数 str -> 像素宽度。
        hard_breaks: True 时按换行符强制分段，各段分别换行（可选扩展）。
    """
    raw = "" if text is None else str(text)
    if not hard_breaks:
        return _wrap_paragraph(raw.split(), max_width, measure)

    wrapped: List[str] = []
    for paragraph in raw.splitlines() or [""]:
        wrapped.extend(_wrap_paragraph(paragraph.split(), max_width, measure))
    return wrapped


def line_height_for(font_size: float) -> float:
    """行高 = 字号 * 1.3。"""
    return float(font_size) * STYLE_LINE_HEIGHT_RATIO


def resolve_first_line_top(anchor_y: float, total_height: float, vertical_align: str) -> float:
    """按垂直对齐解析首行行顶。

    - top：首行行顶即锚点；
    - center：整块以锚点垂直居中；
    - bottom：整块底边落在锚点。
    """
    if vertical_align == "top":
        return anchor_y
    if vertical_align == "bottom":
        return anchor_y - total_height
    return anchor_y - total_height / 2.0


def box_left_edge(anchor_x: float, box_width_px: float, align: str) -> float:
    """按水平对齐解析文本框左缘：left 锚点即左缘，right 锚点即右缘，center 锚点为中心。"""
    if align == "left":
        return anchor_x
    if align == "right":
        return anchor_x - box_width_px
    return anchor_x - box_width_px / 2.0


def layout_text_block(
    text: str,
    *,
    x_pct: float,
    y_pct: float,
    box_width_pct: float,
    font_size: float,
    align: str,
    vertical_align: str,
    canvas_width: float,
    canvas_height: float,
    measure: Measurer,
    hard_breaks: bool = False,
) -> TextBlock:
    """完成一个文本块的排版：换行、行高、垂直锚点与逐行定位。

    返回：
        TextBlock，坐标均为画布像素；水平方向每行共用锚点 x，由绘制原语按 align 对齐。
    """
    anchor_x = percent_to_canvas_pixels(x_pct, canvas_width)
    anchor_y = percent_to_canvas_pixels(y_pct, canvas_height)
    max_width = percent_to_canvas_pixels(box_width_pct, canvas_width)

    texts = wrap_text_lines(text, max_width, measure, hard_breaks=hard_breaks)
    line_height = line_height_for(font_size)
    first_top = resolve_first_line_top(anchor_y, len(texts) * line_height, vertical_align)

    block = TextBlock(
        anchor_x=anchor_x,
        anchor_y=anchor_y,
        max_width=max_width,
        line_height=line_height,
        align=align,
        vertical_align=vertical_align,
    )
    for i, line in enumerate(texts):
        block.lines.append(TextLine(text=line, x=anchor_x, top=first_top + i * line_height))
    return block


def layout_layer(
    layer,
    canvas_width: float,
    canvas_height: float,
    measure: Measurer,
    hard_breaks: bool = False,
) -> TextBlock:
    """对 TextLayer（或具有相同属性的对象）排版。"""
    return layout_text_block(
        layer.text,
        x_pct=layer.x,
        y_pct=layer.y,
        box_width_pct=layer.box_width,
        font_size=layer.font_size,
        align=layer.align,
        vertical_align=layer.vertical_align,
        canvas_width=canvas_width,
        canvas_height=canvas_height,
        measure=measure,
        hard_breaks=hard_breaks,
    )


__all__ = [
    "TextLine",
    "TextBlock",
    "wrap_text_lines",
    "line_height_for",
    "resolve_first_line_top",
    "box_left_edge",
    "layout_text_block",
    "layout_layer",
]

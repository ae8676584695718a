"""
文件路径：genstudio/components/coords.py

说明：坐标换算与钳制相关通用函数。

坐标空间：
- 百分比空间：图层 x / y / box_width，相对画布宽或高（0~100，可短暂越界）；
- 画布像素空间：按配置尺寸的未缩放像素；
- 屏幕像素空间：当前渲染表面的像素，与画布像素之间相差统一缩放系数 s。

所有百分比增量都先换算为画布像素，再换算为百分比，保证行为与缩放无关。
"""

from __future__ import annotations

import math
from typing import Tuple

from ..variables import (
    CONST_ANCHOR_MAX,
    CONST_ANCHOR_MIN,
    CONST_BOX_WIDTH_MAX,
    CONST_BOX_WIDTH_MIN,
    CONST_FONT_SIZE_MIN_PX,
)


def clamp_value(value: float, lower: float, upper: float) -> float:
    """将数值限制在 [lower, upper] 区间。"""
    return max(lower, min(upper, float(value)))


def clamp_anchor(x: float, y: float) -> Tuple[float, float]:
    """将锚点限制在允许的百分比范围内（允许部分拖出画布）。

    参数：
        x, y: 百分比锚点。
    返回：
        (clamped_x, clamped_y)
    """
    return (
        clamp_value(x, CONST_ANCHOR_MIN, CONST_ANCHOR_MAX),
        clamp_value(y, CONST_ANCHOR_MIN, CONST_ANCHOR_MAX),
    )


def clamp_box_width(box_width: float) -> float:
    """将最大行宽百分比限制在 [5, 100]。"""
    return clamp_value(box_width, CONST_BOX_WIDTH_MIN, CONST_BOX_WIDTH_MAX)


def percent_to_canvas_pixels(pct: float, dimension: float) -> float:
    """百分比 -> 画布像素：pct / 100 * dimension。"""
    return float(pct) / 100.0 * float(dimension)


def canvas_pixels_to_percent(px: float, dimension: float) -> float:
    """画布像素 -> 百分比。"""
    return float(px) / float(dimension) * 100.0


def screen_delta_to_percent(delta_screen_px: float, dimension: float, scale: float) -> float:
    """屏幕像素增量 -> 百分比增量。

    先除以缩放系数得到画布像素增量，再相对画布尺寸换算为百分比：
    (delta / s) / dimension * 100。

    参数：
        delta_screen_px: 指针在屏幕上的位移。
        dimension: 对应方向的画布尺寸（宽或高）。
        scale: 当前渲染表面的缩放系数（> 0）。
    异常：
        ValueError: scale 或 dimension 非正数。
    """
    if scale <= 0:
        raise ValueError(f"缩放系数必须为正数：{scale}")
    if dimension <= 0:
        raise ValueError(f"画布尺寸必须为正数：{dimension}")
    canvas_delta = float(delta_screen_px) / float(scale)
    return canvas_pixels_to_percent(canvas_delta, dimension)


def screen_to_canvas_point(
    sx: float,
    sy: float,
    origin: Tuple[float, float],
    scale: float,
) -> Tuple[float, float]:
    """屏幕坐标 -> 画布像素坐标（预览命中测试使用的逆变换）。

    参数：
        sx, sy: 屏幕坐标。
        origin: 画布左上角在屏幕中的位置。
        scale: 缩放系数。
    """
    ox, oy = origin
    return (float(sx) - ox) / scale, (float(sy) - oy) / scale


def canvas_to_screen_point(
    cx: float,
    cy: float,
    origin: Tuple[float, float],
    scale: float,
) -> Tuple[float, float]:
    """画布像素坐标 -> 屏幕坐标。"""
    ox, oy = origin
    return ox + float(cx) * scale, oy + float(cy) * scale


def font_pixels_from_percent(canvas_width: int, canvas_height: int, pct: float) -> int:
    """按画布短边百分比换算字号像素：max(12, floor(min(W, H) * pct / 100))。"""
    base = min(int(canvas_width), int(canvas_height))
    return max(CONST_FONT_SIZE_MIN_PX, math.floor(base * (float(pct) / 100.0)))


__all__ = [
    "clamp_value",
    "clamp_anchor",
    "clamp_box_width",
    "percent_to_canvas_pixels",
    "canvas_pixels_to_percent",
    "screen_delta_to_percent",
    "screen_to_canvas_point",
    "canvas_to_screen_point",
    "font_pixels_from_percent",
]

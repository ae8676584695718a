"""
文件路径：genstudio/processors/viewport.py

说明：预览表面的缩放与坐标换算。

- ViewportMetrics：由外层界面测得的可用区域，作为输入传入，核心不反向测量界面；
- ZoomState：手动缩放（0.1~3.0，步长 0.1）与适配模式（只缩小不放大）；
- PreviewSurface：屏幕 <-> 画布坐标互换、图层与手柄矩形、命中测试、指针事件分发。

适配模式缩放：min(可用宽 / 画布宽, 可用高 / 画布高, 1.0)，可用区域 = 容器尺寸 - 80。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from ..components import canvas_to_screen_point, clamp_value, get_logger, screen_to_canvas_point
from ..variables import (
    CONST_FIT_MAX_SCALE,
    CONST_FIT_PADDING,
    CONST_HANDLE_HIT_RADIUS,
    CONST_ZOOM_MAX,
    CONST_ZOOM_MIN,
    CONST_ZOOM_STEP,
)
from .interaction import HandleSide, visible_handles


logger = get_logger(__name__)

Rect = Tuple[float, float, float, float]


@dataclass(frozen=True)
class ViewportMetrics:
    """预览可用区域（屏幕像素）。"""

    available_width: float = 0.0
    available_height: float = 0.0

    @classmethod
    def from_container(cls, width: float, height: float, padding: float = CONST_FIT_PADDING) -> "ViewportMetrics":
        """由容器尺寸扣除留白得到可用区域（不小于 0）。"""
        return cls(max(0.0, float(width) - padding), max(0.0, float(height) - padding))


@dataclass
class ZoomState:
    zoom_level: float = 1.0
    fit: bool = True

    def zoom_in(self) -> float:
        """放大一步并退出适配模式。"""
        self.fit = False
        self.zoom_level = round(clamp_value(self.zoom_level + CONST_ZOOM_STEP, CONST_ZOOM_MIN, CONST_ZOOM_MAX), 4)
        return self.zoom_level

    def zoom_out(self) -> float:
        """缩小一步并退出适配模式。"""
        self.fit = False
        self.zoom_level = round(clamp_value(self.zoom_level - CONST_ZOOM_STEP, CONST_ZOOM_MIN, CONST_ZOOM_MAX), 4)
        return self.zoom_level

    def fit_to_screen(self) -> None:
        self.fit = True

    def effective_scale(self, canvas_width: float, canvas_height: float, metrics: ViewportMetrics) -> float:
        """当前缩放系数：适配模式按可用区域计算，可用区域非正时退回手动缩放值。"""
        if self.fit and metrics.available_width > 0 and metrics.available_height > 0:
            scale_x = metrics.available_width / float(canvas_width)
            scale_y = metrics.available_height / float(canvas_height)
            return min(scale_x, scale_y, CONST_FIT_MAX_SCALE)
        return self.zoom_level


def _contains(rect: Rect, x: float, y: float) -> bool:
    left, top, right, bottom = rect
    return left <= x <= right and top <= y <= bottom


class PreviewSurface:
    """可交互的预览表面：把屏幕指针事件换算到画布坐标并交给交互状态机。

    参数：
        project: Project 实例。
        zoom: 缩放状态；默认适配模式。
        container_size: 外层容器尺寸（屏幕像素）。
    """

    def __init__(self, project, zoom: Optional[ZoomState] = None, container_size: Tuple[float, float] = (0.0, 0.0)) -> None:
        self.project = project
        self.zoom = zoom or ZoomState()
        self.container_width = 0.0
        self.container_height = 0.0
        self.metrics = ViewportMetrics()
        self.resize_container(*container_size)

    def resize_container(self, width: float, height: float) -> None:
        """容器尺寸变化时调用（适配模式下缩放随之重算）。"""
        self.container_width = max(0.0, float(width))
        self.container_height = max(0.0, float(height))
        self.metrics = ViewportMetrics.from_container(self.container_width, self.container_height)

    # -----------------------------
    # 坐标换算
    # -----------------------------
    @property
    def scale(self) -> float:
        return self.zoom.effective_scale(self.project.width, self.project.height, self.metrics)

    @property
    def display_size(self) -> Tuple[int, int]:
        s = self.scale
        return max(1, round(self.project.width * s)), max(1, round(self.project.height * s))

    @property
    def origin(self) -> Tuple[float, float]:
        """画布左上角的屏幕坐标：画布小于容器时居中，否则贴左上。"""
        s = self.scale
        ox = max(0.0, (self.container_width - self.project.width * s) / 2.0)
        oy = max(0.0, (self.container_height - self.project.height * s) / 2.0)
        return ox, oy

    def screen_to_canvas(self, sx: float, sy: float) -> Tuple[float, float]:
        return screen_to_canvas_point(sx, sy, self.origin, self.scale)

    def canvas_to_screen(self, cx: float, cy: float) -> Tuple[float, float]:
        return canvas_to_screen_point(cx, cy, self.origin, self.scale)

    # -----------------------------
    # 几何
    # -----------------------------
    def layer_rect(self, layer) -> Rect:
        """图层文本框的屏幕矩形（与导出共用排版结果）。"""
        left, top, right, bottom = self.project.layout_layer(layer).bounds
        sl, st = self.canvas_to_screen(left, top)
        sr, sb = self.canvas_to_screen(right, bottom)
        return sl, st, sr, sb

    def handle_rects(self) -> Dict[HandleSide, Rect]:
        """所选图层的调整手柄矩形；未选中时为空。"""
        layer = self.project.selected_layer
        if layer is None:
            return {}
        left, top, right, bottom = self.layer_rect(layer)
        mid_y = (top + bottom) / 2.0
        r = CONST_HANDLE_HIT_RADIUS
        rects: Dict[HandleSide, Rect] = {}
        for side in visible_handles(layer.align):
            edge = left if side is HandleSide.LEFT else right
            rects[side] = (edge - r, mid_y - r, edge + r, mid_y + r)
        return rects

    def hit_test(self, sx: float, sy: float) -> Optional[Tuple[str, str, Optional[HandleSide]]]:
        """命中测试：先手柄，再按叠放顺序自顶向下检查图层。

        返回：
            ("handle", layer_id, side) / ("layer", layer_id, None) / None（空白处）。
        """
        selected = self.project.selected_layer_id
        for side, rect in self.handle_rects().items():
            if _contains(rect, sx, sy):
                return "handle", selected, side
        for layer in reversed(self.project.layers):
            if _contains(self.layer_rect(layer), sx, sy):
                return "layer", layer.id, None
        return None

    # -----------------------------
    # 指针事件
    # -----------------------------
    def pointer_down(self, sx: float, sy: float):
        hit = self.hit_test(sx, sy)
        controller = self.project.interaction
        if hit is None:
            controller.click_empty_area()
        elif hit[0] == "handle":
            controller.pointer_down_on_handle(hit[1], hit[2], (sx, sy))
        else:
            controller.pointer_down_on_layer(hit[1], (sx, sy))
        return hit

    def pointer_move(self, sx: float, sy: float) -> bool:
        return self.project.interaction.pointer_move((sx, sy), self.scale)

    def pointer_up(self) -> None:
        self.project.interaction.pointer_up()

    def pointer_leave(self) -> None:
        self.project.interaction.pointer_leave()

    # -----------------------------
    # 渲染
    # -----------------------------
    def render_image(self):
        """按当前缩放渲染预览图（位图走与导出相同的合成路径）。"""
        from .engines import raster, vector

        if self.project.vector_content is not None:
            width, height = self.display_size
            return vector.rasterize_markup(self.project.vector_content, width, height)
        return raster.compose(self.project, scale=self.scale)


__all__ = [
    "Rect",
    "ViewportMetrics",
    "ZoomState",
    "PreviewSurface",
]

"""
文件路径：genstudio/processors/interaction.py

说明：指针驱动的移动/调整宽度交互状态机。

状态：Idle -> Moving | ResizingLeft | ResizingRight -> Idle（指针抬起或离开表面）。
- 每个画布同一时刻至多一个进行中的交互；交互进行中再次按下视为杂散事件，忽略；
- Idle 状态下的指针移动同样忽略；
- 选中状态独立于交互状态，仅在点击空白区域（或项目重置、所选图层被删除）时清除；
- 所有字段更新都走图层存储的 update_layer，保持单一写入路径。

调整宽度的符号与幅度取决于拖动的手柄与当前 align：
    align   | 右手柄              | 左手柄
    left    | width += dx         | （不显示）
    right   | （不显示）          | width -= dx
    center  | width += 2 * dx     | width -= 2 * dx
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, Tuple

from ..components import clamp_anchor, clamp_box_width, get_logger, screen_delta_to_percent


logger = get_logger(__name__)

Point = Tuple[float, float]


class InteractionMode(str, Enum):
    IDLE = "idle"
    MOVING = "moving"
    RESIZING_LEFT = "resizing_left"
    RESIZING_RIGHT = "resizing_right"


class HandleSide(str, Enum):
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class Interaction:
    """一次交互的基线快照（按下时捕获，移动时据此计算增量）。"""

    mode: InteractionMode = InteractionMode.IDLE
    layer_id: Optional[str] = None
    pointer_start: Point = (0.0, 0.0)
    anchor_start: Point = (0.0, 0.0)
    box_width_start: float = 0.0


IDLE = Interaction()


class LayerStore(Protocol):
    """交互状态机依赖的图层存储接口（由 Project 实现）。"""

    width: int
    height: int

    def get_layer(self, layer_id: str): ...

    def update_layer(self, layer_id: str, fields=None, **kwargs) -> bool: ...


def visible_handles(align: str) -> Tuple[HandleSide, ...]:
    """返回该对齐方式下可见的调整手柄：只显示调整时真正移动的自由边。"""
    if align == "left":
        return (HandleSide.RIGHT,)
    if align == "right":
        return (HandleSide.LEFT,)
    return (HandleSide.LEFT, HandleSide.RIGHT)


def resize_box_width(box_width_start: float, delta_x_pct: float, align: str, side: HandleSide) -> float:
    """按手柄与对齐方式计算新的框宽（百分比），结果钳制到 [5, 100]。

    居中文本以锚点对称伸缩，单侧拖动需同时移动两条可见边，因此系数为 2。
    """
    factor = 2.0 if align == "center" else 1.0
    sign = 1.0 if side is HandleSide.RIGHT else -1.0
    return clamp_box_width(box_width_start + sign * factor * delta_x_pct)


class InteractionController:
    """交互状态机：把指针事件翻译为图层字段更新。

    用法示例：
        controller = InteractionController(project)
        controller.pointer_down_on_layer(layer_id, (100, 100))
        controller.pointer_move((150, 120), scale=0.5)
        controller.pointer_up()
    """

    def __init__(self, store: LayerStore) -> None:
        self.store = store
        self.state: Interaction = IDLE
        self.selected_id: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.state.mode is not InteractionMode.IDLE

    # -----------------------------
    # 按下
    # -----------------------------
    def pointer_down_on_layer(self, layer_id: str, pointer: Point) -> bool:
        """在图层主体上按下：选中该图层并进入 Moving。"""
        if self.is_active:
            logger.debug("交互进行中，忽略按下事件：%s", layer_id)
            return False
        layer = self.store.get_layer(layer_id)
        if layer is None:
            logger.debug("按下目标图层不存在，忽略：%s", layer_id)
            return False
        self.selected_id = layer_id
        self.state = Interaction(
            mode=InteractionMode.MOVING,
            layer_id=layer_id,
            pointer_start=(float(pointer[0]), float(pointer[1])),
            anchor_start=(float(layer.x), float(layer.y)),
            box_width_start=float(layer.box_width),
        )
        return True

    def pointer_down_on_handle(self, layer_id: str, side: HandleSide, pointer: Point) -> bool:
        """在调整手柄上按下：仅对已选中图层、且该手柄在当前对齐下可见时生效。"""
        if self.is_active:
            logger.debug("交互进行中，忽略手柄按下：%s", layer_id)
            return False
        layer = self.store.get_layer(layer_id)
        if layer is None or layer_id != self.selected_id:
            logger.debug("手柄所属图层未选中或不存在，忽略：%s", layer_id)
            return False
        side = HandleSide(side)
        if side not in visible_handles(layer.align):
            logger.debug("手柄在 align=%s 下不可见，忽略：%s", layer.align, side.value)
            return False
        mode = InteractionMode.RESIZING_LEFT if side is HandleSide.LEFT else InteractionMode.RESIZING_RIGHT
        self.state = Interaction(
            mode=mode,
            layer_id=layer_id,
            pointer_start=(float(pointer[0]), float(pointer[1])),
            anchor_start=(float(layer.x), float(layer.y)),
            box_width_start=float(layer.box_width),
        )
        return True

    def click_empty_area(self) -> None:
        """点击画布空白处：清除选中（不影响进行中的交互判定）。"""
        if self.is_active:
            return
        self.selected_id = None

    # -----------------------------
    # 移动
    # -----------------------------
    def pointer_move(self, pointer: Point, scale: float) -> bool:
        """指针移动：按当前状态更新图层；Idle 下忽略。

        参数：
            pointer: 当前指针屏幕坐标。
            scale: 当前渲染表面的缩放系数。
        返回：
            是否产生了字段更新。
        """
        state = self.state
        if state.mode is InteractionMode.IDLE or state.layer_id is None:
            return False

        dx_screen = float(pointer[0]) - state.pointer_start[0]
        dy_screen = float(pointer[1]) - state.pointer_start[1]
        dx_pct = screen_delta_to_percent(dx_screen, self.store.width, scale)

        if state.mode is InteractionMode.MOVING:
            dy_pct = screen_delta_to_percent(dy_screen, self.store.height, scale)
            x, y = clamp_anchor(state.anchor_start[0] + dx_pct, state.anchor_start[1] + dy_pct)
            return self.store.update_layer(state.layer_id, {"x": x, "y": y})

        layer = self.store.get_layer(state.layer_id)
        if layer is None:
            return False
        side = HandleSide.LEFT if state.mode is InteractionMode.RESIZING_LEFT else HandleSide.RIGHT
        width = resize_box_width(state.box_width_start, dx_pct, layer.align, side)
        return self.store.update_layer(state.layer_id, {"box_width": width})

    # -----------------------------
    # 结束
    # -----------------------------
    def pointer_up(self) -> None:
        """指针抬起：更新已实时写入，直接回到 Idle。"""
        self.state = IDLE

    def pointer_leave(self) -> None:
        """指针离开表面：与抬起相同。"""
        self.state = IDLE

    def reset(self) -> None:
        """项目重置：丢弃进行中的交互与选中状态。"""
        self.state = IDLE
        self.selected_id = None


__all__ = [
    "InteractionMode",
    "HandleSide",
    "Interaction",
    "IDLE",
    "LayerStore",
    "visible_handles",
    "resize_box_width",
    "InteractionController",
]

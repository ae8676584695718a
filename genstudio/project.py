"""
文件路径：genstudio/project.py

模块职责：
- 项目外观（Facade）：画布尺寸、背景图 XOR 矢量内容、有序文本图层集合、选中与交互状态；
- 对外暴露图层 CRUD、版式建议应用、导出入口；
- 所有图层字段写入（表单编辑与拖拽/调整宽度）都经过 update_layer 单一路径。

说明：
- 图层顺序即叠放顺序（最后一个在最上层），仅追加与显式删除会改变顺序；
- 无效图层 id 的更新/删除按空操作处理，返回 False；
- 未知字段名或非法枚举值属于调用方编程错误，抛出 ValueError。

变量引用说明（来自 genstudio/variables.py）：
- STYLE_LAYER_*，CONST_ASSET_PRESETS，CONST_VECTOR_ASSET_TYPES，CONST_ALIGN_VALUES，CONST_VERTICAL_ALIGN_VALUES
- STATUS_SUCCESS，STATUS_FALLBACK，ERR_DATA_INVALID，ERR_CANVAS_LOCKED，ERR_LAYER_NOT_FOUND
"""

from __future__ import annotations

import uuid
from collections import OrderedDict
from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .components import (
    ErrorHandler,
    ExportError,
    FileHandler,
    FontFace,
    Measurer,
    build_font_face,
    clamp_box_width,
    clamp_value,
    font_pixels_from_percent,
    get_logger,
)
from .data_handler import (
    decode_background,
    extract_svg_markup,
    font_map_from_config,
    load_studio_config,
    validate_layout_suggestion,
    fallback_layer_spec,
)
from .processors.interaction import InteractionController
from .processors.layout import TextBlock, layout_layer
from .variables import (
    CONST_ALIGN_VALUES,
    CONST_ANCHOR_MAX,
    CONST_ANCHOR_MIN,
    CONST_ASSET_PRESETS,
    CONST_RASTER_SUFFIX,
    CONST_VECTOR_ASSET_TYPES,
    CONST_VECTOR_SUFFIX,
    CONST_VERTICAL_ALIGN_VALUES,
    CONST_ENCODING,
    STYLE_LAYER_ALIGN_DEFAULT,
    STYLE_LAYER_BOX_WIDTH_DEFAULT,
    STYLE_LAYER_COLOR_DEFAULT,
    STYLE_LAYER_FONT_FAMILY_DEFAULT,
    STYLE_LAYER_FONT_SIZE_DEFAULT,
    STYLE_LAYER_FONT_SIZE_PCT_DEFAULT,
    STYLE_LAYER_FONT_WEIGHT_DEFAULT,
    STYLE_LAYER_TEXT_DEFAULT,
    STYLE_LAYER_VERTICAL_ALIGN_DEFAULT,
    STATUS_FALLBACK,
    STATUS_SUCCESS,
    ERR_CANVAS_LOCKED,
    ERR_DATA_INVALID,
    ERR_LAYER_NOT_FOUND,
)


logger = get_logger(__name__)


class AssetType(str, Enum):
    POSTER = "POSTER"
    SLIDE = "SLIDE"
    ICON = "ICON"
    LOGO = "LOGO"

    @property
    def dimensions(self) -> Tuple[int, int]:
        return CONST_ASSET_PRESETS[self.value]

    @property
    def is_vector(self) -> bool:
        return self.value in CONST_VECTOR_ASSET_TYPES


def _new_layer_id() -> str:
    return uuid.uuid4().hex


@dataclass
class TextLayer:
    """文本图层。

    属性：
        id: 图层唯一标识，生命周期内不变。
        text: 文本内容。
        x, y: 百分比锚点，钳制到 [-20, 120]。
        color: 颜色（任意 Pillow/Tk 可识别的颜色字符串）。
        font_size: 渲染像素字号。
        font_size_pct: 原始的短边百分比字号（仅供参考，不自动重算）。
        font_family, font_weight: 字体族与字重。
        align: left / center / right。
        vertical_align: top / center / bottom。
        box_width: 最大行宽百分比，钳制到 [5, 100]。
    """

    id: str = field(default_factory=_new_layer_id)
    text: str = STYLE_LAYER_TEXT_DEFAULT
    x: float = 50.0
    y: float = 50.0
    color: str = STYLE_LAYER_COLOR_DEFAULT
    font_size: float = STYLE_LAYER_FONT_SIZE_DEFAULT
    font_size_pct: Optional[float] = STYLE_LAYER_FONT_SIZE_PCT_DEFAULT
    font_family: str = STYLE_LAYER_FONT_FAMILY_DEFAULT
    font_weight: str = STYLE_LAYER_FONT_WEIGHT_DEFAULT
    align: str = STYLE_LAYER_ALIGN_DEFAULT
    vertical_align: str = STYLE_LAYER_VERTICAL_ALIGN_DEFAULT
    box_width: float = STYLE_LAYER_BOX_WIDTH_DEFAULT

    def to_dict(self) -> Dict[str, Any]:
        """导出为对外约定的 camelCase 字典。"""
        data = asdict(self)
        return {_FIELD_TO_WIRE.get(k, k): v for k, v in data.items()}


# 对外字段名（camelCase）与内部字段名的映射
_FIELD_TO_WIRE: Dict[str, str] = {
    "font_size": "fontSize",
    "font_size_pct": "fontSizePct",
    "font_family": "fontFamily",
    "font_weight": "fontWeight",
    "vertical_align": "verticalAlign",
    "box_width": "boxWidth",
}
_WIRE_TO_FIELD: Dict[str, str] = {v: k for k, v in _FIELD_TO_WIRE.items()}

_EDITABLE_FIELDS = (
    "text",
    "x",
    "y",
    "color",
    "font_size",
    "font_size_pct",
    "font_family",
    "font_weight",
    "align",
    "vertical_align",
    "box_width",
)


def _invalid(message: str) -> ValueError:
    return ValueError(ErrorHandler.format_error(ERR_DATA_INVALID, message))


def normalize_layer_fields(fields: Mapping[str, Any]) -> Dict[str, Any]:
    """校验并规范化图层字段：接受 snake_case 或 camelCase 名称，数值钳制到合法范围。

    异常：
        ValueError: 未知字段名、非法枚举值或非法数值。
    """
    result: Dict[str, Any] = {}
    for raw_name, value in fields.items():
        name = _WIRE_TO_FIELD.get(raw_name, raw_name)
        if name not in _EDITABLE_FIELDS:
            raise _invalid(f"未知的图层字段：{raw_name}")

        if name in ("x", "y"):
            result[name] = clamp_value(_as_float(name, value), CONST_ANCHOR_MIN, CONST_ANCHOR_MAX)
        elif name == "box_width":
            result[name] = clamp_box_width(_as_float(name, value))
        elif name == "font_size":
            size = _as_float(name, value)
            if size <= 0:
                raise _invalid(f"字号必须为正数：{value!r}")
            result[name] = size
        elif name == "font_size_pct":
            result[name] = None if value is None else _as_float(name, value)
        elif name == "align":
            if value not in CONST_ALIGN_VALUES:
                raise _invalid(f"非法 align：{value!r}")
            result[name] = value
        elif name == "vertical_align":
            if value not in CONST_VERTICAL_ALIGN_VALUES:
                raise _invalid(f"非法 vertical_align：{value!r}")
            result[name] = value
        else:
            result[name] = "" if value is None else str(value)
    return result


def _as_float(name: str, value: Any) -> float:
    if isinstance(value, bool):
        raise _invalid(f"字段 {name} 需要数值：{value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise _invalid(f"字段 {name} 需要数值：{value!r}") from exc


class Project:
    """一个设计资产项目：画布 + 背景/矢量内容 + 文本图层。

    参数：
        asset_type: 资产类型，决定默认画布尺寸。
        brief: 创意简报文本（兜底图层使用其大写形式）。
        font_map: 字体族 -> TTF 映射；None 时读取 config/studio.json。
        measurer_factory: TextLayer -> 度量函数；None 时使用 ReportLab 字体度量。
        hard_breaks: 是否把文本中的换行符视为强制换行。
    """

    def __init__(
        self,
        asset_type: AssetType | str = AssetType.POSTER,
        brief: str = "",
        *,
        font_map: Optional[Mapping[str, Mapping[str, str]]] = None,
        measurer_factory: Optional[Callable[[TextLayer], Measurer]] = None,
        hard_breaks: bool = False,
    ) -> None:
        self.asset_type = AssetType(asset_type)
        self.width, self.height = self.asset_type.dimensions
        self.brief = brief
        self.background = None
        self.vector_content: Optional[str] = None
        self.font_map = font_map if font_map is not None else font_map_from_config(load_studio_config())
        self.measurer_factory = measurer_factory
        self.hard_breaks = hard_breaks
        self.last_suggestion_status: Optional[str] = None
        self._layers: "OrderedDict[str, TextLayer]" = OrderedDict()
        self.interaction = InteractionController(self)

    # -----------------------------
    # 画布
    # -----------------------------
    @property
    def has_content(self) -> bool:
        return self.background is not None or self.vector_content is not None or bool(self._layers)

    @property
    def is_locked(self) -> bool:
        """生成内容后画布尺寸锁定。"""
        return self.has_content

    def set_dimensions(self, width: int, height: int) -> None:
        """设置画布尺寸（正整数）；已有内容时拒绝修改。

        异常：
            ValueError: 尺寸非正整数。
            RuntimeError: 画布已锁定。
        """
        if isinstance(width, bool) or isinstance(height, bool) or int(width) != width or int(height) != height:
            raise _invalid(f"画布尺寸必须为整数：{width}x{height}")
        if width <= 0 or height <= 0:
            raise _invalid(f"画布尺寸必须为正数：{width}x{height}")
        if self.is_locked:
            raise RuntimeError(ErrorHandler.format_error(ERR_CANVAS_LOCKED, "已有内容，画布尺寸不可修改"))
        self.width, self.height = int(width), int(height)

    def set_asset_type(self, asset_type: AssetType | str) -> None:
        """切换资产类型并应用其默认尺寸（仅在画布未锁定时）。"""
        kind = AssetType(asset_type)
        width, height = kind.dimensions
        self.set_dimensions(width, height)
        self.asset_type = kind

    def set_background(self, source) -> None:
        """设置背景图（解码失败抛 AssetLoadError，项目状态不变）；清除矢量内容。"""
        image = decode_background(source)
        self.background = image
        self.vector_content = None
        logger.info("背景图已设置：%sx%s", image.width, image.height)

    def set_vector_content(self, raw: str) -> str:
        """设置矢量内容：提取 SVG 标记，清除背景图与全部文本图层。"""
        markup = extract_svg_markup(raw)
        self.vector_content = markup
        self.background = None
        self._layers.clear()
        self.interaction.reset()
        logger.info("矢量内容已设置：%s 字符", len(markup))
        return markup

    def reset(self) -> None:
        """丢弃背景、矢量内容、简报、全部图层、选中与进行中的交互；保留资产类型与尺寸。"""
        self.background = None
        self.vector_content = None
        self.brief = ""
        self.last_suggestion_status = None
        self._layers.clear()
        self.interaction.reset()
        logger.info("项目已重置")

    # -----------------------------
    # 图层 CRUD
    # -----------------------------
    @property
    def layers(self) -> List[TextLayer]:
        return list(self._layers.values())

    def get_layer(self, layer_id: str) -> Optional[TextLayer]:
        return self._layers.get(layer_id)

    def add_layer(self, **overrides: Any) -> TextLayer:
        """按默认值新增图层（追加到最上层），可用关键字覆盖字段。"""
        layer = TextLayer()
        for name, value in normalize_layer_fields(overrides).items():
            setattr(layer, name, value)
        self._layers[layer.id] = layer
        logger.info("新增图层：%s", layer.id)
        return layer

    def update_layer(self, layer_id: str, fields: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> bool:
        """字段级更新。

        返回：
            是否找到并更新了图层；无效 id 返回 False。
        异常：
            ValueError: 未知字段或非法取值。
        """
        merged: Dict[str, Any] = dict(fields or {})
        merged.update(kwargs)
        normalized = normalize_layer_fields(merged)
        layer = self._layers.get(layer_id)
        if layer is None:
            logger.debug("[%s] 更新目标图层不存在，忽略：%s", ERR_LAYER_NOT_FOUND, layer_id)
            return False
        for name, value in normalized.items():
            setattr(layer, name, value)
        return True

    def remove_layer(self, layer_id: str) -> bool:
        """删除图层；无效 id 返回 False。删除所选图层时一并清除选中与交互。"""
        if self._layers.pop(layer_id, None) is None:
            logger.debug("[%s] 删除目标图层不存在，忽略：%s", ERR_LAYER_NOT_FOUND, layer_id)
            return False
        if self.interaction.selected_id == layer_id or self.interaction.state.layer_id == layer_id:
            self.interaction.reset()
        logger.info("删除图层：%s", layer_id)
        return True

    @property
    def selected_layer_id(self) -> Optional[str]:
        return self.interaction.selected_id

    @property
    def selected_layer(self) -> Optional[TextLayer]:
        layer_id = self.interaction.selected_id
        return self._layers.get(layer_id) if layer_id else None

    def select_layer(self, layer_id: str) -> bool:
        """直接选中图层（如图层列表点击）；无效 id 返回 False。"""
        if layer_id not in self._layers:
            return False
        self.interaction.selected_id = layer_id
        return True

    def clear_selection(self) -> None:
        self.interaction.click_empty_area()

    # -----------------------------
    # 版式建议
    # -----------------------------
    def layer_from_spec(self, spec: Mapping[str, Any]) -> TextLayer:
        """将 LayerSpec 映射为新图层（新 id，百分比字号换算为像素）。"""
        pct = float(spec["font_size_pct"])
        fields = {k: v for k, v in spec.items() if k != "font_size_pct"}
        fields["font_size"] = font_pixels_from_percent(self.width, self.height, pct)
        fields["font_size_pct"] = pct
        layer = TextLayer()
        for name, value in normalize_layer_fields(fields).items():
            setattr(layer, name, value)
        return layer

    def apply_layout_suggestion(self, payload: Any) -> List[TextLayer]:
        """用版式建议替换整个图层集合（首次生成与重新排版共用）。

        建议不可用时替换为单个兜底图层；结果状态写入 last_suggestion_status。

        异常：
            ValueError: 当前没有背景图（文本图层仅在位图背景上有意义）。
        """
        if self.background is None:
            raise _invalid("应用版式建议前需要先设置背景图")
        specs = validate_layout_suggestion(payload)
        if specs is None:
            logger.warning("版式建议不可用，使用兜底图层：%s", self.brief)
            specs = [fallback_layer_spec(self.brief)]
            self.last_suggestion_status = STATUS_FALLBACK
        else:
            self.last_suggestion_status = STATUS_SUCCESS

        self.interaction.reset()
        self._layers.clear()
        for spec in specs:
            layer = self.layer_from_spec(spec)
            self._layers[layer.id] = layer
        logger.info("已应用版式建议：%s 个图层（%s）", len(self._layers), self.last_suggestion_status)
        return self.layers

    # -----------------------------
    # 排版与导出
    # -----------------------------
    def font_face_for(self, layer: TextLayer) -> FontFace:
        return build_font_face(layer.font_family, layer.font_weight, layer.font_size, self.font_map)

    def measurer_for(self, layer: TextLayer) -> Measurer:
        if self.measurer_factory is not None:
            return self.measurer_factory(layer)
        return self.font_face_for(layer).measure

    def layout_layer(self, layer: TextLayer) -> TextBlock:
        """预览与导出共用的排版入口。"""
        return layout_layer(layer, self.width, self.height, self.measurer_for(layer), hard_breaks=self.hard_breaks)

    def export(self):
        """导出：矢量项目返回 SVG 字符串，否则返回画布分辨率的 Pillow 图像。"""
        from .processors.engines import raster, vector  # 延迟导入渲染引擎

        if self.vector_content is not None:
            return vector.export_markup(self)
        return raster.compose(self)

    def save_export(self, path: Optional[Path] = None) -> Path:
        """导出并写入文件；未指定路径时生成 output/genstudio-<type>-<时间戳>.png|.svg。"""
        result = self.export()
        is_vector = isinstance(result, str)
        if path is None:
            suffix = CONST_VECTOR_SUFFIX if is_vector else CONST_RASTER_SUFFIX
            path = FileHandler.timestamped_output_path(self.asset_type.value, suffix=suffix)
        path = Path(path)
        FileHandler.ensure_parent_writable(path)
        try:
            if is_vector:
                path.write_text(result, encoding=CONST_ENCODING)
            else:
                result.save(str(path), format="PNG")
        except (OSError, ValueError) as exc:
            raise ExportError(f"写入导出文件失败：{path}：{exc}") from exc
        logger.info("导出完成：%s", path)
        return path


__all__ = [
    "AssetType",
    "TextLayer",
    "normalize_layer_fields",
    "Project",
]

"""
文件路径：genstudio/data_handler.py

模块职责：
- 解析外部生成服务返回的数据：版式建议（文本图层列表）、矢量标记、背景图；
- 加载工作室配置（字体映射等），与字体解析配合使用。

说明：
- 版式建议整体校验：任一图层缺少必填字段或取值非法，即视为整份响应不可用，
  返回单个兜底图层（居中、创意简报大写、8% 字号、80% 框宽），不让整个生成流程失败。
- 背景图解码失败统一抛出 AssetLoadError。

变量引用说明（来自 genstudio/variables.py）：
- PATH_STUDIO_CONFIG_JSON, CONST_ENCODING, CONST_SUGGESTION_REQUIRED_FIELDS, CONST_FALLBACK_*
- ERR_CONFIG_LOAD_FAILED, ERR_SUGGESTION_MALFORMED
"""

from __future__ import annotations

import base64
import binascii
import json
import math
import re
from io import BytesIO
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from .components import AssetLoadError, FileHandler, get_logger, retry_on_exception
from .variables import (
    PATH_STUDIO_CONFIG_JSON,
    CONST_ENCODING,
    CONST_ALIGN_VALUES,
    CONST_VERTICAL_ALIGN_VALUES,
    CONST_SUGGESTION_REQUIRED_FIELDS,
    CONST_FALLBACK_ANCHOR,
    CONST_FALLBACK_BOX_WIDTH,
    CONST_FALLBACK_FONT_SIZE_PCT,
    CONST_FALLBACK_FONT_WEIGHT,
    STYLE_LAYER_BOX_WIDTH_DEFAULT,
    STYLE_LAYER_COLOR_DEFAULT,
    STYLE_LAYER_FONT_FAMILY_DEFAULT,
    STYLE_LAYER_FONT_WEIGHT_DEFAULT,
    STYLE_LAYER_VERTICAL_ALIGN_DEFAULT,
    ERR_CONFIG_LOAD_FAILED,
    ERR_SUGGESTION_MALFORMED,
)


logger = get_logger(__name__)

LayerSpec = Dict[str, Any]
BackgroundSource = Union[bytes, bytearray, str, Path, Any]

_DATA_URL_RE = re.compile(r"^data:image/[\w.+-]+;base64,", re.IGNORECASE)
_CODE_FENCE_RE = re.compile(r"```(?:svg|xml)?", re.IGNORECASE)


def _json_loads_strip_bom(content: str):
    """解析 JSON 字符串，自动去除 UTF-8 BOM。"""
    if content.startswith("\ufeff"):
        content = content.lstrip("\ufeff")
    return json.loads(content)


# =============================
# 版式建议
# =============================
def _to_number(value: Any) -> float:
    """数值字段：接受 int/float/数字字符串；布尔、NaN、无穷视为非法。"""
    if isinstance(value, bool):
        raise ValueError(f"非法数值：{value!r}")
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str) and value.strip():
        number = float(value.strip())
    else:
        raise ValueError(f"非法数值：{value!r}")
    if math.isnan(number) or math.isinf(number):
        raise ValueError(f"非法数值：{value!r}")
    return number


def _spec_from_item(item: Any) -> LayerSpec:
    """将单个建议图层规范化为 LayerSpec（字号仍为百分比）；非法时抛 ValueError。"""
    if not isinstance(item, Mapping):
        raise ValueError(f"图层不是对象：{item!r}")
    missing = [k for k in CONST_SUGGESTION_REQUIRED_FIELDS if item.get(k) is None]
    if missing:
        raise ValueError(f"缺少必填字段：{missing}")

    text = item["text"]
    color = item["color"]
    if not isinstance(text, str) or not isinstance(color, str) or not color.strip():
        raise ValueError("text/color 必须为字符串")
    align = str(item["align"]).strip().lower()
    if align not in CONST_ALIGN_VALUES:
        raise ValueError(f"非法 align：{item['align']!r}")
    font_size_pct = _to_number(item["fontSize"])
    if font_size_pct <= 0:
        raise ValueError(f"字号百分比必须为正数：{font_size_pct}")

    vertical_align = str(item.get("verticalAlign") or STYLE_LAYER_VERTICAL_ALIGN_DEFAULT).strip().lower()
    if vertical_align not in CONST_VERTICAL_ALIGN_VALUES:
        vertical_align = STYLE_LAYER_VERTICAL_ALIGN_DEFAULT

    box_width = item.get("boxWidth")
    return {
        "text": text,
        "x": _to_number(item["x"]),
        "y": _to_number(item["y"]),
        "color": color.strip(),
        "font_size_pct": font_size_pct,
        "font_weight": str(item.get("fontWeight") or STYLE_LAYER_FONT_WEIGHT_DEFAULT),
        "font_family": str(item.get("fontFamily") or STYLE_LAYER_FONT_FAMILY_DEFAULT),
        "align": align,
        "vertical_align": vertical_align,
        # 0 / 缺省 与原服务约定一致：回退默认框宽
        "box_width": _to_number(box_width) if box_width else STYLE_LAYER_BOX_WIDTH_DEFAULT,
    }


def validate_layout_suggestion(payload: Any) -> Optional[List[LayerSpec]]:
    """校验版式建议；可用时返回 LayerSpec 列表，不可用返回 None。

    参数：
        payload: JSON 字符串 / bytes，或已解码的 {"textLayers": [...]}。
    """
    data = payload
    try:
        if isinstance(payload, (bytes, bytearray)):
            data = _json_loads_strip_bom(bytes(payload).decode(CONST_ENCODING))
        elif isinstance(payload, str):
            data = _json_loads_strip_bom(payload)
    except (UnicodeDecodeError, ValueError) as exc:
        logger.warning("[%s] 版式建议不是合法 JSON：%s", ERR_SUGGESTION_MALFORMED, exc)
        return None

    if not isinstance(data, Mapping):
        logger.warning("[%s] 版式建议根节点不是对象", ERR_SUGGESTION_MALFORMED)
        return None
    items = data.get("textLayers")
    if not isinstance(items, list) or not items:
        logger.warning("[%s] 版式建议缺少 textLayers 或为空", ERR_SUGGESTION_MALFORMED)
        return None

    specs: List[LayerSpec] = []
    for idx, item in enumerate(items):
        try:
            specs.append(_spec_from_item(item))
        except ValueError as exc:
            logger.warning("[%s] 第 %s 个建议图层非法：%s", ERR_SUGGESTION_MALFORMED, idx, exc)
            return None
    return specs


def fallback_layer_spec(brief: str) -> LayerSpec:
    """兜底图层：居中、创意简报大写、8% 字号、80% 框宽。"""
    return {
        "text": str(brief or "").upper(),
        "x": CONST_FALLBACK_ANCHOR,
        "y": CONST_FALLBACK_ANCHOR,
        "color": STYLE_LAYER_COLOR_DEFAULT,
        "font_size_pct": CONST_FALLBACK_FONT_SIZE_PCT,
        "font_weight": CONST_FALLBACK_FONT_WEIGHT,
        "font_family": STYLE_LAYER_FONT_FAMILY_DEFAULT,
        "align": "center",
        "vertical_align": "center",
        "box_width": CONST_FALLBACK_BOX_WIDTH,
    }


def parse_layout_suggestion(payload: Any, brief: str) -> List[LayerSpec]:
    """解析版式建议；不可用时返回恰好一个兜底图层。"""
    specs = validate_layout_suggestion(payload)
    if specs is None:
        logger.warning("版式建议不可用，使用兜底图层（brief=%s）", brief)
        return [fallback_layer_spec(brief)]
    return specs


# =============================
# 矢量标记
# =============================
def extract_svg_markup(raw: str) -> str:
    """从生成服务的原始文本中提取 SVG 标记。

    - 去除 Markdown 代码围栏（```svg / ```xml / ```）并裁剪首尾空白；
    - 截取首个 `<svg` 到最后一个 `</svg>`（含）；找不到时原样返回裁剪后的文本。
    """
    text = _CODE_FENCE_RE.sub("", str(raw or "")).strip()
    start = text.find("<svg")
    end = text.rfind("</svg>")
    if start != -1 and end != -1 and end > start:
        return text[start : end + len("</svg>")]
    return text


# =============================
# 背景图
# =============================
@retry_on_exception(exceptions=(OSError,))
def _read_bytes(path: Path) -> bytes:
    return path.read_bytes()


def decode_background(source: BackgroundSource):
    """将背景来源解码为 Pillow RGBA 图像。

    支持：Pillow 图像、原始字节、`data:image/...;base64,` URL、文件路径。

    异常：
        AssetLoadError: 任何读取或解码失败。
    """
    from PIL import Image  # 延迟导入 Pillow

    if isinstance(source, Image.Image):
        return source.convert("RGBA")

    try:
        if isinstance(source, (bytes, bytearray)):
            payload = bytes(source)
        elif isinstance(source, str) and _DATA_URL_RE.match(source.strip()):
            payload = base64.b64decode(_DATA_URL_RE.sub("", source.strip()), validate=True)
        elif isinstance(source, (str, Path)):
            path = Path(source)
            FileHandler.validate_readable_file(path)
            payload = _read_bytes(path)
        else:
            raise AssetLoadError(f"不支持的背景来源类型：{type(source).__name__}")

        with Image.open(BytesIO(payload)) as img:
            img.load()
            return img.convert("RGBA")
    except AssetLoadError:
        logger.error("背景图加载失败：不支持的来源类型")
        raise
    except (OSError, ValueError, binascii.Error) as exc:
        logger.error("背景图加载失败：%s", exc)
        raise AssetLoadError(f"背景图加载失败：{exc}") from exc


# =============================
# 工作室配置
# =============================
def load_studio_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """加载工作室配置 JSON（可选）。

    参数：
        config_path: 配置路径；默认读取 `config/studio.json`。

    返回：
        配置字典，例如：{"fonts": {"Inter": {"normal": "config/fonts/Inter-Regular.ttf"}}}。
        文件不存在或解析失败时返回空字典。
    """
    path = config_path or PATH_STUDIO_CONFIG_JSON
    if not path.exists():
        logger.warning("找不到工作室配置文件，将使用空配置：%s", path)
        return {}
    try:
        data = _json_loads_strip_bom(path.read_text(encoding=CONST_ENCODING))
    except (OSError, ValueError) as exc:
        logger.error("[%s] 工作室配置加载失败：%s", ERR_CONFIG_LOAD_FAILED, exc)
        return {}
    if not isinstance(data, dict):
        logger.error("[%s] 工作室配置根节点必须是对象：%s", ERR_CONFIG_LOAD_FAILED, path)
        return {}
    return data


def font_map_from_config(config: Mapping[str, Any]) -> Dict[str, Dict[str, str]]:
    """从配置中提取字体映射 {字体族: {"normal": 路径, "bold": 路径}}，忽略非法项。"""
    raw = config.get("fonts") if isinstance(config, Mapping) else None
    if not isinstance(raw, Mapping):
        return {}
    result: Dict[str, Dict[str, str]] = {}
    for family, entry in raw.items():
        if isinstance(entry, str):
            result[str(family)] = {"normal": entry}
        elif isinstance(entry, Mapping):
            result[str(family)] = {str(k): str(v) for k, v in entry.items() if isinstance(v, str)}
    return result


__all__ = [
    "LayerSpec",
    "validate_layout_suggestion",
    "fallback_layer_spec",
    "parse_layout_suggestion",
    "extract_svg_markup",
    "decode_background",
    "load_studio_config",
    "font_map_from_config",
]

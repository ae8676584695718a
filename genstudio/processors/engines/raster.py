"""
文件路径：genstudio/processors/engines/raster.py

说明：Pillow 合成位图：背景图按 cover 方式裁切铺满画布，再按图层顺序逐行绘制文本。

- 导出在画布真实分辨率（scale=1）下合成；预览对同一合成结果缩放，保证两者几何一致；
- 所有图层先完成排版、字体与颜色解析，再开始落笔：任何失败都在绘制第一个像素之前抛出。
"""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

from ...components import ExportError, get_logger
from ...data_handler import decode_background
from ...variables import STYLE_CANVAS_BLANK_RGB
from ..layout import TextBlock


logger = get_logger(__name__)

# Pillow 文本锚点：水平 l/m/r + 垂直 a（ascender，行顶）
_ALIGN_TO_ANCHOR = {"left": "la", "center": "ma", "right": "ra"}


def _parse_color(color: str) -> Tuple[int, int, int, int]:
    from PIL import ImageColor

    try:
        rgba = ImageColor.getcolor(str(color), "RGBA")
    except ValueError as exc:
        raise ExportError(f"无法识别的颜色：{color!r}") from exc
    return tuple(rgba)  # type: ignore[return-value]


# 最近一次 cover 裁切结果：背景对象（按身份比较）+ 画布尺寸 -> 裁切后的 RGBA 图像
_FITTED_BACKGROUND: Dict[str, Any] = {}


def _fitted_background(source, size: Tuple[int, int]):
    """解码并 cover 裁切背景图；同一背景对象与尺寸复用上次结果。"""
    from PIL import Image, ImageOps

    if _FITTED_BACKGROUND.get("source") is source and _FITTED_BACKGROUND.get("size") == size:
        return _FITTED_BACKGROUND["image"]
    background = decode_background(source)
    fitted = ImageOps.fit(background, size, method=Image.Resampling.LANCZOS, centering=(0.5, 0.5))
    _FITTED_BACKGROUND.update(source=source, size=size, image=fitted)
    logger.debug("背景图已裁切缓存：%sx%s", size[0], size[1])
    return fitted


def _prepare_canvas(project):
    """生成底图：有背景时 cover 裁切（返回副本，可直接落笔），否则纯色画布。背景解码失败抛 AssetLoadError。"""
    from PIL import Image

    size = (int(project.width), int(project.height))
    if project.background is None:
        return Image.new("RGBA", size, STYLE_CANVAS_BLANK_RGB + (255,))
    return _fitted_background(project.background, size).copy()


def compose(project, scale: float = 1.0):
    """合成项目位图。

    参数：
        project: Project（或具有 width/height/background/layers/layout_layer/font_face_for 的对象）。
        scale: 输出缩放系数；1.0 为导出分辨率，其它值用于预览。

    返回：
        PIL.Image（RGBA）。

    异常：
        AssetLoadError: 背景图无法加载。
        MeasurementUnavailableError: 文本无法度量或字体无法加载。
        ExportError: 颜色非法或缩放系数非正。
    """
    from PIL import Image, ImageDraw

    if scale <= 0:
        raise ExportError(f"缩放系数必须为正数：{scale}")

    canvas = _prepare_canvas(project)

    plan: List[Tuple[TextBlock, object, int, Tuple[int, int, int, int], str]] = []
    for layer in project.layers:
        block = project.layout_layer(layer)
        face = project.font_face_for(layer)
        anchor = _ALIGN_TO_ANCHOR.get(layer.align, "ma")
        plan.append((block, face.pillow_font(), face.stroke_width, _parse_color(layer.color), anchor))

    draw = ImageDraw.Draw(canvas)
    for block, font, stroke, fill, anchor in plan:
        for line in block.lines:
            if not line.text:
                continue
            draw.text(
                (line.x, line.top),
                line.text,
                font=font,
                fill=fill,
                anchor=anchor,
                stroke_width=stroke,
                stroke_fill=fill,
            )

    logger.debug("位图合成完成：%sx%s，图层 %s 个", canvas.width, canvas.height, len(plan))
    if scale == 1.0:
        return canvas
    target = (max(1, round(canvas.width * scale)), max(1, round(canvas.height * scale)))
    return canvas.resize(target, Image.Resampling.LANCZOS)


__all__ = ["compose"]

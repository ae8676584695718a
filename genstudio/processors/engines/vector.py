"""
文件路径：genstudio/processors/engines/vector.py

说明：矢量内容的导出与预览。

- 导出：原样返回 SVG 标记；
- 预览：Tk 无法直接显示 SVG，借助 PyMuPDF 将标记渲染为 Pillow 图像。
"""

from __future__ import annotations

import fitz  # PyMuPDF

from ...components import ExportError, get_logger
from ...variables import CONST_ENCODING


logger = get_logger(__name__)


def export_markup(project) -> str:
    """返回项目的矢量标记（不做任何改写）。"""
    if project.vector_content is None:
        raise ExportError("项目没有矢量内容")
    return project.vector_content


def rasterize_markup(markup: str, width: int, height: int):
    """将 SVG 标记渲染为指定像素尺寸的 Pillow RGBA 图像。

    异常：
        ExportError: 标记无法解析或渲染失败。
    """
    from PIL import Image

    if width <= 0 or height <= 0:
        raise ExportError(f"渲染尺寸必须为正数：{width}x{height}")
    try:
        doc = fitz.open(stream=markup.encode(CONST_ENCODING), filetype="svg")
    except Exception as exc:  # noqa: BLE001
        logger.error("SVG 解析失败：%s", exc)
        raise ExportError(f"SVG 解析失败：{exc}") from exc

    try:
        page = doc[0]
        if page.rect.width <= 0 or page.rect.height <= 0:
            raise ExportError("SVG 尺寸为空")
        matrix = fitz.Matrix(width / page.rect.width, height / page.rect.height)
        pix = page.get_pixmap(matrix=matrix, alpha=True)
        mode = "RGBA" if pix.alpha else "RGB"
        image = Image.frombytes(mode, (pix.width, pix.height), pix.samples)
    except ExportError:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.error("SVG 渲染失败：%s", exc)
        raise ExportError(f"SVG 渲染失败：{exc}") from exc
    finally:
        doc.close()

    image = image.convert("RGBA")
    if image.size != (width, height):
        image = image.resize((width, height), Image.Resampling.LANCZOS)
    return image


__all__ = ["export_markup", "rasterize_markup"]

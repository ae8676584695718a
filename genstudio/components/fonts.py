"""
文件路径：genstudio/components/fonts.py

说明：字体探测、字体族解析与文本度量。

约定：
- 预览与导出共用同一 FontFace.measure，避免两条路径的换行结果不一致；
- 找到 TTF 时注册到 ReportLab（pdfmetrics.stringWidth）用于度量，同一文件交给 Pillow 绘制；
  找不到时度量与绘制都使用 Pillow 内置字体，保证换行与落笔宽度一致；
- 度量失败直接抛出 MeasurementUnavailableError，不做静默回退。
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

from ..variables import (
    CONST_CANDIDATE_FONT_PATHS,
    PATH_FONTS_DIR,
    PATH_ROOT,
    STYLE_BUILTIN_BOLD_STROKE_RATIO,
)
from .errors import MeasurementUnavailableError


logger = logging.getLogger(__name__)

# 已注册到 ReportLab 的 TTF：文件绝对路径 -> 注册名
_REGISTERED_TTF: Dict[str, str] = {}

_BOLD_KEYWORDS = ("bold", "bolder", "black", "heavy", "semibold", "extrabold")


def is_bold_weight(weight: object) -> bool:
    """判断字重是否按粗体处理：bold/bolder/black 等关键词或数值 >= 600。"""
    if weight is None:
        return False
    text = str(weight).strip().lower()
    if text.isdigit():
        return int(text) >= 600
    return text in _BOLD_KEYWORDS


def _normalize_name(name: str) -> str:
    return re.sub(r"[\s_\-]+", "", str(name)).lower()


def _font_files_in(directory: Path) -> List[Path]:
    if not directory.exists():
        return []
    return sorted(list(directory.glob("*.ttf")) + list(directory.glob("*.TTF")))


def probe_available_fonts() -> List[Path]:
    """探测可用的 TTF 字体文件，按优先级返回去重列表。

    优先级：
    1) `config/fonts/` 目录下的 .ttf 文件（按文件名排序）
    2) `CONST_CANDIDATE_FONT_PATHS` 列表中存在的文件
    """
    seen: set[str] = set()
    results: List[Path] = []

    def _add(p: Path) -> None:
        key = str(p.resolve())
        if key not in seen and p.exists():
            seen.add(key)
            results.append(p)

    for p in _font_files_in(PATH_FONTS_DIR):
        _add(p)
    for regular, bold in CONST_CANDIDATE_FONT_PATHS:
        _add(Path(regular))
        _add(Path(bold))
    return results


def resolve_font_file(
    family: str,
    weight: object,
    font_map: Optional[Mapping[str, Mapping[str, str]]] = None,
) -> Optional[Path]:
    """按字体族与字重解析 TTF 文件路径。

    查找顺序：
    1) 配置映射（config/studio.json 的 "fonts"），相对路径基于项目根目录；
    2) `config/fonts/` 下文件名以字体族开头的文件（粗体优先匹配含 Bold 的文件）；
    3) 常见系统字体（与字体族无关的通用回退）。

    返回：
        字体路径；均不可用时返回 None（由调用方改用内置度量）。
    """
    bold = is_bold_weight(weight)
    weight_key = "bold" if bold else "normal"

    if font_map:
        entry = font_map.get(family) or font_map.get(str(family).lower())
        if isinstance(entry, Mapping):
            raw = entry.get(weight_key) or entry.get("normal")
            if raw:
                p = Path(str(raw))
                if not p.is_absolute():
                    p = PATH_ROOT / p
                if p.exists():
                    return p
                logger.warning("字体映射指向的文件不存在，已忽略：%s -> %s", family, p)

    wanted = _normalize_name(family)
    if wanted:
        matches = [p for p in _font_files_in(PATH_FONTS_DIR) if _normalize_name(p.stem).startswith(wanted)]
        bold_matches = [p for p in matches if "bold" in p.stem.lower()]
        plain_matches = [p for p in matches if "bold" not in p.stem.lower()]
        preferred = (bold_matches or plain_matches) if bold else (plain_matches or bold_matches)
        if preferred:
            return preferred[0]

    for regular, bold_path in CONST_CANDIDATE_FONT_PATHS:
        p = Path(bold_path if bold else regular)
        if p.exists():
            return p
    return None


def register_ttf(font_file: Path) -> str:
    """将 TTF 注册到 ReportLab（同一文件只注册一次），返回注册名。

    异常：
        MeasurementUnavailableError: 字体文件无法解析（损坏、CFF 轮廓的 OTF 等）。
    """
    key = str(Path(font_file).resolve())
    name = _REGISTERED_TTF.get(key)
    if name is not None:
        return name
    name = f"genstudio-{Path(font_file).stem}"
    try:
        pdfmetrics.registerFont(TTFont(name, key))
    except Exception as exc:  # noqa: BLE001
        raise MeasurementUnavailableError(f"字体注册失败：{font_file}：{exc}") from exc
    _REGISTERED_TTF[key] = name
    logger.info("已注册度量字体：%s -> %s", name, font_file)
    return name


@lru_cache(maxsize=128)
def _load_pillow_font(font_file: Optional[str], size: float):
    """加载 Pillow 字体（按文件与字号缓存）。"""
    from PIL import ImageFont  # 延迟导入，纯排版场景无需 Pillow

    if font_file is not None:
        return ImageFont.truetype(font_file, size)
    return ImageFont.load_default(size=size)


@dataclass(frozen=True)
class FontFace:
    """一个已解析的字体（字体族 + 字重 + 像素字号 + 可选 TTF 文件）。

    度量与绘制使用同一字形来源：
    - 有 TTF：ReportLab 按该文件度量，Pillow 按该文件绘制；
    - 无 TTF：度量与绘制都使用 Pillow 内置字体，粗体以描边模拟，度量计入两侧描边。

    属性：
        family: 字体族名称（自由文本，来自图层）。
        weight: 字重（'normal' / 'bold' / '300' 等）。
        size: 像素字号。
        font_file: 解析到的 TTF；None 表示使用内置字体。
    """

    family: str
    weight: str
    size: float
    font_file: Optional[Path] = None

    @property
    def is_bold(self) -> bool:
        return is_bold_weight(self.weight)

    @property
    def stroke_width(self) -> int:
        """绘制描边宽度（像素）；仅内置字体的粗体非零。"""
        if self.font_file is None and self.is_bold:
            return max(1, int(round(self.size * STYLE_BUILTIN_BOLD_STROKE_RATIO)))
        return 0

    def measure(self, text: str) -> float:
        """度量单行文本宽度（像素）。"""
        if self.font_file is None:
            font = self.pillow_font()
            try:
                width = float(font.getlength(text))
            except Exception as exc:  # noqa: BLE001
                raise MeasurementUnavailableError(f"无法度量文本宽度：builtin size={self.size}：{exc}") from exc
            return width + 2 * self.stroke_width if text else 0.0

        name = register_ttf(self.font_file)
        try:
            return float(pdfmetrics.stringWidth(text, name, self.size))
        except Exception as exc:  # noqa: BLE001
            raise MeasurementUnavailableError(f"无法度量文本宽度：font={name} size={self.size}：{exc}") from exc

    def pillow_font(self):
        """返回与度量一致的 Pillow 字体对象，供光栅绘制使用。"""
        font_file = str(self.font_file) if self.font_file is not None else None
        try:
            return _load_pillow_font(font_file, self.size)
        except Exception as exc:  # noqa: BLE001
            raise MeasurementUnavailableError(f"无法加载绘制字体：{self.family}/{self.weight}：{exc}") from exc


def build_font_face(
    family: str,
    weight: object,
    size: float,
    font_map: Optional[Mapping[str, Mapping[str, str]]] = None,
) -> FontFace:
    """解析字体文件并构造 FontFace。"""
    font_file = resolve_font_file(family, weight, font_map)
    return FontFace(family=str(family), weight=str(weight), size=float(size), font_file=font_file)


__all__ = [
    "is_bold_weight",
    "probe_available_fonts",
    "resolve_font_file",
    "register_ttf",
    "FontFace",
    "build_font_face",
]

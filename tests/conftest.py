from __future__ import annotations

"""
pytest 全局配置：将项目根目录加入 sys.path，确保 `from genstudio...` 可被导入。
"""

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
ROOT_STR = str(ROOT)
if ROOT_STR not in sys.path:
    sys.path.insert(0, ROOT_STR)


@pytest.fixture
def make_project():
    """构建不读取本地配置、使用等宽度量（每字符 10px）的项目。"""
    from genstudio.components import fixed_advance_measurer
    from genstudio.project import Project

    def _make(asset_type: str = "POSTER", brief: str = "", advance: float = 10.0):
        return Project(
            asset_type,
            brief=brief,
            font_map={},
            measurer_factory=lambda layer: fixed_advance_measurer(advance),
        )

    return _make


@pytest.fixture
def solid_png_bytes():
    """生成纯色 PNG 字节，用作背景图。"""
    from io import BytesIO

    from PIL import Image

    def _make(size=(200, 100), color=(10, 20, 30)) -> bytes:
        buf = BytesIO()
        Image.new("RGB", size, color).save(buf, format="PNG")
        return buf.getvalue()

    return _make

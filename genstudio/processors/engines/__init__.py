"""
文件路径：genstudio/processors/engines/__init__.py

说明：渲染引擎：`raster.py`（Pillow 位图合成）、`vector.py`（SVG 导出与预览渲染）。
"""

from typing import List

__all__: List[str] = ["raster", "vector"]

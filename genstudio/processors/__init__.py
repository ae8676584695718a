"""
文件路径：genstudio/processors/__init__.py

说明：
- layout.py（贪心换行、垂直锚点、多行定位）
- interaction.py（移动/调整宽度交互状态机）
- viewport.py（缩放/适配、屏幕与画布坐标互换、命中测试）
- engines/{raster.py, vector.py}（导出与预览渲染）
"""

from typing import List

__all__: List[str] = []

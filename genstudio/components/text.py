"""
文件路径：genstudio/components/text.py

说明：文本度量相关的轻量工具函数，从包入口拆分而来。

- `fixed_advance_measurer`：等宽度量（每字符固定前进宽度），排版结果完全确定，供测试与等宽场景使用。
"""

from __future__ import annotations

from typing import Callable

Measurer = Callable[[str], float]


def fixed_advance_measurer(advance: float) -> Measurer:
    """返回按字符数计宽的度量函数：len(text) * advance。

    示例：
        >>> measure = fixed_advance_measurer(10)
        >>> measure("HELLO ")
        60.0
    """
    step = float(advance)

    def _measure(text: str) -> float:
        return len(text) * step

    return _measure


__all__ = [
    "Measurer",
    "fixed_advance_measurer",
]

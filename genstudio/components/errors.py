"""
文件路径：genstudio/components/errors.py

说明：统一错误信息格式与异常类型，从包入口拆分而来。

异常均继承内置异常，调用方可按 RuntimeError 统一捕获；消息内携带错误码前缀。
"""

from __future__ import annotations

from ..variables import (
    ERR_ASSET_LOAD_FAILED,
    ERR_EXPORT_FAILED,
    ERR_MEASUREMENT_UNAVAILABLE,
)


class ErrorHandler:
    """错误处理相关工具。"""

    @staticmethod
    def format_error(err_code: int, message: str) -> str:
        """生成统一错误信息字符串。"""
        return f"[{err_code}] {message}"


class MeasurementUnavailableError(RuntimeError):
    """无法度量文本宽度（字体不可用、度量后端缺失等）。

    该错误必须向上抛出：静默回退会导致预览与导出的换行结果不一致。
    """

    code: int = ERR_MEASUREMENT_UNAVAILABLE

    def __init__(self, message: str) -> None:
        super().__init__(ErrorHandler.format_error(self.code, message))


class AssetLoadError(RuntimeError):
    """背景图等素材加载失败；导出应中止且画布状态不变。"""

    code: int = ERR_ASSET_LOAD_FAILED

    def __init__(self, message: str) -> None:
        super().__init__(ErrorHandler.format_error(self.code, message))


class ExportError(RuntimeError):
    """导出失败（无可导出内容、矢量渲染失败等）。"""

    code: int = ERR_EXPORT_FAILED

    def __init__(self, message: str) -> None:
        super().__init__(ErrorHandler.format_error(self.code, message))


__all__ = [
    "ErrorHandler",
    "MeasurementUnavailableError",
    "AssetLoadError",
    "ExportError",
]

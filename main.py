"""
文件路径：main.py

命令行入口：
- 功能：读取背景图（或 SVG）与版式建议 JSON，排版文本图层并导出 PNG/SVG 到 output 目录。
- 依赖：`genstudio/project.py`、`genstudio/data_handler.py`、`genstudio/components`、`genstudio/variables.py`。

快速使用示例：
    # 1) 背景图 + 版式建议，导出海报 PNG
    python main.py --background bg.png --layout layout.json --brief "summer sale"

    # 2) 没有版式建议时使用兜底图层（创意简报大写、居中）
    python main.py --background bg.png --brief "grand opening" --asset-type SLIDE

    # 3) 图标/标志：直接导出 SVG 标记
    python main.py --svg icon.txt --asset-type ICON

    # 4) 打开桌面预览（可拖动文本、拖动手柄调整宽度）
    python main.py --gui --background bg.png --layout layout.json

版式建议 JSON 结构：
    {"textLayers": [{"text": "...", "x": 50, "y": 20, "color": "#fff", "fontSize": 8, "align": "center"}]}

变量引用说明（来自 genstudio/variables.py）：
- CONST_ENCODING, CONST_ASSET_PRESETS

组件调用说明（来自 genstudio/components / genstudio/project.py）：
- get_logger, FileHandler.ensure_project_dirs / validate_readable_file, probe_available_fonts
- Project.set_background / set_vector_content / apply_layout_suggestion / save_export
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

from genstudio.components import (
    AssetLoadError,
    ExportError,
    FileHandler,
    MeasurementUnavailableError,
    get_logger,
    probe_available_fonts,
)
from genstudio.project import AssetType, Project
from genstudio.variables import CONST_ASSET_PRESETS, CONST_ENCODING


logger = get_logger(__name__)


def _log_runtime_capabilities() -> None:
    """输出运行环境信息：Pillow / ReportLab / PyMuPDF 版本与可用字体。"""
    import importlib.metadata as im

    for dist in ("Pillow", "reportlab", "PyMuPDF"):
        try:
            version = im.version(dist)
        except im.PackageNotFoundError:
            version = "missing"
        logger.info("运行环境：%s=%s", dist, version)

    candidates = probe_available_fonts()
    logger.info(
        "字体探测：candidates=%s, metrics=ReportLab.pdfmetrics",
        [str(p) for p in candidates[:5]] + (["..."] if len(candidates) > 5 else []),
    )


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="设计资产文本图层排版与导出工具")
    parser.add_argument("--background", type=Path, default=None, help="背景图路径（PNG/JPEG 等）")
    parser.add_argument("--svg", type=Path, default=None, help="矢量内容文件（可含 Markdown 代码围栏）")
    parser.add_argument("--layout", type=Path, default=None, help="版式建议 JSON（{\"textLayers\": [...]}）")
    parser.add_argument("--brief", type=str, default="", help="创意简报文本（兜底图层使用其大写形式）")
    parser.add_argument(
        "--asset-type",
        dest="asset_type",
        type=str.upper,
        choices=list(CONST_ASSET_PRESETS.keys()),
        default=AssetType.POSTER.value,
        help="资产类型：POSTER/SLIDE/ICON/LOGO（决定默认画布尺寸）",
    )
    parser.add_argument("--width", type=int, default=None, help="画布宽度（像素），覆盖资产类型默认值")
    parser.add_argument("--height", type=int, default=None, help="画布高度（像素），覆盖资产类型默认值")
    parser.add_argument("--output", type=Path, default=None, help="输出路径（可省略，自动生成）")
    parser.add_argument("--gui", action="store_true", help="启动图形界面（tkinter）")
    parser.add_argument("--log-runtime", dest="log_runtime", action="store_true", help="启动时输出依赖版本与字体探测结果")
    return parser.parse_args(argv)


def build_project(args: argparse.Namespace) -> Project:
    """按命令行参数构建项目：尺寸 -> 内容 -> 版式建议。"""
    project = Project(args.asset_type, brief=args.brief)
    if args.width is not None or args.height is not None:
        width = args.width if args.width is not None else project.width
        height = args.height if args.height is not None else project.height
        project.set_dimensions(width, height)

    if args.svg is not None:
        FileHandler.validate_readable_file(args.svg)
        project.set_vector_content(args.svg.read_text(encoding=CONST_ENCODING))
        return project

    if args.background is None:
        return project
    project.set_background(args.background)

    payload = None
    if args.layout is not None:
        FileHandler.validate_readable_file(args.layout)
        payload = args.layout.read_text(encoding=CONST_ENCODING)
    project.apply_layout_suggestion(payload)
    return project


def main(argv: Optional[list] = None) -> int:
    args = parse_args(argv)
    if args.log_runtime:
        _log_runtime_capabilities()
    FileHandler.ensure_project_dirs()

    try:
        project = build_project(args)
        if args.gui:
            # 延迟导入以加快 CLI 冷启动
            from genstudio.ui import LayoutStudioApp

            app = LayoutStudioApp(project)
            app.mainloop()
            return 0
        if args.background is None and args.svg is None:
            print("需要提供 --background 或 --svg", file=sys.stderr)
            return 2
        out = project.save_export(args.output)
    except (AssetLoadError, MeasurementUnavailableError, ExportError, FileNotFoundError) as exc:
        logger.error("导出失败：%s", exc)
        print(f"导出失败：{exc}", file=sys.stderr)
        return 1
    except (ValueError, RuntimeError) as exc:
        logger.error("参数错误：%s", exc)
        print(f"参数错误：{exc}", file=sys.stderr)
        return 2

    if project.last_suggestion_status:
        print(f"版式建议状态：{project.last_suggestion_status}（图层 {len(project.layers)} 个）")
    print(f"导出完成，保存至：{out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

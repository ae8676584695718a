"""
文件路径：genstudio/variables.py

模块职责：
- 统一管理全局跨模块变量，确保模块化、无冲突、可追溯，可复用。
- 变量命名规范：{分类前缀}_{描述性名称}（全大写+下划线）。
  - PATH_：路径相关
  - STYLE_：样式相关
  - STATUS_：状态标识
  - CONST_：通用常量
  - ERR_：错误码

使用说明：
- 业务模块严禁定义新的全局变量，必须从本模块导入所需常量。
- 目录路径均使用 pathlib.Path 对象表示，使用时如需字符串请显式 str() 转换。
- 百分比坐标（x/y/box_width）均相对画布宽/高，取值 0~100，可短暂越界（见 CONST_ANCHOR_*）。
"""

from pathlib import Path
from typing import Dict, Tuple


# =============================
# 路径（PATH_）
# =============================
# 项目根目录：定位到当前文件（variables.py）的上两级目录
PATH_ROOT: Path = Path(__file__).resolve().parents[1]

# 各功能目录
PATH_PACKAGE_DIR: Path = PATH_ROOT / "genstudio"
PATH_CONFIG_DIR: Path = PATH_ROOT / "config"
PATH_FONTS_DIR: Path = PATH_CONFIG_DIR / "fonts"  # 自带 TTF/OTF 字体，按文件名匹配字体族
PATH_TESTS_DIR: Path = PATH_ROOT / "tests"
PATH_TEMP_DIR: Path = PATH_ROOT / "temp"
PATH_OUTPUT_DIR: Path = PATH_ROOT / "output"
PATH_LOGS_DIR: Path = PATH_ROOT / "logs"

# 关键文件路径
PATH_STUDIO_CONFIG_JSON: Path = PATH_CONFIG_DIR / "studio.json"  # 字体映射等可选配置
PATH_LOG_FILE: Path = PATH_LOGS_DIR / "app.log"  # 应用运行日志


# =============================
# 样式（STYLE_）
# =============================
# 新建文本图层的默认样式（“添加文本”按钮）
STYLE_LAYER_TEXT_DEFAULT: str = "New Text"
STYLE_LAYER_COLOR_DEFAULT: str = "#ffffff"
STYLE_LAYER_FONT_SIZE_DEFAULT: int = 24  # 像素
STYLE_LAYER_FONT_SIZE_PCT_DEFAULT: float = 3.0  # 占画布短边的百分比
STYLE_LAYER_FONT_FAMILY_DEFAULT: str = "Inter"
STYLE_LAYER_FONT_WEIGHT_DEFAULT: str = "bold"
STYLE_LAYER_ALIGN_DEFAULT: str = "center"
STYLE_LAYER_VERTICAL_ALIGN_DEFAULT: str = "center"
STYLE_LAYER_BOX_WIDTH_DEFAULT: float = 80.0  # 占画布宽度的百分比

# 行高倍数：预览与导出必须使用同一常量
STYLE_LINE_HEIGHT_RATIO: float = 1.3

# 未找到 TTF 时使用 Pillow 内置字体度量与绘制；其无粗体字形，粗体以描边模拟（描边宽 = 字号 * 比例）
STYLE_BUILTIN_BOLD_STROKE_RATIO: float = 1 / 32

# 无背景时的画布底色、预览辅助线颜色
STYLE_CANVAS_BLANK_RGB: Tuple[int, int, int] = (255, 255, 255)
STYLE_PREVIEW_OUTLINE_COLOR: str = "#3B82F6"
STYLE_PREVIEW_HANDLE_COLOR: str = "#FFFFFF"
STYLE_PREVIEW_BG: str = "#1F2937"

# GUI 样式（颜色与布局尺寸）
STYLE_GUI_PRIMARY_COLOR: str = "#312E81"
STYLE_GUI_ACCENT_BLUE: str = "#4F46E5"
STYLE_GUI_BG: str = "#F3F4F6"
STYLE_GUI_CARD_BG: str = "#FFFFFF"
STYLE_GUI_MUTED_GRAY: str = "#9CA3AF"
STYLE_GUI_FONT_FAMILY: str = "Helvetica"
STYLE_GUI_FONT_SIZE_BODY: int = 11
STYLE_GUI_FONT_SIZE_TITLE: int = 13
STYLE_GUI_SIDE_PANEL_WIDTH: int = 280
STYLE_GUI_WINDOW_MIN_WIDTH: int = 1100
STYLE_GUI_WINDOW_MIN_HEIGHT: int = 720


# =============================
# 状态（STATUS_）
# =============================
STATUS_SUCCESS: str = "SUCCESS"  # 操作成功
STATUS_WARNING: str = "WARNING"  # 存在告警但不中断
STATUS_ERROR: str = "ERROR"  # 操作失败
STATUS_FALLBACK: str = "FALLBACK"  # 版式建议无法解析，使用兜底图层


# =============================
# 常量（CONST_）
# =============================
CONST_ENCODING: str = "utf-8"  # 文件读写默认编码
CONST_MAX_RETRY: int = 2  # 通用重试次数，用于 IO 等可重试操作

# 锚点与框宽的钳制范围（百分比）；锚点允许部分拖出画布
CONST_ANCHOR_MIN: float = -20.0
CONST_ANCHOR_MAX: float = 120.0
CONST_BOX_WIDTH_MIN: float = 5.0
CONST_BOX_WIDTH_MAX: float = 100.0

# 字号：百分比 -> 像素时的最小像素值
CONST_FONT_SIZE_MIN_PX: int = 12

# 缩放：手动缩放的上下限与步进；适配模式留白（像素）
CONST_ZOOM_MIN: float = 0.1
CONST_ZOOM_MAX: float = 3.0
CONST_ZOOM_STEP: float = 0.1
CONST_FIT_PADDING: int = 80
CONST_FIT_MAX_SCALE: float = 1.0  # 适配模式只缩小不放大

# 预览中调整手柄的命中半径（屏幕像素）
CONST_HANDLE_HIT_RADIUS: float = 8.0

# 版式建议解析失败时的兜底图层
CONST_FALLBACK_FONT_SIZE_PCT: float = 8.0
CONST_FALLBACK_BOX_WIDTH: float = 80.0
CONST_FALLBACK_FONT_WEIGHT: str = "bold"
CONST_FALLBACK_ANCHOR: float = 50.0

# 版式建议中每个图层的必填字段
CONST_SUGGESTION_REQUIRED_FIELDS: Tuple[str, ...] = ("text", "x", "y", "color", "fontSize", "align")

# 对齐取值
CONST_ALIGN_VALUES: Tuple[str, ...] = ("left", "center", "right")
CONST_VERTICAL_ALIGN_VALUES: Tuple[str, ...] = ("top", "center", "bottom")

# 资产类型与默认画布尺寸（宽, 高）
CONST_ASSET_PRESETS: Dict[str, Tuple[int, int]] = {
    "POSTER": (1080, 1350),
    "SLIDE": (1920, 1080),
    "ICON": (1024, 1024),
    "LOGO": (1024, 1024),
}
CONST_VECTOR_ASSET_TYPES: Tuple[str, ...] = ("ICON", "LOGO")

# 导出文件命名
CONST_OUTPUT_PREFIX: str = "genstudio"
CONST_RASTER_SUFFIX: str = ".png"
CONST_VECTOR_SUFFIX: str = ".svg"

# 常见系统字体候选路径（用于自动探测，按顺序优先；(常规, 粗体)）
CONST_CANDIDATE_FONT_PATHS: Tuple[Tuple[str, str], ...] = (
    # Linux 常见字体
    ("/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf", "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"),
    ("/usr/share/fonts/TTF/DejaVuSans.ttf", "/usr/share/fonts/TTF/DejaVuSans-Bold.ttf"),
    ("/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf", "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf"),
    # Windows 常见字体
    ("C:/Windows/Fonts/arial.ttf", "C:/Windows/Fonts/arialbd.ttf"),
    # macOS 常见字体
    ("/Library/Fonts/Arial.ttf", "/Library/Fonts/Arial Bold.ttf"),
)

# 日志格式（供 logging.basicConfig 使用）
CONST_LOG_FORMAT: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
CONST_LOG_DATEFMT: str = "%Y-%m-%d %H:%M:%S"


# =============================
# 错误码（ERR_）
# =============================
# 1xxx：文件/路径相关
ERR_FILE_NOT_FOUND: int = 1001  # 输入文件不存在
ERR_PATH_NOT_WRITABLE: int = 1003  # 目标路径不可写

# 2xxx：排版/度量相关
ERR_MEASUREMENT_UNAVAILABLE: int = 2001  # 无法度量文本宽度
ERR_LAYER_NOT_FOUND: int = 2002  # 图层 id 不存在（按空操作处理）

# 3xxx：导出/素材相关
ERR_ASSET_LOAD_FAILED: int = 3001  # 背景图加载失败
ERR_EXPORT_FAILED: int = 3002  # 导出失败
ERR_CANVAS_LOCKED: int = 3003  # 已有内容，画布尺寸锁定

# 4xxx：配置/数据相关
ERR_CONFIG_LOAD_FAILED: int = 4001  # 配置加载失败
ERR_DATA_INVALID: int = 4002  # 输入数据非法
ERR_SUGGESTION_MALFORMED: int = 4003  # 版式建议无法解析


# =============================
# 导出声明
# =============================
__all__ = [
    # PATH_
    "PATH_ROOT",
    "PATH_PACKAGE_DIR",
    "PATH_CONFIG_DIR",
    "PATH_FONTS_DIR",
    "PATH_TESTS_DIR",
    "PATH_TEMP_DIR",
    "PATH_OUTPUT_DIR",
    "PATH_LOGS_DIR",
    "PATH_STUDIO_CONFIG_JSON",
    "PATH_LOG_FILE",
    # STYLE_
    "STYLE_LAYER_TEXT_DEFAULT",
    "STYLE_LAYER_COLOR_DEFAULT",
    "STYLE_LAYER_FONT_SIZE_DEFAULT",
    "STYLE_LAYER_FONT_SIZE_PCT_DEFAULT",
    "STYLE_LAYER_FONT_FAMILY_DEFAULT",
    "STYLE_LAYER_FONT_WEIGHT_DEFAULT",
    "STYLE_LAYER_ALIGN_DEFAULT",
    "STYLE_LAYER_VERTICAL_ALIGN_DEFAULT",
    "STYLE_LAYER_BOX_WIDTH_DEFAULT",
    "STYLE_LINE_HEIGHT_RATIO",
    "STYLE_BUILTIN_BOLD_STROKE_RATIO",
    "STYLE_CANVAS_BLANK_RGB",
    "STYLE_PREVIEW_OUTLINE_COLOR",
    "STYLE_PREVIEW_HANDLE_COLOR",
    "STYLE_PREVIEW_BG",
    "STYLE_GUI_PRIMARY_COLOR",
    "STYLE_GUI_ACCENT_BLUE",
    "STYLE_GUI_BG",
    "STYLE_GUI_CARD_BG",
    "STYLE_GUI_MUTED_GRAY",
    "STYLE_GUI_FONT_FAMILY",
    "STYLE_GUI_FONT_SIZE_BODY",
    "STYLE_GUI_FONT_SIZE_TITLE",
    "STYLE_GUI_SIDE_PANEL_WIDTH",
    "STYLE_GUI_WINDOW_MIN_WIDTH",
    "STYLE_GUI_WINDOW_MIN_HEIGHT",
    # STATUS_
    "STATUS_SUCCESS",
    "STATUS_WARNING",
    "STATUS_ERROR",
    "STATUS_FALLBACK",
    # CONST_
    "CONST_ENCODING",
    "CONST_MAX_RETRY",
    "CONST_ANCHOR_MIN",
    "CONST_ANCHOR_MAX",
    "CONST_BOX_WIDTH_MIN",
    "CONST_BOX_WIDTH_MAX",
    "CONST_FONT_SIZE_MIN_PX",
    "CONST_ZOOM_MIN",
    "CONST_ZOOM_MAX",
    "CONST_ZOOM_STEP",
    "CONST_FIT_PADDING",
    "CONST_FIT_MAX_SCALE",
    "CONST_HANDLE_HIT_RADIUS",
    "CONST_FALLBACK_FONT_SIZE_PCT",
    "CONST_FALLBACK_BOX_WIDTH",
    "CONST_FALLBACK_FONT_WEIGHT",
    "CONST_FALLBACK_ANCHOR",
    "CONST_SUGGESTION_REQUIRED_FIELDS",
    "CONST_ALIGN_VALUES",
    "CONST_VERTICAL_ALIGN_VALUES",
    "CONST_ASSET_PRESETS",
    "CONST_VECTOR_ASSET_TYPES",
    "CONST_OUTPUT_PREFIX",
    "CONST_RASTER_SUFFIX",
    "CONST_VECTOR_SUFFIX",
    "CONST_CANDIDATE_FONT_PATHS",
    "CONST_LOG_FORMAT",
    "CONST_LOG_DATEFMT",
    # ERR_
    "ERR_FILE_NOT_FOUND",
    "ERR_PATH_NOT_WRITABLE",
    "ERR_MEASUREMENT_UNAVAILABLE",
    "ERR_LAYER_NOT_FOUND",
    "ERR_ASSET_LOAD_FAILED",
    "ERR_EXPORT_FAILED",
    "ERR_CANVAS_LOCKED",
    "ERR_CONFIG_LOAD_FAILED",
    "ERR_DATA_INVALID",
    "ERR_SUGGESTION_MALFORMED",
]

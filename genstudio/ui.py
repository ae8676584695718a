"""
文件路径：genstudio/ui.py

模块职责：
- 提供 tkinter 桌面预览：顶部导航 + 左侧图层面板 + 中间可交互预览 + 底部状态栏；
- 预览画布的指针事件交给 PreviewSurface，由交互状态机完成拖动与调整宽度；
- 与业务层解耦：界面只调用 Project / PreviewSurface 的公共 API。

变量引用说明（来自 genstudio/variables.py）：
- STYLE_GUI_*（颜色/尺寸/字体），STYLE_PREVIEW_*，CONST_ALIGN_VALUES，CONST_VERTICAL_ALIGN_VALUES

给零基础用户的小提示（仅注释）：
- 打开 GUI 的方式：在命令行运行 `python main.py --gui --background bg.png` 即可启动界面。
"""

from __future__ import annotations

import tkinter as tk
from pathlib import Path
from tkinter import filedialog, messagebox, ttk
from typing import Optional

from PIL import ImageTk

from .components import AssetLoadError, ExportError, FileHandler, MeasurementUnavailableError, get_logger
from .processors.viewport import PreviewSurface
from .project import Project
from .variables import (
    CONST_ALIGN_VALUES,
    CONST_VERTICAL_ALIGN_VALUES,
    STYLE_GUI_ACCENT_BLUE,
    STYLE_GUI_BG,
    STYLE_GUI_CARD_BG,
    STYLE_GUI_FONT_FAMILY,
    STYLE_GUI_FONT_SIZE_BODY,
    STYLE_GUI_FONT_SIZE_TITLE,
    STYLE_GUI_MUTED_GRAY,
    STYLE_GUI_PRIMARY_COLOR,
    STYLE_GUI_SIDE_PANEL_WIDTH,
    STYLE_GUI_WINDOW_MIN_HEIGHT,
    STYLE_GUI_WINDOW_MIN_WIDTH,
    STYLE_PREVIEW_BG,
    STYLE_PREVIEW_HANDLE_COLOR,
    STYLE_PREVIEW_OUTLINE_COLOR,
)


logger = get_logger(__name__)

_RENDER_ERRORS = (AssetLoadError, MeasurementUnavailableError, ExportError)


class LayoutStudioApp(tk.Tk):
    """tkinter 桌面预览主应用。"""

    def __init__(self, project: Optional[Project] = None) -> None:
        super().__init__()
        self.title("GenStudio 文本排版预览")
        self.minsize(STYLE_GUI_WINDOW_MIN_WIDTH, STYLE_GUI_WINDOW_MIN_HEIGHT)
        self.configure(bg=STYLE_GUI_BG)

        FileHandler.ensure_project_dirs()

        # 状态数据
        self.project = project if project is not None else Project()
        self.surface = PreviewSurface(self.project)
        self.last_output: Optional[Path] = None
        self._photo = None
        self._syncing = False

        # 面板数据
        self.var_zoom = tk.StringVar(value="适配")
        self.var_status = tk.StringVar(value="就绪")
        self.var_layer_text = tk.StringVar(value="")
        self.var_layer_align = tk.StringVar(value="")
        self.var_layer_valign = tk.StringVar(value="")
        self.var_layer_color = tk.StringVar(value="")

        # 布局
        self._build_top_nav()
        self._build_main_layout()
        self._build_bottom_bar()

        self.var_layer_text.trace_add("write", lambda *_: self._on_layer_field_edit("text", self.var_layer_text))
        self.var_layer_color.trace_add("write", lambda *_: self._on_layer_field_edit("color", self.var_layer_color))

        self._refresh_layer_panel()
        self._update_zoom_label()

    # -----------------------------
    # 构建 UI
    # -----------------------------
    def _build_top_nav(self) -> None:
        bar = tk.Frame(self, bg=STYLE_GUI_PRIMARY_COLOR, height=44)
        bar.pack(side=tk.TOP, fill=tk.X)

        title = tk.Label(
            bar,
            text="GenStudio 文本排版预览",
            fg="#FFFFFF",
            bg=STYLE_GUI_PRIMARY_COLOR,
            font=(STYLE_GUI_FONT_FAMILY, STYLE_GUI_FONT_SIZE_TITLE, "bold"),
        )
        title.pack(side=tk.LEFT, padx=12)

        for text, command in (("导出", self._on_export), ("新建", self._on_reset), ("打开背景图", self._on_open_background)):
            tk.Button(
                bar,
                text=text,
                command=command,
                bg=STYLE_GUI_PRIMARY_COLOR,
                fg="#FFFFFF",
                bd=0,
                activebackground=STYLE_GUI_ACCENT_BLUE,
                cursor="hand2",
            ).pack(side=tk.RIGHT, padx=6, pady=6)

    def _build_main_layout(self) -> None:
        container = tk.Frame(self, bg=STYLE_GUI_BG)
        container.pack(side=tk.TOP, fill=tk.BOTH, expand=True)

        container.grid_columnconfigure(0, minsize=STYLE_GUI_SIDE_PANEL_WIDTH)
        container.grid_columnconfigure(1, weight=1)
        container.grid_rowconfigure(0, weight=1)

        # 左侧图层面板
        self.side_panel = tk.Frame(container, bg=STYLE_GUI_CARD_BG, bd=1, relief=tk.GROOVE)
        self.side_panel.grid(row=0, column=0, sticky="nsew", padx=8, pady=8)
        self._build_layer_panel(self.side_panel)

        # 中间预览区
        self.center_panel = tk.Frame(container, bg=STYLE_GUI_BG)
        self.center_panel.grid(row=0, column=1, sticky="nsew", padx=8, pady=8)
        self._build_center_preview(self.center_panel)

    def _build_layer_panel(self, parent: tk.Frame) -> None:
        label_font = (STYLE_GUI_FONT_FAMILY, STYLE_GUI_FONT_SIZE_BODY)
        tk.Label(parent, text="文本图层", bg=STYLE_GUI_CARD_BG, font=(STYLE_GUI_FONT_FAMILY, STYLE_GUI_FONT_SIZE_TITLE, "bold")).pack(
            anchor="w", padx=8, pady=(8, 4)
        )

        self.layer_list = tk.Listbox(parent, height=8, exportselection=False)
        self.layer_list.pack(fill=tk.X, padx=8)
        self.layer_list.bind("<<ListboxSelect>>", self._on_layer_list_select)

        btns = tk.Frame(parent, bg=STYLE_GUI_CARD_BG)
        btns.pack(fill=tk.X, padx=8, pady=4)
        tk.Button(btns, text="添加文本", command=self._on_add_layer).pack(side=tk.LEFT)
        tk.Button(btns, text="删除所选", command=self._on_remove_layer).pack(side=tk.LEFT, padx=6)

        self.editor_frame = tk.Frame(parent, bg=STYLE_GUI_CARD_BG)
        self.editor_frame.pack(fill=tk.X, padx=8, pady=8)
        tk.Label(self.editor_frame, text="文本", bg=STYLE_GUI_CARD_BG, font=label_font).grid(row=0, column=0, sticky="w")
        tk.Entry(self.editor_frame, textvariable=self.var_layer_text).grid(row=0, column=1, sticky="ew", pady=2)
        tk.Label(self.editor_frame, text="颜色", bg=STYLE_GUI_CARD_BG, font=label_font).grid(row=1, column=0, sticky="w")
        tk.Entry(self.editor_frame, textvariable=self.var_layer_color).grid(row=1, column=1, sticky="ew", pady=2)
        tk.Label(self.editor_frame, text="水平对齐", bg=STYLE_GUI_CARD_BG, font=label_font).grid(row=2, column=0, sticky="w")
        align_box = ttk.Combobox(self.editor_frame, textvariable=self.var_layer_align, values=list(CONST_ALIGN_VALUES), state="readonly")
        align_box.grid(row=2, column=1, sticky="ew", pady=2)
        align_box.bind("<<ComboboxSelected>>", lambda _e: self._on_layer_field_edit("align", self.var_layer_align))
        tk.Label(self.editor_frame, text="垂直对齐", bg=STYLE_GUI_CARD_BG, font=label_font).grid(row=3, column=0, sticky="w")
        valign_box = ttk.Combobox(
            self.editor_frame, textvariable=self.var_layer_valign, values=list(CONST_VERTICAL_ALIGN_VALUES), state="readonly"
        )
        valign_box.grid(row=3, column=1, sticky="ew", pady=2)
        valign_box.bind("<<ComboboxSelected>>", lambda _e: self._on_layer_field_edit("vertical_align", self.var_layer_valign))
        self.editor_frame.grid_columnconfigure(1, weight=1)

    def _build_center_preview(self, parent: tk.Frame) -> None:
        toolbar = tk.Frame(parent, bg=STYLE_GUI_BG)
        toolbar.pack(side=tk.TOP, fill=tk.X)
        tk.Button(toolbar, text="－", width=3, command=self._on_zoom_out).pack(side=tk.LEFT)
        tk.Label(toolbar, textvariable=self.var_zoom, width=8, bg=STYLE_GUI_BG).pack(side=tk.LEFT)
        tk.Button(toolbar, text="＋", width=3, command=self._on_zoom_in).pack(side=tk.LEFT)
        tk.Button(toolbar, text="适配屏幕", command=self._on_fit).pack(side=tk.LEFT, padx=6)

        self.canvas = tk.Canvas(parent, bg=STYLE_PREVIEW_BG, highlightthickness=0)
        self.canvas.pack(side=tk.TOP, fill=tk.BOTH, expand=True)
        self.canvas.bind("<Configure>", self._on_canvas_configure)
        self.canvas.bind("<ButtonPress-1>", self._on_pointer_down)
        self.canvas.bind("<B1-Motion>", self._on_pointer_move)
        self.canvas.bind("<ButtonRelease-1>", self._on_pointer_up)
        self.canvas.bind("<Leave>", self._on_pointer_leave)

    def _build_bottom_bar(self) -> None:
        bar = tk.Frame(self, bg="#FAFAFA", height=28)
        bar.pack(side=tk.BOTTOM, fill=tk.X)
        tk.Label(bar, textvariable=self.var_status, bg="#FAFAFA", fg=STYLE_GUI_MUTED_GRAY).pack(side=tk.LEFT, padx=8)

    # -----------------------------
    # 渲染
    # -----------------------------
    def redraw(self) -> None:
        """重绘预览：合成图 + 所选图层的边框与手柄。"""
        self.canvas.delete("all")
        try:
            image = self.surface.render_image()
        except _RENDER_ERRORS as exc:
            logger.error("预览渲染失败：%s", exc)
            self.var_status.set(f"预览渲染失败：{exc}")
            return
        self._photo = ImageTk.PhotoImage(image)
        ox, oy = self.surface.origin
        self.canvas.create_image(ox, oy, image=self._photo, anchor="nw")

        layer = self.project.selected_layer
        if layer is None:
            return
        self.canvas.create_rectangle(*self.surface.layer_rect(layer), outline=STYLE_PREVIEW_OUTLINE_COLOR, dash=(4, 2))
        for rect in self.surface.handle_rects().values():
            self.canvas.create_rectangle(*rect, fill=STYLE_PREVIEW_HANDLE_COLOR, outline=STYLE_PREVIEW_OUTLINE_COLOR)

    def _update_zoom_label(self) -> None:
        pct = int(round(self.surface.scale * 100))
        self.var_zoom.set(f"{pct}%" + ("（适配）" if self.surface.zoom.fit else ""))

    def _refresh_layer_panel(self) -> None:
        """同步左侧图层列表与编辑框（同步期间不回写项目）。"""
        self._syncing = True
        try:
            self.layer_list.delete(0, tk.END)
            for layer in self.project.layers:
                self.layer_list.insert(tk.END, layer.text or "（空）")
            selected = self.project.selected_layer
            if selected is None:
                for var in (self.var_layer_text, self.var_layer_align, self.var_layer_valign, self.var_layer_color):
                    var.set("")
                return
            index = [layer.id for layer in self.project.layers].index(selected.id)
            self.layer_list.selection_set(index)
            self.var_layer_text.set(selected.text)
            self.var_layer_color.set(selected.color)
            self.var_layer_align.set(selected.align)
            self.var_layer_valign.set(selected.vertical_align)
        finally:
            self._syncing = False

    # -----------------------------
    # 指针事件
    # -----------------------------
    def _on_canvas_configure(self, event: tk.Event) -> None:
        self.surface.resize_container(event.width, event.height)
        self._update_zoom_label()
        self.redraw()

    def _on_pointer_down(self, event: tk.Event) -> None:
        try:
            self.surface.pointer_down(event.x, event.y)
        except MeasurementUnavailableError as exc:
            self.var_status.set(str(exc))
            return
        self._refresh_layer_panel()
        self.redraw()

    def _on_pointer_move(self, event: tk.Event) -> None:
        if self.surface.pointer_move(event.x, event.y):
            self.redraw()

    def _on_pointer_up(self, _event: tk.Event) -> None:
        self.surface.pointer_up()

    def _on_pointer_leave(self, _event: tk.Event) -> None:
        self.surface.pointer_leave()

    # -----------------------------
    # 缩放
    # -----------------------------
    def _on_zoom_in(self) -> None:
        self.surface.zoom.zoom_in()
        self._update_zoom_label()
        self.redraw()

    def _on_zoom_out(self) -> None:
        self.surface.zoom.zoom_out()
        self._update_zoom_label()
        self.redraw()

    def _on_fit(self) -> None:
        self.surface.zoom.fit_to_screen()
        self._update_zoom_label()
        self.redraw()

    # -----------------------------
    # 图层编辑
    # -----------------------------
    def _on_add_layer(self) -> None:
        self.project.add_layer()
        self._refresh_layer_panel()
        self.redraw()

    def _on_remove_layer(self) -> None:
        layer_id = self.project.selected_layer_id
        if not layer_id:
            messagebox.showwarning("提示", "请先在预览中选中一个文本图层。")
            return
        self.project.remove_layer(layer_id)
        self._refresh_layer_panel()
        self.redraw()

    def _on_layer_list_select(self, _event: tk.Event) -> None:
        if self._syncing:
            return
        picked = self.layer_list.curselection()
        if not picked:
            return
        layers = self.project.layers
        if picked[0] < len(layers):
            self.project.select_layer(layers[picked[0]].id)
            self._refresh_layer_panel()
            self.redraw()

    def _on_layer_field_edit(self, name: str, var: tk.StringVar) -> None:
        if self._syncing:
            return
        layer_id = self.project.selected_layer_id
        if not layer_id:
            return
        try:
            self.project.update_layer(layer_id, {name: var.get()})
        except ValueError as exc:
            self.var_status.set(str(exc))
            return
        if name == "text":
            index = [layer.id for layer in self.project.layers].index(layer_id)
            self.layer_list.delete(index)
            self.layer_list.insert(index, var.get() or "（空）")
            self.layer_list.selection_set(index)
        self.redraw()

    # -----------------------------
    # 项目操作
    # -----------------------------
    def _on_open_background(self) -> None:
        path = filedialog.askopenfilename(title="选择背景图", filetypes=[("Images", "*.png *.jpg *.jpeg *.webp")])
        if not path:
            return
        try:
            self.project.set_background(Path(path))
        except AssetLoadError as exc:
            messagebox.showerror("错误", f"背景图加载失败：{exc}")
            return
        self.var_status.set(f"背景图：{path}")
        self.redraw()

    def _on_reset(self) -> None:
        if not messagebox.askyesno("新建项目", "开始新项目？当前作品将被清空。"):
            return
        self.project.reset()
        self.surface.zoom.fit_to_screen()
        self._refresh_layer_panel()
        self._update_zoom_label()
        self.redraw()

    def _on_export(self) -> None:
        try:
            out = self.project.save_export()
        except (*_RENDER_ERRORS, PermissionError) as exc:
            logger.exception("导出失败：%s", exc)
            messagebox.showerror("错误", f"导出失败：{exc}")
            return
        self.last_output = out
        self.var_status.set(f"最新输出：{out}")
        messagebox.showinfo("完成", f"导出完成，保存至：{out}")


__all__ = ["LayoutStudioApp"]

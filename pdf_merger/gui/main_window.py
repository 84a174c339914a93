# gui/main_window.py
# Description: PDF 合并窗口；文件列表 + 自定义排序；进度条由流水线的 ProgressEvent 驱动。

import logging
import os
import threading
import time
import tkinter as tk
from tkinter import filedialog, messagebox, ttk

import psutil

from pdf_merger.config import APP_NAME, APP_VERSION, DEFAULT_OUTPUT_FILE
from pdf_merger.core.merger import merge_pdfs
from pdf_merger.core.models import MergeResult, ProgressStatus
from pdf_merger.gui.session import SORT_MODES, MergeSession
from pdf_merger.utils.helpers import format_size, open_path

log = logging.getLogger(__name__)


class AppGUI:
    def __init__(self, root):
        self.root = root
        self.root.title(f"{APP_NAME} {APP_VERSION}")
        self.root.geometry("900x700")

        self.session = MergeSession()
        self.last_result = None

        self.sys_stats = tk.StringVar(value="CPU: 0% | 内存: 0%")
        self.in_var = tk.StringVar()
        self.out_var = tk.StringVar()
        self.sort_var = tk.StringVar(value=self.session.sort_mode)
        self.desc_var = tk.BooleanVar(value=False)
        self.pattern_var = tk.StringVar()
        self.bookmark_var = tk.BooleanVar(value=True)
        self.prog = tk.DoubleVar()
        self.status = tk.StringVar(value="准备就绪")
        self.result_text = tk.StringVar()

        self.main = ttk.Frame(root, padding=5)
        self.main.pack(fill="both", expand=True)
        self._start_sys_monitor()
        self._init_paths()
        self._init_files()
        self._init_options()
        self._init_console()
        self._update_merge_button()

    def _start_sys_monitor(self):
        top_bar = ttk.Frame(self.root, padding=2)
        top_bar.pack(side="top", fill="x", before=self.main)
        ttk.Label(top_bar, text="系统状态:", font=("Arial", 9, "bold")).pack(side="left", padx=5)
        ttk.Label(top_bar, textvariable=self.sys_stats, foreground="blue").pack(side="left")

        def update():
            while True:
                try:
                    c = psutil.cpu_percent(interval=1)
                    m = psutil.virtual_memory().percent
                    self.root.after(0, lambda: self.sys_stats.set(f"CPU: {c}% | 内存: {m}%"))
                    time.sleep(1)
                except (RuntimeError, tk.TclError):
                    # 窗口已关闭
                    break

        threading.Thread(target=update, daemon=True).start()

    # =========================================================================
    # [UI] 路径选择
    # =========================================================================
    def _init_paths(self):
        pad = {'padx': 10, 'pady': 5}
        g = ttk.LabelFrame(self.main, text="路径", padding=10)
        g.pack(fill="x", **pad)

        r1 = ttk.Frame(g)
        r1.pack(fill="x", pady=2)
        ttk.Label(r1, text="输入文件夹:", width=12).pack(side="left")
        ttk.Entry(r1, textvariable=self.in_var, state="readonly").pack(side="left", fill="x", expand=True)
        ttk.Button(r1, text="浏览", command=self.select_input_directory).pack(side="left", padx=5)

        r2 = ttk.Frame(g)
        r2.pack(fill="x", pady=2)
        ttk.Label(r2, text="输出文件:", width=12).pack(side="left")
        ttk.Entry(r2, textvariable=self.out_var, state="readonly").pack(side="left", fill="x", expand=True)
        ttk.Button(r2, text="浏览", command=self.select_output_file).pack(side="left", padx=5)

    def select_input_directory(self):
        d = filedialog.askdirectory(title="选择包含 PDF 的文件夹")
        if not d:
            return
        self.in_var.set(d)
        try:
            self.session.load_files(d)
        except OSError as e:
            log.error("Error getting PDF files: %s", e)
            messagebox.showerror("错误", f"无法读取文件夹:\n{e}")
            self.session.files = []
        self.refresh_file_list()
        self._update_merge_button()

    def select_output_file(self):
        default_dir = os.path.join(os.path.expanduser("~"), "Documents")
        out = filedialog.asksaveasfilename(
            title="合并后的 PDF 另存为",
            initialdir=default_dir if os.path.isdir(default_dir) else None,
            initialfile=DEFAULT_OUTPUT_FILE,
            defaultextension=".pdf",
            filetypes=[("PDF", "*.pdf")],
        )
        if out:
            self.session.output_path = out
            self.out_var.set(out)
        self._update_merge_button()

    # =========================================================================
    # [UI] 文件列表
    # =========================================================================
    def _init_files(self):
        g = ttk.LabelFrame(self.main, text="待合并文件", padding=10)
        g.pack(fill="both", expand=True, padx=10, pady=5)

        list_frame = ttk.Frame(g)
        list_frame.pack(side="left", fill="both", expand=True)
        scrollbar = ttk.Scrollbar(list_frame)
        scrollbar.pack(side="right", fill="y")
        self.file_list = tk.Listbox(list_frame, height=10, yscrollcommand=scrollbar.set, font=("Consolas", 9))
        self.file_list.pack(side="left", fill="both", expand=True)
        scrollbar.config(command=self.file_list.yview)
        self._drag_index = None
        self.file_list.bind("<ButtonPress-1>", self._on_drag_start)
        self.file_list.bind("<B1-Motion>", self._on_drag_motion)
        self.file_list.bind("<ButtonRelease-1>", self._on_drag_end)

        # 仅在自定义排序下可用
        bf = ttk.Frame(g)
        bf.pack(side="left", fill="y", padx=5)
        self.btn_up = ttk.Button(bf, text="↑ 上移", command=lambda: self._move(self.session.move_up, -1))
        self.btn_up.pack(fill="x", pady=2)
        self.btn_down = ttk.Button(bf, text="↓ 下移", command=lambda: self._move(self.session.move_down, 1))
        self.btn_down.pack(fill="x", pady=2)

    def refresh_file_list(self):
        self.file_list.delete(0, "end")
        for rec in self.session.displayed_files():
            self.file_list.insert("end", f"📄 {rec.name}  ({format_size(rec.size)})")
        state = "normal" if self.session.is_custom else "disabled"
        self.btn_up.config(state=state)
        self.btn_down.config(state=state)

    def _move(self, op, delta):
        sel = self.file_list.curselection()
        if not sel or not self.session.is_custom:
            return
        idx = sel[0]
        if op(idx):
            self.refresh_file_list()
            self.file_list.selection_set(idx + delta)

    # --- 拖放排序 (仅自定义模式) ---
    def _on_drag_start(self, event):
        self._drag_index = self.file_list.nearest(event.y) if self.session.is_custom else None

    def _on_drag_motion(self, event):
        if self._drag_index is None:
            return
        target = self.file_list.nearest(event.y)
        if self.session.move_file(self._drag_index, target):
            self.refresh_file_list()
            self.file_list.selection_set(target)
            self._drag_index = target

    def _on_drag_end(self, event):
        self._drag_index = None

    # =========================================================================
    # [UI] 合并选项
    # =========================================================================
    def _init_options(self):
        g = ttk.LabelFrame(self.main, text="合并选项", padding=10)
        g.pack(fill="x", padx=10, pady=5)

        r1 = ttk.Frame(g)
        r1.pack(fill="x", pady=2)
        ttk.Label(r1, text="排序:").pack(side="left")
        cb = ttk.Combobox(r1, textvariable=self.sort_var, values=SORT_MODES, width=8, state="readonly")
        cb.pack(side="left", padx=5)
        cb.bind("<<ComboboxSelected>>", lambda e: self._on_sort_changed())
        ttk.Radiobutton(r1, text="升序", variable=self.desc_var, value=False,
                        command=self._on_sort_changed).pack(side="left", padx=5)
        ttk.Radiobutton(r1, text="降序", variable=self.desc_var, value=True,
                        command=self._on_sort_changed).pack(side="left", padx=5)
        ttk.Checkbutton(r1, text="为每个文件添加书签", variable=self.bookmark_var).pack(side="right", padx=10)

        r2 = ttk.Frame(g)
        r2.pack(fill="x", pady=2)
        ttk.Label(r2, text="文件名正则:").pack(side="left")
        ttk.Entry(r2, textvariable=self.pattern_var).pack(side="left", fill="x", expand=True, padx=5)

    def _on_sort_changed(self):
        self.session.descending = self.desc_var.get()
        self.session.set_sort_mode(self.sort_var.get())
        self.refresh_file_list()

    # =========================================================================
    # [UI] 进度与结果
    # =========================================================================
    def _init_console(self):
        g = ttk.LabelFrame(self.main, text="控制台", padding=10)
        g.pack(fill="x", padx=10, pady=5)
        ttk.Progressbar(g, variable=self.prog, maximum=100).pack(fill="x", pady=(0, 5))
        ttk.Label(g, textvariable=self.status, foreground="blue").pack(anchor="w")

        self.result_frame = ttk.Frame(g)
        self.result_label = ttk.Label(self.result_frame, textvariable=self.result_text, wraplength=800)
        self.result_label.pack(anchor="w", pady=5)
        rb = ttk.Frame(self.result_frame)
        rb.pack(fill="x")
        self.btn_open = ttk.Button(rb, text="📂 打开 PDF", command=self.on_open_pdf)
        self.btn_new = ttk.Button(rb, text="🆕 新的合并", command=self.on_new_merge)
        self.btn_retry = ttk.Button(rb, text="🔁 重试", command=self.on_try_again)

        self.btn_start = ttk.Button(self.main, text="🚀 开始合并", command=self.on_click_start)
        self.btn_start.pack(pady=10, ipadx=20, ipady=5)

    def _update_merge_button(self):
        self.btn_start.config(state="normal" if self.session.can_merge() else "disabled")

    def on_click_start(self):
        if not self.session.can_merge():
            return messagebox.showwarning("提示", "请先选择输入文件夹和输出文件")

        self.session.descending = self.desc_var.get()
        self.session.file_pattern = self.pattern_var.get().strip()
        self.session.add_bookmarks = self.bookmark_var.get()
        self.session.is_running = True

        self.result_frame.pack_forget()
        self.prog.set(0)
        self._update_merge_button()
        options = self.session.build_options(on_progress=self._progress_from_worker)
        threading.Thread(target=self._run_merge, args=(options,), daemon=True).start()

    def _run_merge(self, options):
        try:
            result = merge_pdfs(self.session.input_path, self.session.output_path, options)
        except Exception as e:
            log.exception("Merge thread crashed")
            result = MergeResult(success=False, message=f"Unexpected error: {e}")
        self.root.after(0, lambda: self.show_result(result))

    def _progress_from_worker(self, event):
        # 流水线在工作线程上同步回调，转交给 Tk 主线程
        self.root.after(0, lambda: self.handle_progress(event))

    def handle_progress(self, event):
        if event.status is ProgressStatus.PROCESSING and event.total:
            self.prog.set(min(round(event.current / event.total * 100), 100))
            self.status.set(event.message)
        elif event.status is ProgressStatus.FILE_COMPLETE and event.total:
            self.prog.set(min(round(event.current / event.total * 100), 100))
        elif event.status is ProgressStatus.FILE_ERROR:
            self.status.set(f"⚠️ {event.message}")
        elif event.status in (ProgressStatus.STARTING, ProgressStatus.SAVING):
            self.status.set(event.message)

    def show_result(self, result):
        self.session.is_running = False
        self.last_result = result
        for btn in (self.btn_open, self.btn_new, self.btn_retry):
            btn.pack_forget()

        if result.success:
            self.prog.set(100)
            self.status.set("合并完成")
            self.result_label.config(foreground="green")
            self.result_text.set(f"✅ {result.message}")
            self.btn_open.pack(side="left", padx=2)
            self.btn_new.pack(side="left", padx=2)
        else:
            self.status.set("合并失败")
            self.result_label.config(foreground="red")
            self.result_text.set(f"❌ {result.message}")
            self.btn_retry.pack(side="left", padx=2)
            self.btn_new.pack(side="left", padx=2)

        self.result_frame.pack(fill="x")
        self._update_merge_button()

    def on_open_pdf(self):
        if self.last_result and self.last_result.output_path:
            try:
                open_path(self.last_result.output_path)
            except OSError as e:
                messagebox.showerror("错误", f"无法打开文件:\n{e}")

    def on_new_merge(self):
        self.session.reset()
        self.last_result = None
        self.in_var.set("")
        self.out_var.set("")
        self.sort_var.set(self.session.sort_mode)
        self.desc_var.set(False)
        self.pattern_var.set("")
        self.bookmark_var.set(True)
        self.prog.set(0)
        self.status.set("准备就绪")
        self.result_frame.pack_forget()
        self.refresh_file_list()
        self._update_merge_button()

    def on_try_again(self):
        self.result_frame.pack_forget()
        self.prog.set(0)
        self.status.set("准备就绪")
        self._update_merge_button()

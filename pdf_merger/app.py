# app.py
import sys

CLI_FLAGS = {"--input", "-i", "--output", "-o", "--help", "-h", "--cli-only"}


def is_cli_mode(argv):
    return any(arg in CLI_FLAGS or arg.split("=", 1)[0] in CLI_FLAGS for arg in argv)


def run_gui():
    import tkinter as tk
    from pdf_merger.gui.main_window import AppGUI
    from pdf_merger.utils.logger import setup_logging

    setup_logging()
    root = tk.Tk()
    # 尝试开启高DPI支持 (Windows)
    try:
        from ctypes import windll
        windll.shcore.SetProcessDpiAwareness(1)
    except (ImportError, AttributeError, OSError):
        pass

    AppGUI(root)
    root.mainloop()
    return 0


def run(argv=None):
    """有命令行参数时走 CLI，否则启动图形界面"""
    argv = list(sys.argv[1:] if argv is None else argv)
    if is_cli_mode(argv):
        from pdf_merger.cli import main
        return main([a for a in argv if a != "--cli-only"])

    try:
        return run_gui()
    except ImportError as e:
        print(f"Error: GUI unavailable ({e}).", file=sys.stderr)
        print("Use the command line instead: pdf-merger --cli-only", file=sys.stderr)
        return 1

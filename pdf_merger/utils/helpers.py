# utils/helpers.py
import os
import subprocess
import sys


def bookmark_title(file_name):
    """去掉末尾一个小写的 ".pdf"；大小写不同的后缀 (如 .PDF) 原样保留"""
    if file_name.endswith(".pdf"):
        return file_name[: -len(".pdf")]
    return file_name


def format_size(num_bytes):
    """文件列表中的大小显示：KB 或 MB，保留一位小数"""
    size_kb = num_bytes / 1024
    if size_kb < 1024:
        return f"{size_kb:.1f} KB"
    return f"{size_kb / 1024:.1f} MB"


def open_path(path):
    """用系统默认程序打开文件"""
    path = os.path.abspath(path)
    if sys.platform.startswith("win"):
        os.startfile(path)  # type: ignore[attr-defined]
    elif sys.platform == "darwin":
        subprocess.Popen(["open", path])
    else:
        subprocess.Popen(["xdg-open", path])

# pdf_merger/config.py
import os

APP_NAME = "PDF Merger"
APP_VERSION = "v1.2.0"

PDF_EXTENSION = ".pdf"

# 命令行默认路径 (相对当前工作目录)
DEFAULT_INPUT_DIR = "pdfs-to-merge"
DEFAULT_OUTPUT_FILE = "merged.pdf"

# 并发 stat 的线程上限
STAT_WORKERS = min(16, (os.cpu_count() or 1) * 2)

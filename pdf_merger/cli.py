# cli.py
"""
命令行入口：参数解析、单行进度显示、彩色结果输出。

用法:
    pdf-merger --input ./scans --output ./out/merged.pdf
    pdf-merger -i ./scans -o merged.pdf --sort-by date --descending
    pdf-merger -i ./scans --pattern "^chapter" --no-bookmarks
"""

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console

from pdf_merger.config import APP_NAME, APP_VERSION, DEFAULT_INPUT_DIR, DEFAULT_OUTPUT_FILE
from pdf_merger.core.merger import merge_pdfs
from pdf_merger.core.models import MergeOptions, ProgressStatus, SortKey
from pdf_merger.utils.logger import setup_logging

log = logging.getLogger(__name__)


def build_parser():
    p = argparse.ArgumentParser(
        prog="pdf-merger",
        description=f"{APP_NAME} - Combine multiple PDF files into one",
    )
    p.add_argument(
        "--input",
        "-i",
        default=str(Path.cwd() / DEFAULT_INPUT_DIR),
        help=f"Input directory containing PDFs (default: ./{DEFAULT_INPUT_DIR})",
    )
    p.add_argument(
        "--output",
        "-o",
        default=str(Path.cwd() / DEFAULT_OUTPUT_FILE),
        help=f"Output PDF file path (default: ./{DEFAULT_OUTPUT_FILE})",
    )
    p.add_argument(
        "--sort-by",
        default=SortKey.NAME.value,
        help="Sort files by: 'name', 'date', or 'size' (default: name)",
    )
    p.add_argument("--descending", action="store_true", help="Sort in descending order")
    p.add_argument("--pattern", default=None, help="Regex pattern to match specific filenames")
    p.add_argument(
        "--no-bookmarks",
        dest="add_bookmarks",
        action="store_false",
        help="Disable adding bookmarks to the merged PDF",
    )
    p.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    p.add_argument("--log-file", type=Path, default=None, help="Also write a detailed log to this file")
    p.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    return p


class ProgressLine:
    """把 processing 事件渲染为同一行、不断覆盖的状态行"""

    def __init__(self, stream=None):
        self.stream = stream or sys.stdout
        self.dirty = False

    def __call__(self, event):
        if event.status is not ProgressStatus.PROCESSING:
            return
        self.stream.write(f"\rProcessing file {event.current}/{event.total}: {event.message}")
        self.stream.flush()
        self.dirty = True

    def finish(self):
        if self.dirty:
            self.stream.write("\n")
            self.stream.flush()
            self.dirty = False


def main(argv=None):
    """
    :return: 退出码，成功 0，合并失败 1
    """
    args = build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose, log_file=args.log_file)

    sort_by = SortKey.parse(args.sort_by)
    if sort_by.value != str(args.sort_by).strip().lower():
        log.warning("Unknown sort key %r, falling back to name", args.sort_by)

    progress = ProgressLine()
    options = MergeOptions(
        sort_by=sort_by,
        descending=args.descending,
        file_pattern=args.pattern,
        add_bookmarks=args.add_bookmarks,
        on_progress=progress,
    )

    result = merge_pdfs(args.input, args.output, options)
    progress.finish()

    if result.success:
        Console().print(result.message, style="green", markup=False, highlight=False, soft_wrap=True)
        return 0

    Console(stderr=True).print(result.message, style="red", markup=False, highlight=False, soft_wrap=True)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())

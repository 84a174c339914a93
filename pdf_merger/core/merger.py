# core/merger.py
import io
import logging
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path

from pypdf import PdfReader, PdfWriter

from pdf_merger.core.discovery import discover_pdfs, validate_input_dir
from pdf_merger.core.models import (
    Bookmark,
    ErrorKind,
    MergeError,
    MergeOptions,
    MergeResult,
    ProgressStatus,
)
from pdf_merger.core.ordering import resolve_order
from pdf_merger.utils.helpers import bookmark_title
from pdf_merger.utils.logger import CallbackManager

log = logging.getLogger(__name__)


class PDFMergerEngine:
    """
    负责把一个目录下的 PDF 合并为单个文件，并为每个源文件生成一级书签。
    每次调用独占自己的 writer / 页计数 / 书签列表，不在调用之间共享状态。
    """

    def __init__(self, options=None):
        self.options = options or MergeOptions()
        self.cb = CallbackManager(self.options.on_progress, logger=log)
        self.writer = None
        self.page_count = 0
        self.bookmarks = []

    def merge(self, input_path, output_path):
        try:
            input_path = os.fspath(input_path)
            output_path = os.path.abspath(os.fspath(output_path))
            self.cb.emit(ProgressStatus.STARTING, "Starting PDF merge process...")

            validate_input_dir(input_path)
            discovered = discover_pdfs(input_path, self.options.file_pattern)
            files = resolve_order(discovered, self.options)
            total = len(files)

            self.cb.emit(
                ProgressStatus.PROCESSING,
                f"Found {total} PDF files to merge.",
                current=0,
                total=total,
                page_count=0,
            )

            self.writer = PdfWriter()
            self.page_count = 0
            self.bookmarks = []
            for idx, record in enumerate(files):
                self._ingest(idx, total, record)

            if self.page_count == 0:
                raise MergeError(ErrorKind.NO_VALID_CONTENT, "No valid PDF content could be processed.")

            self._save(output_path)

            result = MergeResult(
                success=True,
                message=(
                    f"Successfully merged {total} PDFs with {self.page_count} "
                    f'total pages into "{output_path}"'
                ),
                file_count=total,
                page_count=self.page_count,
                output_path=output_path,
            )
            self.cb.emit(ProgressStatus.COMPLETE, result.message, page_count=self.page_count)
            log.info(result.message)
            return result

        except MergeError as e:
            return self._fail(e.kind, e.message)
        except Exception as e:
            log.exception("Unexpected error while merging %s", input_path)
            return self._fail(ErrorKind.UNEXPECTED_FAILURE, f"Error merging PDFs: {e}")
        finally:
            if self.writer is not None:
                self.writer.close()
                self.writer = None

    def _ingest(self, idx, total, record):
        """读取单个文件并追加其全部页面；失败只跳过该文件"""
        self.cb.emit(
            ProgressStatus.PROCESSING,
            f"Processing file {idx + 1} of {total}: {record.name}",
            current=idx,
            total=total,
            file_name=record.name,
            page_count=self.page_count,
        )

        # 书签指向该文件贡献的第一页
        start_page = self.page_count
        try:
            reader = PdfReader(io.BytesIO(Path(record.path).read_bytes()))
            # 先完整解析页树，解析失败的文件不贡献任何页面
            pages = list(reader.pages)
            for page in pages:
                self.writer.add_page(page)
                self.page_count += 1
        except Exception as e:
            # 复制到一半失败时撤回该文件已加入的页面
            if self.page_count > start_page:
                del self.writer.pages[start_page:]
                self.page_count = start_page
            self.cb.log(f'Error processing file "{record.name}": {e}', level=logging.ERROR)
            self.cb.emit(
                ProgressStatus.FILE_ERROR,
                f'Error processing file "{record.name}": {e}',
                current=idx + 1,
                total=total,
                file_name=record.name,
                error=str(e),
                kind=ErrorKind.PER_FILE_INGEST_FAILURE,
            )
            return

        added = self.page_count - start_page

        if self.options.add_bookmarks and added:
            self.bookmarks.append(Bookmark(title=bookmark_title(record.name), page_number=start_page))

        self.cb.emit(
            ProgressStatus.FILE_COMPLETE,
            f'Added "{record.name}" ({added} pages)',
            current=idx + 1,
            total=total,
            file_name=record.name,
            page_count=self.page_count,
        )

    def _save(self, output_path):
        self.cb.emit(ProgressStatus.SAVING, "Saving merged PDF...", page_count=self.page_count)

        tmp_path = None
        try:
            out_dir = os.path.dirname(output_path)
            os.makedirs(out_dir, exist_ok=True)

            # 平铺目录，顺序即合并顺序
            for bm in self.bookmarks:
                self.writer.add_outline_item(title=bm.title, page_number=bm.page_number)

            buf = io.BytesIO()
            self.writer.write(buf)

            # 先写临时文件再替换，避免留下半截输出
            fd, tmp_path = tempfile.mkstemp(prefix=".merge-", suffix=".pdf.part", dir=out_dir)
            with os.fdopen(fd, "wb") as f:
                f.write(buf.getvalue())
            os.replace(tmp_path, output_path)
            tmp_path = None
        except Exception as e:
            raise MergeError(ErrorKind.PERSIST_FAILURE, f"Failed to save merged PDF: {e}") from e
        finally:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)

        log.info("Wrote %d pages to %s", self.page_count, output_path)

    def _fail(self, kind, message):
        log.warning("Merge failed [%s]: %s", kind.value, message)
        try:
            self.cb.emit(ProgressStatus.ERROR, message)
        except Exception:
            # 回调本身出错时仍要把结果交还调用方
            log.exception("Progress callback failed while reporting error")
        return MergeResult.failure(kind, message)


def merge_pdfs(input_path, output_path, options=None, **overrides):
    """
    合并流水线入口。
    :param options: MergeOptions、任意 Mapping 或 None (全部默认)
    :param overrides: 以关键字形式覆盖单个选项，如 add_bookmarks=False
    :return: MergeResult，从不抛出 MergeError
    """
    if options is None or isinstance(options, Mapping):
        mapping = dict(options or {})
        mapping.update(overrides)
        options = MergeOptions.from_mapping(mapping)
    elif overrides:
        options = MergeOptions.from_mapping({**vars(options), **overrides})
    return PDFMergerEngine(options).merge(input_path, output_path)

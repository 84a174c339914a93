# core/discovery.py
"""
输入目录校验与 PDF 文件发现。
"""

import logging
import os
import re
import stat
from concurrent.futures import ThreadPoolExecutor

from pdf_merger.config import PDF_EXTENSION, STAT_WORKERS
from pdf_merger.core.models import ErrorKind, FileRecord, MergeError

log = logging.getLogger(__name__)


def validate_input_dir(input_path):
    """确认输入路径存在且为目录"""
    try:
        st = os.stat(input_path)
    except OSError as e:
        log.debug("stat failed for %s: %s", input_path, e)
        raise MergeError(ErrorKind.INPUT_MISSING, f"Input directory doesn't exist: {input_path}") from e

    if not stat.S_ISDIR(st.st_mode):
        raise MergeError(ErrorKind.NOT_A_DIRECTORY, f"Input path is not a directory: {input_path}")


def compile_pattern(pattern):
    if not pattern:
        return None
    try:
        return re.compile(pattern)
    except re.error as e:
        raise MergeError(ErrorKind.INVALID_PATTERN, f"Invalid file pattern {pattern!r}: {e}")


def _is_pdf_name(name):
    return os.path.splitext(name)[1].lower() == PDF_EXTENSION


def _stat_record(path):
    st = os.stat(path)
    return FileRecord(
        name=os.path.basename(path),
        path=path,
        size=st.st_size,
        mtime=st.st_mtime,
    )


def _candidates(directory, regex=None):
    """单层列目录 -> 扩展名过滤 -> 可选正则过滤，按名称字节序返回绝对路径"""
    directory = os.path.abspath(directory)
    found = []
    for name in sorted(os.listdir(directory)):
        if not _is_pdf_name(name):
            continue
        # 正则只作用于已通过扩展名检查的文件
        if regex is not None and not regex.search(name):
            continue
        path = os.path.join(directory, name)
        if not os.path.isfile(path):
            continue
        found.append(path)
    return found


def stat_files(paths, max_workers=STAT_WORKERS):
    """并发获取文件信息；每个结果写入自己的位置，顺序与输入一致"""
    if not paths:
        return []
    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(paths)))) as pool:
        return list(pool.map(_stat_record, paths))


def discover_pdfs(directory, pattern=None, max_workers=STAT_WORKERS):
    """
    发现目录中的 PDF 文件并采集大小/修改时间快照。
    :return: list[FileRecord]，按发现顺序
    :raises MergeError: NoFilesFound / InvalidPattern
    """
    regex = compile_pattern(pattern)
    paths = _candidates(directory, regex)
    if not paths:
        raise MergeError(ErrorKind.NO_FILES_FOUND, f"No PDF files found in {directory}")

    records = stat_files(paths, max_workers=max_workers)
    log.info("Discovered %d PDF file(s) in %s", len(records), directory)
    return records


def list_pdf_files(directory):
    """GUI 文件列表：目录中全部 PDF (无正则)，空目录返回空列表"""
    return stat_files(_candidates(directory))

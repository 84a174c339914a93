# core/ordering.py
"""
确定最终的处理顺序：自定义顺序优先，否则按名称/日期/大小排序。
"""

import logging
import os
from collections.abc import Mapping

from natsort import natsort_keygen, ns

from pdf_merger.core.models import FileRecord, SortKey

log = logging.getLogger(__name__)

# 不区分大小写、数字段按数值比较 ("file2" < "file10")
_natural_key = natsort_keygen(alg=ns.IGNORECASE)

_SORT_KEYS = {
    SortKey.NAME: lambda rec: _natural_key(rec.name),
    SortKey.DATE: lambda rec: rec.mtime,
    SortKey.SIZE: lambda rec: rec.size,
}


def sort_files(files, sort_by=SortKey.NAME, descending=False):
    """稳定排序；降序时直接反转升序结果"""
    key = _SORT_KEYS[SortKey.parse(sort_by)]
    ordered = sorted(files, key=key)
    if descending:
        ordered.reverse()
    return ordered


def custom_order_name(entry):
    """
    从自定义顺序中的一项取出文件名。
    支持路径字符串、PathLike、FileRecord 以及带 path/name 键的字典。
    """
    if isinstance(entry, FileRecord):
        return entry.name
    if isinstance(entry, Mapping):
        entry = entry.get("path") or entry.get("name")
    return os.path.basename(os.fspath(entry))


def apply_custom_order(files, custom_order):
    by_name = {rec.name: rec for rec in files}
    ordered = []
    seen = set()

    for entry in custom_order:
        name = custom_order_name(entry)
        rec = by_name.get(name)
        if rec is None:
            log.debug("Custom order entry %r not found, skipped", name)
            continue
        if name in seen:
            continue
        seen.add(name)
        ordered.append(rec)

    # 未被引用的文件按发现顺序追加到末尾
    ordered.extend(rec for rec in files if rec.name not in seen)
    return ordered


def resolve_order(files, options):
    """
    :param files: 发现阶段得到的 FileRecord 列表 (发现顺序)
    :param options: MergeOptions
    :return: 最终处理顺序
    """
    if options.uses_custom_order:
        return apply_custom_order(files, options.custom_file_order)
    return sort_files(files, options.sort_by, options.descending)

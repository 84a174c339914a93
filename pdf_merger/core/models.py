# core/models.py
"""
合并流水线使用的数据结构：选项、文件记录、书签、进度事件与结果。
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Sequence


class SortKey(str, Enum):
    NAME = "name"
    DATE = "date"
    SIZE = "size"

    @classmethod
    def parse(cls, value) -> "SortKey":
        """未知或空值一律回退为按名称排序"""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.NAME


class ProgressStatus(str, Enum):
    STARTING = "starting"
    PROCESSING = "processing"
    FILE_COMPLETE = "fileComplete"
    FILE_ERROR = "fileError"
    SAVING = "saving"
    COMPLETE = "complete"
    ERROR = "error"


class ErrorKind(str, Enum):
    INPUT_MISSING = "InputMissing"
    NOT_A_DIRECTORY = "NotADirectory"
    INVALID_PATTERN = "InvalidPattern"
    NO_FILES_FOUND = "NoFilesFound"
    PER_FILE_INGEST_FAILURE = "PerFileIngestFailure"
    NO_VALID_CONTENT = "NoValidContent"
    PERSIST_FAILURE = "PersistFailure"
    UNEXPECTED_FAILURE = "UnexpectedFailure"


class MergeError(Exception):
    """流水线内部的致命错误，在入口处被转换为失败的 MergeResult。"""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message


@dataclass(frozen=True)
class FileRecord:
    name: str
    path: str
    size: int
    mtime: float

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "path": self.path,
            "size": self.size,
            "mtime": datetime.datetime.fromtimestamp(
                self.mtime, tz=datetime.timezone.utc
            ).isoformat(),
        }


@dataclass(frozen=True)
class Bookmark:
    title: str
    page_number: int


@dataclass(frozen=True)
class ProgressEvent:
    status: ProgressStatus
    message: str
    current: Optional[int] = None
    total: Optional[int] = None
    file_name: Optional[str] = None
    page_count: Optional[int] = None
    error: Optional[str] = None
    kind: Optional[ErrorKind] = None


ProgressCallback = Callable[[ProgressEvent], None]


# 接受 camelCase 形式的选项名
_OPTION_ALIASES = {
    "sortBy": "sort_by",
    "filePattern": "file_pattern",
    "customFileOrder": "custom_file_order",
    "addBookmarks": "add_bookmarks",
    "onProgress": "on_progress",
}


@dataclass
class MergeOptions:
    sort_by: SortKey = SortKey.NAME
    descending: bool = False
    file_pattern: Optional[str] = None
    custom_file_order: Optional[Sequence[Any]] = None
    add_bookmarks: bool = True
    on_progress: Optional[ProgressCallback] = None

    def __post_init__(self):
        self.sort_by = SortKey.parse(self.sort_by)
        self.descending = bool(self.descending)
        self.add_bookmarks = bool(self.add_bookmarks)
        if not self.file_pattern:
            self.file_pattern = None

    @property
    def uses_custom_order(self) -> bool:
        return bool(self.custom_file_order)

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[str, Any]]) -> "MergeOptions":
        """
        从松散的字典构造选项。缺失的键或值为 None 的键使用默认值，未知键忽略。
        """
        fields = {}
        for key, value in (mapping or {}).items():
            key = _OPTION_ALIASES.get(key, key)
            if key in cls.__dataclass_fields__ and value is not None:
                fields[key] = value
        return cls(**fields)


@dataclass
class MergeResult:
    success: bool
    message: str
    file_count: Optional[int] = None
    page_count: Optional[int] = None
    error_kind: Optional[ErrorKind] = None
    output_path: Optional[str] = None

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "MergeResult":
        return cls(success=False, message=message, error_kind=kind)

# gui/session.py
"""
界面会话状态：与 Tk 无关，由窗口持有，合并流水线从不访问它。
"""

from pdf_merger.core.discovery import list_pdf_files
from pdf_merger.core.models import MergeOptions, SortKey
from pdf_merger.core.ordering import sort_files

CUSTOM_ORDER = "custom"
SORT_MODES = [SortKey.NAME.value, SortKey.DATE.value, SortKey.SIZE.value, CUSTOM_ORDER]


class MergeSession:

    def __init__(self):
        self.reset()

    def reset(self):
        self.input_path = ""
        self.output_path = ""
        self.files = []
        self.sort_mode = SortKey.NAME.value
        self.descending = False
        self.file_pattern = ""
        self.add_bookmarks = True
        self.is_running = False

    # --- 文件列表 ---
    def load_files(self, directory):
        self.input_path = directory
        self.files = list_pdf_files(directory)
        return self.files

    @property
    def is_custom(self):
        return self.sort_mode == CUSTOM_ORDER

    def set_sort_mode(self, mode):
        """切换到自定义排序时，以当前显示顺序作为初始顺序"""
        if mode == CUSTOM_ORDER and not self.is_custom:
            self.files = self.displayed_files()
        self.sort_mode = mode if mode in SORT_MODES else SortKey.NAME.value

    def displayed_files(self):
        if self.is_custom:
            return list(self.files)
        return sort_files(self.files, self.sort_mode, self.descending)

    def move_up(self, index):
        if 0 < index < len(self.files):
            self.files[index - 1], self.files[index] = self.files[index], self.files[index - 1]
            return True
        return False

    def move_down(self, index):
        if 0 <= index < len(self.files) - 1:
            self.files[index], self.files[index + 1] = self.files[index + 1], self.files[index]
            return True
        return False

    def move_file(self, source, target):
        """拖放式重排：把 source 处的文件移动到 target 位置"""
        n = len(self.files)
        if source == target or not (0 <= source < n and 0 <= target < n):
            return False
        rec = self.files.pop(source)
        self.files.insert(target, rec)
        return True

    # --- 合并 ---
    def can_merge(self):
        return bool(self.input_path and self.output_path and self.files) and not self.is_running

    def custom_order(self):
        return list(self.files) if self.is_custom else None

    def build_options(self, on_progress=None):
        return MergeOptions(
            sort_by=SortKey.parse(self.sort_mode),
            descending=self.descending,
            file_pattern=self.file_pattern or None,
            custom_file_order=self.custom_order(),
            add_bookmarks=self.add_bookmarks,
            on_progress=on_progress,
        )

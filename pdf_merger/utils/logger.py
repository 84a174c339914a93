# utils/logger.py
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from pdf_merger.core.models import ProgressEvent, ProgressStatus

log = logging.getLogger(__name__)

CONSOLE_FMT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DETAILED_FMT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(threadName)s | %(filename)s:%(lineno)d | %(message)s"
)


class CallbackManager:
    """
    连接合并流水线与调用方（命令行 / GUI）的进度管理器。
    事件在调用线程上同步、按顺序投递，不做缓冲。
    """

    def __init__(self, on_progress=None, logger=None):
        self.on_progress = on_progress
        self.logger = logger or log

    def emit(self, status, message, **fields):
        """
        构造进度事件并立即交给回调
        :param status: ProgressStatus
        :param message: 人类可读的描述
        """
        event = ProgressEvent(status=ProgressStatus(status), message=message, **fields)
        self.logger.debug("[%s] %s", event.status.value, event.message)
        if self.on_progress:
            self.on_progress(event)
        return event

    def log(self, msg, level=logging.INFO):
        self.logger.log(level, msg)


def setup_logging(verbose=False, log_file=None):
    """配置根日志：控制台输出，可选滚动日志文件"""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    level = logging.DEBUG if verbose else logging.INFO
    root_logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level if verbose else logging.WARNING)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FMT, "%Y-%m-%d %H:%M:%S"))
    root_logger.addHandler(console_handler)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(DETAILED_FMT, "%Y-%m-%d %H:%M:%S"))
        root_logger.addHandler(file_handler)

    # pypdf 对损坏文件会刷大量警告
    logging.getLogger("pypdf").setLevel(logging.DEBUG if verbose else logging.ERROR)

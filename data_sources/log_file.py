import logging
import os
import sys
from typing import Optional

from .base import DataSource
from context import RunContext

logger = logging.getLogger(__name__)

STDIN_MARKER = "-"


class LogFileDataSource(DataSource):
    """
    [V5.0] 日志文件数据源
    读取预先导出的 git log 输出 (格式须与对应模式的 --pretty 一致)，"-" 表示标准输入。
    """

    def __init__(self, context: RunContext):
        self.context = context
        self.log_file = context.log_file

    def validate(self) -> bool:
        if self.log_file == STDIN_MARKER:
            return True
        if not os.path.isfile(self.log_file):
            logger.error(f"❌ 日志文件不存在: {self.log_file}")
            return False
        return True

    def get_raw_log(self) -> Optional[str]:
        if self.log_file == STDIN_MARKER:
            logger.info("📥 [DataSource] 从标准输入读取 git log")
            # 与 git 命令一致，非 UTF-8 字节替换为 U+FFFD
            return sys.stdin.buffer.read().decode("utf-8", errors="replace")
        try:
            with open(self.log_file, "r", encoding="utf-8", errors="replace") as f:
                content = f.read()
            logger.info(f"✅ [DataSource] 成功加载日志文件: {self.log_file}")
            return content
        except OSError as e:
            logger.error(f"❌ [DataSource] 读取日志文件失败: {e}")
            return None

import logging
import os
from typing import Optional

from .base import DataSource
from context import RunContext
import git_utils

logger = logging.getLogger(__name__)


class LocalGitDataSource(DataSource):
    """
    [V5.0] 本地 Git 数据源实现。
    通过调用 git 命令行工具读取本地仓库的提交历史。
    """

    def __init__(self, context: RunContext):
        self.context = context

    def validate(self) -> bool:
        if not os.path.exists(self.context.repo_path):
            logger.error(f"❌ 路径不存在: {self.context.repo_path}")
            return False
        if not git_utils.is_git_repository(self.context.repo_path):
            logger.error(f"❌ 指定路径不是 Git 仓库: {self.context.repo_path}")
            return False
        return True

    def get_raw_log(self) -> Optional[str]:
        return git_utils.get_git_log(self.context)

import logging
from context import RunContext
from .base import DataSource
from .local_git import LocalGitDataSource
from .log_file import LogFileDataSource

logger = logging.getLogger(__name__)


def get_data_source(context: RunContext) -> DataSource:
    """
    [V5.0] 数据源工厂
    指定了 --log-file 时读取日志文件，否则调用本地 git。
    """
    if context.log_file:
        logger.info("🔌 [Factory] 初始化数据源: Log File")
        return LogFileDataSource(context)

    logger.info("🔌 [Factory] 初始化数据源: Local Git")
    return LocalGitDataSource(context)

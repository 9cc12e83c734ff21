from abc import ABC, abstractmethod
from typing import Optional


class DataSource(ABC):
    """
    [V5.0] 数据源抽象基类
    提供一次运行所需的 git log 原始文本，屏蔽底层是调用 git 还是读取已导出的日志文件。
    """

    @abstractmethod
    def validate(self) -> bool:
        """
        验证数据源是否可用。
        例如：本地路径是否存在且为 Git 仓库，或者日志文件是否可读。
        """
        pass

    @abstractmethod
    def get_raw_log(self) -> Optional[str]:
        """
        获取 git log --numstat 格式的原始文本。
        获取失败时返回 None；空字符串表示范围内没有提交。
        """
        pass

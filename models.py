# models.py
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class HeaderShape(Enum):
    """提交首行 (identity line) 的格式变体，值即 CLI 模式名"""

    NAME_ONLY = "person"  # <id> '<name>' <time> <message>
    WITH_EMAIL = "repo"  # <id> '<name>' <email> <time> <message>


@dataclass(frozen=True)
class CommitRecord:
    """单个提交的身份信息与完整提交消息"""

    commit_id: str
    author_name: str
    timestamp: str
    message: str
    author_email: Optional[str] = None

    @property
    def identity_key(self) -> str:
        # 有邮箱时按邮箱归并，否则按作者名
        return self.author_email or self.author_name


@dataclass(frozen=True)
class FileChange:
    """numstat 行数据模型，二进制文件的 added/deleted 为 None"""

    added: Optional[int]
    deleted: Optional[int]
    path: str

    @property
    def is_binary(self) -> bool:
        return self.added is None or self.deleted is None

    @property
    def added_lines(self) -> int:
        return self.added or 0

    @property
    def deleted_lines(self) -> int:
        return self.deleted or 0


@dataclass(frozen=True)
class FileResult:
    """文件变更及其是否计入统计"""

    change: FileChange
    counted: bool


@dataclass
class CommitStats:
    """单个提交的统计结果"""

    added_lines: int = 0
    deleted_lines: int = 0
    aig_ratio: float = 0.0
    is_fix: bool = False


@dataclass
class CommitAnalysis:
    """一个提交的解析结果：身份、统计与逐文件判定"""

    record: CommitRecord
    stats: CommitStats
    file_results: List[FileResult] = field(default_factory=list)


@dataclass
class AuthorStats:
    """作者维度的累计统计"""

    name: str
    email: Optional[str] = None
    total_added: int = 0
    total_deleted: int = 0
    total_ai_added: int = 0
    total_ai_deleted: int = 0
    fix_count: int = 0
    fix_and_aig_count: int = 0

    @property
    def ai_added_percent(self) -> float:
        if self.total_added <= 0:
            return 0.0
        return self.total_ai_added / self.total_added * 100

    @property
    def ai_deleted_percent(self) -> float:
        if self.total_deleted <= 0:
            return 0.0
        return self.total_ai_deleted / self.total_deleted * 100

    @property
    def ai_fix_percent(self) -> float:
        if self.fix_count <= 0:
            return 0.0
        return self.fix_and_aig_count / self.fix_count * 100

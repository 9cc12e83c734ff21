# stats_aggregator.py
"""
[V5.0] 作者维度的统计累加器
每次运行创建一个 StatsAccumulator，由 aggregate() 折叠所有提交后返回。
"""
import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, Iterator, List

from models import AuthorStats, CommitAnalysis, CommitRecord, CommitStats

logger = logging.getLogger(__name__)


def round_half_away_from_zero(value: float) -> int:
    """四舍五入 (0.5 远离零方向)，不使用 Python 内置的银行家舍入"""
    # Decimal(float) 为精确值，避免 0.49999999999999994 + 0.5 的浮点进位
    return int(Decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def ai_lines(lines: int, ratio: float) -> int:
    """按 AIG 比例折算 AI 贡献行数"""
    return round_half_away_from_zero(lines * ratio)


class StatsAccumulator:
    """
    持有 作者标识 -> AuthorStats 的映射。
    有邮箱时以邮箱为键，否则以作者名为键。
    """

    def __init__(self):
        self._authors: Dict[str, AuthorStats] = {}

    def add(self, record: CommitRecord, stats: CommitStats) -> AuthorStats:
        key = record.identity_key
        author = self._authors.get(key)
        if author is None:
            author = AuthorStats(name=record.author_name, email=record.author_email)
            self._authors[key] = author

        _fold_into(author, stats)
        return author

    def get(self, key: str) -> AuthorStats:
        return self._authors[key]

    def __contains__(self, key: str) -> bool:
        return key in self._authors

    def __len__(self) -> int:
        return len(self._authors)

    def __iter__(self) -> Iterator[AuthorStats]:
        # 按标识排序，保证报告输出稳定
        for key in sorted(self._authors):
            yield self._authors[key]

    def authors(self) -> List[AuthorStats]:
        return list(self)

    def total(self, name: str = "全部作者") -> AuthorStats:
        """合并所有作者为一个汇总桶"""
        combined = AuthorStats(name=name)
        for author in self._authors.values():
            combined.total_added += author.total_added
            combined.total_deleted += author.total_deleted
            combined.total_ai_added += author.total_ai_added
            combined.total_ai_deleted += author.total_ai_deleted
            combined.fix_count += author.fix_count
            combined.fix_and_aig_count += author.fix_and_aig_count
        return combined


def _fold_into(author: AuthorStats, stats: CommitStats):
    author.total_added += stats.added_lines
    author.total_deleted += stats.deleted_lines
    author.total_ai_added += ai_lines(stats.added_lines, stats.aig_ratio)
    author.total_ai_deleted += ai_lines(stats.deleted_lines, stats.aig_ratio)

    if stats.is_fix:
        author.fix_count += 1
        if stats.aig_ratio > 0:
            author.fix_and_aig_count += 1


def aggregate(analyses: Iterable[CommitAnalysis]) -> StatsAccumulator:
    """将所有提交折叠进一个新的累加器"""
    accumulator = StatsAccumulator()
    for analysis in analyses:
        accumulator.add(analysis.record, analysis.stats)
    logger.info(f"📊 统计完成，共 {len(accumulator)} 位作者")
    return accumulator

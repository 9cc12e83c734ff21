# orchestrator.py
"""
[V5.0] 业务逻辑编排器
数据源 -> 切分/解析 -> 作者统计 -> 报告输出，单线程顺序执行。
"""
import logging
from typing import List, Optional

from context import RunContext
from models import CommitAnalysis
import log_parser
import report_builder
from stats_aggregator import StatsAccumulator, aggregate

from data_sources.factory import get_data_source

logger = logging.getLogger(__name__)


class StatsOrchestrator:
    """
    负责执行一次 AI 代码贡献统计的核心流程。
    """

    def __init__(self, context: RunContext):
        self.context = context
        self.global_config = context.global_config
        self.data_source = get_data_source(context)
        self.analyses: List[CommitAnalysis] = []
        self.accumulator: Optional[StatsAccumulator] = None

    def run(self) -> bool:
        """
        执行统计流程，返回是否成功。
        数据源失败时直接终止，不输出任何部分统计。
        """
        # --- 0. 验证数据源 ---
        if not self.data_source.validate():
            logger.error("❌ 数据源验证失败，终止运行。")
            return False

        # --- 1. 获取 git log 原始文本 ---
        raw_log = self.data_source.get_raw_log()
        if raw_log is None:
            logger.error("❌ 获取提交记录失败，终止运行。")
            return False

        # --- 2. 解析提交 ---
        self.analyses = log_parser.analyze_log(
            raw_log,
            self.context.shape,
            self.global_config.INCLUDE_FILE_EXTS,
            self.global_config.EXCLUDE_FILE_EXTS,
        )
        if not self.analyses:
            logger.warning("⚠️ 统计范围内未找到提交记录")

        # --- 3. 作者维度统计 ---
        self.accumulator = aggregate(self.analyses)

        # --- 4. 逐提交详情 ---
        if not self.context.quiet:
            for analysis in self.analyses:
                print(report_builder.format_commit_trace(analysis))

        # --- 5. 汇总报告 ---
        print(report_builder.generate_text_report(self.accumulator, self.context))

        # --- 6. HTML 报告 ---
        if self.context.html:
            html_content = report_builder.generate_html_report(
                self.analyses, self.accumulator, self.context
            )
            report_builder.save_html_report(html_content, self.context)

        return True

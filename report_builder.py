# report_builder.py
"""
[V5.0] 报告生成器
- format_commit_trace: 逐提交的详细输出
- generate_text_report: 终端汇总报告
- generate_html_report: Jinja2 模板渲染 HTML 报告
"""
import logging
import os
from datetime import datetime
from typing import List, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from config import GlobalConfig
from context import RunContext
from models import AuthorStats, CommitAnalysis, FileResult, HeaderShape
from stats_aggregator import StatsAccumulator, ai_lines

logger = logging.getLogger(__name__)

WIDTH = 80


def _format_file_result(result: FileResult) -> str:
    change = result.change
    if not result.counted:
        return f"    [跳过] {change.path} (不符合统计条件)"
    if change.is_binary:
        return f"    - {change.path} (二进制文件)"
    return f"    - {change.path} (添加: {change.added}, 删除: {change.deleted})"


def format_commit_trace(analysis: CommitAnalysis) -> str:
    """生成单个提交的详细信息 (对应 git log 中的一条提交)"""
    record = analysis.record
    stats = analysis.stats

    lines = [
        "",
        "提交详情:",
        f"  提交ID: {record.commit_id}",
        f"  作者: {record.author_name}",
    ]
    if record.author_email:
        lines.append(f"  邮箱: {record.author_email}")
    lines.append(f"  时间: {record.timestamp}")
    lines.append("  消息:")
    for message_line in record.message.split("\n"):
        if message_line.strip():
            lines.append(f"    {message_line}")

    lines.append(f"  AI贡献率: {stats.aig_ratio * 100:.2f}%")
    lines.append(f"  是否修复提交: {'是' if stats.is_fix else '否'}")
    lines.append("  变更文件:")
    for result in analysis.file_results:
        lines.append(_format_file_result(result))

    lines.extend(
        [
            "  本次提交总计:",
            f"    总添加行数: {stats.added_lines}",
            f"    总删除行数: {stats.deleted_lines}",
            f"    AI贡献添加行数: {ai_lines(stats.added_lines, stats.aig_ratio)}",
            f"    AI贡献删除行数: {ai_lines(stats.deleted_lines, stats.aig_ratio)}",
            f"  {'-' * WIDTH}",
        ]
    )
    return "\n".join(lines)


def _format_author_block(stats: AuthorStats, indent: str) -> List[str]:
    return [
        f"{indent}代码变更统计:",
        f"{indent}  总代码添加: {stats.total_added} 行",
        f"{indent}  总代码删除: {stats.total_deleted} 行",
        f"{indent}  AI贡献添加: {stats.total_ai_added} 行 ({stats.ai_added_percent:.2f}%)",
        f"{indent}  AI贡献删除: {stats.total_ai_deleted} 行 ({stats.ai_deleted_percent:.2f}%)",
        f"{indent}Bug修复统计:",
        f"{indent}  总修复提交: {stats.fix_count} 次",
        f"{indent}  AI参与修复: {stats.fix_and_aig_count} 次",
        f"{indent}  AI修复贡献率: {stats.ai_fix_percent:.2f}%",
    ]


def generate_text_report(accumulator: StatsAccumulator, context: RunContext) -> str:
    """
    生成统计结果汇总。
    person 模式输出单一汇总；repo 模式按作者逐个输出。
    """
    lines = [
        "",
        "=" * WIDTH,
        "统计结果汇总:",
        "-" * WIDTH,
        "  分析范围:",
    ]
    if context.shape is HeaderShape.NAME_ONLY:
        lines.append(f"    作者: {context.author or '全部'}")
    lines.append(f"    开始时间: {context.since}")
    lines.append(f"    结束时间: {context.until}")

    if context.shape is HeaderShape.NAME_ONLY:
        lines.append("")
        lines.extend(_format_author_block(accumulator.total(), "  "))
    else:
        lines.append("-" * WIDTH)
        if not len(accumulator):
            lines.append("  ⚠️  未找到提交记录")
        for stats in accumulator:
            lines.append("")
            lines.append(f"  开发者统计 ({stats.name}):")
            lines.append(f"    邮箱: {stats.email or '-'}")
            lines.extend(_format_author_block(stats, "    "))
            lines.append(f"    {'-' * WIDTH}")

    lines.append("=" * WIDTH)
    return "\n".join(lines)


def _get_css_styles(global_config: GlobalConfig) -> str:
    """读取 CSS 文件内容"""
    css_path = os.path.join(global_config.SCRIPT_BASE_PATH, "templates", "styles.css")
    try:
        with open(css_path, "r", encoding="utf-8") as f:
            return f.read()
    except FileNotFoundError:
        logger.error(f"❌ CSS 模板文件未找到: {css_path}")
        return "/* CSS 模板文件未找到 */"
    except OSError as e:
        logger.error(f"❌ 加载 CSS 模板失败: {e}")
        return f"/* 加载 CSS 模板失败: {e} */"


def generate_html_report(
    analyses: List[CommitAnalysis],
    accumulator: StatsAccumulator,
    context: RunContext,
) -> str:
    """使用 Jinja2 模板引擎生成 HTML 报告"""
    global_config = context.global_config
    templates_dir = os.path.join(global_config.SCRIPT_BASE_PATH, "templates")
    env = Environment(
        loader=FileSystemLoader(templates_dir),
        autoescape=select_autoescape(["html", "xml"]),
    )
    env.globals["ai_lines"] = ai_lines

    template_context = {
        "title": f"AI代码贡献统计 - {context.since} ~ {context.until}",
        "generation_time": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        "css_content": _get_css_styles(global_config),
        "mode": context.mode,
        "author_filter": context.author,
        "since": context.since,
        "until": context.until,
        "total": accumulator.total(),
        "authors": accumulator.authors(),
        "analyses": analyses,
    }

    try:
        template_name = "report.html.j2"
        template = env.get_template(template_name)
        logger.info(f"🎨 正在渲染 Jinja2 模板: {template_name}")
        return template.render(**template_context)
    except Exception as e:
        logger.error(f"❌ Jinja2 模板渲染失败: {e}", exc_info=True)
        return f"<h1>错误：模板渲染失败</h1><pre>{e}</pre>"


def save_html_report(html_content: str, context: RunContext) -> Optional[str]:
    """保存HTML报告到输出目录"""
    filename = f"{context.global_config.OUTPUT_FILENAME_PREFIX}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.html"
    full_path = os.path.join(context.output_dir, filename)

    try:
        os.makedirs(context.output_dir, exist_ok=True)
        with open(full_path, "w", encoding="utf-8") as f:
            f.write(html_content)
        logger.info(f"✅ HTML报告已保存: {full_path}")
        return full_path
    except OSError as e:
        logger.error(f"❌ 保存HTML报告失败 ({full_path}): {e}")
        return None

# cli.py
"""
[V5.0] 命令行界面 (Interface) 层
- person 模式：统计单个作者 (或全部作者汇总)，提交首行不含邮箱
- repo 模式：按作者邮箱分别统计整个仓库
"""
import argparse
import logging
import os
import sys
from typing import List, Optional, Tuple

from config import GlobalConfig
from context import RunContext
from models import HeaderShape
from orchestrator import StatsOrchestrator
import utils

logger = logging.getLogger(__name__)


def _add_common_arguments(parser: argparse.ArgumentParser):
    parser.add_argument(
        "-r",
        "--repo-path",
        type=str,
        default=".",
        help="指定要分析的 Git 仓库路径。\n(默认: 当前目录)",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="从文件读取已导出的 git log 输出，而不是调用 git。\n"
        "   ('-' 表示标准输入；格式须与对应模式的 --pretty 一致)",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="不输出逐提交的详细信息"
    )
    parser.add_argument(
        "--html", action="store_true", help="额外生成 HTML 报告 (Jinja2 模板)"
    )
    parser.add_argument(
        "-o",
        "--output-dir",
        type=str,
        default=None,
        help="HTML 报告的输出目录。\n(默认: 全局配置中的 OUTPUT_DIR)",
    )


def setup_parser() -> argparse.ArgumentParser:
    """
    负责所有 argparse 的定义。
    """
    parser = argparse.ArgumentParser(
        description="AI 代码贡献统计 (按 AIG 标记统计 AI 生成代码占比)",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="mode", metavar="{person,repo}")
    subparsers.required = True

    person_parser = subparsers.add_parser(
        HeaderShape.NAME_ONLY.value,
        help="统计指定作者 (不指定则为全部作者汇总)",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    person_parser.add_argument("author", nargs="?", default=None, help="作者过滤")
    person_parser.add_argument("since", nargs="?", default=None, help="起始日期 YYYY-MM-DD")
    person_parser.add_argument("until", nargs="?", default=None, help="结束日期 YYYY-MM-DD")
    _add_common_arguments(person_parser)

    repo_parser = subparsers.add_parser(
        HeaderShape.WITH_EMAIL.value,
        help="按作者邮箱分别统计整个仓库",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    repo_parser.add_argument("since", nargs="?", default=None, help="起始日期 YYYY-MM-DD")
    repo_parser.add_argument("until", nargs="?", default=None, help="结束日期 YYYY-MM-DD")
    _add_common_arguments(repo_parser)

    return parser


def resolve_date_range(
    since: Optional[str], until: Optional[str], date_format: str
) -> Tuple[str, str]:
    """
    校验日期参数并补全默认范围。
    日期格式错误时抛出 ValueError。
    """
    if since and not utils.is_valid_date(since, date_format):
        raise ValueError(f"错误：起始日期 '{since}' 格式不正确，请使用 'YYYY-MM-DD' 格式")
    if until and not utils.is_valid_date(until, date_format):
        raise ValueError(f"错误：结束日期 '{until}' 格式不正确，请使用 'YYYY-MM-DD' 格式")

    if bool(since) != bool(until):
        logger.warning("⚠️ 仅指定了一个日期，将使用默认的半月统计范围")
    return utils.get_default_date_range(since, until)


def build_context(args: argparse.Namespace, global_config: GlobalConfig) -> RunContext:
    """将命令行参数与全局配置合并为 RunContext"""
    since, until = resolve_date_range(args.since, args.until, global_config.DATE_FORMAT)
    output_dir = args.output_dir or global_config.output_dir_path()

    return RunContext(
        repo_path=os.path.abspath(args.repo_path),
        log_file=args.log_file,
        shape=HeaderShape(args.mode),
        author=getattr(args, "author", None) or None,
        since=since,
        until=until,
        output_dir=output_dir,
        html=args.html,
        quiet=args.quiet,
        global_config=global_config,
    )


def run_cli(argv: Optional[List[str]] = None):
    """
    主入口点。
    """
    parser = setup_parser()
    args = parser.parse_args(argv)
    global_config = GlobalConfig()

    try:
        run_context = build_context(args, global_config)
    except ValueError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)

    logger.info("=" * 50)
    logger.info("🚀 AIG 代码贡献统计启动...")
    logger.info(f"   [模式]: {run_context.mode}")
    logger.info(f"   [数据来源]: {run_context.log_file or run_context.repo_path}")
    if run_context.author:
        logger.info(f"   [作者]: {run_context.author}")
    logger.info(f"   [统计范围]: {run_context.since} ~ {run_context.until}")
    logger.info("=" * 50)

    orchestrator = StatsOrchestrator(run_context)
    if not orchestrator.run():
        sys.exit(1)
    logger.info("✅ 统计完成。")

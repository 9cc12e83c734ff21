# git_utils.py
import subprocess
import logging
from typing import List, Optional

from context import RunContext

logger = logging.getLogger(__name__)


def run_git_command(
    args: List[str], repo_path: str, context: str = "执行Git命令", timeout: int = 120
) -> Optional[str]:
    """
    统一的Git命令执行函数
    - 在 repo_path 下执行 git
    - 失败 (非零退出码、超时、系统错误) 时记录日志并返回 None
    """
    cmd = ["git"] + args
    try:
        logger.info(f"在 {repo_path} 中执行命令: {' '.join(cmd)}")
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
            cwd=repo_path,
        )
        if result.returncode != 0:
            logger.error(f"{context}失败: {result.stderr.strip()}")
            return None
        logger.info(f"{context}成功，输出 {len(result.stdout.splitlines())} 行")
        return result.stdout
    except subprocess.TimeoutExpired:
        logger.error(f"{context}超时 ({timeout}s)")
        return None
    except OSError as e:
        logger.error(f"{context}出错: {e}")
        return None


def is_git_repository(repo_path: str) -> bool:
    """检查指定路径是否为Git仓库"""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--is-inside-work-tree"],
            capture_output=True,
            text=True,
            cwd=repo_path,
        )
        return result.returncode == 0
    except OSError:
        return False


def build_git_log_args(context: RunContext) -> List[str]:
    """根据运行上下文组装 git log 参数"""
    global_config = context.global_config
    args = [
        "log",
        "--all",
        f"--since={context.since}",
        f"--until={context.until}",
        global_config.GIT_PRETTY_FORMATS[context.mode],
        "--numstat",
        global_config.GIT_DATE_FORMAT,
        "--no-merges",
    ]
    if context.author:
        args.append(f"--author={context.author}")
    return args


def get_git_log(context: RunContext) -> Optional[str]:
    """获取带 numstat 的 Git 提交历史"""
    return run_git_command(
        build_git_log_args(context),
        context.repo_path,
        "获取Git提交历史",
        timeout=context.global_config.GIT_TIMEOUT,
    )

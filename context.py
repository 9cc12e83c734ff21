# context.py
"""
[V5.0] 运行时配置的数据模型
"""
from dataclasses import dataclass
from typing import Optional

from config import GlobalConfig
from models import HeaderShape


@dataclass
class RunContext:
    """
    封装一次统计运行所需的所有配置。
    这是从 CLI 传递到 Orchestrator 的唯一对象。
    """

    # --- 数据来源 ---
    repo_path: str
    log_file: Optional[str]

    # --- 统计范围 ---
    shape: HeaderShape
    author: Optional[str]
    since: str
    until: str

    # --- 输出 ---
    output_dir: str
    html: bool
    quiet: bool

    # --- 全局配置 ---
    global_config: GlobalConfig

    @property
    def mode(self) -> str:
        return self.shape.value

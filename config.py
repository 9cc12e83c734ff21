# config.py
"""
[V5.0] 全局配置
- 启动时通过 python-dotenv 加载 .env
- 文件扩展名白名单/黑名单可由环境变量覆盖
"""
import logging
import os
from typing import List

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# --- 脚本基础路径 ---
SCRIPT_BASE_PATH = os.path.abspath(os.path.dirname(__file__))
env_path = os.path.join(SCRIPT_BASE_PATH, ".env")
if os.path.exists(env_path):
    load_dotenv(env_path)
    logger.debug(f"已从脚本目录加载 .env: {env_path}")
else:
    load_dotenv()

DEFAULT_INCLUDE_FILE_EXTS = ".html,.vue,.js,.ts,.tsx,.css,.scss,.cjs,.go,.php,.yaml,.proto"
DEFAULT_EXCLUDE_FILE_EXTS = ".pb.go,.pb.validate.go"


def split_exts(value: str) -> List[str]:
    """将逗号分隔的扩展名字符串转为列表，自动补全前导的点"""
    exts = []
    for item in value.split(","):
        item = item.strip()
        if not item:
            continue
        exts.append(item if item.startswith(".") else f".{item}")
    return exts


class GlobalConfig:
    """
    AIG 代码统计的全局应用配置。
    """

    # --- 路径配置 ---
    SCRIPT_BASE_PATH: str = SCRIPT_BASE_PATH
    OUTPUT_DIR: str = os.getenv("OUTPUT_DIR", "data")
    OUTPUT_FILENAME_PREFIX: str = "AIGStats"

    # --- 日志 ---
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # --- Git 命令 ---
    GIT_TIMEOUT: int = int(os.getenv("GIT_TIMEOUT", "120"))
    GIT_DATE_FORMAT: str = "--date=format:%Y-%m-%d %H:%M:%S"
    # 不同首行格式对应的 --pretty 格式
    GIT_PRETTY_FORMATS = {
        "person": "--pretty=format:%H '%an' %ad %s %b",
        "repo": "--pretty=format:%H '%an' %ae %ad %s %b",
    }

    # --- 日期参数格式 ---
    DATE_FORMAT: str = "%Y-%m-%d"

    # --- 文件过滤 ---
    INCLUDE_FILE_EXTS: List[str] = split_exts(
        os.getenv("AIG_INCLUDE_EXTS", DEFAULT_INCLUDE_FILE_EXTS)
    )
    EXCLUDE_FILE_EXTS: List[str] = split_exts(
        os.getenv("AIG_EXCLUDE_EXTS", DEFAULT_EXCLUDE_FILE_EXTS)
    )

    def output_dir_path(self) -> str:
        """相对路径按当前工作目录解析 (安装后脚本目录位于 site-packages)"""
        return os.path.abspath(self.OUTPUT_DIR)

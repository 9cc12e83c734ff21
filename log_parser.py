# log_parser.py
"""
[V5.0] git log 文本解析
- split_commits: 将 git log 原始输出切分为逐提交的文本块
- parse_commit_chunk: 解析提交首行 (ID、作者、邮箱、时间) 与完整提交消息
- parse_file_change / is_valid_file: 解析 numstat 行并按扩展名过滤
- extract_aig_ratio / is_fix_commit: 提取 AIG 比例与修复标记
"""
import logging
import os
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

from models import (
    CommitAnalysis,
    CommitRecord,
    CommitStats,
    FileChange,
    FileResult,
    HeaderShape,
)

logger = logging.getLogger(__name__)

# --- 正则表达式 (模块加载时编译一次) ---
COMMIT_START_PATTERN = re.compile(r"[0-9a-fA-F]{40}")
NUMBER_FIELD_PATTERN = re.compile(r"[0-9]+")
AIG_PATTERN = re.compile(r"AIG:\s*([0-9.]+)")

_ID = r"(?P<id>[0-9a-f]{40})"
_NAME = r"'(?P<name>[^']+)'"
_EMAIL = r"(?P<email>\S+)"
_TIME = r"(?P<time>\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2})"

_HEADER_PREFIXES = {
    HeaderShape.NAME_ONLY: f"^{_ID} {_NAME} {_TIME}",
    HeaderShape.WITH_EMAIL: f"^{_ID} {_NAME} {_EMAIL} {_TIME}",
}

IDENTITY_PATTERNS = {
    shape: re.compile(prefix + r"(?: (?P<message>.*))?$")
    for shape, prefix in _HEADER_PREFIXES.items()
}

# 修复提交：提交消息首部以 fix 开头 (不区分大小写)
FIX_PATTERNS = {
    shape: re.compile(prefix + r" (?P<fix>(?i:fix))")
    for shape, prefix in _HEADER_PREFIXES.items()
}

BINARY_MARKER = "-"


@dataclass(frozen=True)
class ParsedChunk:
    """提交块的解析中间结果"""

    record: CommitRecord
    identity_line: str
    file_lines: List[str]


def split_commits(output: str) -> List[str]:
    """
    按提交切分 git log 输出。
    首个字段为 40 位十六进制的行视为新提交的开始；空行被忽略。
    注意：提交消息中若有以 40 位十六进制串开头的行，同样会被当作提交边界。
    """
    commits: List[str] = []
    current: List[str] = []

    for line in output.split("\n"):
        if not line.strip():
            continue
        if is_commit_start(line):
            if current:
                commits.append("\n".join(current))
            current = [line]
        elif current:
            current.append(line)
        else:
            logger.debug(f"忽略首个提交之前的行: {line}")

    if current:
        commits.append("\n".join(current))
    return commits


def is_commit_start(line: str) -> bool:
    fields = line.split()
    return bool(fields) and bool(COMMIT_START_PATTERN.fullmatch(fields[0]))


def is_file_change_line(line: str) -> bool:
    """判断是否为 numstat 文件变更行：前两个字段均为数字或 "-" """
    fields = line.split()
    if len(fields) < 2:
        return False
    for value in fields[:2]:
        if value != BINARY_MARKER and not NUMBER_FIELD_PATTERN.fullmatch(value):
            return False
    return True


def _parse_count(value: str) -> Optional[int]:
    if value == BINARY_MARKER:
        return None
    return int(value)


def parse_file_change(line: str) -> Optional[FileChange]:
    """
    解析单行 numstat 记录。
    路径中的剩余字段不加分隔符拼接 (兼容 rename 的 "old => new" 写法)。
    """
    if not is_file_change_line(line):
        return None
    fields = line.split()
    if len(fields) < 3:
        return None
    return FileChange(
        added=_parse_count(fields[0]),
        deleted=_parse_count(fields[1]),
        path="".join(fields[2:]),
    )


def is_valid_file(
    path: str, include_exts: Iterable[str], exclude_exts: Iterable[str]
) -> bool:
    """检查文件是否计入统计：排除列表优先于包含列表"""
    for exclude_ext in exclude_exts:
        if path.endswith(exclude_ext):
            return False
    ext = os.path.splitext(path)[1]
    return ext in set(include_exts)


def extract_aig_ratio(message: str) -> float:
    """提取提交消息中的 AIG 比例，缺失、无法解析或为负数时返回 0"""
    # 负数形式 (AIG: -0.3) 不匹配正则，继续查找后续的 AIG 标记
    match = AIG_PATTERN.search(message)
    if not match:
        return 0.0
    try:
        ratio = float(match.group(1))
    except ValueError:
        return 0.0
    # 大于 1 的比例保持原样
    return ratio


def is_fix_commit(identity_line: str, shape: HeaderShape) -> bool:
    return bool(FIX_PATTERNS[shape].match(identity_line))


def parse_identity_line(line: str, shape: HeaderShape) -> Optional[re.Match]:
    return IDENTITY_PATTERNS[shape].match(line)


def parse_commit_chunk(chunk: str, shape: HeaderShape) -> Optional[ParsedChunk]:
    """
    解析单个提交块。
    首行不符合格式时返回 None；其后的行在遇到第一条 numstat 行之前均视为提交消息。
    """
    lines = chunk.split("\n")
    identity_line = lines[0]
    match = parse_identity_line(identity_line, shape)
    if not match:
        logger.warning(f"⚠️ 提交格式异常，已跳过: {identity_line[:80]}")
        return None

    message_lines = [match.group("message") or ""]
    file_lines: List[str] = []
    for idx in range(1, len(lines)):
        line = lines[idx]
        if not line.strip():
            continue
        if is_file_change_line(line):
            file_lines = [l for l in lines[idx:] if l.strip()]
            break
        message_lines.append(line)

    email = match.group("email") if shape is HeaderShape.WITH_EMAIL else None
    record = CommitRecord(
        commit_id=match.group("id"),
        author_name=match.group("name"),
        author_email=email,
        timestamp=match.group("time"),
        message="\n".join(message_lines),
    )
    return ParsedChunk(record=record, identity_line=identity_line, file_lines=file_lines)


def analyze_commit(
    chunk: str,
    shape: HeaderShape,
    include_exts: Iterable[str],
    exclude_exts: Iterable[str],
) -> Optional[CommitAnalysis]:
    """解析单个提交块并计算其 CommitStats"""
    parsed = parse_commit_chunk(chunk, shape)
    if parsed is None:
        return None

    stats = CommitStats(
        aig_ratio=extract_aig_ratio(parsed.record.message),
        is_fix=is_fix_commit(parsed.identity_line, shape),
    )
    file_results: List[FileResult] = []
    for line in parsed.file_lines:
        change = parse_file_change(line)
        if change is None:
            logger.debug(f"忽略无法解析的变更行: {line}")
            continue
        counted = is_valid_file(change.path, include_exts, exclude_exts)
        if counted:
            stats.added_lines += change.added_lines
            stats.deleted_lines += change.deleted_lines
        file_results.append(FileResult(change=change, counted=counted))

    return CommitAnalysis(record=parsed.record, stats=stats, file_results=file_results)


def analyze_log(
    output: str,
    shape: HeaderShape,
    include_exts: Iterable[str],
    exclude_exts: Iterable[str],
) -> List[CommitAnalysis]:
    """解析完整的 git log 输出，跳过格式异常的提交"""
    chunks = split_commits(output)
    logger.info(f"解析 {len(chunks)} 个提交块")
    analyses = []
    for chunk in chunks:
        analysis = analyze_commit(chunk, shape, include_exts, exclude_exts)
        if analysis:
            analyses.append(analysis)
    logger.info(f"成功解析 {len(analyses)} 个提交")
    return analyses

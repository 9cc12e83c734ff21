import logging
import sys
from datetime import date, datetime, timedelta
from typing import Optional, Tuple

DATE_FORMAT = "%Y-%m-%d"


def setup_logging(level: str = "INFO"):
    """配置全局日志"""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def is_valid_date(value: str, date_format: str = DATE_FORMAT) -> bool:
    """日期须严格符合格式 (含补零)，如 2024-1-5 视为非法"""
    try:
        parsed = datetime.strptime(value, date_format)
    except ValueError:
        return False
    return parsed.strftime(date_format) == value


def get_default_date_range(
    since: Optional[str],
    until: Optional[str],
    today: Optional[date] = None,
) -> Tuple[str, str]:
    """
    获取统计日期范围。
    since 和 until 都给出时原样返回；否则按半月周期计算：
    - 当前在上半月 (1-15 号)：统计上月 16 号到月底
    - 当前在下半月：统计本月 1 号到 15 号
    """
    if since and until:
        return since, until

    today = today or date.today()
    first_of_this_month = today.replace(day=1)

    if today.day <= 15:
        period_end = first_of_this_month - timedelta(days=1)
        period_start = period_end.replace(day=16)
    else:
        period_start = first_of_this_month
        period_end = today.replace(day=15)

    return period_start.strftime(DATE_FORMAT), period_end.strftime(DATE_FORMAT)

"""宽松的日期时间文本解析与显示格式化工具.

表单提交的日期往往格式不一(``3/7/2024``、``2024-03-07``、``March 7, 2024``、
``1:05 pm``、``tomorrow``),这里统一解析为本地无时区的 datetime,
并提供旧页面习惯的 ``g:i a`` 风格时间显示(``1:05 pm``).
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta
from typing import ClassVar

from pagekit.utils.structlog_config import get_system_logger


class TimeFormats:
    """时间格式常量."""

    DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
    DATE_FORMAT = "%Y-%m-%d"
    TIME_FORMAT = "%H:%M:%S"
    # format_clock_time 输出对应的解析格式
    CLOCK_TIME_FORMAT = "%I:%M %p"

    # 完整日期(可带时间)的候选格式,按顺序尝试
    DATE_INPUT_FORMATS: ClassVar[tuple[str, ...]] = (
        "%m/%d/%Y %I:%M %p",
        "%m/%d/%Y %I:%M%p",
        "%m/%d/%Y %H:%M:%S",
        "%m/%d/%Y %H:%M",
        "%m/%d/%Y",
        "%m/%d/%y",
        "%m-%d-%Y",
        "%Y/%m/%d %H:%M:%S",
        "%Y/%m/%d",
        "%Y-%m-%d %I:%M %p",
        "%d %B %Y",
        "%d %b %Y",
        "%B %d, %Y",
        "%B %d %Y",
        "%b %d, %Y",
        "%b %d %Y",
    )

    # 仅时间的候选格式,日期取当天
    TIME_INPUT_FORMATS: ClassVar[tuple[str, ...]] = (
        "%I:%M %p",
        "%I:%M%p",
        "%I %p",
        "%I%p",
        "%H:%M:%S",
        "%H:%M",
    )

    RELATIVE_DAYS: ClassVar[dict[str, int]] = {
        "today": 0,
        "tomorrow": 1,
        "yesterday": -1,
    }


_YEAR_DIRECTIVE_PATTERN = re.compile(r"%[YyG]")


class TimeUtils:
    """日期时间解析与格式化工具类."""

    @staticmethod
    def now() -> datetime:
        """获取当前本地时间(无时区)."""
        return datetime.now()

    @staticmethod
    def parse(value: str | date | datetime | None, now: datetime | None = None) -> datetime | None:
        """将任意日期时间文本解析为 datetime.

        Args:
            value: 待解析的文本、date 或 datetime.
            now: 解析相对日期与纯时间时使用的当前时间,默认取系统时间.

        Returns:
            解析得到的 datetime(去掉时区信息),空值或无法解析时返回 None.

        """
        if value is None:
            return None
        if isinstance(value, datetime):
            return value.replace(tzinfo=None)
        if isinstance(value, date):
            return datetime.combine(value, time.min)

        text = str(value).strip()
        if not text:
            return None
        current = now or TimeUtils.now()

        lowered = text.lower()
        if lowered == "now":
            return current.replace(microsecond=0)
        if lowered in TimeFormats.RELATIVE_DAYS:
            day = current.date() + timedelta(days=TimeFormats.RELATIVE_DAYS[lowered])
            return datetime.combine(day, time.min)

        iso_text = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
        try:
            return datetime.fromisoformat(iso_text).replace(tzinfo=None)
        except ValueError:
            pass

        for fmt in TimeFormats.DATE_INPUT_FORMATS:
            try:
                return datetime.strptime(text, fmt)
            except ValueError:
                continue

        for fmt in TimeFormats.TIME_INPUT_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
            except ValueError:
                continue
            return datetime.combine(current.date(), parsed.time())

        get_system_logger().debug("无法解析的日期时间文本", value=text)
        return None

    @staticmethod
    def parse_with_format(value: str, format_str: str, now: datetime | None = None) -> datetime | None:
        """按指定 strptime 格式严格解析.

        格式不含年份时补上当前年份,避免落到 1900 年.

        Args:
            value: 待解析的文本.
            format_str: strptime 格式.
            now: 补年份时使用的当前时间,默认取系统时间.

        Returns:
            解析得到的 datetime,空值或不匹配时返回 None.

        """
        text = value.strip()
        if not text or not format_str:
            return None
        if not _YEAR_DIRECTIVE_PATTERN.search(format_str):
            year = (now or TimeUtils.now()).year
            text = f"{text} {year}"
            format_str = f"{format_str} %Y"
        try:
            return datetime.strptime(text, format_str)
        except ValueError:
            return None

    @staticmethod
    def format_clock_time(dt: datetime | time) -> str:
        """格式化为 12 小时制的钟点时间,如 ``1:05 pm``.

        Args:
            dt: datetime 或 time 实例.

        Returns:
            小时不补零、am/pm 小写的时间字符串.

        """
        hour = dt.hour % 12 or 12
        suffix = "am" if dt.hour < 12 else "pm"
        return f"{hour}:{dt.minute:02d} {suffix}"

    @staticmethod
    def format_date(dt: datetime | date, format_str: str = TimeFormats.DATE_FORMAT) -> str:
        """按 strftime 格式显示日期,格式非法时回退到 ISO 日期."""
        try:
            return dt.strftime(format_str)
        except (ValueError, TypeError):
            return dt.strftime(TimeFormats.DATE_FORMAT)


time_utils = TimeUtils()


def parse_datetime_text(value: str | date | datetime | None, now: datetime | None = None) -> datetime | None:
    """模块级快捷方法,等价于 ``TimeUtils.parse``."""
    return TimeUtils.parse(value, now)


def format_clock_time(dt: datetime | time) -> str:
    """模块级快捷方法,等价于 ``TimeUtils.format_clock_time``."""
    return TimeUtils.format_clock_time(dt)


__all__ = [
    "TimeFormats",
    "TimeUtils",
    "format_clock_time",
    "parse_datetime_text",
    "time_utils",
]

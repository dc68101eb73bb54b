"""字段值按类型转换.

转换失败一律回退为默认值(0、None、空字符串),不会抛出异常.
配置误用(如把列表交给标量类型)通过 ``on_warning`` 回调或 structlog 警告报告.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from pagekit.constants import FieldType
from pagekit.utils.structlog_config import log_warning
from pagekit.utils.time_utils import TimeFormats, time_utils

WarningHandler = Callable[[str], None]

_LEADING_INT_PATTERN = re.compile(r"^\s*([+-]?\d+)")
_LEADING_FLOAT_PATTERN = re.compile(r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)")
# 千分位分组的数字,如 "1,234.50"
_GROUPED_NUMBER_PATTERN = re.compile(r"^\s*[+-]?\d{1,3}(?:,\d{3})+(?:\.\d*)?")

MAX_BIT = 31


def to_int(value: object) -> int:
    """按前导整数规则解析,如 ``"12abc"`` -> 12,无法解析时返回 0."""
    if value is None or isinstance(value, bool):
        return int(bool(value))
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, (list, tuple, Mapping)):
        return 1 if value else 0
    match = _LEADING_INT_PATTERN.match(str(value))
    return int(match.group(1)) if match else 0


def to_float(value: object) -> float:
    """按前导浮点数规则解析,无法解析时返回 0.0.

    带千分位分组的数字(``"1,234.50"``)先去掉分组逗号再解析.
    """
    if value is None or isinstance(value, bool):
        return float(bool(value))
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, (list, tuple, Mapping)):
        return 1.0 if value else 0.0
    text = str(value)
    grouped = _GROUPED_NUMBER_PATTERN.match(text)
    if grouped:
        text = grouped.group(0).replace(",", "")
    match = _LEADING_FLOAT_PATTERN.match(text)
    return float(match.group(1)) if match else 0.0


def round_half_up(value: float, places: int = 2) -> Decimal:
    """四舍五入(0.5 进位)到指定小数位."""
    exponent = Decimal(1).scaleb(-places)
    try:
        return Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return Decimal(0).quantize(exponent)


def _is_blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def convert_value(
    value: object,
    field_type: FieldType | str = FieldType.TEXT,
    *,
    date_format: str = "%m/%d/%Y",
    on_warning: WarningHandler | None = None,
) -> object:
    """将原始值转换为指定字段类型的值.

    Args:
        value: 原始值,通常来自请求数据或数据库记录.
        field_type: 目标字段类型,未知类型按 text 处理并发出警告.
        date_format: date/datetime 类型的显示格式(strftime 格式).
        on_warning: 诊断警告回调,缺省时写入 structlog 警告日志.

    Returns:
        转换后的值,见各类型规则.

    """

    def warn(message: str) -> None:
        if on_warning is not None:
            on_warning(message)
        else:
            log_warning(message, module="forms")

    resolved = FieldType.parse(field_type)
    if resolved is None:
        warn(f"未知字段类型 {field_type!r},按 text 处理")
        resolved = FieldType.TEXT

    if resolved is FieldType.ARRAY:
        if isinstance(value, (list, tuple)):
            items = list(value)
        elif value is None or value == "":
            items = []
        else:
            items = [value]
        return [str(item).strip() for item in items]

    if isinstance(value, (list, tuple, Mapping)):
        warn(f"{resolved.value} 类型的值不能是列表: {value!r}")
        return ""

    if resolved is FieldType.INT:
        return to_int(value)
    if resolved is FieldType.POSINT:
        number = to_int(value)
        return number if number >= 1 else None
    if resolved is FieldType.FLOAT:
        return to_float(value)
    if resolved is FieldType.FLOAT2:
        return f"{round_half_up(to_float(value), 2):.2f}"
    if resolved is FieldType.YEAR:
        number = to_int(value)
        return number if number > 0 else ""
    if resolved in (FieldType.DATE, FieldType.DATETIME, FieldType.TIME):
        return _convert_temporal(value, resolved, date_format)

    return "" if value is None else str(value).strip()


def _convert_temporal(value: object, field_type: FieldType, date_format: str) -> str:
    if _is_blank(value):
        return ""
    parsed = time_utils.parse(value)  # type: ignore[arg-type]
    if parsed is None:
        return ""
    if field_type is FieldType.TIME:
        return time_utils.format_clock_time(parsed)
    shown = time_utils.format_date(parsed, date_format or TimeFormats.DATE_FORMAT)
    if field_type is FieldType.DATETIME:
        return f"{shown} {time_utils.format_clock_time(parsed)}"
    return shown


def int_to_bit_list(value: object) -> list[int]:
    """将整数拆分为其包含的 2 的幂.

    Example:
        >>> int_to_bit_list(11)
        [1, 2, 8]

    """
    number = to_int(value)
    return [1 << bit for bit in range(MAX_BIT + 1) if number & (1 << bit)]


__all__ = [
    "WarningHandler",
    "convert_value",
    "int_to_bit_list",
    "round_half_up",
    "to_float",
    "to_int",
]

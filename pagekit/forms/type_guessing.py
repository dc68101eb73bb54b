"""按字段命名约定推断字段类型.

仅在 ``guess_field_types`` 开启时作为 ``FieldSpec.types`` 的替代使用.
命名不规范的字段可能被推断错,这只影响生成的 SQL 参数类型,不会报错.
"""

from __future__ import annotations

import re

from pagekit.constants import FieldType

_CAMEL_IS_PATTERN = re.compile(r"^is[A-Z]")

# (后缀, 类型),按顺序匹配
_SUFFIX_RULES: tuple[tuple[str, FieldType], ...] = (
    ("_id", FieldType.INT),
    ("_on", FieldType.DATE),
    ("_date", FieldType.DATE),
    ("_at", FieldType.DATETIME),
    ("_year", FieldType.YEAR),
)


def guess_field_type(name: str) -> FieldType:
    """根据字段名推断字段类型.

    Args:
        name: 字段名.

    Returns:
        推断出的 FieldType,无法推断时为 TEXT.

    Example:
        >>> guess_field_type("created_at")
        <FieldType.DATETIME: 'datetime'>

    """
    if name == "id":
        return FieldType.INT
    for suffix, field_type in _SUFFIX_RULES:
        if name.endswith(suffix):
            return field_type
    if name.startswith("year_"):
        return FieldType.YEAR
    if name.endswith("_time") or name.startswith("time_"):
        return FieldType.TIME
    if name.startswith(("is_", "num_")) or _CAMEL_IS_PATTERN.match(name):
        return FieldType.INT
    if name.lower() == "password":
        return FieldType.PASSWORD
    return FieldType.TEXT


__all__ = ["guess_field_type"]

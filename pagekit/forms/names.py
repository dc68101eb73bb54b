"""字段名称处理.

所有公开方法接收的字段名参数都在入口处经 ``normalize_field_names`` 统一为列表,
内部不再区分单个名称、逗号分隔字符串与列表三种写法.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

FieldNames = str | Iterable[str] | None

_ID_UNSAFE_PATTERN = re.compile(r"[^a-zA-Z0-9_\-]")

FIELD_NAME_PLACEHOLDER = "<!FIELD_NAME!>"
LINK_OPEN_PLACEHOLDER = "<!#"
LINK_CLOSE_PLACEHOLDER = "#>"


def normalize_field_names(names: FieldNames) -> list[str]:
    """将字段名参数统一为去除首尾空白的列表.

    Args:
        names: 单个字段名、逗号分隔的字段名字符串或字段名序列.

    Returns:
        字段名列表,空名称会被丢弃.

    Example:
        >>> normalize_field_names("name, email")
        ['name', 'email']

    """
    if names is None:
        return []
    items = names.split(",") if isinstance(names, str) else list(names)
    return [str(item).strip() for item in items if str(item).strip()]


def split_array_key(key: str) -> tuple[str, str]:
    """拆分 ``values[14]`` 形式的下标字段名.

    Args:
        key: 字段名,可能带有 ``[下标]`` 后缀.

    Returns:
        ``(字段名, 下标)``,不带下标时下标为空字符串.

    """
    if key.endswith("]") and "[" in key:
        field, _, index = key.partition("[")
        return field, index.rstrip("]")
    return key, ""


def sanitize_id(value: str) -> str:
    """将字符串收敛为可用作 HTML id 的字符,其余字符替换为 ``_``."""
    return _ID_UNSAFE_PATTERN.sub("_", value)


def humanize_field_name(name: str) -> str:
    """将字段名转换为便于阅读的文本,如 ``full_name`` -> ``Full name``."""
    text = name.replace("_", " ").strip()
    return text[:1].upper() + text[1:]


def filter_error_message(name: str, message: str) -> str:
    """替换错误消息中的占位符.

    - ``<!FIELD_NAME!>``: 替换为可读字段名
    - ``<!#``: 替换为指向字段 id 的 ``<a>`` 开始标签
    - ``#>``: 替换为 ``</a>``

    Example:
        >>> filter_error_message("full_name", "Enter your <!#<!FIELD_NAME!>#>.")
        'Enter your <a href="#full_name">Full name</a>.'

    """
    text = message.replace(FIELD_NAME_PLACEHOLDER, humanize_field_name(name))
    text = text.replace(LINK_OPEN_PLACEHOLDER, f'<a href="#{name}">')
    return text.replace(LINK_CLOSE_PLACEHOLDER, "</a>")


__all__ = [
    "FieldNames",
    "filter_error_message",
    "humanize_field_name",
    "normalize_field_names",
    "sanitize_id",
    "split_array_key",
]

"""表单值校验规则.

这些函数只判断,不记录错误;错误的记录由 ``FormContext`` 负责.
"""

from __future__ import annotations

import re
from typing import ClassVar

from pagekit.constants import ValidationRule


class ValidationPatterns:
    """校验用正则与特征串."""

    EMAIL_PATTERN = r"^[a-zA-Z0-9_%+=/'-]+(?:\.[a-zA-Z0-9_%+=/'-]+)*@(?:[a-zA-Z0-9](?:[a-zA-Z0-9-]*[a-zA-Z0-9])?\.)+[a-zA-Z]{2,}$"
    EMAIL_MAX_LENGTH = 254

    # 垃圾内容中常见的链接写法
    SPAM_MARKERS: ClassVar[tuple[str, ...]] = ("http://", "</a>", "[/url]")


_EMAIL_RE = re.compile(ValidationPatterns.EMAIL_PATTERN)


def is_valid_email(value: object) -> bool:
    """判断是否为合法的邮箱地址.

    Args:
        value: 待检查的值,非字符串一律视为不合法.

    Returns:
        合法返回 True.

    """
    if not isinstance(value, str) or not value or len(value) > ValidationPatterns.EMAIL_MAX_LENGTH:
        return False
    return _EMAIL_RE.match(value) is not None


def is_acceptable_password(value: object) -> bool:
    """密码长度不少于 5 且不在易猜密码黑名单中(忽略大小写)."""
    text = "" if value is None else str(value)
    if len(text) < ValidationRule.PASSWORD_MIN_LENGTH:
        return False
    return text.upper() not in ValidationRule.PASSWORD_DENYLIST


def is_spam_text(value: object) -> bool:
    """内容含有常见的垃圾链接特征时返回 True."""
    if value is None or isinstance(value, (list, tuple, dict)):
        return False
    text = str(value)
    return any(marker in text for marker in ValidationPatterns.SPAM_MARKERS)


def is_filled(value: object) -> bool:
    """值非空(None、空字符串与空集合视为未填写)."""
    if value is None:
        return False
    if isinstance(value, str):
        return value != ""
    if isinstance(value, (list, tuple, dict)):
        return len(value) > 0
    return str(value) != ""


__all__ = [
    "ValidationPatterns",
    "is_acceptable_password",
    "is_filled",
    "is_spam_text",
    "is_valid_email",
]

"""表单字段类型常量.

字段类型决定了值的读取转换方式、校验规则以及 SQL 参数的规范化方式.
"""

from __future__ import annotations

from enum import Enum
from typing import ClassVar


class FieldType(str, Enum):
    """表单字段类型."""

    TEXT = "text"
    INT = "int"
    POSINT = "posint"
    FLOAT = "float"
    FLOAT2 = "float2"
    DATE = "date"
    DATETIME = "datetime"
    YEAR = "year"
    TIME = "time"
    PASSWORD = "password"
    ARRAY = "array"
    EMAIL = "email"
    DEFINED = "defined"

    @classmethod
    def parse(cls, value: FieldType | str | None) -> FieldType | None:
        """将字符串解析为字段类型,无法识别时返回 None.

        Args:
            value: 字段类型或其字符串形式.

        Returns:
            对应的 FieldType,无法识别时返回 None.

        """
        if isinstance(value, FieldType):
            return value
        if not value:
            return None
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


class ValidationRule:
    """validate() 支持的校验规则."""

    TEXT = "text"
    INT = "int"
    EMAIL = "email"
    PASSWORD = "password"

    ALL: ClassVar[tuple[str, ...]] = (TEXT, INT, EMAIL, PASSWORD)

    # 最小密码长度与易猜密码黑名单(大写比较)
    PASSWORD_MIN_LENGTH = 5
    PASSWORD_DENYLIST: ClassVar[frozenset[str]] = frozenset(
        {
            "SECRET",
            "PASSWORD",
            "QWERTY",
            "12345",
            "123456",
            "1234567",
            "12345678",
            "123456789",
            "1234567890",
            "ABCDE",
        },
    )

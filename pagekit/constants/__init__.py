"""常量模块。

集中管理字段类型、校验规则、通知类别、SQL 方言与错误消息等常量。

主要常量：
- FieldType: 表单字段类型
- ValidationRule: validate() 的校验规则
- NoticeCategory: 通知横幅类别
- SqlDialect: 参数化语句的占位符方言
- ErrorMessages: 错误消息常量
"""

from .field_types import FieldType, ValidationRule
from .notice_categories import NoticeCategory
from .sql_dialects import SqlDialect
from .system_constants import ErrorCategory, ErrorMessages, ErrorSeverity, LogLevel

__all__ = [
    "ErrorCategory",
    "ErrorMessages",
    "ErrorSeverity",
    "FieldType",
    "LogLevel",
    "NoticeCategory",
    "SqlDialect",
    "ValidationRule",
]

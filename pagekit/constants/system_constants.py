"""pagekit - 系统常量定义.

统一管理错误分类、严重度与通用提示文案.
"""

from enum import Enum


class LogLevel(Enum):
    """日志级别枚举."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ErrorCategory(Enum):
    """错误分类枚举."""

    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    SYSTEM = "system"


class ErrorSeverity(Enum):
    """错误严重程度枚举."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorMessages:
    """错误消息常量."""

    INTERNAL_ERROR = "服务器内部错误"
    VALIDATION_ERROR = "数据验证失败"
    CONFIGURATION_ERROR = "配置错误"
    CONTEXT_UNAVAILABLE = "当前不在请求上下文中"
    UNKNOWN_PASSWORD_ENCODER = "不支持的密码编码器: {name}"

    # 页面默认文案(沿用旧模板的英文输出)
    SUBMISSION_ERRORS_PREFACE = "There were errors with your submission:"
    SUBMISSION_ERRORS_GENERIC = "There were errors with your submission."

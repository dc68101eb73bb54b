"""通知横幅类别常量.

定义通知消息的标准类别,避免魔法字符串.
"""

from __future__ import annotations

from typing import ClassVar


class NoticeCategory:
    """通知横幅类别常量.

    类别可作为通知的附加 class 写入会话,渲染 Bootstrap 提示框时
    会被映射为对应的 alert 样式类.
    """

    # 消息类别(对应Bootstrap alert类)
    SUCCESS = "success"     # 成功消息(绿色)
    ERROR = "error"         # 错误消息(红色)
    WARNING = "warning"     # 警告消息(黄色)
    INFO = "info"           # 信息消息(蓝色)
    DANGER = "danger"       # 危险消息(红色,同error)

    ALL: ClassVar[tuple[str, ...]] = (SUCCESS, ERROR, WARNING, INFO, DANGER)

    BOOTSTRAP_CLASSES: ClassVar[dict[str, str]] = {
        SUCCESS: "alert-success",
        ERROR: "alert-danger",
        WARNING: "alert-warning",
        INFO: "alert-info",
        DANGER: "alert-danger",
    }

    @classmethod
    def is_valid(cls, category: str) -> bool:
        """验证消息类别是否有效.

        Args:
            category: 消息类别字符串

        Returns:
            bool: 是否为有效类别

        """
        return cls.normalize(category) in cls.ALL

    @classmethod
    def get_bootstrap_class(cls, category: str) -> str:
        """获取Bootstrap CSS类名.

        未知类别原样返回,便于模板直接传入自定义 class.

        Args:
            category: 消息类别字符串

        Returns:
            str: Bootstrap CSS类名

        """
        normalized = cls.normalize(category)
        return cls.BOOTSTRAP_CLASSES.get(normalized, category)

    @classmethod
    def normalize(cls, category: str) -> str:
        """规范化消息类别.

        处理别名和大小写问题.

        Args:
            category: 消息类别字符串

        Returns:
            str: 规范化后的类别

        """
        normalized = category.lower().strip()

        # 处理常见别名
        aliases = {
            "err": cls.ERROR,
            "fail": cls.ERROR,
            "failed": cls.ERROR,
            "ok": cls.SUCCESS,
            "warn": cls.WARNING,
            "information": cls.INFO,
        }

        return aliases.get(normalized, normalized)

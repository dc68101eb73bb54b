"""基于会话的一次性通知横幅.

在一个请求中设置的通知写入会话,在之后的某次请求中被读取并清除,
常用于 "提交 -> 重定向 -> 显示结果" 的流程.
"""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import TYPE_CHECKING, Any

from markupsafe import Markup

from pagekit.constants import ErrorMessages, NoticeCategory
from pagekit.utils.structlog_config import log_debug

if TYPE_CHECKING:
    from pagekit.forms.registry import FormContext

CLASS_KEY_SUFFIX = "_class"
DEFAULT_APPEND_GLUE = "<br />\n"


class NoticeBanner:
    """会话通知横幅.

    创建时取出会话中待显示的通知(并从会话中移除),
    之后 ``set_notice`` 写入的内容会留给下一次请求显示.

    Attributes:
        session: 会话映射,通常为 ``flask.session``.
        key: 通知在会话中的键,class 使用 ``key + "_class"``.
        notice: 当前请求可显示的通知文本(HTML).
        notice_class: 通知附加的 class.
        form_context: 未显式传入时 ``set_notice_from_errors`` 使用的表单上下文.

    """

    def __init__(
        self,
        session: MutableMapping[str, Any],
        key: str = "pagekit_notice",
        *,
        form_context: FormContext | None = None,
    ) -> None:
        self.session = session
        self.key = key
        self.class_key = f"{key}{CLASS_KEY_SUFFIX}"
        self.form_context = form_context

        pending = session.pop(self.key, "") or ""
        pending_class = session.pop(self.class_key, "") or ""
        self.notice = str(pending)
        self.notice_class = str(pending_class) if self.notice else ""

    def set_notice(self, message: str, extra_class: str = "") -> None:
        """设置通知,留待之后的请求显示.

        Args:
            message: 通知内容(HTML).
            extra_class: 附加的 class,可以是 ``NoticeCategory`` 中的类别.

        """
        self.notice = message
        self.notice_class = extra_class
        self.session[self.key] = message
        self.session[self.class_key] = extra_class
        log_debug("设置通知", module="notice", extra_class=extra_class)

    def set_notice_from_errors(self, context: FormContext | None = None, extra_class: str = "") -> str:
        """用表单校验错误生成通知.

        Args:
            context: 表单上下文,缺省使用创建时绑定的上下文.
            extra_class: 附加的 class,会覆盖之前的设置.

        Returns:
            写入会话的通知文本.

        """
        form = context if context is not None else self.form_context
        message = form.get_error_message() if form is not None else ""
        if not message:
            message = ErrorMessages.SUBMISSION_ERRORS_GENERIC
        self.set_notice(message, extra_class)
        return message

    def append_notice(self, message: str, glue: str = DEFAULT_APPEND_GLUE) -> None:
        """在通知后追加内容,空白消息会被忽略."""
        if not message.strip():
            return
        self.notice = f"{self.notice}{glue}{message}"
        self.session[self.key] = self.notice

    def read_notice(self) -> str:
        """读取并清除通知,再次读取返回空字符串."""
        notice = self.notice
        self.notice = ""
        self.session.pop(self.key, None)
        self.session.pop(self.class_key, None)
        return notice

    @property
    def has_notice(self) -> bool:
        """当前是否有可显示的通知."""
        return self.notice != ""

    def render_notice(self, element_id: str = "") -> Markup:
        """读取通知并渲染为 ``<p class="notice">`` 段落,无通知时为空."""
        notice_class = self.notice_class
        notice = self.read_notice()
        if not notice:
            return Markup("")
        classes = f"notice {notice_class}" if notice_class else "notice"
        opening = Markup('\t\t<p class="{}" id="{}">').format(classes, element_id)
        return opening + Markup(notice) + Markup("</p>\n")

    def render_bootstrap_notice(self, with_close: bool = True, block: bool = False) -> Markup:
        """读取通知并渲染为 Bootstrap 提示框.

        Args:
            with_close: 是否输出关闭按钮.
            block: 是否追加 ``alert-block``.

        Returns:
            ``<div class="alert ...">`` 片段,无通知时为空.

        """
        notice_class = self.notice_class
        notice = self.read_notice()
        if not notice:
            return Markup("")
        classes = ["alert"]
        if notice_class:
            classes.append(NoticeCategory.get_bootstrap_class(notice_class))
        if block:
            classes.append("alert-block")
        html = Markup('<div class="{}">').format(" ".join(classes))
        if with_close:
            html += Markup('<a href="#" class="close" data-dismiss="alert">&times;</a>')
        return html + Markup(notice) + Markup("</div>")

    def __html__(self) -> str:
        return str(self.render_notice())


__all__ = ["NoticeBanner"]

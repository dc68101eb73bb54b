"""请求级页面辅助对象的存取.

每个请求在 ``flask.g`` 中持有独立的 ``FormContext``、``Striper`` 与 ``NoticeBanner``,
请求结束即随 ``g`` 一起丢弃.在请求之外访问会抛出 ``ContextUnavailableError``.
"""

from __future__ import annotations

from flask import current_app, g, has_request_context, request, session

from pagekit.core.exceptions import ContextUnavailableError
from pagekit.forms.registry import FormContext
from pagekit.settings import Settings
from pagekit.utils.logging.console import ConsoleLog
from pagekit.views.markup import FormMarkup
from pagekit.views.notice import NoticeBanner
from pagekit.views.striper import Striper

EXTENSION_KEY = "pagekit"


def get_settings() -> Settings:
    """获取当前应用注册的 Settings."""
    settings = current_app.extensions.get(EXTENSION_KEY)
    if settings is None:
        settings = Settings.load()
        current_app.extensions[EXTENSION_KEY] = settings
    return settings


def build_page_helpers() -> None:
    """为当前请求创建页面辅助对象并写入 ``g``."""
    settings = get_settings()
    console = ConsoleLog()
    form_context = FormContext.from_request(request, settings, console)
    g.page_console = console
    g.form_context = form_context
    g.form_markup = FormMarkup(form_context, settings)
    g.striper = Striper(settings.stripe_class)
    g.notice_banner = NoticeBanner(session, settings.notice_session_key, form_context=form_context)


def _require(attribute: str) -> object:
    if not has_request_context():
        raise ContextUnavailableError(extra={"helper": attribute})
    if attribute not in g:
        build_page_helpers()
    return g.get(attribute)


def get_form_context() -> FormContext:
    """获取当前请求的表单上下文."""
    return _require("form_context")  # type: ignore[return-value]


def get_form_markup() -> FormMarkup:
    """获取绑定当前表单上下文的控件渲染器."""
    return _require("form_markup")  # type: ignore[return-value]


def get_striper() -> Striper:
    """获取当前请求的行条纹对象."""
    return _require("striper")  # type: ignore[return-value]


def get_notice_banner() -> NoticeBanner:
    """获取当前请求的通知横幅."""
    return _require("notice_banner")  # type: ignore[return-value]


def get_console() -> ConsoleLog:
    """获取当前请求的调试控制台."""
    return _require("page_console")  # type: ignore[return-value]


__all__ = [
    "EXTENSION_KEY",
    "build_page_helpers",
    "get_console",
    "get_form_context",
    "get_form_markup",
    "get_notice_banner",
    "get_settings",
    "get_striper",
]

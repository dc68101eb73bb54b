"""pagekit - Flask 应用初始化.

为服务端渲染页面提供请求级的表单字段/校验注册表、表格行条纹与会话通知横幅.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any

from flask import Flask, has_request_context, request
from flask_bcrypt import Bcrypt
from markupsafe import Markup

from pagekit.forms.conversions import int_to_bit_list
from pagekit.settings import Settings
from pagekit.utils.logging.context_vars import request_id_var
from pagekit.utils.request_context import (
    EXTENSION_KEY,
    build_page_helpers,
    get_console,
    get_form_context,
    get_form_markup,
    get_notice_banner,
    get_striper,
)
from pagekit.utils.structlog_config import configure_structlog, log_info
from pagekit.views.markup import blank_value

REQUEST_ID_HEADER = "X-Request-ID"

# 初始化扩展
bcrypt = Bcrypt()


def create_app(*, settings: Settings | None = None) -> Flask:
    """创建Flask应用实例.

    Args:
        settings: 可选的配置对象,用于测试或多环境启动.

    Returns:
        Flask: Flask应用实例

    """
    resolved_settings = settings or Settings.load()
    app = Flask(__name__)

    # 配置应用
    configure_app(app, resolved_settings)

    # 初始化扩展
    bcrypt.init_app(app)

    # 配置统一日志系统
    configure_structlog(app)

    # 设置全局日志级别
    log_level_name = str(app.config.get("LOG_LEVEL", "INFO"))
    logging.getLogger().setLevel(getattr(logging, log_level_name, logging.INFO))

    # 注册页面辅助对象
    init_page_helpers(app, resolved_settings)

    # 配置模板过滤器
    configure_template_filters(app)

    log_info("pagekit 应用已创建", module="system", environment=resolved_settings.environment)
    return app


def configure_app(app: Flask, settings: Settings) -> None:
    """写入 Settings 提供的配置.

    Args:
        app: Flask 应用实例.
        settings: 统一配置对象,包含环境变量解析、默认值与校验结果.

    """
    app.config.from_mapping(settings.to_flask_config())
    app.extensions[EXTENSION_KEY] = settings


def init_page_helpers(app: Flask, settings: Settings) -> None:
    """注册请求钩子与模板上下文,为每个请求准备页面辅助对象.

    Args:
        app: Flask 应用实例.
        settings: 统一配置对象.

    """
    app.extensions[EXTENSION_KEY] = settings

    @app.before_request
    def prepare_page_helpers() -> None:
        """绑定请求 ID 并创建请求级辅助对象."""
        request_id_var.set(request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex)
        build_page_helpers()

    @app.context_processor
    def inject_page_helpers() -> dict[str, Any]:
        if not has_request_context():
            return {}
        striper = get_striper()
        return {
            "form": get_form_context(),
            "markup": get_form_markup(),
            "stripe": striper.stripe,
            "reset_stripe": striper.reset,
            "notice": get_notice_banner(),
            "console": get_console(),
        }


def configure_template_filters(app: Flask) -> None:
    """注册页面辅助相关的模板过滤器.

    Args:
        app: Flask 应用实例.

    """

    @app.template_filter("blank_value")
    def blank_value_filter(value: Any, blank: str = "&nbsp;", escape: bool = True) -> Markup:
        """空值占位过滤器."""
        return blank_value(value, blank, escape)

    @app.template_filter("bits")
    def bits_filter(value: Any) -> list[int]:
        """将整数拆分为 2 的幂列表."""
        return int_to_bit_list(value)


__all__ = ["bcrypt", "configure_app", "create_app", "init_page_helpers"]

"""请求级调试控制台.

记录表单辅助对象每次调用的参数与结果,按调用深度缩进,
可以 HTML 注释、``<pre>``、``<ul>`` 或 ``<ol>`` 的形式输出到页面上,
方便在模板中直接查看一次渲染过程中发生了什么.
"""

from __future__ import annotations

import functools
import inspect
from collections.abc import Callable, Mapping
from typing import Any, ClassVar, TypeVar

from markupsafe import Markup, escape

from pagekit.utils.structlog_config import log_debug

INDENT = "  "

F = TypeVar("F", bound=Callable[..., Any])


class ConsoleLog:
    """调试控制台.

    Attributes:
        entries: 已记录的消息(已转义,含缩进).
        indent: 当前缩进层级.

    Example:
        >>> console = ConsoleLog()
        >>> console.enter("validate", field_names=["age"])
        >>> console.leave(True)
        >>> console.get_log("~~", " | ")
        '<strong>validate(): </strong>args(field_names={0: age}) |   <strong>&lt;= </strong>true'

    """

    RENDER_MODES: ClassVar[tuple[str, ...]] = ("comment", "pre", "ul", "ol")

    def __init__(self) -> None:
        self.entries: list[str] = []
        self.indent = 0

    def log(self, message: str, indent_mod: int = 0, caller: str = "") -> None:
        """记录一条消息并调整缩进.

        Args:
            message: 消息内容,空字符串只调整缩进不记录.
            indent_mod: 记录后缩进的变化量,-1 表示这是一次调用的返回值.
            caller: 调用方名称,会以 ``name(): `` 前缀输出.

        """
        if message != "":
            prefix = f"{caller}(): " if caller else ""
            if indent_mod == -1:
                prefix = "&lt;= "
            elif message.startswith("-"):
                prefix = ""
            text = (f"<strong>{prefix}</strong>" if prefix else "") + str(escape(message))
            self.entries.append(INDENT * self.indent + text)
        if indent_mod != 0:
            self.indent = max(self.indent + indent_mod, 0)

    def enter(self, caller: str, **arguments: object) -> None:
        """记录一次调用的入参并增加缩进."""
        args = ", ".join(f"{name}={self.pp(value)}" for name, value in arguments.items())
        self.log(f"args({args})", 1, caller)

    def leave(self, result: object) -> None:
        """记录一次调用的返回值并减少缩进."""
        self.log(self.pp(result), -1)

    def warn(self, message: str) -> None:
        """记录一条诊断警告(不影响缩进)."""
        self.log(f"- warning: {message}")

    def clear(self) -> None:
        """清空所有消息."""
        self.entries = []
        self.indent = 0

    def get_log(self, wrapper: str = "\n<!-- ~~ -->\n", glue: str = "\n") -> str:
        """获取控制台内容.

        Args:
            wrapper: 包裹内容的模板,``~~`` 为内容占位符.
            glue: 消息之间的连接符.

        Returns:
            拼接后的文本.

        """
        pre, _, post = wrapper.partition("~~")
        return pre + glue.join(self.entries) + post

    def render(self, mode: str = "comment", css_class: str = "debug") -> Markup:
        """按指定模式渲染控制台内容.

        Args:
            mode: 渲染模式,可选 comment/pre/ul/ol,未知模式返回空内容.
            css_class: 外层标签的 class.

        Returns:
            可直接输出到模板的 Markup.

        """
        class_attr = f' class="{escape(css_class)}"' if css_class else ""
        if mode == "comment":
            return Markup(self.get_log())
        if mode == "pre":
            return Markup(self.get_log(f"<pre{class_attr}>~~</pre>"))
        if mode in ("ul", "ol"):
            items = self.get_log("~~", "@@").replace("@@", "</li>\n<li>")
            return Markup(f"<{mode}{class_attr}>\n<li>{items}</li>\n</{mode}>\n")
        return Markup("")

    @staticmethod
    def pp(expression: object) -> str:
        """将常见数据类型压缩为单行字符串.

        Args:
            expression: 任意值,布尔值输出 true/false,映射与序列输出 ``{k: v}``.

        Returns:
            压缩后的字符串.

        """
        if isinstance(expression, bool):
            return "true" if expression else "false"
        if expression is None:
            return ""
        if isinstance(expression, Mapping):
            items = expression.items()
        elif isinstance(expression, (list, tuple)):
            items = enumerate(expression)
        else:
            return str(expression)
        parts = []
        for key, value in items:
            if key == "":
                continue
            rendered = ("true" if value else "false") if isinstance(value, bool) else value
            parts.append(f"{key}: {rendered}")
        return "{" + ", ".join(parts) + "}"


def traced(func: F) -> F:
    """方法装饰器: 将入参与返回值写入所属对象的 ``console``,并记录 debug 日志.

    被装饰方法所属的对象需要提供 ``console`` 属性(ConsoleLog).
    """
    signature = inspect.signature(func)

    @functools.wraps(func)
    def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
        console: ConsoleLog = self.console
        bound = signature.bind(self, *args, **kwargs)
        arguments = dict(list(bound.arguments.items())[1:])
        console.enter(func.__name__, **arguments)
        try:
            result = func(self, *args, **kwargs)
        except Exception as exc:
            console.log(f"- exception: {exc}", -1)
            raise
        console.leave(result)
        log_debug("调用跟踪", module="console", method=func.__qualname__, result=ConsoleLog.pp(result))
        return result

    return wrapper  # type: ignore[return-value]


__all__ = ["ConsoleLog", "traced"]

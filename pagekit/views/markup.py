"""表单控件 HTML 片段.

``FormMarkup`` 绑定一个 ``FormContext``,根据字段当前值与校验状态输出
复选框、单选框、输入框、文本域与校验标记.所有输出均为 ``Markup``,
用户输入默认经过 HTML 转义,仅在 ``filter_*`` 选项关闭时原样输出.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar

from markupsafe import Markup, escape

from pagekit.constants import FieldType
from pagekit.forms.conversions import to_float, to_int
from pagekit.forms.names import sanitize_id, split_array_key
from pagekit.forms.registry import FormContext
from pagekit.forms.sql import stripslashes
from pagekit.settings import Settings
from pagekit.utils.logging.console import traced

DEFAULT_BLANK = "&nbsp;"
MAX_INPUT_SIZE = 255


@dataclass(frozen=True)
class ChoiceOptions:
    """复选框与单选框选项."""

    extra_attributes: str = ""
    filter_image: bool = False
    filter_label: bool = True
    filter_value: bool = True
    id: str = ""
    image: str = ""
    input_class: str = ""
    label_class: str = ""
    label_extra_attributes: str = ""
    label_style: str = ""
    no_label: bool = False
    rel: str = ""
    required: bool = False
    style: str = ""
    with_validation: bool = False


@dataclass(frozen=True)
class TextFieldOptions:
    """输入框选项,``type`` 为 HTML input 类型(另支持 ``float2`` 千分位显示)."""

    autofocus: bool = False
    extra_attributes: str = ""
    id: str = ""
    max: str = ""
    min: str = ""
    placeholder: str = ""
    rel: str = ""
    required: bool = False
    step: str = ""
    strip_slashes: bool = True
    style: str = ""
    tabindex: str = ""
    type: str = "text"
    with_class: str = ""
    with_validation: bool = True
    without_valid_class: bool = False


@dataclass(frozen=True)
class TextareaOptions:
    """文本域选项."""

    autofocus: bool = False
    extra_attributes: str = ""
    cols: int = 0
    id: str = ""
    placeholder: str = ""
    rel: str = ""
    required: bool = False
    strip_slashes: bool = True
    style: str = ""
    tabindex: str = ""
    with_class: str = ""
    with_validation: bool = True
    wrap: str = "virtual"
    zero_cols_class: str = "alt"


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _attr(name: str, value: Any) -> str:
    """非空时输出 `` name="value"``(值经过转义)."""
    text = _text(value)
    return f' {name}="{escape(text)}"' if text != "" else ""


def _loose_equals(form_value: Any, compare_value: Any) -> bool:
    if isinstance(form_value, int) and not isinstance(form_value, bool):
        return form_value == to_int(compare_value)
    return _text(form_value) == _text(compare_value)


def blank_value(value: Any, blank: str = DEFAULT_BLANK, escape: bool = True) -> Markup:
    """值为空时返回占位 HTML,否则返回值本身(默认转义).

    Args:
        value: 原始值.
        blank: 空值时输出的 HTML.
        escape: 是否对非空值做 HTML 转义.

    Returns:
        Markup 片段.

    """
    if value is None or _text(value) == "":
        return Markup(blank)
    return Markup.escape(value) if escape else Markup(_text(value))


class FormMarkup:
    """绑定表单上下文的控件渲染器.

    Attributes:
        context: 表单上下文.
        settings: 应用设置,决定错误图标与 CSS class.
        console: 调试控制台(与上下文共用).

    """

    SELECT_KINDS: ClassVar[dict[str, str]] = {
        "select": ' selected="selected"',
        "checkbox": ' checked="checked"',
        "radio": ' checked="checked"',
        "check": ' checked="checked"',
    }

    def __init__(self, context: FormContext, settings: Settings | None = None) -> None:
        self.context = context
        self.settings = settings or context.settings
        self.console = context.console

    blank_value = staticmethod(blank_value)

    @traced
    def validation_marker(self, name: str, wrap_tag: str = "") -> Markup:
        """字段无效时输出错误标记.

        配置了错误图标时输出图标(错误文本去标签后作为 alt/title),
        否则直接输出错误消息(不转义).

        Args:
            name: 字段名.
            wrap_tag: 包裹图标的标签名,如 ``span``.

        Returns:
            错误标记,字段有效时为空.

        """
        if self.context.is_valid(name):
            return Markup("")
        message = self.context.errors.get(name, "")
        error_class = self.settings.error_class
        icon = self.settings.validation_error_icon
        if not icon:
            if not error_class:
                return Markup(message)
            return Markup('<span class="{}">').format(error_class) + Markup(message) + Markup("</span>")

        title = escape(Markup(message).striptags())
        size = self.settings.validation_error_icon_size
        html = ""
        if wrap_tag:
            html += f'<{wrap_tag} title="{title}"{_attr("class", error_class)}>'
        html += f'<img src="{escape(icon)}" alt="{title}"'
        if not wrap_tag:
            html += f' title="{title}"{_attr("class", error_class)}'
        html += f' width="{size}" height="{size}" border="0" />'
        if wrap_tag:
            html += f"</{wrap_tag}>"
        return Markup(html + " ")

    @traced
    def checkbox(self, name: str, value: Any, label: str = "", options: ChoiceOptions | None = None) -> Markup:
        """输出复选框.

        名称以 ``[]`` 结尾时按列表值判断是否勾选.

        Args:
            name: 字段名,可带 ``[]`` 后缀.
            value: 复选框的值.
            label: 标签文本,为空时使用值.
            options: 其他选项.

        Returns:
            复选框与标签的 HTML.

        """
        opts = options or ChoiceOptions()
        use_list = name.endswith("[]")
        base_name = name[:-2] if use_list else name
        current = self.context.values.get(base_name)
        if use_list:
            checked = isinstance(current, list) and any(_loose_equals(item, value) for item in current)
        else:
            checked = base_name in self.context.values and _loose_equals(current, value)

        element_id = sanitize_id(opts.id or f"{base_name}_{_text(value)}")
        html = str(self.validation_marker(base_name)) if opts.with_validation else ""
        html += f'<input type="checkbox" name="{escape(name)}" id="{element_id}"'
        html += f' value="{escape(value) if opts.filter_value else _text(value)}"'
        if checked:
            html += ' checked="checked"'
        html += self._choice_attributes(opts)
        html += " />"
        html += self._choice_label(element_id, label or _text(value), opts, separator=" ")
        return Markup(html)

    @traced
    def radio(self, name: str, value: Any, label: str = "", options: ChoiceOptions | None = None) -> Markup:
        """输出单选框,字段当前值与 ``value`` 相同时带 ``checked``."""
        opts = options or ChoiceOptions()
        checked = name in self.context.values and _loose_equals(self.context.values[name], value)

        element_id = sanitize_id(opts.id or f"{name}_{_text(value)}")
        html = str(self.validation_marker(name)) if opts.with_validation else ""
        html += f'<input type="radio" name="{escape(name)}" id="{element_id}"'
        html += f' value="{escape(value) if opts.filter_value else _text(value)}"'
        if checked:
            html += " checked"
        html += self._choice_attributes(opts)
        html += " />"
        html += self._choice_label(element_id, label or _text(value), opts, separator="")
        return Markup(html)

    @traced
    def field(
        self,
        name: str,
        size: int = 0,
        max_size: int = MAX_INPUT_SIZE,
        options: TextFieldOptions | None = None,
    ) -> Markup | list[Any]:
        """输出输入框或字段值.

        - ``size > 0``: 输出 ``<input>``
        - ``type="hidden"``: 输出隐藏域
        - 其他情况: 输出转义后的字段值(列表值原样返回,密码不回显)

        Args:
            name: 字段名,支持 ``values[3]`` 下标形式.
            size: 输入框 size 属性.
            max_size: 最大长度,小于 255 时输出 maxlength.
            options: 其他选项.

        Returns:
            HTML 片段,或列表字段的原始列表.

        """
        opts = options or TextFieldOptions()
        value = self._field_value(name)
        is_password = opts.type == "password" or self.context.field_type_of(name) is FieldType.PASSWORD
        input_type = opts.type
        # 千分位只在显式 type="float2" 时输出,回传时由 to_float 去掉分组逗号
        if opts.type == "float2":
            if not isinstance(value, list) and _text(value) != "":
                value = f"{to_float(value):,.2f}"
            input_type = "text"

        if size > 0:
            return Markup(self._text_input(name, value, input_type, size, max_size, opts, is_password))
        if opts.type == "hidden":
            shown = ""
            if not is_password:
                shown = stripslashes(_text(value)) if opts.strip_slashes else _text(value)
            element_id = opts.id or sanitize_id(name)
            return Markup(
                f'<input type="hidden" name="{escape(name)}" id="{escape(element_id)}" value="{escape(shown)}" />',
            )
        if is_password:
            return Markup("")
        if isinstance(value, list):
            return value
        return escape(_text(value))

    @traced
    def textarea(self, name: str, rows: int = 3, options: TextareaOptions | None = None) -> Markup:
        """输出文本域.

        Args:
            name: 字段名.
            rows: 行数.
            options: 其他选项,``cols`` 为 0 时附加 ``zero_cols_class``.

        Returns:
            文本域 HTML.

        """
        opts = options or TextareaOptions()
        value = _text(self.context.values.get(name, ""))
        html = str(self.validation_marker(name)) if opts.with_validation else ""
        html += f'<textarea name="{escape(name)}" id="{escape(opts.id or name)}" rows="{rows}"'
        if opts.cols > 0:
            html += f' cols="{opts.cols}"'
        html += f' wrap="{escape(opts.wrap)}"'
        html += _attr("tabindex", opts.tabindex)
        if opts.autofocus:
            html += " autofocus"
        if opts.required:
            html += " required"
        html += _attr("placeholder", opts.placeholder)
        html += _attr("rel", opts.rel)
        html += _attr("style", opts.style)
        if opts.extra_attributes:
            html += f" {opts.extra_attributes}"

        classes = [opts.with_class] if opts.with_class else []
        if opts.cols == 0 and opts.zero_cols_class:
            classes.append(opts.zero_cols_class)
        classes.extend(self._state_classes(name, value, opts.with_validation, without_valid_class=False))
        if classes:
            html += _attr("class", " ".join(classes))

        shown = stripslashes(value) if opts.strip_slashes else value
        html += f">{escape(shown)}</textarea>"
        return Markup(html)

    @traced
    def select_if(self, name: str, compare_value: Any, kind: str) -> Markup:
        """字段值与 ``compare_value`` 相同时返回选中属性.

        Args:
            name: 字段名,支持 ``values[3]`` 下标形式.
            compare_value: 比较的值.
            kind: ``select`` 返回 selected,``checkbox``/``radio``/``check`` 返回 checked.

        Returns:
            选中属性或空字符串.

        """
        values = self.context.values
        field_name, index = split_array_key(name)
        if index:
            container = values.get(field_name)
            if isinstance(container, list) and index.isdigit() and int(index) < len(container):
                selected = _loose_equals(container[int(index)], compare_value)
            elif isinstance(container, Mapping) and index in container:
                selected = _loose_equals(container[index], compare_value)
            else:
                self.console.log(f"- {field_name} is not an array, not matching value")
                selected = False
        else:
            form_value = values.get(name, "")
            if isinstance(form_value, list):
                selected = any(_loose_equals(item, compare_value) for item in form_value)
            else:
                selected = _loose_equals(form_value, compare_value)
        if not selected:
            return Markup("")
        return Markup(self.SELECT_KINDS.get(kind, ""))

    # ------------------------------------------------------------------
    # 内部方法
    # ------------------------------------------------------------------
    def _field_value(self, name: str) -> Any:
        field_name, index = split_array_key(name)
        values = self.context.values
        if not index:
            return values.get(name, "")
        container = values.get(field_name)
        if isinstance(container, list) and index.isdigit() and int(index) < len(container):
            return container[int(index)]
        if isinstance(container, Mapping):
            return container.get(index, "")
        return ""

    def _text_input(
        self,
        name: str,
        value: Any,
        input_type: str,
        size: int,
        max_size: int,
        opts: TextFieldOptions,
        is_password: bool,
    ) -> str:
        html = str(self.validation_marker(name)) if opts.with_validation else ""
        element_id = opts.id or sanitize_id(name)
        shown = ""
        if not is_password:
            shown = stripslashes(_text(value)) if opts.strip_slashes else _text(value)
        html += f'<input type="{escape(input_type)}" name="{escape(name)}" id="{escape(element_id)}"'
        html += f' value="{escape(shown)}"'
        html += _attr("tabindex", opts.tabindex)
        if input_type in ("number", "range"):
            html += _attr("min", opts.min) + _attr("max", opts.max) + _attr("step", opts.step)
        html += f' size="{size}"'
        if 0 < max_size < MAX_INPUT_SIZE:
            html += f' maxlength="{max_size}"'
        html += _attr("rel", opts.rel)
        html += _attr("style", opts.style)
        if opts.extra_attributes:
            html += f" {opts.extra_attributes}"
        html += _attr("placeholder", opts.placeholder)
        if opts.autofocus:
            html += " autofocus"
        if opts.required:
            html += " required"

        classes = [opts.with_class] if opts.with_class else []
        classes.extend(self._state_classes(name, value, opts.with_validation, opts.without_valid_class))
        if classes:
            html += _attr("class", " ".join(classes))
        return html + " />"

    def _state_classes(self, name: str, value: Any, with_validation: bool, without_valid_class: bool) -> list[str]:
        """根据校验状态返回错误或有效 class(有效 class 仅在提交后出现)."""
        if not with_validation:
            return []
        if not self.context.is_valid(name):
            return [self.settings.error_class] if self.settings.error_class else []
        if (
            not without_valid_class
            and _text(value) != ""
            and self.context.submitted
            and self.settings.valid_class
        ):
            return [self.settings.valid_class]
        return []

    @staticmethod
    def _choice_attributes(opts: ChoiceOptions) -> str:
        html = " required" if opts.required else ""
        html += _attr("class", opts.input_class)
        html += _attr("rel", opts.rel)
        html += _attr("style", opts.style)
        if opts.extra_attributes:
            html += f" {opts.extra_attributes}"
        return html

    @staticmethod
    def _choice_label(element_id: str, label: str, opts: ChoiceOptions, separator: str) -> str:
        if opts.no_label or (label == "" and opts.image == ""):
            return ""
        html = f'{separator}<label for="{element_id}"'
        html += _attr("class", opts.label_class)
        html += _attr("style", opts.label_style)
        if opts.label_extra_attributes:
            html += f" {opts.label_extra_attributes}"
        image = str(escape(opts.image)) if opts.filter_image else opts.image
        text = str(escape(label)) if opts.filter_label else label
        return html + ">" + f"{image} {text}".strip() + "</label>"


__all__ = [
    "ChoiceOptions",
    "FormMarkup",
    "TextFieldOptions",
    "TextareaOptions",
    "blank_value",
]

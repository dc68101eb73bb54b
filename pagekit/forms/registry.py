"""字段与校验注册表.

``FormContext`` 在一次请求内保存表单字段的当前值与校验错误,
由 ``before_request`` 钩子创建并放入 ``flask.g``,请求结束即丢弃.

典型用法:
    >>> form = FormContext({"age": "17", "Submit": "Save"})
    >>> form.setup_fields("age", required="age", types={"age": "int"})
    >>> form.load()
    >>> form.validate("age", "You must be 18 or older.", rule="int", min_int=18)
    False
    >>> form.get_error_message()
    'There were errors with your submission:<br />&bull; You must be 18 or older.'
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pagekit.constants import FieldType, SqlDialect, ValidationRule
from pagekit.forms.conversions import convert_value, to_int
from pagekit.forms.names import FieldNames, filter_error_message, normalize_field_names, split_array_key
from pagekit.forms.sql import SqlParams, StatementBuilder, to_sql_literal, to_sql_value
from pagekit.forms.type_guessing import guess_field_type
from pagekit.forms.validators import is_acceptable_password, is_filled, is_spam_text, is_valid_email
from pagekit.settings import Settings
from pagekit.utils.logging.console import ConsoleLog, traced
from pagekit.utils.structlog_config import get_forms_logger

if TYPE_CHECKING:
    from flask import Request

# 生成 SQL 参数时 defined 类型使用的真/假值
DEFINED_TRUE_VALUE = 1
DEFINED_FALSE_VALUE = 0


@dataclass(frozen=True)
class FieldSpec:
    """表单字段声明.

    Attributes:
        fields: 表单包含的全部字段.
        required: ``validate_required`` 检查的必填字段.
        ignored: 生成 INSERT/UPDATE 语句时跳过的字段.
        types: 字段名到字段类型的显式映射.

    """

    fields: tuple[str, ...] = ()
    required: tuple[str, ...] = ()
    ignored: tuple[str, ...] = ()
    types: Mapping[str, FieldType] = field(default_factory=dict)

    @classmethod
    def from_names(
        cls,
        fields: FieldNames,
        required: FieldNames = None,
        ignored: FieldNames = None,
        types: Mapping[str, FieldType | str] | None = None,
        on_unknown_type: Callable[[str], None] | None = None,
    ) -> FieldSpec:
        """由任意形式的字段名参数构建声明.

        Args:
            fields: 全部字段名.
            required: 必填字段名.
            ignored: 不写入 SQL 的字段名.
            types: 字段类型映射,值可以是 FieldType 或其字符串形式.
            on_unknown_type: 遇到无法识别的类型时的回调,该字段类型被忽略.

        Returns:
            FieldSpec 实例.

        """
        resolved: dict[str, FieldType] = {}
        for name, type_name in (types or {}).items():
            field_type = FieldType.parse(type_name)
            if field_type is None:
                if on_unknown_type is not None:
                    on_unknown_type(f"字段 {name} 的类型 {type_name!r} 无法识别,已忽略")
                continue
            resolved[name.strip()] = field_type
        return cls(
            fields=tuple(normalize_field_names(fields)),
            required=tuple(normalize_field_names(required)),
            ignored=tuple(normalize_field_names(ignored)),
            types=resolved,
        )


class FormContext:
    """请求级字段/校验注册表.

    Attributes:
        request_data: 提交的请求数据(Mapping 或 Werkzeug MultiDict).
        settings: 应用设置.
        console: 调试控制台.
        spec: 当前的字段声明.

    """

    def __init__(
        self,
        request_data: Mapping[str, Any] | None = None,
        *,
        settings: Settings | None = None,
        console: ConsoleLog | None = None,
    ) -> None:
        self.request_data: Mapping[str, Any] = request_data if request_data is not None else {}
        self.settings = settings or Settings.load()
        self.console = console or ConsoleLog()
        self.spec = FieldSpec()
        self._values: dict[str, Any] = {}
        self._errors: dict[str, str] = {}

    @classmethod
    def from_request(
        cls,
        request: Request,
        settings: Settings | None = None,
        console: ConsoleLog | None = None,
    ) -> FormContext:
        """基于 Flask 请求的表单数据创建上下文."""
        return cls(request.form, settings=settings, console=console)

    def __str__(self) -> str:
        return self.get_error_message()

    # ------------------------------------------------------------------
    # 字段声明与取值
    # ------------------------------------------------------------------
    @traced
    def setup_fields(
        self,
        fields: FieldNames,
        required: FieldNames = None,
        ignored: FieldNames = None,
        types: Mapping[str, FieldType | str] | None = None,
    ) -> FieldSpec:
        """声明表单字段.

        Args:
            fields: 全部字段名(单个名称、逗号分隔字符串或列表).
            required: 必填字段名.
            ignored: 生成 SQL 时跳过的字段名.
            types: 字段类型映射.

        Returns:
            新的字段声明.

        """
        self.spec = FieldSpec.from_names(fields, required, ignored, types, on_unknown_type=self._warn)
        return self.spec

    @traced
    def load(
        self,
        names: FieldNames = None,
        *,
        source: Mapping[str, Any] | None = None,
        field_type: FieldType | str | None = None,
    ) -> dict[str, Any]:
        """从请求数据或指定记录读取字段值并按类型转换.

        Args:
            names: 字段名,None 时使用 ``setup_fields`` 声明的字段.
            source: 数据来源(如数据库行),None 时使用请求数据.
            field_type: 统一使用的字段类型,None 时按声明的类型,未声明为 text.

        Returns:
            本次读取的 ``字段名 -> 转换后的值``.

        """
        field_names = self.spec.fields if names is None else normalize_field_names(names)
        data = self._as_mapping(self.request_data if source is None else source)
        loaded: dict[str, Any] = {}
        for name in field_names:
            resolved_type = self._resolve_type(name, field_type)
            raw = self._read(data, name, resolved_type)
            loaded[name] = self._convert(raw, resolved_type)
        self._values.update(loaded)
        return loaded

    @traced
    def get(self, name: str) -> Any:
        """获取字段当前值,字段不存在时返回 None.

        ``values[3]`` 形式的名称会在列表或字典值中按下标查找.
        """
        return self._lookup(name.strip())

    @traced
    def set(self, names: FieldNames, value: Any = "", field_type: FieldType | str | None = None) -> None:
        """按类型转换后直接设置字段值."""
        for name in normalize_field_names(names):
            self._values[name] = self._convert(value, self._resolve_type(name, field_type))

    @traced
    def unset(self, names: FieldNames) -> None:
        """移除字段值."""
        for name in normalize_field_names(names):
            self._values.pop(name, None)

    @property
    def values(self) -> dict[str, Any]:
        """字段值副本."""
        return dict(self._values)

    @property
    def errors(self) -> dict[str, str]:
        """校验错误副本."""
        return dict(self._errors)

    @property
    def submitted(self) -> bool:
        """请求数据中是否包含提交按钮字段."""
        return self.settings.submit_field in self.request_data

    def field_type_of(self, name: str) -> FieldType:
        """获取字段类型: 显式声明优先,开启推断时按命名约定推断,否则为 text."""
        declared = self.spec.types.get(name)
        if declared is not None:
            return declared
        if self.settings.guess_field_types:
            return guess_field_type(name)
        return FieldType.TEXT

    # ------------------------------------------------------------------
    # 校验
    # ------------------------------------------------------------------
    @traced
    def validate(
        self,
        names: FieldNames,
        message: str,
        *,
        rule: str = ValidationRule.TEXT,
        min_int: int = 1,
    ) -> bool:
        """按规则校验字段,失败时记录错误消息.

        Args:
            names: 字段名.
            message: 校验失败时的错误消息,支持占位符.
            rule: 校验规则 text/int/email/password.
            min_int: int 规则的最小值.

        Returns:
            所有字段均通过时返回 True.

        """
        if rule not in ValidationRule.ALL:
            self._warn(f"未知的校验规则 {rule!r},按 text 处理")
            rule = ValidationRule.TEXT

        passed_all = True
        for name in normalize_field_names(names):
            value = self._lookup(name)
            if rule == ValidationRule.INT:
                passed = to_int(value) >= min_int
            elif rule == ValidationRule.EMAIL:
                passed = is_valid_email(value)
            elif rule == ValidationRule.PASSWORD:
                passed = is_acceptable_password(value)
            else:
                passed = is_filled(value)

            if not passed:
                passed_all = False
                # 同一字段只保留第一条失败消息
                if self.is_valid(name):
                    self._errors[name] = filter_error_message(name, message)
        return passed_all

    def validate_required(self, message: str) -> bool:
        """校验所有声明为必填的字段非空."""
        return self.validate(list(self.spec.required), message)

    @traced
    def validate_not_spam(self, names: FieldNames, message: str) -> bool:
        """为内容疑似垃圾信息的字段记录错误,全部通过时返回 True."""
        clean = True
        for name in normalize_field_names(names):
            if self.is_spam(name):
                clean = False
                self._errors[name] = filter_error_message(name, message)
        return clean

    @traced
    def is_spam(self, name: str) -> bool:
        """字段内容含有 ``http://``、``</a>`` 或 ``[/url]`` 时返回 True."""
        return is_spam_text(self._lookup(name))

    # ------------------------------------------------------------------
    # 错误
    # ------------------------------------------------------------------
    @traced
    def set_error(self, names: FieldNames, message: str) -> None:
        """设置(覆盖)字段的错误消息."""
        for name in normalize_field_names(names):
            self._errors[name] = filter_error_message(name, message)

    @traced
    def append_error(self, names: FieldNames, message: str, glue: str = " ") -> None:
        """在字段已有的错误消息后追加内容."""
        for name in normalize_field_names(names):
            text = filter_error_message(name, message)
            existing = self._errors.get(name, "")
            self._errors[name] = f"{existing}{glue}{text}" if existing else text

    @traced
    def is_valid(self, name: str) -> bool:
        """字段没有错误消息时返回 True."""
        return self._errors.get(name, "") == ""

    @traced
    def has_errors(self) -> bool:
        """是否存在任意非空的错误消息."""
        return any(message != "" for message in self._errors.values())

    @traced
    def get_errors(self, names: FieldNames = None) -> str:
        """以 ``has_errors_glue`` 拼接错误消息.

        Args:
            names: 需要的字段,None 时返回全部错误.

        Returns:
            拼接后的错误文本.

        """
        selected = list(self._errors) if names is None else normalize_field_names(names)
        messages = [self._errors[name] for name in selected if self._errors.get(name)]
        return self.settings.has_errors_glue.join(messages)

    @traced
    def get_error_message(self) -> str:
        """返回带前言的完整错误提示,无错误时返回空字符串."""
        if not self.has_errors():
            return ""
        glue = self.settings.has_errors_glue
        return f"{self.settings.has_errors_preface}{glue}{self.get_errors()}"

    # ------------------------------------------------------------------
    # SQL
    # ------------------------------------------------------------------
    def sql_value(self, name: str, field_type: FieldType | str | None = None) -> Any:
        """字段值规范化后的 SQL 参数值,None 表示 NULL."""
        return to_sql_value(
            self._values.get(name),
            field_type or self.field_type_of(name),
            DEFINED_TRUE_VALUE,
            DEFINED_FALSE_VALUE,
            self.settings.password_encoder,
            date_format=self.settings.date_format,
        )

    @traced
    def sql_literal(
        self,
        name: str,
        field_type: FieldType | str | None = None,
        true_value: object = "",
        false_value: object = "",
    ) -> str:
        """字段值的 SQL 字面量(旧代码兼容用)."""
        return to_sql_literal(
            self._values.get(name),
            field_type or self.field_type_of(name),
            true_value,
            false_value,
            self.settings.password_encoder,
            date_format=self.settings.date_format,
        )

    @traced
    def build_insert_statement(
        self,
        table: str,
        fields: FieldNames = None,
        *,
        dialect: str = SqlDialect.DEFAULT,
    ) -> tuple[str, SqlParams]:
        """生成参数化 INSERT 语句.

        Args:
            table: 表名.
            fields: 写入的字段,None 时使用声明的字段(未声明时使用已读取的字段)并排除忽略字段.
            dialect: 占位符方言.

        Returns:
            ``(sql, params)``.

        """
        columns = [(name, self.sql_value(name)) for name in self._statement_fields(fields)]
        return StatementBuilder(dialect).build_insert(table, columns)

    @traced
    def build_update_statement(
        self,
        table: str,
        key: str,
        key_value: Any,
        fields: FieldNames = None,
        *,
        dialect: str = SqlDialect.DEFAULT,
    ) -> tuple[str, SqlParams]:
        """生成按键更新的参数化 UPDATE 语句.

        Args:
            table: 表名.
            key: WHERE 条件的键列名.
            key_value: 键列的值,按键列的字段类型规范化.
            fields: 更新的字段,规则同 ``build_insert_statement``.
            dialect: 占位符方言.

        Returns:
            ``(sql, params)``.

        """
        columns = [(name, self.sql_value(name)) for name in self._statement_fields(fields)]
        normalized_key = to_sql_value(
            key_value,
            self.field_type_of(key),
            DEFINED_TRUE_VALUE,
            DEFINED_FALSE_VALUE,
            self.settings.password_encoder,
            date_format=self.settings.date_format,
        )
        return StatementBuilder(dialect).build_update(table, columns, key, normalized_key)

    # ------------------------------------------------------------------
    # 内部方法
    # ------------------------------------------------------------------
    def _warn(self, message: str) -> None:
        get_forms_logger().warning(message, module="forms")
        self.console.warn(message)

    def _convert(self, value: Any, field_type: FieldType) -> Any:
        return convert_value(
            value,
            field_type,
            date_format=self.settings.date_format,
            on_warning=self._warn,
        )

    def _resolve_type(self, name: str, field_type: FieldType | str | None) -> FieldType:
        if field_type is None:
            return self.spec.types.get(name, FieldType.TEXT)
        resolved = FieldType.parse(field_type)
        if resolved is None:
            self._warn(f"未知字段类型 {field_type!r},按 text 处理")
            return FieldType.TEXT
        return resolved

    def _statement_fields(self, fields: FieldNames) -> list[str]:
        if fields is not None:
            names = normalize_field_names(fields)
        elif self.spec.fields:
            names = list(self.spec.fields)
        else:
            names = list(self._values)
        return [name for name in names if name not in self.spec.ignored]

    def _lookup(self, name: str) -> Any:
        if name in self._values:
            return self._values[name]
        field_name, key = split_array_key(name)
        if not key:
            return None
        container = self._values.get(field_name)
        if isinstance(container, Mapping):
            return container.get(key)
        if isinstance(container, list) and key.isdigit() and int(key) < len(container):
            return container[int(key)]
        return None

    @staticmethod
    def _as_mapping(source: Any) -> Mapping[str, Any]:
        # SQLAlchemy Row 通过 _mapping 提供映射视图
        mapping = getattr(source, "_mapping", source)
        return mapping if isinstance(mapping, Mapping) else {}

    @staticmethod
    def _read(data: Mapping[str, Any], name: str, field_type: FieldType) -> Any:
        if field_type is FieldType.ARRAY and hasattr(data, "getlist"):
            values = data.getlist(name) or data.getlist(f"{name}[]")
            return list(values)
        if name in data:
            return data[name]
        if field_type is FieldType.ARRAY and f"{name}[]" in data:
            return data[f"{name}[]"]
        return ""


__all__ = ["FieldSpec", "FormContext"]

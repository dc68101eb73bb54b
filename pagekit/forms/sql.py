"""SQL 值规范化与参数化语句构建.

- ``to_sql_value``: 将表单值按字段类型规范化为可直接作为参数传给驱动的 Python 值
- ``to_sql_literal``: 旧页面使用的 SQL 字面量拼接(反斜杠转义),仅为兼容保留
- ``StatementBuilder``: 生成带占位符的 INSERT/UPDATE 语句,值始终走参数
"""

from __future__ import annotations

import hashlib
import re
from collections.abc import Callable, Sequence
from datetime import datetime
from typing import Any

from sqlalchemy import text
from sqlalchemy.sql.elements import TextClause

from pagekit.constants import ErrorMessages, FieldType, SqlDialect
from pagekit.core.exceptions import ConfigurationError
from pagekit.forms.conversions import round_half_up, to_float, to_int
from pagekit.utils.time_utils import TimeFormats, time_utils

PasswordEncoder = Callable[[str], str]
SqlParams = list[Any] | dict[str, Any]

NULL_LITERAL = "NULL"

_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)?$")
_SLASHED_PATTERN = re.compile(r"\\(.?)", re.DOTALL)

# 以不加引号的形式输出的类型
_UNQUOTED_TYPES = (FieldType.INT, FieldType.POSINT, FieldType.YEAR, FieldType.DEFINED)


def addslashes(value: str) -> str:
    """对反斜杠、单引号、双引号与 NUL 字符加反斜杠转义."""
    return (
        value.replace("\\", "\\\\")
        .replace("'", "\\'")
        .replace('"', '\\"')
        .replace("\x00", "\\0")
    )


def stripslashes(value: str) -> str:
    """``addslashes`` 的逆操作,``\\0`` 还原为 NUL 字符."""
    return _SLASHED_PATTERN.sub(lambda match: "\x00" if match.group(1) == "0" else match.group(1), value)


def _md5(value: str) -> str:
    return hashlib.md5(value.encode("utf-8")).hexdigest()  # noqa: S324 - 兼容旧数据的密码列


def _sha256(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def _bcrypt(value: str) -> str:
    # 延迟导入避免循环导入
    from pagekit import bcrypt

    return bcrypt.generate_password_hash(value).decode("utf-8")


PASSWORD_ENCODERS: dict[str, PasswordEncoder] = {
    "md5": _md5,
    "sha256": _sha256,
    "bcrypt": _bcrypt,
}


def resolve_password_encoder(encoder: str | PasswordEncoder | None) -> PasswordEncoder:
    """根据名称获取密码编码函数.

    Args:
        encoder: 编码器名称(md5/sha256/bcrypt)或可调用对象,None 时使用 md5.

    Returns:
        单向编码函数.

    Raises:
        ConfigurationError: 名称无法识别时抛出.

    """
    if encoder is None:
        return _md5
    if callable(encoder):
        return encoder
    name = encoder.strip().lower()
    try:
        return PASSWORD_ENCODERS[name]
    except KeyError as exc:
        raise ConfigurationError(
            ErrorMessages.UNKNOWN_PASSWORD_ENCODER.format(name=encoder),
            extra={"encoder": encoder},
        ) from exc


def _as_text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ",".join(str(item) for item in value)
    return str(value)


def _format_number(number: float) -> str:
    """数字转字符串,整数值不带小数部分(``3.0`` -> ``3``)."""
    if number == int(number):
        return str(int(number))
    return repr(number)


def _parse_temporal(raw: str, field_type: FieldType, date_format: str | None) -> datetime | None:
    # 表单中保存的是按 date_format 显示的值,先按该格式还原,失败再宽松解析
    if date_format and field_type is not FieldType.TIME:
        fmt = date_format
        if field_type is FieldType.DATETIME:
            fmt = f"{date_format} {TimeFormats.CLOCK_TIME_FORMAT}"
        parsed = time_utils.parse_with_format(raw, fmt)
        if parsed is not None:
            return parsed
    return time_utils.parse(raw)


def to_sql_value(
    value: object,
    field_type: FieldType | str = FieldType.TEXT,
    true_value: object = "",
    false_value: object = "",
    password_encoder: str | PasswordEncoder | None = None,
    *,
    date_format: str | None = None,
) -> object:
    """将值按字段类型规范化为 SQL 参数值.

    Args:
        value: 原始值.
        field_type: 字段类型,未知类型按 text 处理.
        true_value: defined 类型在值非空时返回的值.
        false_value: defined 类型在值为空时返回的值.
        password_encoder: password 类型使用的单向编码器.
        date_format: 表单显示日期所用的 strptime 格式,date/datetime 优先按它解析.

    Returns:
        规范化后的值,None 表示 SQL NULL.

    """
    resolved = FieldType.parse(field_type) or FieldType.TEXT
    raw = _as_text(value)

    if resolved is FieldType.DEFINED:
        return true_value if raw != "" else false_value
    if resolved is FieldType.POSINT:
        number = to_int(raw)
        return number if number >= 1 else None
    if resolved is FieldType.YEAR:
        number = to_int(raw)
        return number if number > 0 else None
    if raw == "":
        return None
    if resolved is FieldType.INT:
        return to_int(raw)
    if resolved is FieldType.FLOAT:
        return to_float(raw)
    if resolved is FieldType.FLOAT2:
        return float(round_half_up(to_float(raw), 2))
    if resolved in (FieldType.DATE, FieldType.DATETIME, FieldType.TIME):
        parsed = _parse_temporal(raw, resolved, date_format)
        if parsed is None:
            return None
        fmt = {
            FieldType.DATE: TimeFormats.DATE_FORMAT,
            FieldType.DATETIME: TimeFormats.DATETIME_FORMAT,
            FieldType.TIME: TimeFormats.TIME_FORMAT,
        }[resolved]
        return parsed.strftime(fmt)
    if resolved is FieldType.PASSWORD:
        return resolve_password_encoder(password_encoder)(raw)
    return raw.strip()


def to_sql_literal(
    value: object,
    field_type: FieldType | str = FieldType.TEXT,
    true_value: object = "",
    false_value: object = "",
    password_encoder: str | PasswordEncoder | None = None,
    *,
    date_format: str | None = None,
) -> str:
    """生成可直接拼接进 SQL 的字面量.

    仅为旧代码兼容保留,新代码应使用 ``StatementBuilder`` 的参数化语句.

    Example:
        >>> to_sql_literal("O'Brien")
        "'O\\\\'Brien'"
        >>> to_sql_literal(0, "posint")
        'NULL'

    """
    resolved = FieldType.parse(field_type) or FieldType.TEXT
    normalized = to_sql_value(value, resolved, true_value, false_value, password_encoder, date_format=date_format)
    if normalized is None:
        return NULL_LITERAL
    if resolved in _UNQUOTED_TYPES:
        return _as_text(normalized)
    if isinstance(normalized, float):
        return f"'{_format_number(normalized)}'"
    return f"'{addslashes(_as_text(normalized))}'"


class StatementBuilder:
    """参数化 INSERT/UPDATE 语句构建器.

    根据方言选择占位符风格:

    - mysql/postgresql/sqlserver: ``%s``,参数为 list
    - sqlite: ``?``,参数为 list
    - oracle: ``:param_N``,参数为 dict
    - named: ``:字段名``,参数为 dict,可交给 ``as_text_clause`` 用于 SQLAlchemy

    Example:
        >>> builder = StatementBuilder("mysql")
        >>> builder.build_insert("users", [("name", "Ann"), ("age", 30)])
        ('INSERT INTO users (name, age) VALUES (%s, %s)', ['Ann', 30])

    """

    def __init__(self, dialect: str = SqlDialect.DEFAULT) -> None:
        self.dialect = (dialect or SqlDialect.DEFAULT).lower()
        if self.dialect not in SqlDialect.ALL:
            raise ConfigurationError(
                f"不支持的 SQL 方言: {dialect}",
                extra={"dialect": dialect, "supported": SqlDialect.ALL},
            )
        self._param_counter = 0

    def build_insert(self, table: str, columns: Sequence[tuple[str, object]]) -> tuple[str, SqlParams]:
        """构建 INSERT 语句.

        Args:
            table: 表名.
            columns: ``(列名, 参数值)`` 序列.

        Returns:
            ``(sql, params)``.

        """
        self._reset()
        self._check_identifier(table)
        params = self._new_params()
        names: list[str] = []
        placeholders: list[str] = []
        for column, value in columns:
            self._check_identifier(column)
            names.append(column)
            placeholders.append(self._bind(params, column, value))
        sql = f"INSERT INTO {table} ({', '.join(names)}) VALUES ({', '.join(placeholders)})"
        return sql, params

    def build_update(
        self,
        table: str,
        columns: Sequence[tuple[str, object]],
        key: str,
        key_value: object,
    ) -> tuple[str, SqlParams]:
        """构建按主键更新的 UPDATE 语句.

        Args:
            table: 表名.
            columns: ``(列名, 参数值)`` 序列.
            key: WHERE 条件使用的键列名.
            key_value: 键列的值.

        Returns:
            ``(sql, params)``.

        """
        self._reset()
        self._check_identifier(table)
        self._check_identifier(key)
        params = self._new_params()
        assignments: list[str] = []
        for column, value in columns:
            self._check_identifier(column)
            assignments.append(f"{column}={self._bind(params, column, value)}")
        key_placeholder = self._bind(params, key, key_value)
        sql = f"UPDATE {table} SET {', '.join(assignments)} WHERE {key}={key_placeholder}"
        return sql, params

    def as_text_clause(self, sql: str) -> TextClause:
        """将 named 方言生成的语句包装为 SQLAlchemy ``text()``."""
        if self.dialect != SqlDialect.NAMED:
            raise ConfigurationError(
                "仅 named 方言的语句可转换为 SQLAlchemy text()",
                extra={"dialect": self.dialect},
            )
        return text(sql)

    def _reset(self) -> None:
        self._param_counter = 0

    def _new_params(self) -> SqlParams:
        return {} if SqlDialect.uses_dict_params(self.dialect) else []

    def _bind(self, params: SqlParams, column: str, value: object) -> str:
        if isinstance(params, list):
            params.append(value)
            return "?" if self.dialect == SqlDialect.SQLITE else "%s"

        if self.dialect == SqlDialect.ORACLE:
            name = f"param_{self._param_counter}"
            self._param_counter += 1
        else:
            name = column.replace(".", "_")
            while name in params:
                name = f"{name}_{self._param_counter}"
                self._param_counter += 1
        params[name] = value
        return f":{name}"

    @staticmethod
    def _check_identifier(name: str) -> None:
        if not _IDENTIFIER_PATTERN.match(name or ""):
            raise ConfigurationError(
                f"非法的 SQL 标识符: {name!r}",
                extra={"identifier": name},
            )


__all__ = [
    "NULL_LITERAL",
    "PASSWORD_ENCODERS",
    "PasswordEncoder",
    "SqlParams",
    "StatementBuilder",
    "addslashes",
    "resolve_password_encoder",
    "stripslashes",
    "to_sql_literal",
    "to_sql_value",
]

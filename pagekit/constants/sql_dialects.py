"""SQL 方言常量.

决定参数化语句使用的占位符风格与参数容器类型.
"""

from __future__ import annotations

from typing import ClassVar


class SqlDialect:
    """SQL 方言常量.

    - MySQL/PostgreSQL/SQL Server: ``%s`` 占位符,参数为 list
    - SQLite: ``?`` 占位符,参数为 list
    - Oracle: ``:param_N`` 占位符,参数为 dict
    - named: ``:字段名`` 占位符,参数为 dict(可直接交给 SQLAlchemy ``text()``)
    """

    MYSQL = "mysql"
    POSTGRESQL = "postgresql"
    SQLSERVER = "sqlserver"
    ORACLE = "oracle"
    SQLITE = "sqlite"
    NAMED = "named"

    ALL: ClassVar[tuple[str, ...]] = (MYSQL, POSTGRESQL, SQLSERVER, ORACLE, SQLITE, NAMED)
    DICT_PARAMS: ClassVar[tuple[str, ...]] = (ORACLE, NAMED)

    DEFAULT = MYSQL

    @classmethod
    def uses_dict_params(cls, dialect: str) -> bool:
        """判断方言是否使用命名参数字典."""
        return dialect in cls.DICT_PARAMS

"""表单字段/校验注册表.

主要内容:
- registry: FormContext 与 FieldSpec
- conversions: 按字段类型转换值
- names: 字段名规范化
- validators: 邮箱、密码与垃圾内容检查
- type_guessing: 按命名约定推断字段类型
- sql: SQL 值规范化与参数化语句
"""

from .registry import FieldSpec, FormContext

__all__ = ["FieldSpec", "FormContext"]

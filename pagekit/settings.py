"""pagekit - 统一配置读取与校验.

目标:
- 将环境变量读取、默认值、校验集中到单一入口,避免散落在各模块中重复解析.
- `create_app(settings=...)` 与各页面辅助对象只消费 Settings,不再直接读取环境变量.

说明:
- Settings 使用 `pydantic-settings` 的 `BaseSettings` 从环境变量与本地 `.env`(可选)读取配置.
- 生产环境默认更严格: 缺失 SECRET_KEY 会直接抛出 ValueError.
"""

from __future__ import annotations

import logging
import secrets
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pagekit.constants import ErrorMessages, LogLevel

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DOTENV_PATH = PROJECT_ROOT / ".env"

DEFAULT_ENVIRONMENT = "development"
APP_VERSION = "1.0.0"

DEFAULT_LOG_LEVEL = "INFO"

DEFAULT_NOTICE_SESSION_KEY = "pagekit_notice"
DEFAULT_STRIPE_CLASS = "alt"
DEFAULT_VALIDATION_ERROR_ICON = "/images/silk/error.png"
DEFAULT_VALIDATION_ERROR_ICON_SIZE = 16
DEFAULT_HAS_ERRORS_GLUE = "<br />&bull; "
DEFAULT_DATE_FORMAT = "%m/%d/%Y"
DEFAULT_PASSWORD_ENCODER = "md5"
DEFAULT_SUBMIT_FIELD = "Submit"

PASSWORD_ENCODERS = ("md5", "sha256", "bcrypt")

DEFAULT_BCRYPT_LOG_ROUNDS = 12
BCRYPT_LOG_ROUNDS_MIN = 4


class Settings(BaseSettings):
    """应用运行时设置集合."""

    model_config = SettingsConfigDict(
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
        # 注意: 不做 str_strip_whitespace,错误拼接符等文案允许首尾空白
    )

    environment: str = Field(default=DEFAULT_ENVIRONMENT, validation_alias="FLASK_ENV")
    debug: bool = Field(default=False, validation_alias="FLASK_DEBUG")

    app_name: str = Field(default="pagekit", validation_alias="APP_NAME")
    app_version: str = APP_VERSION

    secret_key: str = Field(default="", validation_alias="SECRET_KEY")

    log_level: str = Field(default=DEFAULT_LOG_LEVEL, validation_alias="LOG_LEVEL")
    enable_debug_log: bool = Field(default=False, validation_alias="ENABLE_DEBUG_LOG")

    # 通知横幅
    notice_session_key: str = Field(default=DEFAULT_NOTICE_SESSION_KEY, validation_alias="NOTICE_SESSION_KEY")

    # 行条纹
    stripe_class: str = Field(default=DEFAULT_STRIPE_CLASS, validation_alias="STRIPE_CLASS")

    # 表单校验与渲染
    error_class: str = Field(default="", validation_alias="FORM_ERROR_CLASS")
    valid_class: str = Field(default="", validation_alias="FORM_VALID_CLASS")
    validation_error_icon: str = Field(default=DEFAULT_VALIDATION_ERROR_ICON, validation_alias="VALIDATION_ERROR_ICON")
    validation_error_icon_size: int = Field(
        default=DEFAULT_VALIDATION_ERROR_ICON_SIZE,
        validation_alias="VALIDATION_ERROR_ICON_SIZE",
    )
    has_errors_preface: str = Field(
        default=ErrorMessages.SUBMISSION_ERRORS_PREFACE,
        validation_alias="HAS_ERRORS_PREFACE",
    )
    has_errors_glue: str = Field(default=DEFAULT_HAS_ERRORS_GLUE, validation_alias="HAS_ERRORS_GLUE")
    date_format: str = Field(default=DEFAULT_DATE_FORMAT, validation_alias="FORM_DATE_FORMAT")
    submit_field: str = Field(default=DEFAULT_SUBMIT_FIELD, validation_alias="FORM_SUBMIT_FIELD")

    # SQL 生成
    password_encoder: str = Field(default=DEFAULT_PASSWORD_ENCODER, validation_alias="PASSWORD_ENCODER")
    guess_field_types: bool = Field(default=False, validation_alias="GUESS_FIELD_TYPES")
    bcrypt_log_rounds: int = Field(default=DEFAULT_BCRYPT_LOG_ROUNDS, validation_alias="BCRYPT_LOG_ROUNDS")

    @field_validator("password_encoder", "log_level")
    @classmethod
    def _normalize_names(cls, value: str) -> str:
        return value.strip().lower()

    @property
    def is_production(self) -> bool:
        """当前是否为生产环境."""
        return self.environment.strip().lower() == "production"

    def to_flask_config(self) -> dict[str, object]:
        """转换为 Flask app.config 可写入的配置字典."""
        return {
            "ENV": self.environment,
            "DEBUG": self.debug,
            "APP_NAME": self.app_name,
            "APP_VERSION": self.app_version,
            "SECRET_KEY": self.secret_key,
            "LOG_LEVEL": self.log_level.upper(),
            "ENABLE_DEBUG_LOG": self.enable_debug_log,
            "NOTICE_SESSION_KEY": self.notice_session_key,
            "STRIPE_CLASS": self.stripe_class,
            "FORM_ERROR_CLASS": self.error_class,
            "FORM_VALID_CLASS": self.valid_class,
            "FORM_DATE_FORMAT": self.date_format,
            "FORM_SUBMIT_FIELD": self.submit_field,
            "PASSWORD_ENCODER": self.password_encoder,
            "GUESS_FIELD_TYPES": self.guess_field_types,
            "BCRYPT_LOG_ROUNDS": self.bcrypt_log_rounds,
        }

    @classmethod
    def load(cls) -> Settings:
        """从环境变量加载 Settings 并执行必要校验."""
        load_dotenv(dotenv_path=DOTENV_PATH if DOTENV_PATH.exists() else None, override=False)
        return cls()

    @model_validator(mode="after")
    def _apply_defaults_and_validate(self) -> Settings:
        environment_normalized = self.environment.strip().lower()

        debug = self._resolve_debug(environment_normalized)
        self._ensure_secret_key(debug)

        self._validate()
        return self

    def _resolve_debug(self, environment_normalized: str) -> bool:
        if "debug" in self.model_fields_set:
            return bool(self.debug)
        debug = environment_normalized != "production"
        object.__setattr__(self, "debug", debug)
        return debug

    def _ensure_secret_key(self, debug: bool) -> None:
        if self.secret_key:
            return
        if not debug:
            raise ValueError("SECRET_KEY environment variable must be set in production")
        object.__setattr__(self, "secret_key", secrets.token_urlsafe(32))
        logger.warning("⚠️  开发环境使用随机生成的SECRET_KEY,重启后会话中的通知将失效")

    def _validate(self) -> None:
        """执行跨字段校验,统一抛出可读的 ValueError."""
        errors: list[str] = []
        known_levels = {level.value for level in LogLevel}
        checks: list[tuple[str, bool]] = [
            ("NOTICE_SESSION_KEY 不能为空", not self.notice_session_key.strip()),
            ("VALIDATION_ERROR_ICON_SIZE 必须为正整数", self.validation_error_icon_size <= 0),
            ("FORM_DATE_FORMAT 不能为空", not self.date_format.strip()),
            (
                f"PASSWORD_ENCODER 仅支持 {'/'.join(PASSWORD_ENCODERS)}",
                self.password_encoder not in PASSWORD_ENCODERS,
            ),
            (f"BCRYPT_LOG_ROUNDS 不应小于 {BCRYPT_LOG_ROUNDS_MIN}", self.bcrypt_log_rounds < BCRYPT_LOG_ROUNDS_MIN),
            (f"LOG_LEVEL 仅支持 {'/'.join(sorted(known_levels))}", self.log_level.upper() not in known_levels),
        ]
        for message, condition in checks:
            if condition:
                errors.append(message)

        if errors:
            joined = "; ".join(errors)
            raise ValueError(f"配置校验失败: {joined}")

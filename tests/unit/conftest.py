# tests/unit/conftest.py
"""单元测试专用 fixtures.

提供隔离的环境变量、Settings 与表单上下文工厂.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

import pytest

from pagekit.forms.registry import FormContext
from pagekit.settings import Settings

PAGEKIT_ENV_VARS = (
    "NOTICE_SESSION_KEY",
    "STRIPE_CLASS",
    "FORM_ERROR_CLASS",
    "FORM_VALID_CLASS",
    "VALIDATION_ERROR_ICON",
    "VALIDATION_ERROR_ICON_SIZE",
    "HAS_ERRORS_PREFACE",
    "HAS_ERRORS_GLUE",
    "FORM_DATE_FORMAT",
    "FORM_SUBMIT_FIELD",
    "PASSWORD_ENCODER",
    "GUESS_FIELD_TYPES",
    "BCRYPT_LOG_ROUNDS",
    "ENABLE_DEBUG_LOG",
    "LOG_LEVEL",
    "FLASK_DEBUG",
)


@pytest.fixture(autouse=True)
def _unit_test_env(monkeypatch):
    """为 unit tests 强制注入隔离环境变量.

    避免开发者本机环境变量影响测试稳定性.
    """
    monkeypatch.setenv("FLASK_ENV", "testing")
    monkeypatch.setenv("SECRET_KEY", "test-secret-key")
    for name in PAGEKIT_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings() -> Settings:
    return Settings.load()


@pytest.fixture
def make_form(settings: Settings) -> Callable[..., FormContext]:
    """构建表单上下文,关键字参数用于覆盖 Settings 字段."""

    def _make(data: Mapping[str, Any] | None = None, **overrides: Any) -> FormContext:
        resolved = settings.model_copy(update=overrides) if overrides else settings
        return FormContext(data if data is not None else {}, settings=resolved)

    return _make

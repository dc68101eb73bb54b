import pytest

from pagekit.constants import ErrorCategory, ErrorMessages, ErrorSeverity
from pagekit.core.exceptions import AppError, ConfigurationError, ContextUnavailableError


@pytest.mark.unit
def test_app_error_uses_default_message() -> None:
    error = AppError()

    assert error.message == ErrorMessages.INTERNAL_ERROR
    assert error.recoverable is False


@pytest.mark.unit
def test_configuration_error_metadata() -> None:
    error = ConfigurationError(extra={"dialect": "db2"})

    assert error.message == ErrorMessages.CONFIGURATION_ERROR
    assert error.category is ErrorCategory.CONFIGURATION
    assert error.severity is ErrorSeverity.HIGH
    assert error.extra == {"dialect": "db2"}


@pytest.mark.unit
def test_context_unavailable_error_is_recoverable() -> None:
    error = ContextUnavailableError()

    assert str(error) == ErrorMessages.CONTEXT_UNAVAILABLE
    assert error.recoverable is True

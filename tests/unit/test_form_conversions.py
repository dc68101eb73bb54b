from decimal import Decimal

import pytest

from pagekit.constants import FieldType
from pagekit.forms.conversions import convert_value, int_to_bit_list, round_half_up, to_float, to_int


@pytest.mark.unit
def test_float2_rounds_half_up_to_two_places() -> None:
    assert convert_value("3.14159", FieldType.FLOAT2) == "3.14"
    assert convert_value("2.675", "float2") == "2.68"
    assert convert_value("", "float2") == "0.00"


@pytest.mark.unit
def test_posint_below_one_becomes_none() -> None:
    assert convert_value("", "posint") is None
    assert convert_value("0", "posint") is None
    assert convert_value("-3", "posint") is None
    assert convert_value("42abc", "posint") == 42


@pytest.mark.unit
def test_int_uses_leading_integer() -> None:
    assert convert_value("12abc", "int") == 12
    assert convert_value(" 7 ", "int") == 7
    assert convert_value("abc", "int") == 0


@pytest.mark.unit
def test_float_uses_leading_number() -> None:
    assert convert_value("3.5kg", "float") == 3.5
    assert convert_value("nope", "float") == 0.0


@pytest.mark.unit
def test_array_trims_items() -> None:
    assert convert_value(["a ", " b"], "array") == ["a", "b"]
    assert convert_value(" x ", "array") == ["x"]
    assert convert_value("", "array") == []
    assert convert_value(None, "array") == []


@pytest.mark.unit
def test_list_for_scalar_type_warns_and_blanks() -> None:
    warnings: list[str] = []

    result = convert_value(["a", "b"], "text", on_warning=warnings.append)

    assert result == ""
    assert len(warnings) == 1


@pytest.mark.unit
def test_unknown_type_warns_and_falls_back_to_text() -> None:
    warnings: list[str] = []

    assert convert_value("  hi  ", "bogus", on_warning=warnings.append) == "hi"
    assert warnings


@pytest.mark.unit
def test_date_uses_configured_display_format() -> None:
    assert convert_value("2024-03-07", "date") == "03/07/2024"
    assert convert_value("March 7, 2024", "date", date_format="%Y-%m-%d") == "2024-03-07"


@pytest.mark.unit
def test_unparsable_or_empty_date_is_blank() -> None:
    assert convert_value("", "date") == ""
    assert convert_value("not a date", "date") == ""


@pytest.mark.unit
def test_time_uses_twelve_hour_clock() -> None:
    assert convert_value("13:05", "time") == "1:05 pm"
    assert convert_value("00:30", "time") == "12:30 am"


@pytest.mark.unit
def test_datetime_combines_date_and_clock_time() -> None:
    assert convert_value("2024-03-07 13:05:00", "datetime") == "03/07/2024 1:05 pm"


@pytest.mark.unit
def test_year_positive_integer_or_blank() -> None:
    assert convert_value("2024", "year") == 2024
    assert convert_value("0", "year") == ""
    assert convert_value("abc", "year") == ""


@pytest.mark.unit
def test_text_is_trimmed() -> None:
    assert convert_value("  Ann  ") == "Ann"
    assert convert_value(None) == ""


@pytest.mark.unit
def test_int_to_bit_list() -> None:
    assert int_to_bit_list(11) == [1, 2, 8]
    assert int_to_bit_list(0) == []
    assert int_to_bit_list(2**31) == [2**31]


@pytest.mark.unit
def test_numeric_helpers() -> None:
    assert to_int(True) == 1
    assert to_int(None) == 0
    assert to_float("-.5") == -0.5
    assert round_half_up(0.125) == Decimal("0.13")


@pytest.mark.unit
def test_grouped_numbers_drop_thousands_separators() -> None:
    assert to_float("1,234.50") == 1234.5
    assert to_float("-12,345") == -12345.0
    assert to_float("12,34") == 12.0
    assert convert_value("1,234,567.891", "float2") == "1234567.89"

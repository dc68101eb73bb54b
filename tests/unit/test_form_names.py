import pytest

from pagekit.forms.names import (
    filter_error_message,
    humanize_field_name,
    normalize_field_names,
    sanitize_id,
    split_array_key,
)


@pytest.mark.unit
def test_normalize_accepts_single_csv_and_sequence() -> None:
    assert normalize_field_names("name") == ["name"]
    assert normalize_field_names("name, email ,") == ["name", "email"]
    assert normalize_field_names(["a ", " b", ""]) == ["a", "b"]
    assert normalize_field_names(("x",)) == ["x"]


@pytest.mark.unit
def test_normalize_empty_inputs() -> None:
    assert normalize_field_names(None) == []
    assert normalize_field_names("") == []


@pytest.mark.unit
def test_split_array_key() -> None:
    assert split_array_key("values[3]") == ("values", "3")
    assert split_array_key("plain") == ("plain", "")


@pytest.mark.unit
def test_sanitize_id_replaces_unsafe_characters() -> None:
    assert sanitize_id("user name[1]") == "user_name_1_"
    assert sanitize_id("ok-id_2") == "ok-id_2"


@pytest.mark.unit
def test_humanize_field_name() -> None:
    assert humanize_field_name("full_name") == "Full name"
    assert humanize_field_name("_email_") == "Email"


@pytest.mark.unit
def test_filter_error_message_placeholders() -> None:
    message = filter_error_message("full_name", "Enter your <!#<!FIELD_NAME!>#>.")

    assert message == 'Enter your <a href="#full_name">Full name</a>.'

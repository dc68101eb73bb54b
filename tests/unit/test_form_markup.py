import pytest

from pagekit.views.markup import ChoiceOptions, FormMarkup, TextareaOptions, TextFieldOptions, blank_value


@pytest.fixture
def markup_for(make_form):
    def _build(data=None, **overrides) -> FormMarkup:
        return FormMarkup(make_form(data, **overrides))

    return _build


@pytest.mark.unit
def test_checkbox_renders_label_and_state(markup_for) -> None:
    markup = markup_for()

    assert markup.checkbox("agree", "yes", "I agree") == (
        '<input type="checkbox" name="agree" id="agree_yes" value="yes" /> '
        '<label for="agree_yes">I agree</label>'
    )

    markup.context.set("agree", "yes")

    assert markup.checkbox("agree", "yes", "I agree") == (
        '<input type="checkbox" name="agree" id="agree_yes" value="yes" checked="checked" /> '
        '<label for="agree_yes">I agree</label>'
    )


@pytest.mark.unit
def test_checkbox_list_field(markup_for) -> None:
    markup = markup_for()
    markup.context.set("tags", ["a", "b"], field_type="array")

    html = markup.checkbox("tags[]", "b", options=ChoiceOptions(input_class="tag"))

    assert html == (
        '<input type="checkbox" name="tags[]" id="tags_b" value="b" checked="checked" class="tag" /> '
        '<label for="tags_b">b</label>'
    )
    assert 'checked' not in markup.checkbox("tags[]", "c")


@pytest.mark.unit
def test_checkbox_escapes_value_and_label(markup_for) -> None:
    html = markup_for().checkbox("pick", "<x>", "A & B", options=ChoiceOptions(id="pick1"))

    assert html == (
        '<input type="checkbox" name="pick" id="pick1" value="&lt;x&gt;" /> '
        '<label for="pick1">A &amp; B</label>'
    )


@pytest.mark.unit
def test_radio_compares_loosely(markup_for) -> None:
    markup = markup_for()
    markup.context.set("size", "2", field_type="int")

    assert markup.radio("size", "2", "Medium") == (
        '<input type="radio" name="size" id="size_2" value="2" checked /><label for="size_2">Medium</label>'
    )
    assert markup.radio("size", "3", options=ChoiceOptions(no_label=True)) == (
        '<input type="radio" name="size" id="size_3" value="3" />'
    )


@pytest.mark.unit
def test_field_renders_escaped_input(markup_for) -> None:
    markup = markup_for()
    markup.context.set("name", 'Ann & "Bo"')

    assert markup.field("name", 20, 40) == (
        '<input type="text" name="name" id="name" value="Ann &amp; &#34;Bo&#34;" size="20" maxlength="40" />'
    )


@pytest.mark.unit
def test_field_without_size_outputs_value(markup_for) -> None:
    markup = markup_for()
    markup.context.set("name", "Ann & Bo")
    markup.context.set("tags", ["a", "b"], field_type="array")

    assert markup.field("name") == "Ann &amp; Bo"
    assert markup.field("tags") == ["a", "b"]


@pytest.mark.unit
def test_field_does_not_echo_password(markup_for) -> None:
    markup = markup_for()
    markup.context.set("password", "s3cure!")

    assert markup.field("password", 10, options=TextFieldOptions(type="password")) == (
        '<input type="password" name="password" id="password" value="" size="10" />'
    )
    assert markup.field("password", options=TextFieldOptions(type="password")) == ""


@pytest.mark.unit
def test_hidden_field(markup_for) -> None:
    markup = markup_for()
    markup.context.set("token", "abc")

    assert markup.field("token", options=TextFieldOptions(type="hidden")) == (
        '<input type="hidden" name="token" id="token" value="abc" />'
    )


@pytest.mark.unit
def test_float2_field_uses_thousands_separator(markup_for) -> None:
    markup = markup_for()
    markup.context.set("price", "1234.5", field_type="float2")

    assert markup.field("price", options=TextFieldOptions(type="float2")) == "1,234.50"
    assert markup.field("price", 8, options=TextFieldOptions(type="float2")) == (
        '<input type="text" name="price" id="price" value="1,234.50" size="8" />'
    )


@pytest.mark.unit
def test_number_field_attributes(markup_for) -> None:
    markup = markup_for()
    markup.context.set("qty", "3", field_type="int")

    html = markup.field("qty", 4, options=TextFieldOptions(type="number", min="1", max="9", step="1", required=True))

    assert html == (
        '<input type="number" name="qty" id="qty" value="3" min="1" max="9" step="1" size="4" required />'
    )


@pytest.mark.unit
def test_field_with_error_class_and_text_marker(markup_for) -> None:
    markup = markup_for(error_class="err", validation_error_icon="")
    markup.context.set_error("email", "Bad <b>email</b>")

    assert markup.field("email", 30) == (
        '<span class="err">Bad <b>email</b></span>'
        '<input type="text" name="email" id="email" value="" size="30" class="err" />'
    )


@pytest.mark.unit
def test_valid_class_only_after_submit(markup_for) -> None:
    submitted = markup_for({"Submit": "Go", "name": "Ann"}, valid_class="ok")
    submitted.context.load("name")
    fresh = markup_for({"name": "Ann"}, valid_class="ok")
    fresh.context.load("name")

    assert submitted.field("name", 10) == '<input type="text" name="name" id="name" value="Ann" size="10" class="ok" />'
    assert fresh.field("name", 10) == '<input type="text" name="name" id="name" value="Ann" size="10" />'


@pytest.mark.unit
def test_validation_marker_with_icon(markup_for) -> None:
    markup = markup_for()
    markup.context.set_error("age", "Too <em>young</em>.")

    assert markup.validation_marker("age") == (
        '<img src="/images/silk/error.png" alt="Too young." title="Too young." '
        'width="16" height="16" border="0" /> '
    )
    assert markup.validation_marker("name") == ""


@pytest.mark.unit
def test_validation_marker_wrapped(markup_for) -> None:
    markup = markup_for(error_class="err")
    markup.context.set_error("age", "Too young.")

    assert markup.validation_marker("age", wrap_tag="span") == (
        '<span title="Too young." class="err">'
        '<img src="/images/silk/error.png" alt="Too young." width="16" height="16" border="0" /></span> '
    )


@pytest.mark.unit
def test_textarea(markup_for) -> None:
    markup = markup_for()
    markup.context.set("notes", "a < b")

    assert markup.textarea("notes") == (
        '<textarea name="notes" id="notes" rows="3" wrap="virtual" class="alt">a &lt; b</textarea>'
    )
    assert markup.textarea("notes", 5, TextareaOptions(cols=40, placeholder="Notes")) == (
        '<textarea name="notes" id="notes" rows="5" cols="40" wrap="virtual" placeholder="Notes">a &lt; b</textarea>'
    )


@pytest.mark.unit
def test_select_if(markup_for) -> None:
    markup = markup_for()
    markup.context.set("color", "red")
    markup.context.set("opts", ["x", "y"], field_type="array")

    assert markup.select_if("color", "red", "select") == ' selected="selected"'
    assert markup.select_if("color", "blue", "select") == ""
    assert markup.select_if("opts", "y", "check") == ' checked="checked"'
    assert markup.select_if("opts[1]", "y", "radio") == ' checked="checked"'
    assert markup.select_if("opts[0]", "y", "radio") == ""


@pytest.mark.unit
def test_select_if_on_scalar_with_index_logs(markup_for) -> None:
    markup = markup_for()
    markup.context.set("color", "red")

    assert markup.select_if("color[0]", "r", "select") == ""
    assert "color is not an array" in markup.console.get_log()


@pytest.mark.unit
def test_blank_value() -> None:
    assert blank_value(None) == "&nbsp;"
    assert blank_value("", "-") == "-"
    assert blank_value("<b>") == "&lt;b&gt;"
    assert blank_value("<b>", escape=False) == "<b>"
    assert blank_value(0) == "0"


@pytest.mark.unit
def test_declared_float2_input_keeps_plain_value(markup_for) -> None:
    markup = markup_for({"price": "1234.50"})
    markup.context.setup_fields("price", types={"price": "float2"})
    markup.context.load()

    assert markup.field("price", 10) == '<input type="text" name="price" id="price" value="1234.50" size="10" />'


@pytest.mark.unit
def test_grouped_float2_input_survives_resubmission(markup_for, make_form) -> None:
    markup = markup_for({"price": "1234.50"})
    markup.context.setup_fields("price", types={"price": "float2"})
    markup.context.load()
    html = markup.field("price", 10, options=TextFieldOptions(type="float2"))
    assert 'value="1,234.50"' in html

    resubmitted = make_form({"price": "1,234.50"})
    resubmitted.setup_fields("price", types={"price": "float2"})
    resubmitted.load()

    assert resubmitted.get("price") == "1234.50"
    assert resubmitted.sql_value("price") == 1234.5


@pytest.mark.unit
def test_hidden_field_does_not_echo_password(markup_for) -> None:
    markup = markup_for()
    markup.context.setup_fields("pin", types={"pin": "password"})
    markup.context.set("pin", "s3cure!")

    assert markup.field("pin", options=TextFieldOptions(type="hidden")) == (
        '<input type="hidden" name="pin" id="pin" value="" />'
    )

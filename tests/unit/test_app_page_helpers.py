import pytest
from flask import redirect, render_template_string

from pagekit import create_app
from pagekit.core.exceptions import ContextUnavailableError
from pagekit.utils.logging.context_vars import request_id_var
from pagekit.utils.request_context import get_form_context, get_notice_banner, get_striper

ROWS_TEMPLATE = "{% for row in rows %}<tr{{ stripe() }}>{% endfor %}"


@pytest.fixture
def app(settings):
    app = create_app(settings=settings)
    app.config["TESTING"] = True

    @app.route("/save", methods=["POST"])
    def save():
        form = get_form_context()
        form.setup_fields("name", required="name")
        form.load()
        if not form.validate_required("<!FIELD_NAME!> is required."):
            get_notice_banner().set_notice_from_errors(extra_class="error")
        else:
            get_notice_banner().set_notice("Saved!", "success")
        return redirect("/show")

    @app.route("/show")
    def show():
        return render_template_string("{{ notice }}")

    @app.route("/rows")
    def rows():
        return render_template_string(ROWS_TEMPLATE, rows=range(3))

    @app.route("/request-id")
    def request_id():
        return request_id_var.get() or ""

    return app


@pytest.mark.unit
def test_notice_is_shown_once_after_redirect(app) -> None:
    client = app.test_client()

    response = client.post("/save", data={"name": "", "Submit": "Save"})
    assert response.status_code == 302

    first = client.get("/show").get_data(as_text=True)
    second = client.get("/show").get_data(as_text=True)

    assert first == (
        '\t\t<p class="notice error" id="">'
        "There were errors with your submission:<br />&bull; Name is required.</p>\n"
    )
    assert second == ""


@pytest.mark.unit
def test_success_notice_after_valid_post(app) -> None:
    client = app.test_client()

    client.post("/save", data={"name": "Ann", "Submit": "Save"})

    assert client.get("/show").get_data(as_text=True) == '\t\t<p class="notice success" id="">Saved!</p>\n'


@pytest.mark.unit
def test_striper_state_is_per_request(app) -> None:
    client = app.test_client()

    first = client.get("/rows").get_data(as_text=True)
    second = client.get("/rows").get_data(as_text=True)

    assert first == '<tr><tr class="alt"><tr>'
    assert second == first


@pytest.mark.unit
def test_request_id_header_is_bound(app) -> None:
    client = app.test_client()

    assert client.get("/request-id", headers={"X-Request-ID": "abc123"}).get_data(as_text=True) == "abc123"
    assert len(client.get("/request-id").get_data(as_text=True)) == 32


@pytest.mark.unit
def test_helpers_are_built_lazily_without_hooks(app) -> None:
    with app.test_request_context("/", method="POST", data={"age": "20"}):
        form = get_form_context()
        form.load("age", field_type="int")

        assert form.get("age") == 20
        assert get_form_context() is form


@pytest.mark.unit
def test_template_context_and_filters(app) -> None:
    template = (
        "{{ '' | blank_value }}|{{ 11 | bits | join(',') }}|"
        "<tr{{ stripe() }}><tr{{ stripe() }}>{{ reset_stripe() or '' }}<tr{{ stripe() }}>"
    )
    with app.test_request_context("/"):
        app.preprocess_request()
        html = render_template_string(template)

    assert html == '&nbsp;|1,2,8|<tr><tr class="alt"><tr>'


@pytest.mark.unit
def test_markup_helper_in_template(app) -> None:
    with app.test_request_context("/", method="POST", data={"email": "ann@example.com", "Submit": "Go"}):
        app.preprocess_request()
        get_form_context().load("email")
        html = render_template_string("{{ markup.field('email', 20) }}")

    assert html == '<input type="text" name="email" id="email" value="ann@example.com" size="20" />'


@pytest.mark.unit
def test_helpers_outside_request_raise(app) -> None:
    with app.app_context(), pytest.raises(ContextUnavailableError) as exc_info:
        get_striper()

    assert exc_info.value.extra == {"helper": "striper"}


@pytest.mark.unit
def test_create_app_registers_settings(app, settings) -> None:
    assert app.extensions["pagekit"] is settings
    assert app.config["NOTICE_SESSION_KEY"] == settings.notice_session_key

import pytest

from pagekit.constants import NoticeCategory
from pagekit.views.notice import NoticeBanner


@pytest.mark.unit
def test_notice_survives_until_next_request() -> None:
    session: dict[str, str] = {}

    NoticeBanner(session).set_notice("Saved!", "success")

    assert session == {"pagekit_notice": "Saved!", "pagekit_notice_class": "success"}

    banner = NoticeBanner(session)

    assert banner.has_notice is True
    assert banner.notice_class == "success"
    assert session == {}


@pytest.mark.unit
def test_render_notice_is_one_shot() -> None:
    banner = NoticeBanner({"pagekit_notice": "Saved!", "pagekit_notice_class": "success"})

    assert banner.render_notice() == '\t\t<p class="notice success" id="">Saved!</p>\n'
    assert banner.render_notice() == ""
    assert banner.has_notice is False


@pytest.mark.unit
def test_render_notice_with_element_id_and_no_class() -> None:
    banner = NoticeBanner({"pagekit_notice": "Hi <b>there</b>"})

    assert banner.render_notice("flash") == '\t\t<p class="notice" id="flash">Hi <b>there</b></p>\n'


@pytest.mark.unit
def test_render_bootstrap_notice_maps_category() -> None:
    session = {"pagekit_notice": "Oops", "pagekit_notice_class": "error"}

    html = NoticeBanner(session).render_bootstrap_notice()

    assert html == (
        '<div class="alert alert-danger">'
        '<a href="#" class="close" data-dismiss="alert">&times;</a>Oops</div>'
    )


@pytest.mark.unit
def test_render_bootstrap_notice_block_without_close() -> None:
    banner = NoticeBanner({"pagekit_notice": "Heads up", "pagekit_notice_class": "custom"})

    html = banner.render_bootstrap_notice(with_close=False, block=True)

    assert html == '<div class="alert custom alert-block">Heads up</div>'


@pytest.mark.unit
def test_render_without_notice_is_empty() -> None:
    banner = NoticeBanner({})

    assert banner.render_notice() == ""
    assert banner.render_bootstrap_notice() == ""


@pytest.mark.unit
def test_orphan_class_is_discarded() -> None:
    session = {"pagekit_notice_class": "error"}

    banner = NoticeBanner(session)

    assert banner.notice_class == ""
    assert session == {}


@pytest.mark.unit
def test_append_notice_updates_session() -> None:
    session: dict[str, str] = {}
    banner = NoticeBanner(session)
    banner.set_notice("First")

    banner.append_notice("Second")
    banner.append_notice("   ")

    assert banner.notice == "First<br />\nSecond"
    assert session["pagekit_notice"] == "First<br />\nSecond"


@pytest.mark.unit
def test_read_notice_clears() -> None:
    session = {"flash": "Done", "flash_class": "info"}
    banner = NoticeBanner(session, "flash")

    assert banner.read_notice() == "Done"
    assert banner.read_notice() == ""


@pytest.mark.unit
def test_set_notice_from_errors_stores_composed_message(make_form) -> None:
    session: dict[str, str] = {}
    form = make_form()
    form.set_error("name", "Name is required.")
    banner = NoticeBanner(session, form_context=form)

    message = banner.set_notice_from_errors(extra_class="error")

    assert message == "There were errors with your submission:<br />&bull; Name is required."
    assert session["pagekit_notice"] == message
    assert session["pagekit_notice_class"] == "error"


@pytest.mark.unit
def test_set_notice_from_errors_without_errors_uses_generic_message(make_form) -> None:
    session: dict[str, str] = {}
    banner = NoticeBanner(session)

    message = banner.set_notice_from_errors(make_form())

    assert message == "There were errors with your submission."
    assert session["pagekit_notice"] == message


@pytest.mark.unit
def test_banner_renders_as_html_in_templates() -> None:
    banner = NoticeBanner({"pagekit_notice": "Saved!"})

    assert banner.__html__() == '\t\t<p class="notice" id="">Saved!</p>\n'


@pytest.mark.unit
def test_notice_category_aliases() -> None:
    assert NoticeCategory.is_valid("OK") is True
    assert NoticeCategory.get_bootstrap_class("warn") == "alert-warning"
    assert NoticeCategory.is_valid("custom") is False

import pytest

from pagekit.views.striper import Striper


@pytest.mark.unit
def test_stripe_alternates_starting_unstriped() -> None:
    striper = Striper()

    assert striper.stripe() == ""
    assert striper.stripe() == ' class="alt"'
    assert striper.stripe() == ""
    assert striper.stripe() == ' class="alt"'


@pytest.mark.unit
def test_stripe_always_appends_extra_class() -> None:
    striper = Striper()

    assert striper.stripe("row") == ' class="row"'
    assert striper.stripe("row") == ' class="alt row"'


@pytest.mark.unit
def test_reset_forces_next_row_unstriped() -> None:
    striper = Striper()
    striper.stripe()

    striper.reset()

    assert striper.stripe() == ""


@pytest.mark.unit
def test_custom_stripe_class() -> None:
    striper = Striper(stripe_class="odd")
    striper.stripe()

    assert striper.stripe() == ' class="odd"'


@pytest.mark.unit
def test_reset_stripe_is_deprecated_alias() -> None:
    striper = Striper()
    striper.stripe()

    with pytest.warns(DeprecationWarning):
        striper.reset_stripe()

    assert striper.striped is False

"""Tests for the subtitle language catalogue."""

import pytest

from msub.core.languages import (
    BASE,
    CONVERSION,
    TRANSLATION,
    display_name,
    get_language,
    is_valid_language,
    parse_language_list,
    validate_language,
)


@pytest.mark.parametrize(
    "code,mode",
    [("zh-tw", BASE), ("zh-cn", CONVERSION), ("en", TRANSLATION), ("fr", TRANSLATION)],
)
def test_modes(code, mode):
    assert get_language(code).mode == mode


def test_conversion_uses_tw2s():
    assert get_language("zh-cn").converter == "tw2s"


def test_needs_translation():
    assert get_language("en").needs_translation
    assert not get_language("zh-cn").needs_translation


def test_validate_unknown():
    with pytest.raises(ValueError, match="msub languages"):
        validate_language("klingon")


def test_display_name_falls_back_to_code():
    assert display_name("en") == "English"
    assert display_name("xx") == "xx"


def test_is_valid_language():
    assert is_valid_language("ja")
    assert not is_valid_language("ZH")


def test_parse_language_list():
    assert parse_language_list("zh-tw, EN,en ,fr") == ["zh-tw", "en", "fr"]


def test_parse_language_list_rejects_unknown():
    with pytest.raises(ValueError):
        parse_language_list("zh-tw,xx")

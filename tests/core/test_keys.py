from __future__ import annotations

import pytest

from fzq.core.keys import KeyOptions, check_chars, derive_key, skip_chars, skip_fields


@pytest.mark.parametrize(
    "text,count,expected",
    [
        ("asdf test text 1", 1, "test text 1"),
        ("asdf test text 1", 2, "text 1"),
        ("a\tb c", 1, "b c"),
        ("a  b", 1, " b"),
        ("  lead trail", 1, "trail"),
        ("one two", 2, ""),
        ("one ", 1, ""),
        ("one", 1, ""),
        ("", 3, ""),
        ("あいうえお テスト テキスト １", 1, "テスト テキスト １"),
    ],
)
def test_skip_fields(text: str, count: int, expected: str) -> None:
    assert skip_fields(text, count) == expected


def test_skip_fields_full_width_space_is_not_a_separator() -> None:
    assert skip_fields("ははは　asdf 1", 1) == "1"


@pytest.mark.parametrize(
    "text,count,expected",
    [
        ("asdfg test text 1", 5, " test text 1"),
        ("abc", 0, "abc"),
        ("abc", 3, ""),
        ("abc", 4, "abc"),
        ("", 2, ""),
        ("あいうえお　テスト", 6, "テスト"),
    ],
)
def test_skip_chars(text: str, count: int, expected: str) -> None:
    assert skip_chars(text, count) == expected


@pytest.mark.parametrize(
    "text,count,expected",
    [
        ("test asdf 1", 5, "test "),
        ("abc", 0, ""),
        ("abc", 3, "abc"),
        ("abc", 10, "abc"),
        ("ははは　asdf 1", 4, "ははは　"),
    ],
)
def test_check_chars(text: str, count: int, expected: str) -> None:
    assert check_chars(text, count) == expected


def test_wide_characters_count_as_one_unit() -> None:
    text = "日本語abc"
    assert len(text.encode("utf-8")) == 12

    assert check_chars(text, 3) == "日本語"
    assert skip_chars(text, 3) == "abc"


def test_derive_key_without_options_returns_line() -> None:
    assert derive_key("Some Line", KeyOptions()) == "Some Line"


def test_derive_key_applies_steps_in_order() -> None:
    options = KeyOptions(skip_fields=1, skip_chars=2, check_chars=4, ignore_case=True)

    # "HEAD Body Text" -> "Body Text" -> "dy Text" -> "dy T" -> "dy t"
    assert derive_key("HEAD Body Text", options) == "dy t"


def test_derive_key_ignore_case_is_unicode_aware() -> None:
    options = KeyOptions(ignore_case=True)

    assert derive_key("tEsT 3", options) == "test 3"
    assert derive_key("ÄÖÜ Straße", options) == "äöü straße"
    assert derive_key("ΣΊΣΥΦΟΣ", options) == "ΣΊΣΥΦΟΣ".lower()


def test_derive_key_short_line_survives_every_step() -> None:
    options = KeyOptions(skip_fields=5, skip_chars=5, check_chars=5)

    assert derive_key("end", options) == ""
    assert derive_key("end", KeyOptions(skip_chars=5, check_chars=5)) == "end"

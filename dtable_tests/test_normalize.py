from decimal import Decimal

import pytest

from dtable.normalize import is_nullish, normalize, to_number, to_text


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, ""),
        ("", ""),
        ("Hello, World!", "hello world"),
        ("Café", "cafe"),
        ("Carol Díaz", "carol diaz"),
        ("Straße", "strasse"),
        ("Price 5€", "price 5"),
        ("½", ""),
        ("東京 Tokyo", " tokyo"),
        ("e\u0301", "e"),
        ("A-B_C", "abc"),
        (42, "42"),
        (3.5, "35"),
        (True, "true"),
    ],
)
def test_normalize(value, expected):
    assert normalize(value) == expected


def test_normalize_keeps_whitespace():
    assert normalize("  two  words ") == "  two  words "


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, ""),
        ("text", "text"),
        (True, "true"),
        (False, "false"),
        (7, "7"),
        (2.0, "2"),
        (2.5, "2.5"),
        (Decimal("1.10"), "1.10"),
    ],
)
def test_to_text(value, expected):
    assert to_text(value) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        (10, 10.0),
        (2.5, 2.5),
        ("  12 ", 12.0),
        ("-3.25", -3.25),
        (Decimal("4.5"), 4.5),
    ],
)
def test_to_number_parses(value, expected):
    assert to_number(value) == expected


@pytest.mark.parametrize(
    "value", [None, True, False, "", "   ", "abc", "12abc", float("nan"), []]
)
def test_to_number_rejects(value):
    assert to_number(value) is None


def test_is_nullish():
    assert is_nullish(None)
    assert not is_nullish("")
    assert not is_nullish(0)

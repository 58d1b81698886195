import os.path

import pytest

from dtable.py_support import get_callable_from_path, get_symbol_from_path
from dtable.utils import count_label, doc_lines


def test_doc_lines_single_line():
    text = "This is a single line of text."
    expected = ["This is a single line of text."]
    assert doc_lines(text) == expected


def test_doc_lines_multiple_lines():
    text = "This is the first line.\nThis is the second line."
    expected = ["This is the first line.", "", "This is the second line."]
    assert doc_lines(text) == expected


def test_doc_lines_empty_string():
    assert doc_lines("") == []
    assert doc_lines(None) == []


def test_count_label():
    assert count_label(1, "entry") == "1 entry"
    assert count_label(0, "entry") == "0 entries"
    assert count_label(25, "entry") == "25 entries"
    assert count_label(2, "row") == "2 rows"


def test_get_symbol_from_path():
    assert get_symbol_from_path("os.path") is os.path
    assert get_symbol_from_path("os.path:join") is os.path.join


def test_get_callable_from_path():
    assert get_callable_from_path("os.path:join") is os.path.join


def test_get_callable_from_path_errors():
    with pytest.raises(ValueError):
        get_callable_from_path("os.path")
    with pytest.raises(ValueError):
        get_callable_from_path("os:sep")

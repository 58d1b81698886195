from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from dtable.column import (
    ColumnInfo,
    ColumnList,
    DtColumn,
    make_column,
    make_column_list,
    read_path,
    read_value,
)


def full_name(row):
    return f"{row['first']} {row['last']}"


def test_read_value_mapping_and_object():
    assert read_value({"a": 1}, "a") == 1
    assert read_value({"a": 1}, "b") is None
    assert read_value(SimpleNamespace(a=2), "a") == 2
    assert read_value(SimpleNamespace(a=2), "b") is None
    assert read_value(None, "a") is None


def test_read_path():
    row = {"address": {"city": "Paris", "geo": SimpleNamespace(lat=1.5)}}
    assert read_path(row, "address.city") == "Paris"
    assert read_path(row, "address.geo.lat") == 1.5
    assert read_path(row, "address.zip") is None
    assert read_path(row, "missing.city") is None


def test_column_defaults():
    col = DtColumn(key="first_name")
    assert col.name == "First name"
    assert col.sortable is True
    assert col.searchable is True
    assert col.filterable is True


def test_column_value_uses_key_or_value_of():
    row = {"first": "Ada", "last": "Lovelace"}
    assert DtColumn(key="first").value(row) == "Ada"
    assert DtColumn(key="full", value_of=full_name).value(row) == (
        "Ada Lovelace"
    )


def test_column_cell_priority():
    row = {"n": 3}
    plain = DtColumn(key="n")
    assert plain.cell(row, 0) == 3

    cond = DtColumn(key="n", conditional_render=lambda v, r: f"<{v}>")
    assert cond.cell(row, 0) == "<3>"

    both = DtColumn(
        key="n",
        render=lambda r, i: f"#{i}:{r['n']}",
        conditional_render=lambda v, r: f"<{v}>",
    )
    assert both.cell(row, 4) == "#4:3"


def test_column_doc_lines():
    col = DtColumn(key="a", description="First line.\nSecond line.")
    assert col.doc_lines == ["First line.", "", "Second line."]


def test_column_info_path_and_template():
    row = {"name": "Ada", "dept": "R&D", "address": {"city": "London"}}

    city = ColumnInfo(key="city", path="address.city").to_column()
    assert city.value(row) == "London"
    assert city.name == "City"

    label = ColumnInfo(key="label", template="{name} ({dept})").to_column()
    assert label.value(row) == "Ada (R&D)"


def test_column_info_selector():
    info = ColumnInfo(
        key="full", selector="dtable_tests.test_column:full_name"
    )
    col = info.to_column()
    assert col.value({"first": "Alan", "last": "Turing"}) == "Alan Turing"


def test_column_info_bad_selector():
    with pytest.raises(ValueError):
        ColumnInfo(key="x", selector="dtable_tests.test_column").to_column()


def test_column_info_rejects_unknown_fields():
    with pytest.raises(ValidationError):
        ColumnInfo(key="a", colour="red")
    with pytest.raises(ValidationError):
        ColumnInfo(key="")


def test_make_column_from_mapping_with_callables():
    col = make_column({"key": "full", "value_of": full_name, "name": "Full"})
    assert isinstance(col, DtColumn)
    assert col.name == "Full"
    assert col.value({"first": "A", "last": "B"}) == "A B"


def test_make_column_passes_columns_through():
    col = DtColumn(key="a")
    assert make_column(col) is col


def test_make_column_rejects_other_types():
    with pytest.raises(TypeError):
        make_column("a")


class TestColumnList:
    def test_lookup(self, columns):
        assert len(columns) == 5
        assert columns[0].key == "id"
        assert columns["salary"].name == "Salary"
        assert "status" in columns
        assert "missing" not in columns
        assert columns.get("missing") is None
        assert columns.keys == ["id", "name", "department", "status", "salary"]
        assert [c.key for c in columns] == columns.keys

    def test_missing_key(self, columns):
        with pytest.raises(KeyError, match="No column found for key: nope"):
            columns["nope"]

    def test_duplicate_key(self):
        with pytest.raises(ValueError, match="Duplicate column key: a"):
            ColumnList(columns=[DtColumn(key="a"), DtColumn(key="a")])

    def test_add_column(self, columns):
        col = columns.add_column({"key": "city", "path": "address.city"})
        assert columns[-1] is col
        assert columns.keys[-1] == "city"

    def test_resolve_unknown_key(self, columns):
        col = columns.resolve("hidden_field")
        assert col.key == "hidden_field"
        assert "hidden_field" not in columns
        assert col.value({"hidden_field": 5}) == 5

    def test_make_column_list(self, columns):
        assert make_column_list(columns) is columns
        made = make_column_list([{"key": "a"}, DtColumn(key="b")])
        assert made.keys == ["a", "b"]

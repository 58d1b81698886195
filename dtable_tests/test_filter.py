import pytest
from pyrsistent import pmap, pvector

from dtable.column import DtColumn
from dtable.filter import (
    active_filter_count,
    apply_filters,
    clear_filters,
    distinct_values,
    freeze_filters,
    prune_filters,
    remove_filter_value,
    select_all_values,
    set_filter_values,
    toggle_filter_value,
)


def ids(rows):
    return [r["id"] for r in rows]


class TestFreezeFilters:
    def test_empty(self):
        assert freeze_filters(None) == pmap()
        assert freeze_filters({}) == pmap()

    def test_converts_values_to_text(self):
        frozen = freeze_filters({"n": [1, 2.0, True, "x", 1]})
        assert frozen == pmap({"n": pvector(["1", "2", "true", "x"])})

    def test_drops_empty_lists(self):
        assert freeze_filters({"a": [], "b": ["x"]}) == pmap(
            {"b": pvector(["x"])}
        )

    def test_rejects_plain_strings(self):
        with pytest.raises(TypeError):
            freeze_filters({"a": "Active"})


class TestApplyFilters:
    def test_no_filters_returns_input(self, rows, columns):
        assert apply_filters(rows, columns, {}) is rows
        assert apply_filters(rows, columns, None) is rows
        assert apply_filters(rows, columns, {"status": []}) is rows

    def test_single_column(self, rows, columns):
        result = apply_filters(rows, columns, {"department": ["HR"]})
        assert ids(result) == [4, 9, 15]

    def test_values_are_or_ed(self, rows, columns):
        result = apply_filters(
            rows, columns, {"department": ["HR", "Marketing"]}
        )
        assert ids(result) == [2, 4, 9, 10, 13, 15]

    def test_columns_are_and_ed(self, rows, columns):
        result = apply_filters(
            rows,
            columns,
            {"department": ["Engineering"], "status": ["Inactive"]},
        )
        assert ids(result) == [3, 14]

    def test_numbers_compare_as_text(self, rows, columns):
        result = apply_filters(rows, columns, {"salary": [95000]})
        assert ids(result) == [1]

    def test_empty_string_matches_missing_value(self, rows, columns):
        result = apply_filters(rows, columns, {"salary": [""]})
        assert ids(result) == [11]

    def test_exact_match_only(self, rows, columns):
        assert apply_filters(rows, columns, {"department": ["eng"]}) == []

    def test_unknown_column_is_ignored(self, rows, columns):
        assert apply_filters(rows, columns, {"nope": ["x"]}) is rows

    def test_rejects_plain_strings(self, rows, columns):
        with pytest.raises(TypeError):
            apply_filters(rows, columns, {"status": "Active"})


def test_distinct_values(rows, columns):
    assert distinct_values(rows, columns["department"]) == [
        "Engineering",
        "HR",
        "Marketing",
        "Sales",
    ]
    assert distinct_values(rows, columns["status"]) == ["Active", "Inactive"]
    salaries = distinct_values(rows, columns["salary"])
    assert len(salaries) == 14
    assert "" not in salaries


def test_distinct_values_skip_empty_strings():
    col = DtColumn(key="a")
    assert distinct_values([{"a": ""}, {"a": "x"}, {}], col) == ["x"]


class TestEditing:
    def test_set_filter_values(self):
        filters = set_filter_values(pmap(), "a", ["x", "y", "x"])
        assert filters == pmap({"a": pvector(["x", "y"])})
        assert set_filter_values(filters, "a", []) == pmap()

    def test_set_filter_values_rejects_plain_strings(self):
        with pytest.raises(TypeError):
            set_filter_values(pmap(), "a", "Active")
        with pytest.raises(TypeError):
            select_all_values(pmap(), "a", "Active")

    def test_toggle_filter_value(self):
        filters = toggle_filter_value(pmap(), "a", "x")
        filters = toggle_filter_value(filters, "a", "y")
        assert list(filters["a"]) == ["x", "y"]
        filters = toggle_filter_value(filters, "a", "x")
        assert list(filters["a"]) == ["y"]
        assert toggle_filter_value(filters, "a", "y") == pmap()

    def test_select_all_values(self):
        values = ["Active", "Inactive"]
        filters = select_all_values(pmap(), "status", values)
        assert set(filters["status"]) == set(values)
        assert select_all_values(filters, "status", values) == pmap()

    def test_select_all_from_partial_selection(self):
        filters = freeze_filters({"status": ["Active"]})
        filters = select_all_values(filters, "status", ["Active", "Inactive"])
        assert list(filters["status"]) == ["Active", "Inactive"]

    def test_remove_filter_value(self):
        filters = freeze_filters({"a": ["x", "y"]})
        assert list(remove_filter_value(filters, "a", "x")["a"]) == ["y"]
        assert remove_filter_value(filters, "a", "z") is filters
        assert remove_filter_value(filters, "b", "x") is filters
        single = freeze_filters({"a": ["x"]})
        assert remove_filter_value(single, "a", "x") == pmap()

    def test_clear_and_count(self):
        filters = freeze_filters({"a": ["x", "y"], "b": ["z"]})
        assert active_filter_count(filters) == 3
        assert active_filter_count(clear_filters()) == 0
        assert active_filter_count(None) == 0


def test_prune_filters(rows, columns):
    filters = freeze_filters(
        {
            "department": ["HR", "Sales"],
            "status": ["Inactive"],
            "gone": ["x"],
        }
    )
    kept = [r for r in rows if r["department"] != "Sales"]
    pruned = prune_filters(filters, kept, columns)
    assert pruned == pmap(
        {
            "department": pvector(["HR"]),
            "status": pvector(["Inactive"]),
        }
    )


def test_prune_filters_drops_emptied_columns(rows, columns):
    filters = freeze_filters({"department": ["Sales"]})
    kept = [r for r in rows if r["department"] != "Sales"]
    assert prune_filters(filters, kept, columns) == pmap()

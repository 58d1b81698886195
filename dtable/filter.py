"""Filter support.

Filters are allow-lists kept per column. This is how a filter map looks
in JSON format:
```json
    {
        "department": ["Engineering", "HR"],
        "status": ["Active"]
    }
```

A row passes when, for every column that has a non-empty list, the text
form of the column value is one of the listed values. Lists of different
columns are AND-ed together, the values inside one list are OR-ed.
Columns that are not in the map, or that have an empty list, do not
constrain the rows.

The map is immutable; the editing helpers in this module return a new map.
"""

import logging
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Set

from pyrsistent import pmap, pvector
from pyrsistent.typing import PMap, PVector

from dtable.column import ColumnList, DtColumn
from dtable.constants import VERBOSE
from dtable.normalize import is_nullish, to_text

logger = logging.getLogger(__name__)

FilterMap = PMap[str, PVector[str]]
FilterInput = Mapping[str, Iterable[Any]]


def _unique_texts(values: Iterable[Any]) -> PVector[str]:
    """Stringify the values and drop repeated ones, keeping the order.

    Raises:
        TypeError: If a single string is given instead of a list.
    """
    if isinstance(values, (str, bytes)):
        raise TypeError(f"Expected a list of values, but got {values!r}")
    seen: Set[str] = set()
    result = []
    for value in values:
        text = to_text(value)
        if text in seen:
            continue
        seen.add(text)
        result.append(text)
    return pvector(result)


def freeze_filters(filters: Optional[FilterInput] = None) -> FilterMap:
    """Create an immutable filter map out of a plain mapping.

    Values are converted to their text form and columns with no values are
    dropped.

    Args:
        filters: Map from column key to the allowed values.
    """
    if not filters:
        return pmap()
    result = {}
    for key, values in filters.items():
        texts = _unique_texts(values)
        if texts:
            result[key] = texts
    return pmap(result)


def apply_filters(
    rows: Sequence[Any],
    columns: ColumnList,
    filters: Optional[FilterInput],
) -> Sequence[Any]:
    """Keep the rows that satisfy every active column filter.

    Args:
        rows: The rows to filter.
        columns: The columns of the table.
        filters: Map from column key to the allowed values.

    Returns:
        The input sequence itself if no filter is active, a new list of
        the rows that pass otherwise.
    """
    active = []
    for key, values in (filters or {}).items():
        if not values:
            continue
        column = columns.get(key)
        if column is None:
            logger.warning("Ignoring the filter for unknown column %s", key)
            continue
        active.append((column, frozenset(_unique_texts(values))))

    if not active:
        return rows

    result = [
        row
        for row in rows
        if all(
            to_text(column.value(row)) in allowed
            for column, allowed in active
        )
    ]
    logger.log(
        VERBOSE,
        "filter: %d column(s) kept %d of %d rows",
        len(active),
        len(result),
        len(rows),
    )
    return result


def distinct_values(rows: Iterable[Any], column: DtColumn) -> List[str]:
    """Compute the values a filter UI can offer for a column.

    Args:
        rows: The unfiltered rows of the table.
        column: The column to examine.

    Returns:
        The distinct text forms of the column values, sorted, without
        missing and empty values.
    """
    result: Set[str] = set()
    for row in rows:
        value = column.value(row)
        if is_nullish(value) or value == "":
            continue
        result.add(to_text(value))
    return sorted(result)


def set_filter_values(
    filters: FilterMap, key: str, values: Iterable[Any]
) -> FilterMap:
    """Replace the allowed values of a column.

    An empty list of values removes the constraint.

    Raises:
        TypeError: If `values` is a single string.
    """
    texts = _unique_texts(values)
    if not texts:
        return filters.discard(key)
    return filters.set(key, texts)


def toggle_filter_value(filters: FilterMap, key: str, value: Any) -> FilterMap:
    """Select a value that is not selected or deselect one that is."""
    text = to_text(value)
    current = filters.get(key, pvector())
    if text in current:
        kept = [v for v in current if v != text]
        return set_filter_values(filters, key, kept)
    return set_filter_values(filters, key, current.append(text))


def select_all_values(
    filters: FilterMap, key: str, values: Iterable[Any]
) -> FilterMap:
    """Select all candidate values of a column.

    If all of them are already selected the selection is cleared instead,
    so that calling this twice returns to the initial state.

    Args:
        filters: The current filters.
        key: The key of the column.
        values: All candidate values of the column (see `distinct_values`).
    """
    texts = _unique_texts(values)
    current = filters.get(key, pvector())
    if texts and set(current) == set(texts):
        return filters.discard(key)
    return set_filter_values(filters, key, texts)


def remove_filter_value(filters: FilterMap, key: str, value: Any) -> FilterMap:
    """Deselect one value of a column; unknown values are ignored."""
    text = to_text(value)
    current = filters.get(key)
    if current is None or text not in current:
        return filters
    return set_filter_values(filters, key, [v for v in current if v != text])


def clear_filters() -> FilterMap:
    """Create a map with no active filter."""
    return pmap()


def active_filter_count(filters: Optional[FilterInput]) -> int:
    """The number of selected values across all columns."""
    return sum(len(list(values)) for values in (filters or {}).values())


def prune_filters(
    filters: FilterMap, rows: Iterable[Any], columns: ColumnList
) -> FilterMap:
    """Drop the selected values that do not exist in a new set of rows.

    Columns that are left with no selected value lose their constraint, as
    do selections for columns that no longer exist.

    Args:
        filters: The current filters.
        rows: The new rows of the table.
        columns: The columns of the table.
    """
    rows = list(rows)
    result = filters
    for key, values in filters.items():
        column = columns.get(key)
        if column is None:
            result = result.discard(key)
            continue
        available = set(distinct_values(rows, column))
        kept = [v for v in values if v in available]
        if len(kept) != len(values):
            logger.debug(
                "Dropping stale filter values for %s: %s",
                key,
                [v for v in values if v not in available],
            )
            result = set_filter_values(result, key, kept)
    return result

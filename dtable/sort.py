"""Numeric-aware, stable sorting of rows by one column."""

import logging
from functools import cmp_to_key
from typing import Any, List, Optional, Sequence, Tuple

from dtable.column import ColumnList
from dtable.constants import SORT_ASC, SORT_DESC, VERBOSE, SortDirection
from dtable.normalize import is_nullish, to_number, to_text

logger = logging.getLogger(__name__)


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def compare_values(a: Any, b: Any) -> int:
    """Compare two cell values in ascending order.

    Missing values go after everything else. Two values that both parse as
    numbers are compared numerically; anything else is compared as
    case-insensitive, trimmed text.

    Returns:
        A negative number if `a` goes first, a positive one if `b` goes
        first and zero if they are equivalent.
    """
    a_null = is_nullish(a)
    b_null = is_nullish(b)
    if a_null and b_null:
        return 0
    if a_null:
        return 1
    if b_null:
        return -1

    a_num = to_number(a)
    b_num = to_number(b)
    if a_num is not None and b_num is not None:
        return _sign(a_num - b_num)

    a_str = to_text(a).strip().lower()
    b_str = to_text(b).strip().lower()
    if a_str < b_str:
        return -1
    if a_str > b_str:
        return 1
    return 0


def check_direction(direction: str) -> SortDirection:
    """Validate a sort direction.

    Raises:
        ValueError: If the direction is neither `asc` nor `desc`.
    """
    lowered = (direction or "").lower()
    if lowered == SORT_ASC:
        return SORT_ASC
    if lowered == SORT_DESC:
        return SORT_DESC
    raise ValueError(f"Unknown sort direction: {direction}")


def sort_rows(
    rows: Sequence[Any],
    columns: ColumnList,
    key: Optional[str],
    direction: str = SORT_ASC,
) -> Sequence[Any]:
    """Sort the rows by the values of one column.

    The sort is stable: rows that compare equal keep their relative order.
    The direction flips the whole comparison, so missing values come last
    in ascending order and first in descending order.

    Args:
        rows: The rows to sort.
        columns: The columns of the table.
        key: The key of the column to sort by. `None` leaves the rows
            unchanged.
        direction: Either `asc` or `desc`.

    Returns:
        The input sequence itself if `key` is `None`, a new sorted list
        otherwise.
    """
    if key is None:
        return rows

    sign = -1 if check_direction(direction) == SORT_DESC else 1
    column = columns.resolve(key)

    # Derive each value once.
    keyed = [(column.value(row), row) for row in rows]

    def compare(left: Tuple[Any, Any], right: Tuple[Any, Any]) -> int:
        return sign * compare_values(left[0], right[0])

    result: List[Any] = [
        row for _, row in sorted(keyed, key=cmp_to_key(compare))
    ]
    logger.log(VERBOSE, "sort: %d rows by %s %s", len(result), key, direction)
    return result


def next_sort(
    crt_key: Optional[str], crt_direction: str, key: str
) -> Tuple[str, SortDirection]:
    """Compute the sort that follows a click on a column header.

    Clicking the column that is already sorted flips the direction;
    clicking another column sorts by it in ascending order.

    Args:
        crt_key: The key of the column currently sorted by, if any.
        crt_direction: The current direction.
        key: The key of the clicked column.

    Returns:
        The new key and direction.
    """
    if crt_key == key:
        if check_direction(crt_direction) == SORT_ASC:
            return key, SORT_DESC
        return key, SORT_ASC
    return key, SORT_ASC

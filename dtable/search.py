"""Free-text search across the columns of a table."""

import logging
from typing import Any, Iterable, Sequence

from dtable.column import DtColumn
from dtable.constants import VERBOSE
from dtable.normalize import normalize

logger = logging.getLogger(__name__)


def row_matches(row: Any, columns: Iterable[DtColumn], needle: str) -> bool:
    """Tell if a normalized needle appears in any searchable column of a row.

    Args:
        row: The record to examine.
        columns: The columns of the table, visible or not.
        needle: The already normalized text to look for.
    """
    for column in columns:
        if not column.searchable:
            continue
        if needle in normalize(column.value(row)):
            return True
    return False


def search(
    rows: Sequence[Any],
    columns: Iterable[DtColumn],
    text: str,
    enabled: bool = True,
) -> Sequence[Any]:
    """Keep the rows where the text appears in at least one column.

    The comparison ignores case, accents and punctuation. Hidden columns are
    searched too.

    Args:
        rows: The rows to search.
        columns: All the declared columns.
        text: The text typed by the user.
        enabled: Whether search is enabled for the table.

    Returns:
        The input sequence itself if search is disabled or the text is blank,
        a new list of the matching rows otherwise.
    """
    if not enabled:
        return rows

    needle = normalize((text or "").strip())
    if not needle:
        return rows

    columns = list(columns)
    result = [row for row in rows if row_matches(row, columns, needle)]
    logger.log(
        VERBOSE,
        "search: %r kept %d of %d rows",
        needle,
        len(result),
        len(rows),
    )
    return result

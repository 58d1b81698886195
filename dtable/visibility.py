"""Column visibility with the rule that one column always stays visible."""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from attrs import define, field
from pyrsistent import pmap
from pyrsistent.typing import PMap

from dtable.column import ColumnList, DtColumn, make_column_list

logger = logging.getLogger(__name__)

VisibilityMap = PMap[str, bool]


def default_visibility(columns: Iterable[DtColumn]) -> VisibilityMap:
    """All columns visible."""
    return pmap({c.key: True for c in columns})


def visible_keys(
    columns: ColumnList, visibility: Mapping[str, bool]
) -> List[str]:
    """Keys of the visible columns in declaration order.

    Columns missing from the map are visible.
    """
    return [c.key for c in columns if visibility.get(c.key, True)]


def project_columns(
    columns: ColumnList, visibility: Mapping[str, bool]
) -> List[DtColumn]:
    """The visible columns in declaration order."""
    return [c for c in columns if visibility.get(c.key, True)]


def set_visible(
    columns: ColumnList,
    visibility: VisibilityMap,
    key: str,
    value: bool,
) -> Optional[VisibilityMap]:
    """Show or hide one column.

    Args:
        columns: The columns of the table.
        visibility: The current visibility map.
        key: The key of the column to change.
        value: `True` to show the column, `False` to hide it.

    Returns:
        The new map or `None` if the change is rejected because the column
        is unknown or because it is the last visible column.
    """
    if key not in columns:
        logger.warning(
            "Cannot change the visibility of unknown column %s", key
        )
        return None

    value = bool(value)
    if visibility.get(key, True) == value:
        return visibility

    if not value and len(visible_keys(columns, visibility)) <= 1:
        logger.debug("Refusing to hide %s, the last visible column", key)
        return None

    return visibility.set(key, value)


def ensure_visible(
    columns: ColumnList, visibility: Mapping[str, bool]
) -> VisibilityMap:
    """Make the first declared column visible again if none is.

    Maps that come from outside the table, like a saved state, may hide
    every column.
    """
    result = pmap(visibility)
    if not len(columns) or visible_keys(columns, result):
        return result
    first = columns[0].key
    logger.warning("No column is visible; showing %s", first)
    return result.set(first, True)


def toggle_all(
    columns: ColumnList, visibility: VisibilityMap
) -> VisibilityMap:
    """Hide or show all columns at once.

    When every column is visible, all columns except the first declared
    one are hidden. Otherwise all columns are made visible.
    """
    if not len(columns):
        return visibility

    if len(visible_keys(columns, visibility)) == len(columns):
        first = columns[0].key
        return pmap({c.key: c.key == first for c in columns})
    return default_visibility(columns)


@define
class ColumnVisibility:
    """Tracks which columns of a table are visible.

    Attributes:
        columns: The columns of the table.
        visibility: Map from column key to its visibility.
    """

    columns: ColumnList = field(converter=make_column_list)
    visibility: VisibilityMap = field(default=None)

    def __attrs_post_init__(self):
        if self.visibility is None:
            self.visibility = default_visibility(self.columns)
        else:
            self.visibility = ensure_visible(self.columns, self.visibility)

    @property
    def visible_columns(self) -> List[DtColumn]:
        """The visible columns in declaration order."""
        return project_columns(self.columns, self.visibility)

    @property
    def visible_count(self) -> int:
        """The number of visible columns."""
        return len(visible_keys(self.columns, self.visibility))

    def is_visible(self, key: str) -> bool:
        """Tell if a column is visible."""
        return key in self.columns and self.visibility.get(key, True)

    def set_visible(self, key: str, value: bool) -> bool:
        """Show or hide one column.

        Returns:
            False if the change was rejected.
        """
        result = set_visible(self.columns, self.visibility, key, value)
        if result is None:
            return False
        self.visibility = result
        return True

    def toggle_all(self) -> None:
        """Hide all but the first column or show all columns."""
        self.visibility = toggle_all(self.columns, self.visibility)

    def as_map(self) -> Dict[str, Any]:
        """A plain dictionary from column key to visibility."""
        return {c.key: self.visibility.get(c.key, True) for c in self.columns}

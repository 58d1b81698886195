from typing import Any, Dict, Iterable, Mapping, Optional

from attrs import define, evolve, field
from pyrsistent import pmap, thaw

from dtable.column import DtColumn
from dtable.constants import SORT_ASC, SortDirection
from dtable.filter import FilterInput, FilterMap, freeze_filters
from dtable.sort import check_direction
from dtable.visibility import VisibilityMap, default_visibility


def _to_page(value: Any) -> int:
    return max(1, int(value))


def _to_visibility(value: Optional[Mapping[str, bool]]) -> VisibilityMap:
    return pmap({k: bool(v) for k, v in (value or {}).items()})


def _to_sort_key(value: Optional[str]) -> Optional[str]:
    return value or None


@define(frozen=True)
class QueryState:
    """The query a table applies to its rows.

    Instances are immutable: every transition creates a new state. Any
    combination of values is valid.

    Attributes:
        search_text: The free-text search as typed by the user.
        filters: Map from column key to the allowed values.
        sort_key: The key of the column to sort by, if any.
        sort_direction: Either `asc` or `desc`.
        visibility: Map from column key to its visibility. Columns missing
            from the map are visible.
        page: The requested 1-based page. It may point past the last page;
            the table clamps it when computing the rows.
    """

    search_text: str = field(default="", converter=str)
    filters: FilterMap = field(factory=pmap, converter=freeze_filters)
    sort_key: Optional[str] = field(default=None, converter=_to_sort_key)
    sort_direction: SortDirection = field(
        default=SORT_ASC, converter=check_direction
    )
    visibility: VisibilityMap = field(factory=pmap, converter=_to_visibility)
    page: int = field(default=1, converter=_to_page)

    @classmethod
    def initial(cls, columns: Iterable[DtColumn]) -> "QueryState":
        """The default state for a set of columns: everything visible."""
        return cls(visibility=default_visibility(columns))

    def with_search(self, text: str) -> "QueryState":
        return evolve(self, search_text=text or "", page=1)

    def with_filters(self, filters: FilterInput) -> "QueryState":
        return evolve(self, filters=filters, page=1)

    def with_sort(
        self, key: Optional[str], direction: str = SORT_ASC
    ) -> "QueryState":
        return evolve(self, sort_key=key, sort_direction=direction, page=1)

    def with_visibility(self, visibility: Mapping[str, bool]) -> "QueryState":
        return evolve(self, visibility=visibility)

    def with_page(self, page: int) -> "QueryState":
        return evolve(self, page=page)

    def as_dict(self) -> Dict[str, Any]:
        """A plain-python copy of the state."""
        return {
            "search_text": self.search_text,
            "filters": thaw(self.filters),
            "sort_key": self.sort_key,
            "sort_direction": self.sort_direction,
            "visibility": thaw(self.visibility),
            "page": self.page,
        }

"""The data table: query state plus the pipeline that derives its rows.

The rows shown by a table are computed from scratch out of the columns,
the rows and the query state, in a fixed order:

    search -> filter -> sort -> paginate

Column visibility does not change which rows are selected; it only decides
which columns are rendered and exported.
"""

import logging
from collections.abc import Mapping
from datetime import date
from typing import Any, Iterable, List, Optional, Sequence, Union

from attrs import define, evolve, field

from dtable.actions import RowAction
from dtable.column import ColumnList, DtColumn, make_column_list
from dtable.constants import SORT_ASC, VERBOSE
from dtable.export import (
    CsvDownload,
    DownloadSink,
    default_filename,
    export_payload,
)
from dtable.filter import (
    active_filter_count,
    apply_filters,
    distinct_values,
    prune_filters,
    remove_filter_value,
    select_all_values,
    set_filter_values,
    toggle_filter_value,
)
from dtable.options import TableOptions
from dtable.pagination import PageInfo, clamp_page, paginate
from dtable.search import search
from dtable.sort import next_sort, sort_rows
from dtable.state import QueryState
from dtable.visibility import (
    ensure_visible,
    project_columns,
    set_visible,
    toggle_all,
)

logger = logging.getLogger(__name__)


def make_options(
    value: Union[TableOptions, Mapping, None] = None,
) -> TableOptions:
    """Accept options as a model, as a mapping or not at all."""
    if value is None:
        return TableOptions()
    if isinstance(value, TableOptions):
        return value
    return TableOptions.model_validate(value)


@define(frozen=True)
class TableView:
    """The rows and columns derived from one query state.

    Attributes:
        visible_columns: The visible columns in declaration order.
        working_rows: All the rows that passed search and filters, sorted.
        page_rows: The rows of the current page.
        page_info: Information about the current page.
    """

    visible_columns: List[DtColumn]
    working_rows: List[Any]
    page_rows: List[Any]
    page_info: PageInfo


def recompute(
    state: QueryState,
    columns: ColumnList,
    rows: Sequence[Any],
    options: TableOptions,
) -> TableView:
    """Derive the view of a table.

    This is a pure function of its arguments. When pagination is off every
    row lands on the single page; the page information still reports the
    configured page size.

    Args:
        state: The query to apply.
        columns: The columns of the table.
        rows: The rows of the table.
        options: The options of the table.
    """
    found = search(rows, columns, state.search_text, enabled=options.search)
    filtered = apply_filters(found, columns, state.filters)
    ordered = sort_rows(
        filtered, columns, state.sort_key, state.sort_direction
    )

    if options.pagination:
        page_size = options.page_size
    else:
        page_size = max(1, len(ordered))
    page = paginate(ordered, page_size, state.page)
    info = PageInfo.create(
        page=page.clamped_page,
        page_size=page_size,
        total_rows=len(ordered),
    )

    return TableView(
        visible_columns=project_columns(columns, state.visibility),
        working_rows=list(ordered),
        page_rows=page.page_rows,
        page_info=evolve(info, page_size=options.page_size),
    )


def _accept_state(table: "DataTable", _attribute, state: QueryState):
    """Keep one column visible in a state handed to the table."""
    visibility = ensure_visible(table.columns, state.visibility)
    if visibility != state.visibility:
        state = state.with_visibility(visibility)
    table._view = None
    return state


@define
class DataTable:
    """A table of rows that can be searched, filtered, sorted and paged.

    The table owns a copy of the list of rows (the rows themselves are
    never modified) and the current query state. Every transition replaces
    the state; the view is derived again the next time it is needed.

    Transitions that cannot be applied (an unknown column, a column that
    cannot be sorted or filtered, hiding the last visible column) leave the
    state untouched and return `False`.

    Attributes:
        columns: The columns of the table.
        rows: The rows of the table.
        options: The options of the table.
        actions: Actions that can be triggered on individual rows.
        state: The current query state.
    """

    columns: ColumnList = field(converter=make_column_list)
    rows: List[Any] = field(factory=list, converter=list)
    options: TableOptions = field(factory=TableOptions, converter=make_options)
    actions: List[RowAction] = field(factory=list)
    state: QueryState = field(default=None, on_setattr=_accept_state)
    _view: Optional[TableView] = field(default=None, init=False, repr=False)

    def __attrs_post_init__(self):
        if self.state is None:
            self.state = QueryState.initial(self.columns)
        else:
            self.state = self.state

    def _apply(self, state: QueryState) -> bool:
        if state != self.state:
            logger.log(VERBOSE, "DataTable: new state %s", state)
            self.state = state
            self._view = None
        return True

    def _column(self, key: str, purpose: str) -> Optional[DtColumn]:
        column = self.columns.get(key)
        if column is None:
            logger.warning(
                "Cannot %s by unknown column %s; valid keys are %s",
                purpose,
                key,
                self.columns.keys,
            )
        return column

    def _filter_column(self, key: str) -> Optional[DtColumn]:
        column = self._column(key, "filter")
        if column is not None and not column.filterable:
            logger.debug("Column %s is not filterable", key)
            return None
        return column

    @property
    def view(self) -> TableView:
        """The view derived from the current state."""
        if self._view is None:
            self._view = recompute(
                self.state, self.columns, self.rows, self.options
            )
        return self._view

    # Transitions.

    def set_search(self, text: str) -> bool:
        """Change the free-text search; goes back to the first page."""
        return self._apply(self.state.with_search(text))

    def set_filter(self, key: str, values: Iterable[Any]) -> bool:
        """Replace the allowed values of a column; goes back to the first page.

        Args:
            key: The key of the column.
            values: The allowed values. An empty list removes the filter.

        Raises:
            TypeError: If `values` is a single string instead of a list.
        """
        if self._filter_column(key) is None:
            return False
        filters = set_filter_values(self.state.filters, key, values)
        return self._apply(self.state.with_filters(filters))

    def toggle_filter_value(self, key: str, value: Any) -> bool:
        """Select or deselect one allowed value of a column."""
        if self._filter_column(key) is None:
            return False
        filters = toggle_filter_value(self.state.filters, key, value)
        return self._apply(self.state.with_filters(filters))

    def select_all_filter_values(self, key: str) -> bool:
        """Select all values of a column, or none if all are selected."""
        if self._filter_column(key) is None:
            return False
        filters = select_all_values(
            self.state.filters, key, self.get_distinct_values(key)
        )
        return self._apply(self.state.with_filters(filters))

    def remove_filter_value(self, key: str, value: Any) -> bool:
        """Deselect one allowed value of a column."""
        if self._filter_column(key) is None:
            return False
        filters = remove_filter_value(self.state.filters, key, value)
        return self._apply(self.state.with_filters(filters))

    def clear_filters(self) -> bool:
        """Remove all filters."""
        return self._apply(self.state.with_filters({}))

    def set_sort(self, key: Optional[str], direction: str = SORT_ASC) -> bool:
        """Sort by a column; goes back to the first page.

        Args:
            key: The key of the column or `None` to restore the input order.
            direction: Either `asc` or `desc`.

        Raises:
            ValueError: If the direction is not valid.
        """
        if key is not None:
            column = self._column(key, "sort")
            if column is None:
                return False
            if not column.sortable:
                logger.debug("Column %s is not sortable", key)
                return False
        return self._apply(self.state.with_sort(key, direction))

    def toggle_sort(self, key: str) -> bool:
        """Sort like a click on the header of a column.

        The column that is already sorted changes direction, another one
        is sorted in ascending order.
        """
        key, direction = next_sort(
            self.state.sort_key, self.state.sort_direction, key
        )
        return self.set_sort(key, direction)

    def set_visibility(self, key: str, visible: bool) -> bool:
        """Show or hide a column; the last visible column cannot be hidden."""
        visibility = set_visible(
            self.columns, self.state.visibility, key, visible
        )
        if visibility is None:
            return False
        return self._apply(self.state.with_visibility(visibility))

    def toggle_all_columns(self) -> bool:
        """Hide all but the first column if all are visible, else show all."""
        visibility = toggle_all(self.columns, self.state.visibility)
        return self._apply(self.state.with_visibility(visibility))

    def set_page(self, page: int) -> bool:
        """Go to a page; numbers outside the valid range are clamped."""
        pages = self.view.page_info.total_pages
        return self._apply(self.state.with_page(clamp_page(page, pages)))

    def next_page(self) -> bool:
        """Go to the next page; False if this is the last one."""
        info = self.view.page_info
        if not info.has_next:
            return False
        return self.set_page(info.page + 1)

    def previous_page(self) -> bool:
        """Go to the previous page; False if this is the first one."""
        info = self.view.page_info
        if not info.has_previous:
            return False
        return self.set_page(info.page - 1)

    def set_rows(self, rows: Iterable[Any]) -> bool:
        """Replace the rows of the table.

        The table goes back to the first page and the filter values that
        no longer exist in the new rows are dropped.
        """
        self.rows = list(rows)
        self._view = None
        filters = prune_filters(self.state.filters, self.rows, self.columns)
        return self._apply(evolve(self.state, filters=filters, page=1))

    def reset(self) -> bool:
        """Go back to the initial state."""
        return self._apply(QueryState.initial(self.columns))

    # Accessors.

    def get_visible_columns(self) -> List[DtColumn]:
        """The visible columns in declaration order."""
        return self.view.visible_columns

    def get_visible_rows(self) -> List[Any]:
        """The rows of the current page."""
        return self.view.page_rows

    def get_working_rows(self) -> List[Any]:
        """All rows that passed search and filters, sorted, across pages."""
        return self.view.working_rows

    def get_total_row_count(self) -> int:
        """The number of rows that passed search and filters."""
        return len(self.view.working_rows)

    def get_page_info(self) -> PageInfo:
        """Information about the current page."""
        return self.view.page_info

    def get_distinct_values(self, key: str) -> List[str]:
        """The values a filter editor can offer for a column.

        They are computed across all the rows of the table, not only the
        ones that pass the current query.

        Raises:
            KeyError: If there is no column with this key.
        """
        column = self.columns[key]
        if not column.filterable:
            return []
        return distinct_values(self.rows, column)

    def get_active_filter_count(self) -> int:
        """The number of selected filter values across all columns."""
        return active_filter_count(self.state.filters)

    def get_rendered_rows(self) -> List[List[Any]]:
        """The content of the cells of the current page.

        Returns:
            One list per row on the page with one cell per visible column.
        """
        columns = self.view.visible_columns
        return [
            [c.cell(row, index) for c in columns]
            for index, row in enumerate(self.view.page_rows)
        ]

    def get_row_actions(self, row: Any) -> List[RowAction]:
        """The actions offered for a row."""
        return [a for a in self.actions if a.is_shown(row)]

    def trigger_action(self, label: str, row_index: int) -> bool:
        """Run an action on a row of the current page.

        Args:
            label: The label of the action.
            row_index: The index of the row inside the current page.

        Raises:
            KeyError: If no action has this label.
            IndexError: If the page has no such row.
        """
        for action in self.actions:
            if action.label == label:
                break
        else:
            raise KeyError(f"No action found with label: {label}")
        row = self.view.page_rows[row_index]
        return action.trigger(row, row_index)

    def export_csv(self) -> str:
        """The CSV export of the visible columns of all working rows.

        All the rows that pass the query are exported, not only those on
        the current page. The text starts with the UTF-8 byte order mark.
        """
        view = self.view
        return export_payload(view.working_rows, view.visible_columns)

    def download(self, sink: DownloadSink, day: Optional[date] = None) -> Any:
        """Export the table and hand the file to a sink.

        Args:
            sink: Delivers the file.
            day: The date embedded in the file name. Defaults to today.

        Returns:
            Whatever the sink returns.
        """
        return sink(
            CsvDownload(
                payload=self.export_csv(),
                filename=default_filename(day),
            )
        )


def create_table(
    columns: Iterable[Any],
    rows: Iterable[Any],
    options: Union[TableOptions, Mapping, None] = None,
    actions: Optional[Iterable[RowAction]] = None,
) -> DataTable:
    """Create a table.

    Args:
        columns: Column objects or mappings that describe them.
        rows: The records to show.
        options: Table options, as a model or as a mapping.
        actions: Actions that can be triggered on individual rows.

    Raises:
        ValueError: If two columns share the same key.
        pydantic.ValidationError: If the options are not valid.
    """
    return DataTable(
        columns=columns,  # type: ignore[arg-type]
        rows=list(rows),
        options=options,  # type: ignore[arg-type]
        actions=list(actions or []),
    )

import logging
from collections import OrderedDict
from collections.abc import Mapping
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    Iterator,
    List,
    Optional,
    Union,
)

from attrs import define, field
from pydantic import BaseModel, ConfigDict, Field

from dtable.normalize import to_text
from dtable.py_support import get_callable_from_path
from dtable.utils import doc_lines

logger = logging.getLogger(__name__)

ValueGetter = Callable[[Any], Any]
CellRenderer = Callable[[Any, int], Any]
ConditionalRenderer = Callable[[Any, Any], Any]


def read_value(row: Any, key: str) -> Any:
    """Read the value stored under `key` in a row.

    Mappings are read by key and any other object by attribute. A missing
    key yields `None`.
    """
    if row is None:
        return None
    if isinstance(row, Mapping):
        return row.get(key)
    return getattr(row, key, None)


def read_path(row: Any, path: str) -> Any:
    """Read a nested value using a dot-separated path like `address.city`."""
    current = row
    for part in path.split("."):
        current = read_value(current, part)
        if current is None:
            return None
    return current


class _TemplateRow:
    """Mapping view used to format a template string with row values."""

    def __init__(self, row: Any):
        self.row = row

    def __getitem__(self, key: str) -> str:
        return to_text(read_path(self.row, key))


@define
class DtColumn:
    """A column of a data table.

    Attributes:
        key: The unique key of the column inside the table. Unless a
            `value_of` function is provided this is also the key used to read
            the value from the row.
        name: The label shown in the header and written in the exported
            header row. Defaults to the key in `Text case`.
        value_of: Function that derives the value of this column from a row.
            The result is what search, filters, sorting and the export use.
        render: Function that creates the cell content for a row; it receives
            the row and its index in the current page. Presentation only, the
            engine never looks at it.
        conditional_render: Function that creates the cell content from the
            derived value and the row. Presentation only.
        sortable: Whether the user can sort the rows by this column.
        searchable: Whether the free-text search looks at this column.
        filterable: Whether the user can filter the rows by this column.
        description: A longer description of the column.
    """

    key: str
    name: str = field(default="")
    value_of: Optional[ValueGetter] = field(default=None, repr=False)
    render: Optional[CellRenderer] = field(default=None, repr=False)
    conditional_render: Optional[ConditionalRenderer] = field(
        default=None, repr=False
    )
    sortable: bool = field(default=True)
    searchable: bool = field(default=True)
    filterable: bool = field(default=True)
    description: str = field(default="", repr=False)

    def __attrs_post_init__(self):
        if not self.name:
            self.name = self.text_name

    def __hash__(self):
        return hash(self.key)

    @property
    def text_name(self) -> str:
        """Return the key of the column in `Text case`."""
        parts = self.key.split("_")
        parts[0] = parts[0].title()
        return " ".join(parts)

    @property
    def doc_lines(self) -> List[str]:
        """Get the description of the column as a set of lines."""
        return doc_lines(self.description)

    def value(self, row: Any) -> Any:
        """Derive the value of this column for a row.

        Args:
            row: The record to read.

        Returns:
            The result of `value_of` if the column has one, the value stored
            under the key of the column otherwise.
        """
        if self.value_of is not None:
            return self.value_of(row)
        return read_value(row, self.key)

    def cell(self, row: Any, row_index: int) -> Any:
        """Compute the content of the cell for a row.

        The custom renderer has priority, followed by the conditional
        renderer, the derived value and finally the raw value.

        Args:
            row: The record to render.
            row_index: The index of the row inside the current page.
        """
        if self.render is not None:
            return self.render(row, row_index)
        if self.conditional_render is not None:
            return self.conditional_render(self.value(row), row)
        return self.value(row)


class ColumnInfo(BaseModel):
    """Parser for a column described in a configuration file.

    Only one of `path`, `template` and `selector` is expected; they are
    checked in this order.

    Attributes:
        key: The unique key of the column.
        name: The header label. Defaults to the key in `Text case`.
        path: A dot-separated path to read a nested value, e.g.
            `address.city`.
        template: A format string filled with row values, e.g.
            `{name} ({department})`.
        selector: A `module.path:name` reference to a function that receives
            the row and returns the value.
        sortable: Whether the user can sort by this column.
        searchable: Whether the free-text search looks at this column.
        filterable: Whether the user can filter by this column.
        description: A longer description of the column.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    key: str = Field(min_length=1)
    name: Optional[str] = None
    path: Optional[str] = None
    template: Optional[str] = None
    selector: Optional[str] = None
    sortable: bool = True
    searchable: bool = True
    filterable: bool = True
    description: str = ""

    def value_getter(self) -> Optional[ValueGetter]:
        """Create the value derivation function described by this entry."""
        if self.path:
            path = self.path
            return lambda row: read_path(row, path)
        if self.template:
            template = self.template
            return lambda row: template.format_map(_TemplateRow(row))
        if self.selector:
            return get_callable_from_path(self.selector)
        return None

    def to_column(self) -> DtColumn:
        """Create the column described by this entry."""
        return DtColumn(
            key=self.key,
            name=self.name or "",
            value_of=self.value_getter(),
            sortable=self.sortable,
            searchable=self.searchable,
            filterable=self.filterable,
            description=self.description,
        )


ColumnSource = Union[DtColumn, Mapping]


def make_column(item: ColumnSource) -> DtColumn:
    """Accept either a column or a mapping that describes one.

    Mappings may carry callables directly (`value_of`, `render`,
    `conditional_render`); everything else is parsed by `ColumnInfo`.
    """
    if isinstance(item, DtColumn):
        return item
    if not isinstance(item, Mapping):
        raise TypeError(
            f"Expected a DtColumn or a mapping, but got {type(item)}."
        )
    data = dict(item)
    callables = {
        name: data.pop(name)
        for name in ("value_of", "render", "conditional_render")
        if name in data
    }
    column = ColumnInfo(**data).to_column()
    for name, value in callables.items():
        setattr(column, name, value)
    return column


@define
class ColumnList:
    """The ordered list of columns of a table.

    The columns are stored in a list to keep the declaration order. To access
    a column you can use the `columns[key]` syntax, where `key` is either the
    index of the column or its key.

    Attributes:
        columns: The columns in declaration order.
    """

    columns: List[DtColumn] = field(factory=list)
    _by_key: Dict[str, DtColumn] = field(
        factory=OrderedDict, init=False, repr=False
    )

    def __attrs_post_init__(self):
        out = self.columns
        self.columns = []
        for col in out:
            self.add_column(col)

    def __getitem__(self, key: Union[int, str]) -> DtColumn:
        if isinstance(key, int):
            return self.columns[key]

        column = self._by_key.get(key)
        if column is None:
            raise KeyError(
                f"No column found for key: {key}; "
                f"valid keys are: {self.keys}"
            )
        return column

    def __contains__(self, key: object) -> bool:
        return key in self._by_key

    def __iter__(self) -> Iterator[DtColumn]:
        return iter(self.columns)

    def __len__(self) -> int:
        return len(self.columns)

    @property
    def keys(self) -> List[str]:
        """The keys of the columns in declaration order."""
        return [c.key for c in self.columns]

    def get(self, key: str) -> Optional[DtColumn]:
        """Get a column by key or `None` if there is no such column."""
        return self._by_key.get(key)

    def add_column(self, column: ColumnSource) -> DtColumn:
        """Add a column at the end of the list.

        Args:
            column: The column or a mapping that describes it.

        Raises:
            ValueError: If a column with the same key already exists.
        """
        col = make_column(column)
        if col.key in self._by_key:
            raise ValueError(f"Duplicate column key: {col.key}")
        self.columns.append(col)
        self._by_key[col.key] = col
        return col

    def resolve(self, key: str) -> DtColumn:
        """Get the column for a key, inventing a plain one if it is unknown.

        The implicit column reads `row[key]`, so rows can be sorted by a
        field that has no column of its own.
        """
        column = self._by_key.get(key)
        if column is None:
            logger.debug("No column for key %s; reading the raw value", key)
            return DtColumn(key=key)
        return column


def make_column_list(columns: Iterable[ColumnSource]) -> ColumnList:
    """Create a column list, accepting an existing one unchanged."""
    if isinstance(columns, ColumnList):
        return columns
    return ColumnList(columns=list(columns))  # type: ignore[arg-type]

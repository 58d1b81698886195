from pydantic import BaseModel, ConfigDict, Field

from dtable.constants import (
    DEFAULT_PAGE_SIZE,
    FILTER_TYPE_DROPDOWN,
    FilterKind,
)


class TableOptions(BaseModel):
    """Options of a table.

    The toolbar flags only tell a UI which controls to show; the engine
    methods work regardless. The exception is `search`: while it is off the
    search text is ignored, as there is no control to change it.

    Attributes:
        search: Expose the free-text search box.
        filter: Expose the per-column filter editor.
        view_columns: Expose the column visibility editor.
        download: Expose the CSV download button.
        pagination: Split the rows into pages. When off, a single page holds
            all the rows.
        page_size: The number of rows per page.
        filter_type: The kind of filter editor a UI should present.
    """

    model_config = ConfigDict(
        extra="forbid", populate_by_name=True, frozen=True
    )

    search: bool = False
    filter: bool = False
    view_columns: bool = Field(default=False, alias="viewColumns")
    download: bool = False
    pagination: bool = True
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, alias="pageSize")
    filter_type: FilterKind = Field(
        default=FILTER_TYPE_DROPDOWN, alias="filterType"
    )

    @property
    def show_toolbar(self) -> bool:
        """Whether any toolbar control is exposed."""
        return self.search or self.filter or self.view_columns or self.download

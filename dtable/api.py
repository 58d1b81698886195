from dtable.actions import RowAction  # noqa: F401
from dtable.column import (  # noqa: F401
    ColumnInfo,
    ColumnList,
    DtColumn,
    make_column,
    read_value,
)
from dtable.export import (  # noqa: F401
    CsvDownload,
    DownloadSink,
    FileSink,
    default_filename,
    export_payload,
    to_csv,
)
from dtable.filter import (  # noqa: F401
    FilterMap,
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
from dtable.normalize import (  # noqa: F401
    normalize,
    to_number,
    to_text,
)
from dtable.options import TableOptions  # noqa: F401
from dtable.pagination import PageInfo, PageSlice, paginate  # noqa: F401
from dtable.search import search  # noqa: F401
from dtable.sort import compare_values, next_sort, sort_rows  # noqa: F401
from dtable.state import QueryState  # noqa: F401
from dtable.table import (  # noqa: F401
    DataTable,
    TableView,
    create_table,
    recompute,
)
from dtable.visibility import ColumnVisibility  # noqa: F401

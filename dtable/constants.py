# Constants shared by the table engine.
from typing import Literal

# Sort directions.
SORT_ASC = "asc"
SORT_DESC = "desc"
SortDirection = Literal["asc", "desc"]

# Kinds of filter editors a UI may present. The engine treats them alike.
FILTER_TYPE_DROPDOWN = "dropdown"
FILTER_TYPE_CHECKBOX = "checkbox"
FILTER_TYPE_TEXT = "text"
FilterKind = Literal["dropdown", "checkbox", "text"]

# Variants of row actions.
ActionVariant = Literal["primary", "secondary", "danger", "ghost"]

DEFAULT_PAGE_SIZE = 10

# CSV export.
CSV_BOM = "\ufeff"
CSV_MIME_TYPE = "text/csv"
CSV_LINE_TERMINATOR = "\r\n"
EXPORT_FILENAME_TEMPLATE = "table-export-{day}.csv"

# Log level used for chatty pipeline traces.
VERBOSE = 10

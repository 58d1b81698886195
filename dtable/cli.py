import csv
import json
import logging
import os
from collections import defaultdict
from typing import Any, Dict, List, Optional, Tuple

import click
import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from dtable.__version__ import __version__
from dtable.column import ColumnList, DtColumn, make_column_list
from dtable.export import FileSink
from dtable.normalize import to_text
from dtable.sort import check_direction
from dtable.table import DataTable, create_table

logger = logging.getLogger(__name__)


def create_context_obj(debug: bool):
    """Sets up the logging and prepares the context for the CLI.

    Args:
        debug: If True, sets the logging level to DEBUG.
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="[%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.debug("Debug mode is on")

    return {
        "debug": debug,
    }


def load_definition(path: str) -> Tuple[List[Any], Dict[str, Any]]:
    """Read the columns and the options of a table from a YAML file.

    The file is expected to look like this:
    ```yaml
        columns:
          - key: name
            name: Name
          - key: city
            path: address.city
            sortable: false
        options:
          search: true
          pageSize: 5
    ```

    Returns:
        The list of column mappings and the options mapping.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict) or not isinstance(data.get("columns"), list):
        raise click.ClickException(
            f"{path} must contain a mapping with a `columns` list"
        )
    options = data.get("options") or {}
    if not isinstance(options, dict):
        raise click.ClickException(f"`options` in {path} must be a mapping")
    return data["columns"], options


def load_rows(path: str) -> List[Any]:
    """Read the rows of a table from a JSON or a CSV file.

    JSON files must hold a list of objects. CSV files must have a header
    record; all values are read as text.
    """
    ext = os.path.splitext(path)[1].lower()
    if ext == ".json":
        with open(path, "r", encoding="utf-8") as f:
            rows = json.load(f)
        if not isinstance(rows, list):
            raise click.ClickException(f"{path} must contain a list of rows")
        return rows
    if ext == ".csv":
        with open(path, "r", encoding="utf-8-sig", newline="") as f:
            return list(csv.DictReader(f))
    raise click.ClickException(
        f"Unsupported data file {path}; use a .json or a .csv file"
    )


def parse_filters(values: Tuple[str, ...]) -> Dict[str, List[str]]:
    """Group `KEY=VALUE` arguments by key."""
    result: Dict[str, List[str]] = defaultdict(list)
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise click.BadParameter(
                f"Expected KEY=VALUE, got {item!r}", param_hint="--filter"
            )
        result[key].append(value)
    return dict(result)


def parse_sort(value: Optional[str]) -> Tuple[Optional[str], str]:
    """Split a `KEY[:asc|desc]` argument."""
    if not value:
        return None, "asc"
    key, _, direction = value.partition(":")
    try:
        return key, check_direction(direction or "asc")
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--sort") from exc


def build_table(
    definition: str,
    data: str,
    overrides: Optional[Dict[str, Any]] = None,
) -> DataTable:
    """Create the table described by a definition file and a data file."""
    columns, options = load_definition(definition)
    overrides = overrides or {}
    if "page_size" in overrides:
        options.pop("pageSize", None)
    options = {**options, **overrides}
    try:
        return create_table(columns, load_rows(data), options)
    except ValidationError as exc:
        raise click.ClickException(f"Invalid table definition: {exc}") from exc
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc


def load_columns(definition: str) -> ColumnList:
    """Read only the columns of a table from a definition file."""
    columns, _ = load_definition(definition)
    try:
        return make_column_list(columns)
    except ValidationError as exc:
        raise click.ClickException(f"Invalid table definition: {exc}") from exc
    except (TypeError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc


def format_column(column: DtColumn) -> List[str]:
    """Describe a column as a few lines of text."""
    features = [
        name
        for name, enabled in (
            ("sortable", column.sortable),
            ("searchable", column.searchable),
            ("filterable", column.filterable),
        )
        if enabled
    ]
    result = [
        f"{column.key}: {column.name} "
        f"({', '.join(features) or 'display only'})"
    ]
    result.extend(f"    {line}".rstrip() for line in column.doc_lines)
    return result


def format_page(table: DataTable) -> str:
    """Format the current page as aligned text columns."""
    columns = table.get_visible_columns()
    lines = [[c.name for c in columns]]
    for row in table.get_visible_rows():
        lines.append([to_text(c.value(row)) for c in columns])

    widths = [max(len(line[i]) for line in lines) for i in range(len(columns))]
    result = []
    for line in lines:
        result.append(
            "  ".join(v.ljust(w) for v, w in zip(line, widths)).rstrip()
        )
    result.append("")
    result.append(table.get_page_info().summary())
    return "\n".join(result)


@click.group()
@click.option("--debug/--no-debug", default=False)
@click.version_option(__version__, prog_name="dtable")
@click.pass_context
def cli(context: click.Context, debug: bool):
    load_dotenv()
    context.obj = create_context_obj(debug)


@cli.command()
@click.argument("definition", type=click.Path(exists=True, dir_okay=False))
@click.argument("data", type=click.Path(exists=True, dir_okay=False))
@click.option("--search", "search_text", default=None, help="Free text.")
@click.option(
    "--filter",
    "filters",
    multiple=True,
    metavar="KEY=VALUE",
    help="Allowed value of a column; repeat for more values.",
)
@click.option("--sort", default=None, metavar="KEY[:asc|desc]")
@click.option("--page", default=1, type=int, show_default=True)
@click.option(
    "--page-size",
    default=None,
    type=click.IntRange(min=1),
    envvar="DTABLE_PAGE_SIZE",
    help="Rows per page; overrides the definition file.",
)
@click.option("--hide", multiple=True, metavar="KEY", help="Hide a column.")
@click.option(
    "--export",
    "export_dir",
    default=None,
    type=click.Path(file_okay=False),
    help="Write the CSV export into this directory instead of printing.",
)
def query(
    definition: str,
    data: str,
    search_text: Optional[str],
    filters: Tuple[str, ...],
    sort: Optional[str],
    page: int,
    page_size: Optional[int],
    hide: Tuple[str, ...],
    export_dir: Optional[str],
):
    """Search, filter, sort and page the rows of a table."""
    overrides: Dict[str, Any] = {}
    if search_text is not None:
        overrides["search"] = True
    if page_size is not None:
        overrides["page_size"] = page_size
    table = build_table(definition, data, overrides)

    if search_text is not None:
        table.set_search(search_text)

    for key, values in parse_filters(filters).items():
        if not table.set_filter(key, values):
            raise click.BadParameter(
                f"Cannot filter by column {key}", param_hint="--filter"
            )

    sort_key, direction = parse_sort(sort)
    if sort_key is not None and not table.set_sort(sort_key, direction):
        raise click.BadParameter(
            f"Cannot sort by column {sort_key}", param_hint="--sort"
        )

    for key in hide:
        if not table.set_visibility(key, False):
            logger.warning("Column %s stays visible", key)

    if export_dir is not None:
        path = table.download(FileSink(directory=export_dir))
        click.echo(path)
        return

    table.set_page(page)
    click.echo(format_page(table))


@cli.command()
@click.argument("definition", type=click.Path(exists=True, dir_okay=False))
@click.argument("data", type=click.Path(exists=True, dir_okay=False))
@click.argument("key")
def distinct(definition: str, data: str, key: str):
    """List the values that can be used to filter a column."""
    table = build_table(definition, data)
    if key not in table.columns:
        raise click.BadParameter(
            f"No column {key}; valid keys are "
            f"{', '.join(table.columns.keys)}",
            param_hint="KEY",
        )
    for value in table.get_distinct_values(key):
        click.echo(value)


@cli.command(name="columns")
@click.argument("definition", type=click.Path(exists=True, dir_okay=False))
def list_columns(definition: str):
    """Describe the columns declared in a definition file."""
    for column in load_columns(definition):
        for line in format_column(column):
            click.echo(line)


if __name__ == "__main__":
    cli()

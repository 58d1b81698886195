"""CSV export of the rows of a table.

Creating the CSV text is pure (`to_csv`, `export_payload`). Delivering it
is left to a `DownloadSink`, the platform-specific part that saves the file
or hands it to a browser.
"""

import csv
import io
import logging
import os
from datetime import date
from typing import Any, Iterable, Optional, Protocol, Sequence

from attrs import define, field

from dtable.column import DtColumn
from dtable.constants import (
    CSV_BOM,
    CSV_LINE_TERMINATOR,
    CSV_MIME_TYPE,
    EXPORT_FILENAME_TEMPLATE,
)
from dtable.normalize import to_text

logger = logging.getLogger(__name__)


def to_csv(rows: Iterable[Any], columns: Sequence[DtColumn]) -> str:
    """Serialize rows as CSV.

    The first record holds the names of the columns. Every field is
    enclosed in double quotes and quotes inside a field are doubled.

    Args:
        rows: The rows to write, in order.
        columns: The columns to write, in order.

    Returns:
        The CSV text. With no rows only the header record is produced.
    """
    buf = io.StringIO()
    writer = csv.writer(
        buf,
        quoting=csv.QUOTE_ALL,
        lineterminator=CSV_LINE_TERMINATOR,
    )
    writer.writerow([c.name for c in columns])
    count = 0
    for row in rows:
        writer.writerow([to_text(c.value(row)) for c in columns])
        count += 1
    logger.debug("Exported %d rows and %d columns", count, len(columns))
    return buf.getvalue()


def export_payload(rows: Iterable[Any], columns: Sequence[DtColumn]) -> str:
    """The CSV text prefixed by the UTF-8 byte order mark."""
    return CSV_BOM + to_csv(rows, columns)


def default_filename(day: Optional[date] = None) -> str:
    """The name of the export file, e.g. `table-export-2024-05-31.csv`.

    Args:
        day: The date to embed. Defaults to today.
    """
    day = day or date.today()
    return EXPORT_FILENAME_TEMPLATE.format(day=day.isoformat())


@define(frozen=True)
class CsvDownload:
    """A CSV file ready to be delivered.

    Attributes:
        payload: The CSV text, including the byte order mark.
        filename: The suggested file name.
        mime_type: The media type of the content.
    """

    payload: str
    filename: str = field(factory=default_filename)
    mime_type: str = field(default=CSV_MIME_TYPE)

    def as_bytes(self) -> bytes:
        """The payload encoded as UTF-8."""
        return self.payload.encode("utf-8")


class DownloadSink(Protocol):
    """Delivers a file created by the table."""

    def __call__(self, download: CsvDownload) -> Any:
        """Deliver the file.

        Args:
            download: The content and the suggested name of the file.

        Returns:
            Whatever identifies the delivered file for the sink, like a path.
        """
        ...


@define
class FileSink:
    """Writes downloads into a directory.

    Attributes:
        directory: The directory where files are created. It is created if
            it does not exist.
    """

    directory: str = field(default=".")

    def __call__(self, download: CsvDownload) -> str:
        os.makedirs(self.directory, exist_ok=True)
        path = os.path.join(self.directory, download.filename)
        with open(path, "wb") as f:
            f.write(download.as_bytes())
        logger.info("Saved %s", path)
        return path

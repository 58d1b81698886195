"""Slicing of the working rows into fixed-size pages."""

import math
from typing import Any, Dict, List, Sequence

from attrs import define, field

from dtable.utils import count_label


def total_pages(row_count: int, page_size: int) -> int:
    """The number of pages needed for a number of rows.

    An empty set still has one (empty) page.

    Raises:
        ValueError: If the page size is smaller than one.
    """
    if page_size < 1:
        raise ValueError(f"Page size must be at least 1, got {page_size}")
    return max(1, math.ceil(row_count / page_size))


def clamp_page(page: int, pages: int) -> int:
    """Bring a requested page number inside `[1, pages]`."""
    return max(1, min(int(page), pages))


@define(frozen=True)
class PageSlice:
    """The rows of one page.

    Attributes:
        page_rows: The rows on the page.
        total_pages: The number of pages; at least one.
        clamped_page: The page that was actually selected.
    """

    page_rows: List[Any] = field(factory=list)
    total_pages: int = field(default=1)
    clamped_page: int = field(default=1)


def paginate(rows: Sequence[Any], page_size: int, page: int) -> PageSlice:
    """Select one page of rows.

    Requests outside the valid range are clamped rather than rejected:
    page `0` is the first page and a page past the end is the last one.

    Args:
        rows: The ordered rows.
        page_size: The number of rows per page.
        page: The 1-based page number requested.
    """
    pages = total_pages(len(rows), page_size)
    crt = clamp_page(page, pages)
    start = (crt - 1) * page_size
    return PageSlice(
        page_rows=list(rows[start : start + page_size]),
        total_pages=pages,
        clamped_page=crt,
    )


@define(frozen=True)
class PageInfo:
    """Information about the current page.

    Attributes:
        page: The current (clamped) page, 1-based.
        total_pages: The number of pages; at least one.
        page_size: The number of rows per page.
        total_rows: The number of rows across all pages.
        start: The 1-based position of the first row on the page, or zero
            when there are no rows.
        end: The 1-based position of the last row on the page, or zero when
            there are no rows.
    """

    page: int
    total_pages: int
    page_size: int
    total_rows: int = 0
    start: int = 0
    end: int = 0

    @classmethod
    def create(cls, page: int, page_size: int, total_rows: int) -> "PageInfo":
        """Compute the page information for a clamped page."""
        pages = total_pages(total_rows, page_size)
        crt = clamp_page(page, pages)
        if total_rows == 0:
            start = end = 0
        else:
            start = (crt - 1) * page_size + 1
            end = min(crt * page_size, total_rows)
        return cls(
            page=crt,
            total_pages=pages,
            page_size=page_size,
            total_rows=total_rows,
            start=start,
            end=end,
        )

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    def summary(self) -> str:
        """A sentence like `Showing 1 to 10 of 25 entries`."""
        if self.total_rows == 0:
            return "No results found"
        return (
            f"Showing {self.start} to {self.end} of "
            f"{count_label(self.total_rows, 'entry')}"
        )

    def as_dict(self) -> Dict[str, Any]:
        return {
            "page": self.page,
            "total_pages": self.total_pages,
            "page_size": self.page_size,
        }

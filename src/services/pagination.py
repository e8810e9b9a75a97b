"""Page slicing over an in-memory sequence."""
import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class PageWindow(Generic[T]):
    """One resolved page: its position, offsets (inclusive) and rows."""

    current: int
    count: int
    total: int
    per_page: int
    start_offset: int
    end_offset: int
    rows: list[T]


def parse_page(requested: int | str | None) -> int:
    """Parse a requested page number; anything non-numeric becomes 1."""
    if isinstance(requested, bool):
        return 1
    if isinstance(requested, int):
        return requested
    if requested is None:
        return 1
    try:
        return int(requested.strip())
    except ValueError:
        return 1


class ArrayPagination(Generic[T]):
    """
    Paginates a sequence of rows.

    Holds no state besides the rows and page size; every call to paginate()
    derives a fresh PageWindow.
    """

    def __init__(self, rows: Sequence[T], per_page: int) -> None:
        if per_page < 1:
            raise ValueError(f"per_page must be at least 1, got {per_page}")
        self._rows = rows
        self._per_page = per_page

    @property
    def rows_count(self) -> int:
        return len(self._rows)

    @property
    def per_page(self) -> int:
        return self._per_page

    @property
    def pages_count(self) -> int:
        """Number of pages, at least 1 even without rows."""
        return max(1, math.ceil(self.rows_count / self._per_page))

    def paginate(self, requested_page: int | str | None) -> PageWindow[T]:
        """
        Resolve a requested page.

        Missing or non-numeric input and pages below 1 resolve to page 1;
        pages past the end resolve to the last page.
        """
        current = min(max(parse_page(requested_page), 1), self.pages_count)
        start_offset = (current - 1) * self._per_page
        if self.rows_count == 0:
            end_offset = start_offset
            rows: list[T] = []
        else:
            end_offset = min(start_offset + self._per_page, self.rows_count) - 1
            rows = list(self._rows[start_offset:end_offset + 1])
        return PageWindow(
            current=current,
            count=self.pages_count,
            total=self.rows_count,
            per_page=self._per_page,
            start_offset=start_offset,
            end_offset=end_offset,
            rows=rows,
        )

"""Paged query results."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from suave_db.errors import ArgumentError

__all__ = ["PagedList", "page_window"]

T = TypeVar("T")


def page_window(page_size: int, page_number: int) -> tuple[int, int]:
    """
    Compute the 1-based row window of a page.

    Parameters
    ----------
    page_size : int
        Rows per page
    page_number : int
        1-based page number

    Returns
    -------
    tuple[int, int]
        ``(first_row, last_row)``, both inclusive

    Raises
    ------
    ArgumentError
        If either argument is below 1

    Examples
    --------
    >>> page_window(4, 2)
    (5, 8)
    """
    if page_size < 1:
        msg = f"Page size must be at least 1, got {page_size}."
        raise ArgumentError(msg)
    if page_number < 1:
        msg = f"Page number must be at least 1, got {page_number}."
        raise ArgumentError(msg)

    first_row = (page_number - 1) * page_size + 1
    return first_row, first_row + page_size - 1


@dataclass
class PagedList(Generic[T]):
    """
    One page of rows plus paging information.

    Examples
    --------
    >>> page = context.read_page(City, None, None, page_size=4, page_number=1)
    >>> page.total_rows, page.total_pages, page.has_next
    (8, 2, True)
    """

    rows: list[T] = field(default_factory=list)
    total_rows: int = 0
    total_pages: int = 0
    has_previous: bool = False
    has_next: bool = False

    @classmethod
    def build(
        cls, rows: list[T], total_rows: int, page_size: int, page_number: int
    ) -> PagedList[T]:
        """Assemble a page from its rows and the unpaged row count."""
        first_row, last_row = page_window(page_size, page_number)
        return cls(
            rows=rows,
            total_rows=total_rows,
            total_pages=math.ceil(total_rows / page_size),
            has_previous=first_row > 1,
            has_next=last_row < total_rows,
        )

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self):
        return iter(self.rows)

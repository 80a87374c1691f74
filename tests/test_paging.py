"""Tests for page windows and paged results."""

from __future__ import annotations

import pytest

from suave_db import ArgumentError, PagedList
from suave_db.paging import page_window


class TestPageWindow:
    """Test row window computation."""

    @pytest.mark.parametrize(
        ("page_size", "page_number", "expected"),
        [(10, 1, (1, 10)), (10, 3, (21, 30)), (1, 1, (1, 1)), (4, 2, (5, 8))],
    )
    def test_window(self, page_size, page_number, expected) -> None:
        assert page_window(page_size, page_number) == expected

    @pytest.mark.parametrize(("page_size", "page_number"), [(0, 1), (10, 0), (-1, -1)])
    def test_invalid(self, page_size, page_number) -> None:
        """Test sizes and numbers below one are rejected."""
        with pytest.raises(ArgumentError):
            page_window(page_size, page_number)


class TestPagedList:
    """Test paging information."""

    def test_middle_page(self) -> None:
        page = PagedList.build(["f", "g", "h", "i", "j"], 12, page_size=5, page_number=2)
        assert page.total_rows == 12
        assert page.total_pages == 3
        assert page.has_previous
        assert page.has_next
        assert len(page) == 5
        assert list(page) == ["f", "g", "h", "i", "j"]

    def test_last_page(self) -> None:
        page = PagedList.build(["k", "l"], 12, page_size=5, page_number=3)
        assert page.has_previous
        assert not page.has_next

    def test_exact_fit(self) -> None:
        """Test a full last page has no next page."""
        page = PagedList.build(list(range(5)), 10, page_size=5, page_number=2)
        assert page.total_pages == 2
        assert not page.has_next

    def test_empty(self) -> None:
        page = PagedList.build([], 0, page_size=5, page_number=1)
        assert page.total_pages == 0
        assert not page.has_previous
        assert not page.has_next

"""
Tests for pagination arithmetic.
"""

import pytest

from linkeun_api.pagination import (
    PageParams,
    calculate_offset,
    calculate_total_pages,
    normalize,
)


@pytest.mark.parametrize(
    "page,limit,offset",
    [(1, 10, 0), (2, 10, 10), (3, 25, 50), (7, 1, 6)],
)
def test_offset(page, limit, offset):
    """Test offset calculation."""
    assert calculate_offset(page, limit) == offset


@pytest.mark.parametrize(
    "total,limit,pages",
    [(0, 10, 0), (1, 10, 1), (10, 10, 1), (11, 10, 2), (25, 10, 3)],
)
def test_total_pages(total, limit, pages):
    """Test total page calculation."""
    assert calculate_total_pages(total, limit) == pages


def test_total_pages_rejects_non_positive_limit():
    """Test a non-positive limit is rejected."""
    with pytest.raises(ValueError):
        calculate_total_pages(10, 0)


def test_normalize_clamps_to_bounds():
    """Test page and limit normalization."""
    assert normalize(None, None) == (1, 10)
    assert normalize(0, -5) == (1, 10)
    assert normalize(3, 500) == (3, 100)
    assert normalize(2, 20, default_limit=5, max_limit=50) == (2, 20)
    assert normalize(1, 0, default_limit=5, max_limit=50) == (1, 5)


def test_first_of_three_pages():
    """Test navigation on the first of three pages."""
    params = PageParams.create(1, 10).with_total(25)
    assert params.total_pages == 3
    assert params.has_next_page is True
    assert params.has_previous_page is False
    assert params.offset == 0
    assert params.next_page == 2
    assert params.previous_page == 1


def test_last_page():
    """Test navigation on the last page."""
    params = PageParams.create(3, 10).with_total(25)
    assert params.offset == 20
    assert params.has_next_page is False
    assert params.has_previous_page is True
    assert params.next_page == 3
    assert params.previous_page == 2


def test_page_past_the_end_is_kept():
    """Test a page past the end is kept as requested."""
    params = PageParams.create(9, 10).with_total(25)
    assert params.page == 9
    assert params.has_next_page is False


def test_empty_collection():
    """Test pagination of an empty collection."""
    params = PageParams.create(1, 10).with_total(0)
    assert params.total_pages == 0
    assert params.has_next_page is False


def test_dict_conversion():
    """Test pagination serializes to a dict."""
    params = PageParams.create(2, 5).with_total(12)
    assert params.to_dict() == {"page": 2, "limit": 5, "total_items": 12, "total_pages": 3}
    assert PageParams.from_dict(params.to_dict()) == params

"""
Name: Pagination Helper Tests
"""

from __future__ import annotations

import pytest

from users_api.crosscutting.pagination import build_page_info, page_offset

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "page, limit, expected", [(1, 10, 0), (2, 10, 10), (3, 25, 50), (0, 10, 0)]
)
def test_page_offset(page, limit, expected):
    assert page_offset(page, limit) == expected


@pytest.mark.parametrize(
    "page, limit, total, pages, has_next, has_prev",
    [
        (1, 10, 0, 0, False, False),
        (1, 10, 10, 1, False, False),
        (1, 10, 11, 2, True, False),
        (2, 10, 11, 2, False, True),
        (7, 10, 11, 2, False, True),
    ],
)
def test_build_page_info(page, limit, total, pages, has_next, has_prev):
    info = build_page_info(page=page, limit=limit, total=total)

    assert info.total_pages == pages
    assert info.has_next_page is has_next
    assert info.has_prev_page is has_prev


def test_page_info_to_dict_keys():
    info = build_page_info(page=1, limit=10, total=3)

    assert info.to_dict() == {
        "currentPage": 1,
        "totalPages": 1,
        "totalUsers": 3,
        "hasNextPage": False,
        "hasPrevPage": False,
        "limit": 10,
    }

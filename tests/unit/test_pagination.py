"""
Tests for jobboard.core.applicants.pagination.
"""

import math

import pytest

from jobboard.core.applicants.pagination import Page, paginate


class TestPaginate:
    def test_first_page(self):
        page = paginate(list(range(45)), page=1, limit=20)
        assert page.items == list(range(20))
        assert page.total == 45
        assert page.total_pages == 3
        assert page.has_next is True
        assert page.has_prev is False

    def test_last_partial_page(self):
        page = paginate(list(range(45)), page=3, limit=20)
        assert page.items == list(range(40, 45))
        assert page.has_next is False
        assert page.has_prev is True

    def test_page_past_the_end_is_empty(self):
        page = paginate(list(range(5)), page=4, limit=2)
        assert page.items == []
        assert page.total == 5
        assert page.has_next is False

    def test_empty_input(self):
        page = paginate([], page=1, limit=20)
        assert page.items == []
        assert page.total_pages == 0
        assert page.has_next is False
        assert page.has_prev is False

    def test_exact_multiple(self):
        page = paginate(list(range(40)), page=2, limit=20)
        assert page.total_pages == 2
        assert page.has_next is False

    @pytest.mark.parametrize("page_number,limit", [(0, 10), (1, 0), (-1, 5)])
    def test_rejects_non_positive(self, page_number, limit):
        with pytest.raises(ValueError):
            paginate([1, 2, 3], page=page_number, limit=limit)

    @pytest.mark.parametrize("total", [0, 1, 7, 20, 21, 99])
    @pytest.mark.parametrize("limit", [1, 3, 20])
    def test_invariants(self, total, limit):
        items = list(range(total))
        seen = []
        for number in range(1, math.ceil(total / limit) + 2):
            page = paginate(items, page=number, limit=limit)
            assert page.skip == (number - 1) * limit
            assert page.total_pages == math.ceil(total / limit)
            assert page.has_next == (number * limit < total)
            assert page.has_prev == (number > 1)
            assert len(page.items) <= limit
            seen.extend(page.items)
        # Pages partition the input in order
        assert seen == items


class TestPageInfo:
    def test_info_mirrors_page(self):
        info = Page(items=[1, 2], page=2, limit=2, total=5).info()
        assert info.page == 2
        assert info.total_pages == 3
        assert info.has_next is True
        assert info.has_prev is True

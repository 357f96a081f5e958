"""Tests for limit/page clamping."""

import pytest

from pageforge.pagination.bounds import PageWindow, normalize_bounds


class TestNormalizeBounds:
    """Tests for normalize_bounds."""

    def test_defaults_when_nothing_requested(self):
        """Should fall back to limit 10 on page 1."""
        window = normalize_bounds(None, None)

        assert window == PageWindow(limit=10, page=1)
        assert window.offset == 0

    @pytest.mark.parametrize("limit", [1, 2, 10, 99, 100, 101, 500, 1000])
    @pytest.mark.parametrize("max_limit", [1, 5, 100, 1000])
    def test_limit_is_clamped_to_max(self, limit, max_limit):
        """Effective limit is min(max(1, limit), max(1, max_limit))."""
        window = normalize_bounds(limit, 1, max_limit)

        assert window.limit == min(max(1, limit), max(1, max_limit))

    @pytest.mark.parametrize("limit", [0, -1, -100])
    def test_non_positive_limit_becomes_one(self, limit):
        """Should clamp zero and negative limits to 1."""
        assert normalize_bounds(limit, 1).limit == 1

    @pytest.mark.parametrize("max_limit", [0, -5])
    def test_non_positive_max_limit_acts_as_one(self, max_limit):
        """Should never produce a limit below 1, even with a bad maximum."""
        assert normalize_bounds(50, 1, max_limit).limit == 1

    @pytest.mark.parametrize("page", [0, -1, -42])
    def test_non_positive_page_becomes_first(self, page):
        """Should clamp page numbers below 1 to page 1."""
        assert normalize_bounds(10, page).page == 1

    def test_offset_from_page_and_limit(self):
        """Offset is (page - 1) * limit."""
        window = normalize_bounds(25, 4)

        assert window.offset == 75

    def test_custom_default_limit(self):
        """Should use the supplied default when no limit is requested."""
        assert normalize_bounds(None, 1, default_limit=20).limit == 20

    def test_default_limit_is_clamped_too(self):
        """A default above the maximum is still capped."""
        assert normalize_bounds(None, 1, max_limit=5, default_limit=20).limit == 5

    @pytest.mark.parametrize("limit", [1, 10, 100])
    def test_huge_page_keeps_offset_in_64_bits(self, limit):
        """Pages too large for a database offset are capped, never rejected."""
        window = normalize_bounds(limit, 99999999999999999999)

        assert window.offset <= 2**63 - 1
        assert window.offset > 2**63 - 1 - limit
        assert window.page > 1

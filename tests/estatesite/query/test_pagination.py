"""
Tests for Paginator

Tests page parameter coercion, pagination metadata and page fetches.
"""
import pytest

from src.estatesite.db.models import Property
from src.estatesite.exceptions import ValidationError
from src.estatesite.query.normalizer import PropertyFilters
from src.estatesite.query.pagination import (
    MAX_ROW_OFFSET,
    PageRequest,
    Pagination,
    paginate,
    parse_page_request,
    parse_sort,
)
from src.estatesite.query.predicates import build_property_predicate
from src.estatesite.db.repository import newest_first


class TestParsePageRequest:
    def test_defaults(self):
        page_request = parse_page_request({}, default_limit=12)

        assert page_request == PageRequest(page=1, limit=12)
        assert page_request.skip == 0

    def test_string_values(self):
        page_request = parse_page_request({"page": "3", "limit": "10"}, default_limit=12)

        assert page_request.skip == 20

    def test_non_positive_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_page_request({"page": "0"}, default_limit=12)
        assert exc_info.value.field == "page"

        with pytest.raises(ValidationError) as exc_info:
            parse_page_request({"limit": "-5"}, default_limit=12)
        assert exc_info.value.field == "limit"

    def test_limit_cap(self):
        assert parse_page_request({"limit": "100"}, 12, max_limit=100).limit == 100

        with pytest.raises(ValidationError) as exc_info:
            parse_page_request({"limit": "101"}, 12, max_limit=100)
        assert exc_info.value.field == "limit"

    def test_offset_overflow_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_page_request({"page": "100000000000000000000"}, default_limit=12)
        assert exc_info.value.field == "page"

        with pytest.raises(ValidationError) as exc_info:
            parse_page_request({"limit": str(MAX_ROW_OFFSET + 1)}, default_limit=12)
        assert exc_info.value.field == "limit"

    def test_largest_offset_accepted(self):
        page_request = parse_page_request({"page": str(MAX_ROW_OFFSET + 1), "limit": "1"}, default_limit=12)

        assert page_request.skip == MAX_ROW_OFFSET

    def test_non_numeric_rejected(self):
        with pytest.raises(ValidationError):
            parse_page_request({"page": "two"}, default_limit=12)


class TestPagination:
    """Pagination metadata math."""

    def test_middle_page(self):
        pagination = Pagination.build(25, PageRequest(page=2, limit=10))

        assert pagination.total_pages == 3
        assert pagination.has_next_page is True
        assert pagination.has_prev_page is True

    def test_last_page(self):
        pagination = Pagination.build(25, PageRequest(page=3, limit=10))

        assert pagination.has_next_page is False
        assert pagination.has_prev_page is True

    def test_exact_multiple(self):
        assert Pagination.build(20, PageRequest(page=1, limit=10)).total_pages == 2

    def test_empty(self):
        pagination = Pagination.build(0, PageRequest(page=1, limit=12))

        assert pagination.total_pages == 0
        assert pagination.has_next_page is False
        assert pagination.has_prev_page is False

    def test_page_past_the_end(self):
        pagination = Pagination.build(5, PageRequest(page=4, limit=12))

        assert pagination.current_page == 4
        assert pagination.has_next_page is False
        assert pagination.has_prev_page is True

    def test_to_dict_keys(self):
        assert set(Pagination.build(1, PageRequest()).to_dict()) == {
            "total", "current_page", "total_pages", "limit", "has_next_page", "has_prev_page",
        }


class TestPaginate:
    def test_fetch_and_count_share_predicate(self, test_db, make_property):
        for index in range(5):
            make_property(title=f"Dubai {index}", city="Dubai")
        make_property(title="Sharjah", city="Sharjah")

        page = paginate(
            test_db,
            Property,
            build_property_predicate(PropertyFilters(city="Dubai")),
            PageRequest(page=2, limit=2),
            order_by=newest_first(Property),
        )

        assert page.pagination.total == 5
        assert page.pagination.total_pages == 3
        assert [prop.title for prop in page.items] == ["Dubai 2", "Dubai 1"]

    def test_past_the_end_is_empty(self, test_db, make_property):
        make_property()

        page = paginate(test_db, Property, build_property_predicate(PropertyFilters()), PageRequest(page=3, limit=12))

        assert page.items == []
        assert page.pagination.total == 1


class TestParseSort:
    columns = {"createdAt": Property.created_at, "title": Property.title}

    def test_default_is_newest_first(self):
        (expression,) = parse_sort(None, None, self.columns)

        assert "DESC" in str(expression)

    def test_ascending_with_tie_breaker(self):
        expressions = parse_sort("title", "asc", self.columns, tie_breaker=Property.id)

        assert len(expressions) == 2
        assert all("ASC" in str(expression) for expression in expressions)

    def test_unknown_field(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_sort("price; drop table", None, self.columns)

        assert exc_info.value.field == "sortBy"

    def test_unknown_direction(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_sort("title", "sideways", self.columns)

        assert exc_info.value.field == "order"

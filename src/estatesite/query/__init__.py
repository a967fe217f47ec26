"""
Query Package

Listing search pipeline: filter normalization, predicate construction,
pagination and result projection.
"""
from src.estatesite.query.normalizer import (
    PropertyFilters,
    BlogFilters,
    normalize_listing_filters,
    normalize_search_form,
    normalize_blog_filters,
)
from src.estatesite.query.predicates import build_property_predicate, build_blog_predicate
from src.estatesite.query.pagination import PageRequest, Pagination, Page, parse_page_request, paginate

__all__ = [
    "PropertyFilters",
    "BlogFilters",
    "normalize_listing_filters",
    "normalize_search_form",
    "normalize_blog_filters",
    "build_property_predicate",
    "build_blog_predicate",
    "PageRequest",
    "Pagination",
    "Page",
    "parse_page_request",
    "paginate",
]

"""
Query Predicate Builder

Composes normalized filters into a single SQLAlchemy boolean clause. Every
present filter is ANDed in; absent filters add nothing. The same clause is
used for the page fetch and the total count.
"""
from sqlalchemy import and_, func, or_, true
from sqlalchemy.sql.elements import ColumnElement

from src.estatesite.db.models import Blog, BlogTag, Property, PropertyAmenity
from src.estatesite.query.normalizer import (
    AmenityMatch,
    BlogFilters,
    PropertyFilters,
    TextMatch,
)

LIKE_ESCAPE = "\\"


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so user input matches literally."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def contains_ci(column, term: str) -> ColumnElement[bool]:
    """Case-insensitive substring match."""
    return column.ilike(f"%{escape_like(term)}%", escape=LIKE_ESCAPE)


def equals_ci(column, term: str) -> ColumnElement[bool]:
    """Case-insensitive whole-value match."""
    return func.lower(column) == term.lower()


def build_property_predicate(filters: PropertyFilters) -> ColumnElement[bool]:
    """
    Build the WHERE clause for a property listing.

    Args:
        filters: Normalized filters

    Returns:
        Composite predicate (a bare TRUE when no filter is set)
    """
    clauses = []

    if filters.city:
        clauses.append(contains_ci(Property.city, filters.city))
    if filters.location:
        clauses.append(contains_ci(Property.location, filters.location))
    if filters.property_type:
        if filters.property_type_match == TextMatch.EXACT:
            clauses.append(equals_ci(Property.property_type, filters.property_type))
        else:
            clauses.append(contains_ci(Property.property_type, filters.property_type))
    if filters.developer:
        clauses.append(contains_ci(Property.developer, filters.developer))

    if filters.property_status:
        clauses.append(equals_ci(Property.property_status, filters.property_status))
    if filters.construction_status:
        clauses.append(equals_ci(Property.construction_status, filters.construction_status))

    if filters.min_price is not None:
        clauses.append(Property.starting_price >= filters.min_price)
    if filters.max_price is not None:
        clauses.append(Property.starting_price <= filters.max_price)
    if filters.bhk_count is not None:
        clauses.append(Property.bhk_count == filters.bhk_count)
    if filters.bath_count is not None:
        clauses.append(Property.bath_count == filters.bath_count)
    if filters.min_area is not None:
        clauses.append(Property.total_area >= filters.min_area)

    for amenity in filters.amenities:
        if filters.amenity_match == AmenityMatch.ALL_EXACT:
            clauses.append(Property.amenity_rows.any(PropertyAmenity.name == amenity))
        else:
            clauses.append(Property.amenity_rows.any(contains_ci(PropertyAmenity.name, amenity)))

    return and_(true(), *clauses)


def build_blog_predicate(filters: BlogFilters) -> ColumnElement[bool]:
    """Category is an exact match; search looks at title OR description."""
    clauses = []

    if filters.category:
        clauses.append(Blog.category == filters.category)
    if filters.search:
        clauses.append(
            or_(
                contains_ci(Blog.title, filters.search),
                contains_ci(Blog.description, filters.search),
            )
        )

    return and_(true(), *clauses)


def blog_suggestion_predicate(term: str) -> ColumnElement[bool]:
    """Autocomplete: title or any tag contains the term."""
    return or_(
        contains_ci(Blog.title, term),
        Blog.tag_rows.any(contains_ci(BlogTag.name, term)),
    )

"""
Listing Filter Normalizer

Converts raw, possibly-stringified filter parameters (query strings and the
public search form) into typed filter objects. Malformed values raise
ValidationError naming the offending field; blank values mean "not provided".
"""
import json
import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Mapping, Optional, Type

from src.estatesite.db.models import ConstructionStatus, PropertyStatus
from src.estatesite.exceptions import ValidationError
from src.estatesite.utils.logger import get_logger

logger = get_logger(__name__)


class TextMatch(str, Enum):
    CONTAINS = "contains"
    EXACT = "exact"


class AmenityMatch(str, Enum):
    # every requested amenity is a case-insensitive substring of some stored amenity
    ANY_PARTIAL = "any_partial"
    # the listing carries every requested amenity verbatim
    ALL_EXACT = "all_exact"


@dataclass(frozen=True)
class PriceRange:
    """Inclusive price bounds; None means unbounded on that side."""
    minimum: Optional[float] = None
    maximum: Optional[float] = None


# Search-form price tokens -> inclusive range
PRICE_ABOVE_TOKEN = "above"
PRICE_ABOVE_FLOOR = 5_000_000
PRICE_BUCKETS = {
    1_000_000: PriceRange(100_000, 1_000_000),
    2_000_000: PriceRange(1_000_000, 2_000_000),
    3_000_000: PriceRange(2_000_000, 3_000_000),
    4_000_000: PriceRange(3_000_000, 4_000_000),
    5_000_000: PriceRange(4_000_000, 5_000_000),
}

SEARCH_TABS = {
    "rent": PropertyStatus.RENT.value,
    "buy": PropertyStatus.BUY.value,
    "offplan": PropertyStatus.OFF_PLAN.value,
}

_FIRST_INT = re.compile(r"(\d+)")


@dataclass
class PropertyFilters:
    """
    Normalized property filters.

    Attributes:
        city: Case-insensitive substring
        location: Case-insensitive substring
        property_type: Case-insensitive substring or exact value (see property_type_match)
        developer: Case-insensitive substring
        property_status: Canonical PropertyStatus value
        construction_status: Canonical ConstructionStatus value
        min_price: Inclusive lower bound on starting price
        max_price: Inclusive upper bound on starting price
        bhk_count: Exact bedroom count
        bath_count: Exact bathroom count
        min_area: Inclusive lower bound on total area
        amenities: Requested amenities
        amenity_match: How requested amenities are matched
    """
    city: Optional[str] = None
    location: Optional[str] = None
    property_type: Optional[str] = None
    property_type_match: TextMatch = TextMatch.CONTAINS
    developer: Optional[str] = None
    property_status: Optional[str] = None
    construction_status: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    bhk_count: Optional[int] = None
    bath_count: Optional[int] = None
    min_area: Optional[float] = None
    amenities: List[str] = field(default_factory=list)
    amenity_match: AmenityMatch = AmenityMatch.ANY_PARTIAL


@dataclass
class BlogFilters:
    category: Optional[str] = None
    search: Optional[str] = None
    newest_first: bool = True


def clean_text(value: Any) -> Optional[str]:
    """Trim a raw value; None and blank strings become None."""
    if value is None:
        return None
    text = value if isinstance(value, str) else str(value)
    text = text.strip()
    return text or None


def parse_number(field_name: str, value: Any) -> Optional[float]:
    """
    Parse a numeric filter.

    Raises:
        ValidationError: If the value is present but not a finite number
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError(field_name, f"{field_name} must be a number")

    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = clean_text(value)
        if text is None:
            return None
        try:
            number = float(text)
        except ValueError:
            raise ValidationError(field_name, f"{field_name} must be a number")

    if not math.isfinite(number):
        raise ValidationError(field_name, f"{field_name} must be a finite number")
    return number


def parse_int(field_name: str, value: Any) -> Optional[int]:
    """Parse an integral filter such as a bedroom count."""
    number = parse_number(field_name, value)
    if number is None:
        return None
    if not number.is_integer():
        raise ValidationError(field_name, f"{field_name} must be a whole number")
    return int(number)


def parse_bool(field_name: str, value: Any) -> Optional[bool]:
    """Parse a "true"/"false" flag; blank means not provided."""
    if value is None or isinstance(value, bool):
        return value
    text = clean_text(value)
    if text is None:
        return None
    lowered = text.lower()
    if lowered in ("true", "1"):
        return True
    if lowered in ("false", "0"):
        return False
    raise ValidationError(field_name, f"{field_name} must be true or false")


def match_enum(field_name: str, value: Any, choices: Type[Enum]) -> Optional[str]:
    """
    Match a value case-insensitively against an enumeration.

    Returns:
        The canonical enumeration value, or None when not provided
    """
    text = clean_text(value)
    if text is None:
        return None
    for member in choices:
        if member.value.lower() == text.lower():
            return member.value
    allowed = ", ".join(member.value for member in choices)
    raise ValidationError(field_name, f"{field_name} must be one of: {allowed}")


def parse_price_bucket(token: Any) -> Optional[PriceRange]:
    """
    Map a search-form price token to a range.

    "above" means 5,000,000 and up; 1,000,000 .. 5,000,000 select the bucket
    ending at that value. Any other token, blank or "Any" adds no constraint.
    """
    text = clean_text(token)
    if text is None or text == "Any":
        return None
    if text == PRICE_ABOVE_TOKEN:
        return PriceRange(PRICE_ABOVE_FLOOR, None)
    try:
        value = float(text)
    except ValueError:
        return None
    return PRICE_BUCKETS.get(value)


def extract_first_int(value: Any) -> Optional[int]:
    """Pull the first integer out of free text such as "3 BHK" or "2 Bath"."""
    text = clean_text(value)
    if text is None:
        return None
    match = _FIRST_INT.search(text)
    if not match:
        return None
    return int(match.group(1))


def parse_area_size(value: Any) -> Optional[float]:
    """
    Minimum-area filter from the search form.

    Non-numeric or non-positive input is ignored rather than rejected.
    """
    text = clean_text(value)
    if text is None:
        return None
    try:
        area = float(text)
    except ValueError:
        logger.debug("area_size_ignored", value=text)
        return None
    if not math.isfinite(area) or area <= 0:
        logger.debug("area_size_ignored", value=text)
        return None
    return area


def parse_string_list(value: Any) -> List[str]:
    """
    Accept a list or a JSON-encoded list.

    A string that is not valid JSON is treated as a single element.
    Items are trimmed and blanks dropped.
    """
    if value is None:
        return []

    items = value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return []
        try:
            items = json.loads(text)
        except json.JSONDecodeError:
            items = [text]

    if isinstance(items, (list, tuple)):
        raw_items = items
    else:
        raw_items = [items]

    cleaned = []
    for item in raw_items:
        if item is None:
            continue
        text = str(item).strip()
        if text:
            cleaned.append(text)
    return cleaned


# Alias kept for readability at call sites dealing with amenities
parse_amenities = parse_string_list


def normalize_listing_filters(params: Mapping[str, Any]) -> PropertyFilters:
    """
    Normalize the query parameters of the property listing endpoint.

    Args:
        params: Raw parameters keyed by their public (camelCase) names

    Returns:
        PropertyFilters with substring text matching and "any partial" amenities

    Raises:
        ValidationError: On malformed numeric or enumeration values
    """
    filters = PropertyFilters(
        city=clean_text(params.get("city")),
        location=clean_text(params.get("location")),
        property_type=clean_text(params.get("propertyType")),
        property_type_match=TextMatch.CONTAINS,
        property_status=match_enum("propertyStatus", params.get("propertyStatus"), PropertyStatus),
        construction_status=match_enum(
            "constructionStatus", params.get("constructionStatus"), ConstructionStatus
        ),
        min_price=parse_number("minPrice", params.get("minPrice")),
        max_price=parse_number("maxPrice", params.get("maxPrice")),
        bhk_count=parse_int("bhkCount", params.get("bhkCount")),
        bath_count=parse_int("bathCount", params.get("bathCount")),
        amenities=parse_amenities(params.get("amenities")),
        amenity_match=AmenityMatch.ANY_PARTIAL,
    )
    logger.debug("listing_filters_normalized", filters=filters)
    return filters


def normalize_search_form(form: Mapping[str, Any]) -> PropertyFilters:
    """
    Normalize the body of the public search form.

    The tab selects the listing status, price is a bucket token, bedrooms and
    bathrooms are free text ("3 BHK"), property type matches exactly and
    amenities must all be present on the listing.

    Raises:
        ValidationError: On an unknown tab
    """
    property_status = None
    tab = clean_text(form.get("tab"))
    if tab is not None and tab.lower() != "all":
        property_status = SEARCH_TABS.get(tab.lower())
        if property_status is None:
            raise ValidationError("tab", "tab must be one of: rent, buy, offplan, all")

    price = parse_price_bucket(form.get("price"))

    filters = PropertyFilters(
        city=clean_text(form.get("city")),
        location=clean_text(form.get("location")),
        property_type=clean_text(form.get("propertyType")),
        property_type_match=TextMatch.EXACT,
        developer=clean_text(form.get("developer")),
        property_status=property_status,
        min_price=price.minimum if price else None,
        max_price=price.maximum if price else None,
        bhk_count=extract_first_int(form.get("bedrooms")),
        bath_count=extract_first_int(form.get("bathrooms")),
        min_area=parse_area_size(form.get("areaSize")),
        amenities=parse_amenities(form.get("amenities")),
        amenity_match=AmenityMatch.ALL_EXACT,
    )
    logger.debug("search_form_normalized", filters=filters)
    return filters


def normalize_blog_filters(params: Mapping[str, Any]) -> BlogFilters:
    """Normalize the blog listing parameters (category, search, sort)."""
    category = clean_text(params.get("category"))
    if category == "All":
        category = None
    sort = clean_text(params.get("sort")) or "newest"
    return BlogFilters(
        category=category,
        search=clean_text(params.get("search")),
        newest_first=sort != "oldest",
    )

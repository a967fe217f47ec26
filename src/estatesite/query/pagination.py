"""
Paginator

Parses page/limit parameters and runs a page fetch plus a count query
against the same predicate.
"""
import math
from dataclasses import asdict, dataclass
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from src.estatesite.exceptions import ValidationError
from src.estatesite.query.normalizer import parse_int
from src.estatesite.utils.logger import get_logger

logger = get_logger(__name__)

# Per-resource default page sizes
PROPERTY_PAGE_SIZE = 12
BLOG_PAGE_SIZE = 9
CONTACT_PAGE_SIZE = 10
LEAD_PAGE_SIZE = 20
SUBSCRIBER_PAGE_SIZE = 50

# Largest OFFSET/LIMIT a signed 64-bit database integer can carry
MAX_ROW_OFFSET = 2 ** 63 - 1


@dataclass(frozen=True)
class PageRequest:
    page: int = 1
    limit: int = PROPERTY_PAGE_SIZE

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class Pagination:
    total: int
    current_page: int
    total_pages: int
    limit: int
    has_next_page: bool
    has_prev_page: bool

    @classmethod
    def build(cls, total: int, page_request: PageRequest) -> "Pagination":
        total_pages = math.ceil(total / page_request.limit)
        return cls(
            total=total,
            current_page=page_request.page,
            total_pages=total_pages,
            limit=page_request.limit,
            has_next_page=page_request.page < total_pages,
            has_prev_page=page_request.page > 1,
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Page:
    items: List[Any]
    pagination: Pagination


def parse_page_request(
    params: Mapping[str, Any],
    default_limit: int,
    max_limit: Optional[int] = None,
) -> PageRequest:
    """
    Coerce page/limit parameters.

    Args:
        params: Raw parameters
        default_limit: Page size when limit is not given
        max_limit: Largest accepted page size (None for no cap)

    Raises:
        ValidationError: If page or limit is not a positive whole number,
            or limit exceeds max_limit or the offset would overflow
    """
    page = parse_int("page", params.get("page"))
    limit = parse_int("limit", params.get("limit"))

    if page is None:
        page = 1
    if limit is None:
        limit = default_limit

    if page < 1:
        raise ValidationError("page", "page must be 1 or greater")
    if limit < 1:
        raise ValidationError("limit", "limit must be 1 or greater")
    if max_limit is not None and limit > max_limit:
        raise ValidationError("limit", f"limit cannot exceed {max_limit}")
    if limit > MAX_ROW_OFFSET:
        raise ValidationError("limit", "limit is too large")
    if (page - 1) * limit > MAX_ROW_OFFSET:
        raise ValidationError("page", "page is out of range")

    return PageRequest(page=page, limit=limit)


def paginate(
    session: Session,
    model,
    predicate: ColumnElement[bool],
    page_request: PageRequest,
    order_by: Sequence[Any] = (),
    options: Iterable[Any] = (),
) -> Page:
    """
    Fetch one page of `model` rows matching `predicate`, with totals.

    Args:
        session: Database session
        model: Mapped class to query
        predicate: WHERE clause shared by the fetch and the count
        page_request: Page and page size
        order_by: ORDER BY expressions
        options: Loader options for the fetch

    Returns:
        Page with the rows and pagination metadata
    """
    stmt = (
        select(model)
        .where(predicate)
        .order_by(*order_by)
        .offset(page_request.skip)
        .limit(page_request.limit)
    )
    for option in options:
        stmt = stmt.options(option)

    items = list(session.execute(stmt).scalars().all())
    total = session.scalar(select(func.count()).select_from(model).where(predicate)) or 0

    pagination = Pagination.build(total, page_request)
    logger.debug(
        "page_fetched",
        model=model.__name__,
        page=page_request.page,
        limit=page_request.limit,
        returned=len(items),
        total=total,
    )
    return Page(items=items, pagination=pagination)


def parse_sort(
    sort_by: Optional[str],
    order: Optional[str],
    columns: Mapping[str, Any],
    default: str = "createdAt",
    tie_breaker: Any = None,
) -> tuple:
    """
    Resolve sortBy/order parameters to ORDER BY expressions.

    Args:
        sort_by: Public (camelCase) field name
        order: "asc" or "desc" (default "desc")
        columns: Public field name -> column
        default: Field used when sort_by is not given
        tie_breaker: Column appended in the same direction for a stable order

    Raises:
        ValidationError: On an unknown field or direction
    """
    key = sort_by or default
    if key not in columns:
        allowed = ", ".join(sorted(columns))
        raise ValidationError("sortBy", f"sortBy must be one of: {allowed}")

    direction = (order or "desc").lower()
    if direction not in ("asc", "desc"):
        raise ValidationError("order", "order must be asc or desc")

    expressions = [columns[key]]
    if tie_breaker is not None:
        expressions.append(tie_breaker)
    if direction == "desc":
        return tuple(column.desc() for column in expressions)
    return tuple(column.asc() for column in expressions)

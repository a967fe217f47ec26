"""
Blogs Router

Endpoints for blog posts, browsing helpers and homepage curation.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from config.settings import settings
from src.estatesite.api.auth import get_current_admin
from src.estatesite.api.dependencies import get_db
from src.estatesite.api.schemas import (
    BlogCollectionResponse,
    BlogCreate,
    BlogHomepageResponse,
    BlogListResponse,
    BlogResponse,
    BlogSuggestionsResponse,
    BlogUpdate,
    CategoriesResponse,
    HomepageBlogsResponse,
    MessageResponse,
    RelatedBlogsResponse,
)
from src.estatesite.db.models import Admin, Blog
from src.estatesite.db.repository import BlogRepository
from src.estatesite.exceptions import ValidationError
from src.estatesite.query import (
    build_blog_predicate,
    normalize_blog_filters,
    paginate,
    parse_page_request,
)
from src.estatesite.query.pagination import BLOG_PAGE_SIZE
from src.estatesite.query.predicates import blog_suggestion_predicate
from src.estatesite.query.projection import (
    blog_card,
    blog_detail,
    blog_suggestion,
    homepage_blog_card,
    homepage_flag,
)
from src.estatesite.services.homepage import BLOG_HOMEPAGE_SLOTS, blog_curator
from src.estatesite.transformers.blog_fields import format_blog_date
from src.estatesite.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/blogs", tags=["blogs"])

repository = BlogRepository()

# Shortest autocomplete query
MIN_SUGGESTION_QUERY = 2


def _display_date(value: str) -> str:
    formatted = format_blog_date(value)
    if formatted is None:
        raise ValidationError("date", "Invalid date format")
    return formatted


@router.post("/", response_model=BlogResponse, status_code=status.HTTP_201_CREATED)
def create_blog(
    payload: BlogCreate,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    """
    Create a blog post.

    The date may be given in any common format and is stored as DD-MM-YYYY.

    Raises:
        ValidationError: If the date cannot be understood
    """
    fields = payload.model_dump()
    fields["date"] = _display_date(payload.date)
    blog = repository.create(db, is_on_home_page=False, **fields)
    db.commit()

    logger.info("blog_created", id=blog.id, admin_id=current_admin.id)
    return {"success": True, "message": "Blog created successfully", "blog": blog_detail(blog)}


@router.get("/", response_model=BlogCollectionResponse)
def list_all_blogs(db: Session = Depends(get_db)):
    """All blog posts, newest first."""
    blogs = repository.get_all(db)
    return {"success": True, "count": len(blogs), "blogs": [blog_detail(blog) for blog in blogs]}


@router.get("/pagination", response_model=BlogListResponse)
def list_blogs_paginated(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    category: Optional[str] = Query(None, description='Exact category; "All" disables the filter'),
    search: Optional[str] = Query(None, description="Substring of title or description"),
    sort: Optional[str] = Query(None, description='"newest" (default) or "oldest"'),
    db: Session = Depends(get_db),
):
    """
    Browse blog posts with category, search, sort and pagination.

    Returns:
        Blog cards with pagination metadata
    """
    params = {"page": page, "limit": limit, "category": category, "search": search, "sort": sort}
    filters = normalize_blog_filters(params)
    page_request = parse_page_request(params, BLOG_PAGE_SIZE, settings.max_page_limit)

    if filters.newest_first:
        order_by = (Blog.created_at.desc(), Blog.id.desc())
    else:
        order_by = (Blog.created_at.asc(), Blog.id.asc())

    result = paginate(db, Blog, build_blog_predicate(filters), page_request, order_by=order_by)
    return {
        "success": True,
        "blogs": [blog_card(blog) for blog in result.items],
        "pagination": result.pagination.to_dict(),
    }


@router.get("/homepage", response_model=HomepageBlogsResponse)
def get_homepage_blogs(db: Session = Depends(get_db)):
    """Blog posts featured on the homepage (may be empty)."""
    blogs = repository.get_homepage(db, BLOG_HOMEPAGE_SLOTS)
    return {
        "success": True,
        "count": len(blogs),
        "blogs": [homepage_blog_card(blog) for blog in blogs],
    }


@router.get("/meta/categories", response_model=CategoriesResponse)
def get_categories(db: Session = Depends(get_db)):
    """Distinct non-empty categories in alphabetical order."""
    return {"success": True, "categories": repository.get_categories(db)}


@router.get("/related/category", response_model=RelatedBlogsResponse)
def get_related_blogs(
    category: Optional[str] = Query(None),
    exclude: Optional[int] = Query(None, description="Blog id to leave out"),
    limit: int = Query(2, ge=1, le=20),
    db: Session = Depends(get_db),
):
    """
    Other posts in the same category.

    Raises:
        ValidationError: If category is missing
    """
    if not category or not category.strip():
        raise ValidationError("category", "Category is required")

    blogs = repository.get_related(db, category.strip(), exclude_id=exclude, limit=limit)
    return {"success": True, "blogs": [blog_card(blog) for blog in blogs]}


@router.get("/search/query", response_model=BlogSuggestionsResponse)
def search_blogs(
    q: Optional[str] = Query(None),
    limit: int = Query(5, ge=1, le=20),
    db: Session = Depends(get_db),
):
    """
    Autocomplete suggestions matching a title or any tag.

    Raises:
        ValidationError: If the query is shorter than two characters
    """
    term = (q or "").strip()
    if len(term) < MIN_SUGGESTION_QUERY:
        raise ValidationError("q", "Search query must be at least 2 characters")

    blogs = repository.search(db, blog_suggestion_predicate(term), limit)
    return {"success": True, "results": [blog_suggestion(blog) for blog in blogs]}


@router.get("/{blog_id}", response_model=BlogResponse)
def get_blog(blog_id: int, db: Session = Depends(get_db)):
    """
    Full blog post.

    Raises:
        NotFoundError: If the blog does not exist
    """
    blog = repository.get_or_raise(db, blog_id)
    return {"success": True, "blog": blog_detail(blog)}


@router.put("/{blog_id}", response_model=BlogResponse)
def update_blog(
    blog_id: int,
    payload: BlogUpdate,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    """
    Update the supplied fields of a blog post.

    Raises:
        NotFoundError: If the blog does not exist
        ValidationError: If a supplied date cannot be understood
    """
    updates = payload.model_dump(exclude_unset=True)
    # only category may be cleared
    updates = {key: value for key, value in updates.items() if value is not None or key == "category"}
    if "date" in updates:
        updates["date"] = _display_date(updates["date"])

    blog = repository.update(db, blog_id, **updates)
    db.commit()

    logger.info("blog_updated", id=blog_id, admin_id=current_admin.id, fields=sorted(updates.keys()))
    return {"success": True, "message": "Blog updated successfully", "blog": blog_detail(blog)}


@router.delete("/{blog_id}", response_model=MessageResponse)
def delete_blog(
    blog_id: int,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    """
    Delete a blog post.

    Raises:
        NotFoundError: If the blog does not exist
    """
    repository.delete(db, blog_id)
    db.commit()

    logger.info("blog_deleted", id=blog_id, admin_id=current_admin.id)
    return {"success": True, "message": "Blog deleted successfully"}


@router.patch("/{blog_id}/add-to-home", response_model=BlogHomepageResponse)
def add_blog_to_homepage(
    blog_id: int,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    """
    Feature a blog post on the homepage (at most 3).

    Raises:
        NotFoundError: If the blog does not exist
        AlreadyInStateError: If it is already featured
        CapacityExceededError: If all homepage slots are taken
    """
    change = blog_curator(db).add(blog_id)
    db.commit()
    return {
        "success": True,
        "message": "Blog added to homepage successfully",
        "blog": homepage_flag(change.record),
        "homepage_count": change.homepage_count,
    }


@router.patch("/{blog_id}/remove-from-home", response_model=BlogHomepageResponse)
def remove_blog_from_homepage(
    blog_id: int,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    """
    Take a blog post off the homepage.

    Raises:
        NotFoundError: If the blog does not exist
        AlreadyInStateError: If it is not featured
    """
    change = blog_curator(db).remove(blog_id)
    db.commit()
    return {
        "success": True,
        "message": "Blog removed from homepage successfully",
        "blog": homepage_flag(change.record),
        "homepage_count": change.homepage_count,
    }

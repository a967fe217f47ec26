"""
Callback Requests Router

Endpoints for "call me back about this property" requests.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import and_, true
from sqlalchemy.orm import Session

from config.settings import settings
from src.estatesite.api.auth import get_current_admin
from src.estatesite.api.dependencies import get_db
from src.estatesite.api.schemas import (
    CallbackCreate,
    CallbackListResponse,
    CallbackResponse,
    CallbackStatsResponse,
    CallbackUpdate,
    MessageResponse,
)
from src.estatesite.db.models import Admin, CallbackRequest, CallbackStatus
from src.estatesite.db.repository import CallbackRepository, PropertyRepository, days_ago
from src.estatesite.query.normalizer import match_enum, parse_int
from src.estatesite.query.pagination import LEAD_PAGE_SIZE, paginate, parse_page_request, parse_sort
from src.estatesite.query.projection import callback_view
from src.estatesite.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/callbacks", tags=["callbacks"])

repository = CallbackRepository()
properties = PropertyRepository()

CALLBACK_SORT_COLUMNS = {
    "createdAt": CallbackRequest.created_at,
    "updatedAt": CallbackRequest.updated_at,
    "status": CallbackRequest.status,
    "name": CallbackRequest.name,
}

# Window of the "recent requests" statistic
RECENT_DAYS = 30
TOP_PROPERTIES = 5


@router.post("/", response_model=CallbackResponse, status_code=status.HTTP_201_CREATED)
def create_callback_request(payload: CallbackCreate, db: Session = Depends(get_db)):
    """
    Ask to be called back about a property.

    Raises:
        NotFoundError: If the property does not exist
    """
    properties.get_or_raise(db, payload.property_id)

    callback = repository.create(db, **payload.model_dump())
    db.commit()

    logger.info("callback_requested", id=callback.id, property_id=callback.property_id)
    return {
        "success": True,
        "message": "Callback request submitted successfully! We'll contact you soon.",
        "callback_request": callback_view(callback),
    }


@router.get("/", response_model=CallbackListResponse)
def list_callback_requests(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
    property_id: Optional[str] = Query(None, alias="propertyId"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    order: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    """
    List callback requests with their property summary.

    Returns:
        Requests, pagination and the number of requests per status
    """
    page_request = parse_page_request({"page": page, "limit": limit}, LEAD_PAGE_SIZE, settings.max_page_limit)
    status_value = match_enum("status", status_filter, CallbackStatus)
    property_value = parse_int("propertyId", property_id)

    clauses = []
    if status_value is not None:
        clauses.append(CallbackRequest.status == status_value)
    if property_value is not None:
        clauses.append(CallbackRequest.property_id == property_value)

    result = paginate(
        db,
        CallbackRequest,
        and_(true(), *clauses),
        page_request,
        order_by=parse_sort(sort_by, order, CALLBACK_SORT_COLUMNS, tie_breaker=CallbackRequest.id),
    )
    return {
        "success": True,
        "callback_requests": [callback_view(cb, include_property=True) for cb in result.items],
        "pagination": result.pagination.to_dict(),
        "status_counts": repository.status_counts(db),
    }


@router.get("/stats", response_model=CallbackStatsResponse)
def get_callback_stats(
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    """Totals per status, requests in the last 30 days and the most requested properties."""
    return {
        "success": True,
        "stats": {
            "total": repository.count(db),
            "by_status": repository.status_counts(db),
            "recent_requests": repository.count_since(db, days_ago(RECENT_DAYS)),
            "top_properties": repository.top_properties(db, TOP_PROPERTIES),
        },
    }


@router.get("/{callback_id}", response_model=CallbackResponse)
def get_callback_request(
    callback_id: int,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    """
    One callback request with its property summary.

    Raises:
        NotFoundError: If the request does not exist
    """
    callback = repository.get_or_raise(db, callback_id)
    return {"success": True, "callback_request": callback_view(callback, include_property=True)}


@router.put("/{callback_id}", response_model=CallbackResponse)
def update_callback_request(
    callback_id: int,
    payload: CallbackUpdate,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    """
    Change the status or admin notes of a request.

    Raises:
        NotFoundError: If the request does not exist
    """
    updates = payload.model_dump(exclude_unset=True)
    if updates.get("status") is None:
        updates.pop("status", None)

    callback = repository.update(db, callback_id, **updates)
    db.commit()

    logger.info("callback_updated", id=callback_id, admin_id=current_admin.id, status=callback.status)
    return {
        "success": True,
        "message": "Callback request updated successfully",
        "callback_request": callback_view(callback),
    }


@router.delete("/{callback_id}", response_model=MessageResponse)
def delete_callback_request(
    callback_id: int,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    """
    Delete a request.

    Raises:
        NotFoundError: If the request does not exist
    """
    repository.delete(db, callback_id)
    db.commit()

    logger.info("callback_deleted", id=callback_id, admin_id=current_admin.id)
    return {"success": True, "message": "Callback request deleted successfully"}

"""
Newsletter Router

Endpoints for newsletter subscription management.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy import and_, true
from sqlalchemy.orm import Session

from config.settings import settings
from src.estatesite.api.auth import get_current_admin
from src.estatesite.api.dependencies import get_db
from src.estatesite.api.schemas import (
    MessageResponse,
    NewsletterRequest,
    NewsletterStatsResponse,
    SubscriberListResponse,
    SubscriptionResponse,
)
from src.estatesite.db.base import utcnow
from src.estatesite.db.models import Admin, NewsletterSource, NewsletterSubscription
from src.estatesite.db.repository import NewsletterRepository, days_ago
from src.estatesite.exceptions import NotFoundError
from src.estatesite.query.normalizer import parse_bool
from src.estatesite.query.pagination import SUBSCRIBER_PAGE_SIZE, paginate, parse_page_request, parse_sort
from src.estatesite.query.projection import subscription_view
from src.estatesite.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/newsletter", tags=["newsletter"])

repository = NewsletterRepository()

SUBSCRIBER_SORT_COLUMNS = {
    "createdAt": NewsletterSubscription.created_at,
    "subscribedAt": NewsletterSubscription.subscribed_at,
    "email": NewsletterSubscription.email,
}

RECENT_DAYS = 30


def _client_ip(request: Request) -> Optional[str]:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


@router.post("/subscribe", response_model=SubscriptionResponse, status_code=201)
def subscribe(payload: NewsletterRequest, request: Request, db: Session = Depends(get_db)):
    """
    Subscribe an e-mail address.

    New subscriptions answer 201; an already active address answers 200 with
    alreadySubscribed, and an unsubscribed one is reactivated (200).
    """
    existing = repository.get_by_email(db, payload.email)

    if existing is not None and existing.is_active:
        body = SubscriptionResponse(
            message="You are already subscribed to our newsletter!",
            already_subscribed=True,
        )
        return JSONResponse(status_code=200, content=body.model_dump(mode="json", by_alias=True))

    if existing is not None:
        existing.is_active = True
        existing.subscribed_at = utcnow()
        db.commit()
        logger.info("newsletter_reactivated", id=existing.id)
        body = SubscriptionResponse(
            message="Welcome back! Your subscription has been reactivated.",
            subscription=subscription_view(existing),
        )
        return JSONResponse(status_code=200, content=body.model_dump(mode="json", by_alias=True))

    subscription = repository.create(
        db,
        email=payload.email,
        source=payload.source,
        ip_address=_client_ip(request),
    )
    db.commit()

    logger.info("newsletter_subscribed", id=subscription.id, source=subscription.source)
    return {
        "success": True,
        "message": "Thank you for subscribing! You'll receive updates soon.",
        "subscription": subscription_view(subscription),
    }


@router.post("/unsubscribe", response_model=MessageResponse)
def unsubscribe(payload: NewsletterRequest, db: Session = Depends(get_db)):
    """
    Unsubscribe an e-mail address.

    Raises:
        NotFoundError: If the address never subscribed
    """
    subscription = repository.get_by_email(db, payload.email)
    if subscription is None:
        raise NotFoundError("Email not found in our subscription list")

    if not subscription.is_active:
        return {"success": True, "message": "You are already unsubscribed"}

    subscription.is_active = False
    db.commit()

    logger.info("newsletter_unsubscribed", id=subscription.id)
    return {"success": True, "message": "You have been successfully unsubscribed"}


@router.get("/subscribers", response_model=SubscriberListResponse)
def list_subscribers(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    is_active: Optional[str] = Query(None, alias="isActive"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    order: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    """Paginated subscribers with the number of active ones."""
    page_request = parse_page_request({"page": page, "limit": limit}, SUBSCRIBER_PAGE_SIZE, settings.max_page_limit)
    active = parse_bool("isActive", is_active)

    clauses = []
    if active is not None:
        clauses.append(NewsletterSubscription.is_active == active)

    result = paginate(
        db,
        NewsletterSubscription,
        and_(true(), *clauses),
        page_request,
        order_by=parse_sort(sort_by, order, SUBSCRIBER_SORT_COLUMNS, tie_breaker=NewsletterSubscription.id),
    )
    return {
        "success": True,
        "subscribers": [subscription_view(sub) for sub in result.items],
        "pagination": result.pagination.to_dict(),
        "active_count": repository.count(db, NewsletterSubscription.is_active == True),
    }


@router.get("/stats", response_model=NewsletterStatsResponse)
def get_newsletter_stats(
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    """Totals, subscribers per source and subscriptions in the last 30 days."""
    by_source = repository.count_by(db, NewsletterSubscription.source)
    active = repository.count(db, NewsletterSubscription.is_active == True)
    total = repository.count(db)
    return {
        "success": True,
        "stats": {
            "total": total,
            "active": active,
            "inactive": total - active,
            "by_source": {source.value: by_source.get(source.value, 0) for source in NewsletterSource},
            "recent_subscriptions": repository.count_since(db, days_ago(RECENT_DAYS)),
        },
    }


@router.delete("/{subscriber_id}", response_model=MessageResponse)
def delete_subscriber(
    subscriber_id: int,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    """
    Delete a subscriber.

    Raises:
        NotFoundError: If the subscriber does not exist
    """
    repository.delete(db, subscriber_id)
    db.commit()

    logger.info("newsletter_subscriber_deleted", id=subscriber_id, admin_id=current_admin.id)
    return {"success": True, "message": "Subscriber deleted successfully"}

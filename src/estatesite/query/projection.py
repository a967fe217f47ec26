"""
Result Projector

Shapes stored records into the views the site needs. List views keep only
listing fields and replace the image gallery with its first image; detail
views carry the full record. Source records are never modified.
"""
from typing import Any, Optional, Sequence

from src.estatesite.db.models import (
    Admin,
    Blog,
    CallbackRequest,
    Contact,
    GuideLead,
    NewsletterSubscription,
    Property,
)

# Amenities shown on a listing card
CARD_AMENITY_LIMIT = 5


def first_image(images: Optional[Sequence[str]]) -> Optional[str]:
    if not images:
        return None
    return images[0]


def property_card(prop: Property) -> dict:
    """Listing card used by the filtered listing and the search form."""
    return {
        "id": prop.id,
        "image": first_image(prop.images),
        "property_status": prop.property_status,
        "property_type": prop.property_type,
        "title": prop.title,
        "city": prop.city,
        "location": prop.location,
        "bhk_count": prop.bhk_count,
        "bath_count": prop.bath_count,
        "total_area": prop.total_area,
        "handover": prop.handover,
        "amenities": list(prop.amenities)[:CARD_AMENITY_LIMIT],
        "starting_price": prop.starting_price,
    }


def homepage_property_card(prop: Property) -> dict:
    return {
        "id": prop.id,
        "image": first_image(prop.images),
        "title": prop.title,
        "location": prop.location,
        "bhk_count": prop.bhk_count,
        "total_area": prop.total_area,
        "handover": prop.handover,
        "starting_price": prop.starting_price,
    }


def property_detail(prop: Property) -> dict:
    """Full property record."""
    return {
        "id": prop.id,
        "images": list(prop.images or []),
        "title": prop.title,
        "property_type": prop.property_type,
        "city": prop.city,
        "location": prop.location,
        "property_status": prop.property_status,
        "starting_price": prop.starting_price,
        "bhk_count": prop.bhk_count,
        "bath_count": prop.bath_count,
        "total_area": prop.total_area,
        "description": prop.description,
        "developer": prop.developer,
        "usp": prop.usp,
        "construction_status": prop.construction_status,
        "handover": prop.handover,
        "floors": prop.floors,
        "elevation": prop.elevation,
        "payment_plan": prop.payment_plan,
        "total_units": prop.total_units,
        "views": prop.views,
        "unit_types": [dict(unit) for unit in (prop.unit_types or [])],
        "highlights": list(prop.highlights or []),
        "amenities": list(prop.amenities),
        "is_on_home_page": prop.is_on_home_page,
        "created_at": prop.created_at,
        "updated_at": prop.updated_at,
    }


def homepage_flag(record: Any) -> dict:
    """Minimal view returned by the homepage toggles."""
    return {
        "id": record.id,
        "title": record.title,
        "is_on_home_page": record.is_on_home_page,
    }


def blog_card(blog: Blog) -> dict:
    return {
        "id": blog.id,
        "title": blog.title,
        "image_url": blog.image_url,
        "date": blog.date,
        "category": blog.category,
        "tags": list(blog.tags),
        "created_at": blog.created_at,
    }


def homepage_blog_card(blog: Blog) -> dict:
    return {
        "id": blog.id,
        "image_url": blog.image_url,
        "date": blog.date,
        "title": blog.title,
        "category": blog.category,
    }


def blog_suggestion(blog: Blog) -> dict:
    return {"id": blog.id, "title": blog.title, "category": blog.category}


def blog_detail(blog: Blog) -> dict:
    return {
        "id": blog.id,
        "image_url": blog.image_url,
        "date": blog.date,
        "title": blog.title,
        "category": blog.category,
        "tags": list(blog.tags),
        "description": blog.description,
        "is_on_home_page": blog.is_on_home_page,
        "created_at": blog.created_at,
        "updated_at": blog.updated_at,
    }


def admin_summary(admin: Admin) -> dict:
    return {
        "id": admin.id,
        "name": admin.name,
        "email": admin.email,
        "role": admin.role,
        "is_active": admin.is_active,
        "last_login": admin.last_login,
        "created_at": admin.created_at,
    }


def contact_view(contact: Contact) -> dict:
    return {
        "id": contact.id,
        "full_name": contact.full_name,
        "email": contact.email,
        "phone": contact.phone,
        "message": contact.message,
        "is_read": contact.is_read,
        "created_at": contact.created_at,
    }


def callback_view(callback: CallbackRequest, include_property: bool = False) -> dict:
    view = {
        "id": callback.id,
        "property_id": callback.property_id,
        "property_title": callback.property_title,
        "name": callback.name,
        "email": callback.email,
        "phone": callback.phone,
        "message": callback.message,
        "preferred_time": callback.preferred_time,
        "status": callback.status,
        "admin_notes": callback.admin_notes,
        "created_at": callback.created_at,
        "updated_at": callback.updated_at,
    }
    if include_property:
        prop = callback.property
        view["property"] = None if prop is None else {
            "id": prop.id,
            "title": prop.title,
            "location": prop.location,
            "property_type": prop.property_type,
            "starting_price": prop.starting_price,
            "image": first_image(prop.images),
        }
    return view


def subscription_view(subscription: NewsletterSubscription) -> dict:
    return {
        "id": subscription.id,
        "email": subscription.email,
        "subscribed_at": subscription.subscribed_at,
        "is_active": subscription.is_active,
        "source": subscription.source,
    }


def guide_lead_view(lead: GuideLead) -> dict:
    return {
        "id": lead.id,
        "guide": lead.guide,
        "name": lead.name,
        "email": lead.email,
        "created_at": lead.created_at,
    }

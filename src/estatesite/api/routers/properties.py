"""
Properties Router

Endpoints for property listings, search, homepage curation and image
management.
"""
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, BackgroundTasks, Body, Depends, Query, status
from sqlalchemy.orm import Session

from config.settings import settings
from src.estatesite.api.auth import get_current_admin
from src.estatesite.api.dependencies import get_db, get_media_store
from src.estatesite.api.schemas import (
    AdminPropertiesResponse,
    HomepagePropertiesResponse,
    ImageDeleteRequest,
    ImageDeleteResponse,
    MessageResponse,
    PropertyCreate,
    PropertyHomepageResponse,
    PropertyListResponse,
    PropertyResponse,
    PropertyUpdate,
)
from src.estatesite.db.models import Admin, Property
from src.estatesite.db.repository import PropertyRepository, newest_first
from src.estatesite.exceptions import NotFoundError, ValidationError
from src.estatesite.query import (
    PropertyFilters,
    build_property_predicate,
    normalize_listing_filters,
    normalize_search_form,
    paginate,
    parse_page_request,
)
from src.estatesite.query.pagination import PROPERTY_PAGE_SIZE
from src.estatesite.query.projection import (
    homepage_flag,
    homepage_property_card,
    property_card,
    property_detail,
)
from src.estatesite.services.homepage import PROPERTY_HOMEPAGE_SLOTS, property_curator
from src.estatesite.services.media import MediaStore
from src.estatesite.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/properties", tags=["properties"])

repository = PropertyRepository()


def _list_page(db: Session, filters: PropertyFilters, params: Dict[str, Any]) -> dict:
    page_request = parse_page_request(params, PROPERTY_PAGE_SIZE, settings.max_page_limit)
    page = paginate(
        db,
        Property,
        build_property_predicate(filters),
        page_request,
        order_by=newest_first(Property),
    )
    return {
        "success": True,
        "properties": [property_card(prop) for prop in page.items],
        "pagination": page.pagination.to_dict(),
    }


@router.post("/", response_model=PropertyResponse, status_code=status.HTTP_201_CREATED)
def create_property(
    payload: PropertyCreate,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    """
    Create a property listing.

    Args:
        payload: Listing fields; images are already-uploaded URLs
        db: Database session
        current_admin: Authenticated admin

    Returns:
        The created listing (never on the homepage initially)
    """
    prop = repository.create(db, is_on_home_page=False, **payload.model_dump())
    db.commit()

    logger.info("property_created", id=prop.id, admin_id=current_admin.id, images=len(prop.images))
    return {
        "success": True,
        "message": "Property created successfully",
        "property": property_detail(prop),
    }


@router.get("/", response_model=PropertyListResponse)
def list_properties(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    city: Optional[str] = Query(None),
    location: Optional[str] = Query(None),
    property_type: Optional[str] = Query(None, alias="propertyType"),
    property_status: Optional[str] = Query(None, alias="propertyStatus"),
    min_price: Optional[str] = Query(None, alias="minPrice"),
    max_price: Optional[str] = Query(None, alias="maxPrice"),
    bhk_count: Optional[str] = Query(None, alias="bhkCount"),
    bath_count: Optional[str] = Query(None, alias="bathCount"),
    construction_status: Optional[str] = Query(None, alias="constructionStatus"),
    amenities: Optional[List[str]] = Query(None, description="Repeated, or one JSON-encoded list"),
    db: Session = Depends(get_db),
):
    """
    List properties with optional filters and pagination.

    Text filters are case-insensitive substring matches, statuses match the
    whole value, and every requested amenity must partially match one of the
    listing's amenities.

    Returns:
        Listing cards with pagination metadata
    """
    params = {
        "page": page,
        "limit": limit,
        "city": city,
        "location": location,
        "propertyType": property_type,
        "propertyStatus": property_status,
        "minPrice": min_price,
        "maxPrice": max_price,
        "bhkCount": bhk_count,
        "bathCount": bath_count,
        "constructionStatus": construction_status,
        # a single value may itself be a JSON-encoded list
        "amenities": amenities[0] if amenities and len(amenities) == 1 else amenities,
    }
    filters = normalize_listing_filters(params)
    return _list_page(db, filters, params)


@router.post("/search", response_model=PropertyListResponse)
def search_properties(
    form: Optional[Dict[str, Any]] = Body(None),
    db: Session = Depends(get_db),
):
    """
    Search properties from the public search form.

    Args:
        form: tab, city, location, propertyType, price, developer, bedrooms,
            bathrooms, areaSize, amenities, page, limit

    Returns:
        Listing cards with pagination metadata
    """
    form = form or {}
    filters = normalize_search_form(form)
    return _list_page(db, filters, form)


@router.get("/homepage", response_model=HomepagePropertiesResponse)
def get_homepage_properties(db: Session = Depends(get_db)):
    """
    Get the properties featured on the homepage.

    Raises:
        NotFoundError: If no property is featured
    """
    properties = repository.get_homepage(db, PROPERTY_HOMEPAGE_SLOTS)
    if not properties:
        raise NotFoundError("No properties found for homepage")

    return {
        "success": True,
        "count": len(properties),
        "properties": [homepage_property_card(prop) for prop in properties],
    }


@router.get("/admin/all", response_model=AdminPropertiesResponse)
def get_all_properties_admin(
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    """Every property with complete data, newest first."""
    properties = repository.get_all(db)
    return {
        "success": True,
        "message": "All properties fetched successfully",
        "count": len(properties),
        "properties": [property_detail(prop) for prop in properties],
    }


@router.get("/{property_id}", response_model=PropertyResponse)
def get_property(property_id: int, db: Session = Depends(get_db)):
    """
    Get the full record of one property.

    Raises:
        NotFoundError: If the property does not exist
    """
    prop = repository.get_or_raise(db, property_id)
    return {"success": True, "property": property_detail(prop)}


@router.put("/{property_id}", response_model=PropertyResponse)
def update_property(
    property_id: int,
    payload: PropertyUpdate,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    """
    Update the supplied fields of a property.

    New images are appended after the existing ones. The homepage flag is
    not writable here.

    Raises:
        NotFoundError: If the property does not exist
    """
    updates = {
        key: value
        for key, value in payload.model_dump(exclude_unset=True, exclude={"new_images"}).items()
        if value is not None
    }
    prop = repository.update(db, property_id, **updates)
    added = repository.append_images(db, prop, payload.new_images)
    db.commit()

    logger.info(
        "property_updated",
        id=property_id,
        admin_id=current_admin.id,
        fields=sorted(updates.keys()),
        added_images=added,
    )
    return {
        "success": True,
        "message": "Property updated successfully",
        "property": property_detail(prop),
        "added_images_count": added,
    }


@router.delete("/{property_id}", response_model=MessageResponse)
def delete_property(
    property_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    media: MediaStore = Depends(get_media_store),
    current_admin: Admin = Depends(get_current_admin),
):
    """
    Delete a property.

    Its images are removed from object storage after the response is sent;
    a failed cleanup is logged and never fails the delete.

    Raises:
        NotFoundError: If the property does not exist
    """
    prop = repository.delete(db, property_id)
    images = list(prop.images or [])
    db.commit()

    background_tasks.add_task(media.purge_images, images)
    logger.info("property_deleted", id=property_id, admin_id=current_admin.id, images=len(images))
    return {
        "success": True,
        "message": "Property and all associated images deleted successfully",
    }


@router.delete("/{property_id}/image", response_model=ImageDeleteResponse)
def delete_property_image(
    property_id: int,
    background_tasks: BackgroundTasks,
    payload: Optional[ImageDeleteRequest] = None,
    db: Session = Depends(get_db),
    media: MediaStore = Depends(get_media_store),
    current_admin: Admin = Depends(get_current_admin),
):
    """
    Remove one image from a property's gallery.

    Raises:
        ValidationError: If imageUrl is missing or it is the last image
        NotFoundError: If the property or the image does not exist
    """
    if payload is None or not payload.image_url:
        raise ValidationError("imageUrl", "Image URL is required")

    prop = repository.get_or_raise(db, property_id)
    images = list(prop.images or [])
    if payload.image_url not in images:
        raise NotFoundError("Image not found in this property")
    if len(images) == 1:
        raise ValidationError(
            "imageUrl",
            "Cannot delete the last image. Property must have at least one image.",
        )

    repository.remove_image(db, prop, payload.image_url)
    db.commit()

    background_tasks.add_task(media.purge_images, [payload.image_url])
    return {
        "success": True,
        "message": "Image deleted successfully",
        "remaining_images": list(prop.images),
        "deleted_image": payload.image_url,
    }


@router.put("/{property_id}/add-to-homepage", response_model=PropertyHomepageResponse)
def add_to_homepage(
    property_id: int,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    """
    Feature a property on the homepage (at most 8).

    Raises:
        NotFoundError: If the property does not exist
        AlreadyInStateError: If it is already featured
        CapacityExceededError: If all homepage slots are taken
    """
    change = property_curator(db).add(property_id)
    db.commit()
    return {
        "success": True,
        "message": "Property added to homepage successfully",
        "property": homepage_flag(change.record),
        "homepage_count": change.homepage_count,
    }


@router.put("/{property_id}/remove-from-homepage", response_model=PropertyHomepageResponse)
def remove_from_homepage(
    property_id: int,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    """
    Take a property off the homepage.

    Raises:
        NotFoundError: If the property does not exist
        AlreadyInStateError: If it is not featured
    """
    change = property_curator(db).remove(property_id)
    db.commit()
    return {
        "success": True,
        "message": "Property removed from homepage successfully",
        "property": homepage_flag(change.record),
        "homepage_count": change.homepage_count,
    }

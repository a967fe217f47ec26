"""
Contacts Router

Endpoints for contact-form submissions.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import and_, true
from sqlalchemy.orm import Session

from config.settings import settings
from src.estatesite.api.auth import get_current_admin
from src.estatesite.api.dependencies import get_db
from src.estatesite.api.schemas import (
    ContactCollectionResponse,
    ContactCreate,
    ContactListResponse,
    ContactResponse,
    MessageResponse,
)
from src.estatesite.db.models import Admin, Contact
from src.estatesite.db.repository import ContactRepository, newest_first
from src.estatesite.query.normalizer import parse_bool
from src.estatesite.query.pagination import CONTACT_PAGE_SIZE, paginate, parse_page_request
from src.estatesite.query.projection import contact_view
from src.estatesite.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/contacts", tags=["contacts"])

repository = ContactRepository()


@router.post("/create", response_model=ContactResponse, status_code=status.HTTP_201_CREATED)
def create_contact(payload: ContactCreate, db: Session = Depends(get_db)):
    """Store a contact-form submission."""
    contact = repository.create(db, **payload.model_dump())
    db.commit()

    logger.info("contact_submitted", id=contact.id)
    return {
        "success": True,
        "message": "Contact form submitted successfully! We'll get back to you soon.",
        "contact": contact_view(contact),
    }


@router.get("/admin/all-simple", response_model=ContactCollectionResponse)
def list_all_contacts(
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    """Every submission, newest first."""
    contacts = repository.get_all(db)
    return {
        "success": True,
        "message": "All contacts fetched successfully",
        "count": len(contacts),
        "contacts": [contact_view(contact) for contact in contacts],
    }


@router.get("/admin/all", response_model=ContactListResponse)
def list_contacts(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    is_read: Optional[str] = Query(None, alias="isRead"),
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    """Paginated submissions, optionally only read or unread ones."""
    page_request = parse_page_request({"page": page, "limit": limit}, CONTACT_PAGE_SIZE, settings.max_page_limit)
    read = parse_bool("isRead", is_read)

    clauses = []
    if read is not None:
        clauses.append(Contact.is_read == read)

    result = paginate(db, Contact, and_(true(), *clauses), page_request, order_by=newest_first(Contact))
    return {
        "success": True,
        "contacts": [contact_view(contact) for contact in result.items],
        "pagination": result.pagination.to_dict(),
    }


@router.get("/getbyid/{contact_id}", response_model=ContactResponse)
def get_contact(
    contact_id: int,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    """
    Open a submission; it is marked as read.

    Raises:
        NotFoundError: If the contact does not exist
    """
    contact = repository.mark_read(db, repository.get_or_raise(db, contact_id))
    db.commit()
    return {"success": True, "message": "Contact fetched successfully", "contact": contact_view(contact)}


@router.delete("/delete/{contact_id}", response_model=MessageResponse)
def delete_contact(
    contact_id: int,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    """
    Delete a submission.

    Raises:
        NotFoundError: If the contact does not exist
    """
    repository.delete(db, contact_id)
    db.commit()

    logger.info("contact_deleted", id=contact_id, admin_id=current_admin.id)
    return {"success": True, "message": "Contact deleted successfully"}

"""
Authentication Router

Endpoints for admin login, token verification and admin account management.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import and_, true
from sqlalchemy.orm import Session

from config.settings import settings
from src.estatesite.api.auth import (
    authenticate_admin,
    create_admin_token,
    get_current_admin,
    get_password_hash,
    require_super_admin,
    resolve_token,
)
from src.estatesite.api.dependencies import get_db
from src.estatesite.api.schemas import (
    AdminBootstrap,
    AdminCreate,
    AdminListResponse,
    AdminResponse,
    AdminUpdate,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    TokenVerifyRequest,
)
from src.estatesite.db.models import Admin, AdminRole
from src.estatesite.db.repository import AdminRepository
from src.estatesite.exceptions import (
    ConflictError,
    PermissionDeniedError,
    ValidationError,
)
from src.estatesite.query.normalizer import match_enum, parse_bool
from src.estatesite.query.pagination import LEAD_PAGE_SIZE, paginate, parse_page_request, parse_sort
from src.estatesite.query.projection import admin_summary
from src.estatesite.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/auth", tags=["authentication"])

repository = AdminRepository()

ADMIN_SORT_COLUMNS = {
    "createdAt": Admin.created_at,
    "name": Admin.name,
    "email": Admin.email,
    "lastLogin": Admin.last_login,
}


def _ensure_email_available(db: Session, email: str, current_id: Optional[int] = None) -> None:
    existing = repository.get_by_email(db, email)
    if existing is not None and existing.id != current_id:
        raise ConflictError("Admin with this email already exists")


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    """
    Exchange e-mail and password for a bearer token.

    Raises:
        AuthenticationError: Unknown e-mail or wrong password
        PermissionDeniedError: Account is deactivated
    """
    admin = authenticate_admin(db, payload.email, payload.password)
    repository.record_login(db, admin)
    db.commit()

    return {
        "success": True,
        "message": "Login successful",
        "token": create_admin_token(admin),
        "admin": admin_summary(admin),
    }


@router.post("/verify", response_model=AdminResponse)
def verify_token(payload: TokenVerifyRequest, db: Session = Depends(get_db)):
    """
    Check a token and return its admin.

    Raises:
        ValidationError: If no token was supplied
        AuthenticationError: If the token is invalid or expired
    """
    if not payload.token:
        raise ValidationError("token", "Token is required")
    admin = resolve_token(db, payload.token)
    return {"success": True, "admin": admin_summary(admin)}


@router.post("/create-admin", response_model=AdminResponse, status_code=status.HTTP_201_CREATED)
def create_initial_admin(payload: AdminBootstrap, db: Session = Depends(get_db)):
    """
    Create the first super-admin.

    Only allowed while no admin account exists.

    Raises:
        PermissionDeniedError: If any admin already exists
    """
    if repository.count(db) > 0:
        logger.warning("admin_bootstrap_refused", email=payload.email)
        raise PermissionDeniedError("An admin already exists. Ask a super-admin to create your account.")

    admin = repository.create(
        db,
        name=payload.name,
        email=payload.email,
        password_hash=get_password_hash(payload.password),
        role=AdminRole.SUPER_ADMIN.value,
        is_active=True,
    )
    db.commit()

    logger.info("admin_bootstrapped", id=admin.id)
    return {"success": True, "message": "Admin created successfully", "admin": admin_summary(admin)}


@router.get("/profile", response_model=AdminResponse)
def get_profile(current_admin: Admin = Depends(get_current_admin)):
    """Profile of the signed-in admin."""
    return {"success": True, "admin": admin_summary(current_admin)}


@router.get("/admins", response_model=AdminListResponse)
def list_admins(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    role: Optional[str] = Query(None),
    is_active: Optional[str] = Query(None, alias="isActive"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    order: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(require_super_admin),
):
    """
    List admin accounts (super-admin only).

    Returns:
        Admins with pagination and active/inactive totals
    """
    page_request = parse_page_request({"page": page, "limit": limit}, LEAD_PAGE_SIZE, settings.max_page_limit)
    role_value = match_enum("role", role, AdminRole)
    active = parse_bool("isActive", is_active)

    clauses = []
    if role_value is not None:
        clauses.append(Admin.role == role_value)
    if active is not None:
        clauses.append(Admin.is_active == active)

    result = paginate(
        db,
        Admin,
        and_(true(), *clauses),
        page_request,
        order_by=parse_sort(sort_by, order, ADMIN_SORT_COLUMNS, tie_breaker=Admin.id),
    )
    pagination = result.pagination.to_dict()
    pagination["active_count"] = repository.count(db, Admin.is_active == True)
    pagination["inactive_count"] = repository.count(db, Admin.is_active == False)

    return {
        "success": True,
        "admins": [admin_summary(admin) for admin in result.items],
        "pagination": pagination,
    }


@router.post("/admins", response_model=AdminResponse, status_code=status.HTTP_201_CREATED)
def create_admin(
    payload: AdminCreate,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(require_super_admin),
):
    """
    Create an admin account (super-admin only).

    Raises:
        ConflictError: If the e-mail is already registered
    """
    _ensure_email_available(db, payload.email)
    admin = repository.create(
        db,
        name=payload.name,
        email=payload.email,
        password_hash=get_password_hash(payload.password),
        role=payload.role,
        is_active=True,
    )
    db.commit()

    logger.info("admin_created", id=admin.id, role=admin.role, created_by=current_admin.id)
    return {"success": True, "message": "Admin created successfully", "admin": admin_summary(admin)}


@router.put("/admins/{admin_id}", response_model=AdminResponse)
def update_admin(
    admin_id: int,
    payload: AdminUpdate,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(require_super_admin),
):
    """
    Update an admin account (super-admin only).

    Raises:
        NotFoundError: If the admin does not exist
        ConflictError: If the new e-mail belongs to another admin
    """
    repository.get_or_raise(db, admin_id)

    updates = {
        key: value
        for key, value in payload.model_dump(exclude_unset=True).items()
        if value is not None
    }
    if "email" in updates:
        _ensure_email_available(db, updates["email"], current_id=admin_id)
    if "password" in updates:
        updates["password_hash"] = get_password_hash(updates.pop("password"))

    admin = repository.update(db, admin_id, **updates)
    db.commit()

    logger.info(
        "admin_updated",
        id=admin_id,
        fields=sorted(key for key in updates if key != "password_hash"),
        updated_by=current_admin.id,
    )
    return {"success": True, "message": "Admin updated successfully", "admin": admin_summary(admin)}


@router.delete("/admins/{admin_id}", response_model=MessageResponse)
def delete_admin(
    admin_id: int,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(require_super_admin),
):
    """
    Delete an admin account (super-admin only, never your own).

    Raises:
        ValidationError: If the target is the signed-in admin
        NotFoundError: If the admin does not exist
    """
    if admin_id == current_admin.id:
        raise ValidationError("id", "You cannot delete your own account")

    repository.delete(db, admin_id)
    db.commit()

    logger.info("admin_deleted", id=admin_id, deleted_by=current_admin.id)
    return {"success": True, "message": "Admin deleted successfully"}


@router.patch("/admins/{admin_id}/toggle-status", response_model=AdminResponse)
def toggle_admin_status(
    admin_id: int,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(require_super_admin),
):
    """
    Activate or deactivate an admin account (super-admin only, never your own).

    Raises:
        ValidationError: If the target is the signed-in admin
        NotFoundError: If the admin does not exist
    """
    if admin_id == current_admin.id:
        raise ValidationError("id", "You cannot change your own status")

    admin = repository.get_or_raise(db, admin_id)
    admin = repository.update(db, admin_id, is_active=not admin.is_active)
    db.commit()

    state = "activated" if admin.is_active else "deactivated"
    logger.info("admin_status_toggled", id=admin_id, is_active=admin.is_active, toggled_by=current_admin.id)
    return {"success": True, "message": f"Admin {state} successfully", "admin": admin_summary(admin)}

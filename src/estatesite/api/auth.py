"""
JWT Authentication for FastAPI

Provides token-based admin authentication with password hashing and JWT tokens.
"""
from datetime import timedelta
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from config.settings import settings
from src.estatesite.api.dependencies import get_db
from src.estatesite.db.base import utcnow
from src.estatesite.db.models import Admin, AdminRole
from src.estatesite.db.repository import AdminRepository
from src.estatesite.exceptions import AuthenticationError, PermissionDeniedError
from src.estatesite.utils.logger import get_logger

logger = get_logger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bearer scheme for token authentication (errors are raised by us, not FastAPI)
bearer_scheme = HTTPBearer(auto_error=False)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against its hash.

    Args:
        plain_password: Plain text password
        hashed_password: Bcrypt hashed password

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password

    Returns:
        Bcrypt hashed password
    """
    return pwd_context.hash(password)


def authenticate_admin(db: Session, email: str, password: str) -> Admin:
    """
    Authenticate admin with e-mail and password.

    Args:
        db: Database session
        email: E-mail address
        password: Plain text password

    Returns:
        The authenticated admin

    Raises:
        AuthenticationError: Unknown e-mail or wrong password
        PermissionDeniedError: Account is deactivated
    """
    admin = AdminRepository().get_by_email(db, email)
    if admin is None:
        logger.warning("admin_login_failed", reason="unknown_email")
        raise AuthenticationError("Invalid email or password")
    if not admin.is_active:
        logger.warning("admin_login_failed", reason="inactive", id=admin.id)
        raise PermissionDeniedError("Your account has been deactivated. Contact support.")
    if not verify_password(password, admin.password_hash):
        logger.warning("admin_login_failed", reason="bad_password", id=admin.id)
        raise AuthenticationError("Invalid email or password")
    return admin


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create JWT access token.

    Args:
        data: Token payload data
        expires_delta: Token expiration time delta

    Returns:
        Encoded JWT token
    """
    to_encode = data.copy()
    if expires_delta:
        expire = utcnow() + expires_delta
    else:
        expire = utcnow() + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
    return encoded_jwt


def create_admin_token(admin: Admin) -> str:
    return create_access_token(data={"sub": str(admin.id), "role": admin.role})


def resolve_token(db: Session, token: Optional[str]) -> Admin:
    """
    Resolve a bearer token to an active admin.

    Raises:
        AuthenticationError: Missing, invalid or expired token, or the admin
            no longer exists or is inactive
    """
    if not token:
        raise AuthenticationError("Not authorized, no token")
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
        subject = payload.get("sub")
        admin_id = int(subject)
    except (JWTError, TypeError, ValueError):
        raise AuthenticationError("Invalid or expired token")

    admin = AdminRepository().get_by_id(db, admin_id)
    if admin is None or not admin.is_active:
        raise AuthenticationError("Not authorized, invalid token")
    return admin


def get_current_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Admin:
    """
    Get current authenticated admin from the bearer token.

    Args:
        credentials: Authorization header contents
        db: Database session

    Returns:
        Current admin

    Raises:
        AuthenticationError: If the token is missing or invalid
    """
    token = credentials.credentials if credentials else None
    return resolve_token(db, token)


def require_super_admin(current_admin: Admin = Depends(get_current_admin)) -> Admin:
    """
    Restrict a route to super-admins.

    Raises:
        PermissionDeniedError: If the admin is not a super-admin
    """
    if current_admin.role != AdminRole.SUPER_ADMIN.value:
        raise PermissionDeniedError("Access denied. Super-admin only.")
    return current_admin

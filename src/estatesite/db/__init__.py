"""
Database Package

Database models, connection management, and data persistence layer.
"""
from src.estatesite.db.base import Base
from src.estatesite.db.session import (
    engine,
    SessionLocal,
    get_db_session,
    health_check,
    close_connections,
    create_all_tables,
)
from src.estatesite.db.models import (
    Property,
    PropertyAmenity,
    Blog,
    BlogTag,
    Admin,
    Contact,
    CallbackRequest,
    NewsletterSubscription,
    GuideLead,
)
from src.estatesite.db.repository import (
    BaseRepository,
    PropertyRepository,
    BlogRepository,
    AdminRepository,
    ContactRepository,
    CallbackRepository,
    NewsletterRepository,
    GuideLeadRepository,
)

__all__ = [
    # Base
    "Base",
    # Session management
    "engine",
    "SessionLocal",
    "get_db_session",
    "health_check",
    "close_connections",
    "create_all_tables",
    # Models
    "Property",
    "PropertyAmenity",
    "Blog",
    "BlogTag",
    "Admin",
    "Contact",
    "CallbackRequest",
    "NewsletterSubscription",
    "GuideLead",
    # Repositories
    "BaseRepository",
    "PropertyRepository",
    "BlogRepository",
    "AdminRepository",
    "ContactRepository",
    "CallbackRepository",
    "NewsletterRepository",
    "GuideLeadRepository",
]

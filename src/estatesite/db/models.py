"""
SQLAlchemy ORM Models

Listings, blog posts, admin accounts and the lead tables fed by the site's
contact, callback, newsletter and guide pop-up forms.
"""
import enum
from datetime import datetime
from typing import List, Optional

from sqlalchemy import (
    String, Integer, Numeric, DateTime, Boolean, Text, JSON,
    ForeignKey, CheckConstraint, Index,
)
from sqlalchemy.ext.associationproxy import AssociationProxy, association_proxy
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.estatesite.db.base import Base, IdMixin, TimestampMixin, utcnow


class PropertyStatus(str, enum.Enum):
    RENT = "Rent"
    BUY = "Buy"
    OFF_PLAN = "Off-Plan"


class ConstructionStatus(str, enum.Enum):
    OFF_PLAN = "Off-Plan"
    UNDER_CONSTRUCTION = "Under Construction"
    SITE_PREPARATION_COMPLETED = "Site Preparation Completed"
    NEARING_COMPLETION = "Nearing Completion"
    COMPLETED = "Completed"
    READY_TO_MOVE = "Ready to Move"


class AdminRole(str, enum.Enum):
    ADMIN = "admin"
    SUPER_ADMIN = "super-admin"


class CallbackStatus(str, enum.Enum):
    PENDING = "Pending"
    CONTACTED = "Contacted"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class PreferredTime(str, enum.Enum):
    MORNING = "Morning"
    AFTERNOON = "Afternoon"
    EVENING = "Evening"
    ANYTIME = "Anytime"


class NewsletterSource(str, enum.Enum):
    FOOTER = "footer"
    POPUP = "popup"
    LANDING_PAGE = "landing_page"
    OTHER = "other"


class GuideType(str, enum.Enum):
    BLUNDERS = "blunders"
    STRATEGIES = "strategies"


class Property(Base, IdMixin, TimestampMixin):
    """
    Property listing.

    Images are stored as an ordered JSON list of object-storage URLs;
    amenities live in property_amenities so they can be matched with
    EXISTS sub-queries.
    """
    __tablename__ = "properties"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    property_type: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Apartment, Villa, Townhouse, Penthouse, Studio..."
    )
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    location: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Area within the city"
    )
    property_status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        comment="Rent, Buy or Off-Plan"
    )
    starting_price: Mapped[float] = mapped_column(Numeric(14, 2, asdecimal=False), nullable=False)
    bhk_count: Mapped[int] = mapped_column(Integer, nullable=False)
    bath_count: Mapped[int] = mapped_column(Integer, nullable=False)
    total_area: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    developer: Mapped[str] = mapped_column(String(255), nullable=False)
    usp: Mapped[str] = mapped_column(Text, nullable=False, comment="Unique selling points")
    construction_status: Mapped[str] = mapped_column(String(40), nullable=False)
    handover: Mapped[str] = mapped_column(String(50), nullable=False, comment="e.g. Q2 2028")
    floors: Mapped[int] = mapped_column(Integer, nullable=False)
    elevation: Mapped[str] = mapped_column(String(100), nullable=False, comment="e.g. G+2P+17+R")
    payment_plan: Mapped[str] = mapped_column(String(255), nullable=False)
    total_units: Mapped[int] = mapped_column(Integer, nullable=False)
    views: Mapped[str] = mapped_column(String(255), nullable=False)
    unit_types: Mapped[list] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="[{type, total_area_start, total_area_end, price}]"
    )
    highlights: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    images: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    is_on_home_page: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        index=True
    )

    amenity_rows: Mapped[List["PropertyAmenity"]] = relationship(
        "PropertyAmenity",
        back_populates="property",
        order_by="PropertyAmenity.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    amenities: AssociationProxy[List[str]] = association_proxy(
        "amenity_rows",
        "name",
        creator=lambda name: PropertyAmenity(name=name),
    )

    callback_requests: Mapped[List["CallbackRequest"]] = relationship(
        "CallbackRequest",
        back_populates="property",
    )

    __table_args__ = (
        CheckConstraint("starting_price >= 0", name="check_starting_price_non_negative"),
        CheckConstraint("bhk_count >= 0", name="check_bhk_count_non_negative"),
        CheckConstraint("bath_count >= 0", name="check_bath_count_non_negative"),
        CheckConstraint("total_area >= 0", name="check_total_area_non_negative"),
        Index("idx_properties_city", "city"),
        Index("idx_properties_location", "location"),
        Index("idx_properties_property_type", "property_type"),
        Index("idx_properties_property_status", "property_status"),
        Index("idx_properties_starting_price", "starting_price"),
        Index("idx_properties_developer", "developer"),
        Index("idx_properties_bhk_count", "bhk_count"),
        Index("idx_properties_construction_status", "construction_status"),
    )

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, title={self.title!r})>"


class PropertyAmenity(Base, IdMixin):
    """One amenity of a property, kept in display order."""
    __tablename__ = "property_amenities"

    property_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    property: Mapped["Property"] = relationship("Property", back_populates="amenity_rows")


class Blog(Base, IdMixin, TimestampMixin):
    """Blog post. `date` is the display date, always DD-MM-YYYY."""
    __tablename__ = "blogs"

    image_url: Mapped[str] = mapped_column(String(500), nullable=False)
    date: Mapped[str] = mapped_column(String(10), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    is_on_home_page: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        index=True
    )

    tag_rows: Mapped[List["BlogTag"]] = relationship(
        "BlogTag",
        back_populates="blog",
        order_by="BlogTag.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    tags: AssociationProxy[List[str]] = association_proxy(
        "tag_rows",
        "name",
        creator=lambda name: BlogTag(name=name),
    )

    def __repr__(self) -> str:
        return f"<Blog(id={self.id}, title={self.title!r})>"


class BlogTag(Base, IdMixin):
    __tablename__ = "blog_tags"

    blog_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("blogs.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    blog: Mapped["Blog"] = relationship("Blog", back_populates="tag_rows")


class Admin(Base, IdMixin, TimestampMixin):
    """Back-office account."""
    __tablename__ = "admins"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=AdminRole.ADMIN.value)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    last_login: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<Admin(id={self.id}, email={self.email!r}, role={self.role})>"


class Contact(Base, IdMixin, TimestampMixin):
    """Contact-form submission."""
    __tablename__ = "contacts"

    full_name: Mapped[str] = mapped_column(String(150), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class CallbackRequest(Base, IdMixin, TimestampMixin):
    """Request for a call back about a specific listing."""
    __tablename__ = "callback_requests"

    property_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("properties.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        comment="Null once the listing has been deleted"
    )
    property_title: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(150), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    message: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    preferred_time: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=PreferredTime.ANYTIME.value
    )
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=CallbackStatus.PENDING.value,
        index=True
    )
    admin_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    property: Mapped[Optional["Property"]] = relationship(
        "Property",
        back_populates="callback_requests"
    )


class NewsletterSubscription(Base, IdMixin, TimestampMixin):
    __tablename__ = "newsletter_subscriptions"

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    subscribed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    source: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=NewsletterSource.FOOTER.value
    )
    ip_address: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)


class GuideLead(Base, IdMixin, TimestampMixin):
    """E-mail captured by one of the downloadable-guide pop-ups."""
    __tablename__ = "guide_leads"

    guide: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(150), nullable=False, default="")
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

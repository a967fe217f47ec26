"""
Pydantic Schemas for API Request/Response Models

These schemas define the JSON structure for API endpoints. Python attributes
are snake_case; the wire format is camelCase.
"""
import json
from typing import Annotated, Any, Dict, List, Optional
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from src.estatesite.db.models import (
    AdminRole,
    CallbackStatus,
    ConstructionStatus,
    NewsletterSource,
    PreferredTime,
    PropertyStatus,
)
from src.estatesite.transformers.blog_fields import normalize_tags

# Amenity and tag rows store at most this many characters
LABEL_MAX_LENGTH = 100

Label = Annotated[str, Field(max_length=LABEL_MAX_LENGTH)]


def decode_json_list(value: Any) -> Any:
    """Accept a list or a JSON-encoded list (multipart form fields arrive as strings)."""
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return []
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            raise ValueError("must be a list or a JSON-encoded list")
    return value


def dedupe(values: List[str]) -> List[str]:
    """Drop repeated values, keeping first occurrences in order."""
    return list(dict.fromkeys(values))


class CamelModel(BaseModel):
    """Base schema: camelCase on the wire, snake_case in Python."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
        use_enum_values = True
        validate_default = True


class RequestModel(CamelModel):
    """Base request schema; all strings are trimmed."""

    class Config:
        str_strip_whitespace = True


class MessageResponse(CamelModel):
    success: bool = True
    message: str


class PaginationOut(CamelModel):
    """Pagination block of list responses."""
    total: int
    current_page: int
    total_pages: int
    limit: int
    has_next_page: bool
    has_prev_page: bool


class HealthCheck(BaseModel):
    """Health check response."""
    status: str
    version: str
    database: str
    timestamp: datetime


# --- Properties ---------------------------------------------------------------

class UnitType(RequestModel):
    """One unit configuration offered in a project."""
    type: str = Field(..., min_length=1)
    total_area_start: float = Field(..., ge=0)
    total_area_end: float = Field(..., ge=0)
    price: float = Field(..., ge=0)


class PropertyCreate(RequestModel):
    """New listing. Images must already be uploaded to object storage."""
    images: List[str]
    title: str = Field(..., min_length=1)
    property_type: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    property_status: PropertyStatus
    starting_price: float = Field(..., ge=0)
    bhk_count: int = Field(..., ge=0)
    bath_count: int = Field(..., ge=0)
    total_area: float = Field(..., ge=0)
    description: str = Field(..., min_length=1)
    developer: str = Field(..., min_length=1)
    usp: str = Field(..., min_length=1)
    construction_status: ConstructionStatus
    handover: str = Field(..., min_length=1)
    floors: int = Field(..., ge=0)
    elevation: str = Field(..., min_length=1)
    payment_plan: str = Field(..., min_length=1)
    total_units: int = Field(..., ge=0)
    views: str = Field(..., min_length=1)
    unit_types: List[UnitType]
    highlights: List[str] = Field(default_factory=list)
    amenities: List[Label]

    @field_validator("unit_types", "highlights", "amenities", mode="before")
    @classmethod
    def decode_lists(cls, value):
        return decode_json_list(value)

    @field_validator("images")
    @classmethod
    def require_images(cls, value: List[str]) -> List[str]:
        images = dedupe([image for image in value if image])
        if not images:
            raise ValueError("At least one image is required")
        return images

    @field_validator("amenities")
    @classmethod
    def require_amenities(cls, value: List[str]) -> List[str]:
        amenities = [amenity for amenity in value if amenity]
        if not amenities:
            raise ValueError("At least one amenity is required")
        return amenities

    @field_validator("unit_types")
    @classmethod
    def require_unit_types(cls, value: List[UnitType]) -> List[UnitType]:
        if not value:
            raise ValueError("At least one unit type is required")
        return value


class PropertyUpdate(RequestModel):
    """Partial listing update; only supplied fields are written."""
    title: Optional[str] = Field(None, min_length=1)
    property_type: Optional[str] = Field(None, min_length=1)
    city: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = Field(None, min_length=1)
    property_status: Optional[PropertyStatus] = None
    starting_price: Optional[float] = Field(None, ge=0)
    bhk_count: Optional[int] = Field(None, ge=0)
    bath_count: Optional[int] = Field(None, ge=0)
    total_area: Optional[float] = Field(None, ge=0)
    description: Optional[str] = None
    developer: Optional[str] = None
    usp: Optional[str] = None
    construction_status: Optional[ConstructionStatus] = None
    handover: Optional[str] = None
    floors: Optional[int] = Field(None, ge=0)
    elevation: Optional[str] = None
    payment_plan: Optional[str] = None
    total_units: Optional[int] = Field(None, ge=0)
    views: Optional[str] = None
    unit_types: Optional[List[UnitType]] = None
    highlights: Optional[List[str]] = None
    amenities: Optional[List[Label]] = None
    new_images: List[str] = Field(default_factory=list)

    @field_validator("unit_types", "highlights", "amenities", mode="before")
    @classmethod
    def decode_lists(cls, value):
        return decode_json_list(value)

    @field_validator("new_images")
    @classmethod
    def clean_new_images(cls, value: List[str]) -> List[str]:
        return dedupe([image for image in value if image])


class ImageDeleteRequest(RequestModel):
    image_url: Optional[str] = None


class PropertyCard(CamelModel):
    """Listing card (first image only, at most five amenities)."""
    id: int
    image: Optional[str] = None
    property_status: str
    property_type: str
    title: str
    city: str
    location: str
    bhk_count: int
    bath_count: int
    total_area: float
    handover: str
    amenities: List[str]
    starting_price: float


class HomepagePropertyCard(CamelModel):
    id: int
    image: Optional[str] = None
    title: str
    location: str
    bhk_count: int
    total_area: float
    handover: str
    starting_price: float


class PropertyDetail(CamelModel):
    """Full property record."""
    id: int
    images: List[str]
    title: str
    property_type: str
    city: str
    location: str
    property_status: str
    starting_price: float
    bhk_count: int
    bath_count: int
    total_area: float
    description: str
    developer: str
    usp: str
    construction_status: str
    handover: str
    floors: int
    elevation: str
    payment_plan: str
    total_units: int
    views: str
    unit_types: List[UnitType]
    highlights: List[str]
    amenities: List[str]
    is_on_home_page: bool
    created_at: datetime
    updated_at: datetime


class HomepageFlag(CamelModel):
    id: int
    title: str
    is_on_home_page: bool


class PropertyListResponse(CamelModel):
    success: bool = True
    properties: List[PropertyCard]
    pagination: PaginationOut


class HomepagePropertiesResponse(CamelModel):
    success: bool = True
    count: int
    properties: List[HomepagePropertyCard]


class AdminPropertiesResponse(CamelModel):
    success: bool = True
    message: str
    count: int
    properties: List[PropertyDetail]


class PropertyResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    property: PropertyDetail
    added_images_count: Optional[int] = None


class ImageDeleteResponse(CamelModel):
    success: bool = True
    message: str
    remaining_images: List[str]
    deleted_image: str


class PropertyHomepageResponse(CamelModel):
    success: bool = True
    message: str
    property: HomepageFlag
    homepage_count: int


# --- Blogs --------------------------------------------------------------------

class BlogCreate(RequestModel):
    """New blog post. `date` accepts any common date format."""
    image_url: str = Field(..., min_length=1)
    date: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    category: Optional[str] = None
    tags: List[Label] = Field(default_factory=list)

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, value):
        return normalize_tags(value)

    @field_validator("category")
    @classmethod
    def blank_category(cls, value: Optional[str]) -> Optional[str]:
        return value or None


class BlogUpdate(RequestModel):
    image_url: Optional[str] = Field(None, min_length=1)
    date: Optional[str] = Field(None, min_length=1)
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = None
    tags: Optional[List[Label]] = None

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, value):
        if value is None:
            return None
        return normalize_tags(value)

    @field_validator("category")
    @classmethod
    def blank_category(cls, value: Optional[str]) -> Optional[str]:
        return value or None


class BlogCard(CamelModel):
    id: int
    title: str
    image_url: str
    date: str
    category: Optional[str] = None
    tags: List[str]
    created_at: datetime


class HomepageBlogCard(CamelModel):
    id: int
    image_url: str
    date: str
    title: str
    category: Optional[str] = None


class BlogSuggestion(CamelModel):
    id: int
    title: str
    category: Optional[str] = None


class BlogDetail(CamelModel):
    id: int
    image_url: str
    date: str
    title: str
    category: Optional[str] = None
    tags: List[str]
    description: str
    is_on_home_page: bool
    created_at: datetime
    updated_at: datetime


class BlogListResponse(CamelModel):
    success: bool = True
    blogs: List[BlogCard]
    pagination: PaginationOut


class BlogCollectionResponse(CamelModel):
    success: bool = True
    count: int
    blogs: List[BlogDetail]


class HomepageBlogsResponse(CamelModel):
    success: bool = True
    count: int
    blogs: List[HomepageBlogCard]


class RelatedBlogsResponse(CamelModel):
    success: bool = True
    blogs: List[BlogCard]


class BlogSuggestionsResponse(CamelModel):
    success: bool = True
    results: List[BlogSuggestion]


class CategoriesResponse(CamelModel):
    success: bool = True
    categories: List[str]


class BlogResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    blog: BlogDetail


class BlogHomepageResponse(CamelModel):
    success: bool = True
    message: str
    blog: HomepageFlag
    homepage_count: int


# --- Admin authentication -----------------------------------------------------

class LoginRequest(RequestModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenVerifyRequest(RequestModel):
    token: Optional[str] = None


class AdminOut(CamelModel):
    id: int
    name: str
    email: str
    role: str
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: datetime


class AdminBootstrap(RequestModel):
    """First super-admin account."""
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=6)

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: str) -> str:
        return value.lower()


class AdminCreate(AdminBootstrap):
    role: AdminRole = AdminRole.ADMIN


class AdminUpdate(RequestModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6)
    role: Optional[AdminRole] = None
    is_active: Optional[bool] = None

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: Optional[str]) -> Optional[str]:
        return value.lower() if value else value


class LoginResponse(CamelModel):
    success: bool = True
    message: str
    token: str
    admin: AdminOut


class AdminResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    admin: AdminOut


class AdminPagination(PaginationOut):
    active_count: int
    inactive_count: int


class AdminListResponse(CamelModel):
    success: bool = True
    admins: List[AdminOut]
    pagination: AdminPagination


# --- Contacts -----------------------------------------------------------------

class ContactCreate(RequestModel):
    full_name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: str) -> str:
        return value.lower()


class ContactOut(CamelModel):
    id: int
    full_name: str
    email: str
    phone: str
    message: str
    is_read: bool
    created_at: datetime


class ContactResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    contact: ContactOut


class ContactCollectionResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    count: int
    contacts: List[ContactOut]


class ContactListResponse(CamelModel):
    success: bool = True
    contacts: List[ContactOut]
    pagination: PaginationOut


# --- Callback requests --------------------------------------------------------

class CallbackCreate(RequestModel):
    property_id: int
    property_title: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str = Field(..., min_length=1)
    message: str = Field("", max_length=500)
    preferred_time: PreferredTime = PreferredTime.ANYTIME

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: str) -> str:
        return value.lower()


class CallbackUpdate(RequestModel):
    status: Optional[CallbackStatus] = None
    admin_notes: Optional[str] = None


class CallbackProperty(CamelModel):
    id: int
    title: str
    location: str
    property_type: str
    starting_price: float
    image: Optional[str] = None


class CallbackOut(CamelModel):
    id: int
    property_id: Optional[int] = None
    property_title: str
    name: str
    email: str
    phone: str
    message: str
    preferred_time: str
    status: str
    admin_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    property: Optional[CallbackProperty] = None


class CallbackResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    callback_request: CallbackOut


class CallbackListResponse(CamelModel):
    success: bool = True
    callback_requests: List[CallbackOut]
    pagination: PaginationOut
    status_counts: Dict[str, int]


class TopProperty(CamelModel):
    property_id: int
    property_title: str
    count: int


class CallbackStats(CamelModel):
    total: int
    by_status: Dict[str, int]
    recent_requests: int
    top_properties: List[TopProperty]


class CallbackStatsResponse(CamelModel):
    success: bool = True
    stats: CallbackStats


# --- Newsletter ---------------------------------------------------------------

class NewsletterRequest(RequestModel):
    email: EmailStr
    source: NewsletterSource = NewsletterSource.FOOTER

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: str) -> str:
        return value.lower()


class SubscriptionOut(CamelModel):
    id: int
    email: str
    subscribed_at: datetime
    is_active: bool
    source: str


class SubscriptionResponse(CamelModel):
    success: bool = True
    message: str
    already_subscribed: bool = False
    subscription: Optional[SubscriptionOut] = None


class SubscriberListResponse(CamelModel):
    success: bool = True
    subscribers: List[SubscriptionOut]
    pagination: PaginationOut
    active_count: int


class NewsletterStats(CamelModel):
    total: int
    active: int
    inactive: int
    by_source: Dict[str, int]
    recent_subscriptions: int


class NewsletterStatsResponse(CamelModel):
    success: bool = True
    stats: NewsletterStats


# --- Guide leads --------------------------------------------------------------

class GuideLeadCreate(RequestModel):
    email: EmailStr
    name: str = ""

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: str) -> str:
        return value.lower()


class GuideLeadOut(CamelModel):
    id: int
    guide: str
    name: str
    email: str
    created_at: datetime


class GuideLeadResponse(CamelModel):
    success: bool = True
    message: str
    lead: GuideLeadOut


class GuideLeadListResponse(CamelModel):
    success: bool = True
    leads: List[GuideLeadOut]
    pagination: PaginationOut

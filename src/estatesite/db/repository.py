"""
Repository Pattern for Data Access

Provides CRUD operations and domain-specific queries for all models.
"""
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Type, TypeVar

from sqlalchemy import desc, func, select
from sqlalchemy.orm import Session

from src.estatesite.db.base import utcnow
from src.estatesite.db.models import (
    Admin,
    Blog,
    CallbackRequest,
    CallbackStatus,
    Contact,
    GuideLead,
    NewsletterSubscription,
    Property,
)
from src.estatesite.exceptions import NotFoundError
from src.estatesite.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar('T')


def newest_first(model) -> tuple:
    """Default list ordering: creation time descending, id as tie-breaker."""
    return (desc(model.created_at), desc(model.id))


class BaseRepository:
    """
    Base repository with common CRUD operations.

    Generic repository that can be extended for specific models.
    """

    label = "Record"

    def __init__(self, model: Type[T]):
        """
        Initialize repository with model class.

        Args:
            model: SQLAlchemy model class
        """
        self.model = model
        logger.debug("repository_initialized", model=model.__name__)

    def get_by_id(self, session: Session, id_value: Any) -> Optional[T]:
        """
        Get single record by primary key.

        Args:
            session: Database session
            id_value: Primary key value

        Returns:
            Model instance or None
        """
        result = session.get(self.model, id_value)
        logger.debug(
            "repository_get_by_id",
            model=self.model.__name__,
            id=id_value,
            found=result is not None
        )
        return result

    def get_or_raise(self, session: Session, id_value: Any) -> T:
        """
        Get single record by primary key.

        Raises:
            NotFoundError: If no record has this key
        """
        instance = self.get_by_id(session, id_value)
        if instance is None:
            raise NotFoundError(f"{self.label} not found")
        return instance

    def get_all(self, session: Session, limit: Optional[int] = None, offset: int = 0) -> List[T]:
        """
        Get all records, newest first, with optional pagination.

        Args:
            session: Database session
            limit: Maximum number of records
            offset: Number of records to skip

        Returns:
            List of model instances
        """
        query = select(self.model).order_by(*newest_first(self.model)).offset(offset)
        if limit:
            query = query.limit(limit)

        result = list(session.execute(query).scalars().all())
        logger.debug(
            "repository_get_all",
            model=self.model.__name__,
            count=len(result),
            limit=limit,
            offset=offset
        )
        return result

    def create(self, session: Session, **kwargs) -> T:
        """
        Create new record.

        Args:
            session: Database session
            **kwargs: Model field values

        Returns:
            Created model instance
        """
        instance = self.model(**kwargs)
        session.add(instance)
        session.flush()
        logger.info("repository_created", model=self.model.__name__, id=getattr(instance, 'id', None))
        return instance

    def update(self, session: Session, id_value: Any, **kwargs) -> T:
        """
        Update the supplied fields of an existing record.

        Args:
            session: Database session
            id_value: Primary key value
            **kwargs: Fields to update

        Returns:
            Updated model instance

        Raises:
            NotFoundError: If no record has this key
        """
        instance = self.get_or_raise(session, id_value)

        for key, value in kwargs.items():
            setattr(instance, key, value)

        session.flush()
        logger.info(
            "repository_updated",
            model=self.model.__name__,
            id=id_value,
            fields=sorted(kwargs.keys())
        )
        return instance

    def delete(self, session: Session, id_value: Any) -> T:
        """
        Delete record (hard delete).

        Args:
            session: Database session
            id_value: Primary key value

        Returns:
            The deleted instance (detached from the session after commit)

        Raises:
            NotFoundError: If no record has this key
        """
        instance = self.get_or_raise(session, id_value)

        session.delete(instance)
        session.flush()
        logger.info("repository_deleted", model=self.model.__name__, id=id_value)
        return instance

    def count(self, session: Session, *criteria) -> int:
        """
        Count records, optionally restricted by WHERE criteria.

        Args:
            session: Database session
            *criteria: Boolean clauses ANDed together

        Returns:
            Total count
        """
        query = select(func.count()).select_from(self.model)
        if criteria:
            query = query.where(*criteria)
        count = session.scalar(query) or 0
        logger.debug("repository_count", model=self.model.__name__, count=count)
        return count

    def count_by(self, session: Session, column) -> Dict[Any, int]:
        """
        Group counts by a column.

        Returns:
            Mapping of column value to number of records
        """
        rows = session.execute(
            select(column, func.count()).select_from(self.model).group_by(column)
        ).all()
        return {value: count for value, count in rows}


class PropertyRepository(BaseRepository):
    """Repository for Property model with specialized queries."""

    label = "Property"

    def __init__(self):
        super().__init__(Property)

    def get_homepage(self, session: Session, limit: int) -> List[Property]:
        """
        Get properties flagged for the homepage, newest first.

        Args:
            session: Database session
            limit: Maximum number of properties

        Returns:
            List of properties
        """
        query = (
            select(Property)
            .where(Property.is_on_home_page == True)
            .order_by(*newest_first(Property))
            .limit(limit)
        )
        return list(session.execute(query).scalars().all())

    def append_images(self, session: Session, prop: Property, urls: List[str]) -> int:
        """
        Append image URLs to the end of a property's gallery.

        Returns:
            Number of images added
        """
        if not urls:
            return 0
        prop.images = list(prop.images or []) + list(urls)
        session.flush()
        logger.info("property_images_appended", id=prop.id, added=len(urls), total=len(prop.images))
        return len(urls)

    def remove_image(self, session: Session, prop: Property, url: str) -> None:
        """Drop one image URL from a property's gallery."""
        prop.images = [image for image in (prop.images or []) if image != url]
        session.flush()
        logger.info("property_image_removed", id=prop.id, remaining=len(prop.images))


class BlogRepository(BaseRepository):
    """Repository for Blog model with specialized queries."""

    label = "Blog"

    def __init__(self):
        super().__init__(Blog)

    def get_homepage(self, session: Session, limit: int) -> List[Blog]:
        query = (
            select(Blog)
            .where(Blog.is_on_home_page == True)
            .order_by(*newest_first(Blog))
            .limit(limit)
        )
        return list(session.execute(query).scalars().all())

    def get_categories(self, session: Session) -> List[str]:
        """
        Get distinct non-empty categories.

        Returns:
            Sorted list of category names
        """
        query = (
            select(Blog.category)
            .where(Blog.category.is_not(None))
            .where(Blog.category != "")
            .distinct()
            .order_by(Blog.category)
        )
        return list(session.execute(query).scalars().all())

    def get_related(
        self,
        session: Session,
        category: str,
        exclude_id: Optional[int] = None,
        limit: int = 2,
    ) -> List[Blog]:
        """
        Get other blogs in the same category, newest first.

        Args:
            session: Database session
            category: Category to match exactly
            exclude_id: Blog to leave out (usually the one being read)
            limit: Maximum number of blogs
        """
        query = select(Blog).where(Blog.category == category)
        if exclude_id is not None:
            query = query.where(Blog.id != exclude_id)
        query = query.order_by(*newest_first(Blog)).limit(limit)
        return list(session.execute(query).scalars().all())

    def search(self, session: Session, predicate, limit: int) -> List[Blog]:
        query = select(Blog).where(predicate).order_by(*newest_first(Blog)).limit(limit)
        return list(session.execute(query).scalars().all())


class AdminRepository(BaseRepository):
    """Repository for Admin model."""

    label = "Admin"

    def __init__(self):
        super().__init__(Admin)

    def get_by_email(self, session: Session, email: str) -> Optional[Admin]:
        """
        Get admin by e-mail (stored lower-cased).

        Args:
            session: Database session
            email: E-mail address in any case

        Returns:
            Admin or None
        """
        query = select(Admin).where(Admin.email == email.strip().lower())
        return session.execute(query).scalar_one_or_none()

    def record_login(self, session: Session, admin: Admin) -> None:
        admin.last_login = utcnow()
        session.flush()
        logger.info("admin_logged_in", id=admin.id)


class ContactRepository(BaseRepository):
    """Repository for Contact model."""

    label = "Contact"

    def __init__(self):
        super().__init__(Contact)

    def mark_read(self, session: Session, contact: Contact) -> Contact:
        if not contact.is_read:
            contact.is_read = True
            session.flush()
            logger.info("contact_marked_read", id=contact.id)
        return contact


class CallbackRepository(BaseRepository):
    """Repository for CallbackRequest model with reporting queries."""

    label = "Callback request"

    def __init__(self):
        super().__init__(CallbackRequest)

    def status_counts(self, session: Session) -> Dict[str, int]:
        """
        Count callback requests per status.

        Returns:
            Mapping with every status present (zero when unused)
        """
        counts = self.count_by(session, CallbackRequest.status)
        return {status.value: counts.get(status.value, 0) for status in CallbackStatus}

    def count_since(self, session: Session, since: datetime) -> int:
        return self.count(session, CallbackRequest.created_at >= since)

    def top_properties(self, session: Session, limit: int = 5) -> List[Dict[str, Any]]:
        """
        Properties with the most callback requests.

        Args:
            session: Database session
            limit: Number of properties to return

        Returns:
            List of {property_id, property_title, count}, highest count first
        """
        request_count = func.count(CallbackRequest.id).label("request_count")
        query = (
            select(
                CallbackRequest.property_id,
                func.max(CallbackRequest.property_title),
                request_count,
            )
            .where(CallbackRequest.property_id.is_not(None))
            .group_by(CallbackRequest.property_id)
            .order_by(desc(request_count), CallbackRequest.property_id)
            .limit(limit)
        )
        return [
            {"property_id": property_id, "property_title": title, "count": count}
            for property_id, title, count in session.execute(query).all()
        ]


class NewsletterRepository(BaseRepository):
    """Repository for NewsletterSubscription model."""

    label = "Subscriber"

    def __init__(self):
        super().__init__(NewsletterSubscription)

    def get_by_email(self, session: Session, email: str) -> Optional[NewsletterSubscription]:
        query = select(NewsletterSubscription).where(
            NewsletterSubscription.email == email.strip().lower()
        )
        return session.execute(query).scalar_one_or_none()

    def count_since(self, session: Session, since: datetime) -> int:
        return self.count(session, NewsletterSubscription.subscribed_at >= since)


class GuideLeadRepository(BaseRepository):
    """Repository for GuideLead model."""

    label = "Lead"

    def __init__(self):
        super().__init__(GuideLead)


def days_ago(days: int) -> datetime:
    return utcnow() - timedelta(days=days)

"""
Homepage Curator

Manages the fixed number of "featured on homepage" slots per content type.
Adding runs one conditional UPDATE ("flag on WHERE currently off AND
flagged count < capacity"). On PostgreSQL the count subquery reads its own
READ COMMITTED snapshot, so two adds on different rows could both pass it;
a transaction-scoped advisory lock per model is taken first so adds of the
same content type run one at a time until commit. SQLite serializes writers
on its own and gets no lock. When the UPDATE touches no row, the record is
re-read only to explain why.
"""
from dataclasses import dataclass
from typing import Any, Optional, Type

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from src.estatesite.db.models import Blog, Property
from src.estatesite.exceptions import (
    AlreadyInStateError,
    CapacityExceededError,
    NotFoundError,
)
from src.estatesite.utils.logger import get_logger

logger = get_logger(__name__)

PROPERTY_HOMEPAGE_SLOTS = 8
BLOG_HOMEPAGE_SLOTS = 3

# pg_advisory_xact_lock keys, one per curated table
SLOT_LOCK_KEYS = {
    "properties": 7_310_001,
    "blogs": 7_310_002,
}


def slot_lock_statement(model: Type, dialect_name: str) -> Optional[Select]:
    """Statement that serializes homepage adds for one model, or None where writes are already serialized."""
    if dialect_name != "postgresql":
        return None
    return select(func.pg_advisory_xact_lock(SLOT_LOCK_KEYS[model.__tablename__]))


@dataclass
class HomepageChange:
    """Outcome of a successful add/remove."""
    record: Any
    homepage_count: int


class HomepageCurator:
    """
    Add/remove records to the homepage for one model.

    The model must expose integer `id` and boolean `is_on_home_page` columns.
    """

    def __init__(self, session: Session, model: Type, capacity: int, label: str, plural: str):
        """
        Args:
            session: Database session (caller commits)
            model: Mapped class with an is_on_home_page flag
            capacity: Maximum number of flagged records
            label: Singular display name used in messages ("Property")
            plural: Plural display name used in messages ("properties")
        """
        self.session = session
        self.model = model
        self.capacity = capacity
        self.label = label
        self.plural = plural

    def count(self) -> int:
        """Number of records currently on the homepage."""
        return self.session.scalar(
            select(func.count())
            .select_from(self.model)
            .where(self.model.is_on_home_page == True)
        ) or 0

    def add(self, record_id: int) -> HomepageChange:
        """
        Flag a record for the homepage.

        Raises:
            NotFoundError: Record does not exist
            AlreadyInStateError: Record is already on the homepage
            CapacityExceededError: All slots are taken
        """
        self._lock_slots()

        on_home = self.model.__table__.alias("on_home")
        slots_taken = (
            select(func.count())
            .select_from(on_home)
            .where(on_home.c.is_on_home_page == True)
            .scalar_subquery()
        )
        stmt = (
            update(self.model)
            .where(self.model.id == record_id)
            .where(self.model.is_on_home_page == False)
            .where(slots_taken < self.capacity)
            .values(is_on_home_page=True)
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)

        if result.rowcount != 1:
            self._explain_rejected_add(record_id)

        change = HomepageChange(record=self._reload(record_id), homepage_count=self.count())
        logger.info(
            "homepage_slot_added",
            model=self.model.__name__,
            record_id=record_id,
            homepage_count=change.homepage_count,
            capacity=self.capacity,
        )
        return change

    def remove(self, record_id: int) -> HomepageChange:
        """
        Take a record off the homepage.

        Raises:
            NotFoundError: Record does not exist
            AlreadyInStateError: Record is not on the homepage
        """
        stmt = (
            update(self.model)
            .where(self.model.id == record_id)
            .where(self.model.is_on_home_page == True)
            .values(is_on_home_page=False)
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)

        if result.rowcount != 1:
            if self._current_flag(record_id) is None:
                raise NotFoundError(f"{self.label} not found")
            raise AlreadyInStateError(f"{self.label} is not on the homepage")

        change = HomepageChange(record=self._reload(record_id), homepage_count=self.count())
        logger.info(
            "homepage_slot_removed",
            model=self.model.__name__,
            record_id=record_id,
            homepage_count=change.homepage_count,
        )
        return change

    def _lock_slots(self) -> None:
        lock = slot_lock_statement(self.model, self.session.get_bind().dialect.name)
        if lock is not None:
            self.session.execute(lock)

    def _explain_rejected_add(self, record_id: int) -> None:
        flag = self._current_flag(record_id)
        if flag is None:
            raise NotFoundError(f"{self.label} not found")
        if flag:
            raise AlreadyInStateError(f"{self.label} is already on the homepage")

        logger.warning(
            "homepage_capacity_reached",
            model=self.model.__name__,
            record_id=record_id,
            capacity=self.capacity,
        )
        raise CapacityExceededError(
            f"Homepage limit reached. Maximum {self.capacity} {self.plural} allowed. "
            "Please remove one first."
        )

    def _current_flag(self, record_id: int):
        return self.session.execute(
            select(self.model.is_on_home_page).where(self.model.id == record_id)
        ).scalar_one_or_none()

    def _reload(self, record_id: int):
        return self.session.execute(
            select(self.model)
            .where(self.model.id == record_id)
            .execution_options(populate_existing=True)
        ).scalar_one()


def property_curator(session: Session) -> HomepageCurator:
    return HomepageCurator(session, Property, PROPERTY_HOMEPAGE_SLOTS, "Property", "properties")


def blog_curator(session: Session) -> HomepageCurator:
    return HomepageCurator(session, Blog, BLOG_HOMEPAGE_SLOTS, "Blog", "blogs")

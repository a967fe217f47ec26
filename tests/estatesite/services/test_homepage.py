"""
Tests for Homepage Curator

Tests slot capacity, state checks and counts for properties and blogs.
"""
from types import SimpleNamespace

import pytest
from sqlalchemy.dialects import postgresql, sqlite

from src.estatesite.db.models import Blog, Property
from src.estatesite.exceptions import (
    AlreadyInStateError,
    CapacityExceededError,
    NotFoundError,
)
from src.estatesite.services.homepage import (
    BLOG_HOMEPAGE_SLOTS,
    PROPERTY_HOMEPAGE_SLOTS,
    SLOT_LOCK_KEYS,
    blog_curator,
    property_curator,
    slot_lock_statement,
)


class TestPropertyCurator:
    """Tests for the property homepage (8 slots)."""

    def test_add(self, test_db, make_property):
        prop = make_property()

        change = property_curator(test_db).add(prop.id)
        test_db.commit()

        assert change.record.is_on_home_page is True
        assert change.homepage_count == 1

    def test_ninth_property_rejected(self, test_db, make_property):
        curator = property_curator(test_db)
        for _ in range(PROPERTY_HOMEPAGE_SLOTS):
            curator.add(make_property().id)
        test_db.commit()
        ninth = make_property()

        with pytest.raises(CapacityExceededError) as exc_info:
            curator.add(ninth.id)

        assert "Maximum 8 properties" in exc_info.value.message
        assert curator.count() == PROPERTY_HOMEPAGE_SLOTS
        test_db.expire_all()
        assert test_db.get(Property, ninth.id).is_on_home_page is False

    def test_add_twice(self, test_db, make_property):
        prop = make_property(is_on_home_page=True)

        with pytest.raises(AlreadyInStateError):
            property_curator(test_db).add(prop.id)

    def test_already_featured_reported_before_capacity(self, test_db, make_property):
        props = [make_property(is_on_home_page=True) for _ in range(PROPERTY_HOMEPAGE_SLOTS)]

        with pytest.raises(AlreadyInStateError):
            property_curator(test_db).add(props[0].id)

    def test_missing_record(self, test_db):
        with pytest.raises(NotFoundError) as exc_info:
            property_curator(test_db).add(999)

        assert exc_info.value.message == "Property not found"

    def test_remove(self, test_db, make_property):
        prop = make_property(is_on_home_page=True)
        make_property(is_on_home_page=True)

        change = property_curator(test_db).remove(prop.id)

        assert change.record.is_on_home_page is False
        assert change.homepage_count == 1

    def test_remove_when_not_featured(self, test_db, make_property):
        prop = make_property()

        with pytest.raises(AlreadyInStateError) as exc_info:
            property_curator(test_db).remove(prop.id)

        assert exc_info.value.message == "Property is not on the homepage"

    def test_remove_missing_record(self, test_db):
        with pytest.raises(NotFoundError):
            property_curator(test_db).remove(42)

    def test_slot_freed_by_remove(self, test_db, make_property):
        featured = [make_property(is_on_home_page=True) for _ in range(PROPERTY_HOMEPAGE_SLOTS)]
        waiting = make_property()
        curator = property_curator(test_db)

        curator.remove(featured[0].id)
        change = curator.add(waiting.id)

        assert change.homepage_count == PROPERTY_HOMEPAGE_SLOTS


class TestBlogCurator:
    """Tests for the blog homepage (3 slots)."""

    def test_fourth_blog_rejected(self, test_db, make_blog):
        for _ in range(BLOG_HOMEPAGE_SLOTS):
            make_blog(is_on_home_page=True)
        fourth = make_blog()

        with pytest.raises(CapacityExceededError) as exc_info:
            blog_curator(test_db).add(fourth.id)

        assert "Maximum 3 blogs" in exc_info.value.message

    def test_blog_and_property_slots_are_independent(self, test_db, make_blog, make_property):
        for _ in range(BLOG_HOMEPAGE_SLOTS):
            make_blog(is_on_home_page=True)
        prop = make_property()

        change = property_curator(test_db).add(prop.id)

        assert change.homepage_count == 1

    def test_missing_blog(self, test_db):
        with pytest.raises(NotFoundError) as exc_info:
            blog_curator(test_db).add(7)

        assert exc_info.value.message == "Blog not found"


class PostgresDialectSession:
    """
    Wraps a SQLite session but reports the PostgreSQL dialect.

    Advisory-lock statements are recorded instead of executed.
    """

    def __init__(self, session):
        self._session = session
        self.locks = []

    def get_bind(self):
        return SimpleNamespace(dialect=SimpleNamespace(name="postgresql"))

    def execute(self, statement, *args, **kwargs):
        if "pg_advisory_xact_lock" in str(statement):
            self.locks.append(statement)
            return None
        return self._session.execute(statement, *args, **kwargs)

    def scalar(self, statement, *args, **kwargs):
        return self._session.scalar(statement, *args, **kwargs)


class TestSlotLock:
    """Adds are serialized per content type on PostgreSQL."""

    def test_postgresql_statement(self):
        statement = slot_lock_statement(Property, "postgresql")
        compiled = statement.compile(dialect=postgresql.dialect(), compile_kwargs={"literal_binds": True})

        assert f"pg_advisory_xact_lock({SLOT_LOCK_KEYS['properties']})" in str(compiled)

    def test_keys_differ_per_content_type(self):
        assert SLOT_LOCK_KEYS[Property.__tablename__] != SLOT_LOCK_KEYS[Blog.__tablename__]

    def test_no_lock_on_sqlite(self):
        assert slot_lock_statement(Property, sqlite.dialect.name) is None

    def test_add_takes_lock(self, test_db, make_property):
        prop = make_property()
        session = PostgresDialectSession(test_db)

        change = property_curator(session).add(prop.id)

        assert len(session.locks) == 1
        assert change.record.is_on_home_page is True

    def test_remove_takes_no_lock(self, test_db, make_property):
        prop = make_property(is_on_home_page=True)
        session = PostgresDialectSession(test_db)

        property_curator(session).remove(prop.id)

        assert session.locks == []

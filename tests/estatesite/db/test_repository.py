"""
Tests for Repository Pattern

Tests CRUD operations and domain-specific queries.
"""
from datetime import timedelta

import pytest
from sqlalchemy import select

from src.estatesite.db.base import utcnow
from src.estatesite.db.models import CallbackRequest, Contact, NewsletterSubscription, PropertyAmenity
from src.estatesite.db.repository import (
    AdminRepository,
    BlogRepository,
    CallbackRepository,
    ContactRepository,
    NewsletterRepository,
    PropertyRepository,
    days_ago,
)
from src.estatesite.exceptions import NotFoundError


def add_callback(session, prop, **overrides):
    fields = {
        "property_id": prop.id if prop is not None else None,
        "property_title": prop.title if prop is not None else "Removed listing",
        "name": "Sam",
        "email": "sam@example.com",
        "phone": "+971500000000",
    }
    fields.update(overrides)
    callback = CallbackRequest(**fields)
    session.add(callback)
    session.commit()
    return callback


class TestBaseRepository:
    """CRUD behaviour shared by every repository."""

    def test_create_and_get(self, test_db, property_fields):
        repo = PropertyRepository()

        prop = repo.create(test_db, **property_fields)
        test_db.commit()

        found = repo.get_by_id(test_db, prop.id)
        assert found.title == "Marina Heights"
        assert found.amenities == ["Swimming Pool", "Gym"]

    def test_amenities_keep_order(self, test_db, make_property):
        prop = make_property(amenities=["Gym", "Pool", "Spa"])

        rows = test_db.execute(
            select(PropertyAmenity.name, PropertyAmenity.position)
            .where(PropertyAmenity.property_id == prop.id)
            .order_by(PropertyAmenity.position)
        ).all()

        assert rows == [("Gym", 0), ("Pool", 1), ("Spa", 2)]

    def test_get_or_raise(self, test_db):
        with pytest.raises(NotFoundError) as exc_info:
            PropertyRepository().get_or_raise(test_db, 404)

        assert exc_info.value.message == "Property not found"

    def test_get_all_newest_first(self, test_db, make_property):
        make_property(title="Old", created_at=utcnow() - timedelta(days=2))
        make_property(title="New")

        titles = [prop.title for prop in PropertyRepository().get_all(test_db)]

        assert titles == ["New", "Old"]

    def test_update(self, test_db, make_property):
        prop = make_property()

        updated = PropertyRepository().update(test_db, prop.id, title="Renamed", bhk_count=3)
        test_db.commit()

        assert updated.title == "Renamed"
        assert updated.bhk_count == 3

    def test_update_missing(self, test_db):
        with pytest.raises(NotFoundError):
            BlogRepository().update(test_db, 1, title="x")

    def test_delete_cascades_amenities(self, test_db, make_property):
        prop = make_property(amenities=["Gym", "Pool"])

        PropertyRepository().delete(test_db, prop.id)
        test_db.commit()

        assert test_db.execute(select(PropertyAmenity)).all() == []

    def test_delete_keeps_callbacks(self, test_db, make_property):
        prop = make_property()
        callback = add_callback(test_db, prop)

        PropertyRepository().delete(test_db, prop.id)
        test_db.commit()
        test_db.expire_all()

        kept = test_db.get(CallbackRequest, callback.id)
        assert kept.property_id is None
        assert kept.property_title == "Marina Heights"

    def test_count_with_criteria(self, test_db):
        repo = ContactRepository()
        for is_read in (True, False, False):
            test_db.add(Contact(full_name="A", email="a@example.com", phone="1", message="hi", is_read=is_read))
        test_db.commit()

        assert repo.count(test_db) == 3
        assert repo.count(test_db, Contact.is_read == False) == 2


class TestPropertyRepository:
    def test_homepage(self, test_db, make_property):
        make_property(title="Featured", is_on_home_page=True)
        make_property(title="Regular")

        titles = [prop.title for prop in PropertyRepository().get_homepage(test_db, 8)]

        assert titles == ["Featured"]

    def test_images(self, test_db, make_property):
        repo = PropertyRepository()
        prop = make_property(images=["a.jpg"])

        added = repo.append_images(test_db, prop, ["b.jpg", "c.jpg"])
        repo.remove_image(test_db, prop, "a.jpg")
        test_db.commit()

        assert added == 2
        assert prop.images == ["b.jpg", "c.jpg"]


class TestBlogRepository:
    def test_categories_are_distinct_and_sorted(self, test_db, make_blog):
        make_blog(category="Market")
        make_blog(category="Guides")
        make_blog(category="Guides")
        make_blog(category=None)

        assert BlogRepository().get_categories(test_db) == ["Guides", "Market"]

    def test_related_excludes_current(self, test_db, make_blog):
        current = make_blog(title="Current", category="Guides")
        make_blog(title="Other guide", category="Guides")
        make_blog(title="Market", category="Market")

        related = BlogRepository().get_related(test_db, "Guides", exclude_id=current.id)

        assert [blog.title for blog in related] == ["Other guide"]


class TestAdminRepository:
    def test_email_lookup_is_case_insensitive(self, test_db, make_admin):
        make_admin(email="owner@example.com")

        assert AdminRepository().get_by_email(test_db, " Owner@Example.COM ") is not None

    def test_record_login(self, test_db, make_admin):
        admin = make_admin()

        AdminRepository().record_login(test_db, admin)

        assert admin.last_login is not None


class TestContactRepository:
    def test_mark_read(self, test_db):
        contact = Contact(full_name="A", email="a@example.com", phone="1", message="hi")
        test_db.add(contact)
        test_db.commit()

        ContactRepository().mark_read(test_db, contact)

        assert contact.is_read is True


class TestCallbackRepository:
    """Reporting queries over callback requests."""

    def test_status_counts_cover_every_status(self, test_db, make_property):
        prop = make_property()
        add_callback(test_db, prop)
        add_callback(test_db, prop, status="Contacted")

        counts = CallbackRepository().status_counts(test_db)

        assert counts == {"Pending": 1, "Contacted": 1, "Completed": 0, "Cancelled": 0}

    def test_top_properties(self, test_db, make_property):
        popular = make_property(title="Popular")
        quiet = make_property(title="Quiet")
        for _ in range(3):
            add_callback(test_db, popular)
        add_callback(test_db, quiet)
        add_callback(test_db, None)

        top = CallbackRepository().top_properties(test_db, limit=5)

        assert top == [
            {"property_id": popular.id, "property_title": "Popular", "count": 3},
            {"property_id": quiet.id, "property_title": "Quiet", "count": 1},
        ]

    def test_count_since(self, test_db, make_property):
        prop = make_property()
        add_callback(test_db, prop, created_at=utcnow() - timedelta(days=45))
        add_callback(test_db, prop)

        assert CallbackRepository().count_since(test_db, days_ago(30)) == 1


class TestNewsletterRepository:
    def test_get_by_email(self, test_db):
        test_db.add(NewsletterSubscription(email="reader@example.com"))
        test_db.commit()

        found = NewsletterRepository().get_by_email(test_db, "READER@example.com")

        assert found is not None
        assert found.is_active is True
        assert found.source == "footer"

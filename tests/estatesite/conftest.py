"""
Shared fixtures: in-memory SQLite database, record factories and an API
client wired to the test database.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from src.estatesite.api.auth import create_admin_token, get_password_hash
from src.estatesite.api.dependencies import get_db, get_media_store
from src.estatesite.api.main import app
from src.estatesite.db.base import Base
from src.estatesite.db.models import Admin, AdminRole, Blog, Property

ADMIN_PASSWORD = "secret123"


@pytest.fixture(scope="function")
def test_engine():
    """
    Create an in-memory SQLite database shared by every session of a test.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_db(test_engine):
    """Session used by tests to seed and inspect data."""
    Session = sessionmaker(bind=test_engine)
    session = Session()

    yield session

    session.close()


def default_property_fields() -> dict:
    return {
        "title": "Marina Heights",
        "property_type": "Apartment",
        "city": "Dubai",
        "location": "Dubai Marina",
        "property_status": "Buy",
        "starting_price": 1_500_000,
        "bhk_count": 2,
        "bath_count": 2,
        "total_area": 1200,
        "description": "Sea-facing apartments",
        "developer": "Emaar",
        "usp": "Beach access",
        "construction_status": "Under Construction",
        "handover": "Q4 2027",
        "floors": 30,
        "elevation": "G+2P+28",
        "payment_plan": "60/40",
        "total_units": 200,
        "views": "Sea",
        "unit_types": [{"type": "2 BHK", "total_area_start": 1100, "total_area_end": 1300, "price": 1500000}],
        "highlights": ["Infinity pool"],
        "images": ["https://res.cloudinary.com/demo/image/upload/v1/properties/marina-1.jpg"],
        "amenities": ["Swimming Pool", "Gym"],
        "is_on_home_page": False,
    }


def build_property(**overrides) -> Property:
    fields = default_property_fields()
    fields.update(overrides)
    return Property(**fields)


def build_blog(**overrides) -> Blog:
    fields = {
        "image_url": "https://res.cloudinary.com/demo/image/upload/v1/blogs/cover.jpg",
        "date": "05-03-2024",
        "title": "Buying off-plan in Dubai",
        "category": "Guides",
        "description": "What to check before signing.",
        "tags": ["off-plan", "dubai"],
        "is_on_home_page": False,
    }
    fields.update(overrides)
    return Blog(**fields)


@pytest.fixture
def property_fields():
    """Complete set of Property column values."""
    return default_property_fields()


@pytest.fixture
def make_property(test_db):
    """Factory persisting a Property; keyword arguments override defaults."""

    def factory(**overrides) -> Property:
        prop = build_property(**overrides)
        test_db.add(prop)
        test_db.commit()
        return prop

    return factory


@pytest.fixture
def make_blog(test_db):
    """Factory persisting a Blog; keyword arguments override defaults."""

    def factory(**overrides) -> Blog:
        blog = build_blog(**overrides)
        test_db.add(blog)
        test_db.commit()
        return blog

    return factory


@pytest.fixture
def make_admin(test_db):
    """Factory persisting an Admin with ADMIN_PASSWORD."""

    def factory(email="owner@example.com", role=AdminRole.SUPER_ADMIN.value, **overrides) -> Admin:
        fields = {
            "name": "Site Owner",
            "email": email,
            "password_hash": get_password_hash(ADMIN_PASSWORD),
            "role": role,
            "is_active": True,
        }
        fields.update(overrides)
        admin = Admin(**fields)
        test_db.add(admin)
        test_db.commit()
        return admin

    return factory


class RecordingMediaStore:
    """Stands in for the Cloudinary store and remembers purge calls."""

    enabled = True

    def __init__(self):
        self.purged = []

    def purge_images(self, urls):
        batch = list(urls)
        self.purged.append(batch)
        return len(batch)


@pytest.fixture
def media_store():
    return RecordingMediaStore()


@pytest.fixture
def client(test_engine, media_store):
    """API client whose requests run against the test database."""
    TestingSession = sessionmaker(bind=test_engine, expire_on_commit=False)

    def override_get_db():
        db = TestingSession()
        try:
            yield db
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_media_store] = lambda: media_store

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def admin_password():
    return ADMIN_PASSWORD


@pytest.fixture
def super_admin(make_admin):
    return make_admin()


@pytest.fixture
def auth_headers(super_admin):
    """Bearer header of a super-admin."""
    return {"Authorization": f"Bearer {create_admin_token(super_admin)}"}


@pytest.fixture
def staff_headers(make_admin):
    """Bearer header of a regular admin."""
    admin = make_admin(email="staff@example.com", role=AdminRole.ADMIN.value, name="Staff")
    return {"Authorization": f"Bearer {create_admin_token(admin)}"}

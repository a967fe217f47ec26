"""
Tests for Result Projector
"""
from src.estatesite.db.models import CallbackRequest
from src.estatesite.query.projection import (
    CARD_AMENITY_LIMIT,
    blog_card,
    callback_view,
    homepage_property_card,
    property_card,
    property_detail,
)

GALLERY = [
    "https://res.cloudinary.com/demo/image/upload/v1/p/one.jpg",
    "https://res.cloudinary.com/demo/image/upload/v1/p/two.jpg",
]


class TestPropertyProjection:
    def test_card_uses_first_image_and_caps_amenities(self, make_property):
        prop = make_property(images=GALLERY, amenities=["A", "B", "C", "D", "E", "F", "G"])

        card = property_card(prop)

        assert card["image"] == GALLERY[0]
        assert "images" not in card
        assert card["amenities"] == ["A", "B", "C", "D", "E"]
        assert len(card["amenities"]) == CARD_AMENITY_LIMIT
        assert "description" not in card

    def test_card_does_not_modify_record(self, make_property):
        prop = make_property(images=GALLERY)

        property_card(prop)

        assert prop.images == GALLERY

    def test_homepage_card_fields(self, make_property):
        card = homepage_property_card(make_property(images=GALLERY))

        assert set(card) == {
            "id", "image", "title", "location", "bhk_count", "total_area", "handover", "starting_price",
        }

    def test_detail_keeps_everything(self, make_property):
        detail = property_detail(make_property(images=GALLERY, amenities=["A", "B", "C", "D", "E", "F"]))

        assert detail["images"] == GALLERY
        assert len(detail["amenities"]) == 6
        assert detail["is_on_home_page"] is False
        assert detail["unit_types"][0]["type"] == "2 BHK"


class TestBlogProjection:
    def test_card(self, make_blog):
        card = blog_card(make_blog(tags=["a", "b"]))

        assert card["tags"] == ["a", "b"]
        assert "description" not in card


class TestCallbackProjection:
    def test_property_summary_after_listing_removed(self, test_db):
        callback = CallbackRequest(
            property_id=None,
            property_title="Gone",
            name="Sam",
            email="sam@example.com",
            phone="+971500000000",
        )
        test_db.add(callback)
        test_db.commit()

        view = callback_view(callback, include_property=True)

        assert view["property"] is None
        assert view["property_title"] == "Gone"
        assert view["status"] == "Pending"

    def test_property_summary(self, test_db, make_property):
        prop = make_property(images=GALLERY)
        callback = CallbackRequest(
            property_id=prop.id,
            property_title=prop.title,
            name="Sam",
            email="sam@example.com",
            phone="+971500000000",
        )
        test_db.add(callback)
        test_db.commit()

        view = callback_view(callback, include_property=True)

        assert view["property"]["image"] == GALLERY[0]
        assert "property" not in callback_view(callback)

"""
Tests for the Blogs API
"""
from datetime import timedelta

from src.estatesite.db.base import utcnow


def blog_payload(**overrides) -> dict:
    payload = {
        "imageUrl": "https://res.cloudinary.com/demo/image/upload/v1/blogs/cover.jpg",
        "date": "2024-3-5",
        "title": "Golden visa explained",
        "description": "Residency through property investment.",
        "category": "Guides",
        "tags": "visa, residency ,",
    }
    payload.update(overrides)
    return payload


class TestCreateBlog:
    def test_date_and_tags_normalized(self, client, auth_headers):
        response = client.post("/api/blogs/", json=blog_payload(), headers=auth_headers)

        assert response.status_code == 201
        blog = response.json()["blog"]
        assert blog["date"] == "05-03-2024"
        assert blog["tags"] == ["visa", "residency"]
        assert blog["isOnHomePage"] is False

    def test_invalid_date(self, client, auth_headers):
        response = client.post("/api/blogs/", json=blog_payload(date="someday"), headers=auth_headers)

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Invalid date format", "field": "date"}

    def test_missing_title(self, client, auth_headers):
        payload = blog_payload()
        del payload["title"]

        response = client.post("/api/blogs/", json=payload, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["field"] == "title"

    def test_tag_too_long(self, client, auth_headers):
        response = client.post("/api/blogs/", json=blog_payload(tags=["visa", "y" * 101]), headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["field"] == "tags"

    def test_requires_token(self, client):
        assert client.post("/api/blogs/", json=blog_payload()).status_code == 401


class TestBrowseBlogs:
    def test_all_blogs(self, client, make_blog):
        make_blog()
        make_blog()

        body = client.get("/api/blogs/").json()

        assert body["count"] == 2
        assert "description" in body["blogs"][0]

    def test_pagination_defaults_to_nine(self, client, make_blog):
        for index in range(10):
            make_blog(title=f"Post {index}")

        body = client.get("/api/blogs/pagination").json()

        assert len(body["blogs"]) == 9
        assert body["pagination"]["totalPages"] == 2
        assert body["pagination"]["hasNextPage"] is True

    def test_category_search_and_sort(self, client, make_blog):
        now = utcnow()
        make_blog(title="Rates today", category="Finance", created_at=now - timedelta(days=1))
        make_blog(title="Rates history", category="Finance", created_at=now - timedelta(days=5))
        make_blog(title="Rates elsewhere", category="Guides")

        newest = client.get("/api/blogs/pagination", params={"category": "Finance", "search": "rates"}).json()
        oldest = client.get(
            "/api/blogs/pagination", params={"category": "Finance", "search": "rates", "sort": "oldest"}
        ).json()

        assert [blog["title"] for blog in newest["blogs"]] == ["Rates today", "Rates history"]
        assert [blog["title"] for blog in oldest["blogs"]] == ["Rates history", "Rates today"]

    def test_all_category(self, client, make_blog):
        make_blog(category="Finance")
        make_blog(category="Guides")

        body = client.get("/api/blogs/pagination", params={"category": "All"}).json()

        assert body["pagination"]["total"] == 2

    def test_unknown_sort_falls_back_to_newest(self, client, make_blog):
        now = utcnow()
        make_blog(title="Older", created_at=now - timedelta(days=3))
        make_blog(title="Newer", created_at=now)

        response = client.get("/api/blogs/pagination", params={"sort": "random"})

        assert response.status_code == 200
        assert [blog["title"] for blog in response.json()["blogs"]] == ["Newer", "Older"]

    def test_categories(self, client, make_blog):
        make_blog(category="Market")
        make_blog(category="Guides")
        make_blog(category=None)

        assert client.get("/api/blogs/meta/categories").json()["categories"] == ["Guides", "Market"]

    def test_related(self, client, make_blog):
        current = make_blog(title="Current", category="Guides")
        make_blog(title="Sibling", category="Guides")
        make_blog(title="Other", category="Market")

        body = client.get(
            "/api/blogs/related/category", params={"category": "Guides", "exclude": current.id}
        ).json()

        assert [blog["title"] for blog in body["blogs"]] == ["Sibling"]

    def test_related_requires_category(self, client):
        response = client.get("/api/blogs/related/category")

        assert response.status_code == 400
        assert response.json()["message"] == "Category is required"

    def test_suggestions(self, client, make_blog):
        make_blog(title="Golden visa", tags=["residency"])
        make_blog(title="Service charges", tags=["fees"])

        body = client.get("/api/blogs/search/query", params={"q": "resid"}).json()

        assert [result["title"] for result in body["results"]] == ["Golden visa"]

    def test_suggestion_query_too_short(self, client):
        response = client.get("/api/blogs/search/query", params={"q": "a"})

        assert response.status_code == 400
        assert response.json()["message"] == "Search query must be at least 2 characters"

    def test_homepage_may_be_empty(self, client, make_blog):
        make_blog()

        body = client.get("/api/blogs/homepage").json()

        assert body == {"success": True, "count": 0, "blogs": []}


class TestSingleBlog:
    def test_get(self, client, make_blog):
        blog = make_blog()

        assert client.get(f"/api/blogs/{blog.id}").json()["blog"]["title"] == blog.title

    def test_get_missing(self, client):
        response = client.get("/api/blogs/321")

        assert response.status_code == 404
        assert response.json()["message"] == "Blog not found"

    def test_update(self, client, auth_headers, make_blog):
        blog = make_blog()

        response = client.put(
            f"/api/blogs/{blog.id}",
            json={"date": "2024-12-25", "tags": ["market"], "category": ""},
            headers=auth_headers,
        )

        updated = response.json()["blog"]
        assert updated["date"] == "25-12-2024"
        assert updated["tags"] == ["market"]
        assert updated["category"] is None
        assert updated["title"] == blog.title

    def test_delete(self, client, auth_headers, make_blog):
        blog = make_blog()

        assert client.delete(f"/api/blogs/{blog.id}", headers=auth_headers).status_code == 200
        assert client.get(f"/api/blogs/{blog.id}").status_code == 404


class TestBlogHomepageToggles:
    def test_capacity_of_three(self, client, auth_headers, make_blog):
        blogs = [make_blog() for _ in range(4)]

        for blog in blogs[:3]:
            assert client.patch(f"/api/blogs/{blog.id}/add-to-home", headers=auth_headers).status_code == 200
        response = client.patch(f"/api/blogs/{blogs[3].id}/add-to-home", headers=auth_headers)

        assert response.status_code == 400
        assert "Maximum 3 blogs" in response.json()["message"]
        assert client.get("/api/blogs/homepage").json()["count"] == 3

    def test_remove(self, client, auth_headers, make_blog):
        blog = make_blog(is_on_home_page=True)

        response = client.patch(f"/api/blogs/{blog.id}/remove-from-home", headers=auth_headers)

        assert response.json()["homepageCount"] == 0
        assert response.json()["blog"]["isOnHomePage"] is False

    def test_add_twice(self, client, auth_headers, make_blog):
        blog = make_blog(is_on_home_page=True)

        response = client.patch(f"/api/blogs/{blog.id}/add-to-home", headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Blog is already on the homepage"

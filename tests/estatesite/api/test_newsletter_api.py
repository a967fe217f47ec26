"""
Tests for the Newsletter API
"""


class TestSubscribe:
    def test_new_subscription(self, client):
        response = client.post("/api/newsletter/subscribe", json={"email": "Reader@Example.com", "source": "popup"})

        assert response.status_code == 201
        subscription = response.json()["subscription"]
        assert subscription["email"] == "reader@example.com"
        assert subscription["source"] == "popup"
        assert subscription["isActive"] is True

    def test_already_subscribed(self, client):
        client.post("/api/newsletter/subscribe", json={"email": "reader@example.com"})

        response = client.post("/api/newsletter/subscribe", json={"email": "reader@example.com"})

        assert response.status_code == 200
        assert response.json()["alreadySubscribed"] is True

    def test_reactivation(self, client):
        client.post("/api/newsletter/subscribe", json={"email": "reader@example.com"})
        client.post("/api/newsletter/unsubscribe", json={"email": "reader@example.com"})

        response = client.post("/api/newsletter/subscribe", json={"email": "reader@example.com"})

        assert response.status_code == 200
        assert response.json()["subscription"]["isActive"] is True
        assert response.json()["alreadySubscribed"] is False

    def test_unknown_source(self, client):
        response = client.post("/api/newsletter/subscribe", json={"email": "reader@example.com", "source": "tv"})

        assert response.status_code == 400
        assert response.json()["field"] == "source"


class TestUnsubscribe:
    def test_unknown_address(self, client):
        response = client.post("/api/newsletter/unsubscribe", json={"email": "ghost@example.com"})

        assert response.status_code == 404
        assert response.json()["message"] == "Email not found in our subscription list"

    def test_twice(self, client):
        client.post("/api/newsletter/subscribe", json={"email": "reader@example.com"})

        first = client.post("/api/newsletter/unsubscribe", json={"email": "reader@example.com"})
        second = client.post("/api/newsletter/unsubscribe", json={"email": "reader@example.com"})

        assert first.json()["message"] == "You have been successfully unsubscribed"
        assert second.json()["message"] == "You are already unsubscribed"


class TestNewsletterAdmin:
    def test_subscribers_and_stats(self, client, auth_headers):
        for email, source in (("a@example.com", "footer"), ("b@example.com", "popup"), ("c@example.com", "popup")):
            client.post("/api/newsletter/subscribe", json={"email": email, "source": source})
        client.post("/api/newsletter/unsubscribe", json={"email": "c@example.com"})

        active = client.get("/api/newsletter/subscribers", params={"isActive": "true"}, headers=auth_headers).json()
        stats = client.get("/api/newsletter/stats", headers=auth_headers).json()["stats"]

        assert active["pagination"]["total"] == 2
        assert active["pagination"]["limit"] == 50
        assert active["activeCount"] == 2
        assert stats["total"] == 3
        assert stats["inactive"] == 1
        assert stats["bySource"] == {"footer": 1, "popup": 2, "landing_page": 0, "other": 0}
        assert stats["recentSubscriptions"] == 3

    def test_delete(self, client, auth_headers):
        subscription_id = client.post(
            "/api/newsletter/subscribe", json={"email": "a@example.com"}
        ).json()["subscription"]["id"]

        assert client.delete(f"/api/newsletter/{subscription_id}", headers=auth_headers).status_code == 200
        assert client.delete(f"/api/newsletter/{subscription_id}", headers=auth_headers).status_code == 404

    def test_requires_token(self, client):
        assert client.get("/api/newsletter/stats").status_code == 401

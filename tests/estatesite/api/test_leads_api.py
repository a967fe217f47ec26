"""
Tests for the Guide Leads API
"""


class TestGuideLeads:
    def test_submit(self, client):
        response = client.post("/api/leads/blunders/submit", json={"email": "Buyer@Example.com", "name": "Kim"})

        assert response.status_code == 201
        lead = response.json()["lead"]
        assert lead["guide"] == "blunders"
        assert lead["email"] == "buyer@example.com"

    def test_name_optional(self, client):
        response = client.post("/api/leads/strategies/submit", json={"email": "buyer@example.com"})

        assert response.status_code == 201
        assert response.json()["lead"]["name"] == ""

    def test_unknown_guide(self, client):
        response = client.post("/api/leads/secrets/submit", json={"email": "buyer@example.com"})

        assert response.status_code == 400
        assert response.json()["field"] == "guide"

    def test_guides_are_listed_separately(self, client, auth_headers):
        client.post("/api/leads/blunders/submit", json={"email": "one@example.com"})
        client.post("/api/leads/strategies/submit", json={"email": "two@example.com"})

        body = client.get("/api/leads/blunders/all", headers=auth_headers).json()

        assert [lead["email"] for lead in body["leads"]] == ["one@example.com"]
        assert body["pagination"]["limit"] == 20

    def test_listing_requires_token(self, client):
        assert client.get("/api/leads/blunders/all").status_code == 401

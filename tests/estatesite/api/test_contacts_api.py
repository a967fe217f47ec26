"""
Tests for the Contacts API
"""
from src.estatesite.db.models import Contact


def contact_payload(**overrides) -> dict:
    payload = {
        "fullName": "Alex Doe",
        "email": "Alex@Example.com",
        "phone": "+971500000001",
        "message": "Interested in Creek Harbour.",
    }
    payload.update(overrides)
    return payload


def add_contacts(session, count, **fields):
    for index in range(count):
        session.add(Contact(
            full_name=f"Person {index}",
            email=f"person{index}@example.com",
            phone="1",
            message="hello",
            **fields,
        ))
    session.commit()


class TestSubmitContact:
    def test_submit(self, client):
        response = client.post("/api/contacts/create", json=contact_payload())

        assert response.status_code == 201
        contact = response.json()["contact"]
        assert contact["email"] == "alex@example.com"
        assert contact["isRead"] is False

    def test_invalid_email(self, client):
        response = client.post("/api/contacts/create", json=contact_payload(email="not-an-email"))

        assert response.status_code == 400
        assert response.json()["field"] == "email"

    def test_missing_message(self, client):
        response = client.post("/api/contacts/create", json=contact_payload(message="   "))

        assert response.status_code == 400
        assert response.json()["field"] == "message"


class TestAdminContacts:
    def test_requires_token(self, client):
        assert client.get("/api/contacts/admin/all").status_code == 401

    def test_paginated_with_read_filter(self, client, auth_headers, test_db):
        add_contacts(test_db, 12)
        add_contacts(test_db, 2, is_read=True)

        unread = client.get("/api/contacts/admin/all", params={"isRead": "false"}, headers=auth_headers).json()
        everything = client.get("/api/contacts/admin/all", headers=auth_headers).json()

        assert unread["pagination"]["total"] == 12
        assert len(unread["contacts"]) == 10
        assert everything["pagination"]["total"] == 14
        assert everything["pagination"]["totalPages"] == 2

    def test_all_simple(self, client, auth_headers, test_db):
        add_contacts(test_db, 3)

        body = client.get("/api/contacts/admin/all-simple", headers=auth_headers).json()

        assert body["count"] == 3

    def test_opening_marks_read(self, client, auth_headers, test_db):
        add_contacts(test_db, 1)
        contact_id = test_db.query(Contact).one().id

        response = client.get(f"/api/contacts/getbyid/{contact_id}", headers=auth_headers)

        assert response.json()["contact"]["isRead"] is True

    def test_delete(self, client, auth_headers, test_db):
        add_contacts(test_db, 1)
        contact_id = test_db.query(Contact).one().id

        assert client.delete(f"/api/contacts/delete/{contact_id}", headers=auth_headers).status_code == 200
        assert client.delete(f"/api/contacts/delete/{contact_id}", headers=auth_headers).status_code == 404

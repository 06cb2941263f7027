from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from tests.helpers import admin_login, bearer, user_login


@pytest.fixture()
def user_headers(client: TestClient, smtp_configured, outbox):
    return bearer(user_login(client, outbox).json()["access"])


@pytest.fixture()
def admin_headers(client: TestClient):
    return bearer(admin_login(client).json()["access"])


@pytest.mark.parametrize(
    "field, value, other",
    [
        ("name", "Ana", "Ana María"),
        ("mobile", "+52 612 000 0000", "+52 612 111 1111"),
        ("address", "Calle 1, La Paz", "Calle 2, La Paz"),
    ],
)
def test_user_field_crud(client: TestClient, user_headers, field, value, other):
    path = f"/api/auth/profile/{field}"

    created = client.post(path, json={field: value}, headers=user_headers)
    assert created.status_code == 201
    assert created.json() == {field: value}

    dup = client.post(path, json={field: other}, headers=user_headers)
    assert dup.status_code == 409

    assert client.get(path, headers=user_headers).json() == {field: value}

    updated = client.put(path, json={field: other}, headers=user_headers)
    assert updated.json() == {field: other}

    deleted = client.delete(path, headers=user_headers)
    assert deleted.json() == {field: None}
    assert client.get(path, headers=user_headers).json() == {field: None}

    # Tras borrar se puede volver a crear
    assert client.post(path, json={field: value}, headers=user_headers).status_code == 201


def test_user_field_blank_is_stored_as_none(client: TestClient, user_headers):
    resp = client.put("/api/auth/profile/name", json={"name": "   "}, headers=user_headers)

    assert resp.json() == {"name": None}


def test_user_profile_requires_auth(client: TestClient):
    assert client.get("/api/auth/profile/mobile").status_code == 401


def test_admin_name_crud(client: TestClient, admin_headers):
    path = "/api/admin/auth/profile/name"

    assert client.get(path, headers=admin_headers).json() == {"name": None}

    created = client.post(path, json={"name": "Root"}, headers=admin_headers)
    assert created.status_code == 201
    assert created.json() == {"name": "Root"}
    assert client.post(path, json={"name": "Otro"}, headers=admin_headers).status_code == 409

    assert client.put(path, json={"name": "Admin"}, headers=admin_headers).json() == {"name": "Admin"}
    assert client.delete(path, headers=admin_headers).json() == {"name": None}


def test_users_count_and_page(client: TestClient, smtp_configured, outbox):
    for i in range(3):
        assert user_login(client, outbox, email=f"user{i}@example.com").status_code == 200
    headers = bearer(admin_login(client).json()["access"])

    count = client.get("/api/admin/auth/users/count", headers=headers)
    assert count.json() == {"count": 3}

    page1 = client.get("/api/admin/auth/users", params={"page": 1, "page_size": 2}, headers=headers).json()
    page2 = client.get("/api/admin/auth/users", params={"page": 2, "page_size": 2}, headers=headers).json()

    assert page1["page"] == 1
    assert page1["page_size"] == 2
    assert len(page1["items"]) == 2
    assert len(page2["items"]) == 1
    emails = {it["email"] for it in page1["items"] + page2["items"]}
    assert emails == {"user0@example.com", "user1@example.com", "user2@example.com"}
    assert all(it["id"] and it["created_at"] for it in page1["items"])


def test_users_page_excludes_deleted(client: TestClient, smtp_configured, outbox):
    keep = user_login(client, outbox, email="keep@example.com")
    gone = user_login(client, outbox, email="gone@example.com")
    assert keep.status_code == 200
    client.delete("/api/auth/account", headers=bearer(gone.json()["access"]))
    headers = bearer(admin_login(client).json()["access"])

    assert client.get("/api/admin/auth/users/count", headers=headers).json() == {"count": 1}
    items = client.get("/api/admin/auth/users", headers=headers).json()["items"]
    assert [it["email"] for it in items] == ["keep@example.com"]


def test_users_page_size_bounds(client: TestClient, admin_headers):
    too_big = client.get("/api/admin/auth/users", params={"page_size": 101}, headers=admin_headers)
    zero_page = client.get("/api/admin/auth/users", params={"page": 0}, headers=admin_headers)

    assert too_big.status_code == 422
    assert zero_page.status_code == 422


@pytest.mark.parametrize("field", ["name", "mobile", "address"])
def test_user_field_write_requires_value(client: TestClient, user_headers, field):
    path = f"/api/auth/profile/{field}"

    assert client.post(path, json={}, headers=user_headers).status_code == 422
    assert client.put(path, json={}, headers=user_headers).status_code == 422
    assert client.get(path, headers=user_headers).json() == {field: None}


def test_admin_name_write_requires_value(client: TestClient, admin_headers):
    assert client.post("/api/admin/auth/profile/name", json={}, headers=admin_headers).status_code == 422

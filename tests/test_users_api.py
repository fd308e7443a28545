# File: tests/test_users_api.py

"""
Single-record endpoints: list, get, create, update, delete.
"""

import math
import uuid

import pytest


MISSING_ID = str(uuid.uuid4())


def test_health_endpoint(client):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_unmatched_route_returns_not_found(client):
    resp = client.get("/api/nothing-here")
    assert resp.status_code == 404
    assert resp.json() == {"message": "Not Found"}


@pytest.mark.parametrize(
    "method,path",
    [("delete", "/api/users"), ("put", "/api/users"), ("post", f"/api/users/{MISSING_ID}")],
)
def test_unrouted_method_returns_not_found(client, method, path):
    resp = client.request(method.upper(), path)
    assert resp.status_code == 404
    assert resp.json() == {"message": "Not Found"}


def test_list_users_empty(client):
    resp = client.get("/api/users")
    assert resp.status_code == 200
    assert resp.json() == {"users": [], "totalPages": 0, "currentPage": 1, "totalUsers": 0}


def test_create_user(client):
    resp = client.post("/api/users", json={"name": "Alice", "email": "alice@example.com"})
    assert resp.status_code == 201
    data = resp.json()
    assert data["name"] == "Alice"
    assert data["email"] == "alice@example.com"
    uuid.UUID(data["id"])
    assert "created_at" in data and "updated_at" in data


def test_create_user_validation_error(client, total_users):
    resp = client.post("/api/users", json={"name": "Al", "email": "alice@example.com"})
    assert resp.status_code == 400
    assert resp.json() == {"message": "Name must be at least 3 characters"}
    assert total_users() == 0


def test_create_user_without_body(client):
    resp = client.post("/api/users")
    assert resp.status_code == 400
    assert resp.json() == {"message": "User data must be an object"}


def test_create_user_with_malformed_json(client):
    resp = client.post("/api/users", content=b"{not json", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert "message" in resp.json()


def test_create_duplicate_email_does_not_mutate_store(client, make_user, total_users):
    make_user(email="dup@example.com")
    resp = client.post("/api/users", json={"name": "Someone Else", "email": "dup@example.com"})
    assert resp.status_code == 400
    assert resp.json() == {"message": "Email already exists"}
    assert total_users() == 1


def test_get_user(client, make_user):
    created = make_user()
    resp = client.get(f"/api/users/{created['id']}")
    assert resp.status_code == 200
    data = resp.json()
    for key in ("id", "name", "email"):
        assert data[key] == created[key]


@pytest.mark.parametrize("method", ["get", "delete"])
def test_invalid_id_is_bad_request(client, method):
    resp = getattr(client, method)("/api/users/not-a-valid-id")
    assert resp.status_code == 400
    assert resp.json() == {"message": "Invalid user ID"}


@pytest.mark.parametrize("method", ["get", "delete"])
def test_missing_id_is_not_found(client, method):
    resp = getattr(client, method)(f"/api/users/{MISSING_ID}")
    assert resp.status_code == 404
    assert resp.json() == {"message": "User not found"}


def test_update_user(client, make_user):
    created = make_user()
    resp = client.put(
        f"/api/users/{created['id']}",
        json={"name": "Alice Renamed", "email": "alice.new@example.com"},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["id"] == created["id"]
    assert data["name"] == "Alice Renamed"
    assert data["email"] == "alice.new@example.com"
    assert client.get(f"/api/users/{created['id']}").json()["email"] == "alice.new@example.com"


def test_update_keeping_own_email_is_allowed(client, make_user):
    created = make_user()
    resp = client.put(f"/api/users/{created['id']}", json={"name": "Alice Two", "email": created["email"]})
    assert resp.status_code == 200
    assert resp.json()["name"] == "Alice Two"


def test_update_to_another_users_email_conflicts(client, make_user):
    make_user(name="Taken", email="taken@example.com")
    other = make_user(name="Other", email="other@example.com")
    resp = client.put(f"/api/users/{other['id']}", json={"name": "Other", "email": "taken@example.com"})
    assert resp.status_code == 400
    assert resp.json() == {"message": "Email already exists"}
    assert client.get(f"/api/users/{other['id']}").json()["email"] == "other@example.com"


def test_update_validation_runs_before_id_check(client):
    resp = client.put("/api/users/not-a-valid-id", json={"name": "Al", "email": "x@example.com"})
    assert resp.status_code == 400
    assert resp.json() == {"message": "Name must be at least 3 characters"}


def test_update_invalid_id(client):
    resp = client.put("/api/users/not-a-valid-id", json={"name": "Valid", "email": "x@example.com"})
    assert resp.status_code == 400
    assert resp.json() == {"message": "Invalid user ID"}


def test_update_missing_id(client):
    resp = client.put(f"/api/users/{MISSING_ID}", json={"name": "Valid", "email": "x@example.com"})
    assert resp.status_code == 404
    assert resp.json() == {"message": "User not found"}


def test_delete_user(client, make_user, total_users):
    created = make_user()
    resp = client.delete(f"/api/users/{created['id']}")
    assert resp.status_code == 200
    assert resp.json() == {"message": "User deleted successfully"}
    assert client.get(f"/api/users/{created['id']}").status_code == 404
    assert total_users() == 0


@pytest.mark.parametrize("page,limit", [(1, 10), (2, 10), (3, 4), (2, 7), (5, 3)])
def test_pagination_arithmetic(client, page, limit):
    total = 13
    client.post(
        "/api/users/bulk",
        json=[{"name": f"User {i:02d}", "email": f"user{i}@example.com"} for i in range(total)],
    )

    resp = client.get("/api/users", params={"page": page, "limit": limit})
    assert resp.status_code == 200
    data = resp.json()
    skip = (page - 1) * limit
    assert data["totalUsers"] == total
    assert data["totalPages"] == math.ceil(total / limit)
    assert data["currentPage"] == page
    assert len(data["users"]) == max(0, min(limit, total - skip))


def test_pages_do_not_overlap(client):
    client.post(
        "/api/users/bulk",
        json=[{"name": f"User {i:02d}", "email": f"user{i}@example.com"} for i in range(6)],
    )
    first = client.get("/api/users", params={"page": 1, "limit": 3}).json()["users"]
    second = client.get("/api/users", params={"page": 2, "limit": 3}).json()["users"]
    ids = {u["id"] for u in first} | {u["id"] for u in second}
    assert len(ids) == 6


@pytest.mark.parametrize("page,limit", [("abc", "xyz"), ("0", "0"), ("-2", "-5")])
def test_bad_pagination_params_fall_back_to_defaults(client, page, limit):
    resp = client.get("/api/users", params={"page": page, "limit": limit})
    assert resp.status_code == 200
    data = resp.json()
    assert data["currentPage"] == 1
    assert data["totalPages"] == 0


@pytest.mark.parametrize("page,limit", [(str(10**20), "5"), ("3", str(2**31)), (str(2**63), str(2**63))])
def test_huge_pagination_params_fall_back_to_defaults(client, page, limit):
    resp = client.get("/api/users", params={"page": page, "limit": limit})
    assert resp.status_code == 200
    assert resp.json()["currentPage"] == (3 if page == "3" else 1)


def test_largest_accepted_page_returns_empty_slice(client, make_user):
    make_user()
    resp = client.get("/api/users", params={"page": str(2**31 - 1), "limit": "10"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["users"] == []
    assert data["currentPage"] == 2**31 - 1
    assert data["totalUsers"] == 1

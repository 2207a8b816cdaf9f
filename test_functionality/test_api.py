"""
REST API

- Status mapping: 400 validation, 401 no/bad token, 403 wrong role or
  not the owner, 404 unknown id.
- Envelope {success, ...} on every response, never a password field.
- Cookie token wins over the Authorization header.
"""
import dataclasses
import json

import pytest
from fastapi.testclient import TestClient

from messhub.adapters.rest.app import create_app

from conftest import PASSWORD, bearer

MESS = {
    "name": "Annapurna Mess",
    "area": "Koramangala",
    "phone": "9876543210",
    "address": "4th Block, Koramangala, Bengaluru",
    "description": "Home-style South Indian thalis.",
}


def _meal(mess_id, **overrides):
    body = {
        "mess_id": mess_id,
        "name": "Veg Thali",
        "meal_type": "lunch",
        "is_veg": True,
        "description": "Rice, sambar, rasam and curd.",
        "price": 80,
    }
    body.update(overrides)
    return body


def _order(meal_id, quantity=2, price=80):
    return {
        "items": [{"meal_id": meal_id, "quantity": quantity, "price": price}],
        "delivery_address": "221B Baker Street, Bengaluru",
        "delivery_phone": "9123456780",
        "payment_method": "COD",
    }


def _send_json(client, method, url, body, headers):
    """Encode *body* with the standard json module, which writes Infinity and NaN."""
    return client.request(
        method, url, content=json.dumps(body),
        headers={**headers, "Content-Type": "application/json"},
    )


def _catalog(client, owner_headers):
    mess = client.post("/mess", json=MESS, headers=owner_headers).json()["mess"]
    meal = client.post("/menu", json=_meal(mess["id"]), headers=owner_headers).json()["meal"]
    return mess, meal


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_register_sets_cookie_and_hides_password(client):
    resp = client.post("/auth/register", json={
        "name": "Asha Rao", "email": "asha@example.com", "password": PASSWORD, "role": "CUSTOMER",
    })
    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["user"]["email"] == "asha@example.com"
    assert "password" not in body["user"] and "password_hash" not in body["user"]
    assert resp.cookies.get("token") == body["token"]


def test_register_then_login_same_account(client, api):
    user, _ = api.register("OWNER", email="owner@example.com")
    resp = client.post("/auth/login", json={"email": "owner@example.com", "password": PASSWORD})
    assert resp.status_code == 200
    assert resp.json()["user"]["id"] == user["id"]


def test_login_failure_is_generic_401(client, api):
    api.register(email="asha@example.com")
    wrong_password = client.post("/auth/login", json={"email": "asha@example.com", "password": "nope-nope"})
    wrong_role = client.post("/auth/login", json={
        "email": "asha@example.com", "password": PASSWORD, "role": "OWNER",
    })
    for resp in (wrong_password, wrong_role):
        assert resp.status_code == 401
        assert resp.json() == {"success": False, "message": "Invalid credentials"}


def test_duplicate_email_is_400(client, api):
    api.register(email="asha@example.com")
    resp = client.post("/auth/register", json={
        "name": "Asha Again", "email": "ASHA@example.com", "password": PASSWORD, "role": "CUSTOMER",
    })
    assert resp.status_code == 400
    assert resp.json()["message"] == "User with this email already exists"


def test_admin_cannot_self_register(client):
    resp = client.post("/auth/register", json={
        "name": "Mallory", "email": "m@example.com", "password": PASSWORD, "role": "ADMIN",
    })
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_body_validation_is_400_with_errors(client):
    resp = client.post("/auth/register", json={"name": "Al", "email": "bad", "password": "1"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["message"] == "Validation error"
    assert len(body["errors"]) >= 3


def test_missing_or_bad_token_is_401(client):
    assert client.get("/mess").status_code == 401
    resp = client.get("/mess", headers=bearer("garbage"))
    assert resp.status_code == 401
    assert resp.json()["success"] is False


def test_wrong_role_is_403(client, api):
    _, customer = api.register("CUSTOMER")
    resp = client.post("/mess", json=MESS, headers=customer)
    assert resp.status_code == 403
    assert resp.json() == {"success": False, "message": "Access denied"}
    assert client.get("/users", headers=customer).status_code == 403


def test_cookie_wins_over_header(client, api):
    customer, customer_headers = api.register("CUSTOMER")
    _, owner_headers = api.register("OWNER")

    client.cookies.set("token", customer_headers["Authorization"].split()[1])
    resp = client.get("/auth/me", headers=owner_headers)
    client.cookies.clear()
    assert resp.json()["user"]["id"] == customer["id"]


def test_logout_clears_cookie(client):
    client.post("/auth/register", json={
        "name": "Asha Rao", "email": "asha@example.com", "password": PASSWORD, "role": "CUSTOMER",
    })
    assert client.get("/auth/me").status_code == 200

    resp = client.post("/auth/logout")
    assert resp.status_code == 200
    assert "token=" in resp.headers["set-cookie"]
    assert client.get("/auth/me").status_code == 401


def test_zero_match_filter_is_empty_200(client, api):
    _, owner = api.register("OWNER")
    client.post("/mess", json=MESS, headers=owner)
    resp = client.get("/mess", params={"area": "Atlantis"}, headers=owner)
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "count": 0, "messes": []}


def test_unknown_id_is_404(client, api):
    _, customer = api.register("CUSTOMER")
    resp = client.get("/mess/9999", headers=customer)
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Mess not found"}


def test_profile_created_once(client, api):
    _, customer = api.register("CUSTOMER")
    body = {"phone": "9876543210", "address": "14 Residency Road, Bengaluru"}
    assert client.post("/profile/customer", json=body, headers=customer).status_code == 201
    second = client.post("/profile/customer", json={**body, "phone": "9000000000"}, headers=customer)
    assert second.status_code == 400
    profile = client.get("/profile/customer", headers=customer).json()["profile"]
    assert profile["phone"] == "9876543210"
    assert client.get("/profile/owner", headers=customer).status_code == 403


def test_owner_manages_only_own_mess(client, api):
    _, owner = api.register("OWNER")
    _, rival = api.register("OWNER")
    mess, meal = _catalog(client, owner)

    assert client.put(f"/mess/{mess['id']}", json={"area": "HSR Layout"}, headers=rival).status_code == 403
    assert client.put(f"/menu/{meal['id']}", json={"price": 1}, headers=rival).status_code == 403
    assert client.post("/menu", json=_meal(mess["id"]), headers=rival).status_code == 403

    resp = client.put(f"/mess/{mess['id']}", json={"area": "HSR Layout"}, headers=owner)
    assert resp.status_code == 200
    assert resp.json()["mess"]["area"] == "HSR Layout"

    admin = api.admin_headers()
    assert client.delete(f"/mess/{mess['id']}", headers=admin).status_code == 200
    assert client.get(f"/menu/{meal['id']}", headers=owner).status_code == 404


def test_order_flow(client, api):
    _, owner = api.register("OWNER")
    _, alice = api.register("CUSTOMER")
    _, bob = api.register("CUSTOMER")
    _, meal = _catalog(client, owner)

    resp = client.post("/orders", json=_order(meal["id"], quantity=3, price=80), headers=alice)
    assert resp.status_code == 201
    order = resp.json()["order"]
    assert order["total_amount"] == 240
    assert order["status"] == "PLACED"

    assert client.get(f"/orders/{order['id']}", headers=alice).status_code == 200
    assert client.get(f"/orders/{order['id']}", headers=bob).status_code == 403
    assert client.post("/orders", json=_order(meal["id"]), headers=owner).status_code == 403

    mine = client.get("/orders/mine", headers=alice).json()
    assert [o["id"] for o in mine["orders"]] == [order["id"]]

    moved = client.put(f"/orders/{order['id']}", json={"status": "PREPARING"}, headers=owner)
    assert moved.json()["order"]["status"] == "PREPARING"
    back = client.put(f"/orders/{order['id']}", json={"status": "PLACED"}, headers=owner)
    assert back.status_code == 400

    assert client.get("/orders/total-sales", headers=owner).json()["total_sales"] == 240
    top = client.get("/orders/top-meals", params={"limit": 1}, headers=owner).json()["top_meals"]
    assert top[0]["meal_id"] == meal["id"]
    assert client.get("/orders/status/PREPARING", headers=owner).json()["count"] == 1

    dashboard = client.get("/owner/dashboard", headers=owner).json()["dashboard"]
    assert dashboard["total_sales"] == 240


def test_unavailable_meal_order_is_400(client, api):
    _, owner = api.register("OWNER")
    _, customer = api.register("CUSTOMER")
    _, meal = _catalog(client, owner)
    client.put(f"/menu/{meal['id']}", json={"is_available": False}, headers=owner)

    resp = client.post("/orders", json=_order(meal["id"]), headers=customer)
    assert resp.status_code == 400
    assert client.get("/orders/mine", headers=customer).json()["orders"] == []

    missing = client.post("/orders", json=_order(9999), headers=customer)
    assert missing.status_code == 404


def test_reviews_author_only(client, api):
    _, owner = api.register("OWNER")
    _, alice = api.register("CUSTOMER")
    _, bob = api.register("CUSTOMER")
    mess, _ = _catalog(client, owner)

    assert client.post("/reviews", json={"mess_id": mess["id"], "rating": 6}, headers=alice).status_code == 400
    review = client.post("/reviews", json={"mess_id": mess["id"], "rating": 4}, headers=alice).json()["review"]

    assert client.put(f"/reviews/{review['id']}", json={"rating": 1}, headers=bob).status_code == 403
    assert client.delete(f"/reviews/{review['id']}", headers=bob).status_code == 403
    assert client.put(f"/reviews/{review['id']}", json={"rating": 5}, headers=alice).status_code == 200

    average = client.get(f"/reviews/mess/{mess['id']}/average", headers=bob).json()
    assert average == {"success": True, "average_rating": 5.0, "total_reviews": 1}


def test_contacts_admin_only(client, api):
    _, customer = api.register("CUSTOMER")
    admin = api.admin_headers()

    incomplete = client.post("/contacts", json={"name": "Asha"}, headers=customer)
    assert incomplete.status_code == 400
    assert incomplete.json()["message"] == "All fields are required"

    created = client.post("/contacts", json={
        "name": "Asha", "email": "asha@example.com", "message": "Please add Jain meals.",
    }, headers=customer)
    assert created.status_code == 201

    assert client.get("/contacts", headers=customer).status_code == 403
    assert client.delete("/contacts", headers=customer).status_code == 403
    assert client.get("/contacts", headers=admin).json()["count"] == 1
    grouped = client.get("/contacts/grouped", headers=admin).json()["groups"]
    assert grouped[0]["message_count"] == 1
    assert client.delete("/contacts", headers=admin).json()["deleted_count"] == 1


def test_users_admin_listing(client, api):
    api.register("CUSTOMER")
    api.register("OWNER")
    admin = api.admin_headers()

    users = client.get("/users", headers=admin).json()
    assert users["count"] == 2
    assert all("password_hash" not in u for u in users["users"])
    stats = client.get("/users/stats", headers=admin).json()["stats"]
    assert stats == {"total_users": 2, "total_customers": 1, "total_owners": 1}


def test_non_finite_prices_are_400_and_not_stored(client, api):
    _, owner = api.register("OWNER")
    _, customer = api.register("CUSTOMER")
    mess, meal = _catalog(client, owner)

    for price in (float("inf"), float("nan")):
        body = _meal(mess["id"], name="Gold Thali", price=price)
        assert _send_json(client, "POST", "/menu", body, owner).status_code == 400
        assert _send_json(client, "PUT", f"/menu/{meal['id']}", {"price": price}, owner).status_code == 400
        resp = _send_json(client, "POST", "/orders", _order(meal["id"], price=price), customer)
        assert resp.status_code == 400
        assert resp.json()["success"] is False

    menu = client.get("/menu", params={"mess_id": mess["id"]}, headers=owner).json()
    assert [(m["id"], m["price"]) for m in menu["meals"]] == [(meal["id"], 80)]
    assert client.get("/orders/mine", headers=customer).json()["orders"] == []


def test_rival_owner_cannot_change_or_delete_an_order(client, api):
    _, owner = api.register("OWNER")
    _, rival = api.register("OWNER")
    _, customer = api.register("CUSTOMER")
    _, meal = _catalog(client, owner)
    client.post("/mess", json=MESS, headers=rival)
    order = client.post("/orders", json=_order(meal["id"]), headers=customer).json()["order"]

    moved = client.put(f"/orders/{order['id']}", json={"status": "CANCELLED"}, headers=rival)
    assert moved.status_code == 403
    assert client.delete(f"/orders/{order['id']}", headers=rival).status_code == 403
    assert client.get(f"/orders/{order['id']}", headers=customer).json()["order"]["status"] == "PLACED"

    assert client.delete(f"/orders/{order['id']}", headers=owner).status_code == 200
    assert client.get(f"/orders/{order['id']}", headers=customer).status_code == 404


@pytest.mark.parametrize("environment, has_stack", [("development", True), ("production", False)])
def test_unhandled_error_is_500_with_stack_outside_production(settings, environment, has_stack):
    app = create_app(dataclasses.replace(settings, environment=environment))

    @app.get("/explode")
    async def explode():
        raise RuntimeError("kaboom")

    with TestClient(app, raise_server_exceptions=False) as client:
        resp = client.get("/explode")
    assert resp.status_code == 500
    body = resp.json()
    assert body["success"] is False
    assert body["message"] == "Internal Server Error"
    assert ("stack" in body) is has_stack
    if has_stack:
        assert "kaboom" in body["stack"]

import uuid

from fastapi.testclient import TestClient
from jose import jwt

from storefront.models.user import User


def test_health(client):
    resp = client.get("/api/health")

    assert resp.status_code == 200
    assert resp.json()["success"] is True


def test_garbage_token_is_401(client):
    resp = client.get("/api/users/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert resp.status_code == 401
    assert resp.json() == {"success": False, "message": "Not authorized, token failed"}


def test_token_signed_with_other_secret_is_401(client):
    token = jwt.encode(
        {"sub": str(uuid.uuid4()), "email": "x@example.com"}, "wrong", algorithm="HS256"
    )

    resp = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 401


def test_token_without_email_is_401(client, make_token):
    token = make_token(uuid.uuid4(), "")

    resp = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 401


def test_first_request_provisions_customer(client, session, make_token):
    user_id = uuid.uuid4()
    token = make_token(user_id, "newbie@example.com")

    resp = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["id"] == str(user_id)
    assert data["name"] == "newbie"
    assert data["role"] == "user"
    assert session.get(User, user_id) is not None


def test_deactivated_account_is_401(client, make_user, auth_headers):
    user = make_user(is_active=False)

    resp = client.get("/api/users/me", headers=auth_headers(user))

    assert resp.status_code == 401


def test_complete_profile_sets_name(client, customer, auth_headers):
    resp = client.post(
        "/api/users/me",
        json={"email": customer.email, "name": "  Ada  "},
        headers=auth_headers(customer),
    )

    assert resp.status_code == 200
    assert resp.json()["data"]["name"] == "Ada"


def test_complete_profile_cannot_change_email(client, customer, auth_headers):
    resp = client.post(
        "/api/users/me",
        json={"email": "someone.else@example.com"},
        headers=auth_headers(customer),
    )

    assert resp.status_code == 400
    assert resp.json()["message"] == "Email cannot be changed"


def test_update_me(client, customer, auth_headers):
    resp = client.patch(
        "/api/users/me", json={"name": "Grace"}, headers=auth_headers(customer)
    )

    assert resp.json()["data"]["name"] == "Grace"


def test_user_admin_endpoints(client, customer, admin, auth_headers):
    assert client.get("/api/users", headers=auth_headers(customer)).status_code == 403

    listing = client.get("/api/users", headers=auth_headers(admin)).json()
    assert listing["count"] == 2

    promoted = client.patch(
        f"/api/users/{customer.id}/role",
        json={"role": "admin"},
        headers=auth_headers(admin),
    )
    assert promoted.json()["data"]["role"] == "admin"

    missing = client.get(f"/api/users/{uuid.uuid4()}", headers=auth_headers(admin))
    assert missing.status_code == 404


def test_unhandled_error_is_500_without_details(app):
    @app.get("/api/boom")
    def boom():
        raise RuntimeError("database exploded")

    resp = TestClient(app, raise_server_exceptions=False).get("/api/boom")

    assert resp.status_code == 500
    assert resp.json() == {"success": False, "message": "Server error"}

"""
Test suite for authentication and user endpoints.

Tests cover:
- Token issue and registration
- Admin-only user listing and creation
- Self-or-admin access to a single user
"""

import pytest

from app.core.security import decode_token

NEW_USER = {
    "username": "new",
    "password": "password-new",
    "firstName": "First",
    "lastName": "Last",
    "email": "new@email.com",
}


class TestAuthToken:
    """POST /auth/token"""

    def test_token(self, client, seeded):
        response = client.post("/auth/token", json={"username": "u1", "password": "password1"})

        assert response.status_code == 200
        payload = decode_token(response.json()["token"])
        assert payload["sub"] == "u1"
        assert payload["is_admin"] is False

    def test_token_admin_claim(self, client, seeded):
        response = client.post("/auth/token", json={"username": "admin", "password": "password2"})
        assert decode_token(response.json()["token"])["is_admin"] is True

    def test_token_wrong_password(self, client, seeded):
        response = client.post("/auth/token", json={"username": "u1", "password": "nope"})

        assert response.status_code == 401
        assert response.json() == {"error": {"message": "Invalid username/password", "status": 401}}

    def test_token_unknown_user(self, client, seeded):
        response = client.post("/auth/token", json={"username": "no-such-user", "password": "password1"})
        assert response.status_code == 401

    def test_token_missing_data(self, client, seeded):
        response = client.post("/auth/token", json={"username": "u1"})
        assert response.status_code == 400


class TestAuthRegister:
    """POST /auth/register"""

    def test_register(self, client, seeded):
        response = client.post("/auth/register", json=NEW_USER)

        assert response.status_code == 201
        payload = decode_token(response.json()["token"])
        assert payload["sub"] == "new"
        assert payload["is_admin"] is False

    def test_register_cannot_request_admin(self, client, seeded):
        """isAdmin is not accepted on self-registration"""
        response = client.post("/auth/register", json={**NEW_USER, "isAdmin": True})
        assert response.status_code == 400

    def test_register_duplicate(self, client, seeded):
        response = client.post("/auth/register", json={**NEW_USER, "username": "u1"})

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Duplicate username: u1"

    def test_register_bad_email(self, client, seeded):
        response = client.post("/auth/register", json={**NEW_USER, "email": "not-an-email"})
        assert response.status_code == 400


class TestUserAdmin:
    """POST /users and GET /users"""

    def test_create_admin_user(self, client, seeded, admin_headers):
        response = client.post("/users", json={**NEW_USER, "isAdmin": True}, headers=admin_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["user"] == {
            "username": "new",
            "firstName": "First",
            "lastName": "Last",
            "email": "new@email.com",
            "isAdmin": True,
        }
        assert decode_token(body["token"])["is_admin"] is True

    def test_create_non_admin(self, client, seeded, u1_headers):
        response = client.post("/users", json=NEW_USER, headers=u1_headers)
        assert response.status_code == 401

    def test_list_as_admin(self, client, seeded, admin_headers):
        response = client.get("/users", headers=admin_headers)

        assert response.status_code == 200
        assert [u["username"] for u in response.json()["users"]] == ["admin", "u1"]
        assert all("password" not in u for u in response.json()["users"])

    def test_list_non_admin(self, client, seeded, u1_headers):
        assert client.get("/users", headers=u1_headers).status_code == 401

    def test_list_anonymous(self, client, seeded):
        assert client.get("/users").status_code == 401


class TestUserSelfOrAdmin:
    """GET / PATCH / DELETE /users/{username}"""

    def test_get_self(self, client, seeded, u1_headers):
        response = client.get("/users/u1", headers=u1_headers)

        assert response.status_code == 200
        assert response.json() == {
            "user": {
                "username": "u1",
                "firstName": "U1F",
                "lastName": "U1L",
                "email": "user1@user.com",
                "isAdmin": False,
            }
        }

    def test_get_other_as_admin(self, client, seeded, admin_headers):
        assert client.get("/users/u1", headers=admin_headers).status_code == 200

    def test_get_other_as_non_admin(self, client, seeded, u1_headers):
        assert client.get("/users/admin", headers=u1_headers).status_code == 401

    def test_get_not_found(self, client, seeded, admin_headers):
        assert client.get("/users/nope", headers=admin_headers).status_code == 404

    def test_update_self(self, client, seeded, u1_headers):
        response = client.patch("/users/u1", json={"firstName": "New"}, headers=u1_headers)

        assert response.status_code == 200
        assert response.json()["user"]["firstName"] == "New"

    def test_update_password_then_login(self, client, seeded, u1_headers):
        response = client.patch("/users/u1", json={"password": "new-password"}, headers=u1_headers)
        assert response.status_code == 200

        login = client.post("/auth/token", json={"username": "u1", "password": "new-password"})
        assert login.status_code == 200

    def test_update_cannot_grant_admin(self, client, seeded, u1_headers):
        response = client.patch("/users/u1", json={"isAdmin": True}, headers=u1_headers)
        assert response.status_code == 400

    @pytest.mark.parametrize("field", ["password", "firstName", "lastName", "email"])
    def test_update_required_field_to_null(self, client, seeded, u1_headers, field):
        response = client.patch("/users/u1", json={field: None}, headers=u1_headers)

        assert response.status_code == 400
        assert response.json()["error"]["status"] == 400

    def test_update_other_as_non_admin(self, client, seeded, u1_headers):
        response = client.patch("/users/admin", json={"firstName": "x"}, headers=u1_headers)
        assert response.status_code == 401

    def test_update_not_found(self, client, seeded, admin_headers):
        response = client.patch("/users/nope", json={"firstName": "x"}, headers=admin_headers)
        assert response.status_code == 404

    def test_delete_self(self, client, seeded, u1_headers):
        response = client.delete("/users/u1", headers=u1_headers)

        assert response.status_code == 200
        assert response.json() == {"deleted": "u1"}

    def test_delete_other_as_non_admin(self, client, seeded, u1_headers):
        assert client.delete("/users/admin", headers=u1_headers).status_code == 401

    def test_delete_not_found(self, client, seeded, admin_headers):
        assert client.delete("/users/nope", headers=admin_headers).status_code == 404

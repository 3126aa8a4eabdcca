"""
Tests for token handling, the executor and health endpoints.
"""

from datetime import timedelta

import pytest
from jose import JWTError

from app.core.security import create_access_token, decode_token, get_password_hash, verify_password


class TestTokens:
    """JWT helpers"""

    def test_round_trip_claims(self):
        payload = decode_token(create_access_token("u1", is_admin=True))

        assert payload["sub"] == "u1"
        assert payload["is_admin"] is True
        assert "exp" in payload

    def test_expired_token_rejected(self):
        token = create_access_token("u1", expires_delta=timedelta(seconds=-10))
        with pytest.raises(JWTError):
            decode_token(token)

    def test_expired_token_is_anonymous(self, client, seeded):
        """An expired token on an admin route reads as not logged in"""
        token = create_access_token("admin", is_admin=True, expires_delta=timedelta(seconds=-10))
        response = client.delete("/companies/c1", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Must be logged in"


class TestPasswords:
    """bcrypt helpers"""

    def test_hash_and_verify(self):
        hashed = get_password_hash("secret-password")

        assert hashed != "secret-password"
        assert verify_password("secret-password", hashed)
        assert not verify_password("wrong", hashed)


class TestQueryExecutor:
    """Positional placeholder binding"""

    def test_positional_args_bind_in_order(self, executor):
        rows = executor.execute("SELECT $2 AS b_value, $1 AS a_value", ["a", "b"])
        assert rows == [{"b_value": "b", "a_value": "a"}]

    def test_placeholder_inside_string_literal_is_kept(self, executor):
        rows = executor.execute("SELECT '$1' AS quoted_text, $1 AS bound_value", ["x"])
        assert rows == [{"quoted_text": "$1", "bound_value": "x"}]

    def test_values_are_not_interpolated(self, executor, seeded):
        """A hostile value is only ever compared, never executed"""
        rows = executor.execute(
            "SELECT handle FROM companies WHERE name = $1",
            ["C1' OR '1'='1"],
        )
        assert rows == []

    def test_statement_without_rows(self, executor, seeded):
        assert executor.execute("UPDATE companies SET name = $1 WHERE handle = $2", ["X", "c1"]) == []


class TestHealth:
    """Health endpoints"""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_detailed_health(self, client):
        response = client.get("/health/detailed")

        assert response.status_code == 200
        assert response.json()["checks"]["database"]["status"] == "healthy"

"""
Unit tests for authentication endpoints and token handling.

Tests:
- Login (token)
- Registration
- Token validation in dependencies
"""

import pytest
from datetime import timedelta
from jose import JWTError

from jobly.core.security import create_access_token, decode_token, get_password_hash, verify_password


class TestLogin:
    """Tests for the token endpoint"""

    def test_login_success(self, client, seed):
        """Test logging in returns a token for the user"""
        response = client.post("/api/v1/auth/token", json={"username": "u1", "password": "password1"})

        assert response.status_code == 200
        payload = decode_token(response.json()["token"])
        assert payload["sub"] == "u1"
        assert payload["is_admin"] is False

    def test_admin_claim(self, client, seed):
        """Test an admin token carries the is_admin claim"""
        response = client.post("/api/v1/auth/token", json={"username": "admin", "password": "adminpass"})
        assert decode_token(response.json()["token"])["is_admin"] is True

    def test_wrong_password(self, client, seed):
        """Test login with a bad password"""
        response = client.post("/api/v1/auth/token", json={"username": "u1", "password": "nope"})
        assert response.status_code == 401

    def test_unknown_user(self, client, seed):
        """Test login with an unknown username"""
        response = client.post("/api/v1/auth/token", json={"username": "nope", "password": "password1"})
        assert response.status_code == 401

    def test_missing_fields(self, client, seed):
        """Test login with an incomplete body"""
        response = client.post("/api/v1/auth/token", json={"username": "u1"})
        assert response.status_code == 422


class TestRegistration:
    """Tests for self-registration"""

    def test_register_success(self, client, seed):
        """Test successful registration returns a token"""
        response = client.post("/api/v1/auth/register", json={
            "username": "new",
            "firstName": "first",
            "lastName": "last",
            "password": "password",
            "email": "new@email.com",
        })

        assert response.status_code == 201
        payload = decode_token(response.json()["token"])
        assert payload["sub"] == "new"
        assert payload["is_admin"] is False

    def test_register_cannot_set_admin(self, client, seed):
        """Test registration rejects an isAdmin field"""
        response = client.post("/api/v1/auth/register", json={
            "username": "new",
            "firstName": "first",
            "lastName": "last",
            "password": "password",
            "email": "new@email.com",
            "isAdmin": True,
        })
        assert response.status_code == 422

    def test_register_duplicate(self, client, seed):
        """Test registering a taken username"""
        response = client.post("/api/v1/auth/register", json={
            "username": "u1",
            "firstName": "first",
            "lastName": "last",
            "password": "password",
            "email": "u1@email.com",
        })
        assert response.status_code == 400
        assert "duplicate" in response.json()["detail"].lower()


class TestTokens:
    """Tests for password hashing and token handling"""

    def test_password_hashing(self):
        """Test hashing and verifying a password"""
        hashed = get_password_hash("secret")
        assert hashed != "secret"
        assert verify_password("secret", hashed)
        assert not verify_password("other", hashed)

    def test_decode_rejects_tampered_token(self):
        """Test decode_token raises JWTError when the signature does not match"""
        token = create_access_token("u1")
        header, payload, signature = token.split(".")
        tampered = ".".join([header, payload, signature[::-1]])

        with pytest.raises(JWTError):
            decode_token(tampered)

    def test_expired_token_rejected(self, client, seed):
        """Test an expired token is refused"""
        token = create_access_token("admin", is_admin=True, expires_delta=timedelta(seconds=-1))
        response = client.get("/api/v1/users/", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_garbage_token_rejected(self, client, seed):
        """Test a malformed token is refused"""
        response = client.get("/api/v1/users/", headers={"Authorization": "Bearer not.a.token"})
        assert response.status_code == 401


class TestHealth:
    """Tests for the health endpoint"""

    def test_health(self, client):
        """Test the health check responds"""
        response = client.get("/health")
        assert response.json() == {"status": "healthy"}

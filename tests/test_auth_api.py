"""API tests for registration, login and token handling."""

from datetime import timedelta

import pytest

from utils.hashing import get_password_hash, verify_password
from utils.tokenJWT import create_access_token


@pytest.fixture
def registered(client):
    response = client.post(
        "/api/auth/register",
        json={"username": "newuser", "email": "NewUser@Example.com", "password": "hunter22", "role": "TL"},
    )
    assert response.status_code == 201
    return response.json()["data"]["user"]


class TestRegister:
    def test_register_returns_user_without_hash(self, registered):
        assert registered["username"] == "newuser"
        assert registered["email"] == "newuser@example.com"
        assert registered["role"] == "TL"
        assert "password_hash" not in registered

    def test_default_role_is_csr(self, client):
        response = client.post("/api/auth/register", json={"username": "plain", "password": "hunter22"})
        assert response.json()["data"]["user"]["role"] == "CSR"

    def test_duplicate_username_conflicts(self, client, registered):
        response = client.post("/api/auth/register", json={"username": "NEWUSER", "password": "hunter22"})

        assert response.status_code == 409
        assert response.json()["message"] == "User with this username or email already exists"

    @pytest.mark.parametrize(
        "payload, field",
        [
            ({"username": "ab", "password": "hunter22"}, "username"),
            ({"username": "has space", "password": "hunter22"}, "username"),
            ({"username": "valid", "password": "short"}, "password"),
            ({"username": "valid", "password": "hunter22", "role": "Owner"}, "role"),
        ],
    )
    def test_invalid_payloads(self, client, payload, field):
        response = client.post("/api/auth/register", json=payload)

        assert response.status_code == 400
        assert field in [e["field"] for e in response.json()["errors"]]


class TestLogin:
    def test_login_and_me(self, client, registered):
        response = client.post("/api/auth/login", json={"username": "newuser", "password": "hunter22"})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["token_type"] == "bearer"
        assert data["user"]["last_login"] is not None

        me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {data['token']}"})
        assert me.json()["data"]["user"]["username"] == "newuser"

    def test_wrong_password(self, client, csr_user):
        response = client.post("/api/auth/login", json={"username": "csr1", "password": "wrong-password"})

        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Invalid credentials"}
        assert response.headers["www-authenticate"] == "Bearer"

    def test_deactivated_account(self, client, csr_user, db):
        csr_user.is_active = False
        db.commit()

        response = client.post("/api/auth/login", json={"username": "csr1", "password": "secret123"})
        assert response.status_code == 401


class TestTokens:
    def test_expired_token(self, client, settings, csr_user):
        token = create_access_token(settings, {"sub": csr_user.username}, expires_delta=timedelta(minutes=-1))

        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["message"] == "Token expired"

    def test_garbage_token(self, client):
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.json()["message"] == "Invalid token"

    def test_token_for_unknown_user(self, client, settings):
        token = create_access_token(settings, {"sub": "ghost"})
        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401


class TestHashing:
    def test_round_trip(self):
        hashed = get_password_hash("hunter22", rounds=4)
        assert verify_password("hunter22", hashed)
        assert not verify_password("hunter23", hashed)

    def test_malformed_hash_does_not_raise(self):
        assert verify_password("hunter22", "not-a-bcrypt-hash") is False

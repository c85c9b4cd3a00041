# tests/v1/test_auth.py
"""Tests for the authentication endpoints."""

from __future__ import annotations

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from phayao_hub.core.security import decode_access_token, verify_password
from phayao_hub.models import User
from phayao_hub.models.user import STATUS_SUSPENDED


def _register(client: TestClient, **overrides) -> object:
    payload = {
        "username": "newbie",
        "email": "newbie@example.com",
        "password": "hunter22",
        "full_name": "New Member",
    }
    payload.update(overrides)
    return client.post("/api/auth/register", json=payload)


class TestRegister:
    def test_register_creates_user_and_token(self, client: TestClient, db_session: Session):
        response = _register(client)

        assert response.status_code == 201
        body = response.json()
        assert body["token_type"] == "bearer"
        assert body["user"]["username"] == "newbie"
        assert body["user"]["role"] == "user"

        claims = decode_access_token(body["access_token"])
        assert claims["username"] == "newbie"
        assert claims["status"] == "active"

        user = db_session.query(User).filter_by(username="newbie").one()
        assert claims["sub"] == str(user.id)
        assert user.password_hash != "hunter22"
        assert verify_password("hunter22", user.password_hash)

    def test_duplicate_username_or_email_rejected(self, client: TestClient, test_user: User):
        assert _register(client, username=test_user.username).status_code == 400
        assert _register(client, email=test_user.email).status_code == 400

    def test_short_password_rejected(self, client: TestClient):
        assert _register(client, password="123").status_code == 422


class TestLogin:
    def test_login_with_username(self, client: TestClient, test_user: User, user_password):
        response = client.post(
            "/api/auth/login",
            json={"username": test_user.username, "password": user_password},
        )
        assert response.status_code == 200
        assert response.json()["user"]["id"] == test_user.id

    def test_login_with_email(self, client: TestClient, test_user: User, user_password):
        response = client.post(
            "/api/auth/login",
            json={"username": test_user.email, "password": user_password},
        )
        assert response.status_code == 200

    def test_wrong_password(self, client: TestClient, test_user: User):
        response = client.post(
            "/api/auth/login",
            json={"username": test_user.username, "password": "nope-nope"},
        )
        assert response.status_code == 401

    def test_unknown_user(self, client: TestClient):
        response = client.post("/api/auth/login", json={"username": "ghost", "password": "x"})
        assert response.status_code == 401

    def test_suspended_user_cannot_login(
        self, client: TestClient, db_session: Session, test_user: User, user_password
    ):
        test_user.status = STATUS_SUSPENDED
        db_session.flush()

        response = client.post(
            "/api/auth/login",
            json={"username": test_user.username, "password": user_password},
        )
        assert response.status_code == 403


class TestProfile:
    def test_me_returns_current_user(self, client: TestClient, test_user: User, auth_token):
        response = client.get("/api/auth/me", headers=auth_token)
        assert response.status_code == 200
        assert response.json()["username"] == test_user.username

    def test_me_requires_token(self, client: TestClient):
        assert client.get("/api/auth/me").status_code == 401

    def test_update_profile(self, client: TestClient, test_user: User, auth_token):
        response = client.put(
            "/api/auth/profile",
            json={"full_name": "Somchai J.", "phone": "0812345678"},
            headers=auth_token,
        )
        assert response.status_code == 200
        assert test_user.full_name == "Somchai J."
        assert test_user.phone == "0812345678"
        assert test_user.avatar_url is None

    def test_change_password(self, client: TestClient, test_user: User, auth_token, user_password):
        response = client.put(
            "/api/auth/change-password",
            json={"current_password": user_password, "new_password": "brand-new-pw"},
            headers=auth_token,
        )
        assert response.status_code == 200
        assert verify_password("brand-new-pw", test_user.password_hash)

    def test_change_password_requires_current(self, client: TestClient, auth_token):
        response = client.put(
            "/api/auth/change-password",
            json={"current_password": "wrong-pw", "new_password": "brand-new-pw"},
            headers=auth_token,
        )
        assert response.status_code == 401

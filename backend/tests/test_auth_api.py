from types import SimpleNamespace
from unittest.mock import MagicMock, patch
from uuid import uuid4

import pytest

from notes_api.core.services.auth_service import AuthService
from notes_api.dependencies import get_auth_service
from notes_api.main import app

TOKEN = "header.payload.signature"


@pytest.fixture
def supabase():
    return MagicMock()


@pytest.fixture
def auth_client(anonymous_client, supabase):
    app.dependency_overrides[get_auth_service] = lambda: AuthService(supabase)
    yield anonymous_client
    app.dependency_overrides.clear()


def _user(**overrides):
    fields = {"id": uuid4(), "email": "owner@example.com", "role": "authenticated"}
    fields.update(overrides)
    return SimpleNamespace(**fields)


class TestRegister:
    def test_register(self, auth_client, supabase):
        user = _user()
        supabase.auth.sign_up.return_value = SimpleNamespace(user=user, session=None)

        resp = auth_client.post("/api/auth/register", json={"email": "Owner@Example.com", "password": "s3cure-enough"})

        assert resp.status_code == 201
        assert resp.json() == {
            "message": "User registered successfully",
            "user": {"id": str(user.id), "email": "owner@example.com"},
        }
        supabase.auth.sign_up.assert_called_once_with({"email": "owner@example.com", "password": "s3cure-enough"})

    def test_weak_password_never_reaches_provider(self, auth_client, supabase):
        resp = auth_client.post("/api/auth/register", json={"email": "a@example.com", "password": "password123"})

        assert resp.status_code == 400
        assert "weak" in resp.json()["error"]
        supabase.auth.sign_up.assert_not_called()

    def test_short_password_and_bad_email_are_400(self, auth_client):
        assert auth_client.post("/api/auth/register", json={"email": "a@example.com", "password": "short"}).status_code == 400
        assert auth_client.post("/api/auth/register", json={"email": "nope", "password": "s3cure-enough"}).status_code == 400

    def test_existing_account_is_400(self, auth_client, supabase):
        supabase.auth.sign_up.side_effect = Exception("User already registered")

        resp = auth_client.post("/api/auth/register", json={"email": "a@example.com", "password": "s3cure-enough"})

        assert resp.status_code == 400
        assert resp.json()["error"] == "Failed to register user: An account with this email already exists"


class TestLogin:
    def test_login_returns_session(self, auth_client, supabase):
        user = _user()
        session = SimpleNamespace(access_token="a.b.c", expires_in=3600, refresh_token="refresh")
        supabase.auth.sign_in_with_password.return_value = SimpleNamespace(user=user, session=session)

        resp = auth_client.post("/api/auth/login", json={"email": "owner@example.com", "password": "whatever"})

        assert resp.status_code == 200
        body = resp.json()
        assert body["message"] == "Login successful"
        assert body["session"]["access_token"] == "a.b.c"
        assert body["session"]["token_type"] == "bearer"
        assert body["session"]["user"]["id"] == str(user.id)

    def test_bad_credentials_are_401(self, auth_client, supabase):
        supabase.auth.sign_in_with_password.side_effect = Exception("Invalid login credentials")

        resp = auth_client.post("/api/auth/login", json={"email": "owner@example.com", "password": "wrong"})

        assert resp.status_code == 401
        assert resp.json() == {"error": "Invalid email or password"}

    def test_unconfirmed_email_is_401(self, auth_client, supabase):
        supabase.auth.sign_in_with_password.side_effect = Exception("Email not confirmed")

        resp = auth_client.post("/api/auth/login", json={"email": "owner@example.com", "password": "whatever"})

        assert resp.status_code == 401
        assert "confirm" in resp.json()["error"]


class TestCurrentUser:
    def test_profile_with_valid_token(self, anonymous_client, supabase):
        user = _user()
        supabase.auth.get_user.return_value = SimpleNamespace(user=user)

        with patch("notes_api.dependencies.create_request_supabase_client", return_value=supabase) as factory:
            resp = anonymous_client.get("/api/auth/profile", headers={"Authorization": f"Bearer {TOKEN}"})

        assert resp.status_code == 200
        assert resp.json()["user"] == {"id": str(user.id), "email": user.email, "role": "authenticated"}
        factory.assert_called_with(TOKEN)
        supabase.auth.get_user.assert_called_once_with(TOKEN)

    def test_missing_token_is_401(self, anonymous_client):
        resp = anonymous_client.get("/api/auth/profile")

        assert resp.status_code == 401
        assert resp.json() == {"error": "Authentication required"}

    def test_malformed_token_is_401(self, anonymous_client):
        resp = anonymous_client.get("/api/auth/profile", headers={"Authorization": "Bearer not-a-jwt"})

        assert resp.status_code == 401
        assert resp.json() == {"error": "Invalid token format"}

    def test_expired_token_is_401(self, anonymous_client, supabase):
        supabase.auth.get_user.side_effect = Exception("JWT expired")

        with patch("notes_api.dependencies.create_request_supabase_client", return_value=supabase):
            resp = anonymous_client.get("/api/auth/profile", headers={"Authorization": f"Bearer {TOKEN}"})

        assert resp.status_code == 401
        assert resp.json() == {"error": "Token is invalid or expired"}

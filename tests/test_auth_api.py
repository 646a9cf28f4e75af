from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from supabase_auth.errors import AuthApiError

from mxhub.app import app
from mxhub.core.config import Config
from mxhub.routes.deps import get_admin_client, get_auth_client, get_db


@pytest.fixture
def auth_client():
    return MagicMock()


@pytest.fixture
def api(auth_client, fake_db):
    app.dependency_overrides[get_auth_client] = lambda: auth_client
    app.dependency_overrides[get_admin_client] = lambda: auth_client
    app.dependency_overrides[get_db] = lambda: fake_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _session_response():
    return SimpleNamespace(
        user=SimpleNamespace(id="user-9", email="rider@example.com"),
        session=SimpleNamespace(access_token="access-abc", refresh_token="refresh-abc", expires_in=3600),
    )


def test_protected_routes_require_a_session(anonymous_client):
    for path in ("/checklists", "/lap-times", "/tracks/favorites", "/workouts", "/suspension", "/notes", "/auth/me"):
        response = anonymous_client.get(path)
        assert response.status_code == 401, path
        assert response.json()["detail"] == "Not authenticated"


def test_public_routes_need_no_session(anonymous_client):
    body = anonymous_client.get("/").json()
    assert [f["path"] for f in body["features"]] == [
        "/checklists", "/lap-times", "/tracks", "/workouts", "/suspension", "/notes",
    ]


def test_sign_in_returns_tokens_and_sets_cookie(api, auth_client):
    auth_client.auth.sign_in_with_password.return_value = _session_response()

    response = api.post("/auth/sign-in", json={"email": "rider@example.com", "password": "secret123"})

    assert response.status_code == 200
    assert response.json()["access_token"] == "access-abc"
    assert response.json()["user"] == {"id": "user-9", "email": "rider@example.com"}
    assert f"{Config.SESSION_COOKIE_NAME}=access-abc" in response.headers["set-cookie"]
    assert "httponly" in response.headers["set-cookie"].lower()
    auth_client.auth.sign_in_with_password.assert_called_once_with(
        {"email": "rider@example.com", "password": "secret123"}
    )


def test_sign_in_with_bad_credentials(api, auth_client):
    auth_client.auth.sign_in_with_password.side_effect = AuthApiError("Invalid login credentials", 400, None)

    response = api.post("/auth/sign-in", json={"email": "rider@example.com", "password": "wrong-pass"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid login credentials"


def test_sign_in_rate_limited(api, auth_client):
    auth_client.auth.sign_in_with_password.side_effect = AuthApiError("rate limited", 429, None)

    response = api.post("/auth/sign-in", json={"email": "rider@example.com", "password": "secret123"})

    assert response.status_code == 429
    assert response.json()["detail"] == "Too many sign in attempts. Please try again in a few minutes."


def test_sign_up_sends_callback_redirect(api, auth_client):
    auth_client.auth.sign_up.return_value = SimpleNamespace(user=SimpleNamespace(id="user-10"), session=None)

    response = api.post("/auth/sign-up", json={"email": "new@example.com", "password": "secret123"})

    assert response.status_code == 201
    assert response.json() == {"user_id": "user-10", "email": "new@example.com", "confirmation_required": True}
    (payload,), _ = auth_client.auth.sign_up.call_args
    assert payload["options"]["email_redirect_to"].endswith("/auth/callback")


def test_sign_up_existing_user(api, auth_client):
    auth_client.auth.sign_up.side_effect = AuthApiError("User already registered", 422, None)

    response = api.post("/auth/sign-up", json={"email": "old@example.com", "password": "secret123"})

    assert response.status_code == 409
    assert response.json()["detail"]["code"] == "user_already_exists"


def test_bearer_token_resolves_user(api, auth_client):
    auth_client.auth.get_user.return_value = SimpleNamespace(user=SimpleNamespace(id="user-9", email="rider@example.com"))

    response = api.get("/auth/me", headers={"Authorization": "Bearer access-abc"})

    assert response.status_code == 200
    assert response.json() == {"id": "user-9", "email": "rider@example.com"}
    auth_client.auth.get_user.assert_called_once_with("access-abc")


def test_session_cookie_resolves_user(api, auth_client, fake_db):
    auth_client.auth.get_user.return_value = SimpleNamespace(user=SimpleNamespace(id="user-9", email=None))
    fake_db.seed("notes", user_id="user-9", content="mine")

    response = api.get("/notes", headers={"Cookie": f"{Config.SESSION_COOKIE_NAME}=cookie-token"})

    assert response.status_code == 200
    assert [n["content"] for n in response.json()] == ["mine"]
    auth_client.auth.get_user.assert_called_once_with("cookie-token")


def test_expired_token_is_401(api, auth_client):
    auth_client.auth.get_user.side_effect = AuthApiError("invalid JWT", 401, None)

    response = api.get("/auth/me", headers={"Authorization": "Bearer stale"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid or expired session"


def test_sign_out_revokes_and_clears_cookie(api, auth_client):
    response = api.post("/auth/sign-out", headers={"Authorization": "Bearer access-abc"})

    assert response.status_code == 204
    auth_client.auth.admin.sign_out.assert_called_once_with("access-abc")
    assert Config.SESSION_COOKIE_NAME in response.headers.get("set-cookie", "")

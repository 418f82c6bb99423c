"""HTTP tests for the auth endpoints: status mapping, envelopes and the refresh cookie."""

import pytest
from unittest.mock import MagicMock
from fastapi.testclient import TestClient

from api import app
from app.dependencies import get_auth_service, get_auth_middleware
from app.middleware.auth import AuthMiddleware
from app.services.auth import errors
from app.services.auth.auth_service import AuthService
from app.services.auth.session_manager import SessionNotFoundError
from common.auth import JWTManager


PUBLIC_USER = {
    "id": 7,
    "email": "jane@example.com",
    "username": None,
    "firstName": None,
    "lastName": None,
    "avatar": None,
    "isVerified": True,
    "isPasswordSet": False,
    "age": None,
    "phoneNumber": None,
}


@pytest.fixture
def auth_service():
    return MagicMock(spec=AuthService)


@pytest.fixture
def token_manager():
    return JWTManager(secret="test-secret")


@pytest.fixture
def client(auth_service, token_manager):
    app.dependency_overrides[get_auth_service] = lambda: auth_service
    app.dependency_overrides[get_auth_middleware] = lambda: AuthMiddleware(token_manager)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(token_manager):
    return {"Authorization": f"Bearer {token_manager.generate_access_token(7)}"}


def refresh_cookie_header(response) -> str:
    cookies = [value for key, value in response.headers.multi_items() if key == "set-cookie"]
    matching = [c for c in cookies if c.startswith("refresh-token=")]
    assert matching, f"no refresh-token cookie in {cookies}"
    return matching[0]


# ─────────────────────────────────────────────────────────────────
# Registration
# ─────────────────────────────────────────────────────────────────


class TestRegisterEmail:
    def test_success(self, client, auth_service):
        response = client.post("/api/auth/register/email", json={"email": "jane@example.com"})

        assert response.status_code == 200
        assert response.json()["success"] is True
        auth_service.register_email.assert_awaited_once_with("jane@example.com")

    def test_existing_email(self, client, auth_service):
        auth_service.register_email.side_effect = errors.EmailAlreadyExistsError()

        response = client.post("/api/auth/register/email", json={"email": "jane@example.com"})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "EMAIL_ALREADY_EXISTS"

    def test_invalid_email_is_validation_error(self, client, auth_service):
        response = client.post("/api/auth/register/email", json={"email": "not-an-email"})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["errors"][0]["field"] == "email"
        auth_service.register_email.assert_not_awaited()


class TestRegisterVerify:
    def test_sets_refresh_cookie(self, client, auth_service):
        auth_service.register_verify.return_value = {
            "user": PUBLIC_USER,
            "accessToken": "access",
            "refreshToken": "refresh",
        }

        response = client.post(
            "/api/auth/register/verify",
            json={"email": "jane@example.com", "code": "012345"},
            headers={"User-Agent": "Mozilla/5.0"},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["accessToken"] == "access"
        assert data["user"]["id"] == 7
        assert "refreshToken" not in data

        cookie = refresh_cookie_header(response)
        assert cookie.startswith("refresh-token=refresh;")
        assert "HttpOnly" in cookie
        assert "Path=/api/auth" in cookie
        assert f"Max-Age={30 * 24 * 60 * 60}" in cookie

        auth_service.register_verify.assert_awaited_once_with(
            "jane@example.com", "012345", "Mozilla/5.0"
        )

    def test_code_must_be_six_digits(self, client, auth_service):
        response = client.post(
            "/api/auth/register/verify",
            json={"email": "jane@example.com", "code": "12ab"},
        )

        assert response.status_code == 400
        assert response.json()["error"]["errors"][0]["field"] == "code"
        auth_service.register_verify.assert_not_awaited()

    def test_invalid_code(self, client, auth_service):
        auth_service.register_verify.side_effect = errors.InvalidCodeError()

        response = client.post(
            "/api/auth/register/verify",
            json={"email": "jane@example.com", "code": "000000"},
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_CODE"
        assert "set-cookie" not in response.headers


class TestVerifyResend:
    def test_cooldown(self, client, auth_service):
        auth_service.verify_resend.side_effect = errors.CodeAlreadySentError()

        response = client.post("/api/auth/verify/resend", json={"email": "jane@example.com"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "CODE_ALREADY_SENT"


class TestProfileSteps:
    def test_profile_requires_auth(self, client, auth_service):
        response = client.patch(
            "/api/auth/register/profile",
            json={"username": "jane", "firstName": "Jane", "lastName": "Doe"},
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTH_REQUIRED"
        auth_service.save_profile_info.assert_not_awaited()

    def test_garbage_token_is_rejected(self, client, auth_service):
        response = client.patch(
            "/api/auth/register/profile",
            json={"username": "jane", "firstName": "Jane", "lastName": "Doe"},
            headers={"Authorization": "Bearer not.a.jwt"},
        )

        assert response.status_code == 401

    def test_profile_uses_principal(self, client, auth_service, auth_headers):
        auth_service.save_profile_info.return_value = dict(PUBLIC_USER, username="jane")

        response = client.patch(
            "/api/auth/register/profile",
            json={"username": "jane", "firstName": "Jane", "lastName": "Doe"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["data"]["user"]["username"] == "jane"
        auth_service.save_profile_info.assert_awaited_once_with(7, "jane", "Jane", "Doe")

    def test_username_taken(self, client, auth_service, auth_headers):
        auth_service.save_profile_info.side_effect = errors.UsernameAlreadyExistsError()

        response = client.patch(
            "/api/auth/register/profile",
            json={"username": "jane", "firstName": "Jane", "lastName": "Doe"},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "USERNAME_ALREADY_EXISTS"

    def test_password_too_short(self, client, auth_service, auth_headers):
        response = client.patch(
            "/api/auth/register/password",
            json={"password": "short"},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
        auth_service.save_password.assert_not_awaited()

    def test_password_saved(self, client, auth_service, auth_headers):
        response = client.patch(
            "/api/auth/register/password",
            json={"password": "long-enough"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        auth_service.save_password.assert_awaited_once_with(7, "long-enough")


# ─────────────────────────────────────────────────────────────────
# Login / refresh / logout
# ─────────────────────────────────────────────────────────────────


class TestLogin:
    def test_login_email_returns_public_state(self, client, auth_service):
        auth_service.get_user_by_email.return_value = PUBLIC_USER

        response = client.post("/api/auth/login/email", json={"email": "jane@example.com"})

        assert response.status_code == 200
        assert response.json()["data"]["user"]["isPasswordSet"] is False

    def test_login_password_sets_cookie(self, client, auth_service):
        auth_service.login.return_value = {
            "user": PUBLIC_USER,
            "accessToken": "access",
            "refreshToken": "refresh",
        }

        response = client.post(
            "/api/auth/login/password",
            json={"email": "jane@example.com", "password": "right-password"},
        )

        assert response.status_code == 200
        assert response.json()["data"]["accessToken"] == "access"
        assert refresh_cookie_header(response).startswith("refresh-token=refresh;")

    @pytest.mark.parametrize("error, code", [
        (errors.InvalidCredentialsError(), "INVALID_CREDENTIALS"),
        (errors.UserNotVerifiedError(), "USER_NOT_VERIFIED"),
        (errors.PasswordNotSetError(), "PASSWORD_NOT_SET"),
    ])
    def test_login_errors(self, client, auth_service, error, code):
        auth_service.login.side_effect = error

        response = client.post(
            "/api/auth/login/password",
            json={"email": "jane@example.com", "password": "whatever"},
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == code


class TestRefresh:
    def test_missing_cookie(self, client, auth_service):
        response = client.get("/api/auth/refresh")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "REFRESH_TOKEN_REQUIRED"
        auth_service.refresh.assert_not_awaited()

    def test_rotates_cookie(self, client, auth_service):
        auth_service.refresh.return_value = {"accessToken": "new-access", "refreshToken": "new-refresh"}

        response = client.get(
            "/api/auth/refresh",
            headers={"Cookie": "refresh-token=old-refresh", "User-Agent": "Mozilla/5.0"},
        )

        assert response.status_code == 200
        assert response.json()["data"] == {"accessToken": "new-access"}
        assert refresh_cookie_header(response).startswith("refresh-token=new-refresh;")
        auth_service.refresh.assert_awaited_once_with("old-refresh", "Mozilla/5.0")

    def test_consumed_token(self, client, auth_service):
        auth_service.refresh.side_effect = SessionNotFoundError()

        response = client.get("/api/auth/refresh", headers={"Cookie": "refresh-token=used"})

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_REFRESH_TOKEN"

    def test_storage_failure_is_generic_500(self, auth_service):
        app.dependency_overrides[get_auth_service] = lambda: auth_service
        auth_service.refresh.side_effect = RuntimeError("mongo exploded at 10.0.0.3")
        try:
            response = TestClient(app, raise_server_exceptions=False).get(
                "/api/auth/refresh",
                headers={"Cookie": "refresh-token=t"},
            )
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        body = response.json()
        assert body["error"]["code"] == "INTERNAL_ERROR"
        assert "mongo" not in response.text


class TestLogout:
    def test_consumes_and_clears_cookie(self, client, auth_service):
        response = client.get("/api/auth/logout", headers={"Cookie": "refresh-token=t"})

        assert response.status_code == 200
        auth_service.logout.assert_awaited_once_with("t")
        cookie = refresh_cookie_header(response)
        assert "Max-Age=0" in cookie
        assert "Path=/api/auth" in cookie

    def test_without_cookie_still_succeeds(self, client, auth_service):
        response = client.get("/api/auth/logout")

        assert response.status_code == 200
        auth_service.logout.assert_not_awaited()


# ─────────────────────────────────────────────────────────────────
# Health
# ─────────────────────────────────────────────────────────────────


class TestHealth:
    def test_ping(self, client):
        response = client.get("/api/ping")

        assert response.status_code == 200
        assert response.json() == "pong"

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "ok"
        assert data["database"] is False

    def test_unknown_route_uses_error_envelope(self, client):
        response = client.get("/api/nope")

        assert response.status_code == 404
        assert response.json()["success"] is False

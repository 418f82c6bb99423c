"""HTTP tests for the user endpoints."""

import pytest
from unittest.mock import MagicMock
from fastapi.testclient import TestClient

from api import app
from app.dependencies import get_auth_middleware, get_user_service
from app.middleware.auth import AuthMiddleware
from app.services.user.user_service import UserService
from common.auth import JWTManager


@pytest.fixture
def user_service():
    service = MagicMock(spec=UserService)
    service.format_user_response.side_effect = UserService.format_user_response
    return service


@pytest.fixture
def token_manager():
    return JWTManager(secret="test-secret")


@pytest.fixture
def client(user_service, token_manager):
    app.dependency_overrides[get_user_service] = lambda: user_service
    app.dependency_overrides[get_auth_middleware] = lambda: AuthMiddleware(token_manager)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(token_manager):
    return {"Authorization": f"Bearer {token_manager.generate_access_token(7)}"}


class TestGetMe:
    def test_requires_auth(self, client):
        response = client.get("/api/users/me")

        assert response.status_code == 401

    def test_expired_token(self, client, user_service):
        expired = JWTManager(secret="test-secret", access_token_expire_minutes=-1)
        token = expired.generate_access_token(7)

        response = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        user_service.get_user_by_id.assert_not_awaited()

    def test_returns_user(self, client, user_service, auth_headers, sample_user_doc):
        user_service.get_user_by_id.return_value = sample_user_doc

        response = client.get("/api/users/me", headers=auth_headers)

        assert response.status_code == 200
        user = response.json()["data"]["user"]
        assert user["id"] == 7
        assert "passwordHash" not in user
        user_service.get_user_by_id.assert_awaited_once_with(7)

    def test_deleted_user(self, client, user_service, auth_headers):
        user_service.get_user_by_id.return_value = None

        response = client.get("/api/users/me", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "USER_NOT_FOUND"


class TestUpdateProfile:
    def test_only_sent_fields_are_updated(self, client, user_service, auth_headers, sample_user_doc):
        user_service.update_profile.return_value = dict(sample_user_doc, age=30)

        response = client.patch("/api/users/profile", json={"age": 30}, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["data"]["user"]["age"] == 30
        user_service.update_profile.assert_awaited_once_with(7, {"age": 30})

    def test_explicit_null_is_rejected(self, client, user_service, auth_headers):
        response = client.patch("/api/users/profile", json={"firstName": None}, headers=auth_headers)

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["errors"][0]["field"] == "firstName"
        user_service.update_profile.assert_not_awaited()

    def test_invalid_age(self, client, user_service, auth_headers):
        response = client.patch("/api/users/profile", json={"age": 0}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error"]["errors"][0]["field"] == "age"
        user_service.update_profile.assert_not_awaited()

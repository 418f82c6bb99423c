"""Shared test fixtures for Kushfinds backend tests."""

import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

from common.auth import JWTManager


TEST_JWT_SECRET = "test-secret"


@pytest.fixture
def mock_collection():
    collection = AsyncMock()
    # Motor's find() returns a cursor synchronously (not a coroutine),
    # so use MagicMock for it. Async methods like find_one, insert_one,
    # find_one_and_delete etc. stay as AsyncMock.
    collection.find = MagicMock()
    return collection


@pytest.fixture
def mock_db(mock_collection):
    db = MagicMock()
    db.__getitem__ = MagicMock(return_value=mock_collection)
    return db


@pytest.fixture
def jwt_manager():
    return JWTManager(
        secret=TEST_JWT_SECRET,
        access_token_expire_minutes=15,
        refresh_token_expire_days=30,
    )


@pytest.fixture
def sample_user_doc():
    """A verified user with a password and a claimed username."""
    now = datetime.now(timezone.utc)
    return {
        "_id": 7,
        "email": "jane@example.com",
        "username": "jane",
        "firstName": "Jane",
        "lastName": "Doe",
        "avatar": None,
        "age": None,
        "phoneNumber": None,
        "passwordHash": "$2b$12$hash",
        "isVerified": True,
        "createdAt": now,
        "updatedAt": now,
    }


@pytest.fixture
def pending_user_doc(sample_user_doc):
    """A freshly registered user: email only, unverified."""
    doc = dict(sample_user_doc)
    doc.update({
        "username": None,
        "firstName": None,
        "lastName": None,
        "passwordHash": None,
        "isVerified": False,
    })
    return doc

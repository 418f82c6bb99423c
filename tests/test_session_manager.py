"""Unit tests for refresh session storage."""

import uuid

import pytest
from datetime import datetime, timedelta, timezone

from app.services.auth.session_manager import SessionManager, SessionNotFoundError
from app.services.auth.token_hasher import TokenHasher


@pytest.fixture
def manager(mock_db):
    return SessionManager(mock_db)


class TestTokenHasher:
    def test_generate_token_is_uuid4(self):
        token = TokenHasher.generate_token()

        assert uuid.UUID(token).version == 4

    def test_tokens_are_unique(self):
        assert TokenHasher.generate_token() != TokenHasher.generate_token()

    def test_hash_is_stable_sha256_hex(self):
        digest = TokenHasher.hash_token("abc")

        assert digest == TokenHasher.hash_token("abc")
        assert len(digest) == 64


# ─────────────────────────────────────────────────────────────────
# create_session
# ─────────────────────────────────────────────────────────────────


class TestCreateSession:
    @pytest.mark.asyncio
    async def test_stores_hash_not_token(self, manager, mock_collection):
        expires_at = datetime.now(timezone.utc) + timedelta(days=30)

        await manager.create_session("plain-token", "Mozilla/5.0", 7, expires_at)

        doc = mock_collection.insert_one.call_args[0][0]
        assert doc["tokenHash"] == TokenHasher.hash_token("plain-token")
        assert "plain-token" not in doc.values()
        assert doc["userId"] == 7
        assert doc["userAgent"] == "Mozilla/5.0"
        assert doc["expiresAt"] == expires_at

    @pytest.mark.asyncio
    async def test_insert_only(self, manager, mock_collection):
        expires_at = datetime.now(timezone.utc) + timedelta(days=30)

        await manager.create_session("t1", "ua", 7, expires_at)
        await manager.create_session("t2", "ua", 7, expires_at)

        assert mock_collection.insert_one.await_count == 2
        mock_collection.update_one.assert_not_awaited()
        mock_collection.replace_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_passes_transaction_session(self, manager, mock_collection):
        session = object()

        await manager.create_session("t", "ua", 7, datetime.now(timezone.utc), session=session)

        assert mock_collection.insert_one.call_args.kwargs["session"] is session


# ─────────────────────────────────────────────────────────────────
# consume_session
# ─────────────────────────────────────────────────────────────────


class TestConsumeSession:
    @pytest.mark.asyncio
    async def test_returns_owner(self, manager, mock_collection):
        mock_collection.find_one_and_delete.return_value = {"userId": 7}

        user_id = await manager.consume_session("plain-token")

        assert user_id == 7
        query = mock_collection.find_one_and_delete.call_args[0][0]
        assert query["tokenHash"] == TokenHasher.hash_token("plain-token")
        assert "$gt" in query["expiresAt"]

    @pytest.mark.asyncio
    async def test_unknown_or_expired_token(self, manager, mock_collection):
        mock_collection.find_one_and_delete.return_value = None

        with pytest.raises(SessionNotFoundError):
            await manager.consume_session("stale")

    @pytest.mark.asyncio
    async def test_single_use(self, manager, mock_collection):
        mock_collection.find_one_and_delete.side_effect = [{"userId": 7}, None]

        assert await manager.consume_session("t") == 7
        with pytest.raises(SessionNotFoundError):
            await manager.consume_session("t")

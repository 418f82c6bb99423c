"""
Refresh session storage.

Each issued refresh token has exactly one session document, looked up by the
token's hash. A session is consumed (deleted) by refresh or logout.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClientSession, AsyncIOMotorDatabase

from app.database.collections import SESSIONS
from app.services.auth.token_hasher import TokenHasher

logger = logging.getLogger(__name__)


class SessionNotFoundError(Exception):
    """Refresh token is unknown, expired or already consumed."""


class SessionManager:
    """
    Handles session create/consume operations.
    Sessions live in their own collection, many per user.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize SessionManager.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._sessions_collection = db[SESSIONS]

    async def create_session(
        self,
        token: str,
        user_agent: str,
        user_id: int,
        expires_at: datetime,
        session: Optional[AsyncIOMotorClientSession] = None,
    ) -> None:
        """
        Store a new session for a refresh token.

        Args:
            token: Plaintext refresh token (only its hash is stored)
            user_agent: Client User-Agent header
            user_id: Owning user id
            expires_at: When the refresh token stops working
            session: Optional transaction session
        """
        await self._sessions_collection.insert_one(
            {
                "tokenHash": TokenHasher.hash_token(token),
                "userId": user_id,
                "userAgent": user_agent,
                "expiresAt": expires_at,
                "createdAt": datetime.now(timezone.utc),
            },
            session=session,
        )

        logger.info(f"Session created for user {user_id}")

    async def consume_session(
        self,
        token: str,
        session: Optional[AsyncIOMotorClientSession] = None,
    ) -> int:
        """
        Atomically delete an unexpired session and return its owner.

        Of any number of concurrent callers with the same token, at most one
        gets the user id back.

        Args:
            token: Plaintext refresh token
            session: Optional transaction session

        Returns:
            The owning user id

        Raises:
            SessionNotFoundError: Token is unknown, expired or already used
        """
        deleted = await self._sessions_collection.find_one_and_delete(
            {
                "tokenHash": TokenHasher.hash_token(token),
                "expiresAt": {"$gt": datetime.now(timezone.utc)},
            },
            projection={"userId": 1},
            session=session,
        )

        if not deleted:
            raise SessionNotFoundError()

        user_id = deleted["userId"]
        logger.info(f"Session consumed for user {user_id}")
        return user_id

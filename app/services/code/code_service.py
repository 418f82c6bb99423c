"""
Verification code engine.

Issues short-lived 6-digit numeric codes per (user, type) with a resend
cooldown, and checks them.
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClientSession, AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError, PyMongoError

from app.database.collections import CODES

logger = logging.getLogger(__name__)


class CodeType(str, Enum):
    """Purpose a code was issued for."""
    VERIFICATION = "verification"
    RECOVERY_PASSWORD = "recovery_password"
    CHANGE_PASSWORD = "change_password"


class CodeServiceError(Exception):
    """Code could not be generated for reasons outside the caller's control."""


class CodeAlreadySentError(Exception):
    """A code of this type is still inside its resend cooldown."""


class CodeNotFoundError(Exception):
    """No matching, unexpired code exists."""


class CodeService:
    """
    Handles verification code generation and validation.

    Codes are stored in plaintext: they live for minutes and are useless
    without the matching user and type. Each (user, type) has at most one
    row; a new code replaces the previous one once its retry window is over.
    """

    RETRY_INTERVAL = timedelta(minutes=1)
    EXPIRATION = timedelta(minutes=5)
    CODE_SPACE = 1_000_000

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize CodeService.

        Args:
            db: MongoDB database connection
        """
        self._codes_collection = db[CODES]

    async def generate(
        self,
        user_id: int,
        code_type: CodeType,
        session: Optional[AsyncIOMotorClientSession] = None,
    ) -> str:
        """
        Generate and store a new code.

        Args:
            user_id: Owning user id
            code_type: Purpose of the code
            session: Optional transaction session

        Returns:
            The plaintext 6-digit code

        Raises:
            CodeAlreadySentError: A code of this type is still in its retry window
            CodeServiceError: Randomness or storage failure
        """
        now = self._now()
        code_type = CodeType(code_type)
        code = self._random_code()

        # One row per (user, type). The filter only matches once the retry
        # window has passed; otherwise the upsert collides with the unique
        # index, which is what rejects concurrent generates as well.
        try:
            await self._codes_collection.update_one(
                {
                    "userId": user_id,
                    "type": code_type.value,
                    "retryAt": {"$lte": now},
                },
                {
                    "$set": {
                        "code": code,
                        "retryAt": now + self.RETRY_INTERVAL,
                        "expiresAt": now + self.EXPIRATION,
                        "createdAt": now,
                    }
                },
                upsert=True,
                session=session,
            )
        except DuplicateKeyError:
            raise CodeAlreadySentError()
        except PyMongoError as e:
            raise CodeServiceError(f"Failed to store code: {e}") from e

        logger.info(f"Generated {code_type.value} code for user {user_id}")
        return code

    async def validate(
        self,
        user_id: int,
        code_type: CodeType,
        code: str,
        session: Optional[AsyncIOMotorClientSession] = None,
    ) -> None:
        """
        Check a code without consuming it.

        Raises:
            CodeNotFoundError: No unexpired code matches
        """
        found = await self._codes_collection.find_one(
            self._match(user_id, code_type, code),
            session=session,
        )

        if not found:
            raise CodeNotFoundError()

    async def consume(
        self,
        user_id: int,
        code_type: CodeType,
        code: str,
        session: Optional[AsyncIOMotorClientSession] = None,
    ) -> None:
        """
        Check a code and delete it in one step, so it can only be used once.

        Raises:
            CodeNotFoundError: No unexpired code matches
        """
        deleted = await self._codes_collection.find_one_and_delete(
            self._match(user_id, code_type, code),
            session=session,
        )

        if not deleted:
            raise CodeNotFoundError()

        logger.info(f"Consumed {CodeType(code_type).value} code for user {user_id}")

    # ─────────────────────────────────────────────────────────────────
    # Typed shortcuts
    # ─────────────────────────────────────────────────────────────────

    async def generate_verify(
        self,
        user_id: int,
        session: Optional[AsyncIOMotorClientSession] = None,
    ) -> str:
        return await self.generate(user_id, CodeType.VERIFICATION, session=session)

    async def validate_verify(
        self,
        user_id: int,
        code: str,
        session: Optional[AsyncIOMotorClientSession] = None,
    ) -> None:
        await self.validate(user_id, CodeType.VERIFICATION, code, session=session)

    async def generate_recovery_password(
        self,
        user_id: int,
        session: Optional[AsyncIOMotorClientSession] = None,
    ) -> str:
        return await self.generate(user_id, CodeType.RECOVERY_PASSWORD, session=session)

    async def generate_change_password(
        self,
        user_id: int,
        session: Optional[AsyncIOMotorClientSession] = None,
    ) -> str:
        return await self.generate(user_id, CodeType.CHANGE_PASSWORD, session=session)

    def _match(self, user_id: int, code_type: CodeType, code: str) -> dict:
        return {
            "userId": user_id,
            "type": CodeType(code_type).value,
            "code": code,
            "expiresAt": {"$gt": self._now()},
        }

    def _random_code(self) -> str:
        """Uniform draw from [0, 1_000_000) formatted to 6 digits."""
        try:
            value = secrets.randbelow(self.CODE_SPACE)
        except OSError as e:
            raise CodeServiceError(f"Entropy source failure: {e}") from e
        return "%06d" % value

    def _now(self) -> datetime:
        return datetime.now(timezone.utc)

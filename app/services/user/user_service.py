"""
User directory.

Owns the users collection: creation, lookup, verification, profile and
password updates.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClientSession, AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.database.collections import COUNTERS, USERS

logger = logging.getLogger(__name__)


class UserAlreadyExistsError(Exception):
    """A unique user field (email or username) is already taken."""


class UserService:
    """
    Manages user records.

    Users carry integer ids allocated from a counters document, so they fit
    into the user_id claim of access tokens as-is.
    """

    PROFILE_FIELDS = ("firstName", "lastName", "age", "phoneNumber")

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize UserService.

        Args:
            db: MongoDB database connection
        """
        self._users_collection = db[USERS]
        self._counters_collection = db[COUNTERS]

    async def create_user(
        self,
        email: str,
        session: Optional[AsyncIOMotorClientSession] = None,
    ) -> dict:
        """
        Create a new unverified user with only an email.

        Args:
            email: User's email address
            session: Optional transaction session

        Returns:
            Created user document

        Raises:
            UserAlreadyExistsError: Email is already registered
        """
        user_id = await self._next_id()
        now = datetime.now(timezone.utc)

        user_doc = {
            "_id": user_id,
            "email": email.lower(),
            "username": None,
            "firstName": None,
            "lastName": None,
            "avatar": None,
            "age": None,
            "phoneNumber": None,
            "passwordHash": None,
            "isVerified": False,
            "createdAt": now,
            "updatedAt": now,
        }

        try:
            await self._users_collection.insert_one(user_doc, session=session)
        except DuplicateKeyError as e:
            raise UserAlreadyExistsError("Email already registered") from e

        logger.info(f"User created: {user_id}")
        return user_doc

    async def get_user_by_id(
        self,
        user_id: int,
        session: Optional[AsyncIOMotorClientSession] = None,
    ) -> Optional[dict]:
        """
        Load user by id.

        Returns:
            User document or None if not found
        """
        return await self._users_collection.find_one({"_id": user_id}, session=session)

    async def get_user_by_email(
        self,
        email: str,
        session: Optional[AsyncIOMotorClientSession] = None,
    ) -> Optional[dict]:
        """
        Load user by email (case-insensitive).

        Returns:
            User document or None if not found
        """
        return await self._users_collection.find_one(
            {"email": email.lower()},
            session=session,
        )

    async def verify_user(
        self,
        user_id: int,
        session: Optional[AsyncIOMotorClientSession] = None,
    ) -> Optional[dict]:
        """
        Mark the user's email as verified.

        Only applies while the user is unverified, so concurrent verifications
        flip the flag once.

        Returns:
            Updated user document, or None if the user is missing or was
            already verified
        """
        user = await self._users_collection.find_one_and_update(
            {"_id": user_id, "isVerified": False},
            {"$set": {"isVerified": True, "updatedAt": datetime.now(timezone.utc)}},
            return_document=ReturnDocument.AFTER,
            session=session,
        )

        if user:
            logger.info(f"User verified: {user_id}")
        return user

    async def is_username_available(
        self,
        username: str,
        session: Optional[AsyncIOMotorClientSession] = None,
    ) -> bool:
        """Check that no user has claimed this username."""
        existing = await self._users_collection.find_one(
            {"username": username},
            {"_id": 1},
            session=session,
        )
        return existing is None

    async def set_profile_info(
        self,
        user_id: int,
        username: str,
        first_name: str,
        last_name: str,
        session: Optional[AsyncIOMotorClientSession] = None,
    ) -> Optional[dict]:
        """
        Claim a username and set the name fields in one write.

        Only applies while the user has no username yet.

        Returns:
            Updated user document, or None if the user is missing or already
            has a username

        Raises:
            UserAlreadyExistsError: Username was claimed by someone else
        """
        try:
            user = await self._users_collection.find_one_and_update(
                {"_id": user_id, "username": None},
                {
                    "$set": {
                        "username": username,
                        "firstName": first_name,
                        "lastName": last_name,
                        "updatedAt": datetime.now(timezone.utc),
                    }
                },
                return_document=ReturnDocument.AFTER,
                session=session,
            )
        except DuplicateKeyError as e:
            raise UserAlreadyExistsError("Username already taken") from e

        if user:
            logger.info(f"Profile info set for user {user_id}")
        return user

    async def set_password(
        self,
        user_id: int,
        password_hash: str,
        session: Optional[AsyncIOMotorClientSession] = None,
    ) -> bool:
        """
        Store the first password hash for a user.

        Returns:
            True if stored, False if the user is missing or already has one
        """
        result = await self._users_collection.update_one(
            {"_id": user_id, "passwordHash": None},
            {
                "$set": {
                    "passwordHash": password_hash,
                    "updatedAt": datetime.now(timezone.utc),
                }
            },
            session=session,
        )

        if result.modified_count:
            logger.info(f"Password set for user {user_id}")
        return result.modified_count == 1

    async def update_profile(self, user_id: int, updates: dict) -> Optional[dict]:
        """
        Update editable profile fields.

        Args:
            user_id: User id
            updates: Any of firstName, lastName, age, phoneNumber. Unknown
                keys are ignored.

        Returns:
            Updated user document or None if not found
        """
        fields = {k: v for k, v in updates.items() if k in self.PROFILE_FIELDS}
        fields["updatedAt"] = datetime.now(timezone.utc)

        return await self._users_collection.find_one_and_update(
            {"_id": user_id},
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )

    @staticmethod
    def format_user_response(user: dict) -> dict:
        """Public projection of a user document."""
        return {
            "id": user["_id"],
            "email": user["email"],
            "username": user.get("username"),
            "firstName": user.get("firstName"),
            "lastName": user.get("lastName"),
            "avatar": user.get("avatar"),
            "isVerified": user.get("isVerified", False),
            "isPasswordSet": user.get("passwordHash") is not None,
            "age": user.get("age"),
            "phoneNumber": user.get("phoneNumber"),
        }

    async def _next_id(self) -> int:
        # Allocated outside any transaction so concurrent registrations don't
        # conflict on the counter; an aborted registration leaves a gap.
        counter = await self._counters_collection.find_one_and_update(
            {"_id": USERS},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return counter["seq"]

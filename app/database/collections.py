"""
Kushfinds collection names and index definitions.

The unique indexes here are what keeps concurrent requests honest: email and
username uniqueness, one code per user and type, and one session per refresh
token. TTL indexes let MongoDB purge expired codes and sessions on its own.
"""

import logging

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, IndexModel

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────
# Collection names
# ─────────────────────────────────────────────────────────────────

USERS = "users"
COUNTERS = "counters"
CODES = "codes"
SESSIONS = "sessions"


# ─────────────────────────────────────────────────────────────────
# Indexes
# ─────────────────────────────────────────────────────────────────

USER_INDEXES = [
    IndexModel([("email", ASCENDING)], name="email_unique", unique=True),
    # Username is null until the profile step, so only strings are unique
    IndexModel(
        [("username", ASCENDING)],
        name="username_unique",
        unique=True,
        partialFilterExpression={"username": {"$type": "string"}},
    ),
]

CODE_INDEXES = [
    # Backs the resend cooldown: one code row per user and type
    IndexModel(
        [("userId", ASCENDING), ("type", ASCENDING)],
        name="user_type_unique",
        unique=True,
    ),
    IndexModel([("expiresAt", ASCENDING)], name="expires_ttl", expireAfterSeconds=0),
]

SESSION_INDEXES = [
    IndexModel([("tokenHash", ASCENDING)], name="token_hash_unique", unique=True),
    IndexModel([("userId", ASCENDING)], name="user_id"),
    IndexModel([("expiresAt", ASCENDING)], name="expires_ttl", expireAfterSeconds=0),
]


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """
    Create all indexes the services rely on.

    Safe to call on every startup; MongoDB skips indexes that already exist
    with the same definition.

    Args:
        db: Main Motor database
    """
    await db[USERS].create_indexes(USER_INDEXES)
    await db[CODES].create_indexes(CODE_INDEXES)
    await db[SESSIONS].create_indexes(SESSION_INDEXES)
    logger.info("MongoDB indexes ensured")

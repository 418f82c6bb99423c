"""
Kushfinds database helpers - collection accessors and index bootstrap.
"""

from app.database.collections import (
    USERS,
    COUNTERS,
    CODES,
    SESSIONS,
    ensure_indexes,
)

__all__ = ["USERS", "COUNTERS", "CODES", "SESSIONS", "ensure_indexes"]

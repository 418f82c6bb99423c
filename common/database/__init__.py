"""
Database module - Generic async MongoDB connection and transactions.

Usage:
    from common.database import MongoDB, TransactionManager

    db = MongoDB()
    await db.connect(uri, database_name)

    tx = TransactionManager(db.client)
    result = await tx.run(unit_of_work)
"""

from common.database.mongodb import MongoDB
from common.database.transaction import TransactionManager

__all__ = [
    "MongoDB",
    "TransactionManager",
]

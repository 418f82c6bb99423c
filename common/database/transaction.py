"""
Transaction coordinator for multi-collection writes.

Runs a unit of work inside a MongoDB client session with a started
transaction. The unit of work receives the session and must pass it to
every collection call that should take part in the transaction.

Example:
    tx = TransactionManager(client)

    async def work(session):
        user = await users.create_user(email, session=session)
        return await codes.generate_verify(user["_id"], session=session)

    code = await tx.run(work)
"""

import logging
from typing import Any, Awaitable, Callable, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorClientSession
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)

TransactionFn = Callable[[Optional[AsyncIOMotorClientSession]], Awaitable[Any]]


class TransactionManager:
    """
    Scoped "run these steps atomically" primitive.

    Commits when the unit of work returns, aborts when it raises. Cancellation
    of the calling task aborts as well, so a disconnected request never leaves
    a partial commit behind.

    Units of work that lose a write conflict (TransientTransactionError) are
    re-run from the start, so they must only touch the database through the
    session they are given.
    """

    MAX_ATTEMPTS = 3

    def __init__(self, client: AsyncIOMotorClient, enabled: bool = True):
        """
        Initialize TransactionManager.

        Args:
            client: Motor client the sessions are started from
            enabled: When False, the unit of work runs with session=None.
                Only meant for standalone development servers, which do not
                support multi-document transactions.
        """
        self._client = client
        self._enabled = enabled

        if not enabled:
            logger.warning("MongoDB transactions disabled, multi-step writes are not atomic")

    async def run(self, fn: TransactionFn) -> Any:
        """
        Execute fn inside a transaction.

        Args:
            fn: Coroutine function taking the client session

        Returns:
            Whatever fn returns, after the commit succeeded

        Raises:
            Any exception raised by fn (after the transaction was aborted)
            or by the commit itself.
        """
        if not self._enabled:
            return await fn(None)

        attempt = 1
        while True:
            async with await self._client.start_session() as session:
                session.start_transaction()
                try:
                    result = await fn(session)
                except PyMongoError as e:
                    await self._abort(session)
                    if e.has_error_label("TransientTransactionError") and attempt < self.MAX_ATTEMPTS:
                        logger.warning(f"Transient transaction error, retrying (attempt {attempt}): {e}")
                        attempt += 1
                        continue
                    raise
                except BaseException:
                    await self._abort(session)
                    raise

                await session.commit_transaction()
                return result

    async def _abort(self, session: AsyncIOMotorClientSession) -> None:
        if session.in_transaction:
            await session.abort_transaction()

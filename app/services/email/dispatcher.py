"""
Fire-and-forget email dispatch.

Sends run as detached asyncio tasks so a slow or broken mail transport never
delays or fails the request that triggered them. Failures are logged, never
awaited by the caller and never retried.
"""

import asyncio
import logging
from typing import List, Set

from app.services.email.email_service import EmailService

logger = logging.getLogger(__name__)


class EmailDispatcher:
    """
    Schedules email sends in the background.
    """

    def __init__(self, email_service: EmailService):
        """
        Initialize EmailDispatcher.

        Args:
            email_service: Service that performs the actual send
        """
        self._email_service = email_service
        # The event loop only keeps weak references to tasks
        self._tasks: Set[asyncio.Task] = set()

    def dispatch(self, subject: str, body: str, recipients: List[str]) -> asyncio.Task:
        """
        Schedule a send and return immediately.

        Must be called from a running event loop.

        Returns:
            The scheduled task (callers are not expected to await it)
        """
        task = asyncio.create_task(self._email_service.send(subject, body, recipients))
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    @property
    def pending(self) -> int:
        """Number of sends still in flight."""
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for in-flight sends, used on shutdown."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)

        if task.cancelled():
            logger.warning("Email send cancelled")
            return

        error = task.exception()
        if error is not None:
            logger.error(f"Email send failed: {error}")
            return

        result = task.result()
        if not result.get("success"):
            logger.error(f"Email send failed: {result.get('error')}")

"""Fire-and-forget delivery of notifications."""

import asyncio
import logging
from typing import Any, Coroutine

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Launch notifier calls as independent tasks and log their outcome.

    The caller never awaits delivery, so a slow or failing mail server
    cannot change the result of a credential operation. References to
    running tasks are kept until they finish so they are not garbage
    collected mid-flight.
    """

    def __init__(self) -> None:
        self._pending: set[asyncio.Task[bool]] = set()

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def dispatch(
        self,
        description: str,
        notification: Coroutine[Any, Any, bool],
    ) -> asyncio.Task[bool]:
        """Schedule ``notification`` and return its task.

        ``description`` is used for logging only and must not contain
        tokens or other secrets.
        """
        task = asyncio.create_task(self._deliver(description, notification))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def drain(self) -> None:
        """Wait for all outstanding notifications (shutdown, tests)."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def _deliver(
        self,
        description: str,
        notification: Coroutine[Any, Any, bool],
    ) -> bool:
        try:
            delivered = await notification
        except Exception:
            logger.exception("Notification failed: %s", description)
            return False

        if delivered:
            logger.info("Notification sent: %s", description)
        else:
            logger.warning("Notification not delivered: %s", description)
        return bool(delivered)

"""
Notification Queue — self-expiring feedback messages.

Entries are removed by a loop timer when an asyncio event loop is running,
and are also pruned on every read once their deadline has passed, so expiry
holds for hosts that never run a loop.
"""

import asyncio
import itertools
import logging
import time
from typing import Callable, List, Optional

from water_saver.models.notification import Notification

logger = logging.getLogger(__name__)


class NotificationQueue:
    """Live set of notifications in insertion order. Unbounded."""

    def __init__(
        self,
        ttl_seconds: float = 2.0,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock or time.monotonic
        self._ids = itertools.count(1)
        self._live: List[Notification] = []

    def enqueue(self, text: str) -> Notification:
        """Append a notification and schedule its removal."""
        notification = Notification(
            id=next(self._ids),
            text=text,
            expires_at=self._clock() + self.ttl_seconds,
        )
        self._live.append(notification)

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        if loop is not None:
            loop.call_later(self.ttl_seconds, self.dequeue, notification.id)

        return notification

    def dequeue(self, notification_id: int) -> bool:
        """Remove by id. An id that is already gone is not an error."""
        for i, n in enumerate(self._live):
            if n.id == notification_id:
                del self._live[i]
                return True
        logger.debug("Notification %d already gone", notification_id)
        return False

    def clear(self) -> None:
        self._live.clear()

    def live(self) -> List[Notification]:
        """Unexpired notifications, oldest first."""
        now = self._clock()
        self._live = [n for n in self._live if n.expires_at > now]
        return list(self._live)

    def texts(self) -> List[str]:
        return [n.text for n in self.live()]

    def __len__(self) -> int:
        return len(self.live())

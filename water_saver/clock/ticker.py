"""
Simulation Clock — drives the tick handler on a fixed interval.

The clock owns one asyncio task. stop() cancels it synchronously; because the
handler runs between awaits on the loop thread, no handler call can follow a
stop() issued from that thread. No drift correction: each tick waits a full
interval after the previous handler returns.
"""

import asyncio
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class SimulationClock:
    """Cancellable fixed-interval ticker."""

    def __init__(self, interval_seconds: float, on_tick: Callable[[], None]):
        self.interval_seconds = interval_seconds
        self._on_tick = on_tick
        self._task: Optional[asyncio.Task] = None
        self._ticks_delivered = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def status(self) -> str:
        return "running" if self.running else "stopped"

    @property
    def ticks_delivered(self) -> int:
        return self._ticks_delivered

    def start(self) -> None:
        """
        Arm the clock on the running event loop.
        Raises RuntimeError when called outside a loop.
        """
        if self.running:
            return
        loop = asyncio.get_running_loop()
        self._ticks_delivered = 0
        self._task = loop.create_task(self._run())
        logger.debug("Clock armed (interval=%.3fs)", self.interval_seconds)

    def stop(self) -> None:
        """Cancel the pending tick. Safe to call when already stopped."""
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            logger.debug("Clock stopped after %d ticks", self._ticks_delivered)

    async def _run(self) -> None:
        me = asyncio.current_task()
        while True:
            await asyncio.sleep(self.interval_seconds)
            if self._task is not me:
                return
            self._ticks_delivered += 1
            try:
                self._on_tick()
            except Exception:
                logger.exception("Tick handler failed")

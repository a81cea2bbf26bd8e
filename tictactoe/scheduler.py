"""
Deferred actions for the automated opponent.

A scheduler runs a callback once after a delay. The session never waits
itself; it hands the deferred move to whichever scheduler the host supplies.
"""

import asyncio
import logging
from typing import Any, Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)


class AsyncioScheduler:
    """Runs callbacks as tasks on the running asyncio loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], Any]) -> "asyncio.Task":
        """
        Schedule callback after delay seconds.

        Must be called with a running loop unless one was given.
        Returns the task, so hosts can await the deferred action.
        """
        loop = self._loop or asyncio.get_running_loop()
        return loop.create_task(self._deferred(delay, callback))

    @staticmethod
    async def _deferred(delay: float, callback: Callable[[], Any]) -> None:
        await asyncio.sleep(delay)
        callback()


class ManualScheduler:
    """
    Holds callbacks until the host runs them.

    Useful for hosts that drive their own clock, and for tests.
    """

    def __init__(self):
        self.pending: List[Tuple[float, Callable[[], Any]]] = []

    def call_later(self, delay: float, callback: Callable[[], Any]) -> int:
        self.pending.append((delay, callback))
        return len(self.pending) - 1

    def run_pending(self) -> int:
        """Run every queued callback in order; returns how many ran."""
        ran = 0
        while self.pending:
            _, callback = self.pending.pop(0)
            callback()
            ran += 1
        logger.debug("Ran %d deferred action(s)", ran)
        return ran

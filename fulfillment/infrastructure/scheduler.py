"""Timer Scheduler — asyncio-backed delayed callbacks for order transitions.

Invariants:
    - call_later never blocks; the callback runs later on the event loop thread
    - Pending handles are tracked and dropped once they fire
    - cancel_all() leaves no pending callbacks behind (service shutdown)

Design Decisions:
    - loop.call_later over asyncio.create_task + sleep: transitions are
      synchronous critical sections, no coroutine needed
    - Loop resolved at schedule time: stores are built before the server
      loop exists, and always schedule from inside it
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)


class TimerScheduler:
    """TransitionScheduler implementation on the running asyncio loop."""

    def __init__(self) -> None:
        self._handles: set[asyncio.TimerHandle] = set()

    def call_later(
        self, delay: float, callback: Callable[..., Any], *args: Any,
    ) -> None:
        loop = asyncio.get_running_loop()
        handle: asyncio.TimerHandle

        def _fire() -> None:
            self._handles.discard(handle)
            callback(*args)

        handle = loop.call_later(delay, _fire)
        self._handles.add(handle)

    @property
    def pending(self) -> int:
        return len(self._handles)

    def cancel_all(self) -> None:
        if self._handles:
            logger.info(f"Cancelling {len(self._handles)} pending transitions")
        for handle in self._handles:
            handle.cancel()
        self._handles.clear()

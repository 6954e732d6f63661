"""
Periodic ticking of the live board's clock.

The Ticker does not care what schedules it: anything with call_later(delay_seconds, callback) returning a handle
with cancel() works (asyncio event loops do). On every firing it re-checks a liveness predicate; when that fails
the ticker stops by itself, so a board that was paused, switched away from or solved never advances again.
"""

import logging
from typing import Any, Callable, Optional, Protocol

logger = logging.getLogger(__name__)


class Handle(Protocol):
    def cancel(self) -> Any: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], Any]) -> Handle: ...


class Ticker:
    """Cancellable, re-armable repeating task guarded by a liveness predicate."""

    def __init__(
        self,
        scheduler: Scheduler,
        action: Callable[[], Any],
        is_alive: Callable[[], bool],
        interval_ms: float = 100,
    ) -> None:
        self.scheduler = scheduler
        self.action = action
        self.is_alive = is_alive
        self.interval_ms = interval_ms
        self._handle: Optional[Handle] = None
        self._active = False

    @property
    def is_running(self) -> bool:
        return self._active

    def start(self) -> None:
        """(Re)arm the ticker. Any pending firing is cancelled first so there is never more than one."""
        self.stop()
        self._active = True
        self._arm()

    def stop(self) -> None:
        self._active = False
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _arm(self) -> None:
        self._handle = self.scheduler.call_later(self.interval_ms / 1000, self._fire)

    def _fire(self) -> None:
        self._handle = None
        if not self._active:
            return
        if not self.is_alive():
            self._active = False
            logger.debug("Ticker stopped: board no longer live")
            return
        self.action()
        # the action may have stopped or re-armed the ticker itself
        if self._active and self._handle is None:
            self._arm()

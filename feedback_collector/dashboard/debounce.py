"""Delayed call that restarts its timer on every trigger."""

import asyncio
from typing import Any, Awaitable, Callable, Optional

from feedback_collector.utils.logging import error_log


class Debouncer:
    """
    Run a coroutine function once the caller has been quiet for ``delay`` seconds.

    Each call cancels the pending timer and schedules a new one, so only the
    most recent trigger within the quiet window fires. Once the timer has
    elapsed the call runs to completion and is no longer cancelled by new
    triggers.
    """

    def __init__(self, delay: float):
        self.delay = delay
        self._timer: Optional[asyncio.Task] = None
        self._latest: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def call(self, func: Callable[..., Awaitable[Any]], *args, **kwargs) -> asyncio.Task:
        self.cancel()
        task = asyncio.get_running_loop().create_task(self._fire(func, args, kwargs))
        self._timer = task
        self._latest = task
        return task

    async def _fire(self, func, args, kwargs) -> None:
        await asyncio.sleep(self.delay)
        self._timer = None
        try:
            await func(*args, **kwargs)
        except Exception as e:
            # The task is normally never awaited
            name = getattr(func, "__qualname__", repr(func))
            error_log("Debounced call failed", exc=e, context={"func": name})

    def cancel(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    async def wait(self) -> None:
        """Wait for the most recently scheduled call, if it was not cancelled."""
        task = self._latest
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            if not task.cancelled():
                raise

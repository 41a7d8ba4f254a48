"""Single-slot debounce timer for listing queries.

Schedule and cancel callables are injectable so the timer can run on the
asyncio loop in the console and on a manual clock in tests.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

ScheduleFn = Callable[[float, Callable[[], None]], Any]
CancelFn = Callable[[Any], None]


def _loop_schedule(delay_seconds: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
    return asyncio.get_running_loop().call_later(delay_seconds, callback)


def _loop_cancel(handle: asyncio.TimerHandle) -> None:
    handle.cancel()


class DebounceTimer:
    """Holds at most one armed timer; arming again cancels the previous one."""

    def __init__(self, delay_ms: int, schedule: ScheduleFn | None = None, cancel: CancelFn | None = None) -> None:
        self.delay_ms = max(0, int(delay_ms))
        self._schedule = schedule or _loop_schedule
        self._cancel = cancel or _loop_cancel
        self._token: Any = None

    @property
    def pending(self) -> bool:
        return self._token is not None

    def arm(self, callback: Callable[[], None]) -> None:
        self.cancel()

        def _expire() -> None:
            self._token = None
            callback()

        self._token = self._schedule(self.delay_ms / 1000, _expire)

    def cancel(self) -> None:
        token, self._token = self._token, None
        if token is not None:
            self._cancel(token)

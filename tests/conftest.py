from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest

from clients.mailria_client_sdk.config import SDKConfig
from clients.mailria_client_sdk.http_client import HttpClient
from mailria_control.app.listing.debounce import DebounceTimer
from mailria_control.app.ui.components.notifications import Notification

BASE_URL = "http://mail.test/"


class ManualClock:
    """Scheduler for DebounceTimer that only fires when the test advances it."""

    def __init__(self) -> None:
        self.now = 0.0
        self._timers: dict[int, tuple[float, Callable[[], None]]] = {}
        self._next_id = 0

    def schedule(self, delay_seconds: float, callback: Callable[[], None]) -> int:
        self._next_id += 1
        self._timers[self._next_id] = (self.now + delay_seconds, callback)
        return self._next_id

    def cancel(self, token: int) -> None:
        self._timers.pop(token, None)

    @property
    def armed(self) -> int:
        return len(self._timers)

    def advance(self, seconds: float) -> None:
        self.now += seconds
        due = sorted((deadline, token) for token, (deadline, _) in self._timers.items() if deadline <= self.now)
        for _, token in due:
            _, callback = self._timers.pop(token)
            callback()

    def timer(self, delay_ms: int = 500) -> DebounceTimer:
        return DebounceTimer(delay_ms, schedule=self.schedule, cancel=self.cancel)


class RecordingNotifier:
    def __init__(self) -> None:
        self.notifications: list[Notification] = []

    def success(self, message: str) -> None:
        self.notifications.append(Notification("success", message))

    def error(self, message: str) -> None:
        self.notifications.append(Notification("error", message))

    @property
    def errors(self) -> list[str]:
        return [item.message for item in self.notifications if item.level == "error"]

    @property
    def successes(self) -> list[str]:
        return [item.message for item in self.notifications if item.level == "success"]


@pytest.fixture()
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def sdk_config() -> SDKConfig:
    return SDKConfig(base_url=BASE_URL, timeout_seconds=5, retry_backoff_ms=0)


@pytest.fixture()
def make_http(sdk_config: SDKConfig) -> Callable[[Callable[[httpx.Request], httpx.Response]], HttpClient]:
    def _factory(handler: Callable[[httpx.Request], httpx.Response]) -> HttpClient:
        client = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))
        return HttpClient(sdk_config, client=client)

    return _factory

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class Notification:
    level: str
    message: str


class Notifier(Protocol):
    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class ConsoleNotifier:
    """Prints toasts to stdout and keeps the last one for callers that inspect it."""

    def __init__(self) -> None:
        self.last: Notification | None = None

    def success(self, message: str) -> None:
        self._emit(Notification("success", message))

    def error(self, message: str) -> None:
        self._emit(Notification("error", message))

    def _emit(self, notification: Notification) -> None:
        self.last = notification
        print(f"[{notification.level}] {notification.message}")

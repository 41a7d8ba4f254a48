from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

from dotenv import load_dotenv

DEFAULT_BASE_URL = "http://localhost:8080/"

TRUTHY = frozenset({"1", "true", "t", "yes", "y", "on"})
FALSY = frozenset({"0", "false", "f", "no", "n", "off"})

T = TypeVar("T")


class ConfigError(ValueError):
    """A MAILRIA_* setting is missing its expected type or range."""


def parse_bool(value: str | bool | None, default: bool = True) -> bool:
    if value is None or isinstance(value, bool):
        return default if value is None else value
    token = str(value).strip().lower()
    if token in TRUTHY or token in FALSY:
        return token in TRUTHY
    return default


def env_value(name: str, cast: Callable[[str], T], fallback: str, kind: str) -> T:
    raw = os.getenv(name, fallback)
    try:
        return cast(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected {kind}, got {raw!r}") from exc


def base_url_from(raw: str | None) -> str:
    url = (raw or "").strip() or DEFAULT_BASE_URL
    return url.rstrip("/") + "/"


@dataclass(frozen=True)
class SDKConfig:
    """Connection settings for the mail API, read from MAILRIA_* variables."""

    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = 30.0
    verify_ssl: bool = True
    # GET retries are opt-in
    retry_max_attempts: int = 1
    retry_backoff_ms: int = 250

    @classmethod
    def from_env(cls, env_file: str | None = ".env") -> "SDKConfig":
        # real environment variables win over the dotenv file
        load_dotenv(env_file, override=False)
        loaded = cls(
            base_url=base_url_from(os.getenv("MAILRIA_API_BASE_URL")),
            timeout_seconds=env_value("MAILRIA_TIMEOUT_SECONDS", float, "30", "a number"),
            verify_ssl=parse_bool(os.getenv("MAILRIA_VERIFY_SSL")),
            retry_max_attempts=env_value("MAILRIA_RETRY_MAX_ATTEMPTS", int, "1", "an integer"),
            retry_backoff_ms=env_value("MAILRIA_RETRY_BACKOFF_MS", int, "250", "an integer"),
        )
        loaded.check()
        return loaded

    def check(self) -> None:
        problems = [
            (self.timeout_seconds > 0, "MAILRIA_TIMEOUT_SECONDS must be greater than 0"),
            (self.retry_max_attempts >= 1, "MAILRIA_RETRY_MAX_ATTEMPTS must be >= 1"),
            (self.retry_backoff_ms >= 0, "MAILRIA_RETRY_BACKOFF_MS must be >= 0"),
        ]
        for ok, message in problems:
            if not ok:
                raise ConfigError(message)

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from clients.mailria_client_sdk.config import ConfigError, env_value

SORT_PARAM_STYLES = {"fields", "legacy"}


@dataclass(frozen=True)
class AppConfig:
    debounce_ms: int = 500
    page_size: int = 10
    sort_param_style: str = "fields"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env_file: str | None = ".env") -> "AppConfig":
        load_dotenv(env_file, override=False)
        config = cls(
            debounce_ms=env_value("MAILRIA_DEBOUNCE_MS", int, "500", "an integer"),
            page_size=env_value("MAILRIA_PAGE_SIZE", int, "10", "an integer"),
            sort_param_style=os.getenv("MAILRIA_SORT_PARAM_STYLE", "fields").strip().lower(),
            log_level=os.getenv("MAILRIA_LOG_LEVEL", "INFO").strip().upper() or "INFO",
        )
        config.validate()
        return config

    @property
    def legacy_sort(self) -> bool:
        return self.sort_param_style == "legacy"

    def validate(self) -> None:
        if self.debounce_ms < 0:
            raise ConfigError("MAILRIA_DEBOUNCE_MS must be >= 0")
        if self.page_size < 1:
            raise ConfigError("MAILRIA_PAGE_SIZE must be >= 1")
        if self.sort_param_style not in SORT_PARAM_STYLES:
            raise ConfigError("MAILRIA_SORT_PARAM_STYLE must be 'fields' or 'legacy'")

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_data_dir
from pydantic import ValidationError

from clients.mailria_client_sdk.models import SessionData

logger = logging.getLogger(__name__)

SESSION_FILE_MODE = 0o600


@dataclass
class AuthStore:
    """Persists the signed-in session under the user's data directory."""

    app_name: str = "mailria-control"
    session_file: str = "session.json"
    base_dir: Path | None = None

    @property
    def location(self) -> Path:
        folder = self.base_dir or Path(user_data_dir(self.app_name, "Mailria"))
        folder.mkdir(parents=True, exist_ok=True)
        return folder / self.session_file

    def save(self, session: SessionData) -> None:
        target = self.location
        # created private so the token is never world-readable, even briefly
        fd = os.open(target, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, SESSION_FILE_MODE)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(session.model_dump(), handle, indent=2)
        os.chmod(target, SESSION_FILE_MODE)

    def load(self) -> SessionData | None:
        target = self.location
        if not target.is_file():
            return None
        try:
            return SessionData.model_validate_json(target.read_text(encoding="utf-8"))
        except (ValueError, ValidationError):
            logger.warning("discarding unreadable session file %s", target)
            self.clear()
            return None

    def clear(self) -> None:
        self.location.unlink(missing_ok=True)

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from clients.mailria_client_sdk.auth_store import AuthStore
from clients.mailria_client_sdk.models import SessionData

USER_ROLE_ID = 1


class SessionContext(Protocol):
    def get_token(self) -> str | None: ...

    def get_role(self) -> int | None: ...

    def clear(self) -> None: ...


def is_privileged(session: SessionContext) -> bool:
    role = session.get_role()
    return role is not None and role != USER_ROLE_ID


@dataclass
class StaticSession:
    token: str | None = None
    role_id: int | None = None

    def get_token(self) -> str | None:
        return self.token

    def get_role(self) -> int | None:
        return self.role_id

    def clear(self) -> None:
        self.token = None
        self.role_id = None


class StoredSession:
    """Session backed by the on-disk auth store, read lazily on each access."""

    def __init__(self, store: AuthStore | None = None) -> None:
        self.store = store or AuthStore()

    def get_token(self) -> str | None:
        data = self.store.load()
        return data.access_token if data else None

    def get_role(self) -> int | None:
        data = self.store.load()
        return data.role_id if data else None

    def establish(self, token: str, role_id: int | None, email: str | None = None) -> None:
        self.store.save(SessionData(access_token=token, role_id=role_id, email=email))

    def clear(self) -> None:
        self.store.clear()

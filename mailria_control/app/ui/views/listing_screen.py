from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from clients.mailria_client_sdk.errors import ApiError
from clients.mailria_client_sdk.models import AccountPage, AccountRow, ChangePasswordRequest
from clients.mailria_client_sdk.sorting import SortDirection, SortKey
from clients.mailria_client_sdk.users_client import UsersClient

from mailria_control.app.application.confirmation import (
    ActionConfirmation,
    ActionKind,
    ConfirmOutcome,
    PendingAction,
)
from mailria_control.app.config import AppConfig
from mailria_control.app.domain.listing_result import ListingResult
from mailria_control.app.domain.models.session_context import SessionContext
from mailria_control.app.domain.query_state import QueryState
from mailria_control.app.infrastructure.errors.error_mapper import ErrorMapper
from mailria_control.app.infrastructure.logging.logger import get_logger, log_action
from mailria_control.app.listing.debounce import DebounceTimer
from mailria_control.app.listing.listing_store import ListingStore
from mailria_control.app.listing.query_coordinator import QueryCoordinator
from mailria_control.app.ui.components.notifications import Notifier
from mailria_control.app.ui.forms import FormResult, accepts_search_input, validate_password_change
from mailria_control.app.ui.pagination import PaginationView

logger = get_logger(__name__)

SORTABLE_FIELDS = ("last_login", "created_at")
PASSWORD_CHANGED = "Password changed successfully!"
PASSWORD_CHANGE_FAILED = "Failed to change password."
LOAD_FAILED = "Failed to load users"

Lister = Callable[..., Awaitable[AccountPage]]
Deleter = Callable[[UsersClient, "str | None", int], Awaitable[Any]]


@dataclass(frozen=True)
class ListingSpec:
    """Per-screen differences of the canonical account listing."""

    name: str
    entity: str
    route: str
    lister: Lister
    deleter: Deleter
    delete_success: str
    delete_failure: str
    refetch_after_mutation: bool
    admin_password_tier: bool
    seeded_sort: tuple[SortKey, ...] = (SortKey("last_login", SortDirection.DESC),)


class ListingScreen:
    """One listing screen instance: query, result set, and the row action dialog."""

    def __init__(
        self,
        spec: ListingSpec,
        users: UsersClient,
        session: SessionContext,
        notifier: Notifier,
        *,
        config: AppConfig | None = None,
        debounce: DebounceTimer | None = None,
        state: QueryState | None = None,
    ) -> None:
        self.spec = spec
        self.users = users
        self.session = session
        self.notifier = notifier
        self.config = config or AppConfig()
        self.store: ListingStore[AccountRow] = ListingStore()
        self.confirmation: ActionConfirmation[AccountRow] = ActionConfirmation()
        self.fields: dict[str, str] = {}
        self.coordinator: QueryCoordinator[AccountRow] = QueryCoordinator(
            self._load,
            debounce=debounce or DebounceTimer(self.config.debounce_ms),
            state=state or QueryState(sort_keys=spec.seeded_sort, page_size=self.config.page_size),
            on_loaded=self.store.replace,
            on_failed=self._on_fetch_failed,
        )

    @property
    def state(self) -> QueryState:
        return self.coordinator.state

    @property
    def pagination(self) -> PaginationView:
        return PaginationView.from_store(self.store)

    def start(self) -> asyncio.Task | None:
        return self.coordinator.refresh()

    def search(self, raw: str) -> bool:
        if not accepts_search_input(raw):
            return False
        self.coordinator.set_search_term(raw)
        return True

    def toggle_sort(self, field_name: str) -> None:
        if field_name not in SORTABLE_FIELDS:
            raise ValueError(f"{field_name!r} is not sortable; expected one of {SORTABLE_FIELDS}")
        self.coordinator.toggle_sort(field_name)

    def go_to_page(self, page: int) -> None:
        self.coordinator.set_page(page)

    def select(self, kind: ActionKind, row_id: int | None = None) -> PendingAction[AccountRow]:
        row = None
        if row_id is not None:
            row = self.store.find(row_id)
            if row is None:
                raise LookupError(f"{self.spec.entity} {row_id} is not on the current page")
        return self.select_row(kind, row)

    def select_row(self, kind: ActionKind, row: AccountRow | None) -> PendingAction[AccountRow]:
        self.fields = {}
        return self.confirmation.select(kind, row)

    def confirmation_text(self) -> str:
        pending = self.confirmation.pending
        if pending is None:
            return ""
        email = pending.row.email if pending.row else ""
        if pending.kind is ActionKind.DELETE:
            return f"Are you sure you want to delete {self.spec.entity} {email}?"
        if pending.kind is ActionKind.CHANGE_PASSWORD:
            return f"Change password for {email}"
        return f"Create a new {self.spec.entity}"

    def set_field(self, name: str, value: str) -> None:
        self.fields[name] = value

    def cancel(self) -> None:
        pending = self.confirmation.pending
        self.confirmation.cancel()
        self.fields = {}
        if pending is not None:
            self._log(pending, "cancelled")

    async def confirm(self) -> ConfirmOutcome | None:
        """Submit the selected action; None when client-side validation blocked it."""
        pending = self.confirmation.pending
        if pending is None:
            return None

        form = self.validate(pending)
        if form is not None and not form.is_valid:
            self.notifier.error(form.first_error or "Invalid input.")
            self._log(pending, "rejected")
            return None

        outcome = await self.confirmation.confirm(self._submit)
        self.fields = {}
        self._log(pending, "success" if outcome.committed else "failure")
        if outcome.committed:
            self._after_commit(pending)
        else:
            self.notifier.error(ErrorMapper.to_message(outcome.error, self._failure_text(pending.kind)))
        return outcome

    async def wait_idle(self) -> None:
        await self.coordinator.wait_idle()

    def dispose(self) -> None:
        self.coordinator.dispose()
        self.confirmation.cancel()
        self.fields = {}

    def validate(self, pending: PendingAction[AccountRow]) -> FormResult | None:
        if pending.kind is ActionKind.CHANGE_PASSWORD:
            return validate_password_change(
                self.fields.get("new_password"),
                self.fields.get("confirm_password"),
                admin_tier=self.spec.admin_password_tier,
            )
        return None

    async def _submit(self, pending: PendingAction[AccountRow]) -> Any:
        token = self.session.get_token()
        if pending.kind is ActionKind.DELETE:
            return await self.spec.deleter(self.users, token, pending.row.id)
        if pending.kind is ActionKind.CHANGE_PASSWORD:
            payload = ChangePasswordRequest(user_id=pending.row.id, new_password=self.fields["new_password"])
            return await self.users.change_password(token, payload, admin=self.spec.admin_password_tier)
        raise ValueError(f"{self.spec.name} does not support {pending.kind.value}")

    def _after_commit(self, pending: PendingAction[AccountRow]) -> None:
        if pending.kind is ActionKind.DELETE:
            self.notifier.success(self.spec.delete_success)
            if self.spec.refetch_after_mutation:
                self.coordinator.refresh()
            else:
                self.store.remove_locally(pending.row.id)
        elif pending.kind is ActionKind.CHANGE_PASSWORD:
            self.notifier.success(PASSWORD_CHANGED)

    def _failure_text(self, kind: ActionKind) -> str:
        if kind is ActionKind.DELETE:
            return self.spec.delete_failure
        return PASSWORD_CHANGE_FAILED

    async def _load(self, query: QueryState) -> ListingResult[AccountRow]:
        page = await self.spec.lister(
            self.users,
            self.session.get_token(),
            query.page,
            query.page_size,
            email=query.search_term or None,
            sort=query.sort_keys,
            legacy_sort=self.config.legacy_sort,
        )
        return ListingResult.from_account_page(page, query.page)

    def _on_fetch_failed(self, error: ApiError) -> None:
        self.notifier.error(ErrorMapper.to_message(error, LOAD_FAILED))

    def _log(self, pending: PendingAction[AccountRow], outcome: str) -> None:
        log_action(
            logger,
            module=self.spec.name,
            action=pending.kind.value,
            actor_role=self.session.get_role(),
            target_id=pending.row.id if pending.row else None,
            outcome=outcome,
        )

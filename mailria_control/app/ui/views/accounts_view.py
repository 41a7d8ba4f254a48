from __future__ import annotations

from clients.mailria_client_sdk.users_client import UsersClient

from mailria_control.app.config import AppConfig
from mailria_control.app.domain.models.session_context import SessionContext
from mailria_control.app.domain.query_state import QueryState
from mailria_control.app.listing.debounce import DebounceTimer
from mailria_control.app.ui.components.notifications import Notifier
from mailria_control.app.ui.views.listing_screen import ListingScreen, ListingSpec

ACCOUNTS_SPEC = ListingSpec(
    name="accounts",
    entity="user",
    route="/admin",
    lister=UsersClient.list_users,
    deleter=UsersClient.delete_user,
    delete_success="User deleted successfully!",
    delete_failure="Failed to delete user.",
    refetch_after_mutation=False,
    admin_password_tier=False,
)


def build_accounts_screen(
    users: UsersClient,
    session: SessionContext,
    notifier: Notifier,
    config: AppConfig | None = None,
    debounce: DebounceTimer | None = None,
    state: QueryState | None = None,
) -> ListingScreen:
    return ListingScreen(ACCOUNTS_SPEC, users, session, notifier, config=config, debounce=debounce, state=state)

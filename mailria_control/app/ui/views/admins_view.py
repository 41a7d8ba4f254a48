from __future__ import annotations

from typing import Any

from clients.mailria_client_sdk.models import AccountRow, CreateAdminRequest
from clients.mailria_client_sdk.users_client import UsersClient

from mailria_control.app.application.confirmation import ActionKind, PendingAction
from mailria_control.app.ui.forms import FormResult, validate_admin_create
from mailria_control.app.ui.views.listing_screen import ListingScreen, ListingSpec

ADMIN_CREATED = "Admin created successfully!"
ADMIN_CREATE_FAILED = "Failed to create admin."

ADMINS_SPEC = ListingSpec(
    name="admins",
    entity="admin",
    route="/admin/settings",
    lister=UsersClient.list_admins,
    deleter=UsersClient.delete_admin,
    delete_success="Admin deleted successfully!",
    delete_failure="Failed to delete user.",
    refetch_after_mutation=True,
    admin_password_tier=True,
)


class AdminsScreen(ListingScreen):
    """Admin listing; every mutation is followed by a full refetch."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(ADMINS_SPEC, *args, **kwargs)

    def select_create(self) -> PendingAction[AccountRow]:
        return self.select(ActionKind.CREATE)

    def validate(self, pending: PendingAction[AccountRow]) -> FormResult | None:
        if pending.kind is ActionKind.CREATE:
            return validate_admin_create(self.fields.get("username"), self.fields.get("password"))
        return super().validate(pending)

    async def _submit(self, pending: PendingAction[AccountRow]) -> Any:
        if pending.kind is ActionKind.CREATE:
            payload = CreateAdminRequest(username=self.fields["username"].strip(), password=self.fields["password"])
            return await self.users.create_admin(self.session.get_token(), payload)
        return await super()._submit(pending)

    def _after_commit(self, pending: PendingAction[AccountRow]) -> None:
        if pending.kind is ActionKind.CREATE:
            self.notifier.success(ADMIN_CREATED)
            self.coordinator.refresh()
            return
        super()._after_commit(pending)

    def _failure_text(self, kind: ActionKind) -> str:
        if kind is ActionKind.CREATE:
            return ADMIN_CREATE_FAILED
        return super()._failure_text(kind)

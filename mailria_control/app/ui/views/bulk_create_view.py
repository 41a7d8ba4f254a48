from __future__ import annotations

from dataclasses import dataclass

from clients.mailria_client_sdk.errors import ApiError
from clients.mailria_client_sdk.models import BulkCreateRequest
from clients.mailria_client_sdk.users_client import UsersClient

from mailria_control.app.domain.models.session_context import SessionContext
from mailria_control.app.infrastructure.errors.error_mapper import ErrorMapper
from mailria_control.app.infrastructure.logging.logger import get_logger, log_action
from mailria_control.app.ui.components.notifications import Notifier
from mailria_control.app.ui.forms import generate_random_password, validate_bulk_create

logger = get_logger(__name__)

BULK_CREATE_FAILED = "Failed to create users. Please try again."
DEFAULT_DOMAIN = "mailria.com"


@dataclass
class BulkCreateForm:
    base_name: str = ""
    quantity: int = 2
    password: str = ""
    send_to: str = ""
    domain: str = DEFAULT_DOMAIN

    def set_quantity(self, value: int) -> None:
        # the stepper itself allows 1..100; submit enforces the real lower bound
        if 1 <= value <= 100:
            self.quantity = value

    def randomize_password(self) -> str:
        self.password = generate_random_password()
        return self.password

    def reset(self) -> None:
        self.base_name = ""
        self.password = ""
        self.send_to = ""


class BulkCreateScreen:
    def __init__(self, users: UsersClient, session: SessionContext, notifier: Notifier) -> None:
        self.users = users
        self.session = session
        self.notifier = notifier
        self.form = BulkCreateForm()

    async def submit(self) -> bool:
        result = validate_bulk_create(self.form.quantity, self.form.password, self.form.base_name, self.form.send_to)
        if not result.is_valid:
            self.notifier.error(result.first_error or BULK_CREATE_FAILED)
            return False

        payload = BulkCreateRequest(domain=self.form.domain, **result.values)
        try:
            await self.users.bulk_create(self.session.get_token(), payload)
        except ApiError as error:
            log_action(logger, "bulk_create", "create", self.session.get_role(), None, "failure")
            self.notifier.error(ErrorMapper.to_message(error, BULK_CREATE_FAILED))
            return False

        log_action(logger, "bulk_create", "create", self.session.get_role(), None, "success")
        self.notifier.success(f"Successfully created {payload.quantity} accounts.")
        self.form.reset()
        return True

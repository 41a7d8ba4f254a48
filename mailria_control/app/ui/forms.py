from __future__ import annotations

import re
import secrets
import string
from dataclasses import dataclass
from typing import Any

SEARCH_INPUT_REGEX = re.compile(r"^[a-zA-Z0-9.,_]*$")
PASSWORD_SYMBOLS = "!@#$%^&*"
COMPLEXITY_REGEX = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[^A-Za-z0-9]).+$")

ACCOUNT_PASSWORD_MIN = 6
ADMIN_PASSWORD_MIN = 8
BULK_QUANTITY_MIN = 2
BULK_QUANTITY_MAX = 100
DEFAULT_BASE_NAME = "random"


@dataclass
class FormResult:
    values: dict[str, Any]
    field_errors: dict[str, str]

    @property
    def first_invalid_field(self) -> str | None:
        return next(iter(self.field_errors), None)

    @property
    def first_error(self) -> str | None:
        field = self.first_invalid_field
        return self.field_errors[field] if field else None

    @property
    def is_valid(self) -> bool:
        return len(self.field_errors) == 0


def accepts_search_input(value: str) -> bool:
    return bool(SEARCH_INPUT_REGEX.match(value))


def _password_error(password: str, minimum: int, require_complexity: bool) -> str | None:
    if not password:
        return "Please provide a password."
    if len(password) < minimum:
        return f"Password must be at least {minimum} characters long."
    if require_complexity and not COMPLEXITY_REGEX.match(password):
        return "Password must include lowercase, uppercase, number and symbol."
    return None


def validate_password_change(new_password: str | None, confirm_password: str | None, admin_tier: bool = False) -> FormResult:
    new_password = new_password or ""
    confirm_password = confirm_password or ""
    field_errors: dict[str, str] = {}

    if not new_password:
        field_errors["new_password"] = "Please provide a password."
    elif new_password != confirm_password:
        field_errors["confirm_password"] = "Passwords do not match."
    else:
        minimum = ADMIN_PASSWORD_MIN if admin_tier else ACCOUNT_PASSWORD_MIN
        error = _password_error(new_password, minimum, require_complexity=admin_tier)
        if error:
            field_errors["new_password"] = error

    return FormResult(values={"new_password": new_password}, field_errors=field_errors)


def validate_admin_create(username: str | None, password: str | None) -> FormResult:
    normalized_username = (username or "").strip()
    password = password or ""
    field_errors: dict[str, str] = {}
    if not normalized_username:
        field_errors["username"] = "Please provide a username."
    error = _password_error(password, ADMIN_PASSWORD_MIN, require_complexity=True)
    if error:
        field_errors["password"] = error
    return FormResult(values={"username": normalized_username, "password": password}, field_errors=field_errors)


def validate_bulk_create(
    quantity: int | str | None,
    password: str | None,
    base_name: str | None = None,
    send_to: str | None = None,
) -> FormResult:
    password = password or ""
    field_errors: dict[str, str] = {}

    try:
        count = int(quantity) if quantity not in (None, "") else 0
    except (TypeError, ValueError):
        count = 0

    if not password:
        field_errors["password"] = "Please provide a password."
    elif not BULK_QUANTITY_MIN <= count <= BULK_QUANTITY_MAX:
        field_errors["quantity"] = "Quantity must be between 2 and 100. Please try again."
    elif len(password) < ACCOUNT_PASSWORD_MIN:
        field_errors["password"] = "Password must be at least 6 characters long. Please try again."

    return FormResult(
        values={
            "base_name": (base_name or "").strip() or DEFAULT_BASE_NAME,
            "quantity": count,
            "password": password,
            "send_to": (send_to or "").strip(),
        },
        field_errors=field_errors,
    )


def generate_random_password(length: int = 8) -> str:
    alphabet = string.ascii_letters + string.digits + PASSWORD_SYMBOLS
    return "".join(secrets.choice(alphabet) for _ in range(length))

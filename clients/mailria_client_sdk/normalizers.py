from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from clients.mailria_client_sdk.errors import DecodeError
from clients.mailria_client_sdk.models import AccountPage, EmailSummary

ModelT = TypeVar("ModelT", bound=BaseModel)


def decode_model(model: type[ModelT], payload: Any) -> ModelT:
    if not isinstance(payload, dict):
        raise DecodeError(
            code="DECODE_ERROR",
            message=f"Expected an object for {model.__name__}, got {type(payload).__name__}",
            details=None,
        )
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise DecodeError(
            code="DECODE_ERROR",
            message=f"Unexpected {model.__name__} response shape",
            details=exc.errors(include_url=False),
        ) from exc


def decode_account_page(payload: Any) -> AccountPage:
    return decode_model(AccountPage, payload)


def decode_email_list(payload: Any) -> list[EmailSummary]:
    # the inbox endpoint answers with a bare array, or null when empty
    if payload is None or payload == {}:
        return []
    if not isinstance(payload, list):
        raise DecodeError(
            code="DECODE_ERROR",
            message=f"Expected a list of emails, got {type(payload).__name__}",
            details=None,
        )
    return [decode_model(EmailSummary, item) for item in payload]

from clients.mailria_client_sdk.auth_store import AuthStore
from clients.mailria_client_sdk.config import ConfigError, SDKConfig
from clients.mailria_client_sdk.emails_client import EmailsClient
from clients.mailria_client_sdk.errors import ApiError, DecodeError, RequestCancelled
from clients.mailria_client_sdk.http_client import HttpClient
from clients.mailria_client_sdk.models import (
    AccountPage,
    AccountRow,
    Attachment,
    BulkCreateRequest,
    ChangePasswordRequest,
    CreateAdminRequest,
    EmailDetail,
    EmailSummary,
    SentSummary,
    SessionData,
)
from clients.mailria_client_sdk.sorting import SortDirection, SortKey, encode_sort_fields, parse_sort_fields
from clients.mailria_client_sdk.users_client import UsersClient

__all__ = [
    "AccountPage",
    "AccountRow",
    "ApiError",
    "Attachment",
    "AuthStore",
    "BulkCreateRequest",
    "ChangePasswordRequest",
    "ConfigError",
    "CreateAdminRequest",
    "DecodeError",
    "EmailDetail",
    "EmailSummary",
    "EmailsClient",
    "HttpClient",
    "RequestCancelled",
    "SDKConfig",
    "SentSummary",
    "SessionData",
    "SortDirection",
    "SortKey",
    "UsersClient",
    "encode_sort_fields",
    "parse_sort_fields",
]

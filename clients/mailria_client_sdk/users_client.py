from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from clients.mailria_client_sdk.http_client import HttpClient
from clients.mailria_client_sdk.models import (
    AccountPage,
    BulkCreateRequest,
    ChangePasswordRequest,
    CreateAdminRequest,
)
from clients.mailria_client_sdk.normalizers import decode_account_page
from clients.mailria_client_sdk.sorting import SortKey, sort_params

USERS_PATH = "/user/"
ADMINS_PATH = "/user/admin"


class UsersClient:
    def __init__(self, http_client: HttpClient) -> None:
        self.http_client = http_client

    async def list_users(
        self,
        access_token: str | None,
        page: int,
        page_size: int,
        email: str | None = None,
        sort: Sequence[SortKey] = (),
        legacy_sort: bool = False,
    ) -> AccountPage:
        return await self._list(USERS_PATH, access_token, page, page_size, email, sort, legacy_sort)

    async def list_admins(
        self,
        access_token: str | None,
        page: int,
        page_size: int,
        email: str | None = None,
        sort: Sequence[SortKey] = (),
        legacy_sort: bool = False,
    ) -> AccountPage:
        return await self._list(ADMINS_PATH, access_token, page, page_size, email, sort, legacy_sort)

    async def delete_user(self, access_token: str | None, user_id: int) -> dict[str, Any]:
        return await self.http_client.request("DELETE", f"/user/{user_id}", token=access_token)

    async def delete_admin(self, access_token: str | None, user_id: int) -> dict[str, Any]:
        return await self.http_client.request("DELETE", f"/user/admin/{user_id}", token=access_token)

    async def change_password(
        self,
        access_token: str | None,
        payload: ChangePasswordRequest,
        admin: bool = False,
    ) -> dict[str, Any]:
        path = "/user/change_password/admin" if admin else "/user/change_password"
        return await self.http_client.request("PUT", path, token=access_token, json_body=payload.model_dump())

    async def create_admin(self, access_token: str | None, payload: CreateAdminRequest) -> dict[str, Any]:
        return await self.http_client.request("POST", ADMINS_PATH, token=access_token, json_body=payload.model_dump())

    async def bulk_create(self, access_token: str | None, payload: BulkCreateRequest) -> dict[str, Any]:
        return await self.http_client.request("POST", "/user/bulk", token=access_token, json_body=payload.model_dump())

    async def _list(
        self,
        path: str,
        access_token: str | None,
        page: int,
        page_size: int,
        email: str | None,
        sort: Sequence[SortKey],
        legacy_sort: bool,
    ) -> AccountPage:
        params = _build_query_params(page=page, page_size=page_size, email=email)
        params.update(sort_params(sort, legacy=legacy_sort))
        payload = await self.http_client.request("GET", path, token=access_token, params=params)
        return decode_account_page(payload)


def _build_query_params(**kwargs: Any) -> dict[str, Any]:
    return {key: value for key, value in kwargs.items() if value not in (None, "")}

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any
from urllib.parse import quote, urlencode

import httpx

from clients.mailria_client_sdk.config import SDKConfig
from clients.mailria_client_sdk.errors import ApiError

logger = logging.getLogger(__name__)

AUTH_FAILURE_STATUSES = frozenset({401, 403})


def _auth_headers(token: str | None, extra: dict[str, str] | None) -> dict[str, str]:
    headers = dict(extra or {})
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def _network_error(exc: Exception) -> ApiError:
    return ApiError(code="NETWORK_ERROR", message="Network error while calling the mail API", details=str(exc))


class HttpClient:
    """Async transport for the mail API. GETs retry only when configured to; mutations never do."""

    def __init__(
        self,
        config: SDKConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config or SDKConfig.from_env()
        self._client = client or httpx.AsyncClient(
            base_url=self.config.base_url,
            timeout=self.config.timeout_seconds,
            verify=self.config.verify_ssl,
        )
        self._attempts = max(1, self.config.retry_max_attempts)
        self._backoff_seconds = max(0, self.config.retry_backoff_ms) / 1000
        self._on_auth_error: Callable[[ApiError], None] | None = None

    def register_auth_error_handler(self, handler: Callable[[ApiError], None] | None) -> None:
        self._on_auth_error = handler

    async def request(
        self,
        method: str,
        path: str,
        token: str | None = None,
        json_body: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        response = await self._send(method, path, token=token, json_body=json_body, headers=headers, params=params)
        # several endpoints answer 200/204 with no body
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return {}

    async def request_bytes(
        self,
        method: str,
        path: str,
        token: str | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> tuple[bytes, str | None]:
        response = await self._send(method, path, token=token, json_body=json_body)
        return response.content, response.headers.get("Content-Type")

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _send(
        self,
        method: str,
        path: str,
        *,
        token: str | None = None,
        json_body: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        url = "/" + path.lstrip("/")
        if params:
            # spaces go out as %20, commas stay literal
            url = f"{url}?{urlencode(params, quote_via=quote, safe=',')}"
        retryable = method.upper() == "GET"
        send_headers = _auth_headers(token, headers)

        attempt = 0
        while True:
            attempt += 1
            final = not retryable or attempt >= self._attempts
            try:
                response = await self._client.request(method, url, json=json_body, headers=send_headers)
            except httpx.TransportError as exc:
                if final:
                    raise _network_error(exc) from exc
                logger.debug("%s %s transport error on attempt %s: %s", method, url, attempt, exc)
                await asyncio.sleep(self._backoff_seconds * attempt)
                continue

            if response.status_code < 400:
                return response

            error = ApiError.from_http_response(response)
            if not final and response.status_code >= 500:
                logger.debug("%s %s answered %s on attempt %s", method, url, response.status_code, attempt)
                await asyncio.sleep(self._backoff_seconds * attempt)
                continue
            if response.status_code in AUTH_FAILURE_STATUSES and self._on_auth_error:
                self._on_auth_error(error)
            raise error

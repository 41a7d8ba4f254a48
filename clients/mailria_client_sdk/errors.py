from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

FALLBACK_MESSAGE = "HTTP request failed"

CODE_BY_STATUS = {
    400: "VALIDATION_ERROR",
    422: "VALIDATION_ERROR",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    409: "CONFLICT",
}


def code_for_status(status: int) -> str:
    return "SERVER_ERROR" if status >= 500 else CODE_BY_STATUS.get(status, "HTTP_ERROR")


@dataclass
class ApiError(Exception):
    """Failure reported by (or on the way to) the mail API.

    ``server_message`` carries the backend's ``{"error": "..."}`` text when
    there is one; screens prefer it over their own failure wording.
    """

    code: str
    message: str
    details: dict[str, Any] | list[Any] | str | None = None
    status_code: int | None = None
    server_message: str | None = None

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"

    @classmethod
    def from_http_response(cls, response: httpx.Response) -> "ApiError":
        status = response.status_code
        text = response.text or FALLBACK_MESSAGE
        try:
            body = response.json()
        except ValueError:
            body = None

        if not isinstance(body, dict):
            return cls(code=code_for_status(status), message=text, details=body, status_code=status)

        envelope = body.get("error")
        server_message = str(envelope) if envelope else None
        return cls(
            code=code_for_status(status),
            message=server_message or text,
            details=body.get("details"),
            status_code=status,
            server_message=server_message,
        )


class DecodeError(ApiError):
    """Response body did not match the expected shape."""


class RequestCancelled(ApiError):
    """The request was superseded or aborted before its result was used."""

from __future__ import annotations

from clients.mailria_client_sdk.http_client import HttpClient
from clients.mailria_client_sdk.models import EmailDetail, EmailSummary, SentSummary
from clients.mailria_client_sdk.normalizers import decode_email_list, decode_model


class EmailsClient:
    def __init__(self, http_client: HttpClient) -> None:
        self.http_client = http_client

    async def list_inbox(self, access_token: str | None) -> list[EmailSummary]:
        payload = await self.http_client.request("GET", "/email/by_user", token=access_token)
        return decode_email_list(payload)

    async def sent_summary(self, access_token: str | None) -> SentSummary:
        payload = await self.http_client.request("GET", "/email/sent/by_user", token=access_token)
        return decode_model(SentSummary, payload)

    async def get_detail(self, access_token: str | None, email_id: int) -> EmailDetail:
        payload = await self.http_client.request("GET", f"/email/by_user/detail/{email_id}", token=access_token)
        return decode_model(EmailDetail, payload)

    async def download_file(self, access_token: str | None, email_id: int, file_url: str) -> tuple[bytes, str | None]:
        return await self.http_client.request_bytes(
            "POST",
            "/email/by_user/download/file",
            token=access_token,
            json_body={"email_id": str(email_id), "file_url": file_url},
        )

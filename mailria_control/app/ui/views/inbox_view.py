from __future__ import annotations

import asyncio
from pathlib import Path

from clients.mailria_client_sdk.emails_client import EmailsClient
from clients.mailria_client_sdk.errors import ApiError
from clients.mailria_client_sdk.models import Attachment, EmailDetail, EmailSummary

from mailria_control.app.domain.models.session_context import SessionContext
from mailria_control.app.infrastructure.errors.error_mapper import ErrorMapper
from mailria_control.app.infrastructure.logging.logger import get_logger
from mailria_control.app.ui.components.notifications import Notifier

logger = get_logger(__name__)

DAILY_SEND_LIMIT = 3
LOAD_EMAILS_FAILED = "Failed to load emails"
LOAD_EMAIL_FAILED = "Failed to load email"
DOWNLOAD_FAILED = "Failed to download file."


class InboxScreen:
    def __init__(self, emails: EmailsClient, session: SessionContext, notifier: Notifier) -> None:
        self.emails_client = emails
        self.session = session
        self.notifier = notifier
        self.emails: list[EmailSummary] = []
        self.sent_emails = 0
        self.mailbox = ""
        self.redirect_to: str | None = None

    @property
    def daily_send_label(self) -> str:
        return f"Daily Send {self.sent_emails}/{DAILY_SEND_LIMIT}"

    async def load(self) -> bool:
        token = self.session.get_token()
        if not token:
            self.redirect_to = "/"
            return False
        try:
            summary, emails = await asyncio.gather(
                self.emails_client.sent_summary(token),
                self.emails_client.list_inbox(token),
            )
        except ApiError as error:
            logger.warning("inbox load failed code=%s status=%s", error.code, error.status_code)
            self.notifier.error(ErrorMapper.to_message(error, LOAD_EMAILS_FAILED))
            return False
        self.sent_emails = summary.sent_emails
        self.mailbox = summary.email
        self.emails = emails
        return True

    async def open_email(self, email_id: int) -> EmailDetail | None:
        token = self.session.get_token()
        if not token:
            self.redirect_to = "/"
            return None
        try:
            return await self.emails_client.get_detail(token, email_id)
        except ApiError as error:
            self.notifier.error(ErrorMapper.to_message(error, LOAD_EMAIL_FAILED))
            return None

    async def download(self, email_id: int, attachment: Attachment, target_dir: Path) -> Path | None:
        try:
            content, _ = await self.emails_client.download_file(self.session.get_token(), email_id, attachment.url)
        except ApiError as error:
            self.notifier.error(ErrorMapper.to_message(error, DOWNLOAD_FAILED))
            return None
        target_dir.mkdir(parents=True, exist_ok=True)
        destination = target_dir / _safe_filename(attachment.filename, email_id)
        destination.write_bytes(content)
        return destination


def _safe_filename(raw: str, email_id: int) -> str:
    # server-supplied names must stay inside the target directory
    name = Path(raw).name
    if name in ("", ".", ".."):
        return f"attachment-{email_id}"
    return name

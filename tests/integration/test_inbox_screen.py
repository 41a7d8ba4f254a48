import asyncio
import json

import httpx

from clients.mailria_client_sdk.emails_client import EmailsClient
from clients.mailria_client_sdk.models import Attachment
from mailria_control.app.domain.models.session_context import StaticSession
from mailria_control.app.ui.views.inbox_view import InboxScreen


def _handler(request: httpx.Request) -> httpx.Response:
    path = request.url.path
    if path == "/email/sent/by_user":
        return httpx.Response(200, json={"SentEmails": 2, "Email": "alice@mailria.com"})
    if path == "/email/by_user":
        return httpx.Response(200, json=[{"ID": 5, "SenderName": "Bob", "Subject": "Hello", "RelativeTime": "2h"}])
    if path == "/email/by_user/detail/5":
        return httpx.Response(
            200,
            json={"ID": 5, "Subject": "Hello", "Body": "Hi", "ListAttachments": [{"Filename": "../notes.txt", "URL": "s3://notes"}]},
        )
    if path == "/email/by_user/download/file":
        if json.loads(request.content) == {"email_id": "5", "file_url": "s3://notes"}:
            return httpx.Response(200, content=b"notes")
    return httpx.Response(404, json={"error": "not found"})


def test_inbox_loads_summary_and_emails(make_http, notifier) -> None:
    async def scenario():
        http = make_http(_handler)
        screen = InboxScreen(EmailsClient(http), StaticSession("tok", 1), notifier)
        ok = await screen.load()
        await http.aclose()
        return screen, ok

    screen, ok = asyncio.run(scenario())

    assert ok is True
    assert screen.daily_send_label == "Daily Send 2/3"
    assert screen.mailbox == "alice@mailria.com"
    assert [email.subject for email in screen.emails] == ["Hello"]


def test_inbox_without_token_redirects_home(make_http, notifier) -> None:
    async def scenario():
        http = make_http(_handler)
        screen = InboxScreen(EmailsClient(http), StaticSession(), notifier)
        ok = await screen.load()
        await http.aclose()
        return screen, ok

    screen, ok = asyncio.run(scenario())

    assert ok is False
    assert screen.redirect_to == "/"


def test_inbox_failure_notifies(make_http, notifier) -> None:
    def failing(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={})

    async def scenario():
        http = make_http(failing)
        ok = await InboxScreen(EmailsClient(http), StaticSession("tok", 1), notifier).load()
        await http.aclose()
        return ok

    assert asyncio.run(scenario()) is False
    assert notifier.errors == ["Failed to load emails"]


def test_detail_and_download_stay_inside_target_dir(make_http, notifier, tmp_path) -> None:
    async def scenario():
        http = make_http(_handler)
        screen = InboxScreen(EmailsClient(http), StaticSession("tok", 1), notifier)
        detail = await screen.open_email(5)
        saved = await screen.download(detail.id, detail.attachments[0], tmp_path / "out")
        missing = await screen.download(6, Attachment(filename="x", url="s3://missing"), tmp_path)
        await http.aclose()
        return saved, missing

    saved, missing = asyncio.run(scenario())

    assert saved == tmp_path / "out" / "notes.txt"
    assert saved.read_bytes() == b"notes"
    assert missing is None


def test_dot_entry_filenames_fall_back_to_generated_name(make_http, notifier, tmp_path) -> None:
    async def scenario():
        http = make_http(_handler)
        screen = InboxScreen(EmailsClient(http), StaticSession("tok", 1), notifier)
        saved = [await screen.download(5, Attachment(filename=name, url="s3://notes"), tmp_path / "out") for name in ("..", "a/..", ".")]
        await http.aclose()
        return saved

    saved = asyncio.run(scenario())

    assert saved == [tmp_path / "out" / "attachment-5"] * 3
    assert (tmp_path / "out" / "attachment-5").read_bytes() == b"notes"
    assert notifier.errors == []

import asyncio
import json

import httpx

from clients.mailria_client_sdk.users_client import UsersClient
from mailria_control.app.application.confirmation import ActionKind, DialogPhase
from mailria_control.app.domain.models.session_context import StaticSession
from mailria_control.app.ui.views.admins_view import AdminsScreen


class _AdminBackend:
    def __init__(self) -> None:
        self.admins = {7: "root@mailria.com", 8: "ops@mailria.com"}
        self.requests: list[httpx.Request] = []
        self.next_id = 9

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "GET":
            users = [{"ID": admin_id, "Email": email} for admin_id, email in sorted(self.admins.items())]
            return httpx.Response(200, json={"users": users, "total_pages": 1, "total_count": len(users)})
        if request.method == "DELETE":
            self.admins.pop(int(request.url.path.rsplit("/", 1)[-1]), None)
            return httpx.Response(200, json={})
        if request.method == "POST":
            body = json.loads(request.content)
            if body["username"] in self.admins.values():
                return httpx.Response(409, json={"error": "username already taken"})
            self.admins[self.next_id] = body["username"]
            self.next_id += 1
            return httpx.Response(201, json={})
        return httpx.Response(200, json={})

    def paths(self, method: str) -> list[str]:
        return [request.url.path for request in self.requests if request.method == method]


def _run(make_http, backend, notifier, clock, steps):
    async def scenario():
        http = make_http(backend)
        screen = AdminsScreen(UsersClient(http), StaticSession("tok", 0), notifier, debounce=clock.timer())
        screen.start()
        await screen.wait_idle()
        result = await steps(screen)
        await screen.wait_idle()
        await http.aclose()
        return screen, result

    return asyncio.run(scenario())


def test_delete_admin_refetches_instead_of_patching(make_http, notifier, clock) -> None:
    backend = _AdminBackend()

    async def steps(screen):
        screen.select(ActionKind.DELETE, 8)
        text = screen.confirmation_text()
        await screen.confirm()
        return text

    screen, text = _run(make_http, backend, notifier, clock, steps)

    assert text == "Are you sure you want to delete admin ops@mailria.com?"
    assert backend.paths("DELETE") == ["/user/admin/8"]
    assert backend.paths("GET") == ["/user/admin", "/user/admin"]
    assert [row.id for row in screen.store.rows] == [7]
    assert notifier.successes == ["Admin deleted successfully!"]


def test_create_admin_validates_before_sending(make_http, notifier, clock) -> None:
    backend = _AdminBackend()

    async def steps(screen):
        screen.select_create()
        screen.set_field("username", "newbie")
        screen.set_field("password", "weakpass")
        return await screen.confirm()

    screen, outcome = _run(make_http, backend, notifier, clock, steps)

    assert outcome is None
    assert backend.paths("POST") == []
    assert notifier.errors == ["Password must include lowercase, uppercase, number and symbol."]
    assert screen.confirmation.phase is DialogPhase.SELECTED


def test_create_admin_success_refetches(make_http, notifier, clock) -> None:
    backend = _AdminBackend()

    async def steps(screen):
        screen.select_create()
        screen.set_field("username", " newbie ")
        screen.set_field("password", "Str0ng!pw")
        return await screen.confirm()

    screen, outcome = _run(make_http, backend, notifier, clock, steps)

    post = [request for request in backend.requests if request.method == "POST"][0]
    assert json.loads(post.content) == {"username": "newbie", "password": "Str0ng!pw"}
    assert outcome.committed is True
    assert "newbie" in [row.email for row in screen.store.rows]
    assert notifier.successes == ["Admin created successfully!"]


def test_create_admin_conflict_surfaces_server_message(make_http, notifier, clock) -> None:
    backend = _AdminBackend()

    async def steps(screen):
        screen.select_create()
        screen.set_field("username", "ops@mailria.com")
        screen.set_field("password", "Str0ng!pw")
        return await screen.confirm()

    screen, outcome = _run(make_http, backend, notifier, clock, steps)

    assert outcome.committed is False
    assert notifier.errors == ["username already taken"]
    assert screen.fields == {}
    assert backend.paths("GET") == ["/user/admin"]


def test_admin_password_reset_uses_admin_endpoint_and_complexity(make_http, notifier, clock) -> None:
    backend = _AdminBackend()

    async def steps(screen):
        screen.select(ActionKind.CHANGE_PASSWORD, 7)
        screen.set_field("new_password", "secret12")
        screen.set_field("confirm_password", "secret12")
        rejected = await screen.confirm()
        screen.set_field("new_password", "Secret12!")
        screen.set_field("confirm_password", "Secret12!")
        accepted = await screen.confirm()
        return rejected, accepted

    screen, (rejected, accepted) = _run(make_http, backend, notifier, clock, steps)

    assert rejected is None
    assert accepted.committed is True
    assert backend.paths("PUT") == ["/user/change_password/admin"]
    assert notifier.successes == ["Password changed successfully!"]

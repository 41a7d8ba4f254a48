from __future__ import annotations

import argparse
import asyncio
import sys
from dataclasses import dataclass
from getpass import getpass
from pathlib import Path

from clients.mailria_client_sdk.config import ConfigError, SDKConfig
from clients.mailria_client_sdk.emails_client import EmailsClient
from clients.mailria_client_sdk.errors import ApiError
from clients.mailria_client_sdk.http_client import HttpClient
from clients.mailria_client_sdk.models import AccountRow
from clients.mailria_client_sdk.sorting import SortDirection, SortKey
from clients.mailria_client_sdk.users_client import UsersClient

from mailria_control.app.application.confirmation import ActionKind
from mailria_control.app.config import AppConfig
from mailria_control.app.domain.models.session_context import SessionContext, StaticSession, StoredSession
from mailria_control.app.domain.query_state import QueryState
from mailria_control.app.infrastructure.errors.error_mapper import ErrorMapper
from mailria_control.app.infrastructure.logging.logger import configure_root, get_logger
from mailria_control.app.navigation_shell import resolve_route
from mailria_control.app.ui.components.notifications import ConsoleNotifier, Notifier
from mailria_control.app.ui.forms import accepts_search_input
from mailria_control.app.ui.listing_view import ACCOUNT_COLUMNS, format_row, header_label
from mailria_control.app.ui.table_printer import print_table
from mailria_control.app.ui.views.accounts_view import ACCOUNTS_SPEC, build_accounts_screen
from mailria_control.app.ui.views.admins_view import ADMINS_SPEC, AdminsScreen
from mailria_control.app.ui.views.bulk_create_view import BulkCreateScreen
from mailria_control.app.ui.views.inbox_view import InboxScreen
from mailria_control.app.ui.views.listing_screen import SORTABLE_FIELDS, ListingScreen

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_REDIRECT = 2

ROUTE_BY_COMMAND = {
    "accounts": "/admin",
    "delete-account": "/admin",
    "change-password": "/admin",
    "admins": "/admin/settings",
    "delete-admin": "/admin/settings",
    "create-admin": "/admin/settings",
    "bulk-create": "/admin/create-bulk-email",
    "inbox": "/inbox",
    "read": "/inbox",
    "download": "/inbox",
}


@dataclass
class Runtime:
    http: HttpClient
    session: SessionContext
    notifier: Notifier
    config: AppConfig

    @property
    def users(self) -> UsersClient:
        return UsersClient(self.http)

    @property
    def emails(self) -> EmailsClient:
        return EmailsClient(self.http)


def _sort_key(raw: str) -> SortKey:
    field, _, direction = raw.partition(":")
    try:
        return SortKey(field.strip(), SortDirection((direction or "desc").strip().lower()))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid sort {raw!r}; use field[:asc|desc]") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mailria-control", description="Mailria operator console")
    parser.add_argument("--token", help="Bearer token to use instead of the stored session")
    parser.add_argument("--role", type=int, help="Role id that goes with --token")
    parser.add_argument("--env-file", default=".env")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name in ("accounts", "admins"):
        listing = subparsers.add_parser(name, help=f"List {name}")
        listing.add_argument("--search", default="")
        listing.add_argument("--sort", action="append", type=_sort_key, default=[], help="field[:asc|desc], primary first")
        listing.add_argument("--page", type=int, default=1)
        listing.add_argument("--page-size", type=int)

    for name in ("delete-account", "delete-admin"):
        delete = subparsers.add_parser(name)
        delete.add_argument("id", type=int)
        delete.add_argument("--email", default="")
        delete.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")

    change = subparsers.add_parser("change-password")
    change.add_argument("id", type=int)
    change.add_argument("--email", default="")
    change.add_argument("--admin", action="store_true", help="Reset an admin's password")
    change.add_argument("--password")

    create = subparsers.add_parser("create-admin")
    create.add_argument("username")
    create.add_argument("--password")

    bulk = subparsers.add_parser("bulk-create")
    bulk.add_argument("--quantity", type=int, default=2)
    bulk.add_argument("--base-name", default="")
    bulk.add_argument("--send-to", default="")
    bulk.add_argument("--domain", default="mailria.com")
    bulk.add_argument("--password")
    bulk.add_argument("--random-password", action="store_true")

    subparsers.add_parser("inbox")
    read = subparsers.add_parser("read")
    read.add_argument("id", type=int)
    download = subparsers.add_parser("download")
    download.add_argument("id", type=int)
    download.add_argument("--out", type=Path, default=Path("."))

    login = subparsers.add_parser("login", help="Store a session token")
    login.add_argument("access_token")
    login.add_argument("--role-id", type=int)
    login.add_argument("--email")
    subparsers.add_parser("logout", help="Clear the stored session")
    return parser


def _print_listing(screen: ListingScreen) -> None:
    columns = [(column.key, header_label(column, screen.state)) for column in ACCOUNT_COLUMNS]
    title = f"{screen.spec.name} ({screen.store.total_count} total"
    active = screen.store.auxiliary_counts.get("active")
    title += f", {active} active)" if active is not None else ")"
    print_table(title, [format_row(row) for row in screen.store.rows], columns)
    footer = screen.pagination.render()
    if footer:
        print(footer)


def _confirmed(prompt: str, assume_yes: bool) -> bool:
    if assume_yes:
        return True
    return input(f"{prompt} [y/N]: ").strip().lower() in {"y", "yes"}


async def _listing(args: argparse.Namespace, runtime: Runtime) -> int:
    if not accepts_search_input(args.search):
        runtime.notifier.error("Search accepts letters, digits, '.', ',' and '_' only.")
        return EXIT_FAILED
    unknown = [key.field for key in args.sort if key.field not in SORTABLE_FIELDS]
    if unknown:
        runtime.notifier.error(f"Cannot sort by {', '.join(unknown)}; choose from {', '.join(SORTABLE_FIELDS)}.")
        return EXIT_FAILED

    spec = ADMINS_SPEC if args.command == "admins" else ACCOUNTS_SPEC
    try:
        state = QueryState(
            search_term=args.search,
            sort_keys=tuple(args.sort) or spec.seeded_sort,
            page=args.page,
            page_size=args.page_size or runtime.config.page_size,
        )
    except ValueError as error:
        runtime.notifier.error(str(error))
        return EXIT_FAILED

    screen = _screen_for(args.command, runtime, state)
    try:
        screen.start()
        await screen.wait_idle()
    finally:
        screen.dispose()
    if not screen.store.loaded:
        return EXIT_FAILED
    _print_listing(screen)
    return EXIT_OK


def _screen_for(command: str, runtime: Runtime, state: QueryState | None = None) -> ListingScreen:
    if command in {"admins", "delete-admin", "create-admin"}:
        return AdminsScreen(runtime.users, runtime.session, runtime.notifier, config=runtime.config, state=state)
    return build_accounts_screen(runtime.users, runtime.session, runtime.notifier, config=runtime.config, state=state)


async def _delete(args: argparse.Namespace, runtime: Runtime) -> int:
    screen = _screen_for(args.command, runtime)
    screen.select_row(ActionKind.DELETE, AccountRow(id=args.id, email=args.email or str(args.id)))
    if not _confirmed(screen.confirmation_text(), args.yes):
        screen.cancel()
        return EXIT_FAILED
    outcome = await screen.confirm()
    screen.dispose()
    return EXIT_OK if outcome and outcome.committed else EXIT_FAILED


async def _change_password(args: argparse.Namespace, runtime: Runtime) -> int:
    screen = AdminsScreen(runtime.users, runtime.session, runtime.notifier, config=runtime.config) if args.admin else _screen_for(args.command, runtime)
    screen.select_row(ActionKind.CHANGE_PASSWORD, AccountRow(id=args.id, email=args.email or str(args.id)))
    password = args.password if args.password is not None else getpass("New password: ")
    confirm = args.password if args.password is not None else getpass("Confirm password: ")
    screen.set_field("new_password", password)
    screen.set_field("confirm_password", confirm)
    outcome = await screen.confirm()
    screen.dispose()
    return EXIT_OK if outcome and outcome.committed else EXIT_FAILED


async def _create_admin(args: argparse.Namespace, runtime: Runtime) -> int:
    screen = AdminsScreen(runtime.users, runtime.session, runtime.notifier, config=runtime.config)
    screen.select_create()
    screen.set_field("username", args.username)
    screen.set_field("password", args.password if args.password is not None else getpass("Password: "))
    outcome = await screen.confirm()
    try:
        await screen.wait_idle()
    finally:
        screen.dispose()
    return EXIT_OK if outcome and outcome.committed else EXIT_FAILED


async def _bulk_create(args: argparse.Namespace, runtime: Runtime) -> int:
    screen = BulkCreateScreen(runtime.users, runtime.session, runtime.notifier)
    screen.form.base_name = args.base_name
    screen.form.set_quantity(args.quantity)
    screen.form.send_to = args.send_to
    screen.form.domain = args.domain
    if args.random_password:
        print(f"Generated password: {screen.form.randomize_password()}")
    else:
        screen.form.password = args.password if args.password is not None else getpass("Password: ")
    return EXIT_OK if await screen.submit() else EXIT_FAILED


async def _inbox(args: argparse.Namespace, runtime: Runtime) -> int:
    screen = InboxScreen(runtime.emails, runtime.session, runtime.notifier)
    if args.command == "inbox":
        if not await screen.load():
            return EXIT_REDIRECT if screen.redirect_to else EXIT_FAILED
        print(f"{screen.mailbox}  {screen.daily_send_label}")
        rows = [
            {"id": str(email.id), "from": email.sender_name, "subject": email.subject, "when": email.relative_time or ""}
            for email in screen.emails
        ]
        print_table("Inbox", rows, [("id", "ID"), ("from", "From"), ("subject", "Subject"), ("when", "Received")])
        return EXIT_OK

    detail = await screen.open_email(args.id)
    if detail is None:
        return EXIT_REDIRECT if screen.redirect_to else EXIT_FAILED
    if args.command == "read":
        print(f"From: {detail.sender_name} <{detail.sender_email}>")
        print(f"Subject: {detail.subject}")
        print(f"\n{detail.body}")
        for attachment in detail.attachments:
            print(f"[attachment] {attachment.filename}")
        return EXIT_OK

    status = EXIT_OK
    for attachment in detail.attachments:
        saved = await screen.download(detail.id, attachment, args.out)
        if saved is None:
            status = EXIT_FAILED
        else:
            print(f"Saved {saved}")
    return status


async def dispatch(args: argparse.Namespace, runtime: Runtime) -> int:
    route = ROUTE_BY_COMMAND.get(args.command)
    if route:
        decision = resolve_route(route, runtime.session)
        if not decision.allowed:
            runtime.notifier.error(f"Not allowed here; redirecting to {decision.redirect_to}")
            return EXIT_REDIRECT

    if args.command in {"accounts", "admins"}:
        return await _listing(args, runtime)
    if args.command in {"delete-account", "delete-admin"}:
        return await _delete(args, runtime)
    if args.command == "change-password":
        return await _change_password(args, runtime)
    if args.command == "create-admin":
        return await _create_admin(args, runtime)
    if args.command == "bulk-create":
        return await _bulk_create(args, runtime)
    return await _inbox(args, runtime)


def _session_for(args: argparse.Namespace) -> SessionContext:
    if args.token:
        return StaticSession(token=args.token, role_id=args.role)
    return StoredSession()


def _clear_on_unauthorized(session: SessionContext):
    def _handler(error: ApiError) -> None:
        if error.status_code == 401:
            logger.info("session cleared after 401 from the mail API")
            session.clear()

    return _handler


async def run(
    argv: list[str] | None = None,
    *,
    http_client: HttpClient | None = None,
    session: SessionContext | None = None,
    notifier: Notifier | None = None,
) -> int:
    args = build_parser().parse_args(argv)
    session = session or _session_for(args)

    if args.command == "login":
        if not isinstance(session, StoredSession):
            session = StoredSession()
        session.establish(args.access_token, args.role_id, args.email)
        print("Session stored.")
        return EXIT_OK
    if args.command == "logout":
        session.clear()
        print("Session cleared.")
        return EXIT_OK

    try:
        config = AppConfig.from_env(args.env_file)
        http = http_client or HttpClient(SDKConfig.from_env(args.env_file))
    except ConfigError as error:
        print(f"[error] {error}", file=sys.stderr)
        return EXIT_FAILED

    configure_root(config.log_level)
    http.register_auth_error_handler(_clear_on_unauthorized(session))
    runtime = Runtime(http=http, session=session, notifier=notifier or ConsoleNotifier(), config=config)
    try:
        return await dispatch(args, runtime)
    except ApiError as error:
        runtime.notifier.error(ErrorMapper.to_message(error, "Request failed."))
        return EXIT_FAILED
    finally:
        await http.aclose()


def main() -> int:
    return asyncio.run(run())


if __name__ == "__main__":
    sys.exit(main())

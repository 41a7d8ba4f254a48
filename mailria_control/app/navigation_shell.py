from __future__ import annotations

from dataclasses import dataclass

from mailria_control.app.domain.models.session_context import SessionContext, is_privileged
from mailria_control.app.infrastructure.logging.logger import get_logger

logger = get_logger(__name__)

LOGIN_ROUTE = "/"
NOT_FOUND_ROUTE = "/not-found"


@dataclass(frozen=True)
class NavRoute:
    path: str
    label: str
    admin_only: bool


ROUTES: list[NavRoute] = [
    NavRoute("/admin", "Accounts", admin_only=True),
    NavRoute("/admin/settings", "Admins", admin_only=True),
    NavRoute("/admin/create-bulk-email", "Bulk create", admin_only=True),
    NavRoute("/inbox", "Inbox", admin_only=False),
]


@dataclass(frozen=True)
class RouteDecision:
    allowed: bool
    redirect_to: str | None = None


def _matches(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix.rstrip("/") + "/")


def resolve_route(path: str, session: SessionContext) -> RouteDecision:
    admin_only = _matches(path, "/admin")
    if not admin_only and not _matches(path, "/inbox"):
        return RouteDecision(allowed=True)

    if not session.get_token():
        logger.info("redirect path=%s to=%s reason=missing_token", path, LOGIN_ROUTE)
        return RouteDecision(allowed=False, redirect_to=LOGIN_ROUTE)
    if admin_only and not is_privileged(session):
        logger.info("redirect path=%s to=%s reason=role", path, NOT_FOUND_ROUTE)
        return RouteDecision(allowed=False, redirect_to=NOT_FOUND_ROUTE)
    return RouteDecision(allowed=True)


def visible_routes(session: SessionContext) -> list[NavRoute]:
    return [route for route in ROUTES if resolve_route(route.path, session).allowed]

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from clients.mailria_client_sdk.sorting import SortDirection

from mailria_control.app.domain.query_state import QueryState

EMPTY_VALUE = "—"
CHEVRONS = {SortDirection.ASC: "up", SortDirection.DESC: "down"}
CHEVRON_GLYPHS = {"up": "^", "down": "v"}


@dataclass(frozen=True)
class ColumnDef:
    key: str
    label: str
    sort_field: str | None = None
    formatter: str = "text"


ACCOUNT_COLUMNS = (
    ColumnDef("email", "Email"),
    ColumnDef("last_login", "Last Active", sort_field="last_login", formatter="datetime"),
    ColumnDef("created_at", "Created", sort_field="created_at", formatter="date"),
    ColumnDef("created_by_name", "Created By"),
)


def sort_indicator(state: QueryState, field: str | None) -> str | None:
    """Chevron for a column header: ``up``, ``down`` or None when never toggled."""
    if field is None:
        return None
    direction = state.direction_of(field)
    return CHEVRONS[direction] if direction else None


def header_label(column: ColumnDef, state: QueryState) -> str:
    indicator = sort_indicator(state, column.sort_field)
    return f"{column.label} {CHEVRON_GLYPHS[indicator]}" if indicator else column.label


def normalize_value(value: Any, formatter: str = "text") -> str:
    if value is None:
        return EMPTY_VALUE
    if isinstance(value, datetime):
        local = value.astimezone()
        if formatter == "date":
            return local.strftime("%Y-%m-%d")
        return local.strftime("%Y-%m-%d %H:%M:%S")
    if isinstance(value, str):
        return value.strip() or EMPTY_VALUE
    return str(value)


def format_row(row: Any, columns: tuple[ColumnDef, ...] = ACCOUNT_COLUMNS) -> dict[str, str]:
    return {column.key: normalize_value(getattr(row, column.key, None), column.formatter) for column in columns}

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    def flipped(self) -> "SortDirection":
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


@dataclass(frozen=True)
class SortKey:
    field: str
    direction: SortDirection = SortDirection.DESC

    def token(self) -> str:
        return f"{self.field} {self.direction.value}"


def encode_sort_fields(keys: Sequence[SortKey]) -> str:
    """Serialize sort keys, primary first, as ``"<field> <asc|desc>"`` tokens joined by commas."""
    return ",".join(key.token() for key in keys)


def parse_sort_fields(raw: str | None) -> list[SortKey]:
    keys: list[SortKey] = []
    seen: set[str] = set()
    for chunk in (raw or "").split(","):
        parts = chunk.split()
        if not parts or parts[0] in seen:
            continue
        direction = SortDirection.ASC if len(parts) > 1 and parts[1].lower() == "asc" else SortDirection.DESC
        keys.append(SortKey(parts[0], direction))
        seen.add(parts[0])
    return keys


def sort_params(keys: Sequence[SortKey], *, legacy: bool = False) -> dict[str, Any]:
    if not keys:
        return {}
    if legacy:
        primary = keys[0]
        return {"sort_by": primary.field, "sort_order": primary.direction.value}
    return {"sort_fields": encode_sort_fields(keys)}

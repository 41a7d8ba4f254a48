from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Generic, Protocol, TypeVar

from clients.mailria_client_sdk.models import AccountPage, AccountRow


class IdentifiedRow(Protocol):
    @property
    def id(self) -> int: ...


RowT = TypeVar("RowT", bound=IdentifiedRow)


@dataclass(frozen=True)
class ListingResult(Generic[RowT]):
    rows: tuple[RowT, ...]
    total_count: int = 0
    total_pages: int = 1
    page: int = 1
    auxiliary_counts: Mapping[str, int] = field(default_factory=dict)

    @staticmethod
    def from_account_page(payload: AccountPage, requested_page: int) -> "ListingResult[AccountRow]":
        counts = {"active": payload.active_count} if payload.active_count is not None else {}
        return ListingResult(
            rows=tuple(payload.users),
            total_count=payload.total_count,
            # an empty result set still renders as a single page
            total_pages=max(1, payload.total_pages),
            page=requested_page,
            auxiliary_counts=counts,
        )

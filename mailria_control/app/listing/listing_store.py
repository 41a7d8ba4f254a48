from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import replace
from typing import Any, Generic

from mailria_control.app.domain.listing_result import ListingResult, RowT

StoreListener = Callable[["ListingStore"], None]


class ListingStore(Generic[RowT]):
    """Latest fetched page plus optimistic row mutations.

    Totals only change on ``replace``; after a local removal they are advisory
    until the next authoritative fetch.
    """

    def __init__(self) -> None:
        self._result: ListingResult[RowT] | None = None
        self._listeners: list[StoreListener] = []

    @property
    def loaded(self) -> bool:
        return self._result is not None

    @property
    def rows(self) -> tuple[RowT, ...]:
        return self._result.rows if self._result else ()

    @property
    def total_count(self) -> int:
        return self._result.total_count if self._result else 0

    @property
    def total_pages(self) -> int:
        return self._result.total_pages if self._result else 1

    @property
    def page(self) -> int:
        return self._result.page if self._result else 1

    @property
    def auxiliary_counts(self) -> Mapping[str, int]:
        return self._result.auxiliary_counts if self._result else {}

    def subscribe(self, listener: StoreListener) -> None:
        self._listeners.append(listener)

    def replace(self, result: ListingResult[RowT]) -> None:
        self._result = result
        self._notify()

    def find(self, row_id: int) -> RowT | None:
        return next((row for row in self.rows if row.id == row_id), None)

    def remove_locally(self, row_id: int) -> None:
        if self._result is None:
            return
        remaining = tuple(row for row in self._result.rows if row.id != row_id)
        if len(remaining) == len(self._result.rows):
            return
        self._result = replace(self._result, rows=remaining)
        self._notify()

    def update_locally(self, row_id: int, **changes: Any) -> None:
        if self._result is None or self.find(row_id) is None:
            return
        rows = tuple(row.model_copy(update=changes) if row.id == row_id else row for row in self._result.rows)
        self._result = replace(self._result, rows=rows)
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

from __future__ import annotations

from dataclasses import dataclass, replace

from clients.mailria_client_sdk.sorting import SortDirection, SortKey

DEFAULT_PAGE_SIZE = 10


@dataclass(frozen=True)
class QueryState:
    search_term: str = ""
    sort_keys: tuple[SortKey, ...] = ()
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError(f"page must be >= 1, got {self.page}")
        if self.page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {self.page_size}")
        fields = [key.field for key in self.sort_keys]
        if len(fields) != len(set(fields)):
            raise ValueError(f"duplicate sort fields: {fields}")

    def with_search(self, term: str) -> "QueryState":
        return replace(self, search_term=term, page=1)

    def with_page(self, page: int) -> "QueryState":
        return replace(self, page=page)

    def with_sort_toggled(self, field: str, default_direction: SortDirection = SortDirection.DESC) -> "QueryState":
        return replace(self, sort_keys=toggle_sort(self.sort_keys, field, default_direction))

    def direction_of(self, field: str) -> SortDirection | None:
        return next((key.direction for key in self.sort_keys if key.field == field), None)


def toggle_sort(
    keys: tuple[SortKey, ...],
    field: str,
    default_direction: SortDirection = SortDirection.DESC,
) -> tuple[SortKey, ...]:
    """Return ``keys`` with ``field`` promoted to primary.

    A field that is already primary has its direction flipped. Any other field
    moves to the front with its last-used direction (``default_direction`` when
    it was never toggled); the remaining keys keep their relative order and act
    as tie-breakers.
    """
    if keys and keys[0].field == field:
        return (SortKey(field, keys[0].direction.flipped()),) + keys[1:]

    existing = next((key for key in keys if key.field == field), None)
    promoted = existing or SortKey(field, default_direction)
    return (promoted,) + tuple(key for key in keys if key.field != field)

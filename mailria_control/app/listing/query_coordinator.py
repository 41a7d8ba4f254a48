from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic

from clients.mailria_client_sdk.errors import ApiError, RequestCancelled
from clients.mailria_client_sdk.sorting import SortDirection, encode_sort_fields

from mailria_control.app.domain.listing_result import ListingResult, RowT
from mailria_control.app.domain.query_state import QueryState
from mailria_control.app.infrastructure.logging.logger import get_logger
from mailria_control.app.listing.debounce import DebounceTimer

logger = get_logger(__name__)

Loader = Callable[[QueryState], Awaitable[ListingResult[RowT]]]
StateListener = Callable[[QueryState], None]


@dataclass(frozen=True)
class FetchTicket:
    generation: int
    query: QueryState


class QueryCoordinator(Generic[RowT]):
    """Owns the listing query and decides when it turns into a fetch.

    Every state change notifies subscribers synchronously and re-arms the
    shared debounce timer; only the timer's expiry dispatches a fetch. Each
    dispatch takes a new generation number, and a response is applied only
    while its generation and query are still the latest.
    """

    def __init__(
        self,
        loader: Loader,
        *,
        debounce: DebounceTimer,
        state: QueryState | None = None,
        on_loaded: Callable[[ListingResult[RowT]], None] | None = None,
        on_failed: Callable[[ApiError], None] | None = None,
        default_direction: SortDirection = SortDirection.DESC,
    ) -> None:
        self._loader = loader
        self._debounce = debounce
        self._state = state or QueryState()
        self._on_loaded = on_loaded
        self._on_failed = on_failed
        self._default_direction = default_direction
        self._listeners: list[StateListener] = []
        self._generation = 0
        self._tasks: set[asyncio.Task] = set()
        self._disposed = False

    @property
    def state(self) -> QueryState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def set_search_term(self, term: str) -> None:
        self._update(self._state.with_search(term))

    def toggle_sort(self, field: str) -> None:
        self._update(self._state.with_sort_toggled(field, self._default_direction))

    def set_page(self, page: int) -> None:
        self._update(self._state.with_page(page))

    def refresh(self) -> asyncio.Task | None:
        """Fetch the current query now, skipping the debounce window."""
        self._debounce.cancel()
        return self._dispatch()

    def is_current(self, ticket: FetchTicket) -> bool:
        return ticket.generation == self._generation and ticket.query == self._state

    async def wait_idle(self) -> None:
        while self._tasks:
            outcomes = await asyncio.gather(*list(self._tasks), return_exceptions=True)
            for outcome in outcomes:
                if isinstance(outcome, Exception):
                    raise outcome

    def dispose(self) -> None:
        self._disposed = True
        self._debounce.cancel()
        for task in list(self._tasks):
            task.cancel()
        self._listeners.clear()

    def _update(self, state: QueryState) -> None:
        if self._disposed:
            return
        self._state = state
        for listener in list(self._listeners):
            listener(state)
        self._debounce.arm(self._dispatch)

    def _dispatch(self) -> asyncio.Task | None:
        if self._disposed:
            return None
        self._generation += 1
        ticket = FetchTicket(generation=self._generation, query=self._state)
        logger.debug(
            "fetch generation=%s page=%s page_size=%s search=%r sort=%r",
            ticket.generation,
            ticket.query.page,
            ticket.query.page_size,
            ticket.query.search_term,
            encode_sort_fields(ticket.query.sort_keys),
        )
        task = asyncio.get_running_loop().create_task(self._run(ticket))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(self, ticket: FetchTicket) -> None:
        try:
            result = await self._loader(ticket.query)
        except RequestCancelled:
            logger.debug("fetch generation=%s was cancelled", ticket.generation)
            return
        except ApiError as error:
            if not self.is_current(ticket):
                logger.debug("ignoring failure of stale fetch generation=%s", ticket.generation)
                return
            logger.warning("listing fetch failed code=%s status=%s", error.code, error.status_code)
            if self._on_failed:
                self._on_failed(error)
            return

        if not self.is_current(ticket):
            logger.debug("discarding stale response generation=%s current=%s", ticket.generation, self._generation)
            return
        if self._on_loaded:
            self._on_loaded(result)

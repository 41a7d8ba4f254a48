import asyncio

import pytest

from clients.mailria_client_sdk.errors import ApiError, RequestCancelled
from clients.mailria_client_sdk.models import AccountRow
from mailria_control.app.domain.listing_result import ListingResult
from mailria_control.app.domain.query_state import QueryState
from mailria_control.app.listing.query_coordinator import QueryCoordinator


def _result(email: str) -> ListingResult:
    return ListingResult(rows=(AccountRow(id=1, email=email),), total_count=1)


class _GatedLoader:
    """Loader whose responses are released by the test, keyed by search term."""

    def __init__(self) -> None:
        self.gates: dict[str, asyncio.Future] = {}
        self.calls: list[QueryState] = []

    async def __call__(self, query: QueryState) -> ListingResult:
        self.calls.append(query)
        gate = asyncio.get_running_loop().create_future()
        self.gates[query.search_term] = gate
        return await gate


def test_rapid_search_input_issues_one_fetch_with_last_value(clock) -> None:
    async def scenario() -> list[QueryState]:
        calls: list[QueryState] = []

        async def loader(query: QueryState) -> ListingResult:
            calls.append(query)
            return _result(query.search_term)

        coordinator = QueryCoordinator(loader, debounce=clock.timer(500))
        for term in ("a", "al", "ali", "alice"):
            coordinator.set_search_term(term)
            clock.advance(0.2)
        assert coordinator.in_flight == 0

        clock.advance(0.5)
        await coordinator.wait_idle()
        return calls

    calls = asyncio.run(scenario())

    assert [call.search_term for call in calls] == ["alice"]


def test_state_change_notifies_subscribers_synchronously(clock) -> None:
    async def loader(query: QueryState) -> ListingResult:
        return _result("x")

    coordinator = QueryCoordinator(loader, debounce=clock.timer())
    seen: list[QueryState] = []
    unsubscribe = coordinator.subscribe(seen.append)

    coordinator.set_page(3)
    coordinator.toggle_sort("created_at")
    unsubscribe()
    coordinator.set_search_term("bob")

    assert [state.page for state in seen] == [3, 3]
    assert seen[-1].sort_keys[0].field == "created_at"
    assert coordinator.state.page == 1


def test_stale_response_is_discarded(clock) -> None:
    async def scenario() -> list[ListingResult]:
        loader = _GatedLoader()
        loaded: list[ListingResult] = []
        coordinator = QueryCoordinator(loader, debounce=clock.timer(), on_loaded=loaded.append)

        coordinator.set_search_term("al")
        clock.advance(0.5)
        await asyncio.sleep(0)
        coordinator.set_search_term("alice")
        clock.advance(0.5)
        await asyncio.sleep(0)

        loader.gates["alice"].set_result(_result("alice@mailria.com"))
        loader.gates["al"].set_result(_result("al@mailria.com"))
        await coordinator.wait_idle()
        assert coordinator.generation == 2
        return loaded

    loaded = asyncio.run(scenario())

    assert [result.rows[0].email for result in loaded] == ["alice@mailria.com"]


def test_response_for_superseded_state_is_discarded_even_before_next_dispatch(clock) -> None:
    async def scenario() -> list[ListingResult]:
        loader = _GatedLoader()
        loaded: list[ListingResult] = []
        coordinator = QueryCoordinator(loader, debounce=clock.timer(), on_loaded=loaded.append)

        coordinator.set_search_term("al")
        clock.advance(0.5)
        await asyncio.sleep(0)
        # typing continues while the first request is in flight
        coordinator.set_search_term("alice")
        loader.gates["al"].set_result(_result("al@mailria.com"))
        await coordinator.wait_idle()
        coordinator.dispose()
        return loaded

    assert asyncio.run(scenario()) == []


def test_failure_is_reported_once_and_stale_failure_is_ignored(clock) -> None:
    async def scenario() -> list[ApiError]:
        loader = _GatedLoader()
        failures: list[ApiError] = []
        coordinator = QueryCoordinator(loader, debounce=clock.timer(), on_failed=failures.append)

        coordinator.set_search_term("old")
        clock.advance(0.5)
        await asyncio.sleep(0)
        coordinator.set_search_term("new")
        clock.advance(0.5)
        await asyncio.sleep(0)

        loader.gates["old"].set_exception(ApiError(code="SERVER_ERROR", message="old", status_code=500))
        loader.gates["new"].set_exception(ApiError(code="SERVER_ERROR", message="new", status_code=500))
        await coordinator.wait_idle()
        return failures

    failures = asyncio.run(scenario())

    assert [error.message for error in failures] == ["new"]


def test_unexpected_loader_errors_propagate_from_wait_idle() -> None:
    async def scenario() -> None:
        async def loader(query: QueryState) -> ListingResult:
            raise RuntimeError("boom")

        coordinator = QueryCoordinator(loader, debounce=_NeverTimer())
        coordinator.refresh()
        await coordinator.wait_idle()

    with pytest.raises(RuntimeError):
        asyncio.run(scenario())


def test_dispose_clears_timer_and_cancels_in_flight_fetch(clock) -> None:
    async def scenario() -> tuple[bool, list[ListingResult]]:
        loader = _GatedLoader()
        loaded: list[ListingResult] = []
        coordinator = QueryCoordinator(loader, debounce=clock.timer(), on_loaded=loaded.append)

        task = coordinator.refresh()
        await asyncio.sleep(0)
        coordinator.set_page(2)
        coordinator.dispose()
        await asyncio.sleep(0)

        assert clock.armed == 0
        coordinator.set_page(3)
        assert clock.armed == 0
        assert coordinator.refresh() is None
        return task.cancelled(), loaded

    cancelled, loaded = asyncio.run(scenario())

    assert cancelled is True
    assert loaded == []


class _NeverTimer:
    pending = False

    def arm(self, callback) -> None:
        return None

    def cancel(self) -> None:
        return None


def test_cancelled_request_is_never_reported(clock) -> None:
    async def scenario() -> tuple[list[ApiError], list[ListingResult]]:
        async def loader(query: QueryState) -> ListingResult:
            raise RequestCancelled(code="CANCELLED", message="aborted")

        failures: list[ApiError] = []
        loaded: list[ListingResult] = []
        coordinator = QueryCoordinator(loader, debounce=clock.timer(), on_loaded=loaded.append, on_failed=failures.append)
        coordinator.refresh()
        await coordinator.wait_idle()
        return failures, loaded

    assert asyncio.run(scenario()) == ([], [])

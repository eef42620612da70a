"""Tests for the board manager: full refresh, minute tick and lazy enrichment."""

import logging
from datetime import datetime, timedelta

import pytest

from ptv_departures.application.services import (
    BoardManager,
    DepartureEnrichmentService,
    DestinationResolver,
    PatternFetcher,
)
from ptv_departures.domain.errors import TimetableApiError
from ptv_departures.domain.models import BoardSettings, BoardState, Departure
from tests.fakes import (
    ASCOT_VALE,
    FLINDERS_STREET,
    KENSINGTON,
    MOONEE_PONDS,
    NEWMARKET,
    NORTH_MELBOURNE,
    NOW,
    SOUTHERN_CROSS,
    FakeTimetableRepository,
    RecordingBroadcaster,
    make_departures,
    make_network,
    make_pattern,
    make_run,
)


class MovableClock:
    """Clock the test can move forward."""

    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


def _short_run_patterns(run_refs: list[str]) -> dict:
    """Patterns for runs calling at home, Newmarket and Kensington."""
    return {
        ref: make_pattern(
            make_run(ref, KENSINGTON, "Kensington"), [MOONEE_PONDS, NEWMARKET, KENSINGTON]
        )
        for ref in run_refs
    }


def _short_runs(run_refs: list[str]) -> list:
    return [make_run(ref, KENSINGTON, "Kensington") for ref in run_refs]


def _build(
    repository: FakeTimetableRepository,
    clock: MovableClock | None = None,
    settings: BoardSettings | None = None,
) -> tuple[BoardManager, BoardState, RecordingBroadcaster]:
    network = make_network()
    fetcher = PatternFetcher(repository, MOONEE_PONDS)
    resolver = DestinationResolver(network, MOONEE_PONDS, fetcher)
    enrichment = DepartureEnrichmentService(fetcher, resolver)
    state = BoardState()
    broadcaster = RecordingBroadcaster()
    manager = BoardManager(
        repository,
        enrichment,
        state,
        broadcaster,
        network,
        MOONEE_PONDS,
        settings=settings,
        clock=clock or MovableClock(),
    )
    return manager, state, broadcaster


def _assert_invariants(state: BoardState) -> None:
    for platform in state.platform_ids():
        queue = state.queue(platform)
        times = [d.time for d in queue]
        assert times == sorted(times)
        for departure in queue:
            assert (departure.stations is None) == (departure.subtitle is None)
            assert (departure.stations is None) == (departure.dest is None)


@pytest.mark.asyncio
async def test_when_refreshed_then_single_departure_is_enriched() -> None:
    """Given one cityloop service on platform 3, when refreshed, then it stops all to Flinders Street."""
    run = make_run("101", FLINDERS_STREET, "Flinders Street")
    repository = FakeTimetableRepository(
        departures=make_departures([("101", "3", 10)], runs=[run]),
        patterns={
            "101": make_pattern(
                run,
                [
                    MOONEE_PONDS,
                    ASCOT_VALE,
                    NEWMARKET,
                    KENSINGTON,
                    NORTH_MELBOURNE,
                    SOUTHERN_CROSS,
                    FLINDERS_STREET,
                ],
            )
        },
    )
    manager, state, broadcaster = _build(repository)
    assert manager.status == "cold"

    published = await manager.full_refresh()

    assert published is True
    assert manager.status == "ready"
    window = state.window("3")
    assert len(window) == 1
    departure = window[0]
    assert departure.run == "101"
    assert departure.group == "cityloop"
    assert departure.subtitle == "Stops all"
    assert departure.dest == "Flinders Street"
    assert len(departure.stations) == 6
    assert MOONEE_PONDS not in [stop.id for stop in departure.stations]
    assert broadcaster.refreshes == 1
    assert repository.departure_calls == [(MOONEE_PONDS, 0)]


@pytest.mark.asyncio
async def test_when_refreshed_then_only_first_three_per_platform_are_enriched() -> None:
    """Given five services on a platform, when refreshed, then only the first three are enriched."""
    refs = ["1", "2", "3", "4", "5"]
    repository = FakeTimetableRepository(
        departures=make_departures(
            [(ref, "1", 3 * index) for index, ref in enumerate(refs)], runs=_short_runs(refs)
        ),
        patterns=_short_run_patterns(refs),
    )
    manager, state, _ = _build(repository)

    await manager.full_refresh()

    queue = state.queue("1")
    assert [d.is_enriched for d in queue] == [True, True, True, False, False]
    assert sorted(ref for _, ref in repository.pattern_calls) == ["1", "2", "3"]
    _assert_invariants(state)


@pytest.mark.asyncio
async def test_when_refreshed_then_departures_beyond_grace_and_without_platform_dropped() -> None:
    """Given past and platform-less services, when refreshed, then they are left off the board."""
    refs = ["old", "recent", "noplat", "next"]
    repository = FakeTimetableRepository(
        departures=make_departures(
            [("old", "1", -2), ("recent", "1", 0), ("noplat", None, 5), ("next", "1", 6)],
            runs=_short_runs(refs),
        ),
        patterns=_short_run_patterns(refs),
    )
    manager, state, _ = _build(repository)

    await manager.full_refresh()

    assert state.platform_ids() == ["1"]
    assert [d.run for d in state.queue("1")] == ["recent", "next"]


@pytest.mark.asyncio
async def test_when_upstream_order_is_unsorted_then_queue_is_time_ordered() -> None:
    """Given departures out of time order, when refreshed, then each queue is sorted by time."""
    refs = ["late", "early", "middle"]
    repository = FakeTimetableRepository(
        departures=make_departures(
            [("late", "1", 20), ("early", "1", 2), ("middle", "1", 8)], runs=_short_runs(refs)
        ),
        patterns=_short_run_patterns(refs),
    )
    manager, state, _ = _build(repository)

    await manager.full_refresh()

    assert [d.run for d in state.queue("1")] == ["early", "middle", "late"]
    _assert_invariants(state)


@pytest.mark.asyncio
async def test_when_run_listed_twice_on_platform_then_duplicate_removed() -> None:
    """Given the same run twice on a platform, when refreshed, then it is queued once."""
    repository = FakeTimetableRepository(
        departures=make_departures([("7", "1", 2), ("7", "1", 2)], runs=_short_runs(["7"])),
        patterns=_short_run_patterns(["7"]),
    )
    manager, state, _ = _build(repository)

    await manager.full_refresh()

    assert len(state.queue("1")) == 1


@pytest.mark.asyncio
async def test_when_refresh_fails_then_previous_board_is_kept() -> None:
    """Given a published board, when the next refresh fails upstream, then the board is unchanged and clients are not told to reload."""
    refs = ["1", "2"]
    repository = FakeTimetableRepository(
        departures=make_departures([("1", "1", 2), ("2", "1", 5)], runs=_short_runs(refs)),
        patterns=_short_run_patterns(refs),
    )
    manager, state, broadcaster = _build(repository)
    await manager.full_refresh()
    version = state.version

    repository.departures = TimetableApiError("Service unavailable", status_code=503)
    published = await manager.full_refresh()

    assert published is False
    assert state.version == version
    assert [d.run for d in state.queue("1")] == ["1", "2"]
    assert broadcaster.refreshes == 1


@pytest.mark.asyncio
async def test_when_enrichment_fails_during_refresh_then_departure_stays_raw() -> None:
    """Given a pattern fetch failure for one service, when refreshed, then it is published without details."""
    refs = ["1", "2"]
    patterns = _short_run_patterns(refs)
    patterns["2"] = TimetableApiError("Bad gateway", status_code=502)
    repository = FakeTimetableRepository(
        departures=make_departures([("1", "1", 2), ("2", "1", 5)], runs=_short_runs(refs)),
        patterns=patterns,
    )
    manager, state, _ = _build(repository)

    await manager.full_refresh()

    first, second = state.queue("1")
    assert first.is_enriched
    assert second.dest is None
    assert second.stations is None
    assert second.subtitle is None
    _assert_invariants(state)


@pytest.mark.asyncio
async def test_when_head_is_90_seconds_past_then_it_is_removed_silently() -> None:
    """Given a head departure 90 seconds in the past, when the minute ticks, then it is removed without notification."""
    refs = ["1", "2"]
    clock = MovableClock()
    repository = FakeTimetableRepository(
        departures=make_departures([("1", "1", 1), ("2", "1", 10)], runs=_short_runs(refs)),
        patterns=_short_run_patterns(refs),
    )
    manager, state, broadcaster = _build(repository, clock)
    await manager.full_refresh()

    clock.advance(minutes=1, seconds=90)
    tasks = await manager.minute_tick()

    assert tasks == []
    assert [d.run for d in state.queue("1")] == ["2"]
    assert broadcaster.appends == []
    assert broadcaster.refreshes == 1


@pytest.mark.asyncio
async def test_when_head_is_due_then_fourth_departure_is_enriched_and_appended() -> None:
    """Given a due head, when the minute ticks, then the fourth service is enriched and pushed to its platform."""
    refs = ["1", "2", "3", "4", "5"]
    clock = MovableClock()
    repository = FakeTimetableRepository(
        departures=make_departures(
            [(ref, "1", 3 * index) for index, ref in enumerate(refs)], runs=_short_runs(refs)
        ),
        patterns=_short_run_patterns(refs),
    )
    manager, state, broadcaster = _build(repository, clock)
    await manager.full_refresh()
    assert not state.at("1", 3).is_enriched

    tasks = await manager.minute_tick()
    await manager.wait_for_pending()

    assert len(tasks) == 1
    fourth = state.at("1", 3)
    assert fourth.run == "4"
    assert fourth.is_enriched
    assert fourth.subtitle == "Stops all"
    assert broadcaster.appends == [("1", fourth)]
    _assert_invariants(state)


@pytest.mark.asyncio
async def test_when_candidate_already_enriched_then_tick_does_nothing() -> None:
    """Given an enriched candidate, when the minute ticks again, then it is not fetched a second time."""
    refs = ["1", "2", "3", "4"]
    repository = FakeTimetableRepository(
        departures=make_departures(
            [(ref, "1", index) for index, ref in enumerate(refs)], runs=_short_runs(refs)
        ),
        patterns=_short_run_patterns(refs),
    )
    manager, _, broadcaster = _build(repository)
    await manager.full_refresh()
    await manager.minute_tick()
    await manager.wait_for_pending()
    calls = len(repository.pattern_calls)

    tasks = await manager.minute_tick()

    assert tasks == []
    assert len(repository.pattern_calls) == calls
    assert len(broadcaster.appends) == 1


@pytest.mark.asyncio
async def test_when_enrichment_in_flight_then_second_tick_does_not_duplicate_it() -> None:
    """Given an enrichment still running, when the minute ticks again, then no second fetch starts."""
    refs = ["1", "2", "3", "4"]
    repository = FakeTimetableRepository(
        departures=make_departures(
            [(ref, "1", index) for index, ref in enumerate(refs)], runs=_short_runs(refs)
        ),
        patterns=_short_run_patterns(refs),
    )
    manager, _, broadcaster = _build(repository)
    await manager.full_refresh()

    first = await manager.minute_tick()
    second = await manager.minute_tick()
    await manager.wait_for_pending()

    assert len(first) == 1
    assert second == []
    assert len(broadcaster.appends) == 1


@pytest.mark.asyncio
async def test_when_tick_enrichment_fails_then_departure_stays_raw_and_is_retried() -> None:
    """Given a failing pattern fetch, when the minute ticks, then the service stays raw and the next tick retries."""
    refs = ["1", "2", "3", "4"]
    patterns = _short_run_patterns(refs)
    working_pattern = patterns["4"]
    patterns["4"] = TimetableApiError("Gateway timeout", status_code=504)
    repository = FakeTimetableRepository(
        departures=make_departures(
            [(ref, "1", index) for index, ref in enumerate(refs)], runs=_short_runs(refs)
        ),
        patterns=patterns,
    )
    manager, state, broadcaster = _build(repository)
    await manager.full_refresh()

    await manager.minute_tick()
    await manager.wait_for_pending()

    assert not state.at("1", 3).is_enriched
    assert broadcaster.appends == []

    patterns["4"] = working_pattern
    tasks = await manager.minute_tick()
    await manager.wait_for_pending()

    assert len(tasks) == 1
    assert state.at("1", 3).is_enriched
    assert len(broadcaster.appends) == 1


@pytest.mark.asyncio
async def test_when_fewer_than_four_remain_then_last_departure_is_enriched() -> None:
    """Given three queued services and one enriched at refresh, when the minute ticks, then the last one is enriched."""
    refs = ["1", "2", "3"]
    repository = FakeTimetableRepository(
        departures=make_departures(
            [(ref, "1", index) for index, ref in enumerate(refs)], runs=_short_runs(refs)
        ),
        patterns=_short_run_patterns(refs),
    )
    manager, state, broadcaster = _build(
        repository, settings=BoardSettings(initial_enrich_count=1)
    )
    await manager.full_refresh()

    await manager.minute_tick()
    await manager.wait_for_pending()

    assert state.at("1", 2).is_enriched
    assert not state.at("1", 1).is_enriched
    assert [platform for platform, _ in broadcaster.appends] == ["1"]


@pytest.mark.asyncio
async def test_when_head_is_in_future_then_tick_leaves_queue_alone() -> None:
    """Given a head departing later, when the minute ticks, then nothing is removed or fetched."""
    refs = ["1", "2", "3", "4"]
    repository = FakeTimetableRepository(
        departures=make_departures(
            [(ref, "1", 5 + index) for index, ref in enumerate(refs)], runs=_short_runs(refs)
        ),
        patterns=_short_run_patterns(refs),
    )
    manager, state, _ = _build(repository)
    await manager.full_refresh()

    tasks = await manager.minute_tick()

    assert tasks == []
    assert len(state.queue("1")) == 4


@pytest.mark.asyncio
async def test_when_only_head_remains_then_tick_does_not_enrich() -> None:
    """Given a single queued service, when it is due, then the tick has nothing to enrich."""
    repository = FakeTimetableRepository(
        departures=make_departures([("1", "1", 0)], runs=_short_runs(["1"])),
        patterns=_short_run_patterns(["1"]),
    )
    manager, _, _ = _build(repository)
    await manager.full_refresh()

    tasks = await manager.minute_tick()

    assert tasks == []


@pytest.mark.asyncio
async def test_when_platforms_tick_together_then_each_gets_its_own_append() -> None:
    """Given due heads on two platforms, when the minute ticks, then each platform is notified separately."""
    refs = ["a1", "a2", "a3", "a4", "b1", "b2", "b3", "b4"]
    entries = [(ref, "1" if ref.startswith("a") else "2", int(ref[1]) - 1) for ref in refs]
    repository = FakeTimetableRepository(
        departures=make_departures(entries, runs=_short_runs(refs)),
        patterns=_short_run_patterns(refs),
    )
    manager, state, broadcaster = _build(repository)
    await manager.full_refresh()

    tasks = await manager.minute_tick()
    await manager.wait_for_pending()

    assert len(tasks) == 2
    assert sorted(platform for platform, _ in broadcaster.appends) == ["1", "2"]
    assert state.at("1", 3).is_enriched
    assert state.at("2", 3).is_enriched


@pytest.mark.asyncio
async def test_when_enrichment_finishes_after_refresh_replaced_board_then_not_applied() -> None:
    """Given a tick enrichment outliving its departure, when it completes, then no notification is sent."""
    refs = ["1", "2", "3", "4"]
    repository = FakeTimetableRepository(
        departures=make_departures(
            [(ref, "1", index) for index, ref in enumerate(refs)], runs=_short_runs(refs)
        ),
        patterns=_short_run_patterns(refs),
    )
    manager, state, broadcaster = _build(repository)
    await manager.full_refresh()

    await manager.minute_tick()
    state.publish({"1": [Departure(type=0, run="9", time=NOW, group="special", platform="1")]})
    await manager.wait_for_pending()

    assert broadcaster.appends == []
    assert [d.run for d in state.queue("1")] == ["9"]


@pytest.mark.asyncio
async def test_when_board_republished_with_same_run_then_stale_details_are_dropped() -> None:
    """Given a tick enrichment started on the old board, when a new board holding the same run is published first, then its result is discarded."""
    refs = ["1", "2", "3", "4"]
    repository = FakeTimetableRepository(
        departures=make_departures(
            [(ref, "1", index) for index, ref in enumerate(refs)], runs=_short_runs(refs)
        ),
        patterns=_short_run_patterns(refs),
    )
    manager, state, broadcaster = _build(repository)
    await manager.full_refresh()
    candidate = state.at("1", 3)

    tasks = await manager.minute_tick()
    state.publish({"1": [candidate]})
    await manager.wait_for_pending()

    assert len(tasks) == 1
    assert broadcaster.appends == []
    assert state.at("1", 0).is_enriched is False


@pytest.mark.asyncio
async def test_when_refresh_fails_then_reason_and_status_are_logged(
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Given an upstream 503, when refreshing, then the log names the reason and the status code."""
    repository = FakeTimetableRepository(
        departures=TimetableApiError("Got response (503)", status_code=503)
    )
    manager, _, _ = _build(repository)

    with caplog.at_level(logging.ERROR):
        await manager.full_refresh()

    assert "Service unavailable (status: 503" in caplog.text


@pytest.mark.asyncio
async def test_when_stopped_then_pending_enrichments_are_cancelled() -> None:
    """Given a running enrichment, when the manager stops, then nothing is left pending."""
    refs = ["1", "2", "3", "4"]
    repository = FakeTimetableRepository(
        departures=make_departures(
            [(ref, "1", index) for index, ref in enumerate(refs)], runs=_short_runs(refs)
        ),
        patterns=_short_run_patterns(refs),
    )
    manager, _, broadcaster = _build(repository)
    await manager.full_refresh()
    await manager.minute_tick()

    await manager.stop()

    assert broadcaster.appends == []

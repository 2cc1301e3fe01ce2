from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor

import pytest

from fleetview.dashboards import decode_trip
from fleetview.domain.errors import FetchError
from fleetview.sources.memory import InMemorySource
from fleetview.store import RecordStore

EXPECTED_GOOD_RECORDS = 2


def _store(source: InMemorySource) -> RecordStore:
    return RecordStore(source, "trips", decode_trip)


@pytest.mark.asyncio
async def test_load_installs_snapshot_in_fetch_order(memory_source: InMemorySource):
    store = _store(memory_source)

    result = await store.load()

    assert result.ok
    assert [trip.id for trip in store.current_snapshot()] == ["1", "2"]
    assert result.snapshot == store.current_snapshot()
    assert result.fetched == EXPECTED_GOOD_RECORDS
    assert store.loads_completed == 1
    assert store.last_loaded_at is not None


@pytest.mark.asyncio
async def test_malformed_document_is_skipped_not_fatal(trip_documents: list[dict]):
    broken = {"id": 3, "TripStatus": "scheduled", "startLocation": "Goa", "tripDate": "not a date"}
    store = _store(InMemorySource({"trips": [*trip_documents, broken]}))

    result = await store.load()

    assert result.ok
    assert len(store.current_snapshot()) == EXPECTED_GOOD_RECORDS
    assert result.skipped == 1
    assert store.skipped_total == 1


@pytest.mark.asyncio
async def test_duplicate_ids_keep_first_occurrence(trip_documents: list[dict]):
    duplicate = dict(trip_documents[0], startLocation="Elsewhere")
    store = _store(InMemorySource({"trips": [*trip_documents, duplicate]}))

    result = await store.load()

    assert [trip.id for trip in store.current_snapshot()] == ["1", "2"]
    assert store.current_snapshot()[0].start_location == "Delhi"
    assert result.skipped == 1


@pytest.mark.asyncio
async def test_fetch_error_keeps_last_good_snapshot(memory_source: InMemorySource):
    store = _store(memory_source)
    await store.load()
    before = store.current_snapshot()

    memory_source.fail_next("trips")
    result = await store.load()

    assert not result.ok
    assert isinstance(result.error, FetchError)
    assert result.snapshot is before
    assert store.current_snapshot() is before
    assert store.last_error is result.error
    assert store.loads_completed == 1


@pytest.mark.asyncio
async def test_unexpected_source_exception_is_reported_as_fetch_error(memory_source: InMemorySource):
    store = _store(memory_source)
    memory_source.fail_next("trips", RuntimeError("socket closed"))

    result = await store.load()

    assert isinstance(result.error, FetchError)
    assert "socket closed" in str(result.error)
    assert store.current_snapshot() == ()


@pytest.mark.asyncio
async def test_refresh_replaces_snapshot_wholesale(memory_source: InMemorySource, trip_documents):
    store = _store(memory_source)
    await store.load()

    memory_source.put("trips", trip_documents[1:])
    await store.load()

    assert [trip.id for trip in store.current_snapshot()] == ["2"]


@pytest.mark.asyncio
async def test_listeners_receive_new_snapshots_until_unsubscribed(memory_source: InMemorySource):
    store = _store(memory_source)
    seen: list[tuple] = []
    unsubscribe = store.subscribe(seen.append)

    await store.load()
    unsubscribe()
    await store.load()

    assert len(seen) == 1
    assert [trip.id for trip in seen[0]] == ["1", "2"]


@pytest.mark.asyncio
async def test_failing_listener_does_not_block_others(memory_source: InMemorySource):
    store = _store(memory_source)
    seen: list[tuple] = []

    def _broken(snapshot: tuple) -> None:
        raise ValueError("listener bug")

    store.subscribe(_broken)
    store.subscribe(seen.append)

    result = await store.load()

    assert result.ok
    assert len(seen) == 1


@pytest.mark.asyncio
async def test_no_listener_call_on_failed_load(memory_source: InMemorySource):
    store = _store(memory_source)
    seen: list[tuple] = []
    store.subscribe(seen.append)

    memory_source.fail_next("trips")
    await store.load()

    assert seen == []


def test_counters_stay_exact_when_loads_run_on_several_threads(trip_documents: list[dict]):
    broken = {"id": 3, "TripStatus": "scheduled", "startLocation": "Goa", "tripDate": "not a date"}
    source = InMemorySource({"trips": [*trip_documents, broken]})
    store = _store(source)
    loads_per_thread = 25

    def run_loads() -> None:
        async def loads() -> None:
            for _ in range(loads_per_thread):
                await store.load()

        asyncio.run(loads())

    with ThreadPoolExecutor(max_workers=4) as pool:
        for future in [pool.submit(run_loads) for _ in range(4)]:
            future.result()

    assert store.loads_completed == 4 * loads_per_thread
    assert store.skipped_total == 4 * loads_per_thread
    assert store.last_error is None

    source.fail_next("trips")
    result = asyncio.run(store.load())

    assert store.last_error is result.error

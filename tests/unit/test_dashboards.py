from __future__ import annotations

from datetime import datetime

import pytest
from pydantic import ValidationError

from fleetview.dashboards import decode_driver, decode_trip, driver_list
from fleetview.domain.errors import DecodeError
from fleetview.domain.models import TripStatus, UserRole
from fleetview.sources.abstract import Predicate
from fleetview.sources.memory import InMemorySource


def test_decode_trip_reads_stored_keys(trip_documents: list[dict]):
    trip = decode_trip(trip_documents[0])

    assert trip.id == "1"
    assert trip.trip_status is TripStatus.SCHEDULED
    assert trip.start_location == "Delhi"
    assert trip.end_location == "Pune"
    assert trip.trip_date == datetime(2025, 6, 12, 9, 30)


def test_decode_trip_accepts_negative_distance(trip_documents: list[dict]):
    trip = decode_trip(dict(trip_documents[0], distanceKm=-5))

    assert trip.distance_km == -5


def test_decode_trip_keeps_unknown_status_raw(trip_documents: list[dict]):
    trip = decode_trip(dict(trip_documents[0], TripStatus="cancelled"))

    assert trip.status == "cancelled"
    assert trip.trip_status is None


def test_decoded_records_are_immutable(trip_documents: list[dict]):
    trip = decode_trip(trip_documents[0])

    with pytest.raises(ValidationError):
        trip.start_location = "Goa"


@pytest.mark.parametrize(
    "document",
    [
        {"id": "x", "TripStatus": "scheduled", "startLocation": "Delhi"},
        {"id": "x", "TripStatus": "scheduled", "startLocation": "A", "endLocation": "B", "tripDate": "soon"},
        {"id": "", "TripStatus": "scheduled", "startLocation": "A", "endLocation": "B", "tripDate": "2025-01-01"},
    ],
)
def test_decode_trip_rejects_malformed_documents(document: dict):
    with pytest.raises(DecodeError):
        decode_trip(document)


def test_decode_driver_requires_an_id(user_documents: list[dict]):
    with pytest.raises(DecodeError) as excinfo:
        decode_driver(user_documents[3])

    assert excinfo.value.doc_id is None


@pytest.mark.asyncio
async def test_driver_list_filters_by_role_at_source(
    memory_source: InMemorySource, test_settings
):
    view = driver_list(memory_source, settings=test_settings)

    result = await view.refresh()

    assert memory_source.fetch_calls[-1] == ("users", Predicate("role", "Driver"))
    assert [driver.id for driver in view.current_snapshot()] == ["u1", "u3"]
    assert result.skipped == 1
    assert view.aggregate_counts()[UserRole.DRIVER] == 2
    assert view.aggregate_counts()[UserRole.FLEET_MANAGER] == 0


@pytest.mark.asyncio
async def test_driver_search_covers_name_email_and_phone(
    memory_source: InMemorySource, test_settings
):
    view = driver_list(memory_source, settings=test_settings)
    await view.refresh()

    assert [d.id for d in view.filtered("kabir")] == ["u3"]
    assert [d.id for d in view.filtered("MEERA@")] == ["u1"]
    assert [d.id for d in view.filtered("33333")] == ["u3"]
    assert view.filtered("rohan") == ()

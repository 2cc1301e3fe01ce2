"""
Concrete views for the fleet manager screens.

- Trip dashboard: every trip, counted by TripStatus, searchable by start
  location, end location, and trip date ("12 Jun").
- Driver list: users whose role is Driver (filtered at the source), counted
  by role, searchable by name, email, and phone.
"""

from __future__ import annotations

from typing import Optional, Tuple

from pydantic import ValidationError

from fleetview.config import Settings, get_settings
from fleetview.domain.errors import DecodeError
from fleetview.domain.models import Driver, Trip, TripStatus, UserRole
from fleetview.filtering import FieldExtractor, format_search_date
from fleetview.narration import Narrator, compose_driver_overview, compose_trip_overview
from fleetview.sources.abstract import Predicate, RawDocument, RecordSource
from fleetview.store import RecordStore
from fleetview.view import FilteredAggregationView

TRIP_SEARCH_FIELDS: Tuple[FieldExtractor, ...] = (
    lambda trip: trip.start_location,
    lambda trip: trip.end_location,
    lambda trip: format_search_date(trip.trip_date),
)

DRIVER_SEARCH_FIELDS: Tuple[FieldExtractor, ...] = (
    lambda driver: driver.name,
    lambda driver: driver.email,
    lambda driver: driver.phone,
)


def _doc_id(raw: RawDocument) -> Optional[str]:
    value = raw.get("id") if isinstance(raw, dict) else None
    return str(value) if value is not None else None


def decode_trip(raw: RawDocument) -> Trip:
    """Validate one trip document, raising DecodeError if it is malformed."""
    try:
        return Trip.model_validate(raw)
    except ValidationError as exc:
        raise DecodeError(_doc_id(raw), f"{exc.error_count()} validation error(s)") from exc


def decode_driver(raw: RawDocument) -> Driver:
    """Validate one user document; users without an id are rejected."""
    if not _doc_id(raw):
        raise DecodeError(None, "missing document id")
    try:
        return Driver.model_validate(raw)
    except ValidationError as exc:
        raise DecodeError(_doc_id(raw), f"{exc.error_count()} validation error(s)") from exc


def trip_dashboard(
    source: RecordSource,
    settings: Optional[Settings] = None,
    narrator: Optional[Narrator] = None,
) -> FilteredAggregationView[Trip]:
    settings = settings or get_settings()
    store: RecordStore[Trip] = RecordStore(source, settings.trips_collection, decode_trip)
    return FilteredAggregationView(
        store,
        TripStatus,
        TRIP_SEARCH_FIELDS,
        narrator=narrator,
        overview=compose_trip_overview,
        narration_enabled=settings.narration_enabled,
    )


def driver_list(
    source: RecordSource,
    settings: Optional[Settings] = None,
    narrator: Optional[Narrator] = None,
) -> FilteredAggregationView[Driver]:
    settings = settings or get_settings()
    store: RecordStore[Driver] = RecordStore(
        source,
        settings.users_collection,
        decode_driver,
        predicate=Predicate("role", settings.driver_role),
    )
    return FilteredAggregationView(
        store,
        UserRole,
        DRIVER_SEARCH_FIELDS,
        narrator=narrator,
        overview=compose_driver_overview,
        narration_enabled=settings.narration_enabled,
    )


__all__ = [
    "DRIVER_SEARCH_FIELDS",
    "TRIP_SEARCH_FIELDS",
    "decode_driver",
    "decode_trip",
    "driver_list",
    "trip_dashboard",
]

"""
Domain package for fleetview.

Exports the record types, status enumerations, and error taxonomy shared by
the store, aggregator, filter engine, and dashboards.
"""

from fleetview.domain.errors import DecodeError, FetchError, FleetViewError, NotFoundError
from fleetview.domain.models import (
    AggregateCounts,
    Driver,
    Record,
    Snapshot,
    Trip,
    TripStatus,
    UserRole,
)

__all__ = [
    "AggregateCounts",
    "DecodeError",
    "Driver",
    "FetchError",
    "FleetViewError",
    "NotFoundError",
    "Record",
    "Snapshot",
    "Trip",
    "TripStatus",
    "UserRole",
]

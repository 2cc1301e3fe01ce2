"""
Domain models for fleetview.

Defines the trip and driver record schemas as they are stored in the document
database (camelCase keys, exposed through aliases), the status enumerations
the dashboards aggregate over, and the derived AggregateCounts mapping.
"""
from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from typing import Dict, Iterator, Optional, Protocol, Tuple, TypeVar, runtime_checkable

from pydantic import BaseModel, Field

_RECORD_CONFIG = {
    "frozen": True,
    "populate_by_name": True,
    "coerce_numbers_to_str": True,
    "extra": "ignore",
}


class TripStatus(str, Enum):
    """Lifecycle states of a trip, stored under the `TripStatus` key."""

    INPROGRESS = "inprogress"
    COMPLETED = "completed"
    SCHEDULED = "scheduled"

    @property
    def label(self) -> str:
        return _TRIP_STATUS_LABELS[self]


_TRIP_STATUS_LABELS = {
    TripStatus.INPROGRESS: "Active",
    TripStatus.COMPLETED: "Completed",
    TripStatus.SCHEDULED: "Unassigned",
}


class UserRole(str, Enum):
    FLEET_MANAGER = "Fleet Manager"
    DRIVER = "Driver"
    MAINTENANCE = "Maintenance Personnel"


@runtime_checkable
class Record(Protocol):
    """Anything the store can hold: a unique id and a status value."""

    id: str

    @property
    def status(self) -> str: ...


class Trip(BaseModel):
    """
    A single trip document from the `trips` collection.
    """

    id: str = Field(..., min_length=1, description="Document identifier.")
    status: str = Field(..., alias="TripStatus", description="Raw TripStatus value.")
    start_location: str = Field(..., alias="startLocation")
    end_location: str = Field(..., alias="endLocation")
    trip_date: datetime = Field(..., alias="tripDate")
    vehicle_id: Optional[str] = Field(None, alias="vehicleId")
    driver_id: Optional[str] = Field(None, alias="driverId")
    distance_km: Optional[float] = Field(None, alias="distanceKm")

    model_config = _RECORD_CONFIG

    @property
    def trip_status(self) -> Optional[TripStatus]:
        """The status as a TripStatus, or None when the stored value is unknown."""
        try:
            return TripStatus(self.status)
        except ValueError:
            return None


class Driver(BaseModel):
    """
    A user document from the `users` collection; the role doubles as status.
    """

    id: str = Field(..., min_length=1)
    name: str
    email: str
    phone: str
    role: str

    model_config = _RECORD_CONFIG

    @property
    def status(self) -> str:
        return self.role


R = TypeVar("R", bound=Record)

Snapshot = Tuple[R, ...]


class AggregateCounts(Mapping):
    """
    Read-only mapping of status value to count, derived from one snapshot.

    Only known statuses are keys. Records whose status is not part of the
    enumeration are reported through `unrecognized` and never counted in a
    bucket, so `sum(values()) + unrecognized == total`.
    """

    __slots__ = ("_counts", "total", "unrecognized")

    def __init__(self, counts: Dict[str, int], total: int, unrecognized: int = 0) -> None:
        self._counts = dict(counts)
        self.total = total
        self.unrecognized = unrecognized

    def __getitem__(self, status: str) -> int:
        return self._counts[str(status.value if isinstance(status, Enum) else status)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._counts)

    def __len__(self) -> int:
        return len(self._counts)

    def as_dict(self) -> Dict[str, int]:
        return dict(self._counts)

    def __repr__(self) -> str:
        return (
            f"AggregateCounts({self._counts!r}, total={self.total}, "
            f"unrecognized={self.unrecognized})"
        )


__all__ = [
    "AggregateCounts",
    "Driver",
    "Record",
    "Snapshot",
    "Trip",
    "TripStatus",
    "UserRole",
]

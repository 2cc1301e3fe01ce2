"""
fleetview - Live filtered aggregation views for a fleet manager dashboard.

This package keeps a snapshot of a document collection (trips, drivers) in
memory and derives what the dashboard screens show from it:

- Per-status counts computed in one pass over one snapshot
- Free-text filtering across locations, names, and a fixed-format date
- Fire-and-forget reloads where the last completed load wins
- Recoverable failures: fetch errors keep the last good snapshot, malformed
  documents are skipped one by one
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from fleetview.aggregator import compute
from fleetview.config import Settings, get_settings
from fleetview.dashboards import driver_list, trip_dashboard
from fleetview.domain import (
    AggregateCounts,
    DecodeError,
    Driver,
    FetchError,
    FleetViewError,
    Trip,
    TripStatus,
    UserRole,
)
from fleetview.filtering import apply, format_search_date
from fleetview.narration import LoggingNarrator, Narrator
from fleetview.store import LoadResult, RecordStore
from fleetview.utils.logging import configure_logging, get_logger
from fleetview.view import FilteredAggregationView

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Core
    "FilteredAggregationView",
    "LoadResult",
    "RecordStore",
    "apply",
    "compute",
    "format_search_date",
    # Dashboards
    "driver_list",
    "trip_dashboard",
    # Domain
    "AggregateCounts",
    "Driver",
    "Trip",
    "TripStatus",
    "UserRole",
    # Errors
    "DecodeError",
    "FetchError",
    "FleetViewError",
    # Narration
    "LoggingNarrator",
    "Narrator",
    # Logging
    "configure_logging",
    "get_logger",
]

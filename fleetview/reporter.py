from __future__ import annotations

from typing import Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table

from fleetview.domain.models import AggregateCounts, Driver, Trip, TripStatus
from fleetview.filtering import format_search_date

_STATUS_STYLES = {
    TripStatus.INPROGRESS: "green",
    TripStatus.COMPLETED: "blue",
    TripStatus.SCHEDULED: "dark_orange",
}


def _status_cell(trip: Trip) -> str:
    status = trip.trip_status
    if status is None:
        return f"[dim]{trip.status}[/dim]"
    return f"[{_STATUS_STYLES[status]}]{status.label}[/{_STATUS_STYLES[status]}]"


def print_trip_stats(counts: AggregateCounts, console: Optional[Console] = None) -> None:
    """
    Render the Active / Completed / Unassigned cards as a one-row table.
    """
    console = console or Console()
    table = Table(box=box.ROUNDED, title="Trips", caption=f"Total: {counts.total}")
    for status in (TripStatus.INPROGRESS, TripStatus.COMPLETED, TripStatus.SCHEDULED):
        table.add_column(status.label, justify="center", style=_STATUS_STYLES[status])
    table.add_row(
        str(counts[TripStatus.INPROGRESS]),
        str(counts[TripStatus.COMPLETED]),
        str(counts[TripStatus.SCHEDULED]),
    )
    console.print(table)
    if counts.unrecognized:
        console.print(f"[yellow]{counts.unrecognized} trip(s) with an unknown status.[/yellow]")


def print_trips(
    trips: Sequence[Trip], query: str = "", console: Optional[Console] = None
) -> None:
    """
    Render trips in snapshot order, matching the dashboard's trip cards.
    """
    console = console or Console()

    if not trips:
        suffix = f" matching '{query}'" if query else ""
        console.print(f"[yellow]No trips{suffix}.[/yellow]")
        return

    table = Table(
        title="Scheduled Trips",
        box=box.ROUNDED,
        caption=f"Filter: '{query}'" if query else None,
    )
    table.add_column("Trip", style="cyan", no_wrap=True)
    table.add_column("From")
    table.add_column("To")
    table.add_column("Date", justify="right", style="magenta")
    table.add_column("Status", justify="center")

    for trip in trips:
        table.add_row(
            trip.id,
            trip.start_location,
            trip.end_location,
            format_search_date(trip.trip_date),
            _status_cell(trip),
        )

    console.print(table)


def print_drivers(
    drivers: Sequence[Driver], query: str = "", console: Optional[Console] = None
) -> None:
    """
    Render the driver list.
    """
    console = console or Console()

    if not drivers:
        suffix = f" matching '{query}'" if query else ""
        console.print(f"[yellow]No drivers{suffix}.[/yellow]")
        return

    table = Table(
        title="Drivers",
        box=box.ROUNDED,
        caption=f"Filter: '{query}'" if query else None,
    )
    table.add_column("Name", style="bold")
    table.add_column("Email")
    table.add_column("Phone", no_wrap=True)
    table.add_column("Role", style="cyan")

    for driver in drivers:
        table.add_row(driver.name, driver.email, driver.phone, driver.role)

    console.print(table)


__all__ = ["print_drivers", "print_trip_stats", "print_trips"]

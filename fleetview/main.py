from __future__ import annotations

import asyncio
import sys
from typing import Optional

import typer
from rich.console import Console

from fleetview.config import Settings, get_settings
from fleetview.dashboards import driver_list, trip_dashboard
from fleetview.infrastructure.db_factory import PoolManager
from fleetview.narration import LoggingNarrator
from fleetview.reporter import print_drivers, print_trip_stats, print_trips
from fleetview.sample_data import generate_trips, generate_users
from fleetview.sources import InMemorySource, PostgresDocumentSource
from fleetview.sources.abstract import AbstractRecordSource
from fleetview.utils.logging import configure_logging

app = typer.Typer(help="Fleet manager dashboards: trips and drivers.")

QUERY_OPTION = typer.Option("", "--query", "-q", help="Free-text filter (location, date like '12 Jun', name...).")
DEMO_OPTION = typer.Option(False, "--demo", help="Use generated in-memory data instead of Postgres.")
NARRATE_OPTION = typer.Option(
    None, "--narrate/--no-narrate", help="Print the spoken overview (default from NARRATION_ENABLED)."
)


def _build_source(settings: Settings, demo: bool) -> AbstractRecordSource:
    if demo:
        return InMemorySource(
            {
                settings.trips_collection: generate_trips(25),
                settings.users_collection: generate_users(8, others=2),
            }
        )
    return PostgresDocumentSource()


async def _close(source: AbstractRecordSource) -> None:
    await source.close()
    await PoolManager().aclose_all()


def _setup(narrate: Optional[bool]) -> Settings:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    if narrate is not None:
        settings = settings.model_copy(update={"narration_enabled": narrate})
    return settings


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"DB={settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name} | "
        f"trips={settings.trips_collection} users={settings.users_collection} "
        f"driver_role={settings.driver_role} tz={settings.display_timezone} "
        f"narration={'on' if settings.narration_enabled else 'off'}"
    )


@app.command()
def trips(
    query: str = QUERY_OPTION,
    demo: bool = DEMO_OPTION,
    narrate: Optional[bool] = NARRATE_OPTION,
) -> None:
    """
    Show trip counts by status and the trips matching a query.
    """
    settings = _setup(narrate)
    console = Console()

    async def _run() -> int:
        source = _build_source(settings, demo)
        narrator = LoggingNarrator()
        view = trip_dashboard(source, settings=settings, narrator=narrator)
        try:
            result = await view.on_appear()
        finally:
            await _close(source)
        if not result.ok:
            console.print(f"[red]Could not load trips: {result.error}[/red]")
            return 1
        print_trip_stats(view.aggregate_counts(), console=console)
        print_trips(view.filtered(query), query=query, console=console)
        if narrator.transcript:
            console.print(narrator.transcript[-1], style="italic dim")
        return 0

    code = asyncio.run(_run())
    if code:
        raise typer.Exit(code=code)


@app.command()
def drivers(
    query: str = QUERY_OPTION,
    demo: bool = DEMO_OPTION,
    narrate: Optional[bool] = NARRATE_OPTION,
) -> None:
    """
    List drivers, optionally filtered by name, email, or phone.
    """
    settings = _setup(narrate)
    console = Console()

    async def _run() -> int:
        source = _build_source(settings, demo)
        narrator = LoggingNarrator()
        view = driver_list(source, settings=settings, narrator=narrator)
        try:
            result = await view.on_appear()
        finally:
            await _close(source)
        if not result.ok:
            console.print(f"[red]Could not load drivers: {result.error}[/red]")
            return 1
        print_drivers(view.filtered(query), query=query, console=console)
        if narrator.transcript:
            console.print(narrator.transcript[-1], style="italic dim")
        return 0

    code = asyncio.run(_run())
    if code:
        raise typer.Exit(code=code)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()

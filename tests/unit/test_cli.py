from __future__ import annotations

import pytest
from typer.testing import CliRunner

from fleetview import main as cli

runner = CliRunner()


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch):
    monkeypatch.setattr(cli, "configure_logging", lambda **kwargs: None)


def test_info_shows_collections():
    result = runner.invoke(cli.app, ["info"])

    assert result.exit_code == 0
    assert "trips=trips" in result.output
    assert "users=users" in result.output


def test_trips_demo_renders_stats_and_table():
    result = runner.invoke(cli.app, ["trips", "--demo", "--no-narrate"])

    assert result.exit_code == 0
    assert "Active" in result.output
    assert "Unassigned" in result.output
    assert "Scheduled Trips" in result.output


def test_trips_demo_with_unmatched_query():
    result = runner.invoke(cli.app, ["trips", "--demo", "--no-narrate", "-q", "atlantis"])

    assert result.exit_code == 0
    assert "No trips matching 'atlantis'" in result.output


def test_trips_demo_narrates_overview():
    result = runner.invoke(cli.app, ["trips", "--demo", "--narrate"])

    assert result.exit_code == 0
    assert "You have a total of 25 trips." in result.output


def test_drivers_demo_lists_only_drivers():
    result = runner.invoke(cli.app, ["drivers", "--demo", "--no-narrate"])

    assert result.exit_code == 0
    assert "Drivers" in result.output
    assert "Fleet Manager" not in result.output


def test_load_failure_exits_non_zero(monkeypatch):
    from fleetview.sources.memory import InMemorySource

    def _failing_source(settings, demo):
        source = InMemorySource({})
        source.fail_next(settings.trips_collection)
        return source

    monkeypatch.setattr(cli, "_build_source", _failing_source)

    result = runner.invoke(cli.app, ["trips", "--no-narrate"])

    assert result.exit_code == 1
    assert "Could not load trips" in result.output

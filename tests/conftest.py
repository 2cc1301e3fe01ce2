"""
Pytest configuration for fleetview.

Provides fixtures for:
- Sample trip/user documents and in-memory sources
- Database connection management and seeding for integration tests
- Settings override for tests
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Generator

import psycopg
import pytest

from fleetview.config import Settings
from fleetview.infrastructure.db_factory import DOCUMENTS_TABLE_DDL
from fleetview.sources.memory import InMemorySource

SEEDED_TRIPS = 40
SEEDED_DRIVERS = 6
SEEDED_OTHERS = 3


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "fleet_manager"),
        log_level="DEBUG",
        display_timezone="UTC",
        narration_enabled=False,
    )


@pytest.fixture
def trip_documents() -> list[dict]:
    """The two-trip dashboard example: one scheduled, one completed."""
    return [
        {
            "id": 1,
            "TripStatus": "scheduled",
            "startLocation": "Delhi",
            "endLocation": "Pune",
            "tripDate": "2025-06-12T09:30:00",
        },
        {
            "id": 2,
            "TripStatus": "completed",
            "startLocation": "Agra",
            "endLocation": "Jaipur",
            "tripDate": "2025-01-03T14:00:00",
        },
    ]


@pytest.fixture
def user_documents() -> list[dict]:
    return [
        {"id": "u1", "name": "Meera Iyer", "email": "meera@fleet.example", "phone": "+91 90000 11111", "role": "Driver"},
        {"id": "u2", "name": "Rohan Das", "email": "rohan@fleet.example", "phone": "+91 90000 22222", "role": "Fleet Manager"},
        {"id": "u3", "name": "Kabir Khan", "email": "kabir@fleet.example", "phone": "+91 90000 33333", "role": "Driver"},
        {"name": "No Id", "email": "noid@fleet.example", "phone": "+91 90000 44444", "role": "Driver"},
    ]


@pytest.fixture
def memory_source(trip_documents: list[dict], user_documents: list[dict]) -> InMemorySource:
    return InMemorySource({"trips": trip_documents, "users": user_documents})


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    """
    Database connection string for tests.
    """
    return (
        f"postgresql://{test_settings.db_user}:{test_settings.db_password}"
        f"@{test_settings.db_host}:{test_settings.db_port}/{test_settings.db_name}"
    )


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except Exception:
        return False


@pytest.fixture(scope="session")
def db_connection(
    test_dsn: str, db_connection_available: bool
) -> Generator[psycopg.Connection, None, None]:
    """
    Provide a session-scoped database connection for integration tests.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    conn = psycopg.connect(test_dsn)
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="session")
def db_schema_initialized(db_connection: psycopg.Connection) -> bool:
    """
    Ensure the documents table exists.
    """
    with db_connection.cursor() as cur:
        cur.execute(DOCUMENTS_TABLE_DDL)
    db_connection.commit()
    return True


@pytest.fixture(scope="function")
def clean_documents_table(db_connection: psycopg.Connection, db_schema_initialized: bool):
    """
    Clean the documents table before and after each test function.
    """
    with db_connection.cursor() as cur:
        cur.execute("TRUNCATE TABLE public.documents RESTART IDENTITY;")
    db_connection.commit()
    yield
    with db_connection.cursor() as cur:
        cur.execute("TRUNCATE TABLE public.documents RESTART IDENTITY;")
    db_connection.commit()


@pytest.fixture(scope="function")
def seeded_db(
    db_connection: psycopg.Connection,
    clean_documents_table,
    test_dsn: str,
) -> int:
    """
    Seed trips and users through the generate_data script.

    Returns the number of documents seeded.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        csv_path = Path(tmpdir) / "documents.csv"

        from scripts.generate_data import _copy_into_db, _generate_documents_csv

        _generate_documents_csv(
            csv_path, trips=SEEDED_TRIPS, drivers=SEEDED_DRIVERS, others=SEEDED_OTHERS, seed=42
        )
        _copy_into_db(test_dsn, csv_path)

    with db_connection.cursor() as cur:
        cur.execute("SELECT COUNT(*) FROM public.documents;")
        count = cur.fetchone()[0]

    return count


@pytest.fixture(scope="session")
def seed_sizes() -> dict[str, int]:
    """How many documents `seeded_db` writes per kind."""
    return {"trips": SEEDED_TRIPS, "drivers": SEEDED_DRIVERS, "others": SEEDED_OTHERS}

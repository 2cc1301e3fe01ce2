"""
Data generation and loading script for fleetview.

Implements deterministic pseudo-random trip/user document generation, CSV
emission, and Postgres COPY loading into the JSONB documents table.
"""

from __future__ import annotations

import csv
import json
import sys
import tempfile
import time
from pathlib import Path

import psycopg
import typer

from fleetview.infrastructure.db_factory import DOCUMENTS_TABLE_DDL, build_dsn
from fleetview.sample_data import generate_trips, generate_users

app = typer.Typer(help="Generate synthetic fleet documents and load into Postgres (CSV + COPY).")

CSV_HEADER = ["collection", "doc_id", "data"]


def _build_dsn(dsn_override: str | None) -> str:
    if dsn_override:
        return dsn_override
    return build_dsn()


def _generate_documents_csv(
    csv_path: Path, trips: int, drivers: int, others: int, seed: int
) -> int:
    documents = [("trips", doc) for doc in generate_trips(trips, seed=seed)]
    documents += [("users", doc) for doc in generate_users(drivers, others=others, seed=seed)]

    with csv_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADER)
        for collection, doc in documents:
            data = {key: value for key, value in doc.items() if key != "id"}
            writer.writerow([collection, doc["id"], json.dumps(data)])
    return len(documents)


def _copy_into_db(dsn: str, csv_path: Path, truncate: bool = False) -> None:
    with psycopg.connect(dsn) as conn:
        with conn.cursor() as cur:
            cur.execute(DOCUMENTS_TABLE_DDL)
            if truncate:
                cur.execute("TRUNCATE TABLE public.documents RESTART IDENTITY;")
            with cur.copy(
                """
                COPY public.documents (collection, doc_id, data)
                FROM STDIN WITH (FORMAT csv, HEADER TRUE)
                """
            ) as copy:
                with csv_path.open("r", encoding="utf-8") as f:
                    for line in f:
                        copy.write(line)
            conn.commit()


@app.command()
def main(
    trips: int = typer.Option(200, "--trips", "-t", help="Number of trips to generate."),
    drivers: int = typer.Option(25, "--drivers", "-d", help="Number of driver users."),
    others: int = typer.Option(5, "--others", help="Number of non-driver users."),
    seed: int = typer.Option(42, "--seed", help="Deterministic RNG seed."),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Optional CSV output path (if omitted, a temp file will be used).",
    ),
    dsn: str | None = typer.Option(None, "--dsn", help="Optional DSN override for Postgres."),
    truncate: bool = typer.Option(
        False, "--truncate", help="Empty the documents table before loading."
    ),
    no_load: bool = typer.Option(
        False,
        "--no-load",
        help="Only generate CSV; skip loading into Postgres.",
    ),
) -> None:
    """
    Generate synthetic documents and optionally load them into Postgres using COPY.
    """
    start = time.perf_counter()
    if output:
        csv_path = output
        csv_path.parent.mkdir(parents=True, exist_ok=True)
    else:
        tmpdir = Path(tempfile.mkdtemp(prefix="fleetview_csv_"))
        csv_path = tmpdir / "documents.csv"

    typer.echo(f"Generating {trips} trips, {drivers + others} users -> {csv_path} (seed={seed})")
    total = _generate_documents_csv(csv_path, trips=trips, drivers=drivers, others=others, seed=seed)
    typer.echo(f"CSV generation completed in {time.perf_counter() - start:.2f}s ({total} documents)")

    if no_load:
        typer.echo("Skipping load (no-load flag set).")
        return

    load_start = time.perf_counter()
    typer.echo("Loading CSV into Postgres via COPY...")
    _copy_into_db(_build_dsn(dsn), csv_path, truncate=truncate)
    typer.echo(f"Load completed in {time.perf_counter() - load_start:.2f}s.")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)

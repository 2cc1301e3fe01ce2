"""
Record sources package for fleetview.

Re-exports the source interfaces and the concrete adapters so downstream code
can import from `fleetview.sources` directly.
"""

from fleetview.sources.abstract import AbstractRecordSource, Predicate, RawDocument, RecordSource
from fleetview.sources.memory import InMemorySource
from fleetview.sources.postgres import PostgresDocumentSource

__all__ = [
    # Abstracts
    "AbstractRecordSource",
    "Predicate",
    "RawDocument",
    "RecordSource",
    # Concrete sources
    "InMemorySource",
    "PostgresDocumentSource",
]

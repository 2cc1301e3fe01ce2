"""
Error taxonomy for fleetview.

All failures in the view core are recoverable: a FetchError leaves the last
good snapshot in place, a DecodeError drops a single document.
"""

from __future__ import annotations

from typing import Optional


class FleetViewError(Exception):
    """Base class for fleetview errors."""


class FetchError(FleetViewError):
    """The record source could not be reached or returned an unusable response."""

    def __init__(self, collection: str, message: str) -> None:
        super().__init__(f"fetch from '{collection}' failed: {message}")
        self.collection = collection
        self.message = message


class DecodeError(FleetViewError):
    """A single raw document could not be turned into a record."""

    def __init__(self, doc_id: Optional[str], message: str) -> None:
        super().__init__(f"cannot decode document {doc_id or '<no id>'}: {message}")
        self.doc_id = doc_id
        self.message = message


class NotFoundError(FleetViewError):
    """A requested record does not exist in the current snapshot."""


__all__ = ["FleetViewError", "FetchError", "DecodeError", "NotFoundError"]

"""
Record source interfaces for fleetview.

A record source is the inbound edge of the view core: it returns the raw
documents of one collection, optionally narrowed by an equality predicate
evaluated at the source. Concrete sources (in-memory, Postgres JSONB) must
raise FetchError for any transport or availability failure.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

RawDocument = Dict[str, Any]


@dataclass(frozen=True)
class Predicate:
    """
    Equality filter applied by the source, e.g. `Predicate("role", "Driver")`.
    """

    field: str
    value: Any

    def matches(self, document: RawDocument) -> bool:
        return document.get(self.field) == self.value


@runtime_checkable
class RecordSource(Protocol):
    """
    Common interface all record sources must implement.

    Attributes
    ----------
    name : str
        A short machine-friendly identifier.
    """

    name: str

    async def fetch_all(
        self, collection: str, predicate: Optional[Predicate] = None
    ) -> List[RawDocument]:
        """
        Fetch every document of a collection, in source order.

        Parameters
        ----------
        collection : str
            Collection to read (e.g. "trips", "users").
        predicate : Predicate | None
            Optional equality filter evaluated by the source.

        Returns
        -------
        list[dict]
            Raw documents, each carrying its identifier under "id".

        Raises
        ------
        FetchError
            If the source is unavailable or the response cannot be read.
        """
        ...


class AbstractRecordSource(abc.ABC):
    """
    Optional ABC helper for class-based implementations.

    Subclasses should set `name` and implement `fetch_all`.
    """

    name: str

    @abc.abstractmethod
    async def fetch_all(
        self, collection: str, predicate: Optional[Predicate] = None
    ) -> List[RawDocument]:  # pragma: no cover - interface only
        """Return the raw documents of a collection."""
        raise NotImplementedError

    async def close(self) -> None:
        """Release any held resources. No-op by default."""
        return None


__all__ = ["AbstractRecordSource", "Predicate", "RawDocument", "RecordSource"]

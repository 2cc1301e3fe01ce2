"""
In-memory record source.

Holds collections as plain lists of documents. Used by the CLI demo mode and
by tests, which can queue failures or delays to simulate an unreachable
database or out-of-order responses.
"""

from __future__ import annotations

import asyncio
import copy
from collections import defaultdict, deque
from typing import Deque, Dict, Iterable, List, Optional

from fleetview.domain.errors import FetchError
from fleetview.sources.abstract import AbstractRecordSource, Predicate, RawDocument


class InMemorySource(AbstractRecordSource):
    """
    Serve documents from a dict of collection name to documents.

    Documents are deep-copied on the way out so callers can never mutate the
    stored data through a fetched snapshot.
    """

    name: str = "memory"

    def __init__(self, collections: Optional[Dict[str, Iterable[RawDocument]]] = None) -> None:
        self._collections: Dict[str, List[RawDocument]] = {
            name: list(docs) for name, docs in (collections or {}).items()
        }
        self._failures: Dict[str, Deque[Exception]] = defaultdict(deque)
        self.fetch_calls: List[tuple[str, Optional[Predicate]]] = []

    def put(self, collection: str, documents: Iterable[RawDocument]) -> None:
        """Replace the contents of a collection."""
        self._collections[collection] = list(documents)

    def fail_next(self, collection: str, exc: Optional[Exception] = None) -> None:
        """Make the next fetch of `collection` raise (a FetchError by default)."""
        self._failures[collection].append(exc or FetchError(collection, "source unavailable"))

    async def fetch_all(
        self, collection: str, predicate: Optional[Predicate] = None
    ) -> List[RawDocument]:
        self.fetch_calls.append((collection, predicate))
        # Yield once so concurrent reloads interleave like real I/O.
        await asyncio.sleep(0)
        pending = self._failures.get(collection)
        if pending:
            raise pending.popleft()

        documents = self._collections.get(collection, [])
        if predicate is not None:
            documents = [doc for doc in documents if predicate.matches(doc)]
        return copy.deepcopy(documents)


__all__ = ["InMemorySource"]

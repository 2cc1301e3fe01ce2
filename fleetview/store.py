"""
Record store: the single source of truth for one view's snapshot.

`load()` fetches a whole collection from a record source, decodes every
document independently, and swaps the snapshot reference in one assignment.
Failures never escape:

- a FetchError (or any unexpected source error) is returned in the LoadResult
  and the previous snapshot stays in place;
- a DecodeError drops only the offending document.

Concurrent loads are not serialized. Each one replaces the reference when it
completes, so the load that finishes last wins regardless of issue order.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Generic, List, Optional, Set, Tuple, TypeVar

from pydantic import ValidationError

from fleetview.domain.errors import DecodeError, FetchError
from fleetview.sources.abstract import Predicate, RawDocument, RecordSource
from fleetview.utils.logging import get_logger

log = get_logger(__name__)

R = TypeVar("R")
Decoder = Callable[[RawDocument], R]
SnapshotListener = Callable[[Tuple[R, ...]], None]


@dataclass
class LoadResult(Generic[R]):
    """
    Outcome of one `RecordStore.load()` call.

    `snapshot` is the store's snapshot after the load: the freshly decoded
    one on success, the previous one when `error` is set.
    """

    collection: str
    snapshot: Tuple[R, ...] = field(default_factory=tuple)
    error: Optional[FetchError] = None
    fetched: int = 0
    skipped: int = 0
    duration_seconds: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None


class RecordStore(Generic[R]):
    """
    Holds the current snapshot of one collection and reloads it on demand.

    Parameters
    ----------
    source : RecordSource
        Where raw documents come from.
    collection : str
        Collection name passed to the source.
    decoder : callable
        Turns one raw document into a record; raises DecodeError (or a
        pydantic ValidationError) for malformed input.
    predicate : Predicate | None
        Optional equality filter evaluated by the source.
    """

    def __init__(
        self,
        source: RecordSource,
        collection: str,
        decoder: Decoder,
        predicate: Optional[Predicate] = None,
    ) -> None:
        self.source = source
        self.collection = collection
        self.predicate = predicate
        self._decoder = decoder
        self._snapshot: Tuple[R, ...] = ()
        self._lock = threading.Lock()
        self._listeners: List[SnapshotListener] = []

        self.loads_completed = 0
        self.skipped_total = 0
        self.last_error: Optional[FetchError] = None
        self.last_loaded_at: Optional[datetime] = None

    def current_snapshot(self) -> Tuple[R, ...]:
        """Return the current snapshot (a plain reference read)."""
        return self._snapshot

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """
        Register a callback invoked with each new snapshot.

        Returns a function that removes the listener again.
        """
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    async def load(self) -> LoadResult[R]:
        """
        Fetch, decode, and install a new snapshot.

        Never raises for source or decode failures; inspect `LoadResult.error`.
        """
        log.debug(f"[LOAD START] {self.collection}", extra={"collection": self.collection})
        start = time.perf_counter()
        try:
            documents = await self.source.fetch_all(self.collection, self.predicate)
        except FetchError as exc:
            return self._failed(exc, start)
        except Exception as exc:  # noqa: BLE001 - any source failure keeps the last good snapshot
            log.exception(
                f"[LOAD FAILED] {self.collection} (unexpected source error)",
                extra={"collection": self.collection},
            )
            return self._failed(FetchError(self.collection, str(exc)), start)

        records, skipped = self._decode_all(documents)
        snapshot = tuple(records)
        self._replace(snapshot)
        duration = time.perf_counter() - start

        log.info(
            f"[LOAD OK] {self.collection}",
            extra={
                "collection": self.collection,
                "records": len(snapshot),
                "skipped": skipped,
                "duration_seconds": round(duration, 4),
            },
        )
        return LoadResult(
            collection=self.collection,
            snapshot=snapshot,
            fetched=len(documents),
            skipped=skipped,
            duration_seconds=duration,
        )

    def _failed(self, error: FetchError, start: float) -> LoadResult[R]:
        with self._lock:
            self.last_error = error
        log.warning(
            f"[LOAD FAILED] {self.collection}",
            extra={"collection": self.collection, "error": str(error)},
        )
        return LoadResult(
            collection=self.collection,
            snapshot=self._snapshot,
            error=error,
            duration_seconds=time.perf_counter() - start,
        )

    def _decode_all(self, documents: List[RawDocument]) -> Tuple[List[R], int]:
        records: List[R] = []
        seen: Set[str] = set()
        skipped = 0
        for document in documents:
            doc_id = document.get("id") if isinstance(document, dict) else None
            try:
                record = self._decoder(document)
            except (DecodeError, ValidationError) as exc:
                skipped += 1
                log.warning(
                    f"[DECODE SKIPPED] {self.collection}/{doc_id}",
                    extra={"collection": self.collection, "doc_id": doc_id, "error": str(exc)},
                )
                continue

            record_id = str(getattr(record, "id", doc_id))
            if record_id in seen:
                skipped += 1
                log.warning(
                    f"[DUPLICATE SKIPPED] {self.collection}/{record_id}",
                    extra={"collection": self.collection, "doc_id": record_id},
                )
                continue
            seen.add(record_id)
            records.append(record)

        with self._lock:
            self.skipped_total += skipped
        return records, skipped

    def _replace(self, snapshot: Tuple[R, ...]) -> None:
        with self._lock:
            self._snapshot = snapshot
            self.loads_completed += 1
            self.last_error = None
            self.last_loaded_at = datetime.now(timezone.utc)
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(snapshot)
            except Exception:  # noqa: BLE001 - one broken listener must not starve the rest
                log.exception(
                    f"[LISTENER FAILED] {self.collection}", extra={"collection": self.collection}
                )


__all__ = ["Decoder", "LoadResult", "RecordStore", "SnapshotListener"]

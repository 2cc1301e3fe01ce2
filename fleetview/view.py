"""
Filtered aggregation view: the outbound face of a record store.

The presentation layer pulls from it (`current_snapshot`, `aggregate_counts`,
`filtered`) or subscribes to the explicit snapshot-changed channel. Derived
values are recomputed on every call from a single snapshot reference and are
never cached or persisted.

Usage:
    view = FilteredAggregationView(store, TripStatus, TRIP_SEARCH_FIELDS)
    await view.refresh()
    view.aggregate_counts()["completed"]
    view.filtered("jaipur")
"""

from __future__ import annotations

import asyncio
from typing import Callable, Generic, Optional, Sequence, Set, Tuple, TypeVar

from fleetview.aggregator import StatusKey, Statuses, compute, status_of
from fleetview.domain.models import AggregateCounts
from fleetview.filtering import FieldExtractor, apply
from fleetview.narration import Narrator
from fleetview.store import LoadResult, RecordStore, SnapshotListener
from fleetview.utils.logging import get_logger

log = get_logger(__name__)

R = TypeVar("R")
OverviewComposer = Callable[[AggregateCounts], str]


class FilteredAggregationView(Generic[R]):
    """
    Live view over one collection: snapshot, per-status counts, text filter.

    Parameters
    ----------
    store : RecordStore
        Holds the snapshot and performs loads.
    statuses : Enum class | iterable
        Fixed status enumeration reported by `aggregate_counts`.
    search_fields : sequence of callables
        Derived text fields a free-text query is matched against.
    status_key : callable
        Extracts the status from a record (defaults to `record.status`).
    narrator : Narrator | None
        Optional narration service; used by `on_appear` and `set_narration`.
    overview : callable | None
        Builds the narrated text from the current counts.
    narration_enabled : bool
        Initial narration toggle.
    """

    def __init__(
        self,
        store: RecordStore[R],
        statuses: Statuses,
        search_fields: Sequence[FieldExtractor],
        status_key: StatusKey = status_of,
        narrator: Optional[Narrator] = None,
        overview: Optional[OverviewComposer] = None,
        narration_enabled: bool = False,
    ) -> None:
        self.store = store
        self.statuses = tuple(statuses)
        self.search_fields = tuple(search_fields)
        self.status_key = status_key
        self.narrator = narrator
        self.overview = overview
        self.narration_enabled = narration_enabled
        self._pending: Set[asyncio.Task] = set()

    @property
    def name(self) -> str:
        return self.store.collection

    def current_snapshot(self) -> Tuple[R, ...]:
        return self.store.current_snapshot()

    def aggregate_counts(self) -> AggregateCounts:
        return compute(self.store.current_snapshot(), self.statuses, self.status_key)

    def filtered(self, query: Optional[str] = "") -> Tuple[R, ...]:
        return apply(self.store.current_snapshot(), query, self.search_fields)

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register for snapshot-changed notifications; returns an unsubscribe function."""
        return self.store.subscribe(listener)

    async def refresh(self) -> LoadResult[R]:
        """Load now and wait for the outcome."""
        return await self.store.load()

    def reload(self) -> "asyncio.Task[LoadResult[R]]":
        """
        Fire-and-forget refresh on the running event loop.

        The returned task resolves to the LoadResult, so a caller that cares
        can await it and inspect `error`. Nothing is cancelled: if several
        reloads overlap, the one that completes last determines the snapshot.
        """
        task = asyncio.get_running_loop().create_task(self.store.load())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    @property
    def pending_reloads(self) -> int:
        return len(self._pending)

    async def on_appear(self) -> LoadResult[R]:
        """
        Refresh as the view comes on screen, then narrate or silence it.
        """
        result = await self.refresh()
        self._narrate()
        return result

    def set_narration(self, enabled: bool) -> None:
        """Toggle narration; turning it on speaks the current overview immediately."""
        self.narration_enabled = enabled
        self._narrate()

    def _narrate(self) -> None:
        if self.narrator is None:
            return
        if self.narration_enabled and self.overview is not None:
            self.narrator.speak(self.overview(self.aggregate_counts()))
        else:
            self.narrator.stop()

    async def aclose(self) -> None:
        """Wait for in-flight reloads to land."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
        log.debug(f"[VIEW CLOSED] {self.name}", extra={"collection": self.name})


__all__ = ["FilteredAggregationView", "OverviewComposer"]

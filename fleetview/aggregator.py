"""
Per-status aggregation over a single snapshot.

Counts are always derived from one snapshot in one pass, so the buckets are
mutually consistent: they can never disagree with each other or with the
snapshot size the way independent per-status source queries can.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict, Iterable, Sequence, Type, Union

from fleetview.domain.models import AggregateCounts

StatusKey = Callable[[Any], Any]
Statuses = Union[Type[Enum], Iterable[Any]]


def status_of(record: Any) -> Any:
    """Default status key: the record's `status` attribute."""
    return getattr(record, "status", None)


def _status_value(status: Any) -> str:
    return str(status.value) if isinstance(status, Enum) else str(status)


def compute(
    snapshot: Sequence[Any], statuses: Statuses, key: StatusKey = status_of
) -> AggregateCounts:
    """
    Count the records of `snapshot` carrying each known status.

    Parameters
    ----------
    snapshot : sequence of records
        The snapshot to aggregate; may be empty.
    statuses : Enum class | iterable
        The fixed enumeration of statuses to report. Every status gets a
        bucket, zero when absent.
    key : callable
        Extracts the status value from a record.

    Returns
    -------
    AggregateCounts
        Known-status buckets plus `total` and `unrecognized`. Records with a
        status outside the enumeration are not counted in any bucket.
    """
    counts: Dict[str, int] = {_status_value(status): 0 for status in statuses}
    unrecognized = 0
    for record in snapshot:
        raw = key(record)
        value = _status_value(raw) if raw is not None else None
        if value in counts:
            counts[value] += 1
        else:
            unrecognized += 1
    return AggregateCounts(counts, total=len(snapshot), unrecognized=unrecognized)


__all__ = ["StatusKey", "Statuses", "compute", "status_of"]

"""
Free-text filter engine for fleetview views.

A query is trimmed and case-folded, then matched as a substring against a
fixed set of derived text fields per record. Dates are matched through a
stable, locale-independent rendering:

    SEARCH_DATE_FORMAT = "dd Mon"    e.g. "03 Jan", "12 Jun"

Two-digit day of month, one space, English three-letter month abbreviation.
Aware datetimes are converted to the display timezone first; naive datetimes
and plain dates are rendered as stored.

Usage:
    from fleetview.filtering import apply

    matches = apply(snapshot, "jun", [lambda t: t.start_location, ...])
"""

from __future__ import annotations

from datetime import date, datetime, timezone, tzinfo
from functools import lru_cache
from typing import Callable, Iterable, Optional, Sequence, Tuple, TypeVar
from zoneinfo import ZoneInfo

from fleetview.config import get_settings

SEARCH_DATE_FORMAT = "dd Mon"

MONTH_ABBREVIATIONS: Tuple[str, ...] = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

T = TypeVar("T")
FieldExtractor = Callable[[T], Optional[str]]


@lru_cache(maxsize=16)
def _zone(name: str) -> tzinfo:
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def format_search_date(value: date, tz: Optional[tzinfo] = None) -> str:
    """
    Render a date the way free-text queries are matched against it.

    Parameters
    ----------
    value : date | datetime
        The date to render.
    tz : tzinfo | None
        Timezone for aware datetimes; defaults to `Settings.display_timezone`.
    """
    if isinstance(value, datetime) and value.tzinfo is not None:
        value = value.astimezone(tz or _zone(get_settings().display_timezone))
    return f"{value.day:02d} {MONTH_ABBREVIATIONS[value.month - 1]}"


def normalize_query(query: Optional[str]) -> str:
    """Trim and case-fold a query; None behaves like the empty query."""
    return (query or "").strip().casefold()


def matches(record: T, needle: str, fields: Iterable[FieldExtractor]) -> bool:
    """True when any field of `record` contains the already-normalized `needle`."""
    for extract in fields:
        value = extract(record)
        if value is not None and needle in value.casefold():
            return True
    return False


def apply(
    snapshot: Sequence[T], query: Optional[str], fields: Sequence[FieldExtractor]
) -> Tuple[T, ...]:
    """
    Return the records of `snapshot` matching `query`, in snapshot order.

    An empty (or whitespace-only) query returns the snapshot unchanged.
    """
    needle = normalize_query(query)
    if not needle:
        return tuple(snapshot)
    return tuple(record for record in snapshot if matches(record, needle, fields))


__all__ = [
    "FieldExtractor",
    "MONTH_ABBREVIATIONS",
    "SEARCH_DATE_FORMAT",
    "apply",
    "format_search_date",
    "matches",
    "normalize_query",
]

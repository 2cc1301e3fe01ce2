"""
Narration service for dashboard overviews.

Only the text side lives here: views compose an overview sentence block and
hand it to an injected Narrator. Turning text into audio is the narrator
implementation's business; the default LoggingNarrator just records it.
"""

from __future__ import annotations

from typing import List, Optional, Protocol, runtime_checkable

from fleetview.domain.models import AggregateCounts, TripStatus
from fleetview.utils.logging import get_logger

log = get_logger(__name__)


@runtime_checkable
class Narrator(Protocol):
    """Speaks text on behalf of a view."""

    def speak(self, text: str) -> None:
        ...

    def stop(self) -> None:
        ...


class LoggingNarrator:
    """
    Narrator that logs what would be spoken and keeps a transcript.
    """

    def __init__(self) -> None:
        self.transcript: List[str] = []
        self.speaking: Optional[str] = None

    def speak(self, text: str) -> None:
        self.transcript.append(text)
        self.speaking = text
        log.info(f"[NARRATE] {text}", extra={"chars": len(text)})

    def stop(self) -> None:
        if self.speaking is not None:
            log.info("[NARRATE STOP]")
        self.speaking = None


def compose_trip_overview(counts: AggregateCounts) -> str:
    """Overview read out when the trip dashboard appears."""
    return "\n".join(
        [
            "Trip dashboard overview.",
            f"You have a total of {counts.total} trips.",
            f"{counts[TripStatus.INPROGRESS]} trips are currently active.",
            f"{counts[TripStatus.COMPLETED]} trips have been completed.",
            f"{counts[TripStatus.SCHEDULED]} trips are scheduled but not yet started.",
            "Use the search bar to find specific trips by location or date.",
        ]
    )


def compose_driver_overview(counts: AggregateCounts) -> str:
    """Overview read out when the driver list appears."""
    noun = "driver" if counts.total == 1 else "drivers"
    return "\n".join(
        [
            "Driver list overview.",
            f"You have {counts.total} {noun} on record.",
            "Use the search bar to find a driver by name, email or phone.",
        ]
    )


__all__ = ["LoggingNarrator", "Narrator", "compose_driver_overview", "compose_trip_overview"]

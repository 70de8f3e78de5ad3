"""Raw record shape and interfaces for fare data sources."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Protocol, runtime_checkable

DATASET = "dataset"
LIVE = "live"


@dataclass(frozen=True)
class RawRecord:
    """Raw row from a source (before normalization).

    source tags the payload shape: "dataset" for joined database rows,
    "live" for search API offers. context carries query-level values the
    payload lacks (e.g. outbound_date for live offers).
    """

    source: Literal["dataset", "live"]
    payload: Dict[str, Any]
    context: Dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class FlightDataset(Protocol):
    """Protocol for the scheduled-flight dataset."""

    def list_flights(self, active_only: bool = True) -> List[RawRecord]:
        """Return joined flight rows, optionally only active ones."""
        ...


@runtime_checkable
class LiveSearch(Protocol):
    """Protocol for the live flight-search and booking-options API."""

    def search_flights(self, params) -> List[RawRecord]:
        ...

    def get_booking_options(self, request) -> list:
        ...

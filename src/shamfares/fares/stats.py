"""Summary figures for route teasers and reports."""

from dataclasses import dataclass, field
from typing import Any, Collection, Dict, Iterable, List, Optional, Tuple

import pandas as pd

from shamfares.fares.models import FareRecord

_WEEKDAY_NAMES = {1: "Mon", 2: "Tue", 3: "Wed", 4: "Thu", 5: "Fri", 6: "Sat", 7: "Sun"}


@dataclass(frozen=True)
class AirportSummary:
    """Teaser figures for one airport.

    min_price is 0 when no priced fare touches the airport; callers show
    nothing in that case.
    """

    min_price: float
    destination_count: int


def cheapest_of(records: Iterable[FareRecord]) -> Optional[FareRecord]:
    """Return the first record with the lowest price, or None if none is priced."""
    best = None
    for r in records:
        if r.price_usd is None:
            continue
        if best is None or r.price_usd < best.price_usd:
            best = r
    return best


def min_price_and_destination_count(records: Iterable[FareRecord], airport_code: str) -> AirportSummary:
    """Cheapest fare and number of distinct counterpart airports for airport_code."""
    min_price = None
    others = set()
    for r in records:
        other = r.other_end(airport_code)
        if other is None:
            continue
        others.add(other)
        if r.price_usd is not None and (min_price is None or r.price_usd < min_price):
            min_price = r.price_usd
    return AirportSummary(min_price=min_price if min_price is not None else 0, destination_count=len(others))


def min_prices_for_airports(records: Iterable[FareRecord], airport_codes: Iterable[str]) -> Dict[str, AirportSummary]:
    """AirportSummary for each code."""
    records = list(records)
    return {code: min_price_and_destination_count(records, code) for code in airport_codes}


def min_price_for_route(
    records: Iterable[FareRecord],
    airport_a: str,
    counterparts: Collection[str],
) -> Optional[float]:
    """Cheapest fare between airport_a and any counterpart, either direction."""
    best = None
    for r in records:
        if r.price_usd is None:
            continue
        other = r.other_end(airport_a)
        if other is None or other not in counterparts:
            continue
        if best is None or r.price_usd < best:
            best = r.price_usd
    return best


def destinations_from(records: Iterable[FareRecord], airport_code: str) -> List[Tuple[str, str]]:
    """Distinct (code, city) of the airports connected to airport_code, first seen first."""
    seen: Dict[str, str] = {}
    for r in records:
        other = r.other_end(airport_code)
        if other is None or other in seen:
            continue
        seen[other] = r.destination_city if other == r.destination_code else r.origin_city
    return list(seen.items())


@dataclass
class FareStats:
    """Container for fare statistics."""

    total_fares: int = 0
    priced_fares: int = 0
    cheapest_price: Optional[float] = None
    dearest_price: Optional[float] = None
    by_airline: Dict[str, int] = field(default_factory=dict)
    by_route: Dict[str, int] = field(default_factory=dict)
    by_weekday: Dict[int, int] = field(default_factory=dict)
    direct_fares: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "total_fares": self.total_fares,
            "priced_fares": self.priced_fares,
            "cheapest_price": self.cheapest_price,
            "dearest_price": self.dearest_price,
            "by_airline": self.by_airline,
            "by_route": self.by_route,
            "by_weekday": self.by_weekday,
            "direct_fares": self.direct_fares,
        }

    def airline_dataframe(self) -> pd.DataFrame:
        """Return by_airline as DataFrame."""
        if not self.by_airline:
            return pd.DataFrame(columns=["airline", "count"])
        return pd.DataFrame(
            [{"airline": k, "count": v} for k, v in sorted(self.by_airline.items())]
        )

    def weekday_dataframe(self) -> pd.DataFrame:
        """Return by_weekday as DataFrame (scheduled fares per weekday)."""
        if not self.by_weekday:
            return pd.DataFrame(columns=["weekday", "count"])
        return pd.DataFrame(
            [{"weekday": _WEEKDAY_NAMES[d], "count": c} for d, c in sorted(self.by_weekday.items())]
        )


def compute_stats(records: Iterable[FareRecord]) -> FareStats:
    """Compute statistics from a list of fares."""
    stats = FareStats()

    for r in records:
        stats.total_fares += 1

        airline = r.airline_name or r.airline_code
        if airline:
            stats.by_airline[airline] = stats.by_airline.get(airline, 0) + 1

        route = r.route()
        stats.by_route[route] = stats.by_route.get(route, 0) + 1

        for d in r.days_of_week:
            stats.by_weekday[d] = stats.by_weekday.get(d, 0) + 1

        if r.stops == 0:
            stats.direct_fares += 1

        if r.price_usd is not None:
            stats.priced_fares += 1
            if stats.cheapest_price is None or r.price_usd < stats.cheapest_price:
                stats.cheapest_price = r.price_usd
            if stats.dearest_price is None or r.price_usd > stats.dearest_price:
                stats.dearest_price = r.price_usd

    return stats

"""Fare service - orchestration of sources, caching and aggregation."""

import logging
from typing import Iterable, List, Optional, Union

from shamfares.fares.cache import QueryCache
from shamfares.fares.calendar import build_calendar
from shamfares.fares.dedup import cheapest_per_route
from shamfares.fares.errors import ConfigurationError, InvalidArgumentError
from shamfares.fares.models import (
    CalendarDayPrice,
    FareQueryResult,
    FareRecord,
    FilterCriteria,
    SearchParams,
    SortKey,
)
from shamfares.fares.normalize import normalize
from shamfares.fares.pipeline import apply_filters
from shamfares.fares.stats import AirportSummary, FareStats, compute_stats, min_prices_for_airports

logger = logging.getLogger(__name__)

DIRECTIONS = ("from", "to")


class FareService:
    """Fetches fares through the configured sources and feeds the aggregation functions."""

    def __init__(self, dataset=None, search=None, cache: Optional[QueryCache] = None):
        self._dataset = dataset
        self._search = search
        self._cache = cache if cache is not None else QueryCache()

    @classmethod
    def from_settings(cls, settings) -> "FareService":
        """Build a service with whichever clients the settings allow."""
        from shamfares.fares.sources.searchapi import SearchApiClient
        from shamfares.fares.sources.supabase import SupabaseFlightSource

        dataset = None
        if settings.has_dataset:
            dataset = SupabaseFlightSource(settings.supabase_url, settings.supabase_key, timeout=settings.http_timeout)
        search = SearchApiClient(
            settings.searchapi_api_key,
            base_url=settings.searchapi_base_url,
            timeout=settings.http_timeout,
        )
        return cls(dataset=dataset, search=search, cache=QueryCache(settings.cache_ttl_seconds))

    def dataset_fares(self) -> FareQueryResult:
        """All active scheduled fares, normalized (cached)."""
        if self._dataset is None:
            raise ConfigurationError("No flight dataset configured. Set SUPABASE_URL and SUPABASE_KEY")

        def fetch() -> FareQueryResult:
            errors = []
            records = normalize(self._dataset.list_flights(active_only=True), errors=errors)
            logger.info("Loaded %d fares from dataset", len(records))
            return FareQueryResult(records=records, query="dataset", errors=errors)

        return self._cache.get_or_fetch(("dataset", True), fetch)

    def fares_between(self, origin: Optional[str] = None, destination: Optional[str] = None) -> List[FareRecord]:
        """Dataset fares, optionally restricted to an origin and/or destination."""
        records = self.dataset_fares().records
        return [
            r
            for r in records
            if (not origin or r.origin_code == origin) and (not destination or r.destination_code == destination)
        ]

    def trip_fares(self, airport: str, direction: str = "from", counterpart: Optional[str] = None) -> List[FareRecord]:
        """Fares leaving (direction="from") or reaching (direction="to") airport."""
        if direction not in DIRECTIONS:
            raise InvalidArgumentError(f"Invalid direction: {direction}. Expected 'from' or 'to'")
        if direction == "from":
            return self.fares_between(origin=airport, destination=counterpart)
        return self.fares_between(origin=counterpart, destination=airport)

    def fares_for_airport(self, airport: str) -> List[FareRecord]:
        """Dataset fares touching airport at either end."""
        return [r for r in self.dataset_fares().records if r.touches(airport)]

    def deals(self, airport: str, direction: str = "from", limit: Optional[int] = 6) -> List[FareRecord]:
        """Cheapest fare per route for the teaser list."""
        return cheapest_per_route(self.trip_fares(airport, direction), limit=limit)

    def calendar(
        self, airport: str, year: int, month: int, destination: Optional[str] = None
    ) -> List[CalendarDayPrice]:
        """Month price calendar for fares touching airport."""
        return build_calendar(self.fares_for_airport(airport), year, month, destination)

    def airport_summaries(self, airports: Iterable[str]) -> dict[str, AirportSummary]:
        return min_prices_for_airports(self.dataset_fares().records, airports)

    def search(
        self,
        params: SearchParams,
        criteria: Optional[FilterCriteria] = None,
        sort_key: Union[SortKey, str] = SortKey.PRICE,
    ) -> FareQueryResult:
        """Live search, filtered and sorted. Raw offers are cached per route and date."""
        if self._search is None:
            raise ConfigurationError("No live search client configured")
        raw = self._cache.get_or_fetch(("live",) + params.cache_key(), lambda: self._search.search_flights(params))
        errors = []
        records = normalize(raw, errors=errors)
        records = apply_filters(records, criteria, sort_key, errors=errors)
        return FareQueryResult(records=records, query=params, errors=errors)

    def statistics(self, records: Optional[List[FareRecord]] = None) -> FareStats:
        """Statistics for the given fares, or for the whole dataset."""
        if records is None:
            records = self.dataset_fares().records
        return compute_stats(records)

    def invalidate(self) -> None:
        """Forget cached collections (e.g. on navigation)."""
        self._cache.invalidate()

"""Fare aggregation and price-calendar package."""

from shamfares.fares.calendar import build_calendar, price_tier
from shamfares.fares.dedup import cheapest_per_route
from shamfares.fares.errors import (
    ConfigurationError,
    FaresError,
    FormatError,
    InvalidArgumentError,
    UpstreamError,
    ValidationError,
)
from shamfares.fares.models import (
    CalendarDayPrice,
    FareQueryResult,
    FareRecord,
    FilterCriteria,
    PriceTier,
    SortKey,
)
from shamfares.fares.normalize import normalize
from shamfares.fares.pipeline import apply_filters
from shamfares.fares.service import FareService
from shamfares.fares.stats import (
    cheapest_of,
    min_price_and_destination_count,
    min_price_for_route,
)

__all__ = [
    "CalendarDayPrice",
    "ConfigurationError",
    "FareQueryResult",
    "FareRecord",
    "FareService",
    "FaresError",
    "FilterCriteria",
    "FormatError",
    "InvalidArgumentError",
    "PriceTier",
    "SortKey",
    "UpstreamError",
    "ValidationError",
    "apply_filters",
    "build_calendar",
    "cheapest_of",
    "cheapest_per_route",
    "min_price_and_destination_count",
    "min_price_for_route",
    "normalize",
    "price_tier",
]

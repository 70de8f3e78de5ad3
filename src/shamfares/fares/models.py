"""Data models for fare aggregation."""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, FrozenSet, List, Optional, Tuple

from shamfares.fares.errors import FormatError, InvalidArgumentError, ValidationError

AIRPORT_CODE_RE = re.compile(r"^[A-Z]{3}$")
DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


def parse_time_of_day(value: Any) -> int:
    """Convert an ``HH:MM`` or ``HH:MM:SS`` string to minutes after midnight."""
    if not isinstance(value, str):
        raise FormatError(f"Time must be a string, got {type(value).__name__}", field="time")
    m = _TIME_RE.match(value.strip())
    if not m:
        raise FormatError(f"Invalid time of day: {value!r}", field="time")
    hours, minutes, seconds = int(m.group(1)), int(m.group(2)), int(m.group(3) or 0)
    if hours > 23 or minutes > 59 or seconds > 59:
        raise FormatError(f"Time of day out of range: {value!r}", field="time")
    return hours * 60 + minutes


class SortKey(str, Enum):
    PRICE = "price"
    DURATION = "duration"
    DEPARTURE = "departure"

    @classmethod
    def parse(cls, value) -> "SortKey":
        """Accept a SortKey or its name."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise InvalidArgumentError(
                f"Invalid sort key: {value}. Expected one of: price, duration, departure"
            ) from None


class PriceTier(str, Enum):
    CHEAP = "cheap"
    MID = "mid"
    EXPENSIVE = "expensive"


@dataclass(frozen=True)
class FareRecord:
    """Normalized, immutable fare record."""

    id: str
    origin_code: str
    destination_code: str
    airline_code: str
    airline_name: str
    departure_time: str
    arrival_time: str
    duration_minutes: int
    price_usd: Optional[float]
    stops: Optional[int]
    days_of_week: FrozenSet[int] = frozenset()
    flight_number: str = ""
    booking_token: Optional[str] = None
    origin_city: str = ""
    destination_city: str = ""
    source: str = "dataset"

    def route(self) -> str:
        """Return route as ORIGIN-DESTINATION."""
        return f"{self.origin_code}-{self.destination_code}"

    def route_key(self) -> Tuple[str, str]:
        return (self.origin_code, self.destination_code)

    def touches(self, airport_code: str) -> bool:
        """True when the airport is either end of the route."""
        return airport_code in (self.origin_code, self.destination_code)

    def other_end(self, airport_code: str) -> Optional[str]:
        """Return the opposite airport, or None if the record does not touch airport_code."""
        if self.origin_code == airport_code:
            return self.destination_code
        if self.destination_code == airport_code:
            return self.origin_code
        return None

    def operates_on(self, iso_weekday: int) -> bool:
        return iso_weekday in self.days_of_week

    def departure_minutes(self) -> int:
        try:
            return parse_time_of_day(self.departure_time)
        except FormatError as e:
            raise FormatError(e.message, record_id=self.id, field="departure_time") from None

    @property
    def is_direct(self) -> bool:
        """Unknown stop count (None) is not direct."""
        return self.stops == 0


@dataclass(frozen=True)
class CalendarDayPrice:
    """Cheapest price for one calendar day; price is None when nothing operates."""

    day: int
    price: Optional[float]
    weekday: int


@dataclass(frozen=True)
class FilterCriteria:
    """Conjunctive fare filters. Defaults filter nothing."""

    airlines: FrozenSet[str] = frozenset()
    max_price: Optional[float] = None
    direct_only: bool = False
    destination_code: Optional[str] = None


@dataclass(frozen=True)
class SearchParams:
    """Validated live-search request."""

    departure_id: str
    arrival_id: str
    outbound_date: str
    adults: int = 1

    @classmethod
    def from_payload(cls, payload: Any) -> "SearchParams":
        """Validate a request body. Raises ValidationError with a user-facing message."""
        if not isinstance(payload, dict):
            raise ValidationError("Invalid JSON body")
        departure_id, arrival_id, outbound_date = _validate_route_fields(payload)
        adults = _parse_adults(payload.get("adults"))
        return cls(
            departure_id=departure_id,
            arrival_id=arrival_id,
            outbound_date=outbound_date,
            adults=adults,
        )

    def cache_key(self) -> Tuple[str, str, str, int]:
        return (self.departure_id, self.arrival_id, self.outbound_date, self.adults)


@dataclass(frozen=True)
class BookingRequest:
    """Validated booking-options request for a previously returned fare."""

    booking_token: str
    departure_id: str
    arrival_id: str
    outbound_date: str

    @classmethod
    def from_payload(cls, payload: Any) -> "BookingRequest":
        if not isinstance(payload, dict):
            raise ValidationError("Invalid JSON body")
        token = payload.get("booking_token")
        if not token or not isinstance(token, str):
            raise ValidationError("Missing booking_token")
        departure_id, arrival_id, outbound_date = _validate_route_fields(payload)
        return cls(
            booking_token=token,
            departure_id=departure_id,
            arrival_id=arrival_id,
            outbound_date=outbound_date,
        )


def _parse_adults(value: Any) -> int:
    # Clients send either a number or its string form
    if value is None or value == "":
        return 1
    if isinstance(value, str) and value.strip().isdecimal():
        value = int(value.strip())
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValidationError("Invalid adults: must be a positive integer")
    return value


def _validate_route_fields(payload: dict) -> Tuple[str, str, str]:
    departure_id = payload.get("departure_id")
    if not isinstance(departure_id, str) or not AIRPORT_CODE_RE.match(departure_id):
        raise ValidationError("Invalid departure_id: must be 3 uppercase letters")
    arrival_id = payload.get("arrival_id")
    if not isinstance(arrival_id, str) or not AIRPORT_CODE_RE.match(arrival_id):
        raise ValidationError("Invalid arrival_id: must be 3 uppercase letters")
    outbound_date = payload.get("outbound_date")
    if not isinstance(outbound_date, str) or not DATE_RE.match(outbound_date):
        raise ValidationError("Invalid outbound_date: must be YYYY-MM-DD")
    return departure_id, arrival_id, outbound_date


@dataclass(frozen=True)
class BookingOption:
    """One bookable offer for a fare."""

    price: Optional[float]
    url: str
    post_data: Optional[str] = None
    book_with: str = ""

    @classmethod
    def from_payload(cls, payload: dict) -> Optional["BookingOption"]:
        """Parse an upstream booking option. Returns None when it carries no URL."""
        request = payload.get("booking_request") or {}
        url = request.get("url")
        if not url:
            return None
        price = payload.get("price")
        try:
            price = float(price) if price is not None else None
        except (TypeError, ValueError):
            price = None
        return cls(
            price=price,
            url=url,
            post_data=request.get("post_data") or None,
            book_with=payload.get("book_with") or "",
        )


_RESULT_COLUMNS = [
    "origin",
    "destination",
    "airline",
    "flight_number",
    "departure_time",
    "arrival_time",
    "duration_minutes",
    "stops",
    "price_usd",
]


@dataclass
class FareQueryResult:
    """Result of a fare query."""

    records: List[FareRecord] = field(default_factory=list)
    query: Optional[Any] = None
    errors: List[FormatError] = field(default_factory=list)

    def to_dataframe(self):
        """Convert to pandas DataFrame."""
        import pandas as pd

        if not self.records:
            return pd.DataFrame(columns=_RESULT_COLUMNS)
        return pd.DataFrame(
            [
                {
                    "origin": r.origin_code,
                    "destination": r.destination_code,
                    "airline": r.airline_name or r.airline_code,
                    "flight_number": r.flight_number,
                    "departure_time": r.departure_time,
                    "arrival_time": r.arrival_time,
                    "duration_minutes": r.duration_minutes,
                    "stops": r.stops,
                    "price_usd": r.price_usd,
                }
                for r in self.records
            ],
            columns=_RESULT_COLUMNS,
        )

"""Map raw dataset rows and live search offers to FareRecord."""

import logging
from datetime import date
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from shamfares.fares.errors import FormatError
from shamfares.fares.models import AIRPORT_CODE_RE, FareRecord, parse_time_of_day
from shamfares.fares.sources.base import DATASET, LIVE, RawRecord

logger = logging.getLogger(__name__)


def normalize(raw: Iterable[RawRecord], errors: Optional[list] = None) -> List[FareRecord]:
    """Convert raw records into FareRecords.

    Rows without an origin or destination code are dropped quietly. Rows with
    malformed fields are dropped with a FormatError appended to ``errors``
    (when given); the rest of the batch is still converted.
    """
    records = []
    total = 0
    dropped = 0
    for item in raw:
        total += 1
        mapper = MAPPERS.get(item.source)
        try:
            if mapper is None:
                raise FormatError(f"Unknown record source: {item.source!r}", field="source")
            record = mapper(item.payload, item.context)
        except FormatError as e:
            if e.record_id is None:
                e.record_id = _record_id_hint(item.payload)
            logger.warning("Dropping record %s: %s", e.record_id, e.message)
            if errors is not None:
                errors.append(e)
            dropped += 1
            continue
        if record is None:
            logger.debug("Skipping %s row without route codes: %s", item.source, _record_id_hint(item.payload))
            continue
        records.append(record)

    if dropped:
        logger.warning("Dropped %d of %d records with format errors", dropped, total)
    return records


def map_dataset_row(payload: Dict[str, Any], context: Dict[str, Any]) -> Optional[FareRecord]:
    """Map a joined flights row (with nested airline/origin/destination)."""
    origin = payload.get("origin") or {}
    destination = payload.get("destination") or {}
    airline = payload.get("airline") or {}

    origin_code = _get_str(origin, "airport_code", "code") or _get_str(payload, "origin_code")
    destination_code = _get_str(destination, "airport_code", "code") or _get_str(payload, "destination_code")
    if not origin_code or not destination_code:
        return None

    record_id = str(payload.get("id") or "")
    origin_code, destination_code = _check_route(origin_code, destination_code, record_id)
    departure_time = _check_time(payload.get("departure_time"), "departure_time", record_id)
    arrival_time = _check_time(payload.get("arrival_time"), "arrival_time", record_id)

    return FareRecord(
        id=record_id,
        origin_code=origin_code,
        destination_code=destination_code,
        airline_code=_get_str(airline, "code") or "",
        airline_name=_get_str(airline, "name") or "",
        departure_time=departure_time,
        arrival_time=arrival_time,
        duration_minutes=_non_negative_int(payload.get("duration_minutes"), "duration_minutes", record_id),
        price_usd=_optional_price(payload.get("price_usd"), record_id),
        stops=_optional_stops(payload.get("stops", 0), record_id),
        days_of_week=_weekdays(payload.get("days_of_week"), record_id),
        flight_number=_get_str(payload, "flight_number") or "",
        origin_city=_get_str(origin, "city") or "",
        destination_city=_get_str(destination, "city") or "",
        source=DATASET,
    )


def map_live_offer(payload: Dict[str, Any], context: Dict[str, Any]) -> Optional[FareRecord]:
    """Map a live search offer (segments in ``flights``, stops in ``layovers``)."""
    segments = [s for s in payload.get("flights") or [] if isinstance(s, dict)]
    if not segments:
        return None
    first, last = segments[0], segments[-1]
    dep = first.get("departure_airport") or {}
    arr = last.get("arrival_airport") or {}

    origin_code = _get_str(dep, "id", "airport_code", "code")
    destination_code = _get_str(arr, "id", "airport_code", "code")
    if not origin_code or not destination_code:
        return None

    flight_numbers = [_get_str(s, "flight_number") or "" for s in segments]
    dep_date, dep_time = _split_when(dep)
    _, arr_time = _split_when(arr)
    travel_date = dep_date or context.get("outbound_date")
    token = _get_str(payload, "booking_token")
    record_id = token or "{}@{}".format("-".join(n for n in flight_numbers if n), travel_date or "")

    origin_code, destination_code = _check_route(origin_code, destination_code, record_id)
    departure_time = _check_time(dep_time, "departure_time", record_id)
    arrival_time = _check_time(arr_time, "arrival_time", record_id)

    layovers = payload.get("layovers")
    if isinstance(layovers, list):
        stops = len(layovers)
    else:
        stops = len(segments) - 1

    duration = payload.get("total_duration")
    if duration is None:
        duration = sum(_non_negative_int(s.get("duration", 0), "duration", record_id) for s in segments)
        if isinstance(layovers, list):
            duration += sum(
                _non_negative_int(lay.get("duration", 0), "duration", record_id)
                for lay in layovers
                if isinstance(lay, dict)
            )

    return FareRecord(
        id=record_id,
        origin_code=origin_code,
        destination_code=destination_code,
        airline_code=_carrier_code(flight_numbers[0]),
        airline_name=_get_str(first, "airline") or "",
        departure_time=departure_time,
        arrival_time=arrival_time,
        duration_minutes=_non_negative_int(duration, "total_duration", record_id),
        price_usd=_optional_price(payload.get("price"), record_id),
        stops=stops,
        days_of_week=_weekday_of(travel_date, record_id),
        flight_number=flight_numbers[0],
        booking_token=token,
        origin_city=_get_str(dep, "name") or "",
        destination_city=_get_str(arr, "name") or "",
        source=LIVE,
    )


MAPPERS: Dict[str, Callable[[Dict[str, Any], Dict[str, Any]], Optional[FareRecord]]] = {
    DATASET: map_dataset_row,
    LIVE: map_live_offer,
}


def _get_str(d: Any, *keys: str) -> Optional[str]:
    if not isinstance(d, dict):
        return None
    for k in keys:
        v = d.get(k)
        if v is not None and str(v).strip():
            return str(v).strip()
    return None


def _record_id_hint(payload: Any) -> Optional[str]:
    return _get_str(payload, "id", "booking_token")


def _check_route(origin: str, destination: str, record_id: str) -> Tuple[str, str]:
    origin, destination = origin.upper(), destination.upper()
    for code, name in ((origin, "origin_code"), (destination, "destination_code")):
        if not AIRPORT_CODE_RE.match(code):
            raise FormatError(f"Invalid airport code: {code!r}", record_id=record_id, field=name)
    if origin == destination:
        raise FormatError(f"Origin and destination are both {origin}", record_id=record_id, field="destination_code")
    return origin, destination


def _check_time(value: Any, name: str, record_id: str) -> str:
    try:
        parse_time_of_day(value)
    except FormatError as e:
        raise FormatError(e.message, record_id=record_id, field=name) from None
    return value.strip()


def _split_when(airport: Dict[str, Any]) -> Tuple[Optional[str], Optional[str]]:
    """Return (date, time) from either split fields or a "YYYY-MM-DD HH:MM" time."""
    when = _get_str(airport, "time")
    day = _get_str(airport, "date")
    if when and day is None:
        parts = when.split()
        if len(parts) == 2:
            return parts[0], parts[1]
    return day, when


def _carrier_code(flight_number: str) -> str:
    """Carrier code is the flight-number prefix ("RJ 435" -> "RJ")."""
    if not flight_number:
        return ""
    head = flight_number.split()[0]
    if head != flight_number:
        return head.upper()
    return flight_number[:2].upper()


def _non_negative_int(value: Any, name: str, record_id: str) -> int:
    if isinstance(value, bool) or value is None:
        raise FormatError(f"Missing or invalid {name}: {value!r}", record_id=record_id, field=name)
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise FormatError(f"Invalid {name}: {value!r}", record_id=record_id, field=name) from None
    if number < 0 or number != float(value):
        raise FormatError(f"Invalid {name}: {value!r}", record_id=record_id, field=name)
    return number


def _optional_stops(value: Any, record_id: str) -> Optional[int]:
    if value is None:
        return None
    return _non_negative_int(value, "stops", record_id)


def _optional_price(value: Any, record_id: str) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise FormatError(f"Invalid price: {value!r}", record_id=record_id, field="price_usd")
    try:
        price = float(value)
    except (TypeError, ValueError):
        raise FormatError(f"Invalid price: {value!r}", record_id=record_id, field="price_usd") from None
    if price < 0 or price != price:
        raise FormatError(f"Invalid price: {value!r}", record_id=record_id, field="price_usd")
    return price


def _weekdays(value: Any, record_id: str) -> frozenset:
    if value is None:
        return frozenset()
    if not isinstance(value, (list, tuple, set, frozenset)):
        raise FormatError(f"Invalid days_of_week: {value!r}", record_id=record_id, field="days_of_week")
    days = set()
    for d in value:
        if isinstance(d, bool) or not isinstance(d, int) or not 1 <= d <= 7:
            raise FormatError(f"Invalid weekday: {d!r}", record_id=record_id, field="days_of_week")
        days.add(d)
    return frozenset(days)


def _weekday_of(travel_date: Optional[str], record_id: str) -> frozenset:
    if not travel_date:
        return frozenset()
    try:
        return frozenset({date.fromisoformat(travel_date).isoweekday()})
    except ValueError:
        raise FormatError(f"Invalid travel date: {travel_date!r}", record_id=record_id, field="date") from None

"""Lookup of the airports the site serves, by IATA code or city."""

from dataclasses import dataclass
from importlib import resources
from typing import List, Optional

import json


@dataclass(frozen=True)
class AirportInfo:
    """Airport details from reference data."""

    iata: str
    name: str
    name_ar: str
    city: str
    city_ar: str
    country: str
    latitude: float
    longitude: float


_airports_cache: Optional[dict[str, dict]] = None


def _load_airports() -> dict[str, dict]:
    global _airports_cache
    if _airports_cache is None:
        try:
            data_path = resources.files("shamfares.reference.data").joinpath("airports.json")
            with data_path.open(encoding="utf-8") as f:
                _airports_cache = json.load(f)
        except (FileNotFoundError, json.JSONDecodeError):
            _airports_cache = {}
    return _airports_cache


def _to_info(iata: str, row: dict) -> AirportInfo:
    return AirportInfo(
        iata=row.get("iata", iata),
        name=row.get("name", ""),
        name_ar=row.get("name_ar", ""),
        city=row.get("city", ""),
        city_ar=row.get("city_ar", ""),
        country=row.get("country", ""),
        latitude=float(row.get("latitude", 0)),
        longitude=float(row.get("longitude", 0)),
    )


def get_airport(iata: str) -> Optional[AirportInfo]:
    """Look up airport by IATA code. Returns None if not found."""
    if not iata:
        return None
    iata = iata.upper().strip()
    row = _load_airports().get(iata)
    if not row:
        return None
    return _to_info(iata, row)


def find_airport_by_city(city: str) -> Optional[AirportInfo]:
    """First served airport in the given city (English or Arabic name). None if not served."""
    if not city:
        return None
    needle = city.strip().casefold()
    for iata, row in _load_airports().items():
        if needle in (row.get("city", "").casefold(), row.get("city_ar", "").casefold()):
            return _to_info(iata, row)
    return None


def served_airports() -> List[AirportInfo]:
    """All served airports, sorted by code."""
    return [_to_info(iata, row) for iata, row in sorted(_load_airports().items())]

"""Reference data lookups for served airports."""

from shamfares.reference.airports import AirportInfo, find_airport_by_city, get_airport, served_airports

__all__ = [
    "AirportInfo",
    "find_airport_by_city",
    "get_airport",
    "served_airports",
]

"""Pluggable fare data sources."""

from shamfares.fares.sources.base import FlightDataset, LiveSearch, RawRecord
from shamfares.fares.sources.geo import IpGeoLocator
from shamfares.fares.sources.searchapi import SearchApiClient
from shamfares.fares.sources.supabase import SupabaseFlightSource

__all__ = [
    "FlightDataset",
    "IpGeoLocator",
    "LiveSearch",
    "RawRecord",
    "SearchApiClient",
    "SupabaseFlightSource",
]

"""Scheduled-flight dataset served by Supabase (PostgREST)."""

from typing import List

import requests

from shamfares.fares.errors import ConfigurationError, UpstreamError
from shamfares.fares.sources.base import DATASET, RawRecord

FLIGHTS_SELECT = (
    "*,"
    "airline:airlines(*),"
    "origin:destinations!flights_origin_id_fkey(*),"
    "destination:destinations!flights_destination_id_fkey(*)"
)


class SupabaseFlightSource:
    """Flight rows joined with their airline and origin/destination airports."""

    def __init__(self, base_url: str, api_key: str, timeout: int = 30):
        if not base_url or not api_key:
            raise ConfigurationError(
                "Supabase URL and key required. Set SUPABASE_URL and SUPABASE_KEY env vars"
            )
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    def list_flights(self, active_only: bool = True) -> List[RawRecord]:
        """Fetch joined flight rows ordered by price (cheapest first)."""
        params = {
            "select": FLIGHTS_SELECT,
            "order": "price_usd.asc",
        }
        if active_only:
            params["is_active"] = "eq.true"
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }
        resp = requests.get(
            f"{self.base_url}/rest/v1/flights",
            params=params,
            headers=headers,
            timeout=self.timeout,
        )
        if not resp.ok:
            raise UpstreamError(
                f"Dataset API error: {resp.text}",
                upstream_status=resp.status_code,
                body=resp.text,
            )
        try:
            rows = resp.json()
        except ValueError:
            raise UpstreamError("Dataset API error: unreadable response body", body=resp.text) from None
        if not isinstance(rows, list):
            raise UpstreamError("Dataset API error: expected a list of rows", body=resp.text)

        flights = []
        for row in rows:
            if not isinstance(row, dict):
                continue
            # Guard in case the server ignored the filter
            if active_only and row.get("is_active") is False:
                continue
            flights.append(RawRecord(source=DATASET, payload=row))
        return flights

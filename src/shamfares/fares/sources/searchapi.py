"""Live flight search and booking options via the SearchApi google_flights engine."""

import logging
from typing import Any, Dict, List, Optional

import requests

from shamfares.config import SEARCHAPI_URL
from shamfares.fares.errors import ConfigurationError, UpstreamError
from shamfares.fares.models import BookingOption, BookingRequest, SearchParams
from shamfares.fares.sources.base import LIVE, RawRecord

logger = logging.getLogger(__name__)

ENGINE = "google_flights"


class SearchApiClient:
    """Client for one-way economy searches priced in USD."""

    def __init__(self, api_key: Optional[str] = None, base_url: str = SEARCHAPI_URL, timeout: int = 30):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout

    def _base_params(self, departure_id: str, arrival_id: str, outbound_date: str) -> Dict[str, str]:
        return {
            "engine": ENGINE,
            "departure_id": departure_id,
            "arrival_id": arrival_id,
            "outbound_date": outbound_date,
            "flight_type": "one_way",
            "currency": "USD",
            "travel_class": "economy",
        }

    def _get(self, params: Dict[str, str], error_label: str) -> Dict[str, Any]:
        if not self.api_key:
            raise ConfigurationError("Server misconfiguration: missing API key")
        resp = requests.get(
            self.base_url,
            params={**params, "api_key": self.api_key},
            timeout=self.timeout,
        )
        if not resp.ok:
            logger.warning("%s (HTTP %s)", error_label, resp.status_code)
            raise UpstreamError(
                f"{error_label}: {resp.text}",
                upstream_status=resp.status_code,
                body=resp.text,
            )
        try:
            data = resp.json()
        except ValueError:
            raise UpstreamError(
                f"{error_label}: unreadable response body",
                upstream_status=resp.status_code,
                body=resp.text,
            ) from None
        if not isinstance(data, dict):
            raise UpstreamError(f"{error_label}: unexpected response shape", upstream_status=resp.status_code)
        return data

    def search_raw(self, params: SearchParams) -> Dict[str, Any]:
        """Run a search and return the upstream JSON untouched."""
        query = self._base_params(params.departure_id, params.arrival_id, params.outbound_date)
        query["adults"] = str(params.adults)
        return self._get(query, "Search API error")

    def search_flights(self, params: SearchParams) -> List[RawRecord]:
        """Run a search and return its offers as live RawRecords."""
        data = self.search_raw(params)
        offers = (data.get("best_flights") or []) + (data.get("other_flights") or [])
        logger.info(
            "Search %s-%s on %s returned %d offers",
            params.departure_id,
            params.arrival_id,
            params.outbound_date,
            len(offers),
        )
        context = {"outbound_date": params.outbound_date}
        return [RawRecord(source=LIVE, payload=offer, context=context) for offer in offers if isinstance(offer, dict)]

    def booking_options_raw(self, request: BookingRequest) -> List[Dict[str, Any]]:
        """Booking options for a previously returned fare, as upstream dicts."""
        query = self._base_params(request.departure_id, request.arrival_id, request.outbound_date)
        query["booking_token"] = request.booking_token
        data = self._get(query, "Booking options API error")
        options = data.get("booking_options") or []
        return [o for o in options if isinstance(o, dict)]

    def get_booking_options(self, request: BookingRequest) -> List[BookingOption]:
        options = []
        for payload in self.booking_options_raw(request):
            option = BookingOption.from_payload(payload)
            if option is not None:
                options.append(option)
        return options

"""Default airport detection from the caller's IP address."""

import logging
from typing import Collection, Optional

import requests

from shamfares.reference.airports import find_airport_by_city

logger = logging.getLogger(__name__)

IPAPI_URL = "https://ipapi.co/json/"


class IpGeoLocator:
    """Map the caller's city (via IP lookup) to a served airport."""

    def __init__(
        self,
        default_airport: str = "DAM",
        candidates: Optional[Collection[str]] = None,
        url: str = IPAPI_URL,
        timeout: int = 5,
    ):
        self.default_airport = default_airport
        self.candidates = set(candidates) if candidates else None
        self.url = url
        self.timeout = timeout

    def detect_user_airport(self) -> str:
        """Airport code for the caller's city; the default airport when unknown or on failure."""
        try:
            resp = requests.get(self.url, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("IP lookup failed, using %s: %s", self.default_airport, e)
            return self.default_airport

        city = data.get("city") if isinstance(data, dict) else None
        airport = find_airport_by_city(city) if city else None
        if airport is None or (self.candidates and airport.iata not in self.candidates):
            logger.info("No served airport for city %r, using %s", city, self.default_airport)
            return self.default_airport
        return airport.iata

"""Pick where to send the user to book a fare."""

import logging
from typing import Iterable, Optional
from urllib.parse import urlencode

import requests

from shamfares.fares.errors import FaresError
from shamfares.fares.models import BookingOption, BookingRequest

logger = logging.getLogger(__name__)

GOOGLE_FLIGHTS_URL = "https://www.google.com/travel/flights"


def booking_url(option: BookingOption) -> str:
    """Booking link, with post data appended as a query string when present."""
    if option.post_data:
        return f"{option.url}?{option.post_data}"
    return option.url


def google_flights_url(departure_id: str, arrival_id: str, outbound_date: str) -> str:
    """Generic search-engine link for the same route and date."""
    params = {
        "q": f"Flights from {departure_id} to {arrival_id} on {outbound_date} one way",
        "curr": "USD",
        "hl": "en",
    }
    return f"{GOOGLE_FLIGHTS_URL}?{urlencode(params)}"


def cheapest_option(options: Iterable[BookingOption]) -> Optional[BookingOption]:
    """Lowest-priced option; unpriced options only when nothing is priced. First wins ties."""
    best = None
    for option in options:
        if best is None:
            best = option
        elif option.price is not None and (best.price is None or option.price < best.price):
            best = option
    return best


def resolve_booking_url(client, request: BookingRequest) -> str:
    """URL of the cheapest booking option, or a generic search link if there is none."""
    fallback = google_flights_url(request.departure_id, request.arrival_id, request.outbound_date)
    try:
        options = client.get_booking_options(request)
    except (FaresError, requests.RequestException) as e:
        logger.warning("Booking options unavailable, falling back to search link: %s", e)
        return fallback

    option = cheapest_option(options)
    if option is None:
        logger.info("No booking options for %s-%s", request.departure_id, request.arrival_id)
        return fallback
    return booking_url(option)

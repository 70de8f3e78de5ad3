"""Unit tests for the live search API client."""

from unittest.mock import MagicMock, patch

import pytest

from shamfares.fares.errors import ConfigurationError, UpstreamError
from shamfares.fares.models import BookingRequest, SearchParams
from shamfares.fares.sources.searchapi import SearchApiClient

PARAMS = SearchParams(departure_id="DAM", arrival_id="JED", outbound_date="2025-03-05", adults=2)
BOOKING = BookingRequest(booking_token="tok123", departure_id="DAM", arrival_id="JED", outbound_date="2025-03-05")

OFFER = {
    "flights": [
        {
            "departure_airport": {"id": "DAM", "time": "2025-03-05 08:30"},
            "arrival_airport": {"id": "JED", "time": "2025-03-05 11:00"},
            "airline": "Cham Wings",
            "flight_number": "6Q 501",
        }
    ],
    "total_duration": 150,
    "price": 210,
    "booking_token": "tok123",
}


def _ok(payload) -> MagicMock:
    resp = MagicMock()
    resp.ok = True
    resp.status_code = 200
    resp.json.return_value = payload
    return resp


def _failed(status: int, text: str) -> MagicMock:
    resp = MagicMock()
    resp.ok = False
    resp.status_code = status
    resp.text = text
    return resp


class TestSearch:
    """Tests for search_raw / search_flights with mocked HTTP."""

    @patch("shamfares.fares.sources.searchapi.requests.get")
    def test_passes_correct_params(self, mock_get: MagicMock) -> None:
        mock_get.return_value = _ok({"best_flights": []})

        SearchApiClient("key").search_raw(PARAMS)

        mock_get.assert_called_once()
        params = mock_get.call_args[1]["params"]
        assert params["engine"] == "google_flights"
        assert params["departure_id"] == "DAM"
        assert params["arrival_id"] == "JED"
        assert params["outbound_date"] == "2025-03-05"
        assert params["flight_type"] == "one_way"
        assert params["currency"] == "USD"
        assert params["travel_class"] == "economy"
        assert params["adults"] == "2"
        assert params["api_key"] == "key"

    @patch("shamfares.fares.sources.searchapi.requests.get")
    def test_search_flights_collects_best_and_other(self, mock_get: MagicMock) -> None:
        mock_get.return_value = _ok({"best_flights": [OFFER], "other_flights": [OFFER, OFFER]})

        raw = SearchApiClient("key").search_flights(PARAMS)

        assert len(raw) == 3
        assert all(r.source == "live" for r in raw)
        assert raw[0].context == {"outbound_date": "2025-03-05"}
        assert raw[0].payload["booking_token"] == "tok123"

    @patch("shamfares.fares.sources.searchapi.requests.get")
    def test_no_offers(self, mock_get: MagicMock) -> None:
        mock_get.return_value = _ok({"search_metadata": {}})
        assert SearchApiClient("key").search_flights(PARAMS) == []

    @patch("shamfares.fares.sources.searchapi.requests.get")
    def test_upstream_error_keeps_body(self, mock_get: MagicMock) -> None:
        mock_get.return_value = _failed(429, '{"error": "quota exceeded"}')

        with pytest.raises(UpstreamError) as exc:
            SearchApiClient("key").search_raw(PARAMS)

        assert exc.value.status_code == 502
        assert exc.value.upstream_status == 429
        assert "quota exceeded" in exc.value.message
        assert exc.value.message.startswith("Search API error: ")

    @patch("shamfares.fares.sources.searchapi.requests.get")
    def test_unreadable_body(self, mock_get: MagicMock) -> None:
        resp = _ok(None)
        resp.json.side_effect = ValueError("not json")
        resp.text = "<html>"
        mock_get.return_value = resp

        with pytest.raises(UpstreamError, match="unreadable"):
            SearchApiClient("key").search_raw(PARAMS)

    @patch("shamfares.fares.sources.searchapi.requests.get")
    def test_missing_key(self, mock_get: MagicMock) -> None:
        with pytest.raises(ConfigurationError, match="missing API key"):
            SearchApiClient(None).search_raw(PARAMS)
        mock_get.assert_not_called()


class TestBookingOptions:
    """Tests for booking options."""

    @patch("shamfares.fares.sources.searchapi.requests.get")
    def test_passes_booking_token(self, mock_get: MagicMock) -> None:
        mock_get.return_value = _ok({"booking_options": []})

        SearchApiClient("key").booking_options_raw(BOOKING)

        params = mock_get.call_args[1]["params"]
        assert params["booking_token"] == "tok123"
        assert "adults" not in params

    @patch("shamfares.fares.sources.searchapi.requests.get")
    def test_parses_options(self, mock_get: MagicMock) -> None:
        mock_get.return_value = _ok(
            {
                "booking_options": [
                    {"book_with": "Cham Wings", "price": 210, "booking_request": {"url": "https://a"}},
                    {"book_with": "Agency", "price": 199, "booking_request": {"url": "https://b", "post_data": "x=1"}},
                    {"book_with": "Broken", "price": 150, "booking_request": {}},
                ]
            }
        )

        options = SearchApiClient("key").get_booking_options(BOOKING)

        assert [o.book_with for o in options] == ["Cham Wings", "Agency"]
        assert options[1].post_data == "x=1"

    @patch("shamfares.fares.sources.searchapi.requests.get")
    def test_missing_list_is_empty(self, mock_get: MagicMock) -> None:
        mock_get.return_value = _ok({})
        assert SearchApiClient("key").booking_options_raw(BOOKING) == []

    @patch("shamfares.fares.sources.searchapi.requests.get")
    def test_upstream_error_label(self, mock_get: MagicMock) -> None:
        mock_get.return_value = _failed(500, "boom")
        with pytest.raises(UpstreamError, match="Booking options API error: boom"):
            SearchApiClient("key").get_booking_options(BOOKING)

"""Tests for the HTTP proxy endpoints using Flask's test client."""

from unittest.mock import MagicMock

import pytest

from shamfares.config import Settings
from shamfares.fares.errors import UpstreamError
from shamfares.proxy import create_app

SEARCH_BODY = {"departure_id": "DAM", "arrival_id": "JED", "outbound_date": "2025-03-05"}
BOOKING_BODY = {**SEARCH_BODY, "booking_token": "tok123"}


@pytest.fixture
def upstream() -> MagicMock:
    return MagicMock()


@pytest.fixture
def client(upstream: MagicMock):
    app = create_app(Settings(searchapi_api_key="k"), client_factory=lambda s: upstream)
    app.config["TESTING"] = True
    return app.test_client()


class TestFlightsEndpoint:
    """Tests for POST /api/flights."""

    def test_preflight(self, client) -> None:
        resp = client.options("/api/flights")
        assert resp.status_code == 204
        assert resp.data == b""
        assert resp.headers["Access-Control-Allow-Origin"] == "*"
        assert "POST" in resp.headers["Access-Control-Allow-Methods"]
        assert resp.headers["Access-Control-Allow-Headers"] == "Content-Type"

    def test_passes_upstream_json_through(self, client, upstream: MagicMock) -> None:
        upstream.search_raw.return_value = {"best_flights": [{"price": 210}]}

        resp = client.post("/api/flights", json={**SEARCH_BODY, "adults": 2})

        assert resp.status_code == 200
        assert resp.is_json
        assert resp.get_json() == {"best_flights": [{"price": 210}]}
        assert resp.headers["Access-Control-Allow-Origin"] == "*"
        params = upstream.search_raw.call_args[0][0]
        assert params.adults == 2
        assert params.arrival_id == "JED"

    def test_adults_as_string(self, client, upstream: MagicMock) -> None:
        upstream.search_raw.return_value = {}
        resp = client.post("/api/flights", json={**SEARCH_BODY, "adults": "2"})
        assert resp.status_code == 200
        assert upstream.search_raw.call_args[0][0].adults == 2

    def test_zero_adults_rejected(self, client, upstream: MagicMock) -> None:
        resp = client.post("/api/flights", json={**SEARCH_BODY, "adults": 0})
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "Invalid adults: must be a positive integer"}
        upstream.search_raw.assert_not_called()

    def test_invalid_json(self, client, upstream: MagicMock) -> None:
        resp = client.post("/api/flights", data="not json", content_type="application/json")
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "Invalid JSON body"}
        upstream.search_raw.assert_not_called()

    @pytest.mark.parametrize(
        "override, message",
        [
            ({"departure_id": "dam"}, "Invalid departure_id: must be 3 uppercase letters"),
            ({"arrival_id": "JEDD"}, "Invalid arrival_id: must be 3 uppercase letters"),
            ({"outbound_date": "05/03/2025"}, "Invalid outbound_date: must be YYYY-MM-DD"),
        ],
    )
    def test_invalid_fields(self, client, override, message) -> None:
        resp = client.post("/api/flights", json={**SEARCH_BODY, **override})
        assert resp.status_code == 400
        assert resp.get_json() == {"error": message}
        assert resp.headers["Access-Control-Allow-Origin"] == "*"

    def test_upstream_error_is_bad_gateway(self, client, upstream: MagicMock) -> None:
        upstream.search_raw.side_effect = UpstreamError("Search API error: quota exceeded", upstream_status=429)
        resp = client.post("/api/flights", json=SEARCH_BODY)
        assert resp.status_code == 502
        assert resp.get_json() == {"error": "Search API error: quota exceeded"}

    def test_unexpected_failure(self, client, upstream: MagicMock) -> None:
        upstream.search_raw.side_effect = RuntimeError("connection reset")
        resp = client.post("/api/flights", json=SEARCH_BODY)
        assert resp.status_code == 500
        assert resp.get_json() == {"error": "Search failed: connection reset"}

    def test_missing_api_key(self, upstream: MagicMock) -> None:
        app = create_app(Settings(), client_factory=lambda s: upstream)
        resp = app.test_client().post("/api/flights", json=SEARCH_BODY)
        assert resp.status_code == 500
        assert resp.get_json() == {"error": "Server misconfiguration: missing API key"}
        upstream.search_raw.assert_not_called()

    def test_get_not_allowed(self, client) -> None:
        assert client.get("/api/flights").status_code == 405


class TestBookingOptionsEndpoint:
    """Tests for POST /api/booking-options."""

    def test_preflight(self, client) -> None:
        resp = client.options("/api/booking-options")
        assert resp.status_code == 204
        assert resp.headers["Access-Control-Allow-Origin"] == "*"

    def test_returns_options(self, client, upstream: MagicMock) -> None:
        options = [{"book_with": "Cham Wings", "price": 210, "booking_request": {"url": "https://a"}}]
        upstream.booking_options_raw.return_value = options

        resp = client.post("/api/booking-options", json=BOOKING_BODY)

        assert resp.status_code == 200
        assert resp.get_json() == {"booking_options": options}
        assert upstream.booking_options_raw.call_args[0][0].booking_token == "tok123"

    def test_missing_token(self, client) -> None:
        resp = client.post("/api/booking-options", json=SEARCH_BODY)
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "Missing booking_token"}

    def test_token_checked_before_route_fields(self, client) -> None:
        resp = client.post("/api/booking-options", json={"departure_id": "bad"})
        assert resp.get_json() == {"error": "Missing booking_token"}

    def test_unexpected_failure(self, client, upstream: MagicMock) -> None:
        upstream.booking_options_raw.side_effect = RuntimeError("timeout")
        resp = client.post("/api/booking-options", json=BOOKING_BODY)
        assert resp.status_code == 500
        assert resp.get_json() == {"error": "Booking options fetch failed: timeout"}

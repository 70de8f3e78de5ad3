"""HTTP proxy endpoints for live flight search and booking options."""

import logging
from typing import Callable, Optional

from flask import Flask, Response, jsonify, request

from shamfares.config import Settings, load_settings
from shamfares.fares.errors import ConfigurationError, FaresError
from shamfares.fares.models import BookingRequest, SearchParams
from shamfares.fares.sources.searchapi import SearchApiClient

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def _error(message: str, status: int) -> Response:
    resp = jsonify({"error": message})
    resp.status_code = status
    return resp


def _preflight() -> Response:
    resp = Response(status=204)
    resp.headers.pop("Content-Type", None)
    return resp


def create_app(
    settings: Optional[Settings] = None,
    client_factory: Optional[Callable[[Settings], SearchApiClient]] = None,
) -> Flask:
    """Build the Flask app serving /api/flights and /api/booking-options."""
    settings = settings or load_settings()
    if client_factory is None:
        def client_factory(s: Settings) -> SearchApiClient:
            return SearchApiClient(s.searchapi_api_key, base_url=s.searchapi_base_url, timeout=s.http_timeout)

    app = Flask(__name__)
    app.config["SHAMFARES_SETTINGS"] = settings

    def _parse_body():
        if not settings.has_search_api:
            raise ConfigurationError("Server misconfiguration: missing API key")
        body = request.get_json(force=True, silent=True)
        if not isinstance(body, dict):
            return None
        return body

    @app.after_request
    def add_cors_headers(resp: Response) -> Response:
        resp.headers.update(CORS_HEADERS)
        return resp

    @app.errorhandler(FaresError)
    def handle_fares_error(e: FaresError):
        if e.status_code >= 500:
            logger.error("%s: %s", type(e).__name__, e.message)
        return _error(e.message, e.status_code)

    @app.route("/api/flights", methods=["POST", "OPTIONS"])
    def flights():
        if request.method == "OPTIONS":
            return _preflight()
        body = _parse_body()
        if body is None:
            return _error("Invalid JSON body", 400)
        params = SearchParams.from_payload(body)
        try:
            data = client_factory(settings).search_raw(params)
        except FaresError:
            raise
        except Exception as e:
            logger.exception("Search failed")
            return _error(f"Search failed: {e}", 500)
        return jsonify(data)

    @app.route("/api/booking-options", methods=["POST", "OPTIONS"])
    def booking_options():
        if request.method == "OPTIONS":
            return _preflight()
        body = _parse_body()
        if body is None:
            return _error("Invalid JSON body", 400)
        booking = BookingRequest.from_payload(body)
        try:
            options = client_factory(settings).booking_options_raw(booking)
        except FaresError:
            raise
        except Exception as e:
            logger.exception("Booking options fetch failed")
            return _error(f"Booking options fetch failed: {e}", 500)
        return jsonify({"booking_options": options})

    return app


def main():
    from shamfares.logging_config import setup_logging

    settings = load_settings()
    setup_logging(settings.log_level)
    app = create_app(settings)
    app.run(host=settings.proxy_host, port=settings.proxy_port)


if __name__ == "__main__":
    main()

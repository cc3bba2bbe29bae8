"""Address geocoding used by callers to build search locations."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from . import config
from .http import HttpClient, HttpStatusError

logger = logging.getLogger(__name__)

STATUS_MESSAGES = {
    "REQUEST_DENIED": "API access denied. Please check your API key configuration.",
    "ZERO_RESULTS": 'No results found for "{address}". Please try a more specific address.',
    "OVER_QUERY_LIMIT": "Geocoding quota exceeded. Please try again later.",
    "INVALID_REQUEST": "Invalid address format.",
}
NETWORK_ERROR_MESSAGE = "Network error: Unable to reach Google Geocoding API."


class GeocodingError(RuntimeError):
    def __init__(self, status: Optional[str], message: str) -> None:
        super().__init__(message)
        self.status = status
        self.message = message


class Geocoder:
    def __init__(self, http_client: HttpClient) -> None:
        self.http = http_client

    def geocode(self, address: str) -> Dict[str, Any]:
        """Resolve free text to {"lat", "lng", "formatted_address"}."""
        address = (address or "").strip()
        if not address:
            raise GeocodingError("INVALID_REQUEST", STATUS_MESSAGES["INVALID_REQUEST"])

        try:
            data = self.http.get_json(config.GEOCODE_URL, {"address": address})
        except HttpStatusError as exc:
            self._record_failure()
            raise GeocodingError(
                str(exc.status), f"Geocoding API HTTP error: {exc.status}"
            ) from exc
        except requests.RequestException as exc:
            self._record_failure()
            raise GeocodingError(None, NETWORK_ERROR_MESSAGE) from exc

        return parse_geocode_response(data, address)

    def _record_failure(self) -> None:
        metrics = getattr(self.http, "metrics", None)
        if metrics is not None:
            metrics.inc_failure("geocode")


def parse_geocode_response(data: Dict[str, Any], address: str) -> Dict[str, Any]:
    status = data.get("status")
    if status != "OK":
        logger.error("Geocoding returned status %s: %s", status, data.get("error_message"))
        template = STATUS_MESSAGES.get(status or "", f"Geocoding failed: {status}")
        raise GeocodingError(status, template.format(address=address))

    results = data.get("results") or []
    if not results:
        raise GeocodingError(
            "ZERO_RESULTS", STATUS_MESSAGES["ZERO_RESULTS"].format(address=address)
        )

    first = results[0]
    location = (first.get("geometry") or {}).get("location") or {}
    if location.get("lat") is None or location.get("lng") is None:
        raise GeocodingError(status, f"Geocoding result for \"{address}\" has no location.")
    return {
        "lat": float(location["lat"]),
        "lng": float(location["lng"]),
        "formatted_address": first.get("formatted_address") or address,
    }

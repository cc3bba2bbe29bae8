import pytest
import requests

from resource_locator import config
from resource_locator.geocoding import Geocoder, GeocodingError, parse_geocode_response
from resource_locator.http import HttpClient, RequestMetrics


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code
        self.headers = {}
        self.text = ""

    def json(self):
        return self._payload


class FakeSession:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params})
        if self.exc is not None:
            raise self.exc
        return self.response


def make_geocoder(response=None, exc=None):
    metrics = RequestMetrics()
    http_client = HttpClient(api_key="dummy", timeout=1, metrics=metrics)
    http_client.session = FakeSession(response=response, exc=exc)
    return Geocoder(http_client), http_client, metrics


OK_PAYLOAD = {
    "status": "OK",
    "results": [
        {
            "formatted_address": "Salina, KS, USA",
            "geometry": {"location": {"lat": 38.8403, "lng": -97.6114}},
        }
    ],
}


def test_geocode_success_passes_address_and_key():
    geocoder, http_client, metrics = make_geocoder(FakeResponse(OK_PAYLOAD))

    result = geocoder.geocode("Salina, KS")

    assert result == {"lat": 38.8403, "lng": -97.6114, "formatted_address": "Salina, KS, USA"}
    (call,) = http_client.session.calls
    assert call["url"] == config.GEOCODE_URL
    assert call["params"] == {"address": "Salina, KS", "key": "dummy"}
    assert metrics.network_geocode == 1


@pytest.mark.parametrize(
    "status, fragment",
    [
        ("REQUEST_DENIED", "API access denied"),
        ("ZERO_RESULTS", 'No results found for "Nowhere"'),
        ("OVER_QUERY_LIMIT", "quota exceeded"),
        ("INVALID_REQUEST", "Invalid address format"),
        ("UNKNOWN_ERROR", "Geocoding failed: UNKNOWN_ERROR"),
    ],
)
def test_geocode_status_messages(status, fragment):
    with pytest.raises(GeocodingError) as excinfo:
        parse_geocode_response({"status": status, "results": []}, "Nowhere")
    assert excinfo.value.status == status
    assert fragment in excinfo.value.message


def test_ok_without_results_is_zero_results():
    with pytest.raises(GeocodingError) as excinfo:
        parse_geocode_response({"status": "OK", "results": []}, "Nowhere")
    assert excinfo.value.status == "ZERO_RESULTS"


def test_network_error():
    geocoder, _, metrics = make_geocoder(exc=requests.ConnectionError("boom"))

    with pytest.raises(GeocodingError) as excinfo:
        geocoder.geocode("Salina, KS")

    assert excinfo.value.message == "Network error: Unable to reach Google Geocoding API."
    assert metrics.failed_geocode == 1


def test_http_error_status():
    geocoder, _, _ = make_geocoder(FakeResponse({}, status_code=502))

    with pytest.raises(GeocodingError) as excinfo:
        geocoder.geocode("Salina, KS")

    assert "502" in excinfo.value.message


def test_blank_address_rejected_without_request():
    geocoder, http_client, _ = make_geocoder(FakeResponse(OK_PAYLOAD))

    with pytest.raises(GeocodingError):
        geocoder.geocode("   ")

    assert http_client.session.calls == []

"""Places API client: category/type mapping, search phrases and response parsing."""
from __future__ import annotations

import json
import logging
import uuid
from typing import Any, Dict, List, Mapping, Optional

import requests

from . import config
from .http import HttpClient, HttpStatusError

logger = logging.getLogger(__name__)


class ProviderError(RuntimeError):
    """A single places query failed.

    ``status`` is the HTTP status when the provider answered, otherwise None
    (transport failure or unreadable response).
    """

    def __init__(self, status: Optional[int], message: str) -> None:
        super().__init__(f"Places API error: {status} - {message}")
        self.status = status
        self.message = message


def category_place_types(
    category: str,
    table: Optional[Mapping[str, List[str]]] = None,
) -> List[str]:
    table = config.CATEGORY_PLACE_TYPES if table is None else table
    key = (category or "").strip().lower()
    types = (
        table.get(key)
        or table.get(config.FALLBACK_CATEGORY)
        or config.CATEGORY_PLACE_TYPES[config.FALLBACK_CATEGORY]
    )
    return list(types)


def build_search_phrase(
    place_type: str,
    keyword: Optional[str] = None,
    phrases: Optional[Mapping[str, str]] = None,
) -> str:
    phrases = config.PLACE_TYPE_SEARCH_PHRASES if phrases is None else phrases
    phrase = phrases.get(place_type) or config.PLACE_TYPE_PHRASE_FALLBACK.format(type=place_type)
    keyword = (keyword or "").strip()
    return f"{phrase} {keyword}" if keyword else phrase


def clamp_radius_m(radius_m: float, max_radius_m: int = config.PLACES_MAX_RADIUS_M) -> float:
    return min(float(radius_m), float(max_radius_m))


class PlacesClient:
    def __init__(
        self,
        http_client: HttpClient,
        field_mask: str = config.PLACES_FIELD_MASK,
        search_phrases: Optional[Mapping[str, str]] = None,
        max_radius_m: int = config.PLACES_MAX_RADIUS_M,
        max_result_count: int = config.PLACES_MAX_RESULT_COUNT,
        language_code: str = config.PLACES_LANGUAGE_CODE,
    ) -> None:
        self.http = http_client
        self.field_mask = field_mask
        self.search_phrases = dict(search_phrases or config.PLACE_TYPE_SEARCH_PHRASES)
        self.max_radius_m = max_radius_m
        self.max_result_count = max_result_count
        self.language_code = language_code

    def search(
        self,
        location: Dict[str, float],
        radius_m: float,
        place_type: str,
        keyword: Optional[str] = None,
        phrases: Optional[Mapping[str, str]] = None,
    ) -> List[Dict[str, Any]]:
        """Run one text search for ``place_type`` and return normalized records.

        Zero matches returns an empty list. Any provider or transport failure,
        or a payload that does not have the Places response shape, raises
        ProviderError.
        """
        phrases = self.search_phrases if phrases is None else phrases
        query = build_search_phrase(place_type, keyword, phrases)
        radius = clamp_radius_m(radius_m, self.max_radius_m)
        logger.debug("Places text search type=%s radius=%.0fm query=%r", place_type, radius, query)
        response = self.search_text(query, location, radius)
        try:
            records = parse_places_response(response)
        except (AttributeError, TypeError, ValueError) as exc:
            self._record_failure()
            raise ProviderError(None, f"malformed response: {exc}") from exc
        for record in records:
            record["photo_url"] = self.photo_url(record.get("photo_reference"))
        return records

    def search_text(self, query: str, location: Dict[str, float], radius_m: float) -> Dict[str, Any]:
        body = build_text_search_body(
            query,
            location,
            radius_m,
            max_result_count=self.max_result_count,
            language_code=self.language_code,
        )
        try:
            response = self.http.post_json(config.PLACES_TEXT_SEARCH_URL, body, self.field_mask)
        except HttpStatusError as exc:
            self._record_failure()
            raise ProviderError(exc.status, provider_error_message(exc.body)) from exc
        except ValueError as exc:
            # requests' JSONDecodeError is also a RequestException
            self._record_failure()
            raise ProviderError(None, f"malformed response: {exc}") from exc
        except requests.RequestException as exc:
            self._record_failure()
            raise ProviderError(None, f"transport failure: {exc}") from exc
        if not isinstance(response, dict):
            self._record_failure()
            raise ProviderError(None, "malformed response: expected a JSON object")
        return response

    def photo_url(self, photo_reference: Optional[str]) -> Optional[str]:
        if not photo_reference:
            return None
        base = config.PLACES_MEDIA_URL_TEMPLATE.format(name=photo_reference)
        return (
            f"{base}?maxHeightPx={config.PHOTO_MAX_HEIGHT_PX}"
            f"&maxWidthPx={config.PHOTO_MAX_WIDTH_PX}&key={self.http.api_key}"
        )

    def _record_failure(self) -> None:
        metrics = getattr(self.http, "metrics", None)
        if metrics is not None:
            metrics.inc_failure("places")


def build_text_search_body(
    query: str,
    location: Dict[str, float],
    radius_m: float,
    max_result_count: int = config.PLACES_MAX_RESULT_COUNT,
    language_code: str = config.PLACES_LANGUAGE_CODE,
) -> Dict[str, Any]:
    return {
        "textQuery": query,
        "locationBias": {
            "circle": {
                "center": {"latitude": location["lat"], "longitude": location["lng"]},
                "radius": float(radius_m),
            }
        },
        "maxResultCount": max_result_count,
        "languageCode": language_code,
    }


def provider_error_message(body: str) -> str:
    """Pull the human-readable message out of a Google error payload."""
    try:
        payload = json.loads(body)
    except (TypeError, ValueError):
        return body or "no response body"
    error = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error, dict):
        status = error.get("status")
        message = error.get("message") or ""
        return f"{status}: {message}" if status else message or body
    return body


# Adapter/mapper for Places response fields

def _first_not_none(mapping: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = mapping.get(key)
        if value is not None:
            return value
    return None


def _coordinate(mapping: Dict[str, Any], *keys: str) -> Optional[float]:
    value = _first_not_none(mapping, *keys)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValueError(f"non-numeric coordinate {value!r}")
    return float(value)


def _place_types(value: Any) -> List[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [str(t) for t in value]
    return []


def parse_places_response(response: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Normalize a Places text search payload.

    Raises ValueError when the payload is not shaped like one: ``places`` is
    not a list, an entry or its location is not an object, or a coordinate is
    not a number.
    """
    places = response.get("places") or []
    if not isinstance(places, list):
        raise ValueError(f"'places' must be a list, got {type(places).__name__}")
    parsed: List[Dict[str, Any]] = []
    for p in places:
        if not isinstance(p, dict):
            raise ValueError(f"place entry must be an object, got {type(p).__name__}")
        place_id = p.get("id") or p.get("placeId") or f"unknown_{uuid.uuid4().hex}"
        display = p.get("displayName")
        if isinstance(display, dict):
            name = display.get("text") or display.get("value")
        else:
            name = display
        location = p.get("location") or p.get("latLng") or {}
        if not isinstance(location, dict):
            raise ValueError(f"place location must be an object, got {type(location).__name__}")
        opening_hours = p.get("currentOpeningHours") or {}
        photos = p.get("photos") or []
        photo_reference = photos[0].get("name") if photos and isinstance(photos[0], dict) else None
        parsed.append(
            {
                "place_id": place_id,
                "name": name or "Unknown",
                "address": p.get("formattedAddress") or "Address not available",
                "lat": _coordinate(location, "latitude", "lat"),
                "lng": _coordinate(location, "longitude", "lng", "lon"),
                "rating": p.get("rating"),
                "price_level": p.get("priceLevel"),
                "phone": p.get("nationalPhoneNumber"),
                "website": p.get("websiteUri"),
                "open_now": opening_hours.get("openNow"),
                "types": _place_types(p.get("types")),
                "photo_reference": photo_reference,
            }
        )
    return parsed

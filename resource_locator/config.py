"""Project configuration.

Keeps API request shapes and the heuristic tables centralized here. Search
tables can be overridden from a JSON file via load_search_config, which
returns a SearchConfig instead of touching module state.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

_REPO_ROOT = Path(__file__).resolve().parent.parent

# --- API endpoints ---

PLACES_TEXT_SEARCH_URL = "https://places.googleapis.com/v1/places:searchText"
PLACES_MEDIA_URL_TEMPLATE = "https://places.googleapis.com/v1/{name}/media"
GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"

# --- Field masks ---

PLACES_FIELD_MASK = (
    "places.id,places.displayName,places.formattedAddress,places.location,"
    "places.rating,places.priceLevel,places.nationalPhoneNumber,places.websiteUri,"
    "places.photos,places.currentOpeningHours,places.types"
)

# --- Places API request shape ---

PLACES_MAX_RADIUS_M = 25000
PLACES_MAX_RESULT_COUNT = 20
PLACES_LANGUAGE_CODE = "en"
PHOTO_MAX_HEIGHT_PX = 300
PHOTO_MAX_WIDTH_PX = 400

# --- Geometry ---

METERS_PER_MILE = 1609.34
EARTH_RADIUS_MILES = 3959.0
EARTH_RADIUS_KM = 6371.0

# --- Search ---

MAX_RESULTS = 10
QUERY_DELAY_SECONDS = 0.2
DEFAULT_RADIUS_MILES = 10.0
DOMAIN_KEYWORD = "Down syndrome developmental disabilities special needs"
SOURCE_GOOGLE_PLACES = "google_places"

CATEGORIES: Tuple[str, ...] = ("medical", "therapy", "education", "support", "recreation", "other")
FALLBACK_CATEGORY = "other"

CATEGORY_PLACE_TYPES: Dict[str, List[str]] = {
    "medical": ["doctor", "hospital"],
    "therapy": ["physiotherapist", "health"],
    "education": ["school", "library"],
    "support": ["community_center", "local_government_office"],
    "recreation": ["gym", "park"],
    "other": ["establishment"],
}

PLACE_TYPE_SEARCH_PHRASES: Dict[str, str] = {
    # Medical
    "doctor": "developmental pediatrics special needs doctor Down syndrome",
    "hospital": "children hospital special needs developmental disabilities",
    "pharmacy": "pharmacy special needs medication",
    "dentist": "special needs dentist pediatric developmental disabilities",
    # Therapy
    "physiotherapist": "physical therapy special needs developmental disabilities children",
    "health": "developmental disabilities health center special needs",
    "spa": "therapeutic massage special needs sensory therapy",
    # Education
    "school": "special education school developmental disabilities inclusion",
    "university": "university special education program developmental disabilities",
    "library": "library special needs programs accessibility",
    "primary_school": "elementary school special education inclusion",
    "secondary_school": "high school special education transition program",
    # Support
    "community_center": "Down syndrome support group community center disability services",
    "place_of_worship": "church special needs ministry disability accessible",
    "local_government_office": "disability services social services developmental disabilities",
    # Recreation
    "gym": "adaptive fitness special needs inclusive recreation therapy",
    "park": "accessible park adaptive playground special needs",
    "amusement_park": "accessible theme park special needs",
    "bowling_alley": "adaptive bowling special needs league",
    "movie_theater": "sensory friendly movies special needs",
    "zoo": "accessible zoo special needs programs",
    "establishment": "Down syndrome services developmental disabilities support",
}
PLACE_TYPE_PHRASE_FALLBACK = "{type} special needs developmental disabilities"

# --- Relevance scoring ---
# (needles, points); a rule fires at most once per record.

RELEVANCE_NAME_RULES: List[Tuple[Tuple[str, ...], int]] = [
    (("down syndrome", "developmental disabilit"), 10),
    (("special needs", "inclusion"), 8),
    (("adaptive", "therapeutic"), 6),
    (("children", "pediatric"), 4),
    (("planet fitness", "la fitness"), -5),
    (("mcdonalds", "starbucks"), -10),
]
RELEVANCE_TYPE_RULES: List[Tuple[Tuple[str, ...], int]] = [
    (("health", "doctor", "hospital"), 3),
    (("school", "education"), 3),
    (("community",), 2),
    (("gas_station", "convenience_store"), -5),
]

# --- HTTP ---

HTTP_TIMEOUT_SECONDS = 20

# --- Files ---

SEARCH_CONFIG_FILENAME = "search_config.json"


@dataclass(frozen=True)
class SearchConfig:
    category_types: Dict[str, List[str]] = field(
        default_factory=lambda: {k: list(v) for k, v in CATEGORY_PLACE_TYPES.items()}
    )
    search_phrases: Dict[str, str] = field(default_factory=lambda: dict(PLACE_TYPE_SEARCH_PHRASES))
    domain_keyword: str = DOMAIN_KEYWORD
    max_results: int = MAX_RESULTS
    query_delay_seconds: float = QUERY_DELAY_SECONDS
    max_radius_m: int = PLACES_MAX_RADIUS_M


DEFAULT_SEARCH_CONFIG = SearchConfig()


def load_search_config(path: Optional[str] = None) -> SearchConfig:
    """Load search tables from a JSON file.

    Keys missing from the file keep their defaults. Returns the default
    config when the file does not exist.
    """
    if path is None:
        path = str(_REPO_ROOT / SEARCH_CONFIG_FILENAME)

    config_path = Path(path)
    if not config_path.exists():
        return DEFAULT_SEARCH_CONFIG

    with open(config_path, "r", encoding="utf-8") as f:
        data: Dict[str, Any] = json.load(f)

    category_types = {k: list(v) for k, v in CATEGORY_PLACE_TYPES.items()}
    for category, types in (data.get("category_types") or {}).items():
        if not isinstance(types, list) or not types:
            raise ValueError(f"category_types[{category!r}] must be a non-empty list")
        category_types[str(category).lower()] = [str(t) for t in types]

    search_phrases = dict(PLACE_TYPE_SEARCH_PHRASES)
    search_phrases.update({str(k): str(v) for k, v in (data.get("search_phrases") or {}).items()})

    max_results = int(data.get("max_results", MAX_RESULTS))
    if max_results <= 0:
        raise ValueError("max_results must be > 0")
    delay = float(data.get("query_delay_seconds", QUERY_DELAY_SECONDS))
    if delay < 0:
        raise ValueError("query_delay_seconds must be >= 0")
    max_radius_m = int(data.get("max_radius_m", PLACES_MAX_RADIUS_M))
    if max_radius_m <= 0 or max_radius_m > PLACES_MAX_RADIUS_M:
        raise ValueError(f"max_radius_m must be within 1..{PLACES_MAX_RADIUS_M}")

    return SearchConfig(
        category_types=category_types,
        search_phrases=search_phrases,
        domain_keyword=str(data.get("domain_keyword", DOMAIN_KEYWORD)),
        max_results=max_results,
        query_delay_seconds=delay,
        max_radius_m=max_radius_m,
    )

"""Search inputs, results and diagnostics."""
from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from . import config


@dataclass(frozen=True)
class SearchFilters:
    location: Dict[str, float]
    radius_miles: float
    categories: Tuple[str, ...]
    keyword: Optional[str] = None

    def __post_init__(self) -> None:
        # Normalize so callers may pass any sequence of categories.
        object.__setattr__(self, "categories", tuple(self.categories))
        validate_filters(self)


def validate_filters(filters: SearchFilters) -> None:
    lat = filters.location.get("lat")
    lng = filters.location.get("lng")
    if lat is None or lng is None:
        raise ValueError("location must provide 'lat' and 'lng'")
    if not -90.0 <= float(lat) <= 90.0:
        raise ValueError(f"Latitude out of range: {lat}")
    if not -180.0 <= float(lng) <= 180.0:
        raise ValueError(f"Longitude out of range: {lng}")
    radius = float(filters.radius_miles)
    if not math.isfinite(radius) or radius <= 0:
        raise ValueError(f"radius_miles must be a positive number, got {filters.radius_miles}")


@dataclass
class AggregatedResult:
    place_id: str
    name: str
    category: str
    address: str
    location: Dict[str, float]
    distance_miles: float
    rating: Optional[float] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    photo_url: Optional[str] = None
    source: str = config.SOURCE_GOOGLE_PLACES
    types: List[str] = field(default_factory=list)
    relevance_score: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class QueryFailure:
    category: str
    place_type: str
    status: Optional[int]
    message: str


@dataclass
class SearchReport:
    results: List[AggregatedResult]
    queries_attempted: int = 0
    failures: List[QueryFailure] = field(default_factory=list)
    raw_count: int = 0
    deduped_count: int = 0

    @property
    def failed_count(self) -> int:
        return len(self.failures)

    @property
    def all_failed(self) -> bool:
        return self.queries_attempted > 0 and self.failed_count == self.queries_attempted

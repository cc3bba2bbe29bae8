"""Resource search orchestration.

Expands each requested category into provider place-type queries, runs them
one at a time behind the rate limiter, and turns whatever came back into a
short proximity-ordered list. A failing query only costs its own batch.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from . import config
from .dedup import dedupe_results
from .geo import distance_miles, miles_to_meters
from .models import AggregatedResult, QueryFailure, SearchFilters, SearchReport
from .places_client import PlacesClient, ProviderError, category_place_types
from .rate_limit import FixedDelayRateLimiter
from .scoring import score_relevance

logger = logging.getLogger(__name__)


def format_category_label(category: str) -> str:
    category = (category or "").strip()
    return category[:1].upper() + category[1:]


def build_query_keyword(domain_keyword: str, keyword: Optional[str]) -> str:
    extra = (keyword or "").strip()
    return f"{domain_keyword} {extra}".strip() if extra else domain_keyword


def to_aggregated_result(
    record: Dict[str, Any],
    category_label: str,
    origin: Dict[str, float],
) -> Optional[AggregatedResult]:
    lat = record.get("lat")
    lng = record.get("lng")
    if lat is None or lng is None:
        return None
    location = {"lat": float(lat), "lng": float(lng)}
    return AggregatedResult(
        place_id=record["place_id"],
        name=record.get("name") or "Unknown",
        category=category_label,
        address=record.get("address") or "Address not available",
        location=location,
        distance_miles=distance_miles(origin, location),
        rating=record.get("rating"),
        phone=record.get("phone"),
        website=record.get("website"),
        photo_url=record.get("photo_url"),
        source=config.SOURCE_GOOGLE_PLACES,
        types=list(record.get("types") or []),
    )


def build_batch(
    records: Iterable[Dict[str, Any]],
    category_label: str,
    filters: SearchFilters,
) -> List[AggregatedResult]:
    """Filter one query's records by radius and relevance, best score first."""
    batch: List[AggregatedResult] = []
    for record in records:
        result = to_aggregated_result(record, category_label, filters.location)
        if result is None:
            logger.debug("Skipping %s: no location", record.get("place_id"))
            continue
        if not result.distance_miles <= filters.radius_miles:
            logger.debug(
                "Filtered out %s - %.2f miles > %s miles",
                result.name,
                result.distance_miles,
                filters.radius_miles,
            )
            continue
        result.relevance_score = score_relevance(record)
        if result.relevance_score <= 0:
            logger.debug("Filtered out %s - relevance %s", result.name, result.relevance_score)
            continue
        batch.append(result)
    # list.sort is stable, including with reverse=True
    batch.sort(key=lambda r: r.relevance_score, reverse=True)
    return batch


class ResourceAggregator:
    def __init__(
        self,
        places_client: PlacesClient,
        rate_limiter: Optional[FixedDelayRateLimiter] = None,
        search_config: Optional[config.SearchConfig] = None,
    ) -> None:
        self.places_client = places_client
        self.search_config = search_config or config.DEFAULT_SEARCH_CONFIG
        if rate_limiter is None:
            rate_limiter = FixedDelayRateLimiter(self.search_config.query_delay_seconds)
        self.rate_limiter = rate_limiter

    def search_resources(self, filters: SearchFilters) -> List[AggregatedResult]:
        """Return up to max_results relevant places, nearest first.

        Provider failures never propagate; a total outage yields [].
        """
        return self.search_resources_with_report(filters).results

    def search_resources_with_report(self, filters: SearchFilters) -> SearchReport:
        report = SearchReport(results=[])
        if not filters.categories:
            logger.info("No categories requested; skipping search")
            return report

        cfg = self.search_config
        radius_m = min(miles_to_meters(filters.radius_miles), float(cfg.max_radius_m))
        keyword = build_query_keyword(cfg.domain_keyword, filters.keyword)
        logger.info(
            "Searching %s within %s miles (%.0f m request radius)",
            ",".join(filters.categories),
            filters.radius_miles,
            radius_m,
        )

        accumulated: List[AggregatedResult] = []
        for category in filters.categories:
            label = format_category_label(category)
            for place_type in category_place_types(category, cfg.category_types):
                report.queries_attempted += 1
                self.rate_limiter.wait()
                try:
                    records = self.places_client.search(
                        filters.location,
                        radius_m,
                        place_type,
                        keyword=keyword,
                        phrases=cfg.search_phrases,
                    )
                except ProviderError as exc:
                    logger.warning(
                        "Query failed for category=%s type=%s: %s", category, place_type, exc
                    )
                    report.failures.append(
                        QueryFailure(
                            category=category,
                            place_type=place_type,
                            status=exc.status,
                            message=exc.message,
                        )
                    )
                    continue
                batch = build_batch(records, label, filters)
                logger.debug(
                    "category=%s type=%s raw=%s kept=%s", category, place_type, len(records), len(batch)
                )
                accumulated.extend(batch)

        report.raw_count = len(accumulated)
        unique = dedupe_results(accumulated)
        report.deduped_count = len(unique)
        unique.sort(key=lambda r: r.distance_miles)
        report.results = unique[: cfg.max_results]

        if report.failures:
            logger.warning(
                "%s of %s queries failed", report.failed_count, report.queries_attempted
            )
        logger.info(
            "Search finished: %s candidates, %s unique, %s returned",
            report.raw_count,
            report.deduped_count,
            len(report.results),
        )
        return report

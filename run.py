"""CLI entrypoint."""
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv as _load_dotenv

from resource_locator import config
from resource_locator.aggregator import ResourceAggregator
from resource_locator.geocoding import Geocoder, GeocodingError
from resource_locator.http import HttpClient, RequestMetrics
from resource_locator.models import SearchFilters
from resource_locator.places_client import PlacesClient
from resource_locator.rate_limit import FixedDelayRateLimiter
from resource_locator.reporting import (
    ensure_dir,
    render_summary,
    write_results_csv,
    write_results_json,
)

logger = logging.getLogger("run")

API_KEY_ENV = "GOOGLE_MAPS_API_KEY"


def _repo_root() -> Path:
    return Path(__file__).resolve().parent


def load_env(path: str = ".env", root_dir: Optional[Path] = None) -> None:
    """Optionally load a repo-root .env file without overriding real env vars."""
    root = Path(root_dir) if root_dir else _repo_root()
    env_path = (root / path).resolve()
    if not env_path.exists():
        return
    _load_dotenv(dotenv_path=env_path, override=False)


def parse_categories(raw: str) -> List[str]:
    categories = [c.strip().lower() for c in (raw or "").split(",") if c.strip()]
    unknown = [c for c in categories if c not in config.CATEGORIES]
    if unknown:
        raise argparse.ArgumentTypeError(
            f"Unknown categories: {', '.join(unknown)} (choose from {', '.join(config.CATEGORIES)})"
        )
    return categories


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Find disability-support resources near a location")
    where = parser.add_mutually_exclusive_group()
    where.add_argument("--address", type=str, default=None, help="Free-text address to geocode")
    where.add_argument("--lat", type=float, default=None, help="Latitude (requires --lng)")
    parser.add_argument("--lng", type=float, default=None, help="Longitude (requires --lat)")
    parser.add_argument(
        "--radius-miles",
        type=float,
        default=config.DEFAULT_RADIUS_MILES,
        help=f"Search radius in miles (default: {config.DEFAULT_RADIUS_MILES:g})",
    )
    parser.add_argument(
        "--categories",
        type=parse_categories,
        default=["medical"],
        help=f"Comma-separated categories: {','.join(config.CATEGORIES)} (default: medical)",
    )
    parser.add_argument("--keyword", type=str, default=None, help="Extra words appended to every query")
    parser.add_argument("--config", type=str, default=None, help="Search config JSON path")
    parser.add_argument("--out", type=str, default=None, help="Directory for results files")
    parser.add_argument("--format", choices=["json", "csv"], default="json")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    parser.add_argument(
        "--preflight",
        action="store_true",
        help="Report configuration (redacted) and exit without network calls",
    )
    args = parser.parse_args(argv)
    if (args.lat is None) != (args.lng is None):
        parser.error("--lat and --lng must be given together")
    return args


def run_preflight(api_key: Optional[str], config_path: Optional[str]) -> int:
    search_config = config.load_search_config(config_path)
    print("Preflight (redacted):")
    print(f"- {API_KEY_ENV} length: {len((api_key or '').strip())}")
    print(f"- categories: {', '.join(sorted(search_config.category_types))}")
    print(f"- max results: {search_config.max_results}")
    print(f"- query delay: {search_config.query_delay_seconds}s")
    return 0 if api_key else 2


def main(argv: Optional[List[str]] = None) -> int:
    load_env()
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    api_key = (os.environ.get(API_KEY_ENV) or "").strip()
    if args.preflight:
        return run_preflight(api_key, args.config)
    if not api_key:
        logger.error("%s is not set", API_KEY_ENV)
        return 2

    try:
        search_config = config.load_search_config(args.config)
    except ValueError as exc:
        logger.error("Invalid search config: %s", exc)
        return 2

    metrics = RequestMetrics()
    http_client = HttpClient(api_key, timeout=config.HTTP_TIMEOUT_SECONDS, metrics=metrics)

    if args.address:
        try:
            geocoded = Geocoder(http_client).geocode(args.address)
        except GeocodingError as exc:
            logger.error("%s", exc.message)
            return 1
        location = {"lat": geocoded["lat"], "lng": geocoded["lng"]}
        print(f"Searching near {geocoded['formatted_address']}")
    elif args.lat is not None and args.lng is not None:
        location = {"lat": args.lat, "lng": args.lng}
    else:
        logger.error("Provide --address or both --lat and --lng")
        return 2

    try:
        filters = SearchFilters(
            location=location,
            radius_miles=args.radius_miles,
            categories=args.categories,
            keyword=args.keyword,
        )
    except ValueError as exc:
        logger.error("%s", exc)
        return 2

    places_client = PlacesClient(
        http_client,
        max_radius_m=search_config.max_radius_m,
    )
    aggregator = ResourceAggregator(
        places_client,
        rate_limiter=FixedDelayRateLimiter(search_config.query_delay_seconds),
        search_config=search_config,
    )
    report = aggregator.search_resources_with_report(filters)

    for line in render_summary(report):
        print(line)
    for idx, result in enumerate(report.results, start=1):
        print(f"{idx:2d}. {result.name} [{result.category}] {result.distance_miles:.1f} mi - {result.address}")
    logger.info(
        "Requests: places=%s (failed %s) geocode=%s",
        metrics.network_places,
        metrics.failed_places,
        metrics.network_geocode,
    )

    if args.out:
        ensure_dir(args.out)
        if args.format == "csv":
            path = os.path.join(args.out, "results.csv")
            write_results_csv(path, report.results)
        else:
            path = os.path.join(args.out, "results.json")
            write_results_json(path, report.results)
        print(f"Wrote {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Geospatial helpers."""
from __future__ import annotations

import math
from typing import Dict

from . import config


def _haversine(lat1: float, lon1: float, lat2: float, lon2: float, r: float) -> float:
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)

    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return r * c


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    return _haversine(lat1, lon1, lat2, lon2, config.EARTH_RADIUS_KM)


def haversine_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    return _haversine(lat1, lon1, lat2, lon2, config.EARTH_RADIUS_MILES)


def distance_miles(a: Dict[str, float], b: Dict[str, float]) -> float:
    """Great-circle distance between two {"lat", "lng"} points, in miles.

    Invalid coordinates are not checked; NaN inputs give NaN.
    """
    return haversine_miles(a["lat"], a["lng"], b["lat"], b["lng"])


def miles_to_meters(miles: float) -> float:
    return miles * config.METERS_PER_MILE

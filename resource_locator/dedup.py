"""Collapse repeated places across queries."""
from __future__ import annotations

from typing import Iterable, List, Set

from .models import AggregatedResult


def dedupe_results(results: Iterable[AggregatedResult]) -> List[AggregatedResult]:
    """Keep the first result seen for each place_id; later ones are dropped whole."""
    seen: Set[str] = set()
    unique: List[AggregatedResult] = []
    for result in results:
        if result.place_id in seen:
            continue
        seen.add(result.place_id)
        unique.append(result)
    return unique

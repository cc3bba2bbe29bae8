"""Keyword relevance scoring for disability-support places."""
from __future__ import annotations

from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

from . import config

Rule = Tuple[Tuple[str, ...], int]


def _matches_any(text: str, needles: Iterable[str]) -> bool:
    if not text:
        return False
    for needle in needles:
        if needle and needle in text:
            return True
    return False


def _apply_rules(text: str, rules: Sequence[Rule]) -> int:
    return sum(points for needles, points in rules if _matches_any(text, needles))


def score_relevance(
    place: Dict[str, Any],
    name_rules: Optional[Sequence[Rule]] = None,
    type_rules: Optional[Sequence[Rule]] = None,
) -> int:
    """Additive keyword score over the lower-cased name and joined types.

    A place is relevant only when the score is strictly positive. Ties are
    left to the caller.
    """
    name_rules = config.RELEVANCE_NAME_RULES if name_rules is None else name_rules
    type_rules = config.RELEVANCE_TYPE_RULES if type_rules is None else type_rules
    name = (place.get("name") or "").lower()
    types = " ".join(str(t) for t in (place.get("types") or [])).lower()
    return _apply_rules(name, name_rules) + _apply_rules(types, type_rules)


def is_relevant(place: Dict[str, Any]) -> bool:
    return score_relevance(place) > 0

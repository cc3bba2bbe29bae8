from resource_locator.dedup import dedupe_results
from resource_locator.models import AggregatedResult


def _result(place_id, name, distance):
    return AggregatedResult(
        place_id=place_id,
        name=name,
        category="Medical",
        address="addr",
        location={"lat": 0.0, "lng": 0.0},
        distance_miles=distance,
    )


def test_first_occurrence_wins_entirely():
    first = _result("place-42", "From doctor query", 2.0)
    second = _result("place-42", "From hospital query", 1.0)
    other = _result("place-7", "Other", 3.0)

    unique = dedupe_results([first, other, second])

    assert unique == [first, other]
    assert unique[0].name == "From doctor query"


def test_empty_input():
    assert dedupe_results([]) == []

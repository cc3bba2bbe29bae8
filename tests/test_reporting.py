import csv
import json

from resource_locator.models import AggregatedResult, QueryFailure, SearchReport
from resource_locator.reporting import render_summary, write_results_csv, write_results_json


def _result(place_id, distance):
    return AggregatedResult(
        place_id=place_id,
        name=f"Clinic {place_id}",
        category="Medical",
        address="addr",
        location={"lat": 39.0, "lng": -98.0},
        distance_miles=distance,
        rating=4.5,
        types=["doctor"],
        relevance_score=7,
    )


def test_write_results_json(tmp_path):
    path = tmp_path / "results.json"
    write_results_json(str(path), [_result("p1", 1.234)])

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload[0]["place_id"] == "p1"
    assert payload[0]["distance_miles"] == 1.234
    assert list(tmp_path.iterdir()) == [path]


def test_write_results_csv(tmp_path):
    path = tmp_path / "results.csv"
    write_results_csv(str(path), [_result("p1", 1.234), _result("p2", 2.0)])

    with open(path, newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert [r["place_id"] for r in rows] == ["p1", "p2"]
    assert rows[0]["distance_miles"] == "1.23"
    assert rows[0]["lat"] == "39.0"
    assert "types" not in rows[0]


def test_write_results_csv_empty_has_header(tmp_path):
    path = tmp_path / "results.csv"
    write_results_csv(str(path), [])
    assert path.read_text(encoding="utf-8").startswith("place_id,name,category")


def test_render_summary_distinguishes_outage_from_empty():
    outage = SearchReport(
        results=[],
        queries_attempted=1,
        failures=[QueryFailure("medical", "doctor", 503, "UNAVAILABLE")],
    )
    empty = SearchReport(results=[], queries_attempted=2)

    outage_lines = render_summary(outage)
    empty_lines = render_summary(empty)

    assert any("All provider queries failed" in line for line in outage_lines)
    assert any("failed medical/doctor: 503 UNAVAILABLE" in line for line in outage_lines)
    assert any("No relevant places found" in line for line in empty_lines)


def test_render_summary_distance_range():
    report = SearchReport(results=[_result("p1", 0.42), _result("p2", 3.96)], queries_attempted=2)
    assert "Distance range: 0.4 - 4.0 miles" in render_summary(report)

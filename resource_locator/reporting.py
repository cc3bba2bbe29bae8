"""Output reporting helpers."""
from __future__ import annotations

import csv
import json
import os
import tempfile
from contextlib import contextmanager
from typing import Iterable, Iterator, List, Optional, TextIO

from .models import AggregatedResult, SearchReport

RESULT_CSV_FIELDS = [
    "place_id",
    "name",
    "category",
    "address",
    "lat",
    "lng",
    "distance_miles",
    "rating",
    "phone",
    "website",
    "photo_url",
    "source",
    "relevance_score",
]


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def _fsync_dir(path: str) -> None:
    try:
        dir_fd = os.open(path, os.O_DIRECTORY)
    except OSError:
        return
    try:
        os.fsync(dir_fd)
    except OSError:
        pass
    finally:
        os.close(dir_fd)


@contextmanager
def atomic_writer(
    path: str,
    mode: str = "w",
    encoding: str = "utf-8",
    newline: Optional[str] = None,
) -> Iterator[TextIO]:
    dir_path = os.path.dirname(path) or "."
    base = os.path.basename(path)
    fd, tmp_path = tempfile.mkstemp(prefix=f".{base}.", suffix=".tmp", dir=dir_path)
    try:
        with os.fdopen(fd, mode, encoding=encoding, newline=newline) as f:
            yield f
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
        _fsync_dir(dir_path)
    except Exception:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def write_results_json(path: str, results: Iterable[AggregatedResult]) -> None:
    with atomic_writer(path, mode="w", encoding="utf-8") as f:
        json.dump([r.to_dict() for r in results], f, ensure_ascii=False, indent=2)


def write_results_csv(path: str, results: Iterable[AggregatedResult]) -> None:
    with atomic_writer(path, mode="w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=RESULT_CSV_FIELDS, extrasaction="ignore")
        writer.writeheader()
        for result in results:
            row = result.to_dict()
            row["lat"] = result.location["lat"]
            row["lng"] = result.location["lng"]
            row["distance_miles"] = round(result.distance_miles, 2)
            writer.writerow(row)


def render_summary(report: SearchReport) -> List[str]:
    lines = [
        f"Queries: {report.queries_attempted} attempted, {report.failed_count} failed",
        f"Candidates: {report.raw_count} relevant, {report.deduped_count} unique",
        f"Results: {len(report.results)}",
    ]
    if report.results:
        nearest = report.results[0].distance_miles
        farthest = report.results[-1].distance_miles
        lines.append(f"Distance range: {nearest:.1f} - {farthest:.1f} miles")
    elif report.all_failed:
        lines.append("All provider queries failed; results are unavailable, not empty.")
    else:
        lines.append("No relevant places found within the search radius.")
    for failure in report.failures:
        lines.append(
            f"- failed {failure.category}/{failure.place_type}: "
            f"{failure.status} {failure.message}"
        )
    return lines

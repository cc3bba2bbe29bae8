"""HTTP client and request metrics."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)


class HttpStatusError(RuntimeError):
    def __init__(self, status: int, url: str, body: str = "") -> None:
        message = f"HTTP {status} from {url}"
        if body:
            message = f"{message}: {body}"
        super().__init__(message)
        self.status = status
        self.url = url
        self.body = body


@dataclass
class RequestMetrics:
    network_places: int = 0
    network_geocode: int = 0
    failed_places: int = 0
    failed_geocode: int = 0

    def inc_network(self, kind: str) -> None:
        if kind == "places":
            self.network_places += 1
        elif kind == "geocode":
            self.network_geocode += 1
        else:
            raise ValueError(f"Unknown request kind: {kind}")

    def inc_failure(self, kind: str) -> None:
        if kind == "places":
            self.failed_places += 1
        elif kind == "geocode":
            self.failed_geocode += 1
        else:
            raise ValueError(f"Unknown request kind: {kind}")


class HttpClient:
    """Single-attempt JSON transport over a shared requests session.

    Failed requests are not retried: callers decide whether a failure is
    fatal. Timeouts surface as requests.Timeout.
    """

    def __init__(
        self,
        api_key: str,
        timeout: float = 20,
        metrics: Optional[RequestMetrics] = None,
    ) -> None:
        self.api_key = api_key
        self.timeout = timeout
        self.metrics = metrics
        self.session = requests.Session()

    def post_json(
        self,
        url: str,
        body: Dict[str, Any],
        field_mask: str,
        kind: str = "places",
        extra_headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        headers = {
            "X-Goog-Api-Key": self.api_key,
            "X-Goog-FieldMask": field_mask,
            "Content-Type": "application/json",
        }
        if extra_headers:
            headers.update(extra_headers)

        self._count(kind)
        resp = self.session.post(url, data=json.dumps(body), headers=headers, timeout=self.timeout)
        return self._decode(resp, url)

    def get_json(self, url: str, params: Dict[str, Any], kind: str = "geocode") -> Dict[str, Any]:
        query = dict(params)
        query["key"] = self.api_key
        self._count(kind)
        resp = self.session.get(url, params=query, timeout=self.timeout)
        return self._decode(resp, url)

    def _count(self, kind: str) -> None:
        if self.metrics is not None:
            self.metrics.inc_network(kind)

    def _decode(self, resp: requests.Response, url: str) -> Dict[str, Any]:
        status = resp.status_code
        if 200 <= status < 300:
            try:
                return resp.json()
            except ValueError:
                logger.error("Non-JSON response from %s", url)
                raise
        logger.error("HTTP %s from %s", status, url)
        raise HttpStatusError(status, url, resp.text or "")

import logging
from typing import Any, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .. import config

LOGGER = logging.getLogger(__name__)

MAX_RETRIES = 2
FALLBACK_SEARCHES = 5


class JobSourceError(Exception):
    """The job source could not be reached or refused the request."""


def _requests_session() -> requests.Session:
    """Create a resilient HTTP session for the job-source proxy."""
    retry = Retry(
        total=MAX_RETRIES,
        connect=MAX_RETRIES,
        read=MAX_RETRIES,
        status=MAX_RETRIES,
        backoff_factor=0.5,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=("GET", "POST"),
        raise_on_status=False,
        respect_retry_after_header=True,
    )

    adapter = HTTPAdapter(max_retries=retry)
    session = requests.Session()
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    session.headers.update(
        {
            "User-Agent": "BidBoard/1.0",
            "Accept": "application/json",
        }
    )
    return session


def _rss_items(data: Dict[str, Any]) -> List[Dict[str, Any]]:
    """data.rss.channel[0].item, the XML-to-JSON layout of a proxied feed."""
    try:
        return data["rss"]["channel"][0]["item"] or []
    except (KeyError, IndexError, TypeError):
        return []


def _wrap(items: List[Dict[str, Any]], source: str, keyword: str = "") -> List[Dict[str, Any]]:
    return [
        {"source": source, "keyword": keyword, "payload": item}
        for item in items
        if isinstance(item, dict)
    ]


def unpack_response(body: Any, keyword: str = "") -> List[Dict[str, Any]]:
    """
    Accepts either a flat ``{"success": true, "jobs": [...]}`` reply or the
    per-keyword ``{"results": [{"keyword": ..., "jobs" | "data": ...}]}`` one.
    """
    if not isinstance(body, dict):
        raise JobSourceError(f"Unexpected response type: {type(body).__name__}")
    if body.get("success") is False:
        raise JobSourceError(body.get("error") or "Job source reported failure")

    raw: List[Dict[str, Any]] = []
    if isinstance(body.get("jobs"), list):
        raw.extend(_wrap(body["jobs"], "api", keyword))
    if isinstance(body.get("data"), dict):
        raw.extend(_wrap(_rss_items(body["data"]), "rss", keyword))

    for result in body.get("results") or []:
        if not isinstance(result, dict):
            continue
        result_keyword = result.get("keyword", keyword)
        if isinstance(result.get("jobs"), list):
            raw.extend(_wrap(result["jobs"], "api", result_keyword))
        if isinstance(result.get("data"), dict):
            raw.extend(_wrap(_rss_items(result["data"]), "rss", result_keyword))

    return raw


class JobSourceClient:
    """HTTP client for the job-listing proxy."""

    def __init__(
        self,
        base_url: str = config.JOB_SOURCE_URL,
        status_timeout: float = config.STATUS_TIMEOUT_SECONDS,
        fetch_timeout: float = config.FETCH_TIMEOUT_SECONDS,
        batch_path: str = config.JOB_SOURCE_BATCH_PATH,
        search_path: str = config.JOB_SOURCE_SEARCH_PATH,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.status_timeout = status_timeout
        self.fetch_timeout = fetch_timeout
        self.session = session or _requests_session()
        self.batch_path = batch_path
        self.search_path = search_path

    def check_status(self) -> bool:
        """Liveness probe: any 2xx on the base URL within the timeout."""
        try:
            # A bare GET, no retries; liveness should answer fast or not at all
            response = requests.get(self.base_url, timeout=self.status_timeout)
        except requests.RequestException as exc:
            LOGGER.warning("🔌 Job source offline: %s", exc)
            return False
        if not response.ok:
            LOGGER.warning("🔌 Job source answered HTTP %s", response.status_code)
        return response.ok

    def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = self.session.request(
                method, f"{self.base_url}{path}", timeout=self.fetch_timeout, **kwargs
            )
            response.raise_for_status()
            return response.json()
        except requests.RequestException as exc:
            raise JobSourceError(f"{method} {path} failed: {exc}") from exc
        except ValueError as exc:
            raise JobSourceError(f"{method} {path} returned invalid JSON: {exc}") from exc

    def fetch_batch(self, keywords: List[str], limit: Optional[int] = None) -> List[Dict[str, Any]]:
        payload: Dict[str, Any] = {"keywords": list(keywords)}
        if limit:
            payload["limit"] = limit

        body = self._request("POST", self.batch_path, json=payload)
        raw = unpack_response(body)
        LOGGER.info("✅ Retrieved %d raw jobs for %d keywords.", len(raw), len(keywords))
        return raw

    def search(self, keyword: str) -> List[Dict[str, Any]]:
        body = self._request("GET", self.search_path, params={"keyword": keyword})
        return unpack_response(body, keyword)

    def fetch_jobs(self, keywords: List[str], limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Batch first; if the batch call fails, search the first few keywords
        one by one. Raises only when every attempt failed.
        """
        try:
            return self.fetch_batch(keywords, limit)
        except JobSourceError as exc:
            LOGGER.warning("Batch fetch failed, falling back to single searches: %s", exc)

        raw: List[Dict[str, Any]] = []
        failures = 0
        attempts = keywords[:FALLBACK_SEARCHES]
        for keyword in attempts:
            try:
                raw.extend(self.search(keyword))
            except JobSourceError as exc:
                failures += 1
                LOGGER.error("Error fetching '%s': %s", keyword, exc)

        if attempts and failures == len(attempts):
            raise JobSourceError("Job source unreachable: batch and all single searches failed")
        return raw

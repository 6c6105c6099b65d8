"""Client utilities for the remote scraping API."""

import logging
from typing import Any, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from leads_dashboard.core.config import get_settings, require_api_base_url

logger = logging.getLogger(__name__)
_SESSION: Optional[requests.Session] = None


class ScrapeApiError(RuntimeError):
    """Raised when the scraping API fails or returns an unusable payload."""


def get_session() -> requests.Session:
    """Return the shared session, mounting bounded retries on first use."""
    global _SESSION
    if _SESSION is None:
        settings = get_settings()
        retries = Retry(
            total=settings.max_retries,
            backoff_factor=0.5,
            status_forcelist=(500, 502, 503, 504),
            allowed_methods=("POST", "GET"),
            raise_on_status=False,
        )
        session = requests.Session()
        session.mount("http://", HTTPAdapter(max_retries=retries))
        session.mount("https://", HTTPAdapter(max_retries=retries))
        _SESSION = session
    return _SESSION


def _error_message(response: requests.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return f"Request failed with status code {response.status_code}"


def _request(method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
    url = f"{require_api_base_url()}{path}"
    timeout = get_settings().request_timeout
    logger.info("Calling scrape API %s %s params=%s", method, path, kwargs.get("params"))
    try:
        response = get_session().request(method, url, timeout=timeout, **kwargs)
    except requests.RequestException as exc:
        logger.warning("Scrape API %s %s failed: %s", method, path, exc)
        raise ScrapeApiError(str(exc)) from exc

    if not (200 <= response.status_code < 300):
        message = _error_message(response)
        logger.error("Scrape API returned non-2xx status (%s): %s", response.status_code, message)
        raise ScrapeApiError(message)

    try:
        payload = response.json()
    except ValueError as exc:
        raise ScrapeApiError("Invalid API response") from exc
    if not isinstance(payload, dict):
        raise ScrapeApiError("Invalid API response")
    return payload


def search_by_category(query: str, location: str, limit: int) -> List[Dict[str, Any]]:
    """Fetch listing records, e.g. restaurants in a city."""
    payload = _request(
        "GET",
        "/api/scrape",
        params={"query": query, "location": location, "limit": limit},
    )
    data = payload.get("data") or []
    if not isinstance(data, list):
        raise ScrapeApiError("Invalid API response")
    return [item for item in data if isinstance(item, dict)]


def search_companies(query: str, location: str, frompage: int, topage: int) -> Dict[str, Any]:
    """Search TrustPilot companies over a page window; returns ``{total, results}``."""
    payload = _request(
        "GET",
        "/api/trustpilot",
        params={
            "query": query,
            "location": location or "",
            "frompage": str(frompage),
            "topage": str(topage),
        },
    )
    results = payload.get("results")
    if not payload.get("success") or not isinstance(results, list):
        logger.error("company search returned malformed payload: keys=%s", list(payload.keys())[:10])
        raise ScrapeApiError("Invalid API response")
    urls = [str(url) for url in results if url]
    if len(urls) != len(results):
        logger.warning("company search skipped %d empty result entries", len(results) - len(urls))
    return {"total": payload.get("total") or len(urls), "results": urls}


def enrich_profiles(urls: List[str]) -> Dict[str, Any]:
    """Post TrustPilot URLs for profile enrichment; returns ``{total, results}``."""
    payload = _request("POST", "/api/trustpilot-profile", json={"urls": list(urls)})
    results = payload.get("results") or []
    if not isinstance(results, list):
        raise ScrapeApiError("Invalid API response")
    return {
        "total": payload.get("total") or 0,
        "results": [item for item in results if isinstance(item, dict)],
    }

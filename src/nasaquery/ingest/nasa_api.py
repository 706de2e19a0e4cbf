"""Client for interacting with NASA's public APIs using an API key."""
from __future__ import annotations

import json
import logging
from datetime import date
from typing import Any, Dict, Optional

import requests

from nasaquery.config import get_settings, resolve_api_key
from nasaquery.errors import ApiError, MalformedResponseError, RequestError

BASE_URL = "https://api.nasa.gov"
APOD_URL = f"{BASE_URL}/planetary/apod"
MARS_PHOTOS_URL = f"{BASE_URL}/mars-photos/api/v1/rovers/{{rover}}/photos"
EPIC_NATURAL_URL = f"{BASE_URL}/EPIC/api/natural/date/{{date}}"
NEO_FEED_URL = f"{BASE_URL}/neo/rest/v1/feed"
CMR_COLLECTIONS_URL = "https://cmr.earthdata.nasa.gov/search/collections.json"

LOGGER = logging.getLogger(__name__)

_ERROR_EXCERPT_CHARS = 200


class NASAAPIClient:
    """Thin wrapper around NASA APIs that injects the API key and handles errors.

    Every method issues exactly one GET and either returns the decoded JSON
    payload or raises one of the errors from :mod:`nasaquery.errors`.
    """

    def __init__(self, api_key: Optional[str] = None, timeout: Optional[int] = None) -> None:
        self.api_key = resolve_api_key(api_key)
        self.timeout = timeout if timeout is not None else get_settings().request_timeout

    def _get(self, url: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        try:
            response = requests.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise RequestError(f"Request to {url} failed: {exc}") from exc
        if response.status_code != 200:
            excerpt = (response.text or "")[:_ERROR_EXCERPT_CHARS].strip()
            raise ApiError(response.status_code, excerpt or None)
        return response

    def fetch(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET ``url`` and decode the UTF-8 JSON body."""
        safe_params = {k: v for k, v in (params or {}).items() if k != "api_key"}
        LOGGER.debug("GET %s params=%s", url, safe_params)
        response = self._get(url, params)
        try:
            return json.loads(response.content.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise MalformedResponseError(f"Response from {url} is not valid JSON: {exc}") from exc

    def fetch_bytes(self, url: str) -> bytes:
        """Download a binary resource such as an image file."""
        LOGGER.debug("GET %s (binary)", url)
        return self._get(url).content

    def _nasa_params(self, **params: Any) -> Dict[str, Any]:
        params["api_key"] = self.api_key
        return params

    def apod(self, start_date: date, end_date: date) -> Any:
        """Fetch Astronomy Picture of the Day metadata for a date range."""
        params = self._nasa_params(start_date=start_date.isoformat(), end_date=end_date.isoformat())
        return self.fetch(APOD_URL, params=params)

    def mars_rover_photos(self, rover: str, earth_date: date) -> Any:
        """Fetch the photos a rover took on one Earth date."""
        params = self._nasa_params(earth_date=earth_date.isoformat())
        return self.fetch(MARS_PHOTOS_URL.format(rover=rover), params=params)

    def epic_natural(self, day: date) -> Any:
        """Fetch EPIC natural-colour image metadata for one day."""
        return self.fetch(EPIC_NATURAL_URL.format(date=day.isoformat()), params=self._nasa_params())

    def neo_feed(self, start_date: date, end_date: date) -> Any:
        """Fetch the NeoWs close-approach feed for a date range."""
        params = self._nasa_params(start_date=start_date.isoformat(), end_date=end_date.isoformat())
        return self.fetch(NEO_FEED_URL, params=params)

    def cmr_collections(
        self,
        keyword: str,
        page_size: int,
        page_num: int,
        temporal: Optional[str] = None,
    ) -> Any:
        """Query one page of the CMR collection search. CMR takes no API key."""
        params: Dict[str, Any] = {"keyword": keyword, "page_size": page_size, "page_num": page_num}
        if temporal:
            params["temporal"] = temporal
        return self.fetch(CMR_COLLECTIONS_URL, params=params)

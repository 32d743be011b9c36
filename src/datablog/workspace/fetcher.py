"""Retrieve raw files and API responses over HTTP."""

from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

import datablog.logging_helpers
from datablog.workspace.resource_cache import AbstractCache, ResourceKey

logger = datablog.logging_helpers.get_logger(__name__)

USER_AGENT = "datablog (https://pypi.org/project/datablog/)"

Params = dict[str, Any] | list[tuple[str, Any]] | None


class WebFetcher:
    """Issue GET requests against public data APIs and file servers.

    A single :class:`requests.Session` is reused for every request. Transient server
    errors are retried by the session's adapter; any other non-200 response is logged
    as a warning and raised as a :class:`requests.HTTPError`.
    """

    timeout: float
    cache: AbstractCache | None

    def __init__(self, timeout: float = 30.0, cache: AbstractCache | None = None):
        """Constructs WebFetcher instance.

        Args:
            timeout: connection and read timeout (in seconds) for every request.
            cache: if provided, resources requested with a :class:`ResourceKey` are
                looked up in and written to this cache.
        """
        self.timeout = timeout
        self.cache = cache

        retries = Retry(
            backoff_factor=2, total=3, status_forcelist=[429, 500, 502, 503, 504]
        )
        adapter = HTTPAdapter(max_retries=retries)
        self.http = requests.Session()
        self.http.headers.update({"User-Agent": USER_AGENT})
        self.http.mount("http://", adapter)
        self.http.mount("https://", adapter)

    def get(self, url: str, params: Params = None) -> requests.Response:
        """Perform a single GET request and check the status code."""
        logger.info(f"Retrieving {url}")
        response = self.http.get(url, params=params, timeout=self.timeout)
        if response.status_code != requests.codes.ok:
            logger.warning(
                f"Request to {url} returned status code {response.status_code}"
            )
            response.raise_for_status()
        else:
            logger.debug(f"Successfully downloaded {url}")
        return response

    def get_json(self, url: str, params: Params = None) -> Any:
        """GET a URL and decode the JSON body."""
        return self.get(url, params=params).json()

    def get_text(self, url: str, params: Params = None) -> str:
        """GET a URL and return the decoded body."""
        return self.get(url, params=params).text

    def get_bytes(
        self, url: str, params: Params = None, key: ResourceKey | None = None
    ) -> bytes:
        """GET a URL and return the raw body, using the cache when possible.

        Args:
            url: the URL to download.
            params: optional query parameters.
            key: identifies the resource in the cache. Without a key (or without a
                cache) the resource is always downloaded.
        """
        if key is not None and self.cache is not None and self.cache.contains(key):
            logger.info(f"Retrieved {key} from cache.")
            return self.cache.get(key)
        content = self.get(url, params=params).content
        if key is not None and self.cache is not None:
            self.cache.add(key, content)
        return content

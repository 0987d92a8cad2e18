"""arXiv API query construction and HTTP transport."""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from typing import Callable
from urllib.parse import urlencode

import requests

ARXIV_API_URL = os.getenv("ARXIV_API_URL", "http://export.arxiv.org/api/query")
REQUEST_TIMEOUT_SECONDS = int(os.getenv("ARXIV_TIMEOUT_SECONDS", "20"))
DEFAULT_CATEGORY = "cat:cs.AI"
DEFAULT_START = "0"
DEFAULT_MAX_RESULTS = "10"
# Response cache lifetimes: free-text search vs. default category listing.
QUERY_CACHE_SECONDS = 600
DEFAULT_CACHE_SECONDS = 3600

LOGGER = logging.getLogger(__name__)


class ArxivHTTPError(RuntimeError):
    """Raised when the arXiv API answers with a non-success status."""

    def __init__(self, status_code: int, reason: str, body: str) -> None:
        super().__init__(f"arXiv API Error: {status_code} {reason}".rstrip())
        self.status_code = status_code
        self.reason = reason
        self.body = body


@dataclass(frozen=True, slots=True)
class ArxivQuery:
    search_query: str
    sort_by: str
    start: str
    max_results: str
    cache_seconds: int
    sort_order: str = "descending"

    def params(self) -> dict[str, str]:
        return {
            "search_query": self.search_query,
            "sortBy": self.sort_by,
            "sortOrder": self.sort_order,
            "start": self.start,
            "max_results": self.max_results,
        }

    def url(self) -> str:
        return f"{ARXIV_API_URL}?{urlencode(self.params())}"


@dataclass(frozen=True, slots=True)
class ArxivResponse:
    status_code: int
    reason: str
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


def build_query(
    query: str | None = None,
    start: str | None = None,
    max_results: str | None = None,
) -> ArxivQuery:
    """Build the upstream search from the caller's parameters.

    A non-blank ``query`` is searched verbatim (trimmed) and sorted by
    relevance; otherwise the default category is listed newest-first.
    """
    # A whitespace-only query counts as blank for the cache lifetime too, not
    # only for the search: it gets DEFAULT_CACHE_SECONDS, not QUERY_CACHE_SECONDS.
    if query and query.strip():
        return ArxivQuery(
            search_query=query.strip(),
            sort_by="relevance",
            start=start or DEFAULT_START,
            max_results=max_results or DEFAULT_MAX_RESULTS,
            cache_seconds=QUERY_CACHE_SECONDS,
        )

    return ArxivQuery(
        search_query=DEFAULT_CATEGORY,
        sort_by="submittedDate",
        start=start or DEFAULT_START,
        max_results=max_results or DEFAULT_MAX_RESULTS,
        cache_seconds=DEFAULT_CACHE_SECONDS,
    )


class ArxivClient:
    """GET wrapper that keeps successful responses for the query's cache lifetime."""

    def __init__(
        self,
        session: requests.Session | None = None,
        timeout: int = REQUEST_TIMEOUT_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._session = session or requests.Session()
        self._timeout = timeout
        self._clock = clock
        self._cache: dict[str, tuple[float, ArxivResponse]] = {}

    def fetch(self, query: ArxivQuery) -> ArxivResponse:
        """Fetch the feed for ``query``.

        Transport failures propagate as ``requests.RequestException``.
        """
        url = query.url()
        now = self._clock()
        self._evict_expired(now)

        cached = self._cache.get(url)
        if cached is not None:
            LOGGER.info("arXiv fetch: cache hit url=%s", url)
            return cached[1]

        LOGGER.info("arXiv fetch: url=%s", url)
        raw = self._session.get(url, timeout=self._timeout)
        response = ArxivResponse(
            status_code=raw.status_code,
            reason=raw.reason or "",
            text=raw.text,
        )
        if response.ok:
            self._cache[url] = (now + query.cache_seconds, response)
        return response

    def clear_cache(self) -> None:
        self._cache.clear()

    def _evict_expired(self, now: float) -> None:
        expired = [url for url, (expires_at, _) in self._cache.items() if expires_at <= now]
        for url in expired:
            del self._cache[url]


_default_client: ArxivClient | None = None


def get_default_client() -> ArxivClient:
    global _default_client
    if _default_client is None:
        _default_client = ArxivClient()
    return _default_client

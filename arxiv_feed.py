"""arXiv Atom feed ingestion: fetch, parse and normalize one page of papers."""

from __future__ import annotations

import json
import logging
from typing import Any

from arxiv_client import ArxivClient, ArxivHTTPError, ArxivQuery, build_query, get_default_client
from feed_reader import feed_paging, is_arxiv_raw_data, parse_feed_xml
from models import FeedPage
from normalizer import normalize_entries

LOGGER = logging.getLogger(__name__)

UNEXPECTED_FORMAT_MESSAGE = "Failed to parse arXiv data. Unexpected format received."


class UnexpectedFeedFormatError(RuntimeError):
    """Raised when the parsed payload has no ``feed`` object at its root."""


def fetch_papers(
    query: str | None = None,
    start: str | None = None,
    max_results: str | None = None,
    client: ArxivClient | None = None,
) -> FeedPage:
    """Fetch and normalize one page of papers from the arXiv API.

    Args:
        query: Free-text search; blank or None lists the default category.
        start: Pagination offset, default "0".
        max_results: Page size, default "10".
        client: Transport to use; defaults to the shared cached client.

    Raises:
        ArxivHTTPError: upstream answered with a non-success status.
        UnexpectedFeedFormatError: payload parsed but has no feed object.
        FeedParseError: payload is not well-formed XML.
    """
    return fetch_page(build_query(query, start, max_results), client=client)


def fetch_page(arxiv_query: ArxivQuery, client: ArxivClient | None = None) -> FeedPage:
    client = client or get_default_client()
    LOGGER.info(
        "arXiv fetch: search_query=%r sortBy=%s start=%s max_results=%s",
        arxiv_query.search_query,
        arxiv_query.sort_by,
        arxiv_query.start,
        arxiv_query.max_results,
    )

    response = client.fetch(arxiv_query)
    if not response.ok:
        LOGGER.error(
            "Failed to fetch papers from arXiv: %s %s url=%s body=%s",
            response.status_code,
            response.reason,
            arxiv_query.url(),
            response.text,
        )
        raise ArxivHTTPError(response.status_code, response.reason, response.text)

    page = parse_papers_payload(parse_feed_xml(response.text))
    LOGGER.info(
        "arXiv fetch: returning %s papers for query=%r start=%s total_results=%s",
        len(page.papers),
        arxiv_query.search_query,
        arxiv_query.start,
        page.total_results,
    )
    return page


def parse_papers_payload(payload: Any) -> FeedPage:
    """Turn the parsed attributed tree into a FeedPage.

    An object root without ``entry`` items yields an empty page; a non-object
    root or a missing ``feed`` raises UnexpectedFeedFormatError.
    """
    if not is_arxiv_raw_data(payload, logger=LOGGER) or _feed_missing(payload.get("feed")):
        LOGGER.error(
            "Parsed XML data does not match expected structure or feed is missing. Data: %s",
            json.dumps(payload, indent=2, default=str),
        )
        raise UnexpectedFeedFormatError(UNEXPECTED_FORMAT_MESSAGE)

    feed = payload["feed"]
    entries_raw = feed.get("entry") if isinstance(feed, dict) else None
    return FeedPage(papers=normalize_entries(entries_raw), **feed_paging(feed))


def _feed_missing(feed: Any) -> bool:
    # An empty <feed> element parses to None; an empty dict is still a feed.
    return not isinstance(feed, dict) and not feed

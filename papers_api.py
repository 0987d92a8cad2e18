"""Request handler for the papers endpoint: parameters in, status + JSON payload out."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from arxiv_client import ArxivClient, ArxivHTTPError, build_query
from arxiv_feed import UNEXPECTED_FORMAT_MESSAGE, UnexpectedFeedFormatError, fetch_page
from models import PaperSummary

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ApiResponse:
    status: int
    payload: Any
    papers: tuple[PaperSummary, ...] = ()


def handle_papers_request(
    params: Mapping[str, str | None],
    client: ArxivClient | None = None,
) -> ApiResponse:
    """Serve one papers request.

    Recognized parameters are ``query``, ``start`` and ``max_results``.
    Success is 200 with a list of paper dicts. An upstream error forwards
    its status; a malformed feed or any other failure is a 500.
    """
    try:
        arxiv_query = build_query(
            params.get("query"),
            params.get("start"),
            params.get("max_results"),
        )
        page = fetch_page(arxiv_query, client=client)
        return ApiResponse(
            status=200,
            payload=[paper.to_dict() for paper in page.papers],
            papers=tuple(page.papers),
        )
    except ArxivHTTPError as exc:
        return ApiResponse(
            status=exc.status_code,
            payload={"error": str(exc), "details": exc.body},
        )
    except UnexpectedFeedFormatError:
        return ApiResponse(status=500, payload={"error": UNEXPECTED_FORMAT_MESSAGE})
    except Exception as exc:  # outermost boundary: every failure becomes a 500
        LOGGER.exception("Unhandled error in papers request: %s", exc)
        message = str(exc) or "An unknown server error occurred."
        return ApiResponse(status=500, payload={"error": f"Failed to process request: {message}"})

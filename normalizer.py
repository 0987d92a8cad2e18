"""Normalize raw arXiv Atom entries into PaperSummary records."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from typing import Any

from models import ArxivEntry, ArxivLinkAttribute, PaperSummary


def _env_placeholder(name: str, default: str) -> str:
    # blank overrides fall back to the default; placeholders are never empty
    return os.getenv(name, "").strip() or default


TITLE_PLACEHOLDER = _env_placeholder("PAPERS_TITLE_PLACEHOLDER", "No title available")
SUMMARY_PLACEHOLDER = _env_placeholder("PAPERS_SUMMARY_PLACEHOLDER", "No summary available")

LOGGER = logging.getLogger(__name__)

# Everything after /abs/ up to the first "v" (the version suffix). An id that
# contains a "v" of its own is truncated there too.
_ARXIV_ID_RE = re.compile(r"/abs/([^v]+)")
_WHITESPACE_RUN_RE = re.compile(r"\s\s+")


def as_list(value: Any) -> list[Any]:
    """Collapse the single-or-many shape of repeated XML elements to a list."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def extract_arxiv_id(id_url: str | None) -> str | None:
    if not id_url:
        return None
    match = _ARXIV_ID_RE.search(id_url)
    return match.group(1) if match else None


def resolve_pdf_link(
    links: ArxivLinkAttribute | list[ArxivLinkAttribute] | None,
    id_url: str | None,
) -> str:
    """Pick the link titled ``pdf``, else derive one from the abstract URL.

    Returns an empty string when neither yields an absolute http(s) URL.
    """
    for link in as_list(links):
        if not isinstance(link, Mapping):
            continue
        href = link.get("@_href")
        if link.get("@_title") == "pdf" and isinstance(href, str) and href:
            return href

    if id_url and "/abs/" in id_url:
        candidate = id_url.replace("/abs/", "/pdf/", 1) + ".pdf"
        if candidate.startswith(("http://", "https://")):
            return candidate
    return ""


def normalize_entry(
    entry: ArxivEntry | None,
    logger: logging.Logger = LOGGER,
    title_placeholder: str | None = None,
    summary_placeholder: str | None = None,
) -> PaperSummary | None:
    """Map one raw feed entry to a PaperSummary.

    Returns None (the entry is dropped) only when no arXiv id can be
    extracted. Every other missing or oddly shaped field degrades to a
    placeholder, an empty string or an empty tuple.

    Args:
        entry: One ``entry`` node from the parsed feed; may be anything.
        logger: Receives warnings for dropped entries and missing PDF links.
        title_placeholder: Overrides TITLE_PLACEHOLDER.
        summary_placeholder: Overrides SUMMARY_PLACEHOLDER.
    """
    if entry is None:
        return None

    fields: Mapping[str, Any] = entry if isinstance(entry, Mapping) else {}

    id_url = _as_str(fields.get("id"))
    arxiv_id = extract_arxiv_id(id_url)
    if not arxiv_id:
        logger.warning(
            "Could not extract valid arXiv ID from: %s. Skipping entry.",
            id_url if id_url is not None else "N/A",
        )
        return None

    pdf_link = resolve_pdf_link(fields.get("link"), id_url)
    if not pdf_link:
        logger.warning("Could not find or generate PDF link for entry ID: %s", arxiv_id)

    authors = tuple(
        name
        for name in (
            author["name"].strip()
            for author in as_list(fields.get("author"))
            if isinstance(author, Mapping) and isinstance(author.get("name"), str)
        )
        if name
    )

    categories = tuple(
        category["@_term"]
        for category in as_list(fields.get("category"))
        if isinstance(category, Mapping)
        and isinstance(category.get("@_term"), str)
        and category["@_term"]
    )

    title = _collapse(fields.get("title"))
    summary = _collapse(fields.get("summary"))

    return PaperSummary(
        id=arxiv_id,
        title=title if title is not None else (title_placeholder or TITLE_PLACEHOLDER),
        summary=summary if summary is not None else (summary_placeholder or SUMMARY_PLACEHOLDER),
        authors=authors,
        published=_as_str(fields.get("published")) or "",
        updated=_as_str(fields.get("updated")) or "",
        pdf_link=pdf_link,
        categories=categories,
    )


def normalize_entries(
    entries_raw: ArxivEntry | list[ArxivEntry] | None,
    logger: logging.Logger = LOGGER,
    title_placeholder: str | None = None,
    summary_placeholder: str | None = None,
) -> list[PaperSummary]:
    """Normalize the feed's ``entry`` field, keeping input order.

    ``entries_raw`` may be absent, a single entry or a list of entries.
    Rejected entries are dropped; the rest keep their relative order.
    """
    entries = as_list(entries_raw)
    if not entries:
        logger.info("No entries found in feed.")
        return []

    papers: list[PaperSummary] = []
    for entry in entries:
        paper = normalize_entry(
            entry,
            logger=logger,
            title_placeholder=title_placeholder,
            summary_placeholder=summary_placeholder,
        )
        if paper is not None:
            papers.append(paper)
    return papers


def _collapse(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    return _WHITESPACE_RUN_RE.sub(" ", value.strip())


def _as_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None

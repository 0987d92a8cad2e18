"""Shared typed models for the arXiv papers feed."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, TypedDict, Union

# Raw views over the attributed tree. Attribute keys carry the "@_" prefix and
# nothing here is guaranteed present, so every field is optional.
ArxivLinkAttribute = TypedDict(
    "ArxivLinkAttribute",
    {"@_href": str, "@_rel": str, "@_title": str, "@_type": str},
    total=False,
)

ArxivAuthor = TypedDict(
    "ArxivAuthor",
    {"name": str, "arxiv:affiliation": str},
    total=False,
)

ArxivCategoryAttribute = TypedDict(
    "ArxivCategoryAttribute",
    {"@_term": str, "@_scheme": str},
    total=False,
)

ArxivEntry = TypedDict(
    "ArxivEntry",
    {
        "id": str,
        "updated": str,
        "published": str,
        "title": str,
        "summary": str,
        "author": Union[ArxivAuthor, list[ArxivAuthor]],
        "link": Union[ArxivLinkAttribute, list[ArxivLinkAttribute]],
        "category": Union[ArxivCategoryAttribute, list[ArxivCategoryAttribute]],
        "arxiv:comment": str,
        "arxiv:primary_category": ArxivCategoryAttribute,
        "arxiv:doi": str,
        "arxiv:journal_ref": str,
    },
    total=False,
)

ArxivFeed = TypedDict(
    "ArxivFeed",
    {
        "entry": Union[ArxivEntry, list[ArxivEntry]],
        "title": str,
        "id": str,
        "updated": str,
        "link": list[ArxivLinkAttribute],
        "opensearch:totalResults": int,
        "opensearch:startIndex": int,
        "opensearch:itemsPerPage": int,
    },
    total=False,
)


class ArxivRawData(TypedDict, total=False):
    feed: ArxivFeed


@dataclass(frozen=True, slots=True)
class PaperSummary:
    """Normalized paper record returned to callers."""

    id: str
    title: str
    summary: str
    authors: tuple[str, ...]
    published: str
    updated: str
    pdf_link: str
    categories: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        """Render the JSON wire shape (camelCase ``pdfLink``)."""
        return {
            "id": self.id,
            "title": self.title,
            "summary": self.summary,
            "authors": list(self.authors),
            "published": self.published,
            "updated": self.updated,
            "pdfLink": self.pdf_link,
            "categories": list(self.categories),
        }


@dataclass(frozen=True, slots=True)
class FeedPage:
    """One page of normalized papers plus the feed's OpenSearch counters."""

    papers: list[PaperSummary] = field(default_factory=list)
    total_results: int | None = None
    start_index: int | None = None
    items_per_page: int | None = None

"""CSV file sink for normalized arXiv papers."""

from __future__ import annotations

import csv
import logging
import os
from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path

from models import PaperSummary

CSV_OUTPUT_PATH = os.getenv("CSV_OUTPUT_PATH", "papers.csv")

LOGGER = logging.getLogger(__name__)

CSV_COLUMNS = [
    "id",
    "title",
    "summary",
    "authors",      # "; "-joined, source order
    "published",
    "updated",
    "pdf_link",
    "categories",   # "; "-joined, source order
    "created_at",
]

LIST_SEPARATOR = "; "


def paper_already_exists(paper_id: str, csv_path: str | None = None) -> bool:
    """Return True if a row with this arXiv id already exists in the CSV."""
    return paper_id in _existing_ids(Path(csv_path or CSV_OUTPUT_PATH))


def write_summaries(summaries: Iterable[PaperSummary], csv_path: str | None = None) -> int:
    """Append new papers to the CSV (creating it with a header if needed).

    Papers whose id is already in the file, or repeated within ``summaries``,
    are skipped. Returns the number of rows written.
    """
    path = Path(csv_path or CSV_OUTPUT_PATH)
    seen = _existing_ids(path)
    write_header = not path.exists() or path.stat().st_size == 0
    created_at = datetime.now(UTC).isoformat()

    rows = []
    for paper in summaries:
        if paper.id in seen:
            LOGGER.info("Skipping existing paper id=%s", paper.id)
            continue
        seen.add(paper.id)
        rows.append({
            "id": paper.id,
            "title": paper.title,
            "summary": paper.summary,
            "authors": LIST_SEPARATOR.join(paper.authors),
            "published": paper.published,
            "updated": paper.updated,
            "pdf_link": paper.pdf_link,
            "categories": LIST_SEPARATOR.join(paper.categories),
            "created_at": created_at,
        })

    if not rows:
        return 0

    with path.open("a", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=CSV_COLUMNS)
        if write_header:
            writer.writeheader()
        writer.writerows(rows)

    LOGGER.info("Wrote %s CSV rows to %s", len(rows), path)
    return len(rows)


def _existing_ids(path: Path) -> set[str]:
    if not path.exists():
        return set()

    with path.open(newline="", encoding="utf-8") as fh:
        return {row["id"] for row in csv.DictReader(fh) if row.get("id")}

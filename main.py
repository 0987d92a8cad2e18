"""CLI entrypoint: fetch one page of arXiv papers and print it as JSON."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from dotenv import load_dotenv

from arxiv_client import build_query
from csv_sink import write_summaries
from papers_api import handle_papers_request


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line flags."""
    parser = argparse.ArgumentParser(description="Fetch and normalize papers from the arXiv API")
    parser.add_argument("--query", default=None, help="Free-text search; omit to list the default category")
    parser.add_argument("--start", default=None, help="Pagination offset (default 0)")
    parser.add_argument("--max-results", default=None, help="Page size (default 10)")
    parser.add_argument("--csv", dest="csv_path", default=None, help="Also append new papers to this CSV file")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only log the request that would be made, without calling the API",
    )
    return parser.parse_args(argv)


def run(
    query: str | None,
    start: str | None,
    max_results: str | None,
    csv_path: str | None = None,
    dry_run: bool = False,
) -> int:
    """Run one request and print the JSON payload. Returns the exit code."""
    if dry_run:
        logging.info("[dry-run] Would fetch: %s", build_query(query, start, max_results).url())
        return 0

    response = handle_papers_request({"query": query, "start": start, "max_results": max_results})
    print(json.dumps(response.payload, ensure_ascii=False, indent=2))

    if response.status != 200:
        logging.error("Request failed with status=%s", response.status)
        return 1

    if csv_path:
        written = write_summaries(response.papers, csv_path=csv_path)
        logging.info("CSV export: written=%s skipped=%s", written, len(response.papers) - written)

    return 0


def main(argv: list[str] | None = None) -> None:
    """Initialize config and execute one request."""
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    args = parse_args(argv)
    sys.exit(run(args.query, args.start, args.max_results, csv_path=args.csv_path, dry_run=args.dry_run))


if __name__ == "__main__":
    main()

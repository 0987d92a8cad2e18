from __future__ import annotations

import csv
from pathlib import Path

import pytest

import csv_sink
from models import PaperSummary

SAMPLE_PAPER = PaperSummary(
    id="2401.99999",
    title="Test Paper",
    summary="A test abstract.",
    authors=("Ada Lovelace", "Alan Turing"),
    published="2024-01-01T00:00:00Z",
    updated="2024-01-02T00:00:00Z",
    pdf_link="http://arxiv.org/pdf/2401.99999v1",
    categories=("cs.AI", "cs.LG"),
)


@pytest.fixture(autouse=True)
def patch_csv_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Point CSV_OUTPUT_PATH at a temp file for every test."""
    output = tmp_path / "test_output.csv"
    monkeypatch.setattr(csv_sink, "CSV_OUTPUT_PATH", str(output))


def _rows(path: str | None = None) -> list[dict]:
    with Path(path or csv_sink.CSV_OUTPUT_PATH).open(newline="", encoding="utf-8") as fh:
        return list(csv.DictReader(fh))


def test_paper_already_exists_false_when_no_file() -> None:
    assert csv_sink.paper_already_exists("2401.99999") is False


def test_write_summaries_creates_file_with_header() -> None:
    written = csv_sink.write_summaries([SAMPLE_PAPER])

    assert written == 1
    rows = _rows()
    assert len(rows) == 1
    row = rows[0]
    assert list(row) == csv_sink.CSV_COLUMNS
    assert row["id"] == "2401.99999"
    assert row["title"] == "Test Paper"
    assert row["pdf_link"] == "http://arxiv.org/pdf/2401.99999v1"
    assert row["created_at"] != ""


def test_write_summaries_joins_lists() -> None:
    csv_sink.write_summaries([SAMPLE_PAPER])

    row = _rows()[0]
    assert row["authors"] == "Ada Lovelace; Alan Turing"
    assert row["categories"] == "cs.AI; cs.LG"


def test_paper_already_exists_true_after_write() -> None:
    csv_sink.write_summaries([SAMPLE_PAPER])

    assert csv_sink.paper_already_exists("2401.99999") is True
    assert csv_sink.paper_already_exists("9999.00001") is False


def test_write_summaries_skips_existing_and_repeated_ids() -> None:
    second = PaperSummary(
        id="2401.88888",
        title="Second Paper",
        summary="Another abstract.",
        authors=(),
        published="",
        updated="",
        pdf_link="",
        categories=(),
    )

    assert csv_sink.write_summaries([SAMPLE_PAPER]) == 1
    assert csv_sink.write_summaries([SAMPLE_PAPER, second, second]) == 1

    rows = _rows()
    assert [r["id"] for r in rows] == ["2401.99999", "2401.88888"]
    assert rows[1]["authors"] == ""


def test_write_summaries_nothing_new_leaves_no_file() -> None:
    assert csv_sink.write_summaries([]) == 0
    assert not Path(csv_sink.CSV_OUTPUT_PATH).exists()


def test_explicit_csv_path_overrides_default(tmp_path: Path) -> None:
    other = tmp_path / "other.csv"

    csv_sink.write_summaries([SAMPLE_PAPER], csv_path=str(other))

    assert other.exists()
    assert not Path(csv_sink.CSV_OUTPUT_PATH).exists()
    assert csv_sink.paper_already_exists("2401.99999", csv_path=str(other)) is True

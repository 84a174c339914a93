"""Shared fixtures for the merge pipeline test suite.

PDFs are generated on the fly with blank pages so page counts are known.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

import pytest
from pypdf import PdfReader, PdfWriter

logging.basicConfig(
    level=logging.DEBUG,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    stream=sys.stderr,
    force=True,
)


def write_pdf(path: Path, num_pages: int = 1) -> Path:
    """Create a PDF with *num_pages* blank letter-size pages."""
    writer = PdfWriter()
    for _ in range(num_pages):
        writer.add_blank_page(width=612, height=792)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as f:
        writer.write(f)
    return path


def outline_entries(path: Path) -> list[tuple[str, int]]:
    """Return (title, page index) pairs of the top-level outline."""
    reader = PdfReader(str(path))
    return [
        (item.title, reader.get_destination_page_number(item))
        for item in reader.outline
        if not isinstance(item, list)
    ]


def page_count(path: Path) -> int:
    return len(PdfReader(str(path)).pages)


@pytest.fixture
def input_dir(tmp_path: Path) -> Path:
    d = tmp_path / "in"
    d.mkdir()
    return d


@pytest.fixture
def output_pdf(tmp_path: Path) -> Path:
    return tmp_path / "out" / "merged.pdf"


@pytest.fixture
def make_pdfs(input_dir: Path):
    """Factory: make_pdfs({"a.pdf": 2, "b.pdf": 3}) -> dict of paths."""

    def _make(pages_by_name: dict[str, int]) -> dict[str, Path]:
        return {name: write_pdf(input_dir / name, pages) for name, pages in pages_by_name.items()}

    return _make


class EventSink:
    """Progress callback that records every event it receives."""

    def __init__(self):
        self.events = []

    def __call__(self, event):
        self.events.append(event)

    def statuses(self):
        return [e.status.value for e in self.events]

    def of(self, status):
        return [e for e in self.events if e.status.value == status]


@pytest.fixture
def sink() -> EventSink:
    return EventSink()


def set_mtime(path: Path, ts: float) -> None:
    os.utime(path, (ts, ts))

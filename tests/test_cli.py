"""Command line surface and launcher mode selection."""

from __future__ import annotations

import pytest

from conftest import outline_entries, page_count
from pdf_merger.app import is_cli_mode, run
from pdf_merger.cli import build_parser, main


def test_parser_defaults() -> None:
    args = build_parser().parse_args([])
    assert args.input.endswith("pdfs-to-merge")
    assert args.output.endswith("merged.pdf")
    assert args.sort_by == "name"
    assert args.descending is False
    assert args.pattern is None
    assert args.add_bookmarks is True


def test_help_exits_zero(capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["--help"])
    assert exc.value.code == 0
    out = capsys.readouterr().out
    assert "--no-bookmarks" in out
    assert "--sort-by" in out


def test_successful_merge(input_dir, output_pdf, make_pdfs, capsys) -> None:
    make_pdfs({"a.pdf": 1, "b.pdf": 2})

    code = main(["-i", str(input_dir), "-o", str(output_pdf), "--sort-by", "size", "--descending"])

    assert code == 0
    assert page_count(output_pdf) == 3
    assert [t for t, _ in outline_entries(output_pdf)] == ["b", "a"]
    out = capsys.readouterr().out
    assert "\rProcessing file 0/2" in out
    assert "Successfully merged 2 PDFs with 3 total pages" in out


def test_no_bookmarks_and_pattern(input_dir, output_pdf, make_pdfs) -> None:
    make_pdfs({"keep1.pdf": 1, "keep2.pdf": 1, "skip.pdf": 4})

    code = main(["--input", str(input_dir), "--output", str(output_pdf), "--pattern", "^keep", "--no-bookmarks"])

    assert code == 0
    assert page_count(output_pdf) == 2
    assert outline_entries(output_pdf) == []


def test_failure_exit_code(input_dir, output_pdf, capsys) -> None:
    code = main(["-i", str(input_dir), "-o", str(output_pdf)])

    assert code == 1
    assert "No PDF files found" in capsys.readouterr().err
    assert not output_pdf.exists()


def test_unknown_sort_key_falls_back(input_dir, output_pdf, make_pdfs) -> None:
    make_pdfs({"b.pdf": 1, "a.pdf": 1})
    assert main(["-i", str(input_dir), "-o", str(output_pdf), "--sort-by", "colour"]) == 0
    assert [t for t, _ in outline_entries(output_pdf)] == ["a", "b"]


@pytest.mark.parametrize(
    "argv, expected",
    [
        ([], False),
        (["--input", "x"], True),
        (["-o", "out.pdf"], True),
        (["--output=out.pdf"], True),
        (["-h"], True),
        (["--cli-only"], True),
        (["--descending"], False),
    ],
)
def test_is_cli_mode(argv, expected) -> None:
    assert is_cli_mode(argv) is expected


def test_run_strips_cli_only(input_dir, output_pdf, make_pdfs) -> None:
    make_pdfs({"a.pdf": 1})
    assert run(["--cli-only", "-i", str(input_dir), "-o", str(output_pdf)]) == 0
    assert output_pdf.exists()

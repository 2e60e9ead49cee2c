from __future__ import annotations

import json
import zipfile
from pathlib import Path

import pytest
from click.testing import CliRunner

from cli import cli

from conftest import build_pdf, page_texts


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def pdf_files(tmp_path: Path) -> list:
    first = tmp_path / "first.pdf"
    second = tmp_path / "second.pdf"
    first.write_bytes(build_pdf(["Page from first"]))
    second.write_bytes(build_pdf(["Page from second", "Another from second"]))
    return [first, second]


def test_no_command_prints_help(runner: CliRunner) -> None:
    result = runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "merge" in result.output


def test_merge(runner: CliRunner, pdf_files: list, tmp_path: Path) -> None:
    output = tmp_path / "out.pdf"

    result = runner.invoke(cli, ["merge", str(pdf_files[0]), str(pdf_files[1]), "-o", str(output)])

    assert result.exit_code == 0, result.output
    assert page_texts(output.read_bytes()) == [
        "Page from first",
        "Page from second",
        "Another from second",
    ]


def test_merge_needs_two_files(runner: CliRunner, pdf_files: list) -> None:
    result = runner.invoke(cli, ["merge", str(pdf_files[0])])
    assert result.exit_code == 1


def test_split_json(runner: CliRunner, pdf_files: list, tmp_path: Path) -> None:
    output = tmp_path / "pages.zip"

    result = runner.invoke(cli, ["split", str(pdf_files[1]), "-o", str(output), "--json-output"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["details"]["entries"] == ["Page_1.pdf", "Page_2.pdf"]
    assert payload["output_path"] == str(output)
    with zipfile.ZipFile(output) as zf:
        assert sorted(zf.namelist()) == ["Page_1.pdf", "Page_2.pdf"]


def test_compress_default_output(runner: CliRunner, pdf_files: list) -> None:
    with runner.isolated_filesystem():
        result = runner.invoke(cli, ["compress", str(pdf_files[1])])

        assert result.exit_code == 0, result.output
        assert page_texts(Path("compressed_file.pdf").read_bytes()) == [
            "Page from second",
            "Another from second",
        ]


def test_compress_broken_file(runner: CliRunner, tmp_path: Path) -> None:
    broken = tmp_path / "broken.pdf"
    broken.write_bytes(b"not a pdf")

    result = runner.invoke(cli, ["compress", str(broken), "-o", str(tmp_path / "out.pdf"), "-j"])

    assert result.exit_code == 1
    assert not (tmp_path / "out.pdf").exists()


def test_extract_text(runner: CliRunner, pdf_files: list, tmp_path: Path) -> None:
    output = tmp_path / "text.txt"

    result = runner.invoke(cli, ["extract-text", str(pdf_files[1]), "-o", str(output)])

    assert result.exit_code == 0, result.output
    lines = output.read_text(encoding="utf-8").split("\n")
    assert "Page from second" in lines[0]
    assert "Another from second" in lines[1]


def test_stats_argument(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["stats", "Hello world.", "-j"])

    assert result.exit_code == 0
    assert json.loads(result.output) == {
        "words": 2,
        "characters": 12,
        "sentences": 1,
        "paragraphs": 1,
    }


def test_stats_stdin(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["stats", "-j"], input="A.\nB.\nC.\n")

    payload = json.loads(result.output)
    assert payload["paragraphs"] == 3
    assert payload["sentences"] == 3


def test_stats_pdf(runner: CliRunner, pdf_files: list) -> None:
    result = runner.invoke(cli, ["stats", "--pdf", str(pdf_files[1]), "-j"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["words"] == 6


def test_info(runner: CliRunner, pdf_files: list) -> None:
    result = runner.invoke(cli, ["info", str(pdf_files[1]), "--json-output"])

    assert result.exit_code == 0
    assert json.loads(result.output)["page_count"] == 2


def test_stats_stdin_empty(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["stats", "-j"], input="")

    assert result.exit_code == 0
    assert json.loads(result.output) == {"words": 0, "characters": 0, "sentences": 0, "paragraphs": 0}

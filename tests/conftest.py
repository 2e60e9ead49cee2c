from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, List, Sequence, Tuple

import fitz  # PyMuPDF
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from pdftoolbox import ErrorReporter, SourceFile


def build_pdf(texts: Sequence[str], **save_options) -> bytes:
    """A PDF with one page per entry, each showing that text."""
    doc = fitz.open()
    for text in texts:
        page = doc.new_page(width=300, height=300)
        if text:
            page.insert_text((36, 72), text)
    data = doc.tobytes(**save_options)
    doc.close()
    return data


def page_texts(data: bytes) -> List[str]:
    """Text of each page of a PDF buffer, stripped."""
    with fitz.open(stream=data, filetype="pdf") as doc:
        return [page.get_text().strip() for page in doc]


class RecordingReporter(ErrorReporter):
    def __init__(self):
        self.reports: List[Tuple[str, BaseException]] = []

    def report(self, operation: str, error: BaseException) -> None:
        self.reports.append((operation, error))


@pytest.fixture()
def pdf_factory() -> Callable[..., SourceFile]:
    def _create(name: str, texts: Sequence[str]) -> SourceFile:
        return SourceFile(name=name, data=build_pdf(texts))

    return _create


@pytest.fixture()
def sample_source(pdf_factory) -> SourceFile:
    return pdf_factory("sample.pdf", ["Alpha page", "Bravo page", "Charlie page"])


@pytest.fixture()
def sample_sources(pdf_factory) -> List[SourceFile]:
    return [
        pdf_factory("one.pdf", ["First doc page one", "First doc page two"]),
        pdf_factory("two.pdf", ["Second doc only page"]),
        pdf_factory("three.pdf", ["Third doc page one", "Third doc page two", "Third doc page three"]),
    ]


@pytest.fixture()
def broken_source() -> SourceFile:
    return SourceFile(name="broken.pdf", data=b"this is not a pdf at all")


@pytest.fixture()
def encrypted_source() -> SourceFile:
    data = build_pdf(
        ["Secret"],
        encryption=fitz.PDF_ENCRYPT_AES_256,
        owner_pw="owner",
        user_pw="user",
    )
    return SourceFile(name="locked.pdf", data=data)


@pytest.fixture()
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture()
def sample_pdf(tmp_path: Path, sample_source: SourceFile) -> Path:
    pdf_path = tmp_path / "sample.pdf"
    pdf_path.write_bytes(sample_source.data)
    return pdf_path

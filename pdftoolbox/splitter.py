"""Page splitting and zip packaging for PDF Toolbox."""

import io
import logging
import zipfile
from typing import List, Optional

import fitz  # PyMuPDF

from .documents import SourceFile, open_document
from .pipeline import Pipeline, ProgressCallback
from .results import (
    SPLIT_FILENAME,
    ArtifactKind,
    ErrorReporter,
    OutputArtifact,
    PipelineResult,
)

LOGGER = logging.getLogger(__name__)


def page_entry_name(page_number: int) -> str:
    """Archive entry name for a 1-based page number."""
    return f"Page_{page_number}.pdf"


class PDFSplitter(Pipeline):
    """Splits a document into single-page documents bundled in one zip."""

    operation = "split"
    stage = "Splitting PDF Pages..."

    def __init__(
        self,
        source: SourceFile,
        progress_callback: Optional[ProgressCallback] = None,
        error_reporter: Optional[ErrorReporter] = None,
    ):
        super().__init__(progress_callback, error_reporter)
        self.source = source

    def _input_size(self) -> int:
        return self.source.size

    def _run(self) -> PipelineResult:
        buffer = io.BytesIO()
        entries: List[str] = []

        doc = open_document(self.source)
        try:
            page_count = doc.page_count
            with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
                for index in range(page_count):
                    page_doc = fitz.open()
                    try:
                        page_doc.insert_pdf(doc, from_page=index, to_page=index)
                        name = page_entry_name(index + 1)
                        zf.writestr(name, page_doc.tobytes(garbage=1, deflate=True))
                    finally:
                        page_doc.close()
                    entries.append(name)
                    self._report_progress(
                        self.stage, int((index + 1) / page_count * 90)
                    )
        finally:
            doc.close()

        data = buffer.getvalue()
        return PipelineResult(
            success=True,
            operation=self.operation,
            artifact=OutputArtifact(SPLIT_FILENAME, data, ArtifactKind.BINARY),
            pages_processed=page_count,
            original_size=self.source.size,
            output_size=len(data),
            details={"entries": entries},
        )

    def split(self) -> PipelineResult:
        return self.run()


def split_pdf(
    source: SourceFile,
    progress_callback: Optional[ProgressCallback] = None,
    error_reporter: Optional[ErrorReporter] = None,
) -> PipelineResult:
    """Convenience function to split a PDF into per-page documents."""
    return PDFSplitter(source, progress_callback, error_reporter).split()

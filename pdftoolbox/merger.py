"""PDF merging for PDF Toolbox."""

import logging
from typing import Iterable, Optional

import fitz  # PyMuPDF

from .documents import MergeQueue, SourceFile, open_document
from .pipeline import Pipeline, ProgressCallback
from .results import (
    MERGED_FILENAME,
    ArtifactKind,
    ErrorReporter,
    OutputArtifact,
    PipelineResult,
)

LOGGER = logging.getLogger(__name__)


class PDFMerger(Pipeline):
    """
    Concatenates documents page by page.

    Pages are appended in the order the sources are given, and each
    source keeps its own page order.
    """

    operation = "merge"
    stage = "Merging Documents..."

    def __init__(
        self,
        sources: Iterable[SourceFile],
        progress_callback: Optional[ProgressCallback] = None,
        error_reporter: Optional[ErrorReporter] = None,
    ):
        """
        Initialize merger.

        Args:
            sources: Files to merge, in page order
            progress_callback: Optional callback for progress updates (stage, percentage)
            error_reporter: Receives failures (default: log them)

        Raises:
            ValueError: If fewer than two sources are given
        """
        super().__init__(progress_callback, error_reporter)
        self.sources = tuple(sources)
        if len(self.sources) < MergeQueue.MIN_FILES:
            raise ValueError(
                f"At least {MergeQueue.MIN_FILES} files are required to merge, "
                f"got {len(self.sources)}"
            )

    def _input_size(self) -> int:
        return sum(s.size for s in self.sources)

    def _run(self) -> PipelineResult:
        output = fitz.open()
        page_counts = []
        try:
            for number, source in enumerate(self.sources, start=1):
                doc = open_document(source)
                try:
                    page_counts.append(doc.page_count)
                    output.insert_pdf(doc)
                finally:
                    doc.close()
                self._report_progress(
                    self.stage, int(number / len(self.sources) * 90)
                )
            data = output.tobytes(garbage=1, deflate=True)
            pages = output.page_count
        finally:
            output.close()

        return PipelineResult(
            success=True,
            operation=self.operation,
            artifact=OutputArtifact(MERGED_FILENAME, data, ArtifactKind.PDF),
            pages_processed=pages,
            original_size=self._input_size(),
            output_size=len(data),
            details={"page_counts": page_counts},
        )

    def merge(self) -> PipelineResult:
        return self.run()


def merge_pdfs(
    sources: Iterable[SourceFile],
    progress_callback: Optional[ProgressCallback] = None,
    error_reporter: Optional[ErrorReporter] = None,
) -> PipelineResult:
    """Convenience function to merge PDFs."""
    return PDFMerger(sources, progress_callback, error_reporter).merge()

"""Text extraction and PDF word count for PDF Toolbox."""

import logging
from typing import List, Optional, Tuple

import fitz  # PyMuPDF

from .documents import SourceFile, open_document
from .pipeline import Pipeline, ProgressCallback
from .results import (
    EXTRACTED_FILENAME,
    ArtifactKind,
    ErrorReporter,
    OutputArtifact,
    PipelineResult,
)
from .stats import run_stats

LOGGER = logging.getLogger(__name__)


def page_fragments(page: fitz.Page) -> List[str]:
    """Text spans of a page in reading order as PyMuPDF reports them."""
    fragments = []
    blocks = page.get_text("dict")["blocks"]
    for block in blocks:
        if block.get("type") == 0:  # Text block
            for line in block.get("lines", []):
                for span in line.get("spans", []):
                    fragments.append(span.get("text", ""))
    return fragments


class TextHandler(Pipeline):
    """
    Handles text extraction from PDFs.

    Each page's fragments are joined with single spaces and every page
    ends with one newline. No line or paragraph structure is recovered.
    """

    operation = "extract-text"
    stage = "Extracting Text..."
    analyze_operation = "word-count"
    analyze_stage = "Analyzing Document..."

    def __init__(
        self,
        source: SourceFile,
        progress_callback: Optional[ProgressCallback] = None,
        error_reporter: Optional[ErrorReporter] = None,
    ):
        """
        Initialize text handler.

        Args:
            source: PDF to read
            progress_callback: Optional callback for progress updates (stage, percentage)
            error_reporter: Receives failures (default: log them)
        """
        super().__init__(progress_callback, error_reporter)
        self.source = source

    def _input_size(self) -> int:
        return self.source.size

    def read_text(self, stage: Optional[str] = None) -> Tuple[str, int]:
        """
        Read the text of every page.

        Returns:
            Tuple of (text, page count)

        Raises:
            DocumentLoadError: If the document cannot be opened
        """
        stage = stage or self.stage
        doc = open_document(self.source)
        try:
            page_count = doc.page_count
            pages = []
            for page_num, page in enumerate(doc):
                pages.append(" ".join(page_fragments(page)) + "\n")
                self._report_progress(stage, int((page_num + 1) / page_count * 90))
        finally:
            doc.close()
        return "".join(pages), page_count

    def _run(self) -> PipelineResult:
        text, page_count = self.read_text()
        data = text.encode("utf-8")
        return PipelineResult(
            success=True,
            operation=self.operation,
            artifact=OutputArtifact(EXTRACTED_FILENAME, data, ArtifactKind.TEXT),
            pages_processed=page_count,
            original_size=self.source.size,
            output_size=len(data),
            details={"characters": len(text)},
        )

    def _analyze(self) -> PipelineResult:
        text, page_count = self.read_text(self.analyze_stage)
        return PipelineResult(
            success=True,
            operation=self.analyze_operation,
            pages_processed=page_count,
            original_size=self.source.size,
            details={"statistics": run_stats(text).to_dict()},
        )

    def extract_text(self) -> PipelineResult:
        """Extract all text into a plain text artifact."""
        return self.run()

    def analyze_text(self) -> PipelineResult:
        """Extract all text and count words, characters, sentences and paragraphs."""
        return self._execute(self.analyze_operation, self.analyze_stage, self._analyze)


def extract_text(
    source: SourceFile,
    progress_callback: Optional[ProgressCallback] = None,
    error_reporter: Optional[ErrorReporter] = None,
) -> PipelineResult:
    """Convenience function to extract the text of a PDF."""
    return TextHandler(source, progress_callback, error_reporter).extract_text()


def pdf_text_stats(
    source: SourceFile,
    progress_callback: Optional[ProgressCallback] = None,
    error_reporter: Optional[ErrorReporter] = None,
) -> PipelineResult:
    """Convenience function to count words and sentences in a PDF."""
    return TextHandler(source, progress_callback, error_reporter).analyze_text()

"""PDF compression for PDF Toolbox."""

import logging
from typing import Optional

from .documents import SourceFile, open_document
from .pipeline import Pipeline, ProgressCallback
from .results import (
    COMPRESSED_FILENAME,
    ArtifactKind,
    ErrorReporter,
    OutputArtifact,
    PipelineResult,
)
from .utils import calculate_compression_ratio

LOGGER = logging.getLogger(__name__)


class CompressionStage:
    """Enumeration of compression stages for progress reporting."""
    OPTIMIZING = "Optimizing File..."
    FINALIZING = "Finalizing PDF"


class PDFCompressor(Pipeline):
    """
    Re-serializes a PDF with object streams enabled.

    All structural work is done by PyMuPDF on save:
    - Object streams for eligible objects
    - Unused object removal
    - Stream deflation

    The output is usually smaller but may not be.
    """

    operation = "compress"
    stage = CompressionStage.OPTIMIZING

    def __init__(
        self,
        source: SourceFile,
        progress_callback: Optional[ProgressCallback] = None,
        error_reporter: Optional[ErrorReporter] = None,
    ):
        """
        Initialize compressor.

        Args:
            source: PDF to compress
            progress_callback: Optional callback for progress updates (stage, percentage)
            error_reporter: Receives failures (default: log them)
        """
        super().__init__(progress_callback, error_reporter)
        self.source = source

    def _input_size(self) -> int:
        return self.source.size

    def _run(self) -> PipelineResult:
        doc = open_document(self.source)
        try:
            pages = doc.page_count
            self._report_progress(CompressionStage.OPTIMIZING, 30)
            data = doc.tobytes(
                garbage=3,
                deflate=True,
                use_objstms=1,
            )
        finally:
            doc.close()

        self._report_progress(CompressionStage.FINALIZING, 90)

        ratio = calculate_compression_ratio(self.source.size, len(data))
        LOGGER.debug(
            "Compressed %s from %d to %d bytes", self.source.name, self.source.size, len(data)
        )

        return PipelineResult(
            success=True,
            operation=self.operation,
            artifact=OutputArtifact(COMPRESSED_FILENAME, data, ArtifactKind.PDF),
            pages_processed=pages,
            original_size=self.source.size,
            output_size=len(data),
            details={"compression_ratio": round(ratio * 100, 1)},
        )

    def compress(self) -> PipelineResult:
        return self.run()


def compress_pdf(
    source: SourceFile,
    progress_callback: Optional[ProgressCallback] = None,
    error_reporter: Optional[ErrorReporter] = None,
) -> PipelineResult:
    """
    Convenience function to compress a PDF.

    Args:
        source: PDF to compress
        progress_callback: Optional progress callback
        error_reporter: Optional failure reporter

    Returns:
        PipelineResult
    """
    return PDFCompressor(source, progress_callback, error_reporter).compress()

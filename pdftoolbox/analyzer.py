"""Upload inspection for PDF Toolbox."""

import logging
from dataclasses import dataclass
from typing import Optional

import fitz  # PyMuPDF

from .documents import SourceFile

LOGGER = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    """Result of PDF analysis."""
    file_name: str
    file_size: int
    page_count: int
    has_text: bool
    is_encrypted: bool = False
    has_metadata: bool = False
    has_embedded_fonts: bool = False
    error: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "file_name": self.file_name,
            "file_size": self.file_size,
            "page_count": self.page_count,
            "has_text": self.has_text,
            "is_encrypted": self.is_encrypted,
            "has_metadata": self.has_metadata,
            "has_embedded_fonts": self.has_embedded_fonts,
            "error": self.error,
        }


class PDFAnalyzer:
    """Reads basic facts about a PDF before any tool runs on it."""

    def __init__(self, source: SourceFile):
        self.source = source

    def _failed(self, error: str, is_encrypted: bool = False) -> AnalysisResult:
        return AnalysisResult(
            file_name=self.source.name,
            file_size=self.source.size,
            page_count=0,
            has_text=False,
            is_encrypted=is_encrypted,
            error=error,
        )

    def analyze(self) -> AnalysisResult:
        """
        Perform analysis of the PDF.

        Returns:
            AnalysisResult; ``error`` is set when the file cannot be used
        """
        if not self.source.data:
            return self._failed("File is empty")

        try:
            doc = fitz.open(stream=self.source.data, filetype="pdf")
        except Exception as e:
            LOGGER.warning("Could not open %s: %s", self.source.name, e)
            return self._failed(f"Failed to open PDF: {str(e)}")

        try:
            if doc.needs_pass:
                return self._failed("PDF is encrypted", is_encrypted=True)
            if doc.page_count == 0:
                return self._failed("PDF has no pages")

            has_text = False
            has_embedded_fonts = False
            for page in doc:
                if not has_text and page.get_text().strip():
                    has_text = True
                if not has_embedded_fonts and page.get_fonts():
                    has_embedded_fonts = True

            return AnalysisResult(
                file_name=self.source.name,
                file_size=self.source.size,
                page_count=doc.page_count,
                has_text=has_text,
                is_encrypted=doc.is_encrypted,
                has_metadata=any(doc.metadata.values()) if doc.metadata else False,
                has_embedded_fonts=has_embedded_fonts,
            )
        except Exception as e:
            LOGGER.warning("Analysis of %s failed: %s", self.source.name, e)
            return self._failed(f"Analysis failed: {str(e)}")
        finally:
            doc.close()

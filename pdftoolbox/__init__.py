"""
PDF Toolbox

Merge, split, compress and extract text from PDFs, and count words,
sentences and paragraphs in text or PDFs.
"""

__version__ = "1.0.0"
__author__ = "PDF Toolbox Team"

from .analyzer import AnalysisResult, PDFAnalyzer
from .compressor import PDFCompressor, compress_pdf
from .documents import DocumentLoadError, MergeQueue, SourceFile
from .jobs import JobManager
from .merger import PDFMerger, merge_pdfs
from .results import (
    ArtifactKind,
    ErrorReporter,
    LoggingErrorReporter,
    OutputArtifact,
    PipelineResult,
)
from .splitter import PDFSplitter, split_pdf
from .stats import TextStatistics, run_stats
from .text_handler import TextHandler, extract_text, pdf_text_stats

__all__ = [
    "AnalysisResult",
    "ArtifactKind",
    "DocumentLoadError",
    "ErrorReporter",
    "JobManager",
    "LoggingErrorReporter",
    "MergeQueue",
    "OutputArtifact",
    "PDFAnalyzer",
    "PDFCompressor",
    "PDFMerger",
    "PDFSplitter",
    "PipelineResult",
    "SourceFile",
    "TextHandler",
    "TextStatistics",
    "compress_pdf",
    "extract_text",
    "merge_pdfs",
    "pdf_text_stats",
    "run_stats",
    "split_pdf",
]

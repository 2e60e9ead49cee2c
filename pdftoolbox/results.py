"""Pipeline results, output artifacts and error reporting."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from .utils import format_size

LOGGER = logging.getLogger(__name__)

MERGED_FILENAME = "merged_by_pdftoolbox.pdf"
SPLIT_FILENAME = "split_pdf_bundle.zip"
COMPRESSED_FILENAME = "compressed_file.pdf"
EXTRACTED_FILENAME = "extracted_text.txt"


class ArtifactKind(Enum):
    """Kind of downloadable output, mapped to its MIME type."""
    PDF = "application/pdf"
    TEXT = "text/plain"
    BINARY = "application/octet-stream"


@dataclass
class OutputArtifact:
    """A finished output buffer and the name it is delivered under."""
    filename: str
    data: bytes
    kind: ArtifactKind = ArtifactKind.PDF

    @property
    def mimetype(self) -> str:
        return self.kind.value

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class PipelineResult:
    """Result of one pipeline invocation."""
    success: bool
    operation: str
    artifact: Optional[OutputArtifact] = None
    pages_processed: int = 0
    original_size: int = 0
    output_size: int = 0
    details: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "success": self.success,
            "operation": self.operation,
            "filename": self.artifact.filename if self.artifact else None,
            "pages_processed": self.pages_processed,
            "original_size": self.original_size,
            "original_size_formatted": format_size(self.original_size),
            "output_size": self.output_size,
            "output_size_formatted": format_size(self.output_size),
            "details": self.details,
            "error": self.error,
        }


class ErrorReporter:
    """Receives failures caught at a pipeline boundary."""

    def report(self, operation: str, error: BaseException) -> None:
        raise NotImplementedError


class LoggingErrorReporter(ErrorReporter):
    """Writes failures to the log with their traceback."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or LOGGER

    def report(self, operation: str, error: BaseException) -> None:
        self.logger.error(
            "%s failed: %s", operation, error,
            exc_info=(type(error), error, error.__traceback__),
        )

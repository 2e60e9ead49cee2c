"""Source files, the merge queue and document loading for PDF Toolbox."""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Tuple, Union

import fitz  # PyMuPDF

LOGGER = logging.getLogger(__name__)


class DocumentLoadError(Exception):
    """Raised when a source file cannot be opened as a PDF document."""


@dataclass(frozen=True)
class SourceFile:
    """An uploaded or selected file held in memory."""
    name: str
    data: bytes

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "SourceFile":
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"PDF file not found: {path}")
        return cls(name=path.name, data=path.read_bytes())

    @property
    def size(self) -> int:
        return len(self.data)


class MergeQueue:
    """
    Ordered list of files waiting to be merged.

    Order is the order of selection and determines the page order of the
    merged document.
    """

    MIN_FILES = 2

    def __init__(self, files: Union[List[SourceFile], Tuple[SourceFile, ...], None] = None):
        self._files: List[SourceFile] = list(files or [])
        self.last_used = time.time()

    def touch(self) -> None:
        """Mark the queue as in use now."""
        self.last_used = time.time()

    def add(self, *files: SourceFile) -> None:
        """Append files to the end of the queue."""
        self._files.extend(files)
        self.touch()

    def remove(self, index: int) -> SourceFile:
        """Remove and return the file at ``index``."""
        if index < 0 or index >= len(self._files):
            raise IndexError(f"No file at position {index}")
        self.touch()
        return self._files.pop(index)

    def clear(self) -> None:
        self._files.clear()
        self.touch()

    def snapshot(self) -> Tuple[SourceFile, ...]:
        """Copy of the current queue, safe to hand to a running merge."""
        return tuple(self._files)

    @property
    def can_merge(self) -> bool:
        return len(self._files) >= self.MIN_FILES

    def to_list(self) -> List[dict]:
        return [
            {"index": i, "name": f.name, "size": f.size}
            for i, f in enumerate(self._files)
        ]

    def __len__(self) -> int:
        return len(self._files)

    def __iter__(self) -> Iterator[SourceFile]:
        return iter(self._files)


def open_document(source: SourceFile) -> fitz.Document:
    """
    Open a source file as a PDF document.

    Args:
        source: File to open

    Returns:
        An open ``fitz.Document``; the caller closes it

    Raises:
        DocumentLoadError: If the data is empty, malformed or encrypted
    """
    if not source.data:
        raise DocumentLoadError(f"{source.name} is empty")

    try:
        doc = fitz.open(stream=source.data, filetype="pdf")
    except Exception as e:
        raise DocumentLoadError(f"Failed to open {source.name}: {e}") from e

    if doc.needs_pass:
        doc.close()
        raise DocumentLoadError(f"{source.name} is encrypted")

    if doc.page_count == 0:
        doc.close()
        raise DocumentLoadError(f"{source.name} has no pages")

    LOGGER.debug("Opened %s (%d pages)", source.name, doc.page_count)
    return doc

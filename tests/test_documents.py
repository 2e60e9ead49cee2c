from __future__ import annotations

from pathlib import Path

import pytest

from pdftoolbox import DocumentLoadError, MergeQueue, SourceFile
from pdftoolbox.documents import open_document


def _file(name: str) -> SourceFile:
    return SourceFile(name=name, data=name.encode())


def test_queue_keeps_selection_order() -> None:
    queue = MergeQueue()
    queue.add(_file("a.pdf"))
    queue.add(_file("b.pdf"), _file("c.pdf"))

    assert [f.name for f in queue] == ["a.pdf", "b.pdf", "c.pdf"]
    assert len(queue) == 3


def test_queue_remove_by_index() -> None:
    queue = MergeQueue([_file("a.pdf"), _file("b.pdf"), _file("c.pdf")])

    removed = queue.remove(1)

    assert removed.name == "b.pdf"
    assert [f.name for f in queue] == ["a.pdf", "c.pdf"]


@pytest.mark.parametrize("index", [-1, 2, 10])
def test_queue_remove_out_of_range(index: int) -> None:
    queue = MergeQueue([_file("a.pdf"), _file("b.pdf")])
    with pytest.raises(IndexError):
        queue.remove(index)
    assert len(queue) == 2


def test_queue_clear() -> None:
    queue = MergeQueue([_file("a.pdf"), _file("b.pdf")])
    queue.clear()
    assert len(queue) == 0
    assert queue.to_list() == []


def test_can_merge_needs_two_files() -> None:
    queue = MergeQueue()
    assert not queue.can_merge
    queue.add(_file("a.pdf"))
    assert not queue.can_merge
    queue.add(_file("b.pdf"))
    assert queue.can_merge


def test_snapshot_is_not_affected_by_later_changes() -> None:
    queue = MergeQueue([_file("a.pdf"), _file("b.pdf")])
    snapshot = queue.snapshot()

    queue.remove(0)
    queue.add(_file("c.pdf"))

    assert [f.name for f in snapshot] == ["a.pdf", "b.pdf"]


def test_to_list() -> None:
    queue = MergeQueue([_file("a.pdf"), _file("bb.pdf")])
    assert queue.to_list() == [
        {"index": 0, "name": "a.pdf", "size": 5},
        {"index": 1, "name": "bb.pdf", "size": 6},
    ]


def test_source_file_from_path(sample_pdf: Path) -> None:
    source = SourceFile.from_path(sample_pdf)
    assert source.name == "sample.pdf"
    assert source.size == sample_pdf.stat().st_size


def test_source_file_from_missing_path(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        SourceFile.from_path(tmp_path / "missing.pdf")


def test_open_document(sample_source: SourceFile) -> None:
    doc = open_document(sample_source)
    try:
        assert doc.page_count == 3
    finally:
        doc.close()


def test_open_empty_document() -> None:
    with pytest.raises(DocumentLoadError, match="empty"):
        open_document(SourceFile(name="empty.pdf", data=b""))


def test_open_malformed_document(broken_source: SourceFile) -> None:
    with pytest.raises(DocumentLoadError):
        open_document(broken_source)


def test_open_encrypted_document(encrypted_source: SourceFile) -> None:
    with pytest.raises(DocumentLoadError, match="encrypted"):
        open_document(encrypted_source)


def test_queue_changes_refresh_last_used() -> None:
    queue = MergeQueue()
    queue.last_used = 0.0
    queue.add(_file("a.pdf"))
    assert queue.last_used > 0.0

    queue.last_used = 0.0
    queue.remove(0)
    assert queue.last_used > 0.0

    queue.last_used = 0.0
    queue.clear()
    assert queue.last_used > 0.0

"""Tests for the PDF file store."""

from pathlib import Path
from unittest.mock import patch

import pytest

from bookshelf.errors import StorageError
from bookshelf.storage import FileStore


class TestFileStore:
    def test_creates_directory(self, tmp_path: Path) -> None:
        directory = tmp_path / "nested" / "pdfs"
        FileStore(directory)
        assert directory.is_dir()

    def test_path_is_derived_from_id(self, file_store: FileStore, pdf_dir: Path) -> None:
        assert file_store.path("bAbc12345") == pdf_dir / "bAbc12345.pdf"
        assert file_store.filename("bAbc12345") == "bAbc12345.pdf"
        assert not file_store.path("bAbc12345").exists()

    def test_save_writes_content(self, file_store: FileStore, pdf_bytes: bytes) -> None:
        path = file_store.save("bAbc12345", pdf_bytes)

        assert path == file_store.path("bAbc12345")
        assert path.read_bytes() == pdf_bytes
        assert file_store.exists("bAbc12345")

    def test_save_overwrites(self, file_store: FileStore, pdf_bytes: bytes) -> None:
        file_store.save("bAbc12345", b"%PDF-old")
        file_store.save("bAbc12345", pdf_bytes)

        assert file_store.path("bAbc12345").read_bytes() == pdf_bytes
        assert file_store.list_ids() == ["bAbc12345"]

    def test_save_failure_raises_storage_error(
        self, file_store: FileStore, pdf_bytes: bytes, pdf_dir: Path
    ) -> None:
        with patch("bookshelf.storage.os.replace", side_effect=OSError("read-only")):
            with pytest.raises(StorageError):
                file_store.save("bAbc12345", pdf_bytes)

        assert not file_store.exists("bAbc12345")
        assert list(pdf_dir.iterdir()) == []

    def test_read_returns_content(self, file_store: FileStore, pdf_bytes: bytes) -> None:
        file_store.save("bAbc12345", pdf_bytes)
        assert file_store.read("bAbc12345") == pdf_bytes

    def test_read_missing_file_raises_not_found(self, file_store: FileStore) -> None:
        with pytest.raises(FileNotFoundError):
            file_store.read("bNever000")

    def test_delete_removes_file(self, file_store: FileStore, pdf_bytes: bytes) -> None:
        file_store.save("bAbc12345", pdf_bytes)
        file_store.delete("bAbc12345")
        assert not file_store.exists("bAbc12345")

    def test_delete_missing_file_is_not_an_error(self, file_store: FileStore) -> None:
        file_store.delete("bNever000")
        file_store.delete("bNever000")

    def test_list_ids_ignores_other_files(
        self, file_store: FileStore, pdf_bytes: bytes, pdf_dir: Path
    ) -> None:
        file_store.save("bB0000000", pdf_bytes)
        file_store.save("bA0000000", pdf_bytes)
        (pdf_dir / "notes.txt").write_text("x")

        assert file_store.list_ids() == ["bA0000000", "bB0000000"]

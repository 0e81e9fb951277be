"""Shared pytest fixtures for the catalogue tests."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from bookshelf.catalog.schemas import BookFields
from bookshelf.catalog.service import CatalogService
from bookshelf.catalog.store import MetadataStore
from bookshelf.config import AppConfig, StorageConfig
from bookshelf.main import create_app
from bookshelf.storage import FileStore


PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\ntrailer\n<< /Root 1 0 R >>\n%%EOF\n"


@pytest.fixture
def pdf_bytes() -> bytes:
    return PDF_BYTES


@pytest.fixture
def metadata_path(tmp_path: Path) -> Path:
    return tmp_path / "books" / "metadata.json"


@pytest.fixture
def pdf_dir(tmp_path: Path) -> Path:
    return tmp_path / "books" / "pdfs"


@pytest.fixture
def metadata_store(metadata_path: Path) -> MetadataStore:
    return MetadataStore(metadata_path)


@pytest.fixture
def file_store(pdf_dir: Path) -> FileStore:
    return FileStore(pdf_dir)


@pytest.fixture
def catalog(metadata_store: MetadataStore, file_store: FileStore) -> CatalogService:
    return CatalogService(metadata_store, file_store)


@pytest.fixture
def make_fields():
    def _make(title="Algebra Basics", class_="10", category="Mathematics", author=None):
        return BookFields(title=title, class_=class_, category=category, author=author)

    return _make


@pytest.fixture
def app_config(metadata_path: Path, pdf_dir: Path) -> AppConfig:
    return AppConfig(
        storage=StorageConfig(metadata_path=str(metadata_path), pdf_dir=str(pdf_dir))
    )


@pytest.fixture
def client(app_config: AppConfig) -> TestClient:
    return TestClient(create_app(app_config))

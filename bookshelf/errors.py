"""Error types raised by the catalogue core.

Each error carries the HTTP status the API layer answers with, so the
router never has to know which failure it is looking at.
"""

from typing import Optional


class CatalogError(Exception):
    """Base class for catalogue failures."""

    status_code = 500
    message = "Catalog error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class BookNotFoundError(CatalogError):
    """No metadata record exists for the requested id."""

    status_code = 404
    message = "Book not found"

    def __init__(self, book_id: str):
        super().__init__()
        self.book_id = book_id


class BookFileGoneError(CatalogError):
    """The record exists but its PDF is missing from the file store."""

    status_code = 410
    message = "File missing"

    def __init__(self, book_id: str):
        super().__init__()
        self.book_id = book_id


class StorageError(CatalogError):
    """Reading or writing the metadata document or a PDF failed."""

    status_code = 500
    message = "Storage failure"

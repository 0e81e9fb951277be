"""
Catalogue service: keeps the metadata document and the PDF directory
consistent.

Every write follows the same order. On create and update the PDF is
written first and the metadata committed afterwards, so a record never
points at a file that was never written; a failed commit leaves an
orphan file behind, which is logged. On delete the file goes first and
the record second; a failed commit leaves a record without a file,
which the next download reports as gone.

Writers are serialised by one lock around the load -> mutate -> save
cycle. Readers go straight to the metadata store, whose atomic save
means they always see a whole document.
"""

from __future__ import annotations

import logging
import secrets
import string
import threading
from typing import Container, List, Optional, Tuple

from pydantic import BaseModel, Field

from ..errors import BookFileGoneError, BookNotFoundError, StorageError
from ..models import BookRecord, utc_now
from ..storage import FileStore
from .schemas import BookChanges, BookFields
from .store import MetadataStore


logger = logging.getLogger(__name__)

ID_ALPHABET = string.ascii_letters + string.digits


class OrphanReport(BaseModel):
    """Files without a record and records without a file."""

    orphan_files: List[str] = Field(default_factory=list)
    orphan_metadata: List[str] = Field(default_factory=list)


class CatalogService:
    """Create, read, update and delete books across both stores."""

    def __init__(
        self,
        metadata: MetadataStore,
        files: FileStore,
        id_prefix: str = "b",
        id_length: int = 8,
    ):
        self.metadata = metadata
        self.files = files
        self.id_prefix = id_prefix
        self.id_length = id_length
        self._lock = threading.Lock()

    def _generate_id(self, taken: Container[str]) -> str:
        while True:
            token = "".join(secrets.choice(ID_ALPHABET) for _ in range(self.id_length))
            book_id = f"{self.id_prefix}{token}"
            if book_id not in taken:
                return book_id
            logger.debug("Generated id %s already taken, retrying", book_id)

    # -- reads -------------------------------------------------------------

    def list_books(
        self,
        q: Optional[str] = None,
        class_: Optional[str] = None,
        category: Optional[str] = None,
    ) -> List[BookRecord]:
        return self.metadata.filter(q=q, class_=class_, category=category)

    def get_book(self, book_id: str) -> BookRecord:
        found = self.metadata.find(book_id)
        if found is None:
            raise BookNotFoundError(book_id)
        return found[1]

    def download(self, book_id: str) -> Tuple[BookRecord, bytes]:
        """Return the record and PDF bytes for ``book_id``.

        Raises ``BookNotFoundError`` when there is no record and
        ``BookFileGoneError`` when the record exists but its file does not.
        The bytes are read here, so a file removed after the record lookup
        still reports as gone.
        """
        record = self.get_book(book_id)
        try:
            content = self.files.read(book_id)
        except FileNotFoundError:
            logger.warning("Book %s has metadata but no file at %s", book_id, self.files.path(book_id))
            raise BookFileGoneError(book_id) from None
        return record, content

    def find_orphans(self) -> OrphanReport:
        """Report files no record refers to and records whose file is missing."""
        records = self.metadata.load()
        known = {r.id for r in records}
        on_disk = set(self.files.list_ids())
        return OrphanReport(
            orphan_files=sorted(on_disk - known),
            orphan_metadata=[r.id for r in records if r.id not in on_disk],
        )

    # -- writes ------------------------------------------------------------

    def create_book(self, fields: BookFields, content: bytes) -> BookRecord:
        with self._lock:
            records = self.metadata.load()
            book_id = self._generate_id({r.id for r in records})

            self.files.save(book_id, content)

            record = BookRecord(
                id=book_id,
                title=fields.title,
                class_=fields.class_,
                category=fields.category,
                author=fields.author,
                filename=self.files.filename(book_id),
                uploaded_at=utc_now(),
            )
            records.append(record)
            try:
                self.metadata.save(records)
            except StorageError:
                logger.error(
                    "Metadata commit failed for new book %s; %s is now an orphan file",
                    book_id,
                    self.files.path(book_id),
                )
                raise

        logger.info("Created book %s (%s)", book_id, record.title)
        return record

    def update_book(
        self,
        book_id: str,
        changes: Optional[BookChanges] = None,
        content: Optional[bytes] = None,
    ) -> BookRecord:
        """Apply a partial update and, if ``content`` is given, replace the PDF.

        Only fields explicitly set on ``changes`` are written; the rest
        keep their previous values. The filename never changes because it
        is derived from the id.
        """
        with self._lock:
            records = self.metadata.load()
            found = self.metadata.find(book_id, records)
            if found is None:
                raise BookNotFoundError(book_id)
            index, record = found

            update = changes.model_dump(exclude_unset=True) if changes is not None else {}

            if content is not None:
                try:
                    self.files.delete(book_id)
                except StorageError as exc:
                    logger.warning("Could not remove old file for %s, overwriting: %s", book_id, exc)
                try:
                    self.files.save(book_id, content)
                except StorageError:
                    logger.error("Saving the replacement file failed; book %s now has no file", book_id)
                    raise
                update["filename"] = self.files.filename(book_id)

            update["uploaded_at"] = utc_now()
            updated = record.model_copy(update=update)
            records[index] = updated
            try:
                self.metadata.save(records)
            except StorageError:
                if content is not None:
                    logger.error(
                        "Metadata commit failed for book %s after its file was replaced",
                        book_id,
                    )
                raise

        logger.info("Updated book %s (fields: %s)", book_id, ", ".join(sorted(update)))
        return updated

    def delete_book(self, book_id: str) -> None:
        with self._lock:
            records = self.metadata.load()
            found = self.metadata.find(book_id, records)
            if found is None:
                raise BookNotFoundError(book_id)

            self.files.delete(book_id)

            remaining = [r for r in records if r.id != book_id]
            try:
                self.metadata.save(remaining)
            except StorageError:
                logger.error(
                    "Metadata commit failed deleting book %s; record now has no file",
                    book_id,
                )
                raise

        logger.info("Deleted book %s", book_id)

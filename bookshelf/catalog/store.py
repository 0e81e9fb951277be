"""
Metadata store for the catalogue.

All book records live in a single JSON array on disk. The store reads
the whole array, hands it out as a list of ``BookRecord`` objects and
writes the whole array back on every change. Records keep their
insertion order and are always located by ``id``, never by position.

The document is created empty when the store is built. Reading is
forgiving and never writes: a missing document reads as empty,
and a document that is not a JSON array is treated as an empty
catalogue rather than an error. Writing is strict: a failed write raises
``StorageError`` so the caller knows nothing was committed.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from pydantic import ValidationError

from ..errors import StorageError
from ..models import BookRecord


logger = logging.getLogger(__name__)


def _norm(s: Optional[str]) -> str:
    """Lowercase and strip a string; ``None`` becomes an empty string."""
    return (s or "").strip().lower()


class MetadataStore:
    """Ordered collection of ``BookRecord`` persisted as one JSON array."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._initialise()

    def _initialise(self) -> None:
        # Exclusive create; an existing document is left untouched.
        try:
            with self.path.open("x", encoding="utf-8") as f:
                json.dump([], f)
        except FileExistsError:
            pass
        except OSError as exc:
            logger.warning("Could not initialise %s: %s", self.path, exc)

    def load(self) -> List[BookRecord]:
        """Load every record from the backing document.

        Returns
        -------
        List[BookRecord]
            The records in stored order. A missing document, one that
            cannot be parsed, or one that is not an array all give an
            empty list; reading never writes. Array entries that are
            not valid records are skipped.
        """
        try:
            with self.path.open("r", encoding="utf-8") as f:
                raw = json.load(f)
        except FileNotFoundError:
            return []
        except (OSError, ValueError) as exc:
            logger.warning("Metadata document %s unreadable, treating as empty: %s", self.path, exc)
            return []

        if not isinstance(raw, list):
            logger.warning("Metadata document %s is not an array, treating as empty", self.path)
            return []

        records: List[BookRecord] = []
        for position, entry in enumerate(raw):
            try:
                records.append(BookRecord.model_validate(entry))
            except ValidationError as exc:
                logger.warning("Skipping malformed record at position %d: %s", position, exc)
        return records

    def save(self, records: Sequence[BookRecord]) -> None:
        """Replace the backing document with ``records``.

        The array is written to a temporary file beside the document and
        then moved over it in one step, so a concurrent ``load`` sees
        either the old or the new document, never a partial one.

        Parameters
        ----------
        records : Sequence[BookRecord]
            The full collection, in the order it should be stored.

        Raises
        ------
        StorageError
            When the document cannot be written.
        """
        payload = [record.to_json() for record in records]
        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                json.dump(payload, tmp, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(f"Could not write metadata document: {exc}") from exc

    def find(
        self, book_id: str, records: Optional[Sequence[BookRecord]] = None
    ) -> Optional[Tuple[int, BookRecord]]:
        """Locate a record by id.

        Parameters
        ----------
        book_id : str
            The id to look for.
        records : Optional[Sequence[BookRecord]]
            A snapshot to search. When omitted the document is loaded.

        Returns
        -------
        Optional[Tuple[int, BookRecord]]
            The position and record of the first match, or ``None``.
        """
        if records is None:
            records = self.load()
        for index, record in enumerate(records):
            if record.id == book_id:
                return index, record
        return None

    def filter(
        self,
        q: Optional[str] = None,
        class_: Optional[str] = None,
        category: Optional[str] = None,
    ) -> List[BookRecord]:
        """Return the records matching every filter given.

        ``class_`` and ``category`` must match exactly. ``q`` matches when
        it is contained, ignoring case, in the title or in the author.
        Filters that are ``None`` or empty are not applied.
        """
        items = self.load()

        if class_:
            items = [b for b in items if b.class_ == class_]
        if category:
            items = [b for b in items if b.category == category]

        nq = _norm(q)
        if nq:
            items = [b for b in items if nq in _norm(b.title) or nq in _norm(b.author)]

        return items

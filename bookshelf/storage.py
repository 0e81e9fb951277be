# bookshelf/storage.py
import logging
import os
import tempfile
from pathlib import Path
from typing import List, Union

from .errors import StorageError


logger = logging.getLogger(__name__)

PDF_SUFFIX = ".pdf"


class FileStore:
    """PDF files kept in one directory, named ``<id>.pdf``.

    The store knows nothing about metadata: whether a file is part of the
    catalogue is decided by the metadata document, never by what is on
    disk here.
    """

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def filename(self, book_id: str) -> str:
        return f"{book_id}{PDF_SUFFIX}"

    def path(self, book_id: str) -> Path:
        return self.directory / self.filename(book_id)

    def exists(self, book_id: str) -> bool:
        return self.path(book_id).is_file()

    def read(self, book_id: str) -> bytes:
        """Return the PDF bytes. Raises ``FileNotFoundError`` when there is no file."""
        target = self.path(book_id)
        try:
            return target.read_bytes()
        except FileNotFoundError:
            raise
        except OSError as exc:
            raise StorageError(f"Could not read {target.name}: {exc}") from exc

    def save(self, book_id: str, content: bytes) -> Path:
        """Write ``content`` as the PDF for ``book_id``, replacing any previous file.

        The bytes go to a temporary file in the same directory first, so a
        concurrent download never sees a half-written PDF.
        """
        target = self.path(book_id)
        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                "wb", dir=self.directory, prefix=f".{book_id}.", suffix=".tmp", delete=False
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(content)
            os.replace(tmp_name, target)
        except OSError as exc:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(f"Could not write {target.name}: {exc}") from exc
        return target

    def delete(self, book_id: str) -> None:
        """Remove the PDF for ``book_id``. A missing file is not an error."""
        target = self.path(book_id)
        try:
            target.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Could not delete {target.name}: {exc}") from exc

    def list_ids(self) -> List[str]:
        return sorted(p.stem for p in self.directory.glob(f"*{PDF_SUFFIX}") if p.is_file())

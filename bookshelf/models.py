# bookshelf/models.py
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


class BookRecord(BaseModel):
    """One catalogue entry as persisted in the metadata document.

    ``class`` is a reserved word, so the attribute is ``class_`` and the
    alias keeps the stored key as ``class``. ``filename`` is always
    ``<id>.pdf``; it is stored for readability of the JSON document but
    never set independently of ``id``.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    class_: str = Field(alias="class")
    category: str
    author: Optional[str] = None
    filename: str
    uploaded_at: datetime = Field(default_factory=utc_now)

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)

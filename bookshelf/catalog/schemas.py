"""
Pydantic schema definitions for the catalog module.

``BookFields`` and ``BookChanges`` describe what a client may send when
creating or updating a book; the router validates incoming form data
against them before the catalogue service is called. ``Envelope`` is the
shape of every JSON response body.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


TITLE_MAX_LENGTH = 255
AUTHOR_MAX_LENGTH = 255


def _blank_to_none(value: Any) -> Any:
    # Multipart forms cannot carry null; an empty author means "no author".
    if isinstance(value, str) and value.strip() == "":
        return None
    return value


class BookFields(BaseModel):
    """Descriptive fields required to create a book."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=1, max_length=TITLE_MAX_LENGTH)
    class_: str = Field(alias="class", min_length=1)
    category: str = Field(min_length=1)
    author: Optional[str] = Field(default=None, max_length=AUTHOR_MAX_LENGTH)

    @field_validator("author", mode="before")
    @classmethod
    def blank_author_to_none(cls, value: Any) -> Any:
        return _blank_to_none(value)


class BookChanges(BaseModel):
    """Fields a client may change on an existing book.

    Only the fields actually sent are applied; use
    ``model_dump(exclude_unset=True)`` to get them. Sending an empty
    ``author`` clears it.
    """

    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)
    class_: Optional[str] = Field(default=None, alias="class", min_length=1)
    category: Optional[str] = Field(default=None, min_length=1)
    author: Optional[str] = Field(default=None, max_length=AUTHOR_MAX_LENGTH)

    @field_validator("author", mode="before")
    @classmethod
    def blank_author_to_none(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("title", "class_", "category")
    @classmethod
    def reject_null(cls, value: Optional[str]) -> str:
        if value is None:
            raise ValueError("may not be null")
        return value


class Envelope(BaseModel):
    """Response body wrapper shared by every endpoint.

    ``count`` is only present on list responses.
    """

    status: bool
    message: str
    count: Optional[int] = None
    data: Any = None

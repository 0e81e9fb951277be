"""
Route definitions for the book catalogue API.

Endpoints under /api/books:
- GET          /                  : list books (filters: class, category, q)
- GET          /{book_id}         : one book's metadata
- GET          /{book_id}/download: the book's PDF
- POST         /store             : upload a new book (multipart)
- PUT | PATCH  /{book_id}         : change metadata and/or replace the PDF
- DELETE       /{book_id}         : remove a book and its PDF

This module is the validation layer as well: form data is checked
against ``BookFields`` / ``BookChanges`` and the uploaded PDF is checked
for type and size before the catalogue service sees anything.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Type, TypeVar

from fastapi import APIRouter, Depends, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ValidationError
from starlette.datastructures import UploadFile

from .schemas import BookChanges, BookFields, Envelope
from .service import CatalogService


PDF_MAGIC = b"%PDF-"
FORM_FIELDS = ("title", "class", "category", "author")

ModelT = TypeVar("ModelT", bound=BaseModel)

router = APIRouter(prefix="/api/books", tags=["books"])


def get_catalog(request: Request) -> CatalogService:
    return request.app.state.catalog


def envelope(
    message: str,
    data: Any = None,
    count: Optional[int] = None,
    status: bool = True,
    status_code: int = 200,
) -> JSONResponse:
    """Wrap ``data`` in the response envelope; ``count`` is left out unless given."""
    body = Envelope(status=status, message=message, count=count, data=data).model_dump()
    if count is None:
        body.pop("count")
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


def _invalid(field: str, msg: str) -> RequestValidationError:
    return RequestValidationError(
        [{"loc": ("body", field), "msg": msg, "type": "value_error"}]
    )


def _validate(model: Type[ModelT], data: Dict[str, Any]) -> ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        errors = exc.errors(include_url=False, include_context=False, include_input=False)
        for error in errors:
            error["loc"] = ("body",) + tuple(error["loc"])
        raise RequestValidationError(errors) from exc


async def _read_pdf(upload: Any, max_size_kb: int) -> bytes:
    if not isinstance(upload, UploadFile):
        raise _invalid("pdf", "The pdf field must be a file.")
    content = await upload.read()
    if len(content) > max_size_kb * 1024:
        raise _invalid("pdf", f"The pdf may not be greater than {max_size_kb} kilobytes.")
    if not content.startswith(PDF_MAGIC):
        raise _invalid("pdf", "The pdf must be a file of type: pdf.")
    return content


def _form_fields(form: Any) -> Dict[str, Any]:
    """Keep only the descriptive fields actually present in the form."""
    return {name: form.get(name) for name in FORM_FIELDS if name in form}


@router.get("")
def list_books(
    class_: Optional[str] = Query(default=None, alias="class", description="Exact class"),
    category: Optional[str] = Query(default=None, description="Exact category"),
    q: Optional[str] = Query(default=None, description="Text search in title/author"),
    catalog: CatalogService = Depends(get_catalog),
) -> JSONResponse:
    books = catalog.list_books(q=q, class_=class_, category=category)
    return envelope(
        "Books fetched successfully",
        data=[b.to_json() for b in books],
        count=len(books),
    )


@router.get("/{book_id}")
def get_book(book_id: str, catalog: CatalogService = Depends(get_catalog)) -> JSONResponse:
    book = catalog.get_book(book_id)
    return envelope("Book details retrieved", data=book.to_json())


@router.get("/{book_id}/download")
def download_book(book_id: str, catalog: CatalogService = Depends(get_catalog)) -> Response:
    book, content = catalog.download(book_id)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{book.filename}"'},
    )


@router.post("/store", status_code=201)
async def store_book(
    request: Request, catalog: CatalogService = Depends(get_catalog)
) -> JSONResponse:
    form = await request.form()
    fields = _validate(BookFields, _form_fields(form))
    if "pdf" not in form:
        raise _invalid("pdf", "The pdf field is required.")
    content = await _read_pdf(form["pdf"], request.app.state.config.uploads.max_size_kb)

    book = await run_in_threadpool(catalog.create_book, fields, content)
    return envelope("Book uploaded successfully", data=book.to_json(), status_code=201)


@router.api_route("/{book_id}", methods=["PUT", "PATCH"])
async def update_book(
    book_id: str, request: Request, catalog: CatalogService = Depends(get_catalog)
) -> JSONResponse:
    form = await request.form()
    changes = _validate(BookChanges, _form_fields(form))
    content = None
    if "pdf" in form:
        content = await _read_pdf(form["pdf"], request.app.state.config.uploads.max_size_kb)

    book = await run_in_threadpool(catalog.update_book, book_id, changes, content)
    return envelope("Book updated successfully", data=book.to_json())


@router.delete("/{book_id}")
def delete_book(book_id: str, catalog: CatalogService = Depends(get_catalog)) -> JSONResponse:
    catalog.delete_book(book_id)
    return envelope("Book deleted successfully", data=None)

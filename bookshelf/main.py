# bookshelf/main.py
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError

from .catalog import CatalogService, MetadataStore, catalog_router
from .catalog.router import envelope
from .config import AppConfig, load_config
from .errors import CatalogError
from .storage import FileStore


logger = logging.getLogger(__name__)


def build_catalog(config: AppConfig) -> CatalogService:
    return CatalogService(
        metadata=MetadataStore(config.storage.metadata_path),
        files=FileStore(config.storage.pdf_dir),
        id_prefix=config.ids.prefix,
        id_length=config.ids.length,
    )


def report_orphans(catalog: CatalogService) -> None:
    report = catalog.find_orphans()
    if report.orphan_files:
        logger.warning("PDF files with no catalogue record: %s", ", ".join(report.orphan_files))
    if report.orphan_metadata:
        logger.warning("Catalogue records with no PDF file: %s", ", ".join(report.orphan_metadata))


def create_app(config: Optional[AppConfig] = None) -> FastAPI:
    if config is None:
        config = load_config()

    logging.basicConfig(
        level=config.logging.level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title=config.app.name,
        description=(
            "CRUD service for a catalogue of PDF books: metadata in one JSON "
            "document, files on disk keyed by a generated id."
        ),
        version=config.app.version,
    )
    app.state.config = config
    app.state.catalog = build_catalog(config)
    report_orphans(app.state.catalog)

    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return envelope(exc.message, status=False, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return envelope(
            "Validation failed",
            data=jsonable_encoder(exc.errors()),
            status=False,
            status_code=422,
        )

    # 🔹 Health check
    @app.get("/")
    def health_check():
        return {"status": "ok", "message": "Book catalog live 📚"}

    app.include_router(catalog_router)
    return app

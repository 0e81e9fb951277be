"""
Catalog package for the PDF book catalogue.

``store`` holds the JSON metadata document, ``service`` keeps it in step
with the PDF files on disk, and ``router`` exposes both over a REST API
mounted under ``/api/books``.
"""

from .router import router as catalog_router  # noqa: F401
from .service import CatalogService, OrphanReport  # noqa: F401
from .store import MetadataStore  # noqa: F401

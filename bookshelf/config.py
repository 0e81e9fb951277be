"""Configuration loader for the book catalogue service."""

import os
from pathlib import Path
from typing import Union

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field


class AppInfo(BaseModel):
    """Application metadata."""

    name: str = "PDF Book Catalog"
    version: str = "1.0.0"


class StorageConfig(BaseModel):
    """Where the metadata document and the PDF files live."""

    metadata_path: str = "./storage/books/metadata.json"
    pdf_dir: str = "./storage/books/pdfs"


class UploadConfig(BaseModel):
    """Limits applied to uploaded PDFs."""

    max_size_kb: int = 20480


class IdConfig(BaseModel):
    """Shape of generated book ids."""

    prefix: str = "b"
    length: int = Field(default=8, ge=4)


class LoggingConfig(BaseModel):
    level: str = "INFO"


class AppConfig(BaseModel):
    """Root application configuration."""

    app: AppInfo = Field(default_factory=AppInfo)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    uploads: UploadConfig = Field(default_factory=UploadConfig)
    ids: IdConfig = Field(default_factory=IdConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(config_path: Union[str, Path] = "config.yaml") -> AppConfig:
    """Load configuration from a YAML file and environment variables.

    Args:
        config_path: Path to the YAML configuration file. A missing file
            leaves every section at its defaults.

    Returns:
        Fully populated AppConfig instance.
    """
    load_dotenv()

    yaml_data: dict = {}
    config_file = Path(config_path)
    if config_file.exists():
        with open(config_file) as f:
            yaml_data = yaml.safe_load(f) or {}

    config = AppConfig(**yaml_data)

    # Environment wins over the YAML file
    metadata_path = os.getenv("BOOKSHELF_METADATA_PATH")
    if metadata_path:
        config.storage.metadata_path = metadata_path
    pdf_dir = os.getenv("BOOKSHELF_PDF_DIR")
    if pdf_dir:
        config.storage.pdf_dir = pdf_dir
    log_level = os.getenv("BOOKSHELF_LOG_LEVEL")
    if log_level:
        config.logging.level = log_level.upper()

    return config

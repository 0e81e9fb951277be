"""Tests for configuration loading."""

from pathlib import Path

import yaml

from bookshelf.config import AppConfig, load_config


class TestAppConfigDefaults:
    def test_default_storage_paths(self) -> None:
        config = AppConfig()
        assert config.storage.metadata_path == "./storage/books/metadata.json"
        assert config.storage.pdf_dir == "./storage/books/pdfs"

    def test_default_limits_and_ids(self) -> None:
        config = AppConfig()
        assert config.uploads.max_size_kb == 20480
        assert config.ids.prefix == "b"
        assert config.ids.length == 8
        assert config.logging.level == "INFO"


class TestLoadConfig:
    def test_load_from_yaml(self, tmp_path: Path) -> None:
        yaml_data = {
            "storage": {"pdf_dir": "/srv/pdfs"},
            "uploads": {"max_size_kb": 512},
        }
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump(yaml_data))

        config = load_config(config_file)
        assert config.storage.pdf_dir == "/srv/pdfs"
        assert config.uploads.max_size_kb == 512
        # Other fields keep defaults
        assert config.storage.metadata_path == "./storage/books/metadata.json"

    def test_load_missing_yaml_uses_defaults(self, tmp_path: Path) -> None:
        config = load_config(tmp_path / "nonexistent.yaml")
        assert config.app.name == "PDF Book Catalog"

    def test_empty_yaml_uses_defaults(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("")
        assert load_config(config_file).ids.prefix == "b"

    def test_env_vars_override_yaml(self, tmp_path: Path, monkeypatch) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump({"storage": {"metadata_path": "/from/yaml.json"}}))

        monkeypatch.setenv("BOOKSHELF_METADATA_PATH", "/from/env.json")
        monkeypatch.setenv("BOOKSHELF_PDF_DIR", "/from/env/pdfs")
        monkeypatch.setenv("BOOKSHELF_LOG_LEVEL", "debug")

        config = load_config(config_file)
        assert config.storage.metadata_path == "/from/env.json"
        assert config.storage.pdf_dir == "/from/env/pdfs"
        assert config.logging.level == "DEBUG"

    def test_load_project_config_yaml(self) -> None:
        config = load_config(Path(__file__).resolve().parents[1] / "config.yaml")
        assert config.app.name == "PDF Book Catalog"
        assert config.ids.length == 8

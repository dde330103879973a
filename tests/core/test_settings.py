"""
Tests for environment-driven settings.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from odf_spine.core.settings import OdfSettings, get_settings


class TestDefaults:
    def test_defaults(self, tmp_path):
        settings = OdfSettings()
        assert settings.port == 5500
        assert settings.backend == "json"
        assert settings.default_port_count == 96
        assert settings.search_limit == 100
        assert settings.atomic_writes is True
        assert settings.data_dir == Path(tmp_path)
        assert settings.data_path == Path(tmp_path) / "data.json"

    def test_log_level_uppercased(self):
        assert OdfSettings(log_level="debug").log_level == "DEBUG"


class TestEnvironment:
    def test_prefixed_variables(self, monkeypatch):
        monkeypatch.setenv("ODF_BACKEND", "sqlite")
        monkeypatch.setenv("ODF_SEARCH_LIMIT", "10")
        settings = OdfSettings()
        assert settings.backend == "sqlite"
        assert settings.search_limit == 10

    def test_plain_port_variable(self, monkeypatch):
        monkeypatch.setenv("PORT", "8080")
        assert OdfSettings().port == 8080

    @pytest.mark.parametrize("name", ["DATA_DIR", "RENDER_DISK_MOUNT_PATH", "ODF_DATA_DIR"])
    def test_data_dir_aliases(self, monkeypatch, tmp_path, name):
        monkeypatch.setenv(name, str(tmp_path / "disk"))
        assert OdfSettings().data_path == tmp_path / "disk" / "data.json"

    def test_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("ODF_DEFAULT_PORT_COUNT=48\n")
        assert OdfSettings().default_port_count == 48

    def test_invalid_backend_rejected(self, monkeypatch):
        monkeypatch.setenv("ODF_BACKEND", "redis")
        with pytest.raises(ValidationError):
            OdfSettings()

    def test_search_limit_must_be_positive(self):
        with pytest.raises(ValidationError):
            OdfSettings(search_limit=0)


class TestCachedSettings:
    def test_cached(self):
        assert get_settings() is get_settings()

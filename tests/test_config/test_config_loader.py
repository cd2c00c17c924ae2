"""
Tests for ConfigLoader: YAML merging, env profiles and env overrides.
"""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from asset_catalog.config import ConfigLoader, get_config

REPO_CONFIG_DIR = Path(__file__).resolve().parents[2] / "config"

ENV_VARS = (
    "POSTGRES_URL",
    "TIMESCALE_URL",
    "REDIS_URL",
    "ASSET_CATALOG_PAGE_SIZE",
    "LOG_LEVEL",
    "ASSET_CATALOG_ENV",
    "ASSET_CATALOG_CONFIG_DIR",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)


def _write(path: Path, data: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data), encoding="utf-8")


class TestConfigLoader:
    def test_defaults_without_files(self, tmp_path):
        state = ConfigLoader(config_dir=str(tmp_path)).load()

        assert state.catalog.page_size == 32
        assert state.timeseries.url is None
        assert state.timeseries.volume_filter == "VOL120"
        assert state.redis.redis_url == "redis://localhost:6379/0"
        assert state.env == "dev"

    def test_repository_config_dir(self):
        state = ConfigLoader(config_dir=str(REPO_CONFIG_DIR)).load()

        assert state.catalog.memo_cache_size == 10000
        assert state.timeseries.filters_table == "filters"
        # dev profile
        assert state.logging.level == "DEBUG"
        assert state.logging.json_logs is False

    def test_env_profile_overrides_files(self, tmp_path, monkeypatch):
        _write(tmp_path / "catalog.yaml", {"catalog": {"page_size": 50, "memo_cache_ttl": 60}})
        _write(tmp_path / "env" / "prod.yaml", {"catalog": {"page_size": 100}})
        monkeypatch.setenv("ASSET_CATALOG_ENV", "prod")

        state = ConfigLoader(config_dir=str(tmp_path)).load()

        assert state.env == "prod"
        assert state.catalog.page_size == 100
        assert state.catalog.memo_cache_ttl == 60

    def test_env_variables_win(self, tmp_path, monkeypatch):
        _write(tmp_path / "database.yaml", {"database": {"url": "postgresql://file/db"}})
        monkeypatch.setenv("POSTGRES_URL", "postgresql://env/db")
        monkeypatch.setenv("TIMESCALE_URL", "postgresql://ts/db")
        monkeypatch.setenv("REDIS_URL", "redis://env:6379/1")
        monkeypatch.setenv("ASSET_CATALOG_PAGE_SIZE", "8")
        monkeypatch.setenv("LOG_LEVEL", "WARNING")

        state = ConfigLoader(config_dir=str(tmp_path)).load()

        assert state.database.url == "postgresql://env/db"
        assert state.timeseries.url == "postgresql://ts/db"
        assert state.redis.redis_url == "redis://env:6379/1"
        assert state.catalog.page_size == 8
        assert state.logging.level == "WARNING"

    def test_invalid_database_url(self, tmp_path):
        _write(tmp_path / "database.yaml", {"database": {"url": "mysql://localhost/db"}})

        with pytest.raises(ValidationError):
            ConfigLoader(config_dir=str(tmp_path)).load()

    def test_invalid_page_size(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ASSET_CATALOG_PAGE_SIZE", "0")

        with pytest.raises(ValidationError):
            ConfigLoader(config_dir=str(tmp_path)).load()

    def test_merge_is_deep(self):
        loader = ConfigLoader()
        merged = loader._merge_dicts(
            {"database": {"url": "a", "max_pool_size": 5}},
            {"database": {"url": "b"}},
        )
        assert merged == {"database": {"url": "b", "max_pool_size": 5}}

    def test_get_config_reads_env_dir(self, tmp_path, monkeypatch):
        _write(tmp_path / "redis.yaml", {"redis": {"redis_url": "redis://dir:6379/3"}})
        monkeypatch.setenv("ASSET_CATALOG_CONFIG_DIR", str(tmp_path))

        assert get_config().redis.redis_url == "redis://dir:6379/3"

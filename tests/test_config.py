"""
Tests for configuration.
"""

import logging
from pathlib import Path

from hydatdb.config import (
    DEFAULT_REALTIME_URL,
    DEFAULT_TIMEOUT,
    HydatConfig,
    get_config,
    set_config,
)


class TestHydatConfig:
    def test_defaults(self, monkeypatch):
        for name in ("HYDATDB_HYDAT_PATH", "HYDATDB_REALTIME_URL", "HYDATDB_TIMEOUT"):
            monkeypatch.delenv(name, raising=False)

        config = HydatConfig.from_env()

        assert config.hydat_path.name == "Hydat.sqlite3"
        assert config.realtime_base_url == DEFAULT_REALTIME_URL
        assert config.timeout == DEFAULT_TIMEOUT

    def test_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HYDATDB_HYDAT_PATH", str(tmp_path / "Hydat.sqlite3"))
        monkeypatch.setenv("HYDATDB_REALTIME_URL", "https://mirror.example.org/hydrometric/")
        monkeypatch.setenv("HYDATDB_TIMEOUT", "5")

        config = HydatConfig.from_env()

        assert config.hydat_path == tmp_path / "Hydat.sqlite3"
        assert config.realtime_base_url == "https://mirror.example.org/hydrometric"
        assert config.timeout == 5.0

    def test_bad_timeout_is_ignored(self, monkeypatch, caplog):
        monkeypatch.setenv("HYDATDB_TIMEOUT", "soon")

        with caplog.at_level(logging.WARNING, logger="hydatdb.config"):
            config = HydatConfig.from_env()

        assert config.timeout == DEFAULT_TIMEOUT
        assert "HYDATDB_TIMEOUT" in caplog.text

    def test_with_overrides_skips_none(self):
        config = HydatConfig(hydat_path=Path("a.sqlite3"))
        updated = config.with_overrides(hydat_path=None, timeout=10)

        assert updated.hydat_path == Path("a.sqlite3")
        assert updated.timeout == 10
        assert config.timeout == DEFAULT_TIMEOUT


class TestGlobalConfig:
    def test_set_and_get(self):
        config = HydatConfig(hydat_path=Path("custom.sqlite3"))
        set_config(config)
        assert get_config() is config

    def test_reset_rereads_environment(self, monkeypatch):
        set_config(HydatConfig(timeout=1))
        monkeypatch.setenv("HYDATDB_TIMEOUT", "7")

        set_config(None)

        assert get_config().timeout == 7.0

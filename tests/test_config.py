#!/usr/bin/env python3
"""Tests for engine configuration."""

import logging

import pytest

from maintcal import ConfigError, EngineConfig, load_config, setup_logging
from maintcal.config import CONFIG_ENV_VAR


class TestEngineConfig:
    """Tests for EngineConfig.from_dict."""

    def test_defaults(self):
        config = EngineConfig()
        assert config.concurrency_limit == 3
        assert config.fetch_timeout_seconds == 30.0
        assert config.debounce_seconds == 0.0
        assert config.data_file is None

    def test_from_dict(self):
        config = EngineConfig.from_dict(
            {"concurrencyLimit": 5, "fetchTimeoutSeconds": 2, "logLevel": "DEBUG"}
        )
        assert config.concurrency_limit == 5
        assert config.fetch_timeout_seconds == 2.0
        assert config.log_level == "DEBUG"

    def test_relative_data_file(self, tmp_path):
        config = EngineConfig.from_dict({"dataFile": "data/plant.yaml"}, base_dir=tmp_path)
        assert config.data_file == tmp_path / "data" / "plant.yaml"

    def test_rejects_unknown_key(self):
        with pytest.raises(ConfigError):
            EngineConfig.from_dict({"concurrency": 3})

    def test_rejects_zero_concurrency(self):
        with pytest.raises(ConfigError):
            EngineConfig.from_dict({"concurrencyLimit": 0})


class TestLoadConfig:
    """Tests for load_config."""

    def test_no_file_gives_defaults(self, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        assert load_config() == EngineConfig()

    def test_loads_file(self, tmp_path):
        path = tmp_path / "maintcal.yaml"
        path.write_text("concurrencyLimit: 2\ndebounceSeconds: 0.25\ndataFile: plant.yaml\n")
        config = load_config(path)
        assert config.concurrency_limit == 2
        assert config.debounce_seconds == 0.25
        assert config.data_file == tmp_path / "plant.yaml"

    def test_env_var(self, tmp_path, monkeypatch):
        path = tmp_path / "maintcal.yaml"
        path.write_text("concurrencyLimit: 7\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        assert load_config().concurrency_limit == 7

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "maintcal.yaml"
        path.write_text("")
        assert load_config(path) == EngineConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(tmp_path / "missing.yaml")

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "maintcal.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigError):
            load_config(path)


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_sets_level(self):
        setup_logging("DEBUG")
        logger = logging.getLogger("maintcal")
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        setup_logging("WARNING")
        assert len(logger.handlers) == 1

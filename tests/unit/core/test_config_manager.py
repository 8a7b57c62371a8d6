"""Tests for the config manager (load_config + process-wide config)."""

import json

import pytest

from pubtest.config import get_config, load_config, reset_config, set_config
from pubtest.core.models.config import PubtestConfig


class TestLoadConfig:
    def test_defaults_without_file(self):
        cfg = load_config()
        assert cfg == PubtestConfig()

    def test_load_custom_config(self, tmp_path):
        config_file = tmp_path / "pubtest.json"
        config_file.write_text(
            json.dumps({"default_timeout_seconds": 0.5, "resource_dir_name": "fixtures"})
        )
        cfg = load_config(config_file)
        assert cfg.default_timeout_seconds == 0.5
        assert cfg.resource_dir_name == "fixtures"

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nonexistent.json")

    def test_config_file_from_env(self, tmp_path, monkeypatch):
        config_file = tmp_path / "cfg.json"
        config_file.write_text(json.dumps({"require_value": True}))
        monkeypatch.setenv("PUBTEST_CONFIG_FILE", str(config_file))
        assert load_config().require_value is True

    def test_env_config_file_missing_raises(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PUBTEST_CONFIG_FILE", str(tmp_path / "gone.json"))
        with pytest.raises(FileNotFoundError):
            load_config()

    def test_env_override_timeout(self, tmp_path, monkeypatch):
        config_file = tmp_path / "cfg.json"
        config_file.write_text(json.dumps({"default_timeout_seconds": 9}))
        monkeypatch.setenv("PUBTEST_DEFAULT_TIMEOUT", "0.25")
        assert load_config(config_file).default_timeout_seconds == 0.25

    @pytest.mark.parametrize("raw, expected", [("1", True), ("yes", True), ("0", False), ("off", False)])
    def test_env_override_require_value(self, monkeypatch, raw, expected):
        monkeypatch.setenv("PUBTEST_REQUIRE_VALUE", raw)
        assert load_config().require_value is expected

    def test_env_override_log_settings(self, monkeypatch):
        monkeypatch.setenv("PUBTEST_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("PUBTEST_LOG_DIR", "/tmp/pubtest-logs")
        cfg = load_config()
        assert cfg.log_level == "DEBUG"
        assert cfg.log_dir == "/tmp/pubtest-logs"


class TestProcessConfig:
    def test_get_config_is_cached(self):
        assert get_config() is get_config()

    def test_set_and_reset(self, monkeypatch):
        custom = PubtestConfig(default_timeout_seconds=1.0)
        set_config(custom)
        assert get_config() is custom

        reset_config()
        monkeypatch.setenv("PUBTEST_DEFAULT_TIMEOUT", "2")
        assert get_config().default_timeout_seconds == 2.0

"""
Configuration loading and logging setup tests.
"""

import json
import logging
from logging.handlers import RotatingFileHandler

import pytest

from ditree import config
from ditree.logging_setup import setup_logging


@pytest.fixture
def config_path(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    monkeypatch.setenv("DITREE_CONFIG", str(path))
    monkeypatch.delenv("DITREE_LOG_LEVEL", raising=False)
    monkeypatch.delenv("DITREE_LOG_FILE", raising=False)
    return path


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestLoadConfig:

    def test_defaults_without_file(self, config_path):
        assert config.load_config() == config.DEFAULT_CONFIG
        assert not config_path.exists()

    def test_file_overrides_known_keys(self, config_path):
        config_path.write_text(json.dumps({"log_level": "DEBUG", "unknown": 1}))
        cfg = config.load_config()

        assert cfg["log_level"] == "DEBUG"
        assert cfg["docker_timeout_seconds"] == config.DEFAULT_CONFIG["docker_timeout_seconds"]
        assert "unknown" not in cfg

    def test_corrupt_file_falls_back_to_defaults(self, config_path):
        config_path.write_text("{not json")

        assert config.load_config() == config.DEFAULT_CONFIG
        assert config_path.read_text() == "{not json"

    def test_environment_wins(self, config_path, monkeypatch):
        config_path.write_text(json.dumps({"log_level": "DEBUG"}))
        monkeypatch.setenv("DITREE_LOG_LEVEL", "ERROR")

        assert config.get_config_value("log_level") == "ERROR"


class TestSetupLogging:

    def test_console_only_by_default(self, config_path, restore_logging):
        setup_logging()
        root = logging.getLogger()

        assert root.level == logging.WARNING
        assert not any(isinstance(h, RotatingFileHandler) for h in root.handlers)

    def test_rotating_file_when_configured(self, config_path, tmp_path, monkeypatch, restore_logging):
        log_file = tmp_path / "logs" / "ditree.log"
        monkeypatch.setenv("DITREE_LOG_FILE", str(log_file))
        monkeypatch.setenv("DITREE_LOG_LEVEL", "debug")
        setup_logging()
        root = logging.getLogger()

        assert root.level == logging.DEBUG
        assert any(isinstance(h, RotatingFileHandler) for h in root.handlers)
        assert log_file.parent.is_dir()

    def test_unknown_level_falls_back_to_warning(self, config_path, monkeypatch, restore_logging):
        monkeypatch.setenv("DITREE_LOG_LEVEL", "chatty")
        setup_logging()

        assert logging.getLogger().level == logging.WARNING

#!/usr/bin/env python3
"""
Test script for configuration and logging setup.
"""

import logging
import sys
from pathlib import Path

import pytest

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent))

from utils import get_config, get_logger, log_remote_call, reload_config, setup_logging
from utils.config import Config


def test_defaults(monkeypatch):
    print("Testing configuration defaults...")
    for name in ("PANTRIFY_DB_PATH", "PANTRIFY_SEARCH_URL", "PANTRIFY_AI_MODEL", "PANTRIFY_DEBUG"):
        monkeypatch.delenv(name, raising=False)

    config = Config.from_environment()
    assert config.database_path == "pantrify.db"
    assert config.search_base_url == "https://www.themealdb.com/api/json/v1/1"
    assert config.ai_model == "gpt-4o-mini"
    assert config.search_timeout_seconds == 15
    assert not config.debug_mode

    print("[OK] Defaults loaded")


def test_environment_overrides(monkeypatch, tmp_path):
    print("Testing environment overrides...")
    monkeypatch.setenv("PANTRIFY_DB_PATH", str(tmp_path / "data" / "pantry.db"))
    monkeypatch.setenv("PANTRIFY_LOG_FILE", str(tmp_path / "logs" / "app.log"))
    monkeypatch.setenv("PANTRIFY_SEARCH_TIMEOUT", "4")
    monkeypatch.setenv("PANTRIFY_DEBUG", "TRUE")

    config = reload_config()
    assert get_config() is config
    assert config.search_timeout_seconds == 4
    assert config.debug_mode
    assert (tmp_path / "data").is_dir()
    assert (tmp_path / "logs").is_dir()

    monkeypatch.undo()
    reload_config()
    print("[OK] Environment applied")


def test_setup_logging_follows_config(tmp_path):
    print("Testing logging setup...")
    log_file = tmp_path / "logs" / "pantrify.log"
    config = Config(log_level="warning", log_file=str(log_file))

    root = setup_logging(config)
    assert root.name == "pantrify"
    assert root.level == logging.WARNING
    assert len(root.handlers) == 2

    # rerunning replaces handlers instead of stacking them
    root = setup_logging(Config(log_level="INFO", log_file=str(log_file), debug_mode=True))
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 2
    assert all(handler.level == logging.DEBUG for handler in root.handlers)

    get_logger("tests").debug("hello from tests")
    for handler in root.handlers:
        handler.flush()
    assert "pantrify.tests: hello from tests" in log_file.read_text()

    for handler in list(root.handlers):
        handler.close()
        root.removeHandler(handler)
    print("[OK] Logging follows config")


def test_unknown_log_level_falls_back_to_info(tmp_path):
    root = setup_logging(Config(log_level="chatty", log_file=str(tmp_path / "app.log")))
    assert root.level == logging.INFO
    for handler in list(root.handlers):
        handler.close()
        root.removeHandler(handler)


def test_log_remote_call(caplog):
    print("Testing remote call logging...")
    logger = get_logger("tests.remote")
    caplog.set_level(logging.DEBUG, logger="pantrify")

    with log_remote_call(logger, "recipe search", query="soup") as call:
        call.note(meals=3)
    assert call.elapsed_ms >= 0
    done = [r for r in caplog.records if r.levelno == logging.INFO]
    assert done[-1].getMessage().startswith("recipe search query='soup' done in ")
    assert done[-1].getMessage().endswith("meals=3")

    caplog.clear()
    with pytest.raises(ValueError):
        with log_remote_call(logger, "unit classification", model="m"):
            raise ValueError("bad payload")
    failed = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(failed) == 1
    assert "unit classification model='m' failed after" in failed[0].getMessage()
    assert "bad payload" in failed[0].getMessage()

    print("[OK] Remote calls logged with context")


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))

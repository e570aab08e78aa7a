"""
Tests for configuration loading and precedence.
"""

import logging

import pytest

from atomic_store.core.configuration import (
    PACKAGE_LOGGER,
    PROJECT_CONFIG_FILE,
    ConfigManager,
    RuntimeConfig,
    ValidationLevel,
    configure_logging,
)


def test_defaults(tmp_path):
    config = ConfigManager(tmp_path, use_dotenv=False).get_config()

    assert config == RuntimeConfig()
    assert config.equality == "equality"
    assert config.warn_on_unknown_patch_keys is False
    assert config.log_level == "WARNING"


def test_project_file_overrides_defaults(tmp_path):
    (tmp_path / PROJECT_CONFIG_FILE).write_text("equality: identity\nlog_level: INFO\n", encoding="utf-8")

    config = ConfigManager(tmp_path, use_dotenv=False).get_config()

    assert config.equality == "identity"
    assert config.log_level == "INFO"


def test_environment_overrides_project_file(tmp_path, monkeypatch):
    (tmp_path / PROJECT_CONFIG_FILE).write_text("equality: identity\n", encoding="utf-8")
    monkeypatch.setenv("ATOMIC_STORE_EQUALITY", "EQUALITY")
    monkeypatch.setenv("ATOMIC_STORE_WARN_UNKNOWN_PATCH_KEYS", "yes")
    monkeypatch.setenv("ATOMIC_STORE_LOG_LEVEL", "debug")

    config = ConfigManager(tmp_path, use_dotenv=False).get_config()

    assert config.equality == "equality"
    assert config.warn_on_unknown_patch_keys is True
    assert config.log_level == "DEBUG"


def test_dotenv_file_is_loaded(tmp_path):
    (tmp_path / ".env").write_text("ATOMIC_STORE_EQUALITY=identity\n", encoding="utf-8")

    config = ConfigManager(tmp_path).get_config()

    assert config.equality == "identity"


def test_invalid_config_strict_raises(tmp_path):
    (tmp_path / PROJECT_CONFIG_FILE).write_text("equality: fuzzy\n", encoding="utf-8")

    with pytest.raises(ValueError, match="Configuration validation failed"):
        ConfigManager(tmp_path, use_dotenv=False).get_config()


def test_invalid_config_lenient_falls_back_to_defaults(tmp_path):
    (tmp_path / PROJECT_CONFIG_FILE).write_text("unknown_setting: 1\n", encoding="utf-8")

    config = ConfigManager(tmp_path, use_dotenv=False).get_config(ValidationLevel.LENIENT)

    assert config == RuntimeConfig()


def test_malformed_yaml_is_ignored(tmp_path, caplog):
    (tmp_path / PROJECT_CONFIG_FILE).write_text("equality: [unclosed\n", encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger=PACKAGE_LOGGER):
        config = ConfigManager(tmp_path, use_dotenv=False).get_config()

    assert config == RuntimeConfig()
    assert "Failed to load" in caplog.text


def test_reload_config_rereads_project_file(tmp_path):
    manager = ConfigManager(tmp_path, use_dotenv=False)
    assert manager.get_config().equality == "equality"

    (tmp_path / PROJECT_CONFIG_FILE).write_text("equality: identity\n", encoding="utf-8")
    assert manager.get_config().equality == "equality"

    manager.reload_config()
    assert manager.get_config().equality == "identity"


def test_configure_logging_sets_package_level():
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    previous = package_logger.level
    try:
        configure_logging(RuntimeConfig(log_level="debug"))
        assert package_logger.level == logging.DEBUG

        configure_logging(RuntimeConfig(log_level="nonsense"))
        assert package_logger.level == logging.WARNING
    finally:
        package_logger.setLevel(previous)
